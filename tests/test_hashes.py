import hashlib

import pytest

from evmcore.precompile.error import PrecompileError, PrecompileErrorKind
from evmcore.precompile.hashes import identity_run, ripemd160_run, sha256_run


@pytest.mark.parametrize("data", [b"", b"abc", bytes(range(100))])
def test_sha256_output(data):
    _, out = sha256_run(data, 10_000)
    assert out == hashlib.sha256(data).digest()


def test_sha256_empty_costs_base():
    assert sha256_run(b"", 60)[0] == 60


def test_sha256_cost_steps_per_word():
    assert sha256_run(bytes(33), 10_000)[0] - sha256_run(bytes(32), 10_000)[0] == 12


def test_sha256_out_of_gas():
    with pytest.raises(PrecompileError) as info:
        sha256_run(b"", 59)
    assert info.value.kind is PrecompileErrorKind.OUT_OF_GAS


def test_ripemd160_empty_digest():
    cost, out = ripemd160_run(b"", 600)
    assert cost == 600
    assert out == bytes(12) + bytes.fromhex("9c1185a5c5e9fc54612808977ee8f548b2258d31")


def test_ripemd160_is_left_padded():
    _, out = ripemd160_run(b"some data", 10_000)
    assert len(out) == 32
    assert out[:12] == bytes(12)


def test_ripemd160_out_of_gas():
    with pytest.raises(PrecompileError) as info:
        ripemd160_run(bytes(33), 839)
    assert info.value.kind is PrecompileErrorKind.OUT_OF_GAS


@pytest.mark.parametrize("data", [b"", b"\x01\x02\x03", bytes(range(256))])
def test_identity_returns_input(data):
    _, out = identity_run(data, 10_000)
    assert out == data


def test_identity_empty_costs_base():
    assert identity_run(b"", 15)[0] == 15


def test_identity_cost_same_within_word():
    assert identity_run(bytes(1), 100)[0] == identity_run(bytes(32), 100)[0]


def test_identity_out_of_gas():
    with pytest.raises(PrecompileError) as info:
        identity_run(b"x", 17)
    assert info.value.kind is PrecompileErrorKind.OUT_OF_GAS