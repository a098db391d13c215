import hashlib
import struct

import pytest

from evmcore.precompile.blake2 import compress, run
from evmcore.precompile.error import PrecompileError, PrecompileErrorKind

BLAKE2B_IV = (
    0x6A09E667F3BCC908,
    0xBB67AE8584CAA73B,
    0x3C6EF372FE94F82B,
    0xA54FF53A5F1D36F1,
    0x510E527FADE682D1,
    0x9B05688C2B3E6C1F,
    0x1F83D9ABFB41BD6B,
    0x5BE0CD19137E2179,
)


def initial_state():
    # Parameter block for an unkeyed 64-byte digest.
    h = list(BLAKE2B_IV)
    h[0] ^= 0x01010040
    return h


def make_input(rounds, h, m, t0, t1, flag):
    return (
        struct.pack(">I", rounds)
        + struct.pack("<8Q", *h)
        + struct.pack("<16Q", *m)
        + struct.pack("<2Q", t0, t1)
        + bytes([flag])
    )


def message_words(message):
    return list(struct.unpack("<16Q", message.ljust(128, b"\x00")))


@pytest.mark.parametrize("message", [b"", b"abc", bytes(range(64)), bytes(range(128))])
def test_single_block_matches_blake2b(message):
    data = make_input(12, initial_state(), message_words(message), len(message), 0, 1)
    gas, out = run(data, 12)
    assert gas == 12
    assert out == hashlib.blake2b(message).digest()


def test_compress_matches_blake2b_directly():
    state = compress(12, initial_state(), message_words(b"abc"), [3, 0], True)
    assert struct.pack("<8Q", *state) == hashlib.blake2b(b"abc").digest()


def test_two_blocks_chain_to_blake2b():
    message = bytes(range(200))
    first, second = message[:128], message[128:]
    state = compress(12, initial_state(), message_words(first), [128, 0], False)
    data = make_input(12, state, message_words(second), len(message), 0, 1)
    assert run(data, 100)[1] == hashlib.blake2b(message).digest()


def test_zero_rounds_without_counter_or_flag_yield_iv():
    h = [0x0123456789ABCDEF * (i + 1) & ((1 << 64) - 1) for i in range(8)]
    assert compress(0, h, [0] * 16, [0, 0], False) == list(BLAKE2B_IV)


def test_zero_rounds_cost_nothing():
    data = make_input(0, initial_state(), [0] * 16, 0, 0, 0)
    gas, out = run(data, 0)
    assert gas == 0
    assert len(out) == 64


def test_out_of_gas():
    data = make_input(12, initial_state(), [0] * 16, 0, 0, 1)
    with pytest.raises(PrecompileError) as info:
        run(data, 11)
    assert info.value.kind is PrecompileErrorKind.OUT_OF_GAS


@pytest.mark.parametrize("length", [0, 212, 214])
def test_wrong_length(length):
    with pytest.raises(PrecompileError) as info:
        run(bytes(length), 1_000)
    assert info.value.kind is PrecompileErrorKind.BLAKE2_WRONG_LENGTH


def test_wrong_final_flag_checked_before_gas():
    data = make_input(12, initial_state(), [0] * 16, 0, 0, 2)
    with pytest.raises(PrecompileError) as info:
        run(data, 0)
    assert info.value.kind is PrecompileErrorKind.BLAKE2_WRONG_FINAL_INDICATOR_FLAG


def test_compress_rejects_bad_sizes():
    with pytest.raises(ValueError):
        compress(1, [0] * 7, [0] * 16, [0, 0], False)