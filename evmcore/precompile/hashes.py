"""SHA-256, RIPEMD-160 and identity precompiles."""

from __future__ import annotations

import hashlib

from Crypto.Hash import RIPEMD160

from evmcore.precompile.error import (
    PrecompileError,
    PrecompileErrorKind,
    PrecompileResult,
    calc_linear_cost_u32,
)

SHA256_BASE = 60
SHA256_PER_WORD = 12
RIPEMD160_BASE = 600
RIPEMD160_PER_WORD = 120
IDENTITY_BASE = 15
IDENTITY_PER_WORD = 3


def _charge(length: int, base: int, word: int, gas_limit: int) -> int:
    cost = calc_linear_cost_u32(length, base, word)
    if cost > gas_limit:
        raise PrecompileError(PrecompileErrorKind.OUT_OF_GAS)
    return cost


def sha256_run(data: bytes, gas_limit: int) -> PrecompileResult:
    """SHA-256 digest of the input."""
    data = bytes(data)
    cost = _charge(len(data), SHA256_BASE, SHA256_PER_WORD, gas_limit)
    return cost, hashlib.sha256(data).digest()


def ripemd160_run(data: bytes, gas_limit: int) -> PrecompileResult:
    """RIPEMD-160 digest of the input, left-padded to 32 bytes."""
    data = bytes(data)
    cost = _charge(len(data), RIPEMD160_BASE, RIPEMD160_PER_WORD, gas_limit)
    digest = RIPEMD160.new(data).digest()
    return cost, bytes(12) + digest


def identity_run(data: bytes, gas_limit: int) -> PrecompileResult:
    """Return a copy of the input."""
    data = bytes(data)
    cost = _charge(len(data), IDENTITY_BASE, IDENTITY_PER_WORD, gas_limit)
    return cost, data