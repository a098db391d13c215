"""The ECRECOVER precompile: public key recovery on secp256k1."""

from __future__ import annotations

from typing import Optional, Tuple

from evmcore.precompile.error import (
    PrecompileError,
    PrecompileErrorKind,
    PrecompileResult,
)
from evmcore.utilities import keccak256

ECRECOVER_BASE = 3_000

_P = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F
_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
_G = (
    0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798,
    0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8,
)

_Point = Optional[Tuple[int, int]]


def _add(a: _Point, b: _Point) -> _Point:
    if a is None:
        return b
    if b is None:
        return a
    (x1, y1), (x2, y2) = a, b
    if x1 == x2:
        if (y1 + y2) % _P == 0:
            return None
        lam = 3 * x1 * x1 * pow(2 * y1, -1, _P) % _P
    else:
        lam = (y2 - y1) * pow(x2 - x1, -1, _P) % _P
    x3 = (lam * lam - x1 - x2) % _P
    return x3, (lam * (x1 - x3) - y1) % _P


def _mul(k: int, point: _Point) -> _Point:
    result: _Point = None
    addend = point
    while k:
        if k & 1:
            result = _add(result, addend)
        addend = _add(addend, addend)
        k >>= 1
    return result


def ecrecover(sig: bytes, msg: bytes) -> bytes:
    """Recover the signer of ``msg`` from a 65-byte ``r || s || recid`` signature.

    Returns the Keccak-256 hash of the public key with its first 12 bytes
    zeroed, i.e. the address left-padded to 32 bytes. Raises ValueError for a
    signature from which no key can be recovered.
    """
    sig = bytes(sig)
    msg = bytes(msg)
    if len(sig) != 65 or len(msg) != 32:
        raise ValueError("signature must be 65 bytes and message 32 bytes")
    recid = sig[64]
    if recid > 3:
        raise ValueError(f"invalid recovery id {recid}")
    r = int.from_bytes(sig[:32], "big")
    s = int.from_bytes(sig[32:64], "big")
    if not (0 < r < _N and 0 < s < _N):
        raise ValueError("signature scalar out of range")

    x = r + _N if recid & 2 else r
    if x >= _P:
        raise ValueError("signature r is not a curve x coordinate")
    alpha = (pow(x, 3, _P) + 7) % _P
    beta = pow(alpha, (_P + 1) // 4, _P)
    if beta * beta % _P != alpha:
        raise ValueError("signature r is not on the curve")
    y = beta if beta % 2 == recid & 1 else _P - beta

    e = int.from_bytes(msg, "big") % _N
    r_inv = pow(r, -1, _N)
    u1 = -e * r_inv % _N
    u2 = s * r_inv % _N
    public = _add(_mul(u1, _G), _mul(u2, (x, y)))
    if public is None:
        raise ValueError("recovered key is the point at infinity")

    encoded = public[0].to_bytes(32, "big") + public[1].to_bytes(32, "big")
    return bytes(12) + bytes(keccak256(encoded))[12:]


def ec_recover_run(data: bytes, gas_limit: int) -> PrecompileResult:
    """Evaluate ECRECOVER; an unusable signature gives empty output, not an error."""
    if ECRECOVER_BASE > gas_limit:
        raise PrecompileError(PrecompileErrorKind.OUT_OF_GAS)
    padded = bytes(data[:128]).ljust(128, b"\x00")

    msg = padded[:32]
    v = padded[63]
    if any(padded[32:63]) or v not in (27, 28):
        return ECRECOVER_BASE, b""

    sig = padded[64:128] + bytes([v - 27])
    try:
        out = ecrecover(sig, msg)
    except ValueError:
        out = b""
    return ECRECOVER_BASE, out