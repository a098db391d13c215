"""Hashing, contract address derivation, hex helpers and limits."""

from __future__ import annotations

import binascii
from typing import Union

from Crypto.Hash import keccak

from evmcore.bits import B160, B256

BytesLike = Union[bytes, bytearray, memoryview, B160, B256]

STACK_LIMIT = 1024
"""Interpreter stack limit."""
CALL_STACK_LIMIT = 1024
"""Call depth limit."""
MAX_CODE_SIZE = 0x6000
"""EIP-170 contract code size limit."""
MAX_INITCODE_SIZE = 2 * MAX_CODE_SIZE
"""EIP-3860 init code size limit."""

KECCAK_EMPTY = B256.from_hex(
    "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
)


def keccak256(data: BytesLike) -> B256:
    """Keccak-256 digest of ``data``."""
    return B256(keccak.new(digest_bits=256, data=bytes(data)).digest())


def _rlp_length_prefix(length: int, offset: int) -> bytes:
    if length < 56:
        return bytes([offset + length])
    encoded = length.to_bytes((length.bit_length() + 7) // 8, "big")
    return bytes([offset + 55 + len(encoded)]) + encoded


def _rlp_bytes(payload: bytes) -> bytes:
    if len(payload) == 1 and payload[0] < 0x80:
        return payload
    return _rlp_length_prefix(len(payload), 0x80) + payload


def _rlp_uint(value: int) -> bytes:
    return _rlp_bytes(value.to_bytes((value.bit_length() + 7) // 8, "big"))


def _rlp_list(*items: bytes) -> bytes:
    payload = b"".join(items)
    return _rlp_length_prefix(len(payload), 0xC0) + payload


def create_address(caller: B160, nonce: int) -> B160:
    """Address of a contract made with CREATE by ``caller`` at ``nonce``."""
    if not 0 <= nonce < 1 << 64:
        raise ValueError(f"nonce {nonce} does not fit in 64 bits")
    encoded = _rlp_list(_rlp_bytes(bytes(caller)), _rlp_uint(nonce))
    return keccak256(encoded).to_b160()


def create2_address(caller: B160, code_hash: B256, salt: int) -> B160:
    """Address of a contract made with CREATE2."""
    if not 0 <= salt < 1 << 256:
        raise ValueError(f"salt {salt} does not fit in 256 bits")
    preimage = b"\xff" + bytes(caller) + salt.to_bytes(32, "big") + bytes(code_hash)
    return keccak256(preimage).to_b160()


def hex_bytes_encode(data: BytesLike) -> str:
    """Encode bytes as a ``0x``-prefixed hex string."""
    return "0x" + bytes(data).hex()


def hex_bytes_decode(text: str) -> bytes:
    """Decode a hex string, with or without a ``0x`` prefix."""
    body = text[2:] if text.startswith("0x") else text
    try:
        return binascii.unhexlify(body)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"invalid hex string: {exc}") from exc