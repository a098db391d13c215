"""Fixed-size byte strings used for hashes and addresses."""

from __future__ import annotations

import functools
import secrets
from typing import ClassVar, Iterator, Union

BytesLike = Union[bytes, bytearray, memoryview]

_WHITESPACE = frozenset(b" \r\n\t")


class FromHexError(ValueError):
    """A character that is not a hexadecimal digit was found."""

    def __init__(self, character: str, index: int) -> None:
        super().__init__(f"invalid hex character: {character}, at {index}")
        self.character = character
        self.index = index


def _hex_digit(byte: int) -> int | None:
    if 0x41 <= byte <= 0x46:  # A-F
        return byte - 0x41 + 10
    if 0x61 <= byte <= 0x66:  # a-f
        return byte - 0x61 + 10
    if 0x30 <= byte <= 0x39:  # 0-9
        return byte - 0x30
    return None


def _decode_hex(raw: bytes, size: int, index_offset: int) -> bytes:
    """Decode hex digits into ``size`` bytes, skipping ASCII whitespace."""
    out = bytearray(size)
    modulus = len(raw) % 2
    buf = 0
    pos = 0
    for index, byte in enumerate(raw):
        buf = (buf << 4) & 0xFF
        if byte in _WHITESPACE:
            buf >>= 4
            continue
        digit = _hex_digit(byte)
        if digit is None:
            raise FromHexError(chr(byte), index + index_offset)
        buf |= digit
        modulus += 1
        if modulus == 2:
            modulus = 0
            out[pos] = buf
            pos += 1
    return bytes(out)


@functools.total_ordering
class FixedHash:
    """An immutable byte string of a fixed length."""

    LENGTH: ClassVar[int] = 0
    __slots__ = ("_data",)

    def __init__(self, data: BytesLike) -> None:
        data = bytes(data)
        if len(data) != self.LENGTH:
            raise ValueError(
                f"{type(self).__name__} needs {self.LENGTH} bytes, got {len(data)}"
            )
        self._data = data

    @classmethod
    def zero(cls):
        """Return the value with every byte zero."""
        return cls(bytes(cls.LENGTH))

    @classmethod
    def random(cls):
        """Return a value filled with random bytes."""
        return cls(secrets.token_bytes(cls.LENGTH))

    @classmethod
    def from_hex(cls, text: str):
        """Parse a hex string, with or without a ``0x`` prefix."""
        stripped = text.startswith("0x")
        body = text[2:] if stripped else text
        raw = body.encode("utf-8")
        expected = 2 * cls.LENGTH
        if len(raw) != expected:
            raise ValueError(
                f"invalid length {len(raw)}, expected a (both 0x-prefixed or not) "
                f"hex string with length of {expected}"
            )
        return cls(_decode_hex(raw, cls.LENGTH, 2 if stripped else 0))

    def to_hex(self) -> str:
        """Return the ``0x``-prefixed lower-case hex form."""
        return "0x" + self._data.hex()

    def is_zero(self) -> bool:
        return not any(self._data)

    def __bytes__(self) -> bytes:
        return self._data

    def __len__(self) -> int:
        return self.LENGTH

    def __iter__(self) -> Iterator[int]:
        return iter(self._data)

    def __getitem__(self, key):
        return self._data[key]

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._data == other._data

    def __lt__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._data < other._data

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._data))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_hex()})"

    def __str__(self) -> str:
        return self.to_hex()


class B256(FixedHash):
    """A 256-bit value, such as a hash or a storage word."""

    LENGTH = 32
    __slots__ = ()

    @classmethod
    def from_int(cls, value: int) -> "B256":
        """Big-endian encoding of an unsigned 256-bit integer."""
        if not 0 <= value < 1 << 256:
            raise ValueError(f"{value} does not fit in 256 bits")
        return cls(value.to_bytes(32, "big"))

    def to_int(self) -> int:
        return int.from_bytes(self._data, "big")

    def to_b160(self) -> "B160":
        """Keep the low 20 bytes."""
        return B160(self._data[12:])


class B160(FixedHash):
    """A 160-bit value, such as an account address."""

    LENGTH = 20
    __slots__ = ()

    @classmethod
    def from_u64(cls, value: int) -> "B160":
        """Address whose last eight bytes hold ``value`` big-endian."""
        if not 0 <= value < 1 << 64:
            raise ValueError(f"{value} does not fit in 64 bits")
        return cls(bytes(12) + value.to_bytes(8, "big"))

    def to_b256(self) -> B256:
        """Pad with leading zero bytes to 32 bytes."""
        return B256(bytes(12) + self._data)


Address = B160
Hash = B256