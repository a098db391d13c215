"""Contract bytecode and its analysis state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from evmcore.bits import B256
from evmcore.utilities import KECCAK_EMPTY, keccak256

_CHECKED_PADDING = 33


@dataclass(frozen=True)
class JumpMap:
    """Bit map of valid jump destinations, least significant bit first."""

    bits: bytes
    bit_len: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "bits", bytes(self.bits))
        if not 0 <= self.bit_len <= 8 * len(self.bits):
            raise ValueError(
                f"bit length {self.bit_len} does not fit in {len(self.bits)} bytes"
            )

    @classmethod
    def from_slice(cls, data: bytes) -> "JumpMap":
        """Build a jump map whose bits are the bytes given."""
        data = bytes(data)
        return cls(data, 8 * len(data))

    def as_slice(self) -> bytes:
        """The raw bytes behind the map."""
        return self.bits

    def is_valid(self, pc: int) -> bool:
        """True if ``pc`` is a valid jump destination."""
        if not 0 <= pc < self.bit_len:
            return False
        return bool((self.bits[pc // 8] >> (pc % 8)) & 1)


@dataclass(frozen=True)
class RawState:
    """Bytecode as given, neither padded nor analysed."""


@dataclass(frozen=True)
class CheckedState:
    """Bytecode padded with trailing STOPs; ``length`` is the original size."""

    length: int


@dataclass(frozen=True)
class AnalysedState:
    """Padded bytecode together with its jump destinations."""

    length: int
    jump_map: JumpMap


BytecodeState = Union[RawState, CheckedState, AnalysedState]


@dataclass(frozen=True)
class Bytecode:
    """Contract code, its Keccak hash and how far it has been processed."""

    bytecode: bytes
    hash: B256
    state: BytecodeState

    def __post_init__(self) -> None:
        object.__setattr__(self, "bytecode", bytes(self.bytecode))

    @classmethod
    def new(cls) -> "Bytecode":
        """Bytecode holding a single STOP opcode."""
        return cls(
            bytecode=b"\x00",
            hash=KECCAK_EMPTY,
            state=AnalysedState(length=0, jump_map=JumpMap(b"\x00", 1)),
        )

    @classmethod
    def new_raw(cls, bytecode: bytes) -> "Bytecode":
        """Raw bytecode, hashing it."""
        bytecode = bytes(bytecode)
        code_hash = keccak256(bytecode) if bytecode else KECCAK_EMPTY
        return cls(bytecode=bytecode, hash=code_hash, state=RawState())

    @classmethod
    def new_raw_with_hash(cls, bytecode: bytes, hash: B256) -> "Bytecode":
        """Raw bytecode with a hash the caller vouches for."""
        return cls(bytecode=bytecode, hash=hash, state=RawState())

    @classmethod
    def new_checked(
        cls, bytecode: bytes, length: int, hash: Optional[B256] = None
    ) -> "Bytecode":
        """Checked bytecode; it must already end with STOP padding."""
        if hash is None:
            hash = KECCAK_EMPTY if length == 0 else keccak256(bytecode)
        return cls(bytecode=bytecode, hash=hash, state=CheckedState(length))

    def original_bytes(self) -> bytes:
        """The code without any padding."""
        if isinstance(self.state, RawState):
            return self.bytecode
        return self.bytecode[: self.state.length]

    def is_empty(self) -> bool:
        return len(self) == 0

    def __len__(self) -> int:
        if isinstance(self.state, RawState):
            return len(self.bytecode)
        return self.state.length

    def to_checked(self) -> "Bytecode":
        """Pad raw bytecode with STOPs; other states are returned unchanged."""
        if not isinstance(self.state, RawState):
            return self
        length = len(self.bytecode)
        return Bytecode(
            bytecode=self.bytecode + bytes(_CHECKED_PADDING),
            hash=self.hash,
            state=CheckedState(length),
        )