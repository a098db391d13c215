"""Accounts, their storage and status flags."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Dict, Optional

from evmcore.bits import B160, B256
from evmcore.bytecode import Bytecode
from evmcore.utilities import KECCAK_EMPTY


class AccountStatus(enum.Flag):
    """Flags describing what happened to an account."""

    LOADED = 0
    CREATED = 1
    SELF_DESTRUCTED = 2
    TOUCHED = 4
    LOADED_AS_NOT_EXISTING = 8


@dataclass
class StorageSlot:
    """A storage word with its value before and during execution."""

    original_value: int = 0
    present_value: int = 0

    @classmethod
    def new(cls, original: int) -> "StorageSlot":
        return cls(original_value=original, present_value=original)

    def is_changed(self) -> bool:
        """True if the present value differs from the original one."""
        return self.original_value != self.present_value


@dataclass(eq=False)
class AccountInfo:
    """Balance, nonce and code of an account."""

    balance: int = 0
    nonce: int = 0
    code_hash: B256 = KECCAK_EMPTY
    code: Optional[Bytecode] = field(default_factory=Bytecode.new)

    @classmethod
    def from_code(cls, balance: int, nonce: int, code: Bytecode) -> "AccountInfo":
        return cls(balance=balance, nonce=nonce, code_hash=code.hash, code=code)

    @classmethod
    def from_balance(cls, balance: int) -> "AccountInfo":
        return cls(balance=balance)

    def is_empty(self) -> bool:
        """True if balance and nonce are zero and there is no code."""
        code_empty = self.code_hash == KECCAK_EMPTY or self.code_hash.is_zero()
        return self.balance == 0 and self.nonce == 0 and code_empty

    def exists(self) -> bool:
        return not self.is_empty()

    def __eq__(self, other: object) -> bool:
        """Equal if balance, nonce and code hash match; the code is ignored."""
        if not isinstance(other, AccountInfo):
            return NotImplemented
        return (
            self.balance == other.balance
            and self.nonce == other.nonce
            and self.code_hash == other.code_hash
        )


@dataclass
class Account:
    """An account as seen during execution."""

    info: AccountInfo = field(default_factory=AccountInfo)
    storage: Dict[int, StorageSlot] = field(default_factory=dict)
    status: AccountStatus = AccountStatus.LOADED

    @classmethod
    def from_info(cls, info: AccountInfo) -> "Account":
        return cls(info=info)

    @classmethod
    def new_not_existing(cls) -> "Account":
        """A fresh account marked as absent from the database."""
        return cls(status=AccountStatus.LOADED_AS_NOT_EXISTING)

    def mark_selfdestruct(self) -> None:
        self.status |= AccountStatus.SELF_DESTRUCTED

    def unmark_selfdestruct(self) -> None:
        self.status &= ~AccountStatus.SELF_DESTRUCTED

    def is_selfdestructed(self) -> bool:
        return AccountStatus.SELF_DESTRUCTED in self.status

    def mark_touch(self) -> None:
        self.status |= AccountStatus.TOUCHED

    def unmark_touch(self) -> None:
        self.status &= ~AccountStatus.TOUCHED

    def is_touched(self) -> bool:
        return AccountStatus.TOUCHED in self.status

    def mark_created(self) -> None:
        self.status |= AccountStatus.CREATED

    def is_loaded_as_not_existing(self) -> bool:
        return AccountStatus.LOADED_AS_NOT_EXISTING in self.status

    def is_newly_created(self) -> bool:
        return AccountStatus.CREATED in self.status

    def is_empty(self) -> bool:
        return self.info.is_empty()


State = Dict[B160, Account]
Storage = Dict[int, StorageSlot]