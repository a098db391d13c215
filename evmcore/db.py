"""Database interfaces the interpreter reads state through."""

from __future__ import annotations

import abc
from dataclasses import dataclass
from typing import Any, Dict, Optional

from evmcore.bits import B160, B256
from evmcore.bytecode import Bytecode
from evmcore.state import Account, AccountInfo


class Database(abc.ABC):
    """State and history access that may change the database, e.g. by caching."""

    @abc.abstractmethod
    def basic(self, address: B160) -> Optional[AccountInfo]:
        """Basic account information, or None if the account does not exist."""

    @abc.abstractmethod
    def code_by_hash(self, code_hash: B256) -> Bytecode:
        """Account code by its hash."""

    @abc.abstractmethod
    def storage(self, address: B160, index: int) -> int:
        """Storage value of ``address`` at ``index``."""

    @abc.abstractmethod
    def block_hash(self, number: int) -> B256:
        """Hash of the block with this number."""


class DatabaseRef(abc.ABC):
    """Read-only state and history access."""

    @abc.abstractmethod
    def basic(self, address: B160) -> Optional[AccountInfo]:
        """Basic account information, or None if the account does not exist."""

    @abc.abstractmethod
    def code_by_hash(self, code_hash: B256) -> Bytecode:
        """Account code by its hash."""

    @abc.abstractmethod
    def storage(self, address: B160, index: int) -> int:
        """Storage value of ``address`` at ``index``."""

    @abc.abstractmethod
    def block_hash(self, number: int) -> B256:
        """Hash of the block with this number."""


class DatabaseCommit(abc.ABC):
    """A database that accepts changed accounts."""

    @abc.abstractmethod
    def commit(self, changes: Dict[B160, Account]) -> None:
        """Apply the changed accounts."""


class RefDBWrapper(Database):
    """Presents a read-only database as a :class:`Database`."""

    def __init__(self, db: DatabaseRef) -> None:
        self.db = db

    def basic(self, address: B160) -> Optional[AccountInfo]:
        return self.db.basic(address)

    def code_by_hash(self, code_hash: B256) -> Bytecode:
        return self.db.code_by_hash(code_hash)

    def storage(self, address: B160, index: int) -> int:
        return self.db.storage(address, index)

    def block_hash(self, number: int) -> B256:
        return self.db.block_hash(number)


class State(abc.ABC):
    """The account-state part of a database."""

    @abc.abstractmethod
    def basic(self, address: B160) -> Optional[AccountInfo]:
        """Basic account information, or None if the account does not exist."""

    @abc.abstractmethod
    def code_by_hash(self, code_hash: B256) -> Bytecode:
        """Account code by its hash."""

    @abc.abstractmethod
    def storage(self, address: B160, index: int) -> int:
        """Storage value of ``address`` at ``index``."""


class BlockHash(abc.ABC):
    """The block-history part of a database."""

    @abc.abstractmethod
    def block_hash(self, number: int) -> B256:
        """Hash of the block with this number."""


class DatabaseComponentError(Exception):
    """A component of :class:`DatabaseComponents` failed; see ``error``."""

    def __init__(self, error: Any) -> None:
        super().__init__(f"{self._component} error: {error}")
        self.error = error

    _component = "database component"


class StateComponentError(DatabaseComponentError):
    """The state component failed."""

    _component = "state"


class BlockHashComponentError(DatabaseComponentError):
    """The block hash component failed."""

    _component = "block hash"


@dataclass
class DatabaseComponents(Database, DatabaseRef):
    """A database assembled from a state part and a block hash part."""

    state: State
    block_hash_source: BlockHash

    def basic(self, address: B160) -> Optional[AccountInfo]:
        try:
            return self.state.basic(address)
        except Exception as exc:
            raise StateComponentError(exc) from exc

    def code_by_hash(self, code_hash: B256) -> Bytecode:
        try:
            return self.state.code_by_hash(code_hash)
        except Exception as exc:
            raise StateComponentError(exc) from exc

    def storage(self, address: B160, index: int) -> int:
        try:
            return self.state.storage(address, index)
        except Exception as exc:
            raise StateComponentError(exc) from exc

    def block_hash(self, number: int) -> B256:
        try:
            return self.block_hash_source.block_hash(number)
        except Exception as exc:
            raise BlockHashComponentError(exc) from exc