"""Configuration, block and transaction environment, and their validation."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from evmcore.bits import B160, B256
from evmcore.result import InvalidTransaction, InvalidTransactionKind, PrevrandaoNotSet
from evmcore.specification import SpecId
from evmcore.state import Account
from evmcore.utilities import KECCAK_EMPTY, MAX_INITCODE_SIZE

_U256_MAX = (1 << 256) - 1
_U64_MAX = (1 << 64) - 1


class AnalysisKind(enum.Enum):
    """How bytecode made by CREATE and CREATE2 is prepared."""

    RAW = "raw"
    CHECK = "check"
    ANALYSE = "analyse"


@dataclass(frozen=True)
class CreateScheme:
    """CREATE when ``salt`` is None, otherwise CREATE2 with that salt."""

    salt: Optional[int] = None

    @classmethod
    def create2(cls, salt: int) -> "CreateScheme":
        if not 0 <= salt <= _U256_MAX:
            raise ValueError(f"salt {salt} does not fit in 256 bits")
        return cls(salt=salt)

    def is_create2(self) -> bool:
        return self.salt is not None


@dataclass(frozen=True)
class TransactTo:
    """Where a transaction goes: an address to call, or a create scheme."""

    target: Union[B160, CreateScheme]

    @classmethod
    def call(cls, address: B160) -> "TransactTo":
        return cls(address)

    @classmethod
    def create(cls) -> "TransactTo":
        """A legacy CREATE."""
        return cls(CreateScheme())

    def is_create(self) -> bool:
        return isinstance(self.target, CreateScheme)


@dataclass
class CfgEnv:
    """Chain configuration and switches that relax validation."""

    chain_id: int = 1
    spec_id: SpecId = SpecId.LATEST
    perf_analyse_created_bytecodes: AnalysisKind = AnalysisKind.ANALYSE
    limit_contract_code_size: Optional[int] = None
    memory_limit: int = 2**32 - 1
    disable_balance_check: bool = False
    disable_block_gas_limit: bool = False
    disable_eip3607: bool = False
    disable_gas_refund: bool = False
    disable_base_fee: bool = False


@dataclass
class BlockEnv:
    """Values of the block the transaction runs in."""

    number: int = 0
    coinbase: B160 = field(default_factory=B160.zero)
    timestamp: int = 1
    difficulty: int = 0
    prevrandao: Optional[B256] = field(default_factory=B256.zero)
    basefee: int = 0
    gas_limit: int = _U256_MAX


@dataclass
class TxEnv:
    """The transaction being executed."""

    caller: B160 = field(default_factory=B160.zero)
    gas_limit: int = _U64_MAX
    gas_price: int = 0
    gas_priority_fee: Optional[int] = None
    transact_to: TransactTo = field(default_factory=lambda: TransactTo.call(B160.zero()))
    value: int = 0
    data: bytes = b""
    chain_id: Optional[int] = None
    nonce: Optional[int] = None
    access_list: List[Tuple[B160, List[int]]] = field(default_factory=list)


@dataclass
class Env:
    """Configuration, block and transaction together."""

    cfg: CfgEnv = field(default_factory=CfgEnv)
    block: BlockEnv = field(default_factory=BlockEnv)
    tx: TxEnv = field(default_factory=TxEnv)

    def effective_gas_price(self) -> int:
        """Gas price paid, capped by base fee plus priority fee when one is set."""
        if self.tx.gas_priority_fee is None:
            return self.tx.gas_price
        return min(self.tx.gas_price, self.block.basefee + self.tx.gas_priority_fee)

    def validate_block_env(self, spec_id: SpecId) -> None:
        """Raise PrevrandaoNotSet if the spec needs prevrandao and it is missing."""
        if SpecId(spec_id).enabled(SpecId.MERGE) and self.block.prevrandao is None:
            raise PrevrandaoNotSet()

    def validate_tx(self, spec_id: SpecId) -> None:
        """Check the transaction against the environment; raise InvalidTransaction."""
        spec = SpecId(spec_id)
        tx = self.tx

        if spec.enabled(SpecId.LONDON):
            if tx.gas_priority_fee is not None and tx.gas_priority_fee > tx.gas_price:
                raise InvalidTransaction(
                    InvalidTransactionKind.GAS_MAX_FEE_GREATER_THAN_PRIORITY_FEE
                )
            if (
                not self.cfg.disable_base_fee
                and self.effective_gas_price() < self.block.basefee
            ):
                raise InvalidTransaction(InvalidTransactionKind.GAS_PRICE_LESS_THAN_BASEFEE)

        if not self.cfg.disable_block_gas_limit and tx.gas_limit > self.block.gas_limit:
            raise InvalidTransaction(InvalidTransactionKind.CALLER_GAS_LIMIT_MORE_THAN_BLOCK)

        if (
            spec.enabled(SpecId.SHANGHAI)
            and tx.transact_to.is_create()
            and len(tx.data) > MAX_INITCODE_SIZE
        ):
            raise InvalidTransaction(InvalidTransactionKind.CREATE_INITCODE_SIZE_LIMIT)

        if tx.chain_id is not None and tx.chain_id != self.cfg.chain_id:
            raise InvalidTransaction(InvalidTransactionKind.INVALID_CHAIN_ID)

        if not spec.enabled(SpecId.BERLIN) and tx.access_list:
            raise InvalidTransaction(InvalidTransactionKind.ACCESS_LIST_NOT_SUPPORTED)

    def validate_tx_against_state(self, account: Account) -> None:
        """Check the transaction against the caller's account; raise InvalidTransaction."""
        tx = self.tx
        info = account.info

        if not self.cfg.disable_eip3607 and info.code_hash != KECCAK_EMPTY:
            raise InvalidTransaction(InvalidTransactionKind.REJECT_CALLER_WITH_CODE)

        if tx.nonce is not None:
            if tx.nonce > info.nonce:
                raise InvalidTransaction(
                    InvalidTransactionKind.NONCE_TOO_HIGH, tx=tx.nonce, state=info.nonce
                )
            if tx.nonce < info.nonce:
                raise InvalidTransaction(
                    InvalidTransactionKind.NONCE_TOO_LOW, tx=tx.nonce, state=info.nonce
                )

        gas_cost = tx.gas_limit * tx.gas_price
        if gas_cost > _U256_MAX or gas_cost + tx.value > _U256_MAX:
            raise InvalidTransaction(InvalidTransactionKind.OVERFLOW_PAYMENT_IN_TRANSACTION)
        balance_check = gas_cost + tx.value

        if not self.cfg.disable_balance_check and balance_check > info.balance:
            raise InvalidTransaction(
                InvalidTransactionKind.LACK_OF_FUND_FOR_MAX_FEE,
                fee=tx.gas_limit,
                balance=info.balance,
            )