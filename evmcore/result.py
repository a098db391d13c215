"""Execution outcomes and the errors a transaction can raise."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple, Union

from evmcore.bits import B160, B256
from evmcore.state import State


@dataclass(frozen=True)
class Log:
    """An event emitted by a contract."""

    address: B160
    topics: Tuple[B256, ...] = ()
    data: bytes = b""

    def __post_init__(self) -> None:
        object.__setattr__(self, "topics", tuple(self.topics))
        object.__setattr__(self, "data", bytes(self.data))


class Eval(enum.Enum):
    """Ways a call can finish successfully."""

    STOP = "stop"
    RETURN = "return"
    SELF_DESTRUCT = "self_destruct"


class OutOfGasError(enum.Enum):
    """Kinds of running out of gas."""

    BASIC_OUT_OF_GAS = "basic_out_of_gas"
    MEMORY_LIMIT = "memory_limit"
    MEMORY = "memory"
    PRECOMPILE = "precompile"
    INVALID_OPERAND = "invalid_operand"


class Halt(enum.Enum):
    """Exceptional halts other than running out of gas."""

    OPCODE_NOT_FOUND = "opcode_not_found"
    INVALID_FE_OPCODE = "invalid_fe_opcode"
    INVALID_JUMP = "invalid_jump"
    NOT_ACTIVATED = "not_activated"
    STACK_UNDERFLOW = "stack_underflow"
    STACK_OVERFLOW = "stack_overflow"
    OUT_OF_OFFSET = "out_of_offset"
    CREATE_COLLISION = "create_collision"
    PRECOMPILE_ERROR = "precompile_error"
    NONCE_OVERFLOW = "nonce_overflow"
    CREATE_CONTRACT_SIZE_LIMIT = "create_contract_size_limit"
    CREATE_CONTRACT_STARTING_WITH_EF = "create_contract_starting_with_ef"
    CREATE_INITCODE_SIZE_LIMIT = "create_initcode_size_limit"
    OVERFLOW_PAYMENT = "overflow_payment"
    STATE_CHANGE_DURING_STATIC_CALL = "state_change_during_static_call"
    CALL_NOT_ALLOWED_INSIDE_STATIC = "call_not_allowed_inside_static"
    OUT_OF_FUND = "out_of_fund"
    CALL_TOO_DEEP = "call_too_deep"


@dataclass(frozen=True)
class CallOutput:
    """Data returned by a call."""

    data: bytes = b""


@dataclass(frozen=True)
class CreateOutput:
    """Data returned by a create, with the new contract's address if any."""

    data: bytes = b""
    address: Optional[B160] = None


Output = Union[CallOutput, CreateOutput]


@dataclass(frozen=True)
class Success:
    """Finished without reverting."""

    reason: Eval
    gas_used: int
    gas_refunded: int
    logs: Tuple[Log, ...]
    output: Output

    def __post_init__(self) -> None:
        object.__setattr__(self, "logs", tuple(self.logs))


@dataclass(frozen=True)
class Revert:
    """Reverted by REVERT without spending all gas."""

    gas_used: int
    output: bytes


@dataclass(frozen=True)
class Halted:
    """Halted exceptionally, spending all gas.

    ``reason`` is a :class:`Halt`, or an :class:`OutOfGasError` when gas ran out.
    """

    reason: Union[Halt, OutOfGasError]
    gas_used: int


@dataclass(frozen=True)
class ExecutionResult:
    """The outcome of executing a transaction."""

    outcome: Union[Success, Revert, Halted]

    def is_success(self) -> bool:
        return isinstance(self.outcome, Success)

    def logs(self) -> List[Log]:
        """Logs of a successful run; empty otherwise."""
        if isinstance(self.outcome, Success):
            return list(self.outcome.logs)
        return []

    def output(self) -> Optional[bytes]:
        """Returned data, or None if execution halted."""
        if isinstance(self.outcome, Success):
            return self.outcome.output.data
        if isinstance(self.outcome, Revert):
            return self.outcome.output
        return None

    def gas_used(self) -> int:
        return self.outcome.gas_used


@dataclass
class ResultAndState:
    """An execution result with the state it changed."""

    result: ExecutionResult
    state: State


class InvalidTransactionKind(enum.Enum):
    """Reasons a transaction is rejected before execution."""

    GAS_MAX_FEE_GREATER_THAN_PRIORITY_FEE = "gas_max_fee_greater_than_priority_fee"
    GAS_PRICE_LESS_THAN_BASEFEE = "gas_price_less_than_basefee"
    CALLER_GAS_LIMIT_MORE_THAN_BLOCK = "caller_gas_limit_more_than_block"
    CALL_GAS_COST_MORE_THAN_GAS_LIMIT = "call_gas_cost_more_than_gas_limit"
    REJECT_CALLER_WITH_CODE = "reject_caller_with_code"
    LACK_OF_FUND_FOR_MAX_FEE = "lack_of_fund_for_max_fee"
    OVERFLOW_PAYMENT_IN_TRANSACTION = "overflow_payment_in_transaction"
    NONCE_OVERFLOW_IN_TRANSACTION = "nonce_overflow_in_transaction"
    NONCE_TOO_HIGH = "nonce_too_high"
    NONCE_TOO_LOW = "nonce_too_low"
    CREATE_INITCODE_SIZE_LIMIT = "create_initcode_size_limit"
    INVALID_CHAIN_ID = "invalid_chain_id"
    ACCESS_LIST_NOT_SUPPORTED = "access_list_not_supported"


_REQUIRED_DETAILS = {
    InvalidTransactionKind.LACK_OF_FUND_FOR_MAX_FEE: ("fee", "balance"),
    InvalidTransactionKind.NONCE_TOO_HIGH: ("tx", "state"),
    InvalidTransactionKind.NONCE_TOO_LOW: ("tx", "state"),
}


class EVMError(Exception):
    """Base class for errors that stop a transaction from running."""


class InvalidTransaction(EVMError):
    """The transaction failed validation."""

    def __init__(
        self,
        kind: InvalidTransactionKind,
        *,
        fee: Optional[int] = None,
        balance: Optional[int] = None,
        tx: Optional[int] = None,
        state: Optional[int] = None,
    ) -> None:
        details = {"fee": fee, "balance": balance, "tx": tx, "state": state}
        required = _REQUIRED_DETAILS.get(kind, ())
        missing = [name for name in required if details[name] is None]
        if missing:
            raise TypeError(f"{kind.name} needs {', '.join(missing)}")
        self.kind = kind
        self.fee = fee
        self.balance = balance
        self.tx = tx
        self.state = state
        self.details = {name: details[name] for name in required}
        text = kind.name
        if self.details:
            text += " (" + ", ".join(f"{k}={v}" for k, v in self.details.items()) + ")"
        super().__init__(text)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, InvalidTransaction):
            return NotImplemented
        return self.kind == other.kind and self.details == other.details

    def __hash__(self) -> int:
        return hash((self.kind, tuple(self.details.items())))


class PrevrandaoNotSet(EVMError):
    """The block has no prevrandao value although the spec needs one."""

    def __init__(self) -> None:
        super().__init__("prevrandao is not set")


class DatabaseError(EVMError):
    """The database failed; the original error is in ``error``."""

    def __init__(self, error: Any) -> None:
        super().__init__(f"database error: {error}")
        self.error = error