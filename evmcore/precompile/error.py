"""Errors raised by precompiled contracts and their shared gas formula."""

from __future__ import annotations

import enum
from typing import Tuple

PrecompileResult = Tuple[int, bytes]
"""Gas used and output bytes of a successful precompile run."""


class PrecompileErrorKind(enum.Enum):
    """Reasons a precompiled contract fails."""

    OUT_OF_GAS = "out_of_gas"
    BLAKE2_WRONG_LENGTH = "blake2_wrong_length"
    BLAKE2_WRONG_FINAL_INDICATOR_FLAG = "blake2_wrong_final_indicator_flag"
    MODEXP_EXP_OVERFLOW = "modexp_exp_overflow"
    MODEXP_BASE_OVERFLOW = "modexp_base_overflow"
    MODEXP_MOD_OVERFLOW = "modexp_mod_overflow"
    BN128_FIELD_POINT_NOT_A_MEMBER = "bn128_field_point_not_a_member"
    BN128_AFFINE_G_FAILED_TO_CREATE = "bn128_affine_g_failed_to_create"
    BN128_PAIR_LENGTH = "bn128_pair_length"


class PrecompileError(Exception):
    """A precompiled contract failed; ``kind`` says why."""

    def __init__(self, kind: PrecompileErrorKind) -> None:
        super().__init__(kind.name)
        self.kind = kind

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PrecompileError):
            return NotImplemented
        return self.kind == other.kind

    def __hash__(self) -> int:
        return hash(self.kind)

    def __repr__(self) -> str:
        return f"PrecompileError({self.kind.name})"


def calc_linear_cost_u32(length: int, base: int, word: int) -> int:
    """Cost of ``base`` plus ``word`` for every started 32-byte word."""
    return (length + 31) // 32 * word + base