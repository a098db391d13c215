import pytest

from evmcore.precompile.bn128 import (
    CURVE_ORDER,
    FIELD_MODULUS,
    add_byzantium,
    add_istanbul,
    mul_byzantium,
    mul_istanbul,
    pair_byzantium,
    pair_istanbul,
    run_add,
    run_mul,
    run_pair,
)
from evmcore.precompile.error import PrecompileError, PrecompileErrorKind


def _h(*parts):
    return bytes.fromhex("".join(parts))


def _word(value):
    return value.to_bytes(32, "big")


G1 = _word(1) + _word(2)
NEG_G1 = _word(1) + _word(FIELD_MODULUS - 2)

ADD_INPUT = _h(
    "18b18acfb4c2c30276db5411368e7185b311dd124691610c5d3b74034e093dc9",
    "063c909c4720840cb5134cb9f59fa749755796819658d32efc0d288198f37266",
    "07c2b7f58a84bd6145f00c9c2bc0bb1a187f20ff2c92963a88019e7c6a014eed",
    "06614e20c147e940f2d70da3f74c9a17df361706a4485c742bd6788478fa17d7",
)
ADD_EXPECTED = _h(
    "2243525c5efd4b9c3d3c45ac0ca3fe4dd85e830a4ce6b65fa1eeaee202839703",
    "301d1d33be6da8e509df21cc35964723180eed7532537db9ae5e7d48f195c915",
)

MUL_INPUT = _h(
    "2bd3e6d0f3b142924f5ca7b49ce5b9d54c4703d7ae5648e61d02268b1a0a9fb7",
    "21611ce0a6af85915e2f1d70300909ce2e49dfad4a4619c8390cae66cefdb204",
    "00000000000000000000000000000000000000000000000011138ce750fa15c2",
)
MUL_EXPECTED = _h(
    "070a8d6a982153cae4be29d434e8faef8a47b274a053f5a4ee2a6c9c13c31e5c",
    "031b8ce914eba3a9ffb989f9cdd5b0f01943074bf4f0f315690ec3cec6981afc",
)

PAIR_INPUT = _h(
    "1c76476f4def4bb94541d57ebba1193381ffa7aa76ada664dd31c16024c43f59",
    "3034dd2920f673e204fee2811c678745fc819b55d3e9d294e45c9b03a76aef41",
    "209dd15ebff5d46c4bd888e51a93cf99a7329636c63514396b4a452003a35bf7",
    "04bf11ca01483bfa8b34b43561848d28905960114c8ac04049af4b6315a41678",
    "2bb8324af6cfc93537a2ad1a445cfd0ca2a71acd7ac41fadbf933c2a51be344d",
    "120a2a4cf30c1bf9845f20c6fe39e07ea2cce61f0c9bb048165fe5e4de877550",
    "111e129f1cf1097710d41c4ac70fcdfa5ba2023c6ff1cbeac322de49d1b6df7c",
    "2032c61a830e3c17286de9462bf242fca2883585b93870a73853face6a6bf411",
    "198e9393920d483a7260bfb731fb5d25f1aa493335a9e71297e485b7aef312c2",
    "1800deef121f1e76426a00665e5c4479674322d4f75edadd46debd5cd992f6ed",
    "090689d0585ff075ec9e99ad690c3395bc4b313370b38ef355acdadcd122975b",
    "12c85ea5db8c6deb4aab71808dcb408fe3d1e7690c43d37b4ce6cc0166fa7daa",
)
G2_POINT = PAIR_INPUT[64:192]

ONE = _word(1)
ZERO64 = bytes(64)
ELEVENS = "11" * 32


def _kind(excinfo):
    return excinfo.value.kind


# --- addition -------------------------------------------------------------


def test_add_vector():
    assert add_byzantium(ADD_INPUT, 500) == (500, ADD_EXPECTED)


def test_add_zero_sum():
    assert add_byzantium(bytes(128), 500) == (500, ZERO64)


def test_add_out_of_gas():
    with pytest.raises(PrecompileError) as excinfo:
        add_byzantium(bytes(128), 499)
    assert _kind(excinfo) is PrecompileErrorKind.OUT_OF_GAS


def test_add_no_input():
    assert add_byzantium(b"", 500) == (500, ZERO64)


def test_add_point_not_on_curve():
    with pytest.raises(PrecompileError) as excinfo:
        add_byzantium(_h(ELEVENS * 4), 500)
    assert _kind(excinfo) is PrecompileErrorKind.BN128_AFFINE_G_FAILED_TO_CREATE


def test_add_istanbul_gas():
    assert add_istanbul(ADD_INPUT, 150) == (150, ADD_EXPECTED)
    with pytest.raises(PrecompileError) as excinfo:
        add_istanbul(ADD_INPUT, 149)
    assert _kind(excinfo) is PrecompileErrorKind.OUT_OF_GAS


def test_add_coordinate_outside_field():
    data = _word(FIELD_MODULUS) + _word(2) + G1
    with pytest.raises(PrecompileError) as excinfo:
        run_add(data)
    assert _kind(excinfo) is PrecompileErrorKind.BN128_FIELD_POINT_NOT_A_MEMBER


def test_add_ignores_trailing_bytes():
    assert run_add(ADD_INPUT + b"\xff" * 40) == ADD_EXPECTED


def test_add_point_and_its_negation_is_zero():
    assert run_add(G1 + NEG_G1) == ZERO64


def test_add_zero_is_neutral():
    assert run_add(G1 + bytes(64)) == G1


# --- multiplication ------------------------------------------------------


def test_mul_vector():
    assert mul_byzantium(MUL_INPUT, 40_000) == (40_000, MUL_EXPECTED)


def test_mul_out_of_gas():
    data = bytes(64) + _h("02" + "00" * 31)
    with pytest.raises(PrecompileError) as excinfo:
        mul_byzantium(data, 39_999)
    assert _kind(excinfo) is PrecompileErrorKind.OUT_OF_GAS


def test_mul_zero_point():
    data = bytes(64) + _h("02" + "00" * 31)
    assert mul_byzantium(data, 40_000) == (40_000, ZERO64)


def test_mul_no_input():
    assert mul_byzantium(b"", 40_000) == (40_000, ZERO64)


def test_mul_point_not_on_curve():
    data = _h(ELEVENS * 2, "0f" + "00" * 31)
    with pytest.raises(PrecompileError) as excinfo:
        mul_byzantium(data, 40_000)
    assert _kind(excinfo) is PrecompileErrorKind.BN128_AFFINE_G_FAILED_TO_CREATE


def test_mul_istanbul_gas():
    assert mul_istanbul(MUL_INPUT, 6_000) == (6_000, MUL_EXPECTED)
    with pytest.raises(PrecompileError) as excinfo:
        mul_istanbul(MUL_INPUT, 5_999)
    assert _kind(excinfo) is PrecompileErrorKind.OUT_OF_GAS


def test_mul_by_two_equals_doubling():
    assert run_mul(G1 + _word(2)) == run_add(G1 + G1)


def test_mul_by_one_is_identity():
    assert run_mul(G1 + _word(1)) == G1


def test_mul_by_group_order_is_zero():
    assert run_mul(G1 + _word(CURVE_ORDER)) == ZERO64


def test_mul_scalar_is_reduced_by_group_order():
    assert run_mul(G1 + _word(CURVE_ORDER + 2)) == run_mul(G1 + _word(2))


# --- pairing -------------------------------------------------------------


def test_pair_vector():
    assert pair_byzantium(PAIR_INPUT, 260_000) == (260_000, ONE)


def test_pair_out_of_gas():
    with pytest.raises(PrecompileError) as excinfo:
        pair_byzantium(PAIR_INPUT, 259_999)
    assert _kind(excinfo) is PrecompileErrorKind.OUT_OF_GAS


def test_pair_no_input():
    assert pair_byzantium(b"", 260_000) == (100_000, ONE)


def test_pair_point_not_on_curve():
    with pytest.raises(PrecompileError) as excinfo:
        pair_byzantium(_h(ELEVENS * 6), 260_000)
    assert _kind(excinfo) is PrecompileErrorKind.BN128_AFFINE_G_FAILED_TO_CREATE


def test_pair_invalid_length():
    data = _h(ELEVENS * 2, "11" * 15)
    with pytest.raises(PrecompileError) as excinfo:
        pair_byzantium(data, 260_000)
    assert _kind(excinfo) is PrecompileErrorKind.BN128_PAIR_LENGTH


def test_pair_gas_is_checked_before_length():
    with pytest.raises(PrecompileError) as excinfo:
        pair_byzantium(b"\x11" * 79, 1_000)
    assert _kind(excinfo) is PrecompileErrorKind.OUT_OF_GAS


def test_pair_istanbul_gas():
    assert pair_istanbul(b"", 45_000) == (45_000, ONE)
    with pytest.raises(PrecompileError) as excinfo:
        pair_istanbul(PAIR_INPUT, 112_999)
    assert _kind(excinfo) is PrecompileErrorKind.OUT_OF_GAS


def test_pair_with_zero_points_is_one():
    assert run_pair(bytes(192), 80_000, 100_000, 180_000) == (180_000, ONE)


def test_pair_with_inverse_g1_points_is_one():
    data = G1 + G2_POINT + NEG_G1 + G2_POINT
    assert run_pair(data, 80_000, 100_000, 260_000) == (260_000, ONE)


def test_pair_single_nontrivial_is_zero():
    data = G1 + G2_POINT
    assert run_pair(data, 80_000, 100_000, 180_000) == (180_000, _word(0))


def test_pair_g2_not_on_curve():
    data = G1 + _word(0) + _word(1) + _word(0) + _word(0)
    with pytest.raises(PrecompileError) as excinfo:
        run_pair(data, 80_000, 100_000, 180_000)
    assert _kind(excinfo) is PrecompileErrorKind.BN128_AFFINE_G_FAILED_TO_CREATE


def test_pair_coordinate_outside_field():
    data = G1 + _word(FIELD_MODULUS) + G2_POINT[32:]
    with pytest.raises(PrecompileError) as excinfo:
        run_pair(data, 80_000, 100_000, 180_000)
    assert _kind(excinfo) is PrecompileErrorKind.BN128_FIELD_POINT_NOT_A_MEMBER