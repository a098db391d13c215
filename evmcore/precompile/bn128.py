"""Addition, scalar multiplication and pairing check on alt_bn128 (EIP-196, EIP-197)."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple, Union

from evmcore.bits import B160
from evmcore.precompile.error import (
    PrecompileError,
    PrecompileErrorKind,
    PrecompileResult,
)

FIELD_MODULUS = (
    21888242871839275222246405745257275088696311157297823662689037894645226208583
)
CURVE_ORDER = (
    21888242871839275222246405745257275088548364400416034343698204186575808495617
)

ADD_ADDRESS = B160.from_u64(6)
MUL_ADDRESS = B160.from_u64(7)
PAIR_ADDRESS = B160.from_u64(8)

ADD_INPUT_LEN = 128
MUL_INPUT_LEN = 128
PAIR_ELEMENT_LEN = 192

ISTANBUL_ADD_GAS = 150
BYZANTIUM_ADD_GAS = 500
ISTANBUL_MUL_GAS = 6_000
BYZANTIUM_MUL_GAS = 40_000
ISTANBUL_PAIR_PER_POINT = 34_000
ISTANBUL_PAIR_BASE = 45_000
BYZANTIUM_PAIR_PER_POINT = 80_000
BYZANTIUM_PAIR_BASE = 100_000


class _Fq:
    """An element of the base field."""

    __slots__ = ("value",)

    def __init__(self, value: int) -> None:
        self.value = value % FIELD_MODULUS

    def __add__(self, other: "_Fq") -> "_Fq":
        return _Fq(self.value + other.value)

    def __sub__(self, other: "_Fq") -> "_Fq":
        return _Fq(self.value - other.value)

    def __neg__(self) -> "_Fq":
        return _Fq(-self.value)

    def __mul__(self, other: Union["_Fq", int]) -> "_Fq":
        if isinstance(other, int):
            return _Fq(self.value * other)
        return _Fq(self.value * other.value)

    def inverse(self) -> "_Fq":
        return _Fq(pow(self.value, -1, FIELD_MODULUS))

    def is_zero(self) -> bool:
        return self.value == 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _Fq):
            return NotImplemented
        return self.value == other.value

    def __hash__(self) -> int:
        return hash(self.value)


class _Fq2:
    """An element ``a + b*u`` of the quadratic extension, with ``u^2 = -1``."""

    __slots__ = ("a", "b")

    def __init__(self, a: int, b: int) -> None:
        self.a = a % FIELD_MODULUS
        self.b = b % FIELD_MODULUS

    def __add__(self, other: "_Fq2") -> "_Fq2":
        return _Fq2(self.a + other.a, self.b + other.b)

    def __sub__(self, other: "_Fq2") -> "_Fq2":
        return _Fq2(self.a - other.a, self.b - other.b)

    def __neg__(self) -> "_Fq2":
        return _Fq2(-self.a, -self.b)

    def __mul__(self, other: Union["_Fq2", int]) -> "_Fq2":
        if isinstance(other, int):
            return _Fq2(self.a * other, self.b * other)
        return _Fq2(
            self.a * other.a - self.b * other.b,
            self.a * other.b + self.b * other.a,
        )

    def __pow__(self, exponent: int) -> "_Fq2":
        result = _Fq2(1, 0)
        for bit in bin(exponent)[2:]:
            result = result * result
            if bit == "1":
                result = result * self
        return result

    def inverse(self) -> "_Fq2":
        norm_inv = pow(self.a * self.a + self.b * self.b, -1, FIELD_MODULUS)
        return _Fq2(self.a * norm_inv, -self.b * norm_inv)

    def conjugate(self) -> "_Fq2":
        return _Fq2(self.a, -self.b)

    def is_zero(self) -> bool:
        return self.a == 0 and self.b == 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _Fq2):
            return NotImplemented
        return self.a == other.a and self.b == other.b

    def __hash__(self) -> int:
        return hash((self.a, self.b))


_Element = Union[_Fq, _Fq2]
_Point = Optional[Tuple[_Element, _Element]]

_B1 = _Fq(3)
_XI = _Fq2(9, 1)
_B2 = _Fq2(3, 0) * _XI.inverse()
_GAMMA_X = _XI ** ((FIELD_MODULUS - 1) // 3)
_GAMMA_Y = _XI ** ((FIELD_MODULUS - 1) // 2)

_ATE_LOOP_COUNT = 29793968203157093288
_FINAL_EXPONENT = (FIELD_MODULUS**12 - 1) // CURVE_ORDER

_Fq12 = Tuple[int, ...]
_FQ12_ONE: _Fq12 = (1,) + (0,) * 11


def _double(point: _Point) -> _Point:
    if point is None:
        return None
    x, y = point
    if y.is_zero():
        return None
    lam = x * x * 3 * (y * 2).inverse()
    nx = lam * lam - x * 2
    return nx, lam * (x - nx) - y


def _add(p1: _Point, p2: _Point) -> _Point:
    if p1 is None:
        return p2
    if p2 is None:
        return p1
    (x1, y1), (x2, y2) = p1, p2
    if x1 == x2:
        if y1 == y2:
            return _double(p1)
        return None
    lam = (y2 - y1) * (x2 - x1).inverse()
    nx = lam * lam - x1 - x2
    return nx, lam * (x1 - nx) - y1


def _neg(point: _Point) -> _Point:
    if point is None:
        return None
    x, y = point
    return x, -y


def _mul(point: _Point, scalar: int) -> _Point:
    result: _Point = None
    addend = point
    while scalar:
        if scalar & 1:
            result = _add(result, addend)
        addend = _double(addend)
        scalar >>= 1
    return result


def _fq12_mul(a: _Fq12, b: _Fq12) -> _Fq12:
    # Polynomials in w modulo w^12 - 18*w^6 + 82.
    product = [0] * 23
    for i, ai in enumerate(a):
        if ai:
            for j, bj in enumerate(b, start=i):
                product[j] += ai * bj
    for degree in range(22, 11, -1):
        top = product[degree]
        if top:
            product[degree - 6] += 18 * top
            product[degree - 12] -= 82 * top
    return tuple(c % FIELD_MODULUS for c in product[:12])


def _fq12_pow(base: _Fq12, exponent: int) -> _Fq12:
    result = _FQ12_ONE
    for bit in bin(exponent)[2:]:
        result = _fq12_mul(result, result)
        if bit == "1":
            result = _fq12_mul(result, base)
    return result


def _line(p1: _Point, p2: _Point, xt: int, yt: int) -> _Fq12:
    """Line through twisted points p1, p2 evaluated at the G1 point (xt, yt)."""
    (x1, y1), (x2, y2) = p1, p2
    coeffs = [0] * 12
    if x1 != x2:
        lam = (y2 - y1) * (x2 - x1).inverse()
    elif y1 == y2:
        lam = x1 * x1 * 3 * (y1 * 2).inverse()
    else:
        coeffs[0] = xt
        coeffs[2] = -(x1.a - 9 * x1.b)
        coeffs[8] = -x1.b
        return tuple(c % FIELD_MODULUS for c in coeffs)
    c = y1 - lam * x1
    coeffs[0] = -yt
    coeffs[1] = (lam.a - 9 * lam.b) * xt
    coeffs[7] = lam.b * xt
    coeffs[3] = c.a - 9 * c.b
    coeffs[9] = c.b
    return tuple(v % FIELD_MODULUS for v in coeffs)


def _frobenius(point: _Point) -> _Point:
    x, y = point
    return x.conjugate() * _GAMMA_X, y.conjugate() * _GAMMA_Y


def _miller_loop(q: _Point, p: _Point) -> _Fq12:
    xt, yt = p[0].value, p[1].value
    r = q
    f = _FQ12_ONE
    for bit in bin(_ATE_LOOP_COUNT)[3:]:
        f = _fq12_mul(_fq12_mul(f, f), _line(r, r, xt, yt))
        r = _double(r)
        if bit == "1":
            f = _fq12_mul(f, _line(r, q, xt, yt))
            r = _add(r, q)
    q1 = _frobenius(q)
    nq2 = _neg(_frobenius(q1))
    f = _fq12_mul(f, _line(r, q1, xt, yt))
    r = _add(r, q1)
    f = _fq12_mul(f, _line(r, nq2, xt, yt))
    return f


def _pairing_product_is_one(pairs: Sequence[Tuple[_Point, _Point]]) -> bool:
    f = _FQ12_ONE
    contributed = False
    for a, b in pairs:
        if a is None or b is None:
            continue
        f = _fq12_mul(f, _miller_loop(b, a))
        contributed = True
    if not contributed:
        return True
    return _fq12_pow(f, _FINAL_EXPONENT) == _FQ12_ONE


def _read_fq(word: bytes) -> _Fq:
    value = int.from_bytes(word, "big")
    if value >= FIELD_MODULUS:
        raise PrecompileError(PrecompileErrorKind.BN128_FIELD_POINT_NOT_A_MEMBER)
    return _Fq(value)


def _g1_point(x: _Fq, y: _Fq) -> _Point:
    if x.is_zero() and y.is_zero():
        return None
    if y * y != x * x * x + _B1:
        raise PrecompileError(PrecompileErrorKind.BN128_AFFINE_G_FAILED_TO_CREATE)
    return x, y


def _g2_point(x: _Fq2, y: _Fq2) -> _Point:
    if x.is_zero() and y.is_zero():
        return None
    if y * y != x * x * x + _B2:
        raise PrecompileError(PrecompileErrorKind.BN128_AFFINE_G_FAILED_TO_CREATE)
    point = (x, y)
    if _mul(point, CURVE_ORDER) is not None:
        raise PrecompileError(PrecompileErrorKind.BN128_AFFINE_G_FAILED_TO_CREATE)
    return point


def _read_point(data: bytes, pos: int) -> _Point:
    x = _read_fq(data[pos : pos + 32])
    y = _read_fq(data[pos + 32 : pos + 64])
    return _g1_point(x, y)


def _encode_point(point: _Point) -> bytes:
    if point is None:
        return bytes(64)
    x, y = point
    return x.value.to_bytes(32, "big") + y.value.to_bytes(32, "big")


def _fit(data: bytes, length: int) -> bytes:
    return bytes(data[:length]).ljust(length, b"\x00")


def run_add(data: bytes) -> bytes:
    """Sum of two G1 points, each 64 bytes; short input is zero-padded."""
    data = _fit(data, ADD_INPUT_LEN)
    p1 = _read_point(data, 0)
    p2 = _read_point(data, 64)
    return _encode_point(_add(p1, p2))


def run_mul(data: bytes) -> bytes:
    """A G1 point times a 32-byte scalar; short input is zero-padded."""
    data = _fit(data, MUL_INPUT_LEN)
    point = _read_point(data, 0)
    scalar = int.from_bytes(data[64:96], "big") % CURVE_ORDER
    return _encode_point(_mul(point, scalar))


def _read_pair(chunk: bytes) -> Tuple[_Point, _Point]:
    ax, ay, bay, bax, bby, bbx = (
        _read_fq(chunk[offset : offset + 32]) for offset in range(0, PAIR_ELEMENT_LEN, 32)
    )
    a = _g1_point(ax, ay)
    b = _g2_point(_Fq2(bax.value, bay.value), _Fq2(bbx.value, bby.value))
    return a, b


def run_pair(
    data: bytes, pair_per_point_cost: int, pair_base_cost: int, gas_limit: int
) -> PrecompileResult:
    """Check that the product of the pairings of all (G1, G2) pairs is one."""
    data = bytes(data)
    gas_used = pair_per_point_cost * len(data) // PAIR_ELEMENT_LEN + pair_base_cost
    if gas_used > gas_limit:
        raise PrecompileError(PrecompileErrorKind.OUT_OF_GAS)
    if len(data) % PAIR_ELEMENT_LEN:
        raise PrecompileError(PrecompileErrorKind.BN128_PAIR_LENGTH)

    pairs: List[Tuple[_Point, _Point]] = [
        _read_pair(data[offset : offset + PAIR_ELEMENT_LEN])
        for offset in range(0, len(data), PAIR_ELEMENT_LEN)
    ]
    success = _pairing_product_is_one(pairs)
    return gas_used, (1 if success else 0).to_bytes(32, "big")


def _fixed_cost(cost: int, gas_limit: int) -> int:
    if cost > gas_limit:
        raise PrecompileError(PrecompileErrorKind.OUT_OF_GAS)
    return cost


def add_istanbul(data: bytes, gas_limit: int) -> PrecompileResult:
    """Point addition at the Istanbul price."""
    cost = _fixed_cost(ISTANBUL_ADD_GAS, gas_limit)
    return cost, run_add(data)


def add_byzantium(data: bytes, gas_limit: int) -> PrecompileResult:
    """Point addition at the Byzantium price."""
    cost = _fixed_cost(BYZANTIUM_ADD_GAS, gas_limit)
    return cost, run_add(data)


def mul_istanbul(data: bytes, gas_limit: int) -> PrecompileResult:
    """Scalar multiplication at the Istanbul price."""
    cost = _fixed_cost(ISTANBUL_MUL_GAS, gas_limit)
    return cost, run_mul(data)


def mul_byzantium(data: bytes, gas_limit: int) -> PrecompileResult:
    """Scalar multiplication at the Byzantium price."""
    cost = _fixed_cost(BYZANTIUM_MUL_GAS, gas_limit)
    return cost, run_mul(data)


def pair_istanbul(data: bytes, gas_limit: int) -> PrecompileResult:
    """Pairing check at the Istanbul prices."""
    return run_pair(data, ISTANBUL_PAIR_PER_POINT, ISTANBUL_PAIR_BASE, gas_limit)


def pair_byzantium(data: bytes, gas_limit: int) -> PrecompileResult:
    """Pairing check at the Byzantium prices."""
    return run_pair(data, BYZANTIUM_PAIR_PER_POINT, BYZANTIUM_PAIR_BASE, gas_limit)