"""Tests for exact 64-bit two's-complement arithmetic."""

import math

import pytest

from conftest import MASK64, to_base, trunc_quot, weighted_i64, wrap64
from multiword.errors import DivisionByZero, FormatError
from multiword.fixed64 import (
    MAX_VALUE,
    MIN_VALUE,
    NEG_ONE,
    ONE,
    ZERO,
    Fixed64,
    i64_abs,
    i64_add,
    i64_and,
    i64_compare,
    i64_div,
    i64_div_mod,
    i64_eq,
    i64_from_bits,
    i64_from_int,
    i64_from_number,
    i64_from_string,
    i64_high_bits,
    i64_low_bits_unsigned,
    i64_mod,
    i64_mul,
    i64_neg,
    i64_not,
    i64_or,
    i64_quot,
    i64_quot_rem,
    i64_rem,
    i64_shl,
    i64_shr,
    i64_shr_unsigned,
    i64_signum,
    i64_sub,
    i64_to_bits,
    i64_to_int32,
    i64_to_number,
    i64_to_string,
    i64_to_unsigned_number,
    i64_xor,
)


def fx(v: int) -> Fixed64:
    return i64_from_int(v)


# ---------------------------------------------------------------------------
# Boundaries
# ---------------------------------------------------------------------------


def test_max_plus_one_wraps_to_min():
    result = i64_add(i64_from_bits(0xFFFFFFFF, 0x7FFFFFFF), fx(1))
    assert i64_eq(result, MIN_VALUE)
    assert i64_to_bits(result) == (0, 0x80000000)


def test_min_minus_one_wraps_to_max():
    assert i64_eq(i64_sub(MIN_VALUE, ONE), MAX_VALUE)


def test_negate_min_is_min():
    assert i64_eq(i64_neg(MIN_VALUE), MIN_VALUE)
    assert i64_eq(i64_abs(MIN_VALUE), MIN_VALUE)


def test_min_divided_by_minus_one():
    assert i64_eq(i64_quot(MIN_VALUE, NEG_ONE), MIN_VALUE)
    assert i64_eq(i64_div(MIN_VALUE, NEG_ONE), MIN_VALUE)
    assert i64_eq(i64_rem(MIN_VALUE, NEG_ONE), ZERO)
    assert i64_eq(i64_mod(MIN_VALUE, NEG_ONE), ZERO)


@pytest.mark.parametrize(
    "divisor",
    [1, -1, 2, -2, 3, -3, 7, 10, 2**32, -(2**32) - 1, 2**62, 2**62 + 1, 2**63 - 1, -(2**63)],
)
def test_min_divided(divisor: int):
    expected = wrap64(trunc_quot(-(2**63), divisor))
    assert int(i64_quot(MIN_VALUE, fx(divisor))) == expected


def test_min_times_odd_and_even():
    assert i64_eq(i64_mul(MIN_VALUE, fx(3)), MIN_VALUE)
    assert i64_eq(i64_mul(fx(-5), MIN_VALUE), MIN_VALUE)
    assert i64_eq(i64_mul(MIN_VALUE, fx(4)), ZERO)
    assert i64_eq(i64_mul(MIN_VALUE, MIN_VALUE), ZERO)


def test_small_values_are_shared():
    assert fx(-128) is fx(-128)
    assert fx(127) is fx(127)
    assert ZERO is fx(0)


def test_out_of_range_words_rejected():
    with pytest.raises(ValueError):
        Fixed64(2**31, 0)
    with pytest.raises(ValueError):
        Fixed64(0, -(2**31) - 1)


# ---------------------------------------------------------------------------
# Binary operations against the host reference
# ---------------------------------------------------------------------------


BINARY_OPS = {
    "add": (i64_add, lambda a, b: wrap64(a + b)),
    "sub": (i64_sub, lambda a, b: wrap64(a - b)),
    "mul": (i64_mul, lambda a, b: wrap64(a * b)),
    "quot": (i64_quot, lambda a, b: wrap64(trunc_quot(a, b))),
    "rem": (i64_rem, lambda a, b: wrap64(a - trunc_quot(a, b) * b)),
    "div": (i64_div, lambda a, b: wrap64(a // b)),
    "mod": (i64_mod, lambda a, b: wrap64(a % b)),
    "and": (i64_and, lambda a, b: a & b),
    "or": (i64_or, lambda a, b: a | b),
    "xor": (i64_xor, lambda a, b: a ^ b),
}

DIVISION_OPS = {"quot", "rem", "div", "mod"}


@pytest.mark.parametrize("op", BINARY_OPS)
def test_binary(op: str, rng, rounds):
    fn, ref = BINARY_OPS[op]
    fails = 0
    tested = 0
    first_failure = ""
    for _ in range(rounds * 2):
        a = weighted_i64(rng)
        b = weighted_i64(rng)
        if op in DIVISION_OPS and b == 0:
            continue
        tested += 1
        got = int(fn(fx(a), fx(b)))
        expected = ref(a, b)
        if got != expected:
            fails += 1
            if fails == 1:
                first_failure = f"{op}({a}, {b}): got {got}, expected {expected}"
    assert fails == 0, f"{fails}/{tested} failures. First: {first_failure}"


@pytest.mark.parametrize("op", sorted(DIVISION_OPS))
def test_division_by_zero(op: str):
    fn = BINARY_OPS[op][0]
    with pytest.raises(DivisionByZero):
        fn(fx(99), ZERO)


def test_division_laws(rng, rounds):
    for _ in range(rounds):
        a = fx(weighted_i64(rng))
        b = fx(weighted_i64(rng))
        if int(b) == 0:
            continue
        q, r = i64_quot_rem(a, b)
        assert i64_eq(i64_add(i64_mul(q, b), r), a)
        d, m = i64_div_mod(a, b)
        assert i64_eq(i64_add(i64_mul(d, b), m), a)
        assert int(m) == 0 or (int(m) < 0) == (int(b) < 0)


@pytest.mark.parametrize(
    "op,ref",
    [
        ("shl", lambda a, n: wrap64(a << (n & 63))),
        ("shr", lambda a, n: a >> (n & 63)),
        ("shr_unsigned", lambda a, n: wrap64((a & MASK64) >> (n & 63))),
    ],
)
def test_shifts(op: str, ref, rng, rounds):
    fn = {"shl": i64_shl, "shr": i64_shr, "shr_unsigned": i64_shr_unsigned}[op]
    for _ in range(rounds):
        a = weighted_i64(rng)
        n = rng.randint(0, 130)
        got = int(fn(fx(a), n))
        assert got == ref(a, n), f"{op}({a}, {n})"


def test_compare(rng, rounds):
    for _ in range(rounds * 2):
        a = weighted_i64(rng)
        b = weighted_i64(rng) if rng.randint(0, 3) else a
        assert i64_compare(fx(a), fx(b)) == (a > b) - (a < b)


def test_unary(rng, rounds):
    for _ in range(rounds):
        a = weighted_i64(rng)
        assert int(i64_neg(fx(a))) == wrap64(-a)
        assert int(i64_not(fx(a))) == ~a
        assert int(i64_signum(fx(a))) == (a > 0) - (a < 0)
        assert i64_eq(i64_add(i64_not(fx(a)), ONE), i64_neg(fx(a)))


# ---------------------------------------------------------------------------
# Conversions
# ---------------------------------------------------------------------------


def test_words():
    x = fx(-2)
    assert i64_to_int32(x) == -2
    assert i64_high_bits(x) == -1
    assert i64_low_bits_unsigned(x) == 0xFFFFFFFE
    assert i64_to_bits(x) == (0xFFFFFFFE, 0xFFFFFFFF)


def test_from_int_wraps():
    assert int(fx(2**64 + 5)) == 5
    assert int(fx(2**63)) == -(2**63)


@pytest.mark.parametrize(
    "value,expected",
    [
        (0.0, 0),
        (2.5, 2),
        (-2.5, -2),
        (4294967296.75, 4294967296),
        (-4294967297.0, -4294967297),
        (1e19, 2**63 - 1),
        (-1e19, -(2**63)),
        (9.223372036854775807e18, 2**63 - 1),
        (-9.223372036854775808e18, -(2**63)),
        (math.inf, 2**63 - 1),
        (-math.inf, -(2**63)),
        (math.nan, 0),
    ],
)
def test_from_number(value: float, expected: int):
    assert int(i64_from_number(value)) == expected


def test_from_number_random(rng, rounds):
    for _ in range(rounds):
        d = rng.uniform(-9.2e18, 9.2e18)
        assert int(i64_from_number(d)) == int(d)


def test_to_number():
    assert i64_to_number(MIN_VALUE) == -(2.0**63)
    assert i64_to_number(fx(-5)) == -5.0
    assert i64_to_number(fx(2**53)) == 2.0**53
    assert i64_to_unsigned_number(NEG_ONE) == 2.0**64
    assert i64_to_unsigned_number(fx(7)) == 7.0


# ---------------------------------------------------------------------------
# Strings
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("radix", [2, 10, 16, 36])
def test_string_round_trip(radix: int, rng, rounds):
    for _ in range(rounds):
        v = weighted_i64(rng)
        s = to_base(v, radix)
        assert i64_to_string(fx(v), radix) == s
        assert int(i64_from_string(s, radix)) == v


def test_min_value_string():
    assert i64_to_string(MIN_VALUE) == "-9223372036854775808"
    assert i64_to_string(MIN_VALUE, 16) == "-8000000000000000"
    assert i64_eq(i64_from_string("-9223372036854775808"), MIN_VALUE)
    assert str(MAX_VALUE) == "9223372036854775807"


def test_from_string_wraps():
    assert int(i64_from_string("18446744073709551617")) == 1
    assert int(i64_from_string("9223372036854775808")) == -(2**63)


@pytest.mark.parametrize("text,radix", [("", 10), ("-", 10), ("4-2", 10), ("xyz", 10), ("1", 0)])
def test_from_string_errors(text: str, radix: int):
    with pytest.raises(FormatError):
        i64_from_string(text, radix)


def test_operators():
    assert MAX_VALUE + ONE == MIN_VALUE
    assert int(fx(-7) // fx(2)) == -4
    assert int(fx(-7) % fx(2)) == 1
    assert int(fx(6) * fx(-7)) == -42
    assert int(-fx(3)) == -3
    assert int(~fx(0)) == -1
    assert int(fx(1) << 63) == -(2**63)
    assert int(MIN_VALUE >> 63) == -1
    assert fx(-1) < fx(0) <= fx(0)
    assert MAX_VALUE > MIN_VALUE
    assert hash(fx(1000)) == hash(fx(1000))


def test_operators_accept_host_ints():
    assert MAX_VALUE + 1 == MIN_VALUE
    assert int(fx(-7) * 3) == -21
    assert int(fx(-7) // 2) == -4
    assert int(fx(12) & 10) == 8
    assert fx(-1) < 3
    assert fx(2**40) >= 2**40
    assert fx(5) == 5
    assert fx(5) != 6
    assert hash(fx(2**40)) == hash(2**40)


def test_operators_reject_other_types():
    assert fx(1).__add__("1") is NotImplemented
    assert fx(1) != "1"
    with pytest.raises(TypeError):
        fx(1) + 1.5
    with pytest.raises(TypeError):
        fx(1) < "1"
