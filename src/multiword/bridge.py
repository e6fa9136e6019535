"""Conversions between Integer, Fixed64, Word64 and doubles.

Word64 is not a separate type: it is an Integer kept in [0, 2^64). Every
w64_* operation re-normalizes its result into that range.
"""

from __future__ import annotations

import math

from .errors import DivisionByZero
from .fixed64 import Fixed64, i64_from_bits
from .ieee754 import decode_double
from .integer import (
    ONE,
    Integer,
    big_abs,
    big_add,
    big_and,
    big_bit_length,
    big_compare,
    big_eq,
    big_from_bits,
    big_get_bits,
    big_is_negative,
    big_is_zero,
    big_mod,
    big_mul,
    big_neg,
    big_or,
    big_quot,
    big_rem,
    big_shl,
    big_shr,
    big_sub,
    big_to_number,
    big_to_word32,
    big_xor,
)
from .words import ESTIMATE_WINDOW_BITS, MASK32

# ---------------------------------------------------------------------------
# Integer <-> Fixed64
# ---------------------------------------------------------------------------


def integer_from_int64(x: Fixed64) -> Integer:
    """Sign-extend the two words of x into an Integer."""
    return big_from_bits([x.low & MASK32, x.high & MASK32])


def integer_to_int64(x: Integer) -> Fixed64:
    """Keep the low 64 bits of x."""
    return i64_from_bits(big_get_bits(x, 0), big_get_bits(x, 1))


# ---------------------------------------------------------------------------
# Doubles
# ---------------------------------------------------------------------------


def decode_double_integer(x: float) -> tuple[Integer, int]:
    """(mantissa, exponent) with x == mantissa * 2^exponent for finite x."""
    sign, man_high, man_low, exponent = decode_double(x)
    mantissa = big_from_bits([man_low, man_high])
    if sign < 0:
        mantissa = big_neg(mantissa)
    return (mantissa, exponent)


def _window(x: Integer) -> tuple[float, int]:
    """Top bits of a non-negative x as a double, plus the dropped bit count.

    Dropped bits are folded into a sticky low bit so the single rounding to
    53 bits matches rounding x itself.
    """
    shift = max(0, big_bit_length(x) - ESTIMATE_WINDOW_BITS)
    top = big_shr(x, shift)
    if shift > 0 and not big_eq(big_shl(top, shift), x):
        top = big_or(top, ONE)
    return (big_to_number(top), shift)


def _scale(value: float, exponent: int) -> float:
    try:
        return math.ldexp(value, exponent)
    except OverflowError:
        return math.copysign(math.inf, value)


def encode_double(mantissa: Integer, exponent: int) -> float:
    """mantissa * 2^exponent as a double, saturating to +/-inf."""
    if big_is_zero(mantissa):
        return 0.0
    value, shift = _window(big_abs(mantissa))
    result = _scale(value, exponent + shift)
    if big_is_negative(mantissa):
        return -result
    return result


def rational_to_double(num: Integer, den: Integer) -> float:
    if big_is_zero(den):
        raise DivisionByZero()
    if big_is_zero(num):
        return 0.0
    num_value, num_shift = _window(big_abs(num))
    den_value, den_shift = _window(big_abs(den))
    result = _scale(num_value / den_value, num_shift - den_shift)
    if big_is_negative(num) != big_is_negative(den):
        return -result
    return result


# ---------------------------------------------------------------------------
# Word64
# ---------------------------------------------------------------------------

W64_MODULUS: Integer = big_from_bits([0, 0, 1])
W64_ALL_ONES: Integer = big_from_bits([MASK32, MASK32, 0])


def w64_normalize(x: Integer) -> Integer:
    """Reduce x into [0, 2^64)."""
    if not big_is_negative(x) and big_compare(x, W64_MODULUS) < 0:
        return x
    return big_mod(x, W64_MODULUS)


def int64_to_word64(x: Fixed64) -> Integer:
    return w64_normalize(big_add(W64_MODULUS, integer_from_int64(x)))


def word64_to_int64(w: Integer) -> Fixed64:
    return integer_to_int64(w)


def word_to_word64(n: int) -> Integer:
    return big_from_bits([n & MASK32, 0])


def word64_to_word(w: Integer) -> int:
    return big_to_word32(w)


def mk_word64(low: int, high: int) -> Integer:
    return big_from_bits([low & MASK32, high & MASK32, 0])


def w64_add(a: Integer, b: Integer) -> Integer:
    return w64_normalize(big_add(a, b))


def w64_sub(a: Integer, b: Integer) -> Integer:
    return w64_normalize(big_sub(a, b))


def w64_mul(a: Integer, b: Integer) -> Integer:
    return w64_normalize(big_mul(a, b))


def w64_quot(a: Integer, b: Integer) -> Integer:
    return big_quot(a, b)


def w64_rem(a: Integer, b: Integer) -> Integer:
    return big_rem(a, b)


def w64_and(a: Integer, b: Integer) -> Integer:
    return big_and(a, b)


def w64_or(a: Integer, b: Integer) -> Integer:
    return big_or(a, b)


def w64_xor(a: Integer, b: Integer) -> Integer:
    return big_xor(a, b)


def w64_not(x: Integer) -> Integer:
    return big_xor(x, W64_ALL_ONES)


def w64_shl(x: Integer, num_bits: int) -> Integer:
    return w64_normalize(big_shl(x, num_bits))


def w64_shr(x: Integer, num_bits: int) -> Integer:
    # A negative count shifts left and can leave the 64-bit range.
    return w64_normalize(big_shr(x, num_bits))


def w64_eq(a: Integer, b: Integer) -> bool:
    return big_eq(a, b)


def w64_compare(a: Integer, b: Integer) -> int:
    return big_compare(a, b)


def w64_to_number(w: Integer) -> float:
    return big_to_number(w)
