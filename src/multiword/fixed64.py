"""Exact 64-bit two's-complement integers stored as two signed 32-bit words.

Arithmetic wraps modulo 2^64. MIN_VALUE has no positive counterpart, so
negate(MIN_VALUE) == MIN_VALUE and MIN_VALUE / -1 == MIN_VALUE.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from .errors import DivisionByZero, FormatError
from .words import (
    CORRECTION_PRECISION_BITS,
    FROM_STRING_CHUNK,
    LIMB_BITS,
    MASK32,
    MASK64,
    MAX_RADIX,
    MIN_RADIX,
    SMALL_CACHE_MAX,
    SMALL_CACHE_MIN,
    TO_STRING_CHUNK,
    TWO_PWR_32_DBL,
    TWO_PWR_63_DBL,
    digit_value,
    format_digits,
    to_int32,
)


@dataclass(frozen=True, eq=False)
class Fixed64:
    low: int
    high: int

    def __post_init__(self) -> None:
        if not (-0x80000000 <= self.low <= 0x7FFFFFFF):
            raise ValueError("low word out of signed 32-bit range")
        if not (-0x80000000 <= self.high <= 0x7FFFFFFF):
            raise ValueError("high word out of signed 32-bit range")

    def __eq__(self, other: object) -> bool:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return i64_eq(self, rhs)

    def __hash__(self) -> int:
        return hash(int(self))

    def __lt__(self, other: object) -> bool:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return i64_compare(self, rhs) < 0

    def __le__(self, other: object) -> bool:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return i64_compare(self, rhs) <= 0

    def __gt__(self, other: object) -> bool:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return i64_compare(self, rhs) > 0

    def __ge__(self, other: object) -> bool:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return i64_compare(self, rhs) >= 0

    def __add__(self, other: object) -> Fixed64:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return i64_add(self, rhs)

    def __sub__(self, other: object) -> Fixed64:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return i64_sub(self, rhs)

    def __mul__(self, other: object) -> Fixed64:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return i64_mul(self, rhs)

    def __floordiv__(self, other: object) -> Fixed64:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return i64_div(self, rhs)

    def __mod__(self, other: object) -> Fixed64:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return i64_mod(self, rhs)

    def __and__(self, other: object) -> Fixed64:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return i64_and(self, rhs)

    def __or__(self, other: object) -> Fixed64:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return i64_or(self, rhs)

    def __xor__(self, other: object) -> Fixed64:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return i64_xor(self, rhs)

    def __lshift__(self, num_bits: int) -> Fixed64:
        return i64_shl(self, num_bits)

    def __rshift__(self, num_bits: int) -> Fixed64:
        return i64_shr(self, num_bits)

    def __neg__(self) -> Fixed64:
        return i64_neg(self)

    def __invert__(self) -> Fixed64:
        return i64_not(self)

    def __int__(self) -> int:
        return (self.high << LIMB_BITS) | (self.low & MASK32)

    def __str__(self) -> str:
        return i64_to_string(self)


def _operand(other: object) -> Fixed64 | None:
    if isinstance(other, Fixed64):
        return other
    if isinstance(other, int) and not isinstance(other, bool):
        return i64_from_int(other)
    return None


def _from_host(n: int) -> Fixed64:
    return Fixed64(to_int32(n), to_int32(n >> LIMB_BITS))


def _from_u64(n: int) -> Fixed64:
    return _from_host(n & MASK64)


def _u64(x: Fixed64) -> int:
    return ((x.high & MASK32) << LIMB_BITS) | (x.low & MASK32)


_SMALL_FIXED: tuple[Fixed64, ...] = tuple(
    _from_host(n) for n in range(SMALL_CACHE_MIN, SMALL_CACHE_MAX)
)

ZERO: Fixed64 = _SMALL_FIXED[0 - SMALL_CACHE_MIN]
ONE: Fixed64 = _SMALL_FIXED[1 - SMALL_CACHE_MIN]
NEG_ONE: Fixed64 = _SMALL_FIXED[-1 - SMALL_CACHE_MIN]
MAX_VALUE: Fixed64 = Fixed64(to_int32(0xFFFFFFFF), 0x7FFFFFFF)
MIN_VALUE: Fixed64 = Fixed64(0, to_int32(0x80000000))


# ---------------------------------------------------------------------------
# Construction and conversion
# ---------------------------------------------------------------------------


def i64_from_int(n: int) -> Fixed64:
    """Host integer wrapped modulo 2^64."""
    if SMALL_CACHE_MIN <= n < SMALL_CACHE_MAX:
        return _SMALL_FIXED[n - SMALL_CACHE_MIN]
    return _from_host(n)


def i64_from_bits(low: int, high: int) -> Fixed64:
    return Fixed64(to_int32(low), to_int32(high))


def i64_from_number(value: float) -> Fixed64:
    """Truncate a double toward zero, saturating at the 64-bit bounds."""
    if math.isnan(value):
        return ZERO
    if value <= -TWO_PWR_63_DBL:
        return MIN_VALUE
    if value + 1 >= TWO_PWR_63_DBL:
        return MAX_VALUE
    if value < 0:
        return i64_neg(i64_from_number(-value))
    return Fixed64(
        to_int32(int(math.fmod(value, TWO_PWR_32_DBL))),
        to_int32(int(value / TWO_PWR_32_DBL)),
    )


def i64_to_int32(x: Fixed64) -> int:
    return x.low


def i64_high_bits(x: Fixed64) -> int:
    return x.high


def i64_low_bits(x: Fixed64) -> int:
    return x.low


def i64_low_bits_unsigned(x: Fixed64) -> int:
    return x.low & MASK32


def i64_to_bits(x: Fixed64) -> tuple[int, int]:
    return (x.low & MASK32, x.high & MASK32)


def i64_to_number(x: Fixed64) -> float:
    """Signed value as a double; exact while |x| <= 2^53."""
    return x.high * TWO_PWR_32_DBL + (x.low & MASK32)


def i64_to_unsigned_number(x: Fixed64) -> float:
    """The bit pattern read as an unsigned 64-bit value, as a double."""
    return (x.high & MASK32) * TWO_PWR_32_DBL + (x.low & MASK32)


# ---------------------------------------------------------------------------
# Predicates and comparison
# ---------------------------------------------------------------------------


def i64_is_zero(x: Fixed64) -> bool:
    return x.high == 0 and x.low == 0


def i64_is_negative(x: Fixed64) -> bool:
    return x.high < 0


def i64_is_odd(x: Fixed64) -> bool:
    return (x.low & 1) == 1


def i64_eq(a: Fixed64, b: Fixed64) -> bool:
    return a.high == b.high and a.low == b.low


def i64_compare(a: Fixed64, b: Fixed64) -> int:
    if i64_eq(a, b):
        return 0
    a_neg = i64_is_negative(a)
    b_neg = i64_is_negative(b)
    if a_neg and not b_neg:
        return -1
    if not a_neg and b_neg:
        return 1
    # Same sign: the difference cannot overflow.
    if i64_is_negative(i64_sub(a, b)):
        return -1
    return 1


def i64_lt(a: Fixed64, b: Fixed64) -> bool:
    return i64_compare(a, b) < 0


def i64_le(a: Fixed64, b: Fixed64) -> bool:
    return i64_compare(a, b) <= 0


def i64_gt(a: Fixed64, b: Fixed64) -> bool:
    return i64_compare(a, b) > 0


def i64_ge(a: Fixed64, b: Fixed64) -> bool:
    return i64_compare(a, b) >= 0


# ---------------------------------------------------------------------------
# Arithmetic
# ---------------------------------------------------------------------------


def i64_add(a: Fixed64, b: Fixed64) -> Fixed64:
    lo = (a.low & MASK32) + (b.low & MASK32)
    hi = (a.high & MASK32) + (b.high & MASK32) + (lo >> LIMB_BITS)
    return Fixed64(to_int32(lo), to_int32(hi))


def i64_not(x: Fixed64) -> Fixed64:
    return Fixed64(~x.low, ~x.high)


def i64_neg(x: Fixed64) -> Fixed64:
    if i64_eq(x, MIN_VALUE):
        return MIN_VALUE
    return i64_add(i64_not(x), ONE)


def i64_sub(a: Fixed64, b: Fixed64) -> Fixed64:
    return i64_add(a, i64_neg(b))


def i64_abs(x: Fixed64) -> Fixed64:
    if i64_is_negative(x):
        return i64_neg(x)
    return x


def i64_signum(x: Fixed64) -> Fixed64:
    if i64_is_negative(x):
        return NEG_ONE
    if i64_is_zero(x):
        return ZERO
    return ONE


def i64_mul(a: Fixed64, b: Fixed64) -> Fixed64:
    """Wrapping product from three 32x32 partial products."""
    if i64_is_zero(a) or i64_is_zero(b):
        return ZERO
    if i64_eq(a, MIN_VALUE):
        return MIN_VALUE if i64_is_odd(b) else ZERO
    if i64_eq(b, MIN_VALUE):
        return MIN_VALUE if i64_is_odd(a) else ZERO
    a_lo = a.low & MASK32
    a_hi = a.high & MASK32
    b_lo = b.low & MASK32
    b_hi = b.high & MASK32
    # a_hi * b_hi only contributes above bit 63.
    mid = a_hi * b_lo + a_lo * b_hi
    return _from_u64(a_lo * b_lo + (mid << LIMB_BITS))


def i64_quot(a: Fixed64, b: Fixed64) -> Fixed64:
    """Quotient rounded toward zero."""
    if i64_is_zero(b):
        raise DivisionByZero()
    if i64_is_zero(a):
        return ZERO

    if i64_eq(a, MIN_VALUE):
        if i64_eq(b, ONE) or i64_eq(b, NEG_ONE):
            return MIN_VALUE
        if i64_eq(b, MIN_VALUE):
            return ONE
        # Halve first so MIN_VALUE is never negated.
        half = i64_shr(a, 1)
        approx = i64_shl(i64_quot(half, b), 1)
        if i64_is_zero(approx):
            return ONE if i64_is_negative(b) else NEG_ONE
        rem = i64_sub(a, i64_mul(b, approx))
        return i64_add(approx, i64_quot(rem, b))
    if i64_eq(b, MIN_VALUE):
        return ZERO

    if i64_is_negative(a):
        if i64_is_negative(b):
            return i64_quot(i64_neg(a), i64_neg(b))
        return i64_neg(i64_quot(i64_neg(a), b))
    if i64_is_negative(b):
        return i64_neg(i64_quot(a, i64_neg(b)))

    res = ZERO
    rem = a
    while i64_ge(rem, b):
        approx = max(1.0, math.floor(i64_to_number(rem) / i64_to_number(b)))
        log2 = math.ceil(math.log2(approx))
        delta = 1.0 if log2 <= CORRECTION_PRECISION_BITS else 2.0 ** (
            log2 - CORRECTION_PRECISION_BITS
        )
        approx_res = i64_from_number(approx)
        approx_rem = i64_mul(approx_res, b)
        while i64_is_negative(approx_rem) or i64_gt(approx_rem, rem):
            approx -= delta
            approx_res = i64_from_number(approx)
            approx_rem = i64_mul(approx_res, b)
        if i64_is_zero(approx_res):
            approx_res = ONE
        res = i64_add(res, approx_res)
        rem = i64_sub(rem, approx_rem)
    return res


def i64_rem(a: Fixed64, b: Fixed64) -> Fixed64:
    """Remainder of i64_quot; takes the sign of the dividend."""
    return i64_sub(a, i64_mul(i64_quot(a, b), b))


def i64_quot_rem(a: Fixed64, b: Fixed64) -> tuple[Fixed64, Fixed64]:
    q = i64_quot(a, b)
    return (q, i64_sub(a, i64_mul(q, b)))


def i64_div_mod(a: Fixed64, b: Fixed64) -> tuple[Fixed64, Fixed64]:
    q, r = i64_quot_rem(a, b)
    if not i64_is_zero(r) and i64_is_negative(r) != i64_is_negative(b):
        return (i64_sub(q, ONE), i64_add(r, b))
    return (q, r)


def i64_div(a: Fixed64, b: Fixed64) -> Fixed64:
    """Quotient rounded toward negative infinity."""
    return i64_div_mod(a, b)[0]


def i64_mod(a: Fixed64, b: Fixed64) -> Fixed64:
    return i64_div_mod(a, b)[1]


# ---------------------------------------------------------------------------
# Bitwise operations and shifts
# ---------------------------------------------------------------------------


def i64_and(a: Fixed64, b: Fixed64) -> Fixed64:
    return Fixed64(a.low & b.low, a.high & b.high)


def i64_or(a: Fixed64, b: Fixed64) -> Fixed64:
    return Fixed64(a.low | b.low, a.high | b.high)


def i64_xor(a: Fixed64, b: Fixed64) -> Fixed64:
    return Fixed64(a.low ^ b.low, a.high ^ b.high)


def i64_shl(x: Fixed64, num_bits: int) -> Fixed64:
    num_bits &= 63
    if num_bits == 0:
        return x
    low = x.low & MASK32
    if num_bits < 32:
        high = x.high & MASK32
        return Fixed64(
            to_int32(low << num_bits),
            to_int32((high << num_bits) | (low >> (32 - num_bits))),
        )
    return Fixed64(0, to_int32(low << (num_bits - 32)))


def i64_shr(x: Fixed64, num_bits: int) -> Fixed64:
    """Arithmetic (sign-extending) shift right."""
    num_bits &= 63
    if num_bits == 0:
        return x
    high = x.high
    if num_bits < 32:
        low = x.low & MASK32
        return Fixed64(
            to_int32((low >> num_bits) | (high << (32 - num_bits))),
            high >> num_bits,
        )
    return Fixed64(high >> (num_bits - 32), 0 if high >= 0 else -1)


def i64_shr_unsigned(x: Fixed64, num_bits: int) -> Fixed64:
    """Logical shift right; zeros enter at the top."""
    num_bits &= 63
    if num_bits == 0:
        return x
    high = x.high & MASK32
    if num_bits < 32:
        low = x.low & MASK32
        return Fixed64(
            to_int32((low >> num_bits) | (high << (32 - num_bits))),
            to_int32(high >> num_bits),
        )
    return Fixed64(to_int32(high >> (num_bits - 32)), 0)


# ---------------------------------------------------------------------------
# Strings
# ---------------------------------------------------------------------------


def i64_from_string(text: str, radix: int = 10) -> Fixed64:
    """Parse a digit string, wrapping modulo 2^64 on overflow."""
    if len(text) == 0:
        raise FormatError("number format error: empty string")
    if radix < MIN_RADIX or radix > MAX_RADIX:
        raise FormatError(f"radix out of range: {radix}")
    negative = text[0] == "-"
    digits = text[1:] if negative else text
    if len(digits) == 0:
        raise FormatError("number format error: no digits", text)
    if "-" in digits:
        raise FormatError('number format error: interior "-" character', text)

    result = ZERO
    for i in range(0, len(digits), FROM_STRING_CHUNK):
        window = digits[i : i + FROM_STRING_CHUNK]
        value = 0
        for ch in window:
            d = digit_value(ch, radix)
            if d < 0:
                raise FormatError(
                    f"number format error: invalid digit {ch!r} for radix {radix}",
                    text,
                )
            value = value * radix + d
        power = i64_from_int(radix ** len(window))
        result = i64_add(i64_mul(result, power), i64_from_int(value))
    if negative:
        return i64_neg(result)
    return result


def i64_to_string(x: Fixed64, radix: int = 10) -> str:
    if radix < MIN_RADIX or radix > MAX_RADIX:
        raise FormatError(f"radix out of range: {radix}")
    if i64_is_zero(x):
        return "0"
    if i64_is_negative(x):
        if i64_eq(x, MIN_VALUE):
            # Peel off the last digit so MIN_VALUE is never negated.
            radix_long = i64_from_int(radix)
            q = i64_quot(x, radix_long)
            last = i64_to_int32(i64_sub(i64_mul(q, radix_long), x))
            return i64_to_string(q, radix) + format_digits(last, radix)
        return "-" + i64_to_string(i64_neg(x), radix)

    radix_to_power = i64_from_int(radix**TO_STRING_CHUNK)
    rem = x
    result = ""
    while True:
        rem_div = i64_quot(rem, radix_to_power)
        group = i64_to_int32(i64_sub(rem, i64_mul(rem_div, radix_to_power)))
        digits = format_digits(group & MASK32, radix)
        rem = rem_div
        if i64_is_zero(rem):
            return digits + result
        result = digits.rjust(TO_STRING_CHUNK, "0") + result
