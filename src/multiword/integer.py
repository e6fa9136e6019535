"""Arbitrary-precision signed integers over 32-bit limbs.

An Integer is a little-endian tuple of unsigned 32-bit limbs plus a sign
word (0 or -1). Every limb position past the end of the tuple takes the
sign word, which gives two's-complement semantics at infinite precision:
bitwise operators and arithmetic shifts on negative values behave as they
would on an infinitely wide register.

Canonical form: the most significant stored limb never equals the sign
word. Zero is the empty tuple with sign 0.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Sequence

from .errors import DivisionByZero, FormatError
from .words import (
    CORRECTION_PRECISION_BITS,
    ESTIMATE_WINDOW_BITS,
    FROM_STRING_CHUNK,
    LIMB_BITS,
    MASK32,
    MAX_RADIX,
    MIN_RADIX,
    SIGN_BIT32,
    SMALL_CACHE_MAX,
    SMALL_CACHE_MIN,
    TO_STRING_CHUNK,
    TWO_PWR_32_DBL,
    digit_value,
    format_digits,
    sign_limb,
    to_int32,
)


# ---------------------------------------------------------------------------
# Layer 1: Representation
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class Integer:
    limbs: tuple[int, ...]
    sign: int

    def __post_init__(self) -> None:
        if self.sign != 0 and self.sign != -1:
            raise ValueError("sign must be 0 or -1")
        for limb in self.limbs:
            if limb < 0 or limb > MASK32:
                raise ValueError("limb out of 32-bit range")
        if len(self.limbs) > 0 and self.limbs[-1] == sign_limb(self.sign):
            raise ValueError("limbs are not in canonical form")

    def __eq__(self, other: object) -> bool:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return big_eq(self, rhs)

    def __hash__(self) -> int:
        return hash(int(self))

    def __lt__(self, other: object) -> bool:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return big_compare(self, rhs) < 0

    def __le__(self, other: object) -> bool:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return big_compare(self, rhs) <= 0

    def __gt__(self, other: object) -> bool:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return big_compare(self, rhs) > 0

    def __ge__(self, other: object) -> bool:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return big_compare(self, rhs) >= 0

    def __add__(self, other: object) -> Integer:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return big_add(self, rhs)

    def __sub__(self, other: object) -> Integer:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return big_sub(self, rhs)

    def __mul__(self, other: object) -> Integer:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return big_mul(self, rhs)

    def __floordiv__(self, other: object) -> Integer:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return big_div(self, rhs)

    def __mod__(self, other: object) -> Integer:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return big_mod(self, rhs)

    def __and__(self, other: object) -> Integer:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return big_and(self, rhs)

    def __or__(self, other: object) -> Integer:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return big_or(self, rhs)

    def __xor__(self, other: object) -> Integer:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return big_xor(self, rhs)

    def __lshift__(self, num_bits: int) -> Integer:
        return big_shl(self, num_bits)

    def __rshift__(self, num_bits: int) -> Integer:
        return big_shr(self, num_bits)

    def __neg__(self) -> Integer:
        return big_neg(self)

    def __invert__(self) -> Integer:
        return big_not(self)

    def __abs__(self) -> Integer:
        return big_abs(self)

    def __bool__(self) -> bool:
        return not big_is_zero(self)

    def __int__(self) -> int:
        value = 0
        for limb in reversed(self.limbs):
            value = (value << LIMB_BITS) | limb
        if self.sign < 0:
            value -= 1 << (LIMB_BITS * len(self.limbs))
        return value

    def __str__(self) -> str:
        return big_to_string(self)

    def __repr__(self) -> str:
        return f"Integer({big_to_string(self)})"


def _operand(other: object) -> Integer | None:
    if isinstance(other, Integer):
        return other
    if isinstance(other, int) and not isinstance(other, bool):
        return big_from_int(other)
    return None


def _make(limbs: list[int], sign: int) -> Integer:
    """Build a canonical Integer, trimming high limbs equal to the sign word."""
    top = sign_limb(sign)
    n = len(limbs)
    while n > 0 and (limbs[n - 1] & MASK32) == top:
        n -= 1
    return Integer(tuple(limb & MASK32 for limb in limbs[:n]), sign)


def _limb(x: Integer, index: int) -> int:
    """Unsigned limb at index, following the sign-extension convention."""
    if index < 0:
        return 0
    if index < len(x.limbs):
        return x.limbs[index]
    return sign_limb(x.sign)


def _from_host(n: int) -> Integer:
    sign = -1 if n < 0 else 0
    limbs: list[int] = []
    while n != 0 and n != -1:
        limbs.append(n & MASK32)
        n >>= LIMB_BITS
    return _make(limbs, sign)


# Built once at import; never mutated.
_SMALL_INTEGERS: tuple[Integer, ...] = tuple(
    _from_host(n) for n in range(SMALL_CACHE_MIN, SMALL_CACHE_MAX)
)

ZERO: Integer = _SMALL_INTEGERS[0 - SMALL_CACHE_MIN]
ONE: Integer = _SMALL_INTEGERS[1 - SMALL_CACHE_MIN]
MINUS_ONE: Integer = _SMALL_INTEGERS[-1 - SMALL_CACHE_MIN]


# ---------------------------------------------------------------------------
# Layer 2: Construction and limb access
# ---------------------------------------------------------------------------


def big_from_int(n: int) -> Integer:
    """Exact conversion from a host integer of any size."""
    if SMALL_CACHE_MIN <= n < SMALL_CACHE_MAX:
        return _SMALL_INTEGERS[n - SMALL_CACHE_MIN]
    return _from_host(n)


def big_from_number(value: float) -> Integer:
    """Convert a double, truncating toward zero. NaN and infinities map to zero."""
    if math.isnan(value) or math.isinf(value):
        return ZERO
    if value < 0:
        return big_neg(big_from_number(-value))
    limbs: list[int] = []
    while value >= 1.0:
        chunk = math.fmod(value, TWO_PWR_32_DBL)
        limbs.append(int(chunk))
        value = (value - chunk) / TWO_PWR_32_DBL
    return _make(limbs, 0)


def big_from_bits(bits: Sequence[int]) -> Integer:
    """Build from little-endian 32-bit words; bit 31 of the last word is the sign."""
    if len(bits) == 0:
        return ZERO
    sign = -1 if bits[-1] & SIGN_BIT32 else 0
    return _make(list(bits), sign)


def big_get_bits(x: Integer, index: int) -> int:
    """Signed 32-bit word at index."""
    return to_int32(_limb(x, index))


def big_get_bits_unsigned(x: Integer, index: int) -> int:
    return _limb(x, index)


def big_to_bits(x: Integer) -> tuple[int, int]:
    """The low two limbs as unsigned words (low, high)."""
    return (_limb(x, 0), _limb(x, 1))


def big_to_int32(x: Integer) -> int:
    """Low word as a signed 32-bit value. Higher limbs are discarded."""
    return to_int32(_limb(x, 0))


def big_to_word32(x: Integer) -> int:
    return _limb(x, 0)


def big_to_number(x: Integer) -> float:
    """Nearest-ish double. Exact while |x| <= 2^53; overflows to +/-inf."""
    if big_is_negative(x):
        return -big_to_number(big_neg(x))
    value = 0.0
    for limb in reversed(x.limbs):
        value = value * TWO_PWR_32_DBL + limb
    return value


def big_is_zero(x: Integer) -> bool:
    return x.sign == 0 and len(x.limbs) == 0


def big_is_negative(x: Integer) -> bool:
    return x.sign == -1


def big_is_odd(x: Integer) -> bool:
    return (_limb(x, 0) & 1) != 0


def big_bit_length(x: Integer) -> int:
    """Bits needed for |x| excluding sign; negative values measure ~x."""
    if big_is_negative(x):
        return big_bit_length(big_not(x))
    if len(x.limbs) == 0:
        return 0
    return (len(x.limbs) - 1) * LIMB_BITS + x.limbs[-1].bit_length()


# ---------------------------------------------------------------------------
# Layer 3: Comparison
# ---------------------------------------------------------------------------


def big_eq(a: Integer, b: Integer) -> bool:
    # Canonical form makes structural equality exact.
    return a.sign == b.sign and a.limbs == b.limbs


def big_ne(a: Integer, b: Integer) -> bool:
    return not big_eq(a, b)


def big_compare(a: Integer, b: Integer) -> int:
    """Three-way comparison: -1, 0 or 1.

    Same-sign values order like their limb sequences read as unsigned
    numbers from the top, since both share the same sign extension.
    """
    if a.sign != b.sign:
        return -1 if a.sign < 0 else 1
    i = max(len(a.limbs), len(b.limbs)) - 1
    while i >= 0:
        la = _limb(a, i)
        lb = _limb(b, i)
        if la != lb:
            return -1 if la < lb else 1
        i -= 1
    return 0


def big_compare_int(x: Integer, n: int) -> int:
    return big_compare(x, big_from_int(n))


def big_lt(a: Integer, b: Integer) -> bool:
    return big_compare(a, b) < 0


def big_le(a: Integer, b: Integer) -> bool:
    return big_compare(a, b) <= 0


def big_gt(a: Integer, b: Integer) -> bool:
    return big_compare(a, b) > 0


def big_ge(a: Integer, b: Integer) -> bool:
    return big_compare(a, b) >= 0


# ---------------------------------------------------------------------------
# Layer 4: Addition, negation, multiplication
# ---------------------------------------------------------------------------


def big_add(a: Integer, b: Integer) -> Integer:
    n = max(len(a.limbs), len(b.limbs))
    arr: list[int] = []
    carry = 0
    # One extra limb holds the carry out of the top stored limb, and its
    # bit 31 is the sign of the sum.
    for i in range(n + 1):
        s = _limb(a, i) + _limb(b, i) + carry
        arr.append(s & MASK32)
        carry = s >> LIMB_BITS
    return big_from_bits(arr)


def big_not(x: Integer) -> Integer:
    return Integer(tuple(~limb & MASK32 for limb in x.limbs), ~x.sign)


def big_neg(x: Integer) -> Integer:
    return big_add(big_not(x), ONE)


def big_sub(a: Integer, b: Integer) -> Integer:
    return big_add(a, big_neg(b))


def big_abs(x: Integer) -> Integer:
    if big_is_negative(x):
        return big_neg(x)
    return x


def big_signum(x: Integer) -> Integer:
    cmp = big_compare(x, ZERO)
    if cmp > 0:
        return ONE
    if cmp < 0:
        return MINUS_ONE
    return ZERO


def big_mul(a: Integer, b: Integer) -> Integer:
    if big_is_zero(a) or big_is_zero(b):
        return ZERO
    if big_is_negative(a):
        if big_is_negative(b):
            return big_mul(big_neg(a), big_neg(b))
        return big_neg(big_mul(big_neg(a), b))
    if big_is_negative(b):
        return big_neg(big_mul(a, big_neg(b)))

    if len(a.limbs) == 1 and len(b.limbs) == 1:
        p = a.limbs[0] * b.limbs[0]
        return _make([p & MASK32, p >> LIMB_BITS], 0)

    la = len(a.limbs)
    lb = len(b.limbs)
    arr = [0] * (la + lb)
    for i in range(la):
        ai = a.limbs[i]
        carry = 0
        for j in range(lb):
            t = arr[i + j] + ai * b.limbs[j] + carry
            arr[i + j] = t & MASK32
            carry = t >> LIMB_BITS
        arr[i + lb] = carry
    return _make(arr, 0)


# ---------------------------------------------------------------------------
# Layer 5: Division
# ---------------------------------------------------------------------------


def _estimate_quotient(rem: Integer, divisor: Integer) -> Integer:
    """Floating-point estimate of rem / divisor for positive operands.

    Both operands are cut to their top ESTIMATE_WINDOW_BITS bits before
    conversion to doubles, so the estimate stays finite at any magnitude.
    """
    rem_shift = max(0, big_bit_length(rem) - ESTIMATE_WINDOW_BITS)
    div_shift = max(0, big_bit_length(divisor) - ESTIMATE_WINDOW_BITS)
    ratio = big_to_number(big_shr(rem, rem_shift)) / big_to_number(
        big_shr(divisor, div_shift)
    )
    mantissa, exponent = math.frexp(ratio)
    exponent += rem_shift - div_shift
    if exponent <= 53:
        approx = big_from_number(float(math.floor(math.ldexp(mantissa, exponent))))
    else:
        approx = big_shl(big_from_number(math.ldexp(mantissa, 53)), exponent - 53)
    if big_compare(approx, ONE) < 0:
        return ONE
    return approx


def _quot_nonnegative(a: Integer, b: Integer) -> Integer:
    res = ZERO
    rem = a
    while big_compare(rem, b) >= 0:
        approx = _estimate_quotient(rem, b)
        log2 = big_bit_length(approx)
        if log2 <= CORRECTION_PRECISION_BITS:
            delta = ONE
        else:
            delta = big_shl(ONE, log2 - CORRECTION_PRECISION_BITS)
        approx_rem = big_mul(approx, b)
        while big_compare(approx_rem, rem) > 0:
            approx = big_sub(approx, delta)
            approx_rem = big_mul(approx, b)
        res = big_add(res, approx)
        rem = big_sub(rem, approx_rem)
    return res


def big_quot(a: Integer, b: Integer) -> Integer:
    """Quotient rounded toward zero."""
    if big_is_zero(b):
        raise DivisionByZero()
    if big_is_zero(a):
        return ZERO
    if big_is_negative(a):
        if big_is_negative(b):
            return big_quot(big_neg(a), big_neg(b))
        return big_neg(big_quot(big_neg(a), b))
    if big_is_negative(b):
        return big_neg(big_quot(a, big_neg(b)))
    return _quot_nonnegative(a, b)


def big_rem(a: Integer, b: Integer) -> Integer:
    """Remainder of big_quot; takes the sign of the dividend."""
    return big_quot_rem(a, b)[1]


def big_quot_rem(a: Integer, b: Integer) -> tuple[Integer, Integer]:
    q = big_quot(a, b)
    return (q, big_sub(a, big_mul(q, b)))


def big_div(a: Integer, b: Integer) -> Integer:
    """Quotient rounded toward negative infinity."""
    return big_div_mod(a, b)[0]


def big_mod(a: Integer, b: Integer) -> Integer:
    """Remainder of big_div; zero or takes the sign of the divisor."""
    return big_div_mod(a, b)[1]


def big_div_mod(a: Integer, b: Integer) -> tuple[Integer, Integer]:
    q, r = big_quot_rem(a, b)
    if not big_is_zero(r) and big_is_negative(r) != big_is_negative(b):
        return (big_sub(q, ONE), big_add(r, b))
    return (q, r)


# ---------------------------------------------------------------------------
# Layer 6: Bitwise operations and shifts
# ---------------------------------------------------------------------------


def _limbwise(
    a: Integer, b: Integer, sign: int, op: Callable[[int, int], int]
) -> Integer:
    n = max(len(a.limbs), len(b.limbs))
    return _make([op(_limb(a, i), _limb(b, i)) for i in range(n)], sign)


def big_and(a: Integer, b: Integer) -> Integer:
    return _limbwise(a, b, a.sign & b.sign, lambda x, y: x & y)


def big_or(a: Integer, b: Integer) -> Integer:
    return _limbwise(a, b, a.sign | b.sign, lambda x, y: x | y)


def big_xor(a: Integer, b: Integer) -> Integer:
    return _limbwise(a, b, a.sign ^ b.sign, lambda x, y: x ^ y)


def big_shl(x: Integer, num_bits: int) -> Integer:
    """Multiply by 2^num_bits. A negative count shifts right instead."""
    if num_bits < 0:
        return big_shr(x, -num_bits)
    arr_delta = num_bits >> 5
    bit_delta = num_bits & 31
    length = len(x.limbs) + arr_delta + (1 if bit_delta > 0 else 0)
    arr: list[int] = []
    for i in range(length):
        if bit_delta > 0:
            arr.append(
                (_limb(x, i - arr_delta) << bit_delta)
                | (_limb(x, i - arr_delta - 1) >> (LIMB_BITS - bit_delta))
            )
        else:
            arr.append(_limb(x, i - arr_delta))
    return _make(arr, x.sign)


def big_shr(x: Integer, num_bits: int) -> Integer:
    """Arithmetic shift right (floor division by 2^num_bits)."""
    if num_bits < 0:
        return big_shl(x, -num_bits)
    arr_delta = num_bits >> 5
    bit_delta = num_bits & 31
    length = len(x.limbs) - arr_delta
    arr: list[int] = []
    for i in range(max(0, length)):
        if bit_delta > 0:
            arr.append(
                (_limb(x, i + arr_delta) >> bit_delta)
                | (_limb(x, i + arr_delta + 1) << (LIMB_BITS - bit_delta))
            )
        else:
            arr.append(_limb(x, i + arr_delta))
    return _make(arr, x.sign)


def big_shorten(x: Integer, num_bits: int) -> Integer:
    """Wrap x to a num_bits-wide two's-complement value."""
    if num_bits < 1:
        raise ValueError("num_bits must be positive")
    arr_index = (num_bits - 1) >> 5
    bit_index = (num_bits - 1) & 31
    bits = [_limb(x, i) for i in range(arr_index)]
    sig_bits = MASK32 if bit_index == 31 else (1 << (bit_index + 1)) - 1
    val = _limb(x, arr_index) & sig_bits
    if val & (1 << bit_index):
        bits.append(val | (MASK32 - sig_bits))
        return _make(bits, -1)
    bits.append(val)
    return _make(bits, 0)


# ---------------------------------------------------------------------------
# Layer 7: Strings
# ---------------------------------------------------------------------------


def _check_radix(radix: int) -> None:
    if radix < MIN_RADIX or radix > MAX_RADIX:
        raise FormatError(f"radix out of range: {radix}")


def _parse_window(window: str, radix: int, text: str) -> int:
    value = 0
    for ch in window:
        d = digit_value(ch, radix)
        if d < 0:
            raise FormatError(
                f"number format error: invalid digit {ch!r} for radix {radix}", text
            )
        value = value * radix + d
    return value


def big_from_string(text: str, radix: int = 10) -> Integer:
    """Parse an optionally '-'-prefixed digit string."""
    if len(text) == 0:
        raise FormatError("number format error: empty string")
    _check_radix(radix)
    negative = text[0] == "-"
    digits = text[1:] if negative else text
    if len(digits) == 0:
        raise FormatError("number format error: no digits", text)
    if "-" in digits:
        raise FormatError('number format error: interior "-" character', text)

    radix_to_power = big_from_int(radix**FROM_STRING_CHUNK)
    result = ZERO
    for i in range(0, len(digits), FROM_STRING_CHUNK):
        window = digits[i : i + FROM_STRING_CHUNK]
        value = big_from_int(_parse_window(window, radix, text))
        if len(window) < FROM_STRING_CHUNK:
            power = big_from_int(radix ** len(window))
            result = big_add(big_mul(result, power), value)
        else:
            result = big_add(big_mul(result, radix_to_power), value)
    if negative:
        return big_neg(result)
    return result


def big_to_string(x: Integer, radix: int = 10) -> str:
    _check_radix(radix)
    if big_is_zero(x):
        return "0"
    if big_is_negative(x):
        return "-" + big_to_string(big_neg(x), radix)

    radix_to_power = big_from_int(radix**TO_STRING_CHUNK)
    rem = x
    result = ""
    while True:
        rem_div, group = big_quot_rem(rem, radix_to_power)
        digits = format_digits(big_to_word32(group), radix)
        rem = rem_div
        if big_is_zero(rem):
            return digits + result
        result = digits.rjust(TO_STRING_CHUNK, "0") + result
