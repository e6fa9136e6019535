"""IEEE 754 bit access and mantissa/exponent decomposition."""

import math
import struct

# ---------------------------------------------------------------------------
# Layer 1: Constants and bit patterns
# ---------------------------------------------------------------------------

F64_SIGN: int = 0x8000000000000000
F64_EXP_BIAS: int = 1075  # 1023 + 52 fraction bits
F32_EXP_BIAS: int = 150  # 127 + 23 fraction bits
F64_DENORMAL_EXP: int = 1 - F64_EXP_BIAS
F32_DENORMAL_EXP: int = 1 - F32_EXP_BIAS


def f64_to_bits(x: float) -> int:
    return struct.unpack("<Q", struct.pack("<d", x))[0]


def bits_to_f64(ui: int) -> float:
    return struct.unpack("<d", struct.pack("<Q", ui))[0]


def f32_to_bits(x: float) -> int:
    """Bits of x rounded to single precision."""
    return struct.unpack("<I", struct.pack("<f", x))[0]


def sign_f64(ui: int) -> int:
    return (ui >> 63) & 1


def exp_f64(ui: int) -> int:
    return (ui >> 52) & 0x7FF


def frac_f64(ui: int) -> int:
    return ui & 0x000FFFFFFFFFFFFF


# ---------------------------------------------------------------------------
# Layer 2: Classification
# ---------------------------------------------------------------------------


def is_double_finite(x: float) -> bool:
    return math.isfinite(x)


def is_double_nan(x: float) -> bool:
    return math.isnan(x)


def is_double_infinite(x: float) -> bool:
    return math.isinf(x)


def is_double_negative_zero(x: float) -> bool:
    return f64_to_bits(x) == F64_SIGN


# ---------------------------------------------------------------------------
# Layer 3: Decomposition
# ---------------------------------------------------------------------------


def decode_double(x: float) -> tuple[int, int, int, int]:
    """Split a finite double into (sign, man_high, man_low, exponent).

    sign is -1 or 1, man_high holds mantissa bits 32..52 (the implicit
    leading 1 at bit 20 for normal numbers), man_low bits 0..31, and
    |x| == (man_high * 2^32 + man_low) * 2^exponent. Denormals keep
    exponent -1074 and get no implicit bit.
    """
    ui = f64_to_bits(x)
    sign = -1 if sign_f64(ui) else 1
    raw_exp = exp_f64(ui)
    frac = frac_f64(ui)
    man_high = frac >> 32
    man_low = frac & 0xFFFFFFFF
    if raw_exp == 0:
        exponent = F64_DENORMAL_EXP
    else:
        exponent = raw_exp - F64_EXP_BIAS
        man_high |= 1 << 20
    return (sign, man_high, man_low, exponent)


def decode_float(x: float) -> tuple[int, int]:
    """Single-precision decomposition into (signed mantissa, exponent)."""
    ui = f32_to_bits(x)
    sign = -1 if (ui >> 31) & 1 else 1
    raw_exp = (ui >> 23) & 0xFF
    man = ui & 0x7FFFFF
    if raw_exp == 0:
        exponent = F32_DENORMAL_EXP
    else:
        exponent = raw_exp - F32_EXP_BIAS
        man |= 1 << 23
    return (sign * man, exponent)
