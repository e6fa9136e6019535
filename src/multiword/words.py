"""32-bit word helpers shared by the Integer and Fixed64 engines."""

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

LIMB_BITS: int = 32
MASK32: int = 0xFFFFFFFF
MASK64: int = 0xFFFFFFFFFFFFFFFF
SIGN_BIT32: int = 0x80000000
TWO_PWR_32_DBL: float = 4294967296.0
TWO_PWR_63_DBL: float = 9223372036854775808.0

SMALL_CACHE_MIN: int = -128
SMALL_CACHE_MAX: int = 128

TO_STRING_CHUNK: int = 6
FROM_STRING_CHUNK: int = 8

ESTIMATE_WINDOW_BITS: int = 64
CORRECTION_PRECISION_BITS: int = 48

MIN_RADIX: int = 2
MAX_RADIX: int = 36

DIGITS: str = "0123456789abcdefghijklmnopqrstuvwxyz"


# ---------------------------------------------------------------------------
# Word conversions
# ---------------------------------------------------------------------------


def to_int32(n: int) -> int:
    """Wrap a host integer to a signed 32-bit word."""
    n = n & MASK32
    if n & SIGN_BIT32:
        return n - 0x100000000
    return n


def sign_limb(sign: int) -> int:
    """The unsigned limb value every position beyond the stored limbs takes."""
    return sign & MASK32


# ---------------------------------------------------------------------------
# Radix digits
# ---------------------------------------------------------------------------


def digit_value(ch: str, radix: int) -> int:
    """Value of one digit character, or -1 if it is not a digit of radix."""
    idx = DIGITS.find(ch.lower())
    if idx < 0 or idx >= radix:
        return -1
    return idx


def format_digits(value: int, radix: int) -> str:
    """Render a non-negative host integer (one output group) in radix."""
    if value == 0:
        return "0"
    out: list[str] = []
    while value > 0:
        out.append(DIGITS[value % radix])
        value //= radix
    out.reverse()
    return "".join(out)
