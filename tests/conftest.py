"""Pytest configuration for the multiword test suite."""

import random
import sys
from pathlib import Path

import pytest

# Add src directory to path so the suite runs without installation
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

SEED = 0xB16
DEFAULT_ROUNDS = 500

MASK64 = 0xFFFFFFFFFFFFFFFF

# Magnitudes likely to trigger carry, sign and precision edge cases
SPECIAL_MAGNITUDES = [
    0,
    1,
    2,
    0x7F,  # top of the small-value cache
    0x80,
    0xFFFF,  # half-limb boundary
    0x10000,
    2**24 - 1,
    2**24,
    2**31 - 1,  # int32 boundary
    2**31,
    2**32 - 1,  # limb boundary
    2**32,
    2**32 + 1,
    2**48,
    2**53 - 1,  # double precision boundary
    2**53,
    2**53 + 1,
    2**63 - 1,  # int64 boundary
    2**63,
    2**64 - 1,
    2**64,
    2**96,
    2**128 - 1,
]


def pytest_addoption(parser):
    """Add --rounds option."""
    parser.addoption(
        "--rounds",
        action="store",
        type=int,
        default=DEFAULT_ROUNDS,
        help="Random rounds per property test",
    )


@pytest.fixture
def rounds(request) -> int:
    return request.config.getoption("rounds")


@pytest.fixture
def rng() -> random.Random:
    return random.Random(SEED)


def weighted_int(rng: random.Random, max_bits: int = 256) -> int:
    """Generate a signed integer weighted toward boundary cases."""
    r: int = rng.randint(0, 99)
    if r < 25:
        # 25%: special magnitude
        v = rng.choice(SPECIAL_MAGNITUDES)
    elif r < 40:
        # 15%: special magnitude nudged by a few units
        v = abs(rng.choice(SPECIAL_MAGNITUDES) + rng.randint(-3, 3))
    elif r < 55:
        # 15%: power of two, or one below it
        v = (1 << rng.randint(0, max_bits)) - rng.randint(0, 1)
    else:
        # 45%: random bit length
        v = rng.getrandbits(rng.randint(1, max_bits))
    if rng.randint(0, 1):
        return -v
    return v


def wrap64(v: int) -> int:
    """Reduce a host integer to the signed 64-bit range."""
    v &= MASK64
    if v >= 2**63:
        return v - 2**64
    return v


def weighted_i64(rng: random.Random) -> int:
    r: int = rng.randint(0, 99)
    if r < 10:
        return rng.choice([-(2**63), 2**63 - 1, -1, 0, 1, -(2**63) + 1])
    return wrap64(weighted_int(rng, 64))


def trunc_quot(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        return -q
    return q


def to_base(v: int, radix: int) -> str:
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    if v == 0:
        return "0"
    sign = "-" if v < 0 else ""
    v = abs(v)
    out = []
    while v:
        out.append(digits[v % radix])
        v //= radix
    return sign + "".join(reversed(out))
