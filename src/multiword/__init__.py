"""Multi-word integer arithmetic: public API."""

from __future__ import annotations

from .bridge import (
    W64_MODULUS,
    decode_double_integer,
    encode_double,
    int64_to_word64,
    integer_from_int64,
    integer_to_int64,
    mk_word64,
    rational_to_double,
    w64_add,
    w64_and,
    w64_compare,
    w64_eq,
    w64_mul,
    w64_normalize,
    w64_not,
    w64_or,
    w64_quot,
    w64_rem,
    w64_shl,
    w64_shr,
    w64_sub,
    w64_to_number,
    w64_xor,
    word64_to_int64,
    word64_to_word,
    word_to_word64,
)
from .errors import DivisionByZero, FormatError, MultiwordError
from .fixed64 import (
    MAX_VALUE,
    MIN_VALUE,
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
from .ieee754 import decode_double, decode_float
from .integer import (
    Integer,
    big_abs,
    big_add,
    big_and,
    big_compare,
    big_div,
    big_div_mod,
    big_eq,
    big_from_bits,
    big_from_int,
    big_from_number,
    big_from_string,
    big_mod,
    big_mul,
    big_neg,
    big_not,
    big_or,
    big_quot,
    big_quot_rem,
    big_rem,
    big_shl,
    big_shorten,
    big_shr,
    big_signum,
    big_sub,
    big_to_bits,
    big_to_int32,
    big_to_number,
    big_to_string,
    big_xor,
)
