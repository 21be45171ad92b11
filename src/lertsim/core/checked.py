"""
Checked unsigned arithmetic for a fixed word width.

Python integers never wrap, but the schedule is meant to be computed with
fixed-width counters. A wrapped period would give a plausible-looking but
wrong schedule, so every power, product and sum on the hot path goes
through these helpers and raises ArithmeticOverflow instead.
"""

from __future__ import annotations

from numbers import Integral

from lertsim.core.errors import ArithmeticOverflow


def word_max(word_bits: int) -> int:
    """Largest value representable in an unsigned word of `word_bits` bits."""
    return (1 << word_bits) - 1


def _check(value: int, word_bits: int, what: str) -> int:
    if value > word_max(word_bits):
        raise ArithmeticOverflow(
            f"{what} = {value} does not fit in {word_bits} bits"
        )
    return value


def checked_add(a: int, b: int, word_bits: int) -> int:
    return _check(a + b, word_bits, f"{a} + {b}")


def checked_mul(a: int, b: int, word_bits: int) -> int:
    return _check(a * b, word_bits, f"{a} * {b}")


def checked_pow(base: int, exp: int, word_bits: int) -> int:
    """
    Compute base**exp, failing as soon as a partial product overflows.

    Uses square-and-multiply so huge exponents fail fast instead of
    building an enormous integer first.
    """
    limit = word_max(word_bits)
    result = 1
    b = base
    e = exp
    while e > 0:
        if e & 1:
            result *= b
            if result > limit:
                raise ArithmeticOverflow(
                    f"{base}**{exp} does not fit in {word_bits} bits"
                )
        e >>= 1
        if e:
            b *= b
            if b > limit:
                raise ArithmeticOverflow(
                    f"{base}**{exp} does not fit in {word_bits} bits"
                )
    return result


def add_mod(a: int, b: int, modulus: int) -> int:
    """(a + b) mod modulus for a, b in [0, modulus), without forming a + b."""
    gap = modulus - b
    return a - gap if a >= gap else a + b


def is_int(value) -> bool:
    """True for real integers (including numpy's), False for bools."""
    return isinstance(value, Integral) and not isinstance(value, bool)
