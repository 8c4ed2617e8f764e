"""Q128.128 fixed-point base-2 logarithm.

Values are integers scaled by 2^128. The logarithm is computed with integer
arithmetic only: the integer part comes from the position of the most
significant set bit, and each fractional bit from one squaring of the
normalized mantissa (y^2 >= 2 means the next bit is 1, after which y is
halved back into [1, 2)).

Error bound: every squaring truncates at most one unit in the last place,
a relative error of at most 2^-128 in y. An error introduced at step k moves
the result by at most 2^-128 / (k-th power of 2 * ln 2), so the summed
truncation error plus the dropped remainder stays below 2^-125 in absolute
terms. The routine is deterministic and monotonic non-decreasing: every
step is a monotone function of its input.
"""

from __future__ import annotations

from swaprouter.constants import Q128_FRACTIONAL_BITS, Q128_ONE

__all__ = [
    # Errors
    "Log2DomainError",
    # Functions
    "log2_q128",
    "to_q128",
    # Constants
    "FRACTIONAL_ITERATIONS",
    "MAX_ABS_ERROR",
]

# One fractional bit of precision per iteration
FRACTIONAL_ITERATIONS = Q128_FRACTIONAL_BITS

_TWO = Q128_ONE << 1

# Documented absolute error bound of log2_q128, in Q128.128 units (2^-125)
MAX_ABS_ERROR = 1 << (Q128_FRACTIONAL_BITS - 125)


class Log2DomainError(ValueError):
    """log2 called with a non-positive argument.

    Zero rates are mapped to an infinite cost before the logarithm is taken,
    so reaching this is a caller bug rather than a recoverable condition.
    """

    pass


def to_q128(numerator: int, denominator: int) -> int:
    """Convert the ratio numerator/denominator to Q128.128 (floor)."""
    if denominator <= 0:
        raise ValueError(f"Denominator must be positive, got {denominator}")
    return (numerator << Q128_FRACTIONAL_BITS) // denominator


def log2_q128(x: int) -> int:
    """Compute log2(x) where x is an unsigned Q128.128 value.

    Args:
        x: Positive Q128.128 value (x / 2^128 is the real argument)

    Returns:
        log2 of the argument as a signed Q128.128 integer, truncated toward
        negative infinity in its fractional part.

    Raises:
        Log2DomainError: If x <= 0

    Examples:
        log2_q128(1 << 128) == 0
        log2_q128(2 << 128) == 1 << 128
        log2_q128(1 << 127) == -(1 << 128)
    """
    if x <= 0:
        raise Log2DomainError(f"log2 undefined for non-positive argument {x}")

    # Integer part: distance of the most significant bit from the binary point
    integer_part = x.bit_length() - 1 - Q128_FRACTIONAL_BITS
    if integer_part >= 0:
        y = x >> integer_part
    else:
        y = x << -integer_part
    result = integer_part << Q128_FRACTIONAL_BITS

    # y is now in [1, 2)
    if y == Q128_ONE:
        return result

    delta = Q128_ONE >> 1
    for _ in range(FRACTIONAL_ITERATIONS):
        y = (y * y) >> Q128_FRACTIONAL_BITS
        if y >= _TWO:
            y >>= 1
            result += delta
        delta >>= 1

    return result
