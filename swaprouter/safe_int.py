"""Checked integer arithmetic for token amounts.

Ledger balances, allowances and venue reserves are unsigned 256-bit
quantities. SafeInt wraps an int so that the arithmetic used to move them
fails loudly instead of producing a value no ledger could hold:
- Subtraction below zero raises Underflow
- Division by zero raises DivisionByZero
- to_uint256() rejects values outside [0, 2^256-1]

Usage:
    from swaprouter.safe_int import S

    balance = (S(balance) - amount).to_uint256()  # Raises Underflow if short
"""

from __future__ import annotations

from swaprouter.constants import UINT256_MAX


class SafeIntError(ArithmeticError):
    """Base class for SafeInt arithmetic errors."""

    pass


class DivisionByZero(SafeIntError):
    """Division by zero."""

    pass


class Underflow(SafeIntError):
    """Subtraction would go below zero."""

    pass


class Uint256Overflow(SafeIntError):
    """Value does not fit in a uint256."""

    pass


class SafeInt:
    """Non-negative integer amount with checked operators.

    Attributes:
        value: The wrapped integer (read-only)
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | SafeInt) -> None:
        if isinstance(value, SafeInt):
            self._value = value._value
        elif isinstance(value, int) and not isinstance(value, bool):
            self._value = value
        else:
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")

    @property
    def value(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"SafeInt({self._value})"

    def __hash__(self) -> int:
        return hash(self._value)

    def __add__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value + _raw(other))

    __radd__ = __add__

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        """Subtract, raising Underflow on a negative result."""
        other_val = _raw(other)
        if other_val > self._value:
            raise Underflow(f"Underflow: {self._value} - {other_val}")
        return SafeInt(self._value - other_val)

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value * _raw(other))

    __rmul__ = __mul__

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        """Floor division, raising DivisionByZero on a zero divisor."""
        other_val = _raw(other)
        if other_val == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return SafeInt(self._value // other_val)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (SafeInt, int)):
            return self._value == _raw(other)
        return NotImplemented

    def __lt__(self, other: SafeInt | int) -> bool:
        return self._value < _raw(other)

    def __le__(self, other: SafeInt | int) -> bool:
        return self._value <= _raw(other)

    def __gt__(self, other: SafeInt | int) -> bool:
        return self._value > _raw(other)

    def __ge__(self, other: SafeInt | int) -> bool:
        return self._value >= _raw(other)

    def __int__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        return self._value != 0

    def to_uint256(self) -> int:
        """Unwrap, validating the uint256 range.

        Raises:
            Uint256Overflow: If the value is negative or above 2^256-1
        """
        if not 0 <= self._value <= UINT256_MAX:
            raise Uint256Overflow(f"Value outside uint256 range: {self._value}")
        return self._value


def _raw(x: SafeInt | int) -> int:
    if isinstance(x, SafeInt):
        return x._value
    return x


S = SafeInt

__all__ = [
    "SafeInt",
    "S",
    "SafeIntError",
    "DivisionByZero",
    "Underflow",
    "Uint256Overflow",
]
