"""Checked integer arithmetic for reserve and share amounts.

Every pricing and liquidity formula in the exchange multiplies before it
divides. Python integers never overflow, but the results still have to be
valid uint256 amounts, and a subtraction that goes negative or a division
by zero is always a bug in the caller's inputs rather than a value to keep.

Usage pattern:
    from amm.safe_int import S

    def share_of(amount: int, reserve: int, total: int) -> int:
        return S(amount).mul_div(reserve, total).to_uint256()
"""

from __future__ import annotations

from amm.constants import UINT256_MAX


class SafeIntError(ArithmeticError):
    """Base class for checked arithmetic failures."""

    pass


class DivisionByZero(SafeIntError):
    """Division by zero."""

    pass


class Underflow(SafeIntError):
    """Subtraction would produce a negative amount."""

    pass


class Uint256Overflow(SafeIntError):
    """Amount does not fit in 256 unsigned bits."""

    pass


class SafeInt:
    """Non-negative integer amount with checked operators.

    - ``a - b`` raises Underflow when b > a
    - ``a // b`` and ``a.mul_div(b, c)`` raise DivisionByZero on a zero divisor
    - ``to_uint256()`` raises Uint256Overflow outside [0, 2**256 - 1]

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
        return SafeInt(self._value + _extract_value(other))

    __radd__ = __add__

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        """Subtract other from self.

        Raises:
            Underflow: If the result would be negative
        """
        other_val = _extract_value(other)
        result = self._value - other_val
        if result < 0:
            raise Underflow(f"Underflow: {self._value} - {other_val} = {result}")
        return SafeInt(result)

    def __rsub__(self, other: int) -> SafeInt:
        return SafeInt(other) - self

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value * _extract_value(other))

    __rmul__ = __mul__

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        """Floor division.

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return SafeInt(self._value // other_val)

    def __rfloordiv__(self, other: int) -> SafeInt:
        return SafeInt(other) // self

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SafeInt):
            return self._value == other._value
        if isinstance(other, int):
            return self._value == other
        return NotImplemented

    def __lt__(self, other: SafeInt | int) -> bool:
        return self._value < _extract_value(other)

    def __le__(self, other: SafeInt | int) -> bool:
        return self._value <= _extract_value(other)

    def __gt__(self, other: SafeInt | int) -> bool:
        return self._value > _extract_value(other)

    def __ge__(self, other: SafeInt | int) -> bool:
        return self._value >= _extract_value(other)

    def __int__(self) -> int:
        return self._value

    def __index__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        return self._value != 0

    def mul_div(self, multiplier: SafeInt | int, divisor: SafeInt | int) -> SafeInt:
        """Compute floor(self * multiplier / divisor) at full precision.

        The product is never truncated before the division, so the result is
        exact for any uint256 operands.

        Raises:
            DivisionByZero: If divisor is zero
        """
        return (self * multiplier) // divisor

    def to_uint256(self) -> int:
        """Unwrap, validating uint256 bounds.

        Raises:
            Uint256Overflow: If value is negative or exceeds 2**256 - 1
        """
        if self._value < 0:
            raise Uint256Overflow(f"Negative value cannot be uint256: {self._value}")
        if self._value > UINT256_MAX:
            raise Uint256Overflow(f"Value exceeds uint256 max: {self._value}")
        return self._value

    def is_uint256(self) -> bool:
        return 0 <= self._value <= UINT256_MAX


def _extract_value(x: SafeInt | int) -> int:
    if isinstance(x, SafeInt):
        return x._value
    return x


S = SafeInt
