"""Money value object.

Amounts are held as an integer count of minor units (cents). Every
operation that can produce a fractional minor unit rounds back to a whole
one immediately, so fractions never accumulate across a chain of operations.
Rounding is half away from zero.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from fractions import Fraction
from numbers import Rational

from billfold.domain.errors import InvalidAmountError

MINOR_UNITS_PER_MAJOR = 100


def _round_half_up(value: Fraction) -> int:
    """Round an exact fraction to the nearest integer, ties away from zero."""
    whole = (abs(value.numerator) * 2 + value.denominator) // (value.denominator * 2)
    return whole if value >= 0 else -whole


def _to_fraction(value) -> Fraction:
    if isinstance(value, bool):
        raise InvalidAmountError(f"Invalid amount: {value!r}")
    if isinstance(value, Rational):
        return Fraction(value)
    try:
        decimal_value = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidAmountError(f"Invalid amount: {value!r}")
    if not decimal_value.is_finite():
        raise InvalidAmountError(f"Amount must be finite, got {value!r}")
    return Fraction(decimal_value)


@dataclass(frozen=True, order=True)
class Money:
    """Immutable amount in integer minor units."""

    minor_units: int

    def __post_init__(self):
        if isinstance(self.minor_units, bool) or not isinstance(self.minor_units, int):
            raise InvalidAmountError(
                f"Money must be built from whole minor units, got {self.minor_units!r}"
            )

    @classmethod
    def zero(cls) -> "Money":
        return cls(0)

    @classmethod
    def from_major(cls, value) -> "Money":
        """Build Money from a major-unit value (e.g. ``Decimal("12.34")``).

        Args:
            value: int, Decimal, float or numeric string in major units

        Returns:
            Money rounded to the nearest minor unit

        Raises:
            InvalidAmountError: If value is not a finite number
        """
        return cls(_round_half_up(_to_fraction(value) * MINOR_UNITS_PER_MAJOR))

    def to_major(self) -> Decimal:
        """Return the amount in major units as an exact Decimal."""
        return Decimal(self.minor_units).scaleb(-2)

    def format(self) -> str:
        """Format as a grouped major-unit string, e.g. ``-1,234.50``."""
        return f"{self.to_major():,.2f}"

    def is_zero(self) -> bool:
        return self.minor_units == 0

    def is_positive(self) -> bool:
        return self.minor_units > 0

    def is_negative(self) -> bool:
        return self.minor_units < 0

    def _require_money(self, other) -> "Money":
        if not isinstance(other, Money):
            raise InvalidAmountError(f"Cannot combine Money with {type(other).__name__}")
        return other

    def __add__(self, other: "Money") -> "Money":
        return Money(self.minor_units + self._require_money(other).minor_units)

    def __sub__(self, other: "Money") -> "Money":
        return Money(self.minor_units - self._require_money(other).minor_units)

    def __neg__(self) -> "Money":
        return Money(-self.minor_units)

    def __abs__(self) -> "Money":
        return Money(abs(self.minor_units))

    def __mul__(self, factor) -> "Money":
        if isinstance(factor, Money):
            raise InvalidAmountError("Cannot multiply Money by Money")
        return Money(_round_half_up(self.minor_units * _to_fraction(factor)))

    __rmul__ = __mul__

    def __truediv__(self, divisor: int) -> "Money":
        if isinstance(divisor, bool) or not isinstance(divisor, int):
            raise InvalidAmountError(f"Money can only be divided by an integer, got {divisor!r}")
        if divisor == 0:
            raise InvalidAmountError("Cannot divide Money by zero")
        return Money(_round_half_up(Fraction(self.minor_units, divisor)))

    def __str__(self) -> str:
        return self.format()


def sum_money(amounts) -> Money:
    """Sum an iterable of Money, returning zero for an empty iterable."""
    total = Money.zero()
    for amount in amounts:
        total = total + amount
    return total
