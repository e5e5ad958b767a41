"""
Common Value Objects

Value objects used across the rental and payment domains:
- Money: A monetary amount in the platform currency
- DateRange: A rental period (pick-up to return)
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from shared.domain.base import ValueObject

DEFAULT_CURRENCY = 'usd'

CENT = Decimal('0.01')


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object

    Represents a non-negative amount in a single currency, rounded
    half-up to whole cents on construction so 150.505 becomes 150.51.
    The platform charges in one currency only.
    """
    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, 'amount', Decimal(str(self.amount)))
        if self.amount < 0:
            raise ValueError("Amount cannot be negative")
        object.__setattr__(self, 'amount', self.amount.quantize(CENT, rounding=ROUND_HALF_UP))
        if not self.currency:
            raise ValueError("Currency is required")

    def to_minor_units(self) -> int:
        """Amount in the smallest currency unit (cents)"""
        return int(self.amount * 100)

    def __str__(self):
        return f"{self.amount:,.2f} {self.currency.upper()}"

    def __repr__(self):
        return f"Money({self.amount}, '{self.currency}')"


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Date range value object

    Represents a range from start_date (inclusive) to end_date (exclusive).
    Adjacent ranges do not overlap: a car returned on the 5th can be
    picked up again on the 5th.
    """
    start_date: date
    end_date: date

    def __post_init__(self):
        if self.start_date >= self.end_date:
            raise ValueError(
                f"Start date ({self.start_date}) must be before end date ({self.end_date})"
            )

    def __len__(self) -> int:
        """Number of rental days in this range"""
        return (self.end_date - self.start_date).days

    def __str__(self):
        return f"{self.start_date.isoformat()} - {self.end_date.isoformat()}"

    def __repr__(self):
        return f"DateRange({self.start_date}, {self.end_date})"
