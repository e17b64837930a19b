"""
Common Value Objects

Value objects used across multiple domains:
- Money: Represents monetary amounts with currency
- Period: Represents an inclusive range of points in time (booking-date lookups)
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from shared.domain.base import ValueObject

CURRENCY_CODE = re.compile(r'^[A-Z]{3}$')
CENTS = Decimal('0.01')


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object

    Represents a monetary amount with an ISO 4217 currency code.
    Immutable. Supports scaling by an integer or Decimal factor.
    """
    amount: Decimal
    currency: str = 'USD'

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, 'amount', Decimal(str(self.amount)))
        if self.amount < 0:
            raise ValueError("Amount cannot be negative")
        if not self.currency:
            raise ValueError("Currency is required")
        if not CURRENCY_CODE.match(self.currency):
            raise ValueError(f"Unsupported currency: {self.currency}")

    def __mul__(self, factor) -> 'Money':
        """Multiply money by a factor"""
        if isinstance(factor, bool) or not isinstance(factor, (int, Decimal)):
            raise TypeError("Can only multiply Money by an integer or Decimal")
        return Money(self.amount * factor, self.currency)

    __rmul__ = __mul__

    def quantized(self) -> 'Money':
        return Money(self.amount.quantize(CENTS, rounding=ROUND_HALF_UP), self.currency)

    @property
    def is_positive(self) -> bool:
        return self.amount > 0

    def __str__(self):
        return f"{self.amount:,.2f} {self.currency}"

    def __repr__(self):
        return f"Money({self.amount}, '{self.currency}')"


@dataclass(frozen=True)
class Period(ValueObject):
    """
    Inclusive time range value object

    Both bounds belong to the period: start <= moment <= end.
    A period may be a single instant (start == end).
    """
    start: datetime | date
    end: datetime | date

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"Period start ({self.start}) must not be after its end ({self.end})")

    def __str__(self):
        return f"{self.start.isoformat()} - {self.end.isoformat()}"

    def __repr__(self):
        return f"Period({self.start!r}, {self.end!r})"
