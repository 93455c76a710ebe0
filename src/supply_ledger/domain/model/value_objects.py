"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from supply_ledger.domain.exceptions import ValidationError

_CENTS = Decimal("0.01")
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass(frozen=True)
class Money:
    """Unit cost or stock value.

    Uses Decimal so that summing thousands of ``quantity * cost`` products
    for a report never drifts the way floats do.
    """

    amount: Decimal
    currency: str = "USD"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Cost cannot be negative, got {self.amount}"
            )

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, factor: int) -> Money:
        if isinstance(factor, bool) or not isinstance(factor, int):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.amount * factor, self.currency)

    def divided_by(self, count: int) -> Money:
        """Share of this amount per unit; zero when there is nothing to share."""
        if count <= 0:
            return Money.zero(self.currency)
        return Money(
            (self.amount / count).quantize(_CENTS, rounding=ROUND_HALF_UP),
            self.currency,
        )

    def __lt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount >= other.amount

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return f"${self.amount:.2f}"

    # --- Internal helpers -----------------------------------------------------

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def of(amount: str | float | int | Decimal, currency: str = "USD") -> Money:
        """Convenient factory that coerces to Decimal safely."""
        try:
            return Money(Decimal(str(amount)), currency)
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid cost: {amount!r}") from exc

    @staticmethod
    def zero(currency: str = "USD") -> Money:
        return Money(Decimal("0"), currency)

    @staticmethod
    def total(amounts, currency: str = "USD") -> Money:
        result = Money.zero(currency)
        for amount in amounts:
            result = result + amount
        return result


@dataclass(frozen=True)
class Supplier:
    """Who an item is bought from."""

    name: str
    contact: str | None = None
    email: str | None = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValidationError("Supplier name is required")
        if self.email and not _EMAIL_RE.match(self.email):
            raise ValidationError(f"Invalid supplier email: {self.email!r}")

    @staticmethod
    def from_raw(raw: dict | None) -> Supplier | None:
        if not raw or not raw.get("name"):
            return None
        return Supplier(
            name=raw["name"],
            contact=raw.get("contact"),
            email=raw.get("email"),
        )

    def to_raw(self) -> dict:
        return {"name": self.name, "contact": self.contact, "email": self.email}


@dataclass(frozen=True)
class TransferLocation:
    """Source and destination of a transfer movement."""

    source: str | None = None
    destination: str | None = None

    @staticmethod
    def from_raw(raw: dict | None) -> TransferLocation | None:
        if not raw:
            return None
        return TransferLocation(source=raw.get("from"), destination=raw.get("to"))

    def to_raw(self) -> dict:
        return {"from": self.source, "to": self.destination}
