"""Query filters passed to repositories.

Every filter carries the school (tenant) explicitly; repositories never
return rows from another school.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from supply_ledger.domain.model.inventory import InventoryItem
from supply_ledger.domain.model.stock_status import StockStatus, matches_status_filter
from supply_ledger.domain.model.transaction import StockTransaction, TransactionType


@dataclass(frozen=True)
class ItemQuery:

    tenant_id: str
    category_id: str | None = None
    status: StockStatus | None = None
    search: str | None = None
    include_inactive: bool = False

    def matches(self, item: InventoryItem) -> bool:
        if item.tenant_id != self.tenant_id:
            return False
        if not item.is_active and not self.include_inactive:
            return False
        if self.category_id and item.category_id != self.category_id:
            return False
        if self.status is not None and not matches_status_filter(
            item.quantity, item.min_threshold, item.max_threshold, self.status
        ):
            return False
        if self.search:
            needle = self.search.lower()
            haystack = f"{item.name} {item.description or ''}".lower()
            if needle not in haystack:
                return False
        return True


@dataclass(frozen=True)
class TransactionQuery:
    """Date bounds are inclusive on both ends.

    Transactions are stamped in UTC, so a naive bound is read as UTC.
    """

    tenant_id: str
    item_id: str | None = None
    type: TransactionType | None = None
    user_id: str | None = None
    start: datetime | None = None
    end: datetime | None = None

    def __post_init__(self) -> None:
        for bound in ("start", "end"):
            value = getattr(self, bound)
            if value is not None and value.tzinfo is None:
                object.__setattr__(self, bound, value.replace(tzinfo=timezone.utc))

    def matches(self, txn: StockTransaction) -> bool:
        if txn.tenant_id != self.tenant_id:
            return False
        if self.item_id and txn.item_id != self.item_id:
            return False
        if self.type is not None and txn.type is not self.type:
            return False
        if self.user_id and txn.user_id != self.user_id:
            return False
        if self.start is not None and txn.created_at < self.start:
            return False
        if self.end is not None and txn.created_at > self.end:
            return False
        return True
