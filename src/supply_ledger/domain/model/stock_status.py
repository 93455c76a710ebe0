"""Stock status classification from an item's thresholds."""

from __future__ import annotations

from enum import Enum

from supply_ledger.domain.exceptions import ValidationError


class StockStatus(Enum):
    OUT_OF_STOCK = "out-of-stock"
    LOW_STOCK = "low-stock"
    IN_STOCK = "in-stock"
    OVERSTOCK = "overstock"

    @staticmethod
    def parse(value: str | StockStatus) -> StockStatus:
        if isinstance(value, StockStatus):
            return value
        try:
            return StockStatus(value)
        except ValueError as exc:
            allowed = ", ".join(s.value for s in StockStatus)
            raise ValidationError(
                f"Unknown stock status {value!r} (expected one of: {allowed})"
            ) from exc


def classify_stock(quantity: int, min_threshold: int, max_threshold: int) -> StockStatus:
    """Map a quantity onto exactly one status.

    Rules are checked in priority order, so inconsistent thresholds
    (``min_threshold > max_threshold``) still yield out-of-stock or
    low-stock before overstock is considered.
    """
    if quantity <= 0:
        return StockStatus.OUT_OF_STOCK
    if quantity <= min_threshold:
        return StockStatus.LOW_STOCK
    if quantity >= max_threshold:
        return StockStatus.OVERSTOCK
    return StockStatus.IN_STOCK


def matches_status_filter(
    quantity: int,
    min_threshold: int,
    max_threshold: int,
    status: StockStatus,
) -> bool:
    """Status predicate used when listing and reporting.

    Unlike ``classify_stock`` these buckets overlap: an empty item counts
    as both out-of-stock and low-stock.
    """
    if status is StockStatus.OUT_OF_STOCK:
        return quantity == 0
    if status is StockStatus.LOW_STOCK:
        return quantity <= min_threshold
    if status is StockStatus.OVERSTOCK:
        return quantity >= max_threshold
    return min_threshold < quantity < max_threshold
