"""Domain service: stock reports.

Read-only folds over a snapshot of items or transactions. Callers scope
the snapshot (school, category, dates, ...) through the repository
queries; nothing in this module touches a repository or mutates input.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from supply_ledger.domain.model.category import Category
from supply_ledger.domain.model.inventory import InventoryItem
from supply_ledger.domain.model.transaction import StockTransaction, TransactionType
from supply_ledger.domain.model.value_objects import Money

UNCATEGORIZED = "Uncategorized"


@dataclass(frozen=True)
class InventorySummary:
    total_items: int
    total_value: Money
    low_stock_count: int
    out_of_stock_count: int


@dataclass(frozen=True)
class RestockRecommendation:
    item: InventoryItem
    recommended_order: int
    estimated_cost: Money
    days_until_empty: int | None = None


@dataclass(frozen=True)
class LowStockReport:
    recommendations: list[RestockRecommendation]
    critical_count: int
    estimated_restock_value: Money

    @property
    def total_low_stock_items(self) -> int:
        return len(self.recommendations)


@dataclass(frozen=True)
class TypeTotals:
    count: int
    value: Money


@dataclass(frozen=True)
class TransactionSummary:
    total_transactions: int
    total_value: Money
    by_type: dict[TransactionType, TypeTotals] = field(default_factory=dict)


@dataclass(frozen=True)
class CategoryStat:
    category_id: str | None  # None for the "Uncategorized" row
    name: str
    color: str | None
    item_count: int
    total_quantity: int
    total_value: Money
    low_stock_count: int

    @property
    def average_value(self) -> Money:
        return self.total_value.divided_by(self.item_count)


def summarize_inventory(items: Iterable[InventoryItem]) -> InventorySummary:
    items = list(items)
    return InventorySummary(
        total_items=len(items),
        total_value=Money.total(item.total_value for item in items),
        low_stock_count=sum(1 for item in items if item.is_low_stock),
        out_of_stock_count=sum(1 for item in items if item.quantity == 0),
    )


def low_stock_recommendations(
    items: Iterable[InventoryItem],
    include_days_until_empty: bool = False,
) -> LowStockReport:
    """Suggest a reorder quantity for every item at or below its minimum.

    ``recommended_order = max(max_threshold - quantity, 2 * min_threshold)``

    ``include_days_until_empty`` adds the legacy estimate
    ``quantity // (min_threshold * 0.1)``. It is not derived from any
    consumption rate and is kept only for parity with older exports.
    """
    low = sorted(
        (item for item in items if item.is_low_stock),
        key=lambda item: item.quantity,
    )
    recommendations = []
    for item in low:
        order = max(item.max_threshold - item.quantity, item.min_threshold * 2)
        recommendations.append(
            RestockRecommendation(
                item=item,
                recommended_order=order,
                estimated_cost=item.cost * order,
                days_until_empty=(
                    _legacy_days_until_empty(item) if include_days_until_empty else None
                ),
            )
        )
    return LowStockReport(
        recommendations=recommendations,
        critical_count=sum(1 for item in low if item.quantity == 0),
        estimated_restock_value=Money.total(r.estimated_cost for r in recommendations),
    )


def summarize_transactions(transactions: Iterable[StockTransaction]) -> TransactionSummary:
    counts: dict[TransactionType, int] = {}
    values: dict[TransactionType, Money] = {}
    total = 0
    for txn in transactions:
        total += 1
        counts[txn.type] = counts.get(txn.type, 0) + 1
        values[txn.type] = values.get(txn.type, Money.zero()) + txn.total_value

    by_type = {
        txn_type: TypeTotals(count=counts[txn_type], value=values[txn_type])
        for txn_type in TransactionType
        if txn_type in counts
    }
    return TransactionSummary(
        total_transactions=total,
        total_value=Money.total(t.value for t in by_type.values()),
        by_type=by_type,
    )


def category_rollup(
    items: Iterable[InventoryItem],
    categories: Iterable[Category],
) -> list[CategoryStat]:
    """Per-category totals, highest total value first.

    Every given category is reported, including empty ones. Items whose
    category is not in ``categories`` share a single "Uncategorized" row.
    """
    known = {c.id: c for c in categories}
    grouped: dict[str | None, list[InventoryItem]] = {category_id: [] for category_id in known}
    for item in items:
        key = item.category_id if item.category_id in known else None
        grouped.setdefault(key, []).append(item)

    stats = []
    for category_id, members in grouped.items():
        category = known.get(category_id)
        stats.append(
            CategoryStat(
                category_id=category_id,
                name=category.name if category else UNCATEGORIZED,
                color=category.color if category else None,
                item_count=len(members),
                total_quantity=sum(item.quantity for item in members),
                total_value=Money.total(item.total_value for item in members),
                low_stock_count=sum(1 for item in members if item.is_low_stock),
            )
        )
    stats.sort(key=lambda s: s.total_value.amount, reverse=True)
    return stats


def _legacy_days_until_empty(item: InventoryItem) -> int | None:
    if item.quantity <= 0:
        return 0
    if item.min_threshold <= 0:
        return None
    return int(item.quantity // (item.min_threshold * 0.1))
