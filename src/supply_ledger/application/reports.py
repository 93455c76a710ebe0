"""Application services: report use cases (queries).

Each handler loads one school's snapshot through the repositories and
hands it to the pure folds in ``stock_reports``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from supply_ledger.application.dto import ItemDTO, TransactionDTO, item_to_dto
from supply_ledger.application.show_transactions import (
    build_transaction_query,
    item_names,
    to_dtos,
)
from supply_ledger.domain.model.stock_status import StockStatus
from supply_ledger.domain.model.transaction import TransactionType
from supply_ledger.domain.repository.category_repository import CategoryRepository
from supply_ledger.domain.repository.filters import ItemQuery, TransactionQuery
from supply_ledger.domain.repository.inventory_repository import InventoryRepository
from supply_ledger.domain.repository.transaction_repository import TransactionRepository
from supply_ledger.domain.service.stock_reports import (
    CategoryStat,
    InventorySummary,
    LowStockReport,
    TransactionSummary,
    category_rollup,
    low_stock_recommendations,
    summarize_inventory,
    summarize_transactions,
)

RECENT_TRANSACTIONS = 5


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class InventoryReportDTO:
    summary: InventorySummary
    items: list[ItemDTO]
    generated_at: datetime


@dataclass(frozen=True)
class TransactionReportDTO:
    summary: TransactionSummary
    transactions: list[TransactionDTO]
    generated_at: datetime


@dataclass(frozen=True)
class DashboardDTO:
    summary: InventorySummary
    total_categories: int
    recent_transactions: list[TransactionDTO]
    category_distribution: list[CategoryStat] = field(default_factory=list)


class InventoryReportHandler:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._inventory_repo = inventory_repo
        self._clock = clock or _utcnow

    def handle(
        self,
        tenant_id: str,
        category_id: str | None = None,
        status: StockStatus | str | None = None,
    ) -> InventoryReportDTO:
        items = self._inventory_repo.list_matching(
            ItemQuery(
                tenant_id=tenant_id,
                category_id=category_id,
                status=StockStatus.parse(status) if status else None,
            )
        )
        return InventoryReportDTO(
            summary=summarize_inventory(items),
            items=[item_to_dto(item) for item in items],
            generated_at=self._clock(),
        )


class TransactionReportHandler:

    def __init__(
        self,
        transaction_repo: TransactionRepository,
        inventory_repo: InventoryRepository,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._transaction_repo = transaction_repo
        self._inventory_repo = inventory_repo
        self._clock = clock or _utcnow

    def handle(
        self,
        tenant_id: str,
        start: datetime | None = None,
        end: datetime | None = None,
        transaction_type: TransactionType | str | None = None,
        user_id: str | None = None,
    ) -> TransactionReportDTO:
        query = build_transaction_query(
            tenant_id,
            transaction_type=transaction_type,
            user_id=user_id,
            start=start,
            end=end,
        )
        transactions = self._transaction_repo.list_transactions(query)
        return TransactionReportDTO(
            summary=summarize_transactions(transactions),
            transactions=to_dtos(transactions, item_names(self._inventory_repo, tenant_id)),
            generated_at=self._clock(),
        )


class LowStockReportHandler:

    def __init__(self, inventory_repo: InventoryRepository) -> None:
        self._inventory_repo = inventory_repo

    def handle(self, tenant_id: str, include_days_until_empty: bool = False) -> LowStockReport:
        items = self._inventory_repo.list_matching(
            ItemQuery(tenant_id=tenant_id, status=StockStatus.LOW_STOCK)
        )
        return low_stock_recommendations(items, include_days_until_empty)


class CategoryReportHandler:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        category_repo: CategoryRepository,
    ) -> None:
        self._inventory_repo = inventory_repo
        self._category_repo = category_repo

    def handle(self, tenant_id: str) -> list[CategoryStat]:
        return category_rollup(
            self._inventory_repo.list_matching(ItemQuery(tenant_id=tenant_id)),
            self._category_repo.list_active(tenant_id),
        )


class DashboardHandler:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        transaction_repo: TransactionRepository,
        category_repo: CategoryRepository,
    ) -> None:
        self._inventory_repo = inventory_repo
        self._transaction_repo = transaction_repo
        self._category_repo = category_repo

    def handle(self, tenant_id: str) -> DashboardDTO:
        items = self._inventory_repo.list_matching(ItemQuery(tenant_id=tenant_id))
        categories = self._category_repo.list_active(tenant_id)
        recent = self._transaction_repo.list_transactions(
            TransactionQuery(tenant_id=tenant_id)
        )[:RECENT_TRANSACTIONS]

        return DashboardDTO(
            summary=summarize_inventory(items),
            total_categories=len(categories),
            recent_transactions=to_dtos(recent, item_names(self._inventory_repo, tenant_id)),
            category_distribution=[
                stat for stat in category_rollup(items, categories) if stat.item_count
            ],
        )
