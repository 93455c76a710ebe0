"""Application service: Show Transactions use case (query)."""

from __future__ import annotations

from datetime import datetime

from supply_ledger.application.dto import TransactionDTO, transaction_to_dto
from supply_ledger.domain.exceptions import EntityNotFoundError
from supply_ledger.domain.model.transaction import StockTransaction, TransactionType
from supply_ledger.domain.repository.filters import ItemQuery, TransactionQuery
from supply_ledger.domain.repository.inventory_repository import InventoryRepository
from supply_ledger.domain.repository.transaction_repository import TransactionRepository


def build_transaction_query(
    tenant_id: str,
    item_id: str | None = None,
    transaction_type: TransactionType | str | None = None,
    user_id: str | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
) -> TransactionQuery:
    return TransactionQuery(
        tenant_id=tenant_id,
        item_id=item_id,
        type=TransactionType.parse(transaction_type) if transaction_type else None,
        user_id=user_id,
        start=start,
        end=end,
    )


def item_names(inventory_repo: InventoryRepository, tenant_id: str) -> dict[str, str]:
    """Names of every item the school has ever stocked, including removed ones."""
    items = inventory_repo.list_matching(ItemQuery(tenant_id=tenant_id, include_inactive=True))
    return {item.id: item.name for item in items}


def to_dtos(
    transactions: list[StockTransaction], names: dict[str, str]
) -> list[TransactionDTO]:
    return [transaction_to_dto(t, names.get(t.item_id, t.item_id)) for t in transactions]


class ShowTransactionsHandler:

    def __init__(
        self,
        transaction_repo: TransactionRepository,
        inventory_repo: InventoryRepository,
    ) -> None:
        self._transaction_repo = transaction_repo
        self._inventory_repo = inventory_repo

    def handle(
        self,
        tenant_id: str,
        item_id: str | None = None,
        transaction_type: TransactionType | str | None = None,
        user_id: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int | None = None,
    ) -> list[TransactionDTO]:
        """List the school's transactions, newest first."""
        query = build_transaction_query(
            tenant_id, item_id, transaction_type, user_id, start, end
        )
        transactions = self._transaction_repo.list_transactions(query)
        if limit is not None:
            transactions = transactions[:limit]
        return to_dtos(transactions, item_names(self._inventory_repo, tenant_id))


class ShowTransactionHandler:

    def __init__(
        self,
        transaction_repo: TransactionRepository,
        inventory_repo: InventoryRepository,
    ) -> None:
        self._transaction_repo = transaction_repo
        self._inventory_repo = inventory_repo

    def handle(self, tenant_id: str, transaction_id: str) -> TransactionDTO:
        txn = self._transaction_repo.get_transaction(tenant_id, transaction_id)
        if txn is None:
            raise EntityNotFoundError(f"Transaction '{transaction_id}' not found")
        item = self._inventory_repo.get_by_id(tenant_id, txn.item_id)
        return transaction_to_dto(txn, item.name if item else txn.item_id)
