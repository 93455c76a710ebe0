"""Read side of the ledger: transactions are append-only, so no save here."""

from __future__ import annotations

from abc import ABC, abstractmethod

from supply_ledger.domain.model.transaction import StockTransaction
from supply_ledger.domain.repository.filters import TransactionQuery


class TransactionRepository(ABC):

    @abstractmethod
    def get_transaction(self, tenant_id: str, transaction_id: str) -> StockTransaction | None:
        """Return a school's transaction by ID, or None."""

    @abstractmethod
    def list_transactions(self, query: TransactionQuery) -> list[StockTransaction]:
        """Return matching transactions, newest first."""
