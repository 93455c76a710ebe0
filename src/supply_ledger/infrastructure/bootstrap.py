"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.

The data directory is resolved in this order: explicit argument, the
``SUPPLY_LEDGER_DATA_DIR`` environment variable, then ``data/`` at the
project root.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from supply_ledger.domain.service.ledger_engine import LedgerEngine
from supply_ledger.infrastructure.persistence.json_category_repository import (
    JsonCategoryRepository,
)
from supply_ledger.infrastructure.persistence.json_ledger_store import JsonLedgerStore

DATA_DIR_ENV = "SUPPLY_LEDGER_DATA_DIR"

# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


def resolve_data_dir(override: Path | None = None) -> Path:
    if override is not None:
        return Path(override)
    from_env = os.environ.get(DATA_DIR_ENV)
    if from_env:
        return Path(from_env)
    return _DEFAULT_DATA_DIR


@lru_cache(maxsize=None)
def ledger_store(data_dir: Path) -> JsonLedgerStore:
    """One store per ledger file, so its write lock is shared in-process."""
    return JsonLedgerStore(data_dir / "ledger.json")


def category_repository(data_dir: Path) -> JsonCategoryRepository:
    return JsonCategoryRepository(data_dir / "categories.json")


@lru_cache(maxsize=None)
def ledger_engine(data_dir: Path) -> LedgerEngine:
    return LedgerEngine(ledger_store(data_dir))
