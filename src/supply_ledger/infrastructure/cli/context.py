"""Shared state handed from the top-level CLI group to every command."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import click

from supply_ledger.infrastructure import bootstrap


@dataclass
class CliContext:

    data_dir: Path
    school: str | None
    user: str | None

    def require_school(self) -> str:
        if not self.school:
            raise click.UsageError(
                "No school selected. Pass --school or set SUPPLY_LEDGER_SCHOOL."
            )
        return self.school

    def require_user(self) -> str:
        if not self.user:
            raise click.UsageError(
                "No acting user. Pass --user or set SUPPLY_LEDGER_USER."
            )
        return self.user

    @property
    def store(self):
        return bootstrap.ledger_store(self.data_dir)

    @property
    def engine(self):
        return bootstrap.ledger_engine(self.data_dir)

    @property
    def categories(self):
        return bootstrap.category_repository(self.data_dir)


pass_cli_context = click.make_pass_decorator(CliContext)
