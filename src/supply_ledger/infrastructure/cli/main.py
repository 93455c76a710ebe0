from pathlib import Path

import click

from supply_ledger.infrastructure.bootstrap import DATA_DIR_ENV, resolve_data_dir
from supply_ledger.infrastructure.cli.category_commands import (
    category_add,
    category_list,
    category_remove,
    category_show,
    category_update,
)
from supply_ledger.infrastructure.cli.context import CliContext
from supply_ledger.infrastructure.cli.item_commands import (
    item_add,
    item_list,
    item_remove,
    item_show,
    item_update,
)
from supply_ledger.infrastructure.cli.report_commands import (
    report_categories,
    report_dashboard,
    report_inventory,
    report_low_stock,
    report_transactions,
)
from supply_ledger.infrastructure.cli.transaction_commands import txn_list, txn_record, txn_show
from supply_ledger.logging_config import configure_logging


@click.group()
@click.option(
    "--data-dir",
    envvar=DATA_DIR_ENV,
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding the ledger files.",
)
@click.option("--school", envvar="SUPPLY_LEDGER_SCHOOL", default=None, help="School (tenant) ID.")
@click.option("--user", envvar="SUPPLY_LEDGER_USER", default=None, help="Acting user ID.")
@click.option(
    "--log-level",
    envvar="SUPPLY_LEDGER_LOG_LEVEL",
    default="WARNING",
    show_default=True,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
)
@click.pass_context
def cli(
    ctx: click.Context,
    data_dir: Path | None,
    school: str | None,
    user: str | None,
    log_level: str,
) -> None:
    """Supply Ledger: school supply inventory"""
    configure_logging(level=log_level)
    ctx.obj = CliContext(data_dir=resolve_data_dir(data_dir), school=school, user=user)


@cli.group()
def category() -> None:
    """Manage categories."""


@cli.group()
def item() -> None:
    """Manage inventory items."""


@cli.group()
def txn() -> None:
    """Record and list stock transactions."""


@cli.group()
def report() -> None:
    """Inventory and transaction reports."""


# Register subcommands
category.add_command(category_add)
category.add_command(category_list)
category.add_command(category_remove)
category.add_command(category_show)
category.add_command(category_update)
item.add_command(item_add)
item.add_command(item_list)
item.add_command(item_remove)
item.add_command(item_show)
item.add_command(item_update)
txn.add_command(txn_list)
txn.add_command(txn_record)
txn.add_command(txn_show)
report.add_command(report_categories)
report.add_command(report_dashboard)
report.add_command(report_inventory)
report.add_command(report_low_stock)
report.add_command(report_transactions)
