"""CLI commands for inventory and transaction reports."""

from __future__ import annotations

from datetime import datetime

import click

from supply_ledger.application.reports import (
    CategoryReportHandler,
    DashboardHandler,
    InventoryReportHandler,
    LowStockReportHandler,
    TransactionReportHandler,
)
from supply_ledger.domain.exceptions import DomainException
from supply_ledger.domain.model.stock_status import StockStatus
from supply_ledger.infrastructure.cli.context import CliContext, pass_cli_context
from supply_ledger.infrastructure.cli.item_commands import display_items
from supply_ledger.infrastructure.cli.options import (
    TYPE_CHOICE,
    date_option,
    end_of,
    start_of,
)
from supply_ledger.infrastructure.cli.transaction_commands import display_transactions


def _display_summary(summary) -> None:
    click.echo(f"Items:          {summary.total_items}")
    click.echo(f"Total value:    {summary.total_value}")
    click.echo(f"Low stock:      {summary.low_stock_count}")
    click.echo(f"Out of stock:   {summary.out_of_stock_count}")


@click.command("inventory")
@click.option("--category", "category_id", default=None)
@click.option(
    "--status", type=click.Choice([s.value for s in StockStatus]), default=None
)
@pass_cli_context
def report_inventory(ctx: CliContext, category_id: str | None, status: str | None) -> None:
    """Stock levels and value, optionally for one category or status."""
    handler = InventoryReportHandler(inventory_repo=ctx.store)

    try:
        report = handler.handle(ctx.require_school(), category_id=category_id, status=status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Inventory report ({report.generated_at:%Y-%m-%d %H:%M} UTC)")
    _display_summary(report.summary)
    if report.items:
        click.echo()
        display_items(report.items)


@click.command("transactions")
@click.option("--from", "start", type=date_option, default=None, help="Start date (inclusive).")
@click.option("--to", "end", type=date_option, default=None, help="End date (inclusive).")
@click.option("--type", "transaction_type", type=TYPE_CHOICE, default=None)
@click.option("--by", "user_id", default=None, help="Only this user.")
@pass_cli_context
def report_transactions(
    ctx: CliContext,
    start: datetime | None,
    end: datetime | None,
    transaction_type: str | None,
    user_id: str | None,
) -> None:
    """Transaction counts and value per type."""
    handler = TransactionReportHandler(transaction_repo=ctx.store, inventory_repo=ctx.store)

    try:
        report = handler.handle(
            ctx.require_school(),
            start=start_of(start),
            end=end_of(end),
            transaction_type=transaction_type,
            user_id=user_id,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    summary = report.summary
    click.echo(f"Transaction report ({report.generated_at:%Y-%m-%d %H:%M} UTC)")
    click.echo(f"Transactions:   {summary.total_transactions}")
    click.echo(f"Total value:    {summary.total_value}")
    for txn_type, totals in summary.by_type.items():
        click.echo(f"  {txn_type.value:<12} {totals.count:>5}  {totals.value}")
    if report.transactions:
        click.echo()
        display_transactions(report.transactions)


@click.command("low-stock")
@click.option(
    "--days-until-empty",
    is_flag=True,
    default=False,
    help="Include the legacy days-until-empty estimate.",
)
@pass_cli_context
def report_low_stock(ctx: CliContext, days_until_empty: bool) -> None:
    """Items at or below their minimum, with restock suggestions."""
    handler = LowStockReportHandler(inventory_repo=ctx.store)

    try:
        report = handler.handle(ctx.require_school(), include_days_until_empty=days_until_empty)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not report.recommendations:
        click.echo("No items are low on stock.")
        return

    click.echo(f"{'Name':<20} {'Qty':>6} {'Min':>5} {'Order':>6} {'Est. cost':>10}")
    click.echo("-" * 51)
    for rec in report.recommendations:
        line = (
            f"{rec.item.name:<20} {rec.item.quantity:>6} {rec.item.min_threshold:>5} "
            f"{rec.recommended_order:>6} {str(rec.estimated_cost):>10}"
        )
        if days_until_empty:
            days = "-" if rec.days_until_empty is None else rec.days_until_empty
            line += f"  ~{days} days"
        click.echo(line)
    click.echo()
    click.echo(f"Low-stock items:  {report.total_low_stock_items}")
    click.echo(f"Out of stock:     {report.critical_count}")
    click.echo(f"Restock value:    {report.estimated_restock_value}")


@click.command("categories")
@pass_cli_context
def report_categories(ctx: CliContext) -> None:
    """Item count, stock and value per category."""
    handler = CategoryReportHandler(inventory_repo=ctx.store, category_repo=ctx.categories)

    try:
        stats = handler.handle(ctx.require_school())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not stats:
        click.echo("No categories found.")
        return

    click.echo(f"{'Category':<20} {'Items':>6} {'Qty':>7} {'Value':>11} {'Average':>10} {'Low':>5}")
    click.echo("-" * 64)
    for stat in stats:
        click.echo(
            f"{stat.name:<20} {stat.item_count:>6} {stat.total_quantity:>7} "
            f"{str(stat.total_value):>11} {str(stat.average_value):>10} {stat.low_stock_count:>5}"
        )


@click.command("dashboard")
@pass_cli_context
def report_dashboard(ctx: CliContext) -> None:
    """One-screen overview of a school's inventory."""
    handler = DashboardHandler(
        inventory_repo=ctx.store, transaction_repo=ctx.store, category_repo=ctx.categories
    )

    try:
        dashboard = handler.handle(ctx.require_school())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_summary(dashboard.summary)
    click.echo(f"Categories:     {dashboard.total_categories}")
    if dashboard.category_distribution:
        click.echo()
        for stat in dashboard.category_distribution:
            click.echo(f"  {stat.name:<20} {stat.item_count:>4} items  {stat.total_value}")
    if dashboard.recent_transactions:
        click.echo()
        click.echo("Recent activity:")
        display_transactions(dashboard.recent_transactions)
