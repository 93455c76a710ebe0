"""CLI commands for recording and listing stock transactions."""

from __future__ import annotations

from datetime import datetime

import click

from supply_ledger.application.record_transaction import RecordTransactionHandler
from supply_ledger.application.show_transactions import (
    ShowTransactionHandler,
    ShowTransactionsHandler,
)
from supply_ledger.domain.exceptions import DomainException, InsufficientStockError
from supply_ledger.infrastructure.cli.context import CliContext, pass_cli_context
from supply_ledger.infrastructure.cli.options import (
    TYPE_CHOICE,
    date_option,
    end_of,
    start_of,
)


def display_transactions(transactions) -> None:
    click.echo(
        f"{'Date':<20} {'Type':<11} {'Item':<20} {'Qty':>6} {'After':>6} {'User':<12} {'Value':>10}"
    )
    click.echo("-" * 91)
    for t in transactions:
        click.echo(
            f"{t.created_at:<20} {t.type:<11} {t.item_name:<20} {t.quantity:>+6} "
            f"{t.new_quantity:>6} {t.user_id:<12} {t.total_value:>10}"
        )


@click.command("record")
@click.option("--item", "item_id", required=True, help="Item ID.")
@click.option("--type", "transaction_type", required=True, type=TYPE_CHOICE, help="Transaction type.")
@click.option(
    "--quantity",
    required=True,
    type=int,
    help="Units to move; for an adjustment, the new stock level.",
)
@click.option("--reason", default=None)
@click.option("--notes", default=None)
@click.option("--cost", default=None, help="Unit cost (defaults to the item's cost).")
@click.option("--supplier", "supplier_name", default=None)
@click.option("--supplier-contact", default=None)
@click.option("--reference", default=None, help="PO number, requisition, ...")
@pass_cli_context
def txn_record(ctx: CliContext, **fields) -> None:
    """Check in, check out, or adjust stock."""
    handler = RecordTransactionHandler(engine=ctx.engine, inventory_repo=ctx.store)

    try:
        txn = handler.handle(
            ctx.require_school(), actor_id=ctx.require_user(), **fields
        )
    except InsufficientStockError as exc:
        raise click.ClickException(
            f"Insufficient stock: available {exc.available}, requested {exc.requested}"
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"{txn.type} of {abs(txn.quantity)} recorded for '{txn.item_name}' "
        f"({txn.previous_quantity} -> {txn.new_quantity}), id={txn.id}"
    )


@click.command("list")
@click.option("--item", "item_id", default=None, help="Only this item.")
@click.option("--type", "transaction_type", type=TYPE_CHOICE, default=None)
@click.option("--by", "user_id", default=None, help="Only this user.")
@click.option("--from", "start", type=date_option, default=None, help="Start date (inclusive).")
@click.option("--to", "end", type=date_option, default=None, help="End date (inclusive).")
@click.option("--limit", default=20, show_default=True, type=int)
@pass_cli_context
def txn_list(
    ctx: CliContext,
    item_id: str | None,
    transaction_type: str | None,
    user_id: str | None,
    start: datetime | None,
    end: datetime | None,
    limit: int,
) -> None:
    """List transactions, newest first."""
    handler = ShowTransactionsHandler(transaction_repo=ctx.store, inventory_repo=ctx.store)

    try:
        transactions = handler.handle(
            ctx.require_school(),
            item_id=item_id,
            transaction_type=transaction_type,
            user_id=user_id,
            start=start_of(start),
            end=end_of(end),
            limit=limit,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not transactions:
        click.echo("No transactions found.")
        return
    display_transactions(transactions)


@click.command("show")
@click.option("--id", "transaction_id", required=True, help="Transaction ID.")
@pass_cli_context
def txn_show(ctx: CliContext, transaction_id: str) -> None:
    """Show one transaction in full."""
    handler = ShowTransactionHandler(transaction_repo=ctx.store, inventory_repo=ctx.store)

    try:
        txn = handler.handle(ctx.require_school(), transaction_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{txn.type} of '{txn.item_name}' ({txn.item_id})")
    click.echo(f"Date:       {txn.created_at}")
    click.echo(f"By:         {txn.user_id}")
    click.echo(f"Quantity:   {txn.quantity:+} ({txn.previous_quantity} -> {txn.new_quantity})")
    click.echo(f"Unit cost:  {txn.unit_cost}")
    click.echo(f"Value:      {txn.total_value}")
    for label, value in (
        ("Reason", txn.reason),
        ("Notes", txn.notes),
        ("Reference", txn.reference),
        ("Supplier", txn.supplier),
    ):
        if value:
            click.echo(f"{label + ':':<12}{value}")
