"""CLI commands for inventory items."""

from __future__ import annotations

import click

from supply_ledger.application.create_item import CreateItemHandler
from supply_ledger.application.dto import NewItemSpec
from supply_ledger.application.remove_item import RemoveItemHandler
from supply_ledger.application.show_inventory import ShowInventoryHandler, ShowItemHandler
from supply_ledger.application.update_item import UpdateItemHandler
from supply_ledger.domain.exceptions import DomainException
from supply_ledger.domain.model.stock_status import StockStatus
from supply_ledger.infrastructure.cli.context import CliContext, pass_cli_context

_STATUS_CHOICE = click.Choice([s.value for s in StockStatus])


def display_items(items) -> None:
    click.echo(
        f"{'ID':<34} {'Name':<20} {'Qty':>6} {'Unit':<8} {'Cost':>9} {'Value':>10} {'Status':<12}"
    )
    click.echo("-" * 105)
    for item in items:
        click.echo(
            f"{item.id:<34} {item.name:<20} {item.quantity:>6} {item.unit:<8} "
            f"{item.unit_cost:>9} {item.total_value:>10} {item.stock_status:<12}"
        )


@click.command("add")
@click.option("--name", required=True, help="Item name.")
@click.option("--category", "category_id", required=True, help="Category ID.")
@click.option("--quantity", default=0, show_default=True, type=int, help="Opening stock.")
@click.option("--unit", default="pieces", show_default=True, help="Unit label.")
@click.option("--min", "min_threshold", default=5, show_default=True, type=int, help="Low-stock threshold.")
@click.option("--max", "max_threshold", default=100, show_default=True, type=int, help="Overstock threshold.")
@click.option("--cost", default="0", show_default=True, help="Unit cost (e.g. 1.25).")
@click.option("--description", default=None)
@click.option("--supplier", "supplier_name", default=None, help="Supplier name.")
@click.option("--supplier-contact", default=None)
@click.option("--supplier-email", default=None)
@click.option("--location", default=None, help="Where the item is stored.")
@click.option("--barcode", default=None)
@pass_cli_context
def item_add(ctx: CliContext, **fields) -> None:
    """Start tracking a new supply (opening stock is logged as a check-in)."""
    handler = CreateItemHandler(engine=ctx.engine, category_repo=ctx.categories)

    try:
        item = handler.handle(ctx.require_school(), ctx.require_user(), NewItemSpec(**fields))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Item '{item.name}' added (id={item.id}) with {item.quantity} {item.unit}")


@click.command("update")
@click.option("--id", "item_id", required=True, help="Item ID.")
@click.option("--name", default=None)
@click.option("--category", "category_id", default=None, help="Category ID.")
@click.option("--quantity", default=None, type=int, help="New stock level (logged as an adjustment).")
@click.option("--unit", default=None)
@click.option("--min", "min_threshold", default=None, type=int)
@click.option("--max", "max_threshold", default=None, type=int)
@click.option("--cost", default=None, help="Unit cost.")
@click.option("--description", default=None)
@click.option("--supplier", "supplier_name", default=None, help="Supplier name (replaces the current supplier).")
@click.option("--supplier-contact", default=None)
@click.option("--supplier-email", default=None)
@click.option("--location", default=None)
@click.option("--barcode", default=None)
@pass_cli_context
def item_update(ctx: CliContext, item_id: str, **fields) -> None:
    """Edit item fields."""
    supplier = {
        "name": fields.pop("supplier_name"),
        "contact": fields.pop("supplier_contact"),
        "email": fields.pop("supplier_email"),
    }
    changes = {name: value for name, value in fields.items() if value is not None}
    if supplier["name"] is not None:
        changes["supplier"] = supplier
    elif supplier["contact"] is not None or supplier["email"] is not None:
        raise click.UsageError("--supplier-contact and --supplier-email need --supplier")
    handler = UpdateItemHandler(engine=ctx.engine, category_repo=ctx.categories)

    try:
        item = handler.handle(ctx.require_school(), item_id, ctx.require_user(), changes)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Item '{item.name}' updated (quantity={item.quantity}, status={item.stock_status})")


@click.command("remove")
@click.option("--id", "item_id", required=True, help="Item ID.")
@pass_cli_context
def item_remove(ctx: CliContext, item_id: str) -> None:
    """Remove an item from the inventory (history is kept)."""
    handler = RemoveItemHandler(engine=ctx.engine)

    try:
        handler.handle(ctx.require_school(), item_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Item {item_id} removed.")


@click.command("show")
@click.option("--id", "item_id", required=True, help="Item ID.")
@click.option("--history", default=10, show_default=True, type=int, help="Transactions to show.")
@pass_cli_context
def item_show(ctx: CliContext, item_id: str, history: int) -> None:
    """Show one item and its latest transactions."""
    handler = ShowItemHandler(inventory_repo=ctx.store, transaction_repo=ctx.store)

    try:
        detail = handler.handle(ctx.require_school(), item_id, history_limit=history)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    item = detail.item
    click.echo(f"{item.name}  ({item.stock_status})")
    click.echo(f"Stock:      {item.quantity} {item.unit}  (min {item.min_threshold}, max {item.max_threshold})")
    click.echo(f"Unit cost:  {item.unit_cost}")
    click.echo(f"Value:      {item.total_value}")
    if item.location:
        click.echo(f"Location:   {item.location}")
    if item.supplier:
        click.echo(f"Supplier:   {item.supplier}")
    click.echo()
    click.echo(f"  {'Date':<20} {'Type':<11} {'Qty':>6} {'Before':>7} {'After':>7}  Reason")
    click.echo(f"  {'-'*70}")
    for txn in detail.history:
        click.echo(
            f"  {txn.created_at:<20} {txn.type:<11} {txn.quantity:>+6} "
            f"{txn.previous_quantity:>7} {txn.new_quantity:>7}  {txn.reason or ''}"
        )


@click.command("list")
@click.option("--category", "category_id", default=None, help="Only this category.")
@click.option("--status", type=_STATUS_CHOICE, default=None, help="Only this stock status.")
@click.option("--search", default=None, help="Match name or description.")
@pass_cli_context
def item_list(ctx: CliContext, category_id: str | None, status: str | None, search: str | None) -> None:
    """List active items."""
    handler = ShowInventoryHandler(inventory_repo=ctx.store)

    try:
        items = handler.handle(
            ctx.require_school(), category_id=category_id, status=status, search=search
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not items:
        click.echo("No inventory items found.")
        return
    display_items(items)
