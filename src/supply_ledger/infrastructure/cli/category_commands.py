"""CLI commands for categories."""

from __future__ import annotations

import click

from supply_ledger.application.add_category import AddCategoryHandler
from supply_ledger.application.list_categories import ListCategoriesHandler
from supply_ledger.application.remove_category import RemoveCategoryHandler
from supply_ledger.application.show_category import ShowCategoryHandler
from supply_ledger.application.update_category import UpdateCategoryHandler
from supply_ledger.domain.exceptions import DomainException
from supply_ledger.infrastructure.cli.context import CliContext, pass_cli_context


@click.command("add")
@click.option("--name", required=True, help="Category name.")
@click.option("--description", default=None, help="Optional description.")
@click.option("--color", default=None, help="Hex color, e.g. #4CAF50.")
@pass_cli_context
def category_add(ctx: CliContext, name: str, description: str | None, color: str | None) -> None:
    """Add a supply category."""
    handler = AddCategoryHandler(category_repo=ctx.categories)

    try:
        category = handler.handle(
            ctx.require_school(), name=name, description=description, color=color
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Category '{category.name}' added (id={category.id})")


@click.command("list")
@pass_cli_context
def category_list(ctx: CliContext) -> None:
    """List active categories with their item counts."""
    handler = ListCategoriesHandler(category_repo=ctx.categories, inventory_repo=ctx.store)

    try:
        categories = handler.handle(ctx.require_school())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not categories:
        click.echo("No categories found.")
        return

    click.echo(f"{'ID':<34} {'Name':<20} {'Color':<8} {'Items':>6}")
    click.echo("-" * 71)
    for c in categories:
        click.echo(f"{c.id:<34} {c.name:<20} {c.color:<8} {c.item_count:>6}")


@click.command("show")
@click.option("--id", "category_id", required=True, help="Category ID.")
@pass_cli_context
def category_show(ctx: CliContext, category_id: str) -> None:
    """Show one category and how many active items it holds."""
    handler = ShowCategoryHandler(category_repo=ctx.categories, inventory_repo=ctx.store)

    try:
        category = handler.handle(ctx.require_school(), category_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{category.name}  ({category.color})")
    if category.description:
        click.echo(category.description)
    click.echo(f"Items:      {category.item_count}")


@click.command("update")
@click.option("--id", "category_id", required=True, help="Category ID.")
@click.option("--name", default=None)
@click.option("--description", default=None)
@click.option("--color", default=None, help="Hex color, e.g. #4CAF50.")
@pass_cli_context
def category_update(ctx: CliContext, category_id: str, **fields) -> None:
    """Rename, recolor, or re-describe a category."""
    changes = {name: value for name, value in fields.items() if value is not None}
    handler = UpdateCategoryHandler(category_repo=ctx.categories, inventory_repo=ctx.store)

    try:
        category = handler.handle(ctx.require_school(), category_id, changes)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Category '{category.name}' updated")


@click.command("remove")
@click.option("--id", "category_id", required=True, help="Category ID.")
@pass_cli_context
def category_remove(ctx: CliContext, category_id: str) -> None:
    """Remove a category that no active item uses."""
    handler = RemoveCategoryHandler(category_repo=ctx.categories, inventory_repo=ctx.store)

    try:
        handler.handle(ctx.require_school(), category_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Category {category_id} removed.")
