"""CLI commands for inventory management."""

from __future__ import annotations

import click

from storefront.application.restock import RestockHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import unit_of_work_factory


@click.command("restock")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Units to add to stock.")
def inventory_restock(product_id: str, quantity: int) -> None:
    """Add units to a product's stock."""
    handler = RestockHandler(unit_of_work_factory())

    try:
        level = handler.handle(product_id=product_id, quantity=quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock for '{product_id}' is now {level.stock_quantity}")
