"""CLI commands for reading the catalog."""

from __future__ import annotations

import click

from storefront.infrastructure.bootstrap import unit_of_work_factory


@click.command("list")
def product_list() -> None:
    """List all products with their stock."""
    with unit_of_work_factory()() as uow:
        products = uow.products.list_all()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<12} {'Name':<24} {'Price':>10} {'Stock':>7} {'Lead':>5}")
    click.echo("-" * 62)
    for p in products:
        click.echo(
            f"{p.id:<12} {p.name:<24} {str(p.base_price):>10} "
            f"{p.stock_quantity:>7} {p.lead_days:>5}"
        )
