"""CLI commands for database setup."""

from __future__ import annotations

from pathlib import Path

import click

from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import engine, unit_of_work_factory
from storefront.infrastructure.persistence.database import create_schema
from storefront.infrastructure.persistence.seed import load_seed_file


@click.command("init")
def db_init() -> None:
    """Create any missing tables."""
    create_schema(engine())
    click.echo("Database ready.")


@click.command("seed")
@click.argument("seed_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def db_seed(seed_file: Path) -> None:
    """Load products and promo codes from a JSON file."""
    create_schema(engine())
    try:
        products, promos = load_seed_file(seed_file, unit_of_work_factory())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Loaded {products} products and {promos} promo codes.")
