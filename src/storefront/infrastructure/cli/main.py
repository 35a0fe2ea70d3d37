import click

from storefront.infrastructure.bootstrap import settings
from storefront.infrastructure.cli.cart_commands import (
    cart_add,
    cart_apply_promo,
    cart_remove,
    cart_remove_promo,
    cart_show,
    cart_update,
)
from storefront.infrastructure.cli.db_commands import db_init, db_seed
from storefront.infrastructure.cli.inventory_commands import inventory_restock
from storefront.infrastructure.cli.order_commands import (
    checkout,
    order_history,
    order_show,
)
from storefront.infrastructure.cli.product_commands import product_list
from storefront.infrastructure.logging import configure_logging


@click.group()
def cli() -> None:
    """Storefront — cart, checkout and order history"""
    cfg = settings()
    configure_logging(cfg.log_level, cfg.log_json)


@cli.group()
def cart() -> None:
    """Manage a buyer's cart."""


@cli.group()
def order() -> None:
    """Browse placed orders."""


@cli.group()
def product() -> None:
    """Read the catalog."""


@cli.group()
def inventory() -> None:
    """Manage stock."""


@cli.group()
def db() -> None:
    """Create and seed the database."""


# Register subcommands
cli.add_command(checkout)
cart.add_command(cart_add)
cart.add_command(cart_update)
cart.add_command(cart_remove)
cart.add_command(cart_show)
cart.add_command(cart_apply_promo)
cart.add_command(cart_remove_promo)
order.add_command(order_history)
order.add_command(order_show)
product.add_command(product_list)
inventory.add_command(inventory_restock)
db.add_command(db_init)
db.add_command(db_seed)
