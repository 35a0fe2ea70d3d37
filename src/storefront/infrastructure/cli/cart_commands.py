"""CLI commands for the buyer's cart.

The cart lives in the JSON cart store between commands, keyed by the
buyer ID given on the command line.
"""

from __future__ import annotations

import click

from storefront.application.add_to_cart import AddToCartHandler
from storefront.application.apply_promo import ApplyPromoHandler
from storefront.application.dto import CartDTO
from storefront.application.remove_from_cart import RemoveFromCartHandler
from storefront.application.remove_promo import RemovePromoHandler
from storefront.application.update_cart_item import UpdateCartItemHandler
from storefront.application.view_cart import ViewCartHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import cart_store, unit_of_work_factory

buyer_option = click.option("--buyer", required=True, help="Buyer (session) ID.")
size_option = click.option("--size", default=None, help="Selected size.")
color_option = click.option("--color", default=None, help="Selected color.")


@click.command("add")
@buyer_option
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", default=1, show_default=True, type=int, help="Units to add.")
@size_option
@color_option
def cart_add(buyer: str, product_id: str, quantity: int, size: str | None, color: str | None) -> None:
    """Add a product variant to the cart."""
    store = cart_store()
    cart = store.load(buyer)
    handler = AddToCartHandler(unit_of_work_factory())

    try:
        handler.handle(cart, product_id, quantity, size=size, color=color)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    store.save(buyer, cart)
    click.echo(f"Added {quantity} x {product_id} to cart")


@click.command("update")
@buyer_option
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="New quantity.")
@size_option
@color_option
def cart_update(buyer: str, product_id: str, quantity: int, size: str | None, color: str | None) -> None:
    """Change the quantity of a cart line."""
    store = cart_store()
    cart = store.load(buyer)
    handler = UpdateCartItemHandler(unit_of_work_factory())

    try:
        handler.handle(cart, product_id, quantity, size=size, color=color)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    store.save(buyer, cart)
    click.echo("Cart updated successfully")


@click.command("remove")
@buyer_option
@click.option("--product", "product_id", required=True, help="Product ID.")
@size_option
@color_option
def cart_remove(buyer: str, product_id: str, size: str | None, color: str | None) -> None:
    """Remove a line (or every variant of a product) from the cart."""
    store = cart_store()
    cart = store.load(buyer)

    try:
        removed = RemoveFromCartHandler().handle(cart, product_id, size=size, color=color)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    store.save(buyer, cart)
    click.echo(f"Removed {removed} line(s)")


@click.command("show")
@buyer_option
def cart_show(buyer: str) -> None:
    """Show the cart with its current totals."""
    cart = cart_store().load(buyer)
    dto = ViewCartHandler(unit_of_work_factory()).handle(cart)
    _display_cart(dto)


@click.command("apply-promo")
@buyer_option
@click.option("--code", required=True, help="Promo code.")
def cart_apply_promo(buyer: str, code: str) -> None:
    """Attach a promo code to the cart."""
    store = cart_store()
    cart = store.load(buyer)
    handler = ApplyPromoHandler(unit_of_work_factory())

    try:
        dto = handler.handle(code, cart)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    store.save(buyer, cart)
    click.echo(f"Promo code {dto.code} applied: -{dto.discount} (new total {dto.new_total})")


@click.command("remove-promo")
@buyer_option
def cart_remove_promo(buyer: str) -> None:
    """Detach the promo code from the cart."""
    store = cart_store()
    cart = store.load(buyer)
    RemovePromoHandler().handle(cart)
    store.save(buyer, cart)
    click.echo("Promo code removed")


def _display_cart(dto: CartDTO) -> None:
    if not dto.lines:
        click.echo("Your cart is empty.")
        return

    click.echo(f"  {'Product':<20} {'Variant':<10} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*58}")
    for line in dto.lines:
        click.echo(
            f"  {line.product_name:<20} {line.variant:<10} {line.quantity:>5} "
            f"{line.unit_price:>10} {line.line_total:>10}"
        )
    click.echo(f"  {'-'*58}")
    click.echo(f"  {'Subtotal':<38} {dto.subtotal:>20}")
    if dto.promo_code:
        click.echo(f"  {'Promo ' + dto.promo_code:<38} {'-' + dto.discount:>20}")
        if dto.promo_message:
            click.echo(f"  ({dto.promo_message})")
    click.echo(f"  {'Total':<38} {dto.total:>20}")
