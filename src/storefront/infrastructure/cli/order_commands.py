"""CLI commands for checkout and placed orders."""

from __future__ import annotations

import click

from storefront.application.checkout import CheckoutHandler
from storefront.application.dto import OrderDTO
from storefront.application.list_orders import ListOrdersHandler
from storefront.application.show_order import ShowOrderHandler
from storefront.domain.exceptions import DomainException, IntegrityViolationError
from storefront.infrastructure.bootstrap import cart_store, unit_of_work_factory


@click.command("checkout")
@click.option("--buyer", required=True, help="Buyer (session) ID.")
def checkout(buyer: str) -> None:
    """Place an order for everything in the cart."""
    store = cart_store()
    cart = store.load(buyer)
    handler = CheckoutHandler(unit_of_work_factory())

    try:
        dto = handler.handle(buyer, cart)
    except IntegrityViolationError as exc:
        # Drop what no longer exists so the buyer can review and retry.
        cart.drop_products(exc.product_ids)
        store.save(buyer, cart)
        raise click.ClickException(str(exc))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    store.save(buyer, cart)
    click.echo("Order placed successfully!")
    _display_order(dto)


@click.command("history")
@click.option("--buyer", required=True, help="Buyer (session) ID.")
@click.option("--page", default=1, show_default=True, type=int, help="Page number.")
def order_history(buyer: str, page: int) -> None:
    """List a buyer's orders, newest first."""
    handler = ListOrdersHandler(unit_of_work_factory())

    try:
        result = handler.handle(buyer, page)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not result.orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'Order':<8} {'Date':<22} {'Status':<12} {'Total':>10}")
    click.echo("-" * 55)
    for o in result.orders:
        click.echo(f"#{o.id:<7} {o.order_date:<22} {o.status:<12} {o.total:>10}")
    click.echo(f"Page {result.page} of {result.total_pages} ({result.total_orders} orders)")


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
@click.option("--buyer", default=None, help="Only show the order if it belongs to this buyer.")
def order_show(order_id: int, buyer: str | None) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(unit_of_work_factory())

    try:
        dto = handler.handle(order_id, buyer_id=buyer)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"Buyer:     {dto.buyer_id}")
    click.echo(f"Placed:    {dto.order_date}")
    click.echo(f"Tracking:  {dto.tracking_number}")
    click.echo(f"Delivery:  {dto.estimated_delivery}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Variant':<10} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*58}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<20} {item.variant:<10} {item.quantity:>5} "
            f"{item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*58}")
    click.echo(f"  {'Subtotal':<38} {dto.subtotal:>20}")
    if dto.promo_code:
        click.echo(f"  {'Promo ' + dto.promo_code:<38} {'-' + dto.discount:>20}")
    click.echo(f"  {'Order Total':<38} {dto.total:>20}")
