"""CLI commands for the Sale aggregate."""

from __future__ import annotations

import click

from pos.application.cancel_sale import CancelSaleHandler
from pos.application.create_sale import CreateSaleHandler
from pos.application.dto import SaleDTO, SaleItemSpec
from pos.application.list_sales import ListSalesHandler
from pos.domain.exceptions import ValidationError
from pos.domain.model.sale import PaymentMethod
from pos.infrastructure.bootstrap import (
    calendar,
    read_repositories,
    sale_numbering,
    unit_of_work,
)
from pos.infrastructure.cli.output import echo_envelope, plain, reported_errors


def _parse_items(raw: str) -> list[SaleItemSpec]:
    """Parse '1:3,4:5' into SaleItemSpec list."""
    specs: list[SaleItemSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if not pair:
            continue
        if ":" not in pair:
            raise ValidationError(
                f"Invalid item format '{pair}'. Expected 'ProductId:Quantity'."
            )
        product_id, qty_str = pair.rsplit(":", 1)
        try:
            qty = int(qty_str)
        except ValueError:
            raise ValidationError(
                f"Invalid quantity '{qty_str}' for product '{product_id}'."
            ) from None
        specs.append(SaleItemSpec(product_id=product_id.strip(), quantity=qty))
    return specs


def _display_sale(dto: SaleDTO) -> None:
    click.echo(f"Sale {dto.sale_number}  (status={dto.status})")
    click.echo(f"Seller:   {dto.seller}")
    click.echo(f"Payment:  {dto.payment_method}")
    click.echo(f"Recorded: {dto.local_date} {dto.local_time}")
    click.echo()
    click.echo(f"  {'Product':<24} {'Qty':>5} {'Price':>10} {'Subtotal':>10}")
    click.echo(f"  {'-'*51}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<24} {item.quantity:>5} "
            f"{item.unit_price:>10} {item.subtotal:>10}"
        )
    click.echo(f"  {'-'*51}")
    click.echo(f"  {'Total':<31} {dto.total:>20}")


@click.command("create")
@click.option("--items", required=True, help="Items as 'ProductId:Qty,ProductId:Qty'.")
@click.option(
    "--payment",
    required=True,
    type=click.Choice([m.value for m in PaymentMethod], case_sensitive=False),
    help="Payment method.",
)
@click.option("--seller", required=True, help="Who made the sale.")
@click.option("--json", "as_json", is_flag=True, help="Print a JSON envelope.")
def sale_create(items: str, payment: str, seller: str, as_json: bool) -> None:
    """Record a sale (takes stock from every product sold)."""
    handler = CreateSaleHandler(
        uow=unit_of_work(),
        calendar=calendar(),
        numbering=sale_numbering(),
    )

    with reported_errors(as_json):
        specs = _parse_items(items)
        dto = handler.handle(item_specs=specs, payment_method=payment, seller=seller)

    if as_json:
        echo_envelope(data=plain(dto), message=f"Sale {dto.sale_number} recorded")
        return
    _display_sale(dto)


@click.command("list")
@click.option("--start-date", help="First day, YYYY-MM-DD.")
@click.option("--end-date", help="Last day, YYYY-MM-DD (inclusive).")
@click.option("--utc", "use_utc", is_flag=True, help="Match days in UTC, not local time.")
@click.option("--page", default=1, show_default=True, type=int)
@click.option("--limit", default=10, show_default=True, type=int)
@click.option("--json", "as_json", is_flag=True, help="Print a JSON envelope.")
def sale_list(
    start_date: str | None,
    end_date: str | None,
    use_utc: bool,
    page: int,
    limit: int,
    as_json: bool,
) -> None:
    """List sales, newest first."""
    _, sale_repo = read_repositories()
    handler = ListSalesHandler(sale_repo=sale_repo, calendar=calendar())

    with reported_errors(as_json):
        result = handler.handle(
            start_date=start_date,
            end_date=end_date,
            use_local_date=not use_utc,
            page=page,
            limit=limit,
        )

    if as_json:
        echo_envelope(
            data=plain(result.sales),
            pagination={
                "current_page": result.current_page,
                "total_pages": result.total_pages,
                "total_items": result.total_items,
                "items_per_page": result.items_per_page,
            },
            period=plain(result.period),
        )
        return

    if not result.sales:
        click.echo("No sales found.")
        return

    click.echo(
        f"{'Number':<12} {'Date':<10} {'Time':<8} {'Status':<10} "
        f"{'Payment':<9} {'Seller':<14} {'Total':>10}"
    )
    click.echo("-" * 79)
    for s in result.sales:
        click.echo(
            f"{s.sale_number:<12} {s.local_date:<10} {s.local_time:<8} {s.status:<10} "
            f"{s.payment_method:<9} {s.seller:<14} {s.total:>10}"
        )
    click.echo(
        f"Page {result.current_page}/{max(result.total_pages, 1)} "
        f"({result.total_items} sales)"
    )


@click.command("cancel")
@click.option("--number", "sale_number", required=True, help="Sale number to cancel.")
def sale_cancel(sale_number: str) -> None:
    """Cancel a completed sale (it stops counting in reports)."""
    handler = CancelSaleHandler(uow=unit_of_work())

    with reported_errors():
        handler.handle(sale_number)

    click.echo(f"Sale {sale_number} cancelled.")
