"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from pos.application.add_product import AddProductHandler
from pos.domain.model.product import Category
from pos.infrastructure.bootstrap import read_repositories, unit_of_work
from pos.infrastructure.cli.output import reported_errors


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option(
    "--category",
    type=click.Choice([c.value for c in Category], case_sensitive=False),
    default=None,
    help="Product category.",
)
@click.option("--price", required=True, help="Price (e.g. 3.50).")
@click.option("--cost", default="0", show_default=True, help="Unit cost.")
@click.option("--stock", default=0, show_default=True, type=int, help="Units in stock.")
def product_add(name: str, category: str | None, price: str, cost: str, stock: int) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(uow=unit_of_work())

    with reported_errors():
        product = handler.handle(
            name=name, price=price, stock=stock, category=category, cost=cost
        )

    click.echo(f"Product #{product.id} '{product.name}' added at {product.price}")


@click.command("list")
def product_list() -> None:
    """List all products in the catalog."""
    product_repo, _ = read_repositories()
    with reported_errors():
        products = product_repo.list_all()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<26} {'Category':<12} {'Price':>10} {'Stock':>7}")
    click.echo("-" * 65)
    for p in products:
        category = p.category.value if p.category else "-"
        click.echo(
            f"{p.id:<6} {p.name:<26} {category:<12} {str(p.price):>10} {p.stock:>7}"
        )
