import click

from pos.infrastructure.bootstrap import settings
from pos.infrastructure.cli.product_commands import product_add, product_list
from pos.infrastructure.cli.report_commands import (
    report_by_category,
    report_products_chart,
    report_products_sold,
    report_sales_chart,
    report_summary,
    report_top_products,
)
from pos.infrastructure.cli.sale_commands import sale_cancel, sale_create, sale_list
from pos.infrastructure.logging_config import configure_logging


@click.group()
def cli() -> None:
    """POS — point-of-sale ledger and sales reports"""
    try:
        configure_logging(settings().log_level)
    except ValueError as exc:
        raise click.ClickException(f"Invalid configuration: {exc}")


@cli.group()
def sale() -> None:
    """Record and browse sales."""


@cli.group()
def product() -> None:
    """Manage the product catalog."""


@cli.group()
def report() -> None:
    """Sales reports."""


# Register subcommands
sale.add_command(sale_cancel)
sale.add_command(sale_create)
sale.add_command(sale_list)
product.add_command(product_add)
product.add_command(product_list)
report.add_command(report_by_category)
report.add_command(report_products_chart)
report.add_command(report_products_sold)
report.add_command(report_sales_chart)
report.add_command(report_summary)
report.add_command(report_top_products)
