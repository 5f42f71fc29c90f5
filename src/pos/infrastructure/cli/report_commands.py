"""CLI commands for the sales reports.

Every report accepts ``--json`` to print the envelope that downstream
tooling consumes, and ``--utc`` to match calendar days in UTC instead of
the configured local offset.
"""

from __future__ import annotations

import click

from pos.application.show_products_chart import DEFAULT_TOP, ShowProductsChartHandler
from pos.application.show_products_sold import ShowProductsSoldHandler
from pos.application.show_sales_by_category import ShowSalesByCategoryHandler
from pos.application.show_sales_chart import ShowSalesChartHandler
from pos.application.show_sales_summary import ShowSalesSummaryHandler
from pos.application.show_top_products import DEFAULT_LIMIT, ShowTopProductsHandler
from pos.domain.service.sales_aggregation import SORT_KEYS
from pos.infrastructure.bootstrap import calendar, read_repositories
from pos.infrastructure.cli.output import echo_envelope, plain, reported_errors


def window_options(func):
    """--start-date / --end-date / --utc, shared by the windowed reports."""
    func = click.option(
        "--utc", "use_utc", is_flag=True, help="Match days in UTC, not local time."
    )(func)
    func = click.option("--end-date", help="Last day, YYYY-MM-DD (inclusive).")(func)
    func = click.option("--start-date", help="First day, YYYY-MM-DD.")(func)
    return func


json_option = click.option("--json", "as_json", is_flag=True, help="Print a JSON envelope.")


def _product_table(rows) -> None:
    click.echo(
        f"{'ID':<6} {'Product':<26} {'Category':<14} {'Qty':>6} {'Revenue':>11}"
    )
    click.echo("-" * 67)
    for row in rows:
        click.echo(
            f"{row.product_id:<6} {row.product_name:<26} {row.category:<14} "
            f"{row.total_quantity:>6} {row.total_revenue:>11}"
        )


def _category_table(rows) -> None:
    click.echo(f"{'Category':<16} {'Products':>8} {'Qty':>6} {'Revenue':>11}")
    click.echo("-" * 44)
    for row in rows:
        click.echo(
            f"{row.category:<16} {row.product_count:>8} "
            f"{row.total_quantity:>6} {row.total_revenue:>11}"
        )


def _period_line(period) -> str:
    if period is None:
        return "all time"
    mode = "local" if period.use_local_date else "UTC"
    return f"{period.start_date} .. {period.end_date} ({mode})"


@click.command("products-sold")
@window_options
@json_option
def report_products_sold(
    start_date: str | None, end_date: str | None, use_utc: bool, as_json: bool
) -> None:
    """Units and revenue per product between two days."""
    product_repo, sale_repo = read_repositories()
    handler = ShowProductsSoldHandler(sale_repo, product_repo, calendar())

    with reported_errors(as_json):
        result = handler.handle(start_date, end_date, use_local_date=not use_utc)

    summary = {
        "total_products": result.total_products,
        "total_items_sold": result.total_items_sold,
        "total_revenue": result.total_revenue,
        "total_sales": result.total_sales,
    }
    if as_json:
        echo_envelope(period=plain(result.period), data=plain(result.rows), summary=summary)
        return

    click.echo(f"Products sold, {_period_line(result.period)}")
    if not result.rows:
        click.echo("No sales in this period.")
        return
    _product_table(result.rows)
    click.echo(
        f"{result.total_sales} sales, {result.total_items_sold} items, "
        f"revenue {result.total_revenue}"
    )


@click.command("top-products")
@click.option("--limit", default=DEFAULT_LIMIT, show_default=True, type=int)
@click.option(
    "--sort-by", type=click.Choice(SORT_KEYS), default="quantity", show_default=True
)
@click.option("--category", default=None, help="Only products of this category.")
@window_options
@json_option
def report_top_products(
    limit: int,
    sort_by: str,
    category: str | None,
    start_date: str | None,
    end_date: str | None,
    use_utc: bool,
    as_json: bool,
) -> None:
    """Best-selling products."""
    product_repo, sale_repo = read_repositories()
    handler = ShowTopProductsHandler(sale_repo, product_repo, calendar())

    with reported_errors(as_json):
        result = handler.handle(
            limit=limit,
            sort_by=sort_by,
            category=category,
            start_date=start_date,
            end_date=end_date,
            use_local_date=not use_utc,
        )

    if as_json:
        echo_envelope(
            data=plain(result.rows),
            filters={
                "limit": result.limit,
                "sort_by": result.sort_by,
                "category": result.category,
                "period": plain(result.period),
            },
            total_products_analyzed=result.total_products_analyzed,
        )
        return

    click.echo(
        f"Top {result.limit} by {result.sort_by}, {_period_line(result.period)} "
        f"({result.total_products_analyzed} products analyzed)"
    )
    if not result.rows:
        click.echo("No sales found.")
        return
    _product_table(result.rows)


@click.command("sales-chart")
@click.option(
    "--group-by",
    type=click.Choice(["day", "week", "month"]),
    default="day",
    show_default=True,
)
@window_options
@json_option
def report_sales_chart(
    group_by: str,
    start_date: str | None,
    end_date: str | None,
    use_utc: bool,
    as_json: bool,
) -> None:
    """Sales count and revenue per day, week or month."""
    _, sale_repo = read_repositories()
    handler = ShowSalesChartHandler(sale_repo, calendar())

    with reported_errors(as_json):
        result = handler.handle(group_by, start_date, end_date, use_local_date=not use_utc)

    if as_json:
        extra = {"degraded": True, "note": result.note} if result.degraded else {}
        echo_envelope(
            group_by=result.group_by,
            period=plain(result.period),
            data=plain(result.points),
            summary={
                "total_data_points": result.total_data_points,
                "total_revenue": result.total_revenue,
                "total_sales": result.total_sales,
            },
            **extra,
        )
        return

    if result.degraded:
        click.echo(f"WARNING: {result.note}", err=True)
    click.echo(f"Sales by {result.group_by}, {_period_line(result.period)}")
    click.echo(f"{'Bucket':<12} {'Sales':>6} {'Revenue':>11} {'Avg ticket':>11}")
    click.echo("-" * 43)
    for point in result.points:
        click.echo(
            f"{point.date:<12} {point.total_sales:>6} "
            f"{point.total_revenue:>11} {point.average_ticket:>11}"
        )
    click.echo(f"{result.total_sales} sales, revenue {result.total_revenue}")


@click.command("by-category")
@window_options
@json_option
def report_by_category(
    start_date: str | None, end_date: str | None, use_utc: bool, as_json: bool
) -> None:
    """Revenue per product category."""
    product_repo, sale_repo = read_repositories()
    handler = ShowSalesByCategoryHandler(sale_repo, product_repo, calendar())

    with reported_errors(as_json):
        result = handler.handle(start_date, end_date, use_local_date=not use_utc)

    if as_json:
        echo_envelope(
            period=plain(result.period),
            data=plain(result.rows),
            summary={
                "total_categories": result.total_categories,
                "total_revenue": result.total_revenue,
            },
        )
        return

    click.echo(f"Sales by category, {_period_line(result.period)}")
    if not result.rows:
        click.echo("No sales found.")
        return
    _category_table(result.rows)
    click.echo(f"Total revenue {result.total_revenue}")


@click.command("summary")
@click.option("--utc", "use_utc", is_flag=True, help="Use the UTC day, not local time.")
@json_option
def report_summary(use_utc: bool, as_json: bool) -> None:
    """Today, last 7 days and all-time totals."""
    _, sale_repo = read_repositories()
    handler = ShowSalesSummaryHandler(sale_repo, calendar())

    with reported_errors(as_json):
        result = handler.handle(use_local_date=not use_utc)

    if as_json:
        echo_envelope(data=plain(result))
        return

    click.echo(f"Summary as of {result.today_date}")
    click.echo(f"{'Window':<10} {'Sales':>6} {'Revenue':>11} {'Avg ticket':>11}")
    click.echo("-" * 41)
    for label, totals in (
        ("Today", result.today),
        ("7 days", result.week),
        ("All time", result.all_time),
    ):
        click.echo(
            f"{label:<10} {totals.sales:>6} {totals.revenue:>11} {totals.average_ticket:>11}"
        )


@click.command("products-chart")
@click.option("--top", default=DEFAULT_TOP, show_default=True, type=int)
@click.option(
    "--sort-by", type=click.Choice(SORT_KEYS), default="quantity", show_default=True
)
@click.option("--category", default=None, help="Only products of this category.")
@window_options
@json_option
def report_products_chart(
    top: int,
    sort_by: str,
    category: str | None,
    start_date: str | None,
    end_date: str | None,
    use_utc: bool,
    as_json: bool,
) -> None:
    """Top products with category split and daily trend."""
    product_repo, sale_repo = read_repositories()
    handler = ShowProductsChartHandler(sale_repo, product_repo, calendar())

    with reported_errors(as_json):
        result = handler.handle(
            top=top,
            sort_by=sort_by,
            category=category,
            start_date=start_date,
            end_date=end_date,
            use_local_date=not use_utc,
        )

    if as_json:
        echo_envelope(
            data={
                "top_products": plain(result.rows),
                "by_category": plain(result.categories),
                "trends": plain(result.trends),
            },
            filters={
                "top": result.top,
                "sort_by": result.sort_by,
                "category": result.category,
                "period": plain(result.period),
            },
            summary={
                "total_products": result.total_products,
                "total_items_sold": result.total_items_sold,
                "total_revenue": result.total_revenue,
                "average_price": result.average_price,
            },
        )
        return

    click.echo(f"Top {result.top} products by {result.sort_by}, {_period_line(result.period)}")
    if not result.rows:
        click.echo("No sales found.")
        return
    _product_table(result.rows)
    click.echo()
    _category_table(result.categories)
    click.echo()
    for trend in result.trends:
        days = ", ".join(f"{p.date}: {p.quantity}" for p in trend.points)
        click.echo(f"{trend.product_name}: {days}")
    click.echo(
        f"{result.total_items_sold} items, revenue {result.total_revenue}, "
        f"average price {result.average_price}"
    )
