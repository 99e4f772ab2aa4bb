# pos_api/services/reports.py

from datetime import date
from typing import List, Optional

from sqlalchemy import Date, func, select

from pos_api.db.engine import Database
from pos_api.db.schema import invoice_lines, invoices, products
from pos_api.models.reports import SalesByDateItem, TopProductItem

EARLIEST_DATE = date(1970, 1, 1)
LATEST_DATE = date(9999, 12, 31)

TOP_PRODUCTS_LIMIT = 10


def sales_by_date(
    db: Database,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> List[SalesByDateItem]:
    """
    Daily invoice totals within [date_from, date_to], newest day first.
    """
    date_from = date_from or EARLIEST_DATE
    date_to = date_to or LATEST_DATE

    day = func.date(invoices.c.issued_at, type_=Date)

    with db.connect() as conn:
        stmt = (
            select(
                day.label("day"),
                func.sum(invoices.c.total).label("total"),
            )
            .where(day.between(date_from, date_to))
            .group_by(day)
            .order_by(day.desc())
        )
        rows = conn.execute(stmt).mappings().all()

    return [SalesByDateItem(day=row["day"], total=row["total"]) for row in rows]


def top_products(db: Database, limit: int = TOP_PRODUCTS_LIMIT) -> List[TopProductItem]:
    """
    Products ranked by units sold across all invoice lines.
    """
    units_sold = func.sum(invoice_lines.c.quantity).label("units_sold")

    with db.connect() as conn:
        stmt = (
            select(
                products.c.id,
                products.c.name,
                units_sold,
            )
            .select_from(invoice_lines.join(products))
            .group_by(products.c.id, products.c.name)
            .order_by(units_sold.desc(), products.c.id)
            .limit(limit)
        )
        rows = conn.execute(stmt).mappings().all()

    return [
        TopProductItem(
            product_id=row["id"],
            name=row["name"],
            units_sold=row["units_sold"],
        )
        for row in rows
    ]
