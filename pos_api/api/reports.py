# pos_api/api/reports.py

from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from pos_api.api.deps import get_db
from pos_api.db.engine import Database
from pos_api.errors import ValidationError
from pos_api.models.reports import SalesByDateItem, TopProductItem
from pos_api.services import reports

router = APIRouter(prefix="/api/reportes", tags=["reportes"])


def _parse_date(name: str, value: Optional[str]) -> Optional[date]:
    # an empty value (?desde=) means "no bound"
    if not value:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"{name} must be in YYYY-MM-DD format")


@router.get("/ventas-por-fecha", response_model=List[SalesByDateItem])
def sales_by_date(
    desde: Optional[str] = Query(
        default=None,
        description="ISO date (YYYY-MM-DD), inclusive; defaults to 1970-01-01",
    ),
    hasta: Optional[str] = Query(
        default=None,
        description="ISO date (YYYY-MM-DD), inclusive; defaults to 9999-12-31",
    ),
    db: Database = Depends(get_db),
) -> List[SalesByDateItem]:
    """
    Sum of invoice totals per calendar day, newest day first.
    """
    date_from = _parse_date("desde", desde)
    date_to = _parse_date("hasta", hasta)
    return reports.sales_by_date(db, date_from, date_to)


@router.get("/top-productos", response_model=List[TopProductItem])
def top_products(db: Database = Depends(get_db)) -> List[TopProductItem]:
    """
    The 10 best-selling products by units sold.
    """
    return reports.top_products(db)
