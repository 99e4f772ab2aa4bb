# pos_api/models/reports.py

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field


class SalesByDateItem(BaseModel):
    day: date = Field(..., alias="fecha")
    total: Decimal

    class Config:
        populate_by_name = True


class TopProductItem(BaseModel):
    product_id: int = Field(..., alias="id")
    name: str = Field(..., alias="nombre")
    units_sold: int = Field(..., alias="total_vendidos")

    class Config:
        populate_by_name = True
