# pos_api/models/invoices.py

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from pos_api.db.schema import MAX_ID


class InvoiceItemIn(BaseModel):
    product_id: int = Field(..., alias="producto_id", ge=1, le=MAX_ID)
    quantity: int = Field(..., alias="cantidad", gt=0, le=MAX_ID)
    # price at the time of sale, never re-read from the catalog
    unit_price: Decimal = Field(..., alias="precio_unitario", ge=0, decimal_places=2)

    class Config:
        populate_by_name = True


class InvoiceIn(BaseModel):
    customer_id: Optional[int] = Field(None, alias="cliente_id", ge=1, le=MAX_ID)
    items: List[InvoiceItemIn] = Field(default_factory=list)

    @field_validator("customer_id", mode="before")
    @classmethod
    def walk_in_customer(cls, value):
        # 0 or an empty form field means a sale without a customer
        if value in (0, ""):
            return None
        return value

    class Config:
        populate_by_name = True


class InvoiceCreated(BaseModel):
    success: bool = True
    invoice_id: int = Field(..., alias="facturaId")
    number: str = Field(..., alias="numero")
    total: Decimal

    class Config:
        populate_by_name = True


class InvoiceOut(BaseModel):
    id: int
    customer_id: Optional[int] = Field(None, alias="cliente_id")
    number: str = Field(..., alias="numero")
    issued_at: datetime = Field(..., alias="fecha")
    total: Decimal
    customer_name: Optional[str] = Field(None, alias="cliente")

    class Config:
        from_attributes = True
        populate_by_name = True


class InvoiceLineOut(BaseModel):
    id: int
    invoice_id: int = Field(..., alias="factura_id")
    product_id: int = Field(..., alias="producto_id")
    quantity: int = Field(..., alias="cantidad")
    unit_price: Decimal = Field(..., alias="precio_unitario")
    subtotal: Decimal
    product_name: Optional[str] = Field(None, alias="producto")

    class Config:
        from_attributes = True
        populate_by_name = True


class InvoiceDetail(BaseModel):
    invoice: InvoiceOut = Field(..., alias="factura")
    lines: List[InvoiceLineOut] = Field(..., alias="detalles")

    class Config:
        populate_by_name = True
