# pos_api/models/products.py

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from pos_api.db.schema import MAX_ID


class ProductIn(BaseModel):
    code: str = Field(..., alias="codigo", min_length=1)
    name: str = Field(..., alias="nombre", min_length=1)
    description: Optional[str] = Field(None, alias="descripcion")
    unit_price: Decimal = Field(..., alias="precio", ge=0, decimal_places=2)
    stock: int = Field(..., ge=0, le=MAX_ID)

    class Config:
        populate_by_name = True


class ProductOut(BaseModel):
    id: int
    code: str = Field(..., alias="codigo")
    name: str = Field(..., alias="nombre")
    description: Optional[str] = Field(None, alias="descripcion")
    unit_price: Decimal = Field(..., alias="precio")
    stock: int

    class Config:
        from_attributes = True
        populate_by_name = True
