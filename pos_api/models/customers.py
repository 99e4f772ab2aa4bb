# pos_api/models/customers.py

from typing import Optional

from pydantic import BaseModel, Field


class CustomerIn(BaseModel):
    name: str = Field(..., alias="nombre", min_length=1)
    tax_id: Optional[str] = Field(None, alias="ruc")
    phone: Optional[str] = Field(None, alias="telefono")
    email: Optional[str] = None
    address: Optional[str] = Field(None, alias="direccion")

    class Config:
        populate_by_name = True


class CustomerOut(BaseModel):
    id: int
    name: str = Field(..., alias="nombre")
    tax_id: Optional[str] = Field(None, alias="ruc")
    phone: Optional[str] = Field(None, alias="telefono")
    email: Optional[str] = None
    address: Optional[str] = Field(None, alias="direccion")

    class Config:
        from_attributes = True
        populate_by_name = True
