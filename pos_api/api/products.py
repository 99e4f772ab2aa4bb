# pos_api/api/products.py

from typing import List

from fastapi import APIRouter, Depends

from pos_api.api.deps import RowId, get_db
from pos_api.db.engine import Database
from pos_api.models.products import ProductIn, ProductOut
from pos_api.services import catalog

router = APIRouter(prefix="/api/productos", tags=["productos"])


@router.get("", response_model=List[ProductOut])
def list_products(db: Database = Depends(get_db)) -> List[ProductOut]:
    """
    Return all products, newest first.
    """
    return catalog.list_products(db)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: RowId, db: Database = Depends(get_db)) -> ProductOut:
    return catalog.get_product(db, product_id)


@router.post("")
def create_product(data: ProductIn, db: Database = Depends(get_db)):
    product_id = catalog.create_product(db, data)
    return {"success": True, "id": product_id}


@router.put("/{product_id}")
def update_product(product_id: RowId, data: ProductIn, db: Database = Depends(get_db)):
    catalog.update_product(db, product_id, data)
    return {"success": True}


@router.delete("/{product_id}")
def delete_product(product_id: RowId, db: Database = Depends(get_db)):
    catalog.delete_product(db, product_id)
    return {"success": True}
