# pos_api/api/customers.py

from typing import List

from fastapi import APIRouter, Depends

from pos_api.api.deps import RowId, get_db
from pos_api.db.engine import Database
from pos_api.models.customers import CustomerIn, CustomerOut
from pos_api.services import catalog

router = APIRouter(prefix="/api/clientes", tags=["clientes"])


@router.get("", response_model=List[CustomerOut])
def list_customers(db: Database = Depends(get_db)) -> List[CustomerOut]:
    """
    Return all customers with their contact info, newest first.
    """
    return catalog.list_customers(db)


@router.get("/{customer_id}", response_model=CustomerOut)
def get_customer(customer_id: RowId, db: Database = Depends(get_db)) -> CustomerOut:
    return catalog.get_customer(db, customer_id)


@router.post("")
def create_customer(data: CustomerIn, db: Database = Depends(get_db)):
    customer_id = catalog.create_customer(db, data)
    return {"success": True, "id": customer_id}


@router.put("/{customer_id}")
def update_customer(customer_id: RowId, data: CustomerIn, db: Database = Depends(get_db)):
    catalog.update_customer(db, customer_id, data)
    return {"success": True}


@router.delete("/{customer_id}")
def delete_customer(customer_id: RowId, db: Database = Depends(get_db)):
    """
    Remove a customer. Their invoices stay, with no customer attached.
    """
    catalog.delete_customer(db, customer_id)
    return {"success": True}
