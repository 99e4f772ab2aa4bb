# pos_api/api/invoices.py

from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from pos_api.api.deps import RowId, get_app_settings, get_db
from pos_api.config import Settings
from pos_api.db.engine import Database
from pos_api.errors import PosError
from pos_api.models.invoices import InvoiceCreated, InvoiceDetail, InvoiceIn, InvoiceOut
from pos_api.services import sales

router = APIRouter(prefix="/api/facturas", tags=["facturas"])


@router.post("", response_model=InvoiceCreated)
def create_invoice(
    data: InvoiceIn,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """
    Create an invoice (header + lines) and decrement stock, all or nothing.
    Any rejected sale answers 400 with the reason.
    """
    try:
        return sales.create_invoice(
            db,
            data.customer_id,
            data.items,
            attempts=settings.INVOICE_NUMBER_ATTEMPTS,
        )
    except PosError as e:
        return JSONResponse(status_code=400, content={"error": e.message})


@router.get("", response_model=List[InvoiceOut])
def list_invoices(db: Database = Depends(get_db)) -> List[InvoiceOut]:
    """
    All invoices with their customer name, most recent first.
    """
    return sales.list_invoices(db)


@router.get("/{invoice_id}", response_model=InvoiceDetail)
def get_invoice(invoice_id: RowId, db: Database = Depends(get_db)) -> InvoiceDetail:
    return sales.get_invoice(db, invoice_id)
