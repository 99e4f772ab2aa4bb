# pos_api/services/sales.py
"""
Invoice creation and lookup.

An invoice is written in a single transaction: header, one line per item
and one stock decrement per line. If any item fails (unknown product,
not enough stock) the whole call is rolled back, so an invoice either
does not exist or exists with consistent totals and decremented stock.
"""

import logging
import random
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import and_, select
from sqlalchemy.exc import IntegrityError

from pos_api.db.engine import Database
from pos_api.db.schema import customers, invoice_lines, invoices, products
from pos_api.errors import (
    InsufficientStockError,
    InvoiceNumberConflictError,
    NotFoundError,
    ValidationError,
)
from pos_api.models.invoices import (
    InvoiceCreated,
    InvoiceDetail,
    InvoiceItemIn,
    InvoiceLineOut,
    InvoiceOut,
)

logger = logging.getLogger(__name__)

DEFAULT_NUMBER_ATTEMPTS = 5

CENT = Decimal("0.01")


def generate_invoice_number(now: Optional[datetime] = None) -> str:
    """
    F + YYMMDD + "-" + random 4-digit suffix, e.g. F251019-4821.

    Not collision-proof; the unique constraint on invoices.number catches
    duplicates and create_invoice retries with a fresh suffix.
    """
    now = now or datetime.now()
    return f"F{now:%y%m%d}-{random.randint(1000, 9999)}"


def _validate_items(items: Sequence[InvoiceItemIn]) -> None:
    if not items:
        raise ValidationError("Invoice has no items")

    for item in items:
        if item.quantity <= 0:
            raise ValidationError(
                f"Quantity must be positive for product {item.product_id}"
            )
        if not item.unit_price.is_finite() or item.unit_price < 0:
            raise ValidationError(
                f"Unit price must be a non-negative amount for product {item.product_id}"
            )
        # prices are stored with two decimals; anything finer would make the
        # returned total differ from the stored one
        if item.unit_price != item.unit_price.quantize(CENT):
            raise ValidationError(
                f"Unit price has more than two decimals for product {item.product_id}"
            )


def _number_taken(db: Database, number: str) -> bool:
    with db.connect() as conn:
        row = conn.execute(
            select(invoices.c.id).where(invoices.c.number == number)
        ).first()
    return row is not None


def _write_invoice(
    db: Database,
    customer_id: Optional[int],
    number: str,
    issued_at: datetime,
    lines: List[Tuple[InvoiceItemIn, Decimal]],
    total: Decimal,
) -> int:
    with db.begin() as conn:
        if customer_id is not None:
            customer = conn.execute(
                select(customers.c.id).where(customers.c.id == customer_id)
            ).first()
            if customer is None:
                raise NotFoundError(f"Customer not found: {customer_id}")

        result = conn.execute(
            invoices.insert().values(
                customer_id=customer_id,
                number=number,
                issued_at=issued_at,
                total=total,
            )
        )
        invoice_id = result.inserted_primary_key[0]

        for item, subtotal in lines:
            product = conn.execute(
                select(products.c.id, products.c.name, products.c.stock)
                .where(products.c.id == item.product_id)
                .with_for_update()
            ).mappings().first()

            if product is None:
                raise NotFoundError(f"Product not found: {item.product_id}")
            if product["stock"] < item.quantity:
                raise InsufficientStockError(
                    f"Insufficient stock for {product['name']}: "
                    f"requested {item.quantity}, available {product['stock']}"
                )

            conn.execute(
                invoice_lines.insert().values(
                    invoice_id=invoice_id,
                    product_id=item.product_id,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    subtotal=subtotal,
                )
            )

            # Guarded decrement: never lets stock go negative even if another
            # writer got in between the read above and this update.
            updated = conn.execute(
                products.update()
                .where(
                    and_(
                        products.c.id == item.product_id,
                        products.c.stock >= item.quantity,
                    )
                )
                .values(stock=products.c.stock - item.quantity)
            )
            if updated.rowcount != 1:
                raise InsufficientStockError(
                    f"Insufficient stock for {product['name']}"
                )

    return invoice_id


def create_invoice(
    db: Database,
    customer_id: Optional[int],
    items: Sequence[InvoiceItemIn],
    attempts: int = DEFAULT_NUMBER_ATTEMPTS,
) -> InvoiceCreated:
    """
    Create an invoice for items sold at the given unit prices.

    Raises ValidationError (no items, bad quantity/price), NotFoundError
    (unknown product or customer), InsufficientStockError, and
    InvoiceNumberConflictError when every generated number was taken.
    """
    _validate_items(items)

    lines = [(item, item.unit_price * item.quantity) for item in items]
    total = sum((subtotal for _, subtotal in lines), Decimal("0"))
    issued_at = datetime.now()

    for attempt in range(1, attempts + 1):
        number = generate_invoice_number(issued_at)
        try:
            invoice_id = _write_invoice(db, customer_id, number, issued_at, lines, total)
        except IntegrityError:
            # Anything other than a duplicate number is a real failure
            if not _number_taken(db, number):
                raise
            logger.warning(
                "Invoice number %s already in use (attempt %s/%s)",
                number,
                attempt,
                attempts,
            )
            continue
        except (NotFoundError, InsufficientStockError) as e:
            logger.info("Invoice rejected: %s", e)
            raise

        logger.info(
            "Created invoice %s (id=%s, lines=%s, total=%s)",
            number,
            invoice_id,
            len(lines),
            total,
        )
        return InvoiceCreated(invoice_id=invoice_id, number=number, total=total)

    raise InvoiceNumberConflictError(
        f"Could not allocate a unique invoice number after {attempts} attempts"
    )


def _invoice_header_query():
    return select(
        invoices.c.id,
        invoices.c.customer_id,
        invoices.c.number,
        invoices.c.issued_at,
        invoices.c.total,
        customers.c.name.label("customer_name"),
    ).select_from(invoices.outerjoin(customers))


def _row_to_invoice(row) -> InvoiceOut:
    return InvoiceOut(
        id=row["id"],
        customer_id=row["customer_id"],
        number=row["number"],
        issued_at=row["issued_at"],
        total=row["total"],
        customer_name=row["customer_name"],
    )


def get_invoice(db: Database, invoice_id: int) -> InvoiceDetail:
    """
    Look up one invoice with its customer name and its lines.
    """
    with db.connect() as conn:
        header = conn.execute(
            _invoice_header_query().where(invoices.c.id == invoice_id)
        ).mappings().first()

        if header is None:
            raise NotFoundError(f"Invoice not found: {invoice_id}")

        rows = conn.execute(
            select(
                invoice_lines.c.id,
                invoice_lines.c.invoice_id,
                invoice_lines.c.product_id,
                invoice_lines.c.quantity,
                invoice_lines.c.unit_price,
                invoice_lines.c.subtotal,
                products.c.name.label("product_name"),
            )
            .select_from(invoice_lines.outerjoin(products))
            .where(invoice_lines.c.invoice_id == invoice_id)
            .order_by(invoice_lines.c.id)
        ).mappings().all()

    lines = [
        InvoiceLineOut(
            id=row["id"],
            invoice_id=row["invoice_id"],
            product_id=row["product_id"],
            quantity=row["quantity"],
            unit_price=row["unit_price"],
            subtotal=row["subtotal"],
            product_name=row["product_name"],
        )
        for row in rows
    ]
    return InvoiceDetail(invoice=_row_to_invoice(header), lines=lines)


def list_invoices(db: Database) -> List[InvoiceOut]:
    with db.connect() as conn:
        rows = conn.execute(
            _invoice_header_query().order_by(
                invoices.c.issued_at.desc(), invoices.c.id.desc()
            )
        ).mappings().all()

    return [_row_to_invoice(row) for row in rows]
