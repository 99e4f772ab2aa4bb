# pos_api/services/catalog.py
"""
Product and customer CRUD.

Updates and deletes against an id that does not exist simply affect no
rows; only the single-row lookups report a missing id.
"""

from typing import List

from sqlalchemy import select

from pos_api.db.engine import Database
from pos_api.db.schema import customers, products
from pos_api.errors import NotFoundError
from pos_api.models.customers import CustomerIn, CustomerOut
from pos_api.models.products import ProductIn, ProductOut


def _row_to_product(row) -> ProductOut:
    return ProductOut(
        id=row["id"],
        code=row["code"],
        name=row["name"],
        description=row["description"],
        unit_price=row["unit_price"],
        stock=row["stock"],
    )


def _row_to_customer(row) -> CustomerOut:
    return CustomerOut(
        id=row["id"],
        name=row["name"],
        tax_id=row["tax_id"],
        phone=row["phone"],
        email=row["email"],
        address=row["address"],
    )


# ---- Products ----

def list_products(db: Database) -> List[ProductOut]:
    with db.connect() as conn:
        rows = conn.execute(
            select(products).order_by(products.c.id.desc())
        ).mappings().all()

    return [_row_to_product(row) for row in rows]


def get_product(db: Database, product_id: int) -> ProductOut:
    with db.connect() as conn:
        row = conn.execute(
            select(products).where(products.c.id == product_id)
        ).mappings().first()

    if row is None:
        raise NotFoundError(f"Product not found: {product_id}")
    return _row_to_product(row)


def create_product(db: Database, data: ProductIn) -> int:
    with db.begin() as conn:
        result = conn.execute(products.insert().values(**data.model_dump()))
        return result.inserted_primary_key[0]


def update_product(db: Database, product_id: int, data: ProductIn) -> None:
    with db.begin() as conn:
        conn.execute(
            products.update()
            .where(products.c.id == product_id)
            .values(**data.model_dump())
        )


def delete_product(db: Database, product_id: int) -> None:
    with db.begin() as conn:
        conn.execute(products.delete().where(products.c.id == product_id))


# ---- Customers ----

def list_customers(db: Database) -> List[CustomerOut]:
    with db.connect() as conn:
        rows = conn.execute(
            select(customers).order_by(customers.c.id.desc())
        ).mappings().all()

    return [_row_to_customer(row) for row in rows]


def get_customer(db: Database, customer_id: int) -> CustomerOut:
    with db.connect() as conn:
        row = conn.execute(
            select(customers).where(customers.c.id == customer_id)
        ).mappings().first()

    if row is None:
        raise NotFoundError(f"Customer not found: {customer_id}")
    return _row_to_customer(row)


def create_customer(db: Database, data: CustomerIn) -> int:
    with db.begin() as conn:
        result = conn.execute(customers.insert().values(**data.model_dump()))
        return result.inserted_primary_key[0]


def update_customer(db: Database, customer_id: int, data: CustomerIn) -> None:
    with db.begin() as conn:
        conn.execute(
            customers.update()
            .where(customers.c.id == customer_id)
            .values(**data.model_dump())
        )


def delete_customer(db: Database, customer_id: int) -> None:
    # invoices keep their history; the FK sets their customer_id to NULL
    with db.begin() as conn:
        conn.execute(customers.delete().where(customers.c.id == customer_id))
