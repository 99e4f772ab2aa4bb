# pos_api/db/bootstrap.py
"""
Schema creation and sample data for a fresh point-of-sale database.
"""

import logging
from decimal import Decimal
from typing import Dict

from sqlalchemy import func, select

from pos_api.db.engine import Database
from pos_api.db.schema import customers, metadata, products

logger = logging.getLogger(__name__)


SAMPLE_PRODUCTS = [
    {
        "code": "P001",
        "name": "Café Molido 250g",
        "description": "Café de origen",
        "unit_price": Decimal("5.00"),
        "stock": 100,
    },
    {
        "code": "P002",
        "name": "Azúcar 1kg",
        "description": "Azúcar blanca",
        "unit_price": Decimal("2.00"),
        "stock": 200,
    },
    {
        "code": "P003",
        "name": "Galletas",
        "description": "Pack galletas",
        "unit_price": Decimal("3.50"),
        "stock": 150,
    },
]

SAMPLE_CUSTOMERS = [
    {
        "name": "Comercial S.R.L.",
        "tax_id": "80012345",
        "phone": "70000001",
        "email": "ventas@comercial.com",
        "address": "Av. Principal 123",
    },
    {
        "name": "Cliente Final",
        "tax_id": "",
        "phone": "70123456",
        "email": "cliente@correo.com",
        "address": "Calle 45 #12",
    },
]


def create_schema(db: Database) -> None:
    # create_all only issues CREATE TABLE for tables that are missing
    metadata.create_all(db.engine)
    logger.info("Schema ready (%s)", ", ".join(metadata.tables))


def drop_schema(db: Database) -> None:
    metadata.drop_all(db.engine)
    logger.info("Schema dropped")


def seed_sample_data(db: Database) -> Dict[str, int]:
    """
    Insert the sample products and customers, each only into an empty table.

    Returns how many rows were inserted per table.
    """
    inserted = {"products": 0, "customers": 0}

    with db.begin() as conn:
        n_products = conn.execute(select(func.count()).select_from(products)).scalar_one()
        if n_products == 0:
            conn.execute(products.insert(), SAMPLE_PRODUCTS)
            inserted["products"] = len(SAMPLE_PRODUCTS)

        n_customers = conn.execute(select(func.count()).select_from(customers)).scalar_one()
        if n_customers == 0:
            conn.execute(customers.insert(), SAMPLE_CUSTOMERS)
            inserted["customers"] = len(SAMPLE_CUSTOMERS)

    if inserted["products"] or inserted["customers"]:
        logger.info(
            "Seeded %s products and %s customers",
            inserted["products"],
            inserted["customers"],
        )
    return inserted


def init_database(db: Database, seed: bool = True) -> None:
    create_schema(db)
    if seed:
        seed_sample_data(db)
