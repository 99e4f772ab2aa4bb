# pos_api/db/schema.py

from sqlalchemy import (
    MetaData, Table, Column, Integer, String,
    Numeric, DateTime, ForeignKey, CheckConstraint, Text
)

metadata = MetaData()

# range of an SQLite INTEGER; ids outside it cannot even be bound as parameters
MIN_ID = -(2**63)
MAX_ID = 2**63 - 1

products = Table(
    "products",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("code", String, nullable=False, unique=True),
    Column("name", String, nullable=False),
    Column("description", Text),
    Column("unit_price", Numeric(18, 2), nullable=False),
    Column("stock", Integer, nullable=False),
    CheckConstraint("unit_price >= 0", name="ck_products_unit_price_nonneg"),
    CheckConstraint("stock >= 0", name="ck_products_stock_nonneg"),
)

customers = Table(
    "customers",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String, nullable=False),
    Column("tax_id", String, nullable=True),
    Column("phone", String, nullable=True),
    Column("email", String, nullable=True),
    Column("address", String, nullable=True),
)

# customer_id is informational only: removing a customer keeps its invoices
invoices = Table(
    "invoices",
    metadata,
    Column("id", Integer, primary_key=True),
    Column(
        "customer_id",
        Integer,
        ForeignKey("customers.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column("number", Text, unique=True, nullable=False),
    Column("issued_at", DateTime, nullable=False),
    Column("total", Numeric(18, 2), nullable=False),
    CheckConstraint("total >= 0", name="ck_invoices_total_nonneg"),
)

invoice_lines = Table(
    "invoice_lines",
    metadata,
    Column("id", Integer, primary_key=True),
    Column(
        "invoice_id",
        Integer,
        ForeignKey("invoices.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("product_id", Integer, ForeignKey("products.id"), nullable=False),
    Column("quantity", Integer, nullable=False),
    Column("unit_price", Numeric(18, 2), nullable=False),
    Column("subtotal", Numeric(18, 2), nullable=False),
    CheckConstraint("quantity > 0", name="ck_invoice_lines_quantity_pos"),
    CheckConstraint("unit_price >= 0", name="ck_invoice_lines_unit_price_nonneg"),
)
