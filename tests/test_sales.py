# tests/test_sales.py

import re
from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy import event, func, select

from pos_api.db.schema import invoice_lines, invoices
from pos_api.errors import (
    InsufficientStockError,
    InvoiceNumberConflictError,
    NotFoundError,
    ValidationError,
)
from pos_api.models.customers import CustomerIn
from pos_api.models.invoices import InvoiceItemIn
from pos_api.models.products import ProductIn
from pos_api.services import catalog, sales


def item(product_id, quantity, price):
    return InvoiceItemIn(
        product_id=product_id, quantity=quantity, unit_price=Decimal(price)
    )


def stock_of(db, product_id):
    return catalog.get_product(db, product_id).stock


def count_rows(db, table):
    with db.connect() as conn:
        return conn.execute(select(func.count()).select_from(table)).scalar_one()


def test_invoice_number_format():
    number = sales.generate_invoice_number(datetime(2024, 3, 7, 15, 30))
    assert re.fullmatch(r"F240307-\d{4}", number)
    suffix = int(number.split("-")[1])
    assert 1000 <= suffix <= 9999


def test_single_line_sale_decrements_stock(db, make_product):
    a = make_product(price="5.00", stock=100)

    created = sales.create_invoice(db, None, [item(a, 3, "5.0")])

    assert created.total == Decimal("15.0")
    assert stock_of(db, a) == 97

    detail = sales.get_invoice(db, created.invoice_id)
    assert detail.invoice.number == created.number
    assert detail.invoice.total == Decimal("15")
    assert len(detail.lines) == 1
    assert detail.lines[0].subtotal == Decimal("15")


def test_two_line_sale_total_matches_lines(db, make_product):
    a = make_product(price="5.00", stock=100)
    b = make_product(price="2.00", stock=200)
    other = make_product(stock=50)

    created = sales.create_invoice(db, None, [item(a, 2, "5.0"), item(b, 1, "2.0")])

    assert created.total == Decimal("12.0")
    detail = sales.get_invoice(db, created.invoice_id)
    assert len(detail.lines) == 2
    assert detail.invoice.total == sum(line.subtotal for line in detail.lines)
    for line in detail.lines:
        assert line.subtotal == line.unit_price * line.quantity

    assert stock_of(db, a) == 98
    assert stock_of(db, b) == 199
    assert stock_of(db, other) == 50


def test_sale_uses_caller_price_not_catalog_price(db, make_product):
    a = make_product(price="5.00", stock=10)

    created = sales.create_invoice(db, None, [item(a, 2, "4.25")])
    assert created.total == Decimal("8.50")

    # later price changes leave the recorded line untouched
    catalog.update_product(
        db,
        a,
        ProductIn(code="T001", name="Product 1", unit_price=Decimal("9.99"), stock=8),
    )
    assert catalog.get_product(db, a).unit_price == Decimal("9.99")
    line = sales.get_invoice(db, created.invoice_id).lines[0]
    assert line.unit_price == Decimal("4.25")


def test_empty_items_is_rejected(db):
    with pytest.raises(ValidationError):
        sales.create_invoice(db, None, [])
    assert count_rows(db, invoices) == 0


def test_non_positive_quantity_is_rejected(db, make_product):
    a = make_product(stock=10)
    bad = InvoiceItemIn.model_construct(product_id=a, quantity=0, unit_price=Decimal("1"))

    with pytest.raises(ValidationError):
        sales.create_invoice(db, None, [bad])
    assert stock_of(db, a) == 10


def test_unknown_product_rolls_back_everything(db, make_product):
    a = make_product(stock=100)

    with pytest.raises(NotFoundError):
        sales.create_invoice(db, None, [item(a, 5, "5.0"), item(9999, 1, "1.0")])

    assert stock_of(db, a) == 100
    assert count_rows(db, invoices) == 0
    assert count_rows(db, invoice_lines) == 0


def test_insufficient_stock_rolls_back_earlier_lines(db, make_product):
    a = make_product(stock=100)
    b = make_product(stock=1, name="Galletas")

    with pytest.raises(InsufficientStockError) as exc_info:
        sales.create_invoice(db, None, [item(a, 10, "5.0"), item(b, 2, "3.5")])

    assert "Galletas" in str(exc_info.value)
    assert stock_of(db, a) == 100
    assert stock_of(db, b) == 1
    assert count_rows(db, invoices) == 0
    assert count_rows(db, invoice_lines) == 0


def test_same_product_twice_checks_running_stock(db, make_product):
    a = make_product(stock=5)

    with pytest.raises(InsufficientStockError):
        sales.create_invoice(db, None, [item(a, 3, "1.0"), item(a, 3, "1.0")])
    assert stock_of(db, a) == 5

    sales.create_invoice(db, None, [item(a, 3, "1.0"), item(a, 2, "1.0")])
    assert stock_of(db, a) == 0


def test_unknown_customer_is_rejected(db, make_product):
    a = make_product(stock=5)

    with pytest.raises(NotFoundError):
        sales.create_invoice(db, 42, [item(a, 1, "1.0")])
    assert stock_of(db, a) == 5


def test_invoice_keeps_history_after_customer_delete(db, make_product):
    a = make_product(stock=5)
    customer_id = catalog.create_customer(db, CustomerIn(name="Comercial S.R.L."))

    created = sales.create_invoice(db, customer_id, [item(a, 1, "5.0")])
    assert sales.get_invoice(db, created.invoice_id).invoice.customer_name == "Comercial S.R.L."

    catalog.delete_customer(db, customer_id)

    header = sales.get_invoice(db, created.invoice_id).invoice
    assert header.customer_id is None
    assert header.customer_name is None


def test_get_missing_invoice(db):
    with pytest.raises(NotFoundError):
        sales.get_invoice(db, 12345)


def test_list_invoices_most_recent_first(db, make_product):
    a = make_product(stock=10)
    first = sales.create_invoice(db, None, [item(a, 1, "1.0")])
    second = sales.create_invoice(db, None, [item(a, 1, "1.0")])

    listed = sales.list_invoices(db)
    assert [inv.id for inv in listed] == [second.invoice_id, first.invoice_id]


def test_number_collision_is_retried(db, make_product, monkeypatch):
    a = make_product(stock=10)
    taken = sales.create_invoice(db, None, [item(a, 1, "1.0")]).number

    numbers = iter([taken, "F990101-1234"])
    monkeypatch.setattr(sales, "generate_invoice_number", lambda now=None: next(numbers))

    created = sales.create_invoice(db, None, [item(a, 2, "1.0")])

    assert created.number == "F990101-1234"
    assert stock_of(db, a) == 7
    assert count_rows(db, invoices) == 2


def test_number_collision_gives_up_after_attempts(db, make_product, monkeypatch):
    a = make_product(stock=10)
    taken = sales.create_invoice(db, None, [item(a, 1, "1.0")]).number
    monkeypatch.setattr(sales, "generate_invoice_number", lambda now=None: taken)

    with pytest.raises(InvoiceNumberConflictError):
        sales.create_invoice(db, None, [item(a, 1, "1.0")], attempts=3)

    assert stock_of(db, a) == 9
    assert count_rows(db, invoices) == 1


def test_price_with_more_than_two_decimals_is_rejected(db, make_product):
    a = make_product(stock=10)
    bad = InvoiceItemIn.model_construct(
        product_id=a, quantity=3, unit_price=Decimal("0.335")
    )

    with pytest.raises(ValidationError):
        sales.create_invoice(db, None, [bad])
    assert stock_of(db, a) == 10
    assert count_rows(db, invoices) == 0


def test_stock_taken_after_the_check_rolls_back(db, make_product):
    a = make_product(stock=100)
    b = make_product(stock=10)

    def drain_b(conn, cursor, statement, parameters, context, executemany):
        # another writer empties b just before its line is written, i.e.
        # between the stock check and the decrement
        if statement.startswith("INSERT INTO invoice_lines") and parameters[1] == b:
            cursor.connection.execute("UPDATE products SET stock = 0 WHERE id = ?", (b,))

    event.listen(db.engine, "before_cursor_execute", drain_b)
    try:
        with pytest.raises(InsufficientStockError):
            sales.create_invoice(db, None, [item(a, 4, "1.0"), item(b, 2, "1.0")])
    finally:
        event.remove(db.engine, "before_cursor_execute", drain_b)

    assert stock_of(db, a) == 100
    assert stock_of(db, b) == 10
    assert count_rows(db, invoices) == 0
    assert count_rows(db, invoice_lines) == 0
