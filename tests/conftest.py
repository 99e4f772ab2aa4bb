# tests/conftest.py

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from pos_api.config import Settings
from pos_api.db.bootstrap import create_schema
from pos_api.db.engine import Database
from pos_api.main import create_app
from pos_api.models.products import ProductIn
from pos_api.services import catalog


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'pos.sqlite'}",
        SEED_SAMPLE_DATA=False,
        STATIC_DIR=str(tmp_path / "no-frontend"),
    )


@pytest.fixture
def db(settings):
    database = Database(settings.DATABASE_URL).open()
    create_schema(database)
    yield database
    database.close()


@pytest.fixture
def client(settings):
    app = create_app(settings)
    # the context manager runs the lifespan (open db, create schema)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_product(db):
    counter = {"n": 0}

    def _make(price="5.00", stock=100, name=None):
        counter["n"] += 1
        data = ProductIn(
            code=f"T{counter['n']:03d}",
            name=name or f"Product {counter['n']}",
            description=None,
            unit_price=Decimal(price),
            stock=stock,
        )
        return catalog.create_product(db, data)

    return _make
