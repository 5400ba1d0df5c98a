"""Shared test fixtures."""

import pytest

from shopdb import create_accessor
from shopdb.shop import ensure_shop_schema


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'test.db'}"


@pytest.fixture
def accessor(db_url):
    """Provide a fresh SQLite accessor for each test."""
    db = create_accessor(db_url)
    yield db
    db.close()


@pytest.fixture
def shop_db(accessor):
    """Accessor with the orders/products/order_items tables in place."""
    ensure_shop_schema(accessor)
    return accessor
