"""Product catalogue writes (Admin)."""

import logging

from shopdb.service import DatabaseAccessor

logger = logging.getLogger(__name__)

INSERT_PRODUCT_SQL = "INSERT INTO products (name, price, stock_quantity) VALUES ($1, $2, $3)"
DELETE_PRODUCT_SQL = "DELETE FROM products WHERE product_id = $1"


def add_product(db: DatabaseAccessor, name: str, price: float, stock: int) -> None:
    db.execute_non_query(INSERT_PRODUCT_SQL, [name, str(price), str(stock)])
    logger.info("Added product %r (price %s, stock %s)", name, price, stock)


def delete_product(db: DatabaseAccessor, product_id: int) -> None:
    db.execute_non_query(DELETE_PRODUCT_SQL, [str(product_id)])
    logger.info("Deleted product %s", product_id)
