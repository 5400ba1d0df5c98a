"""Order line items (Customer).

Quantities are passed through unchecked: zero or negative values reach the
database as given.
"""

import logging

from shopdb.service import DatabaseAccessor

logger = logging.getLogger(__name__)

INSERT_ITEM_SQL = "INSERT INTO order_items (order_id, product_id, quantity) VALUES ($1, $2, $3)"
DELETE_ITEM_SQL = "DELETE FROM order_items WHERE order_id = $1 AND product_id = $2"


def add_to_order(db: DatabaseAccessor, order_id: int, product_id: int, quantity: int) -> None:
    db.execute_non_query(INSERT_ITEM_SQL, [str(order_id), str(product_id), str(quantity)])
    logger.info("Added product %s x%s to order %s", product_id, quantity, order_id)


def remove_from_order(db: DatabaseAccessor, order_id: int, product_id: int) -> None:
    db.execute_non_query(DELETE_ITEM_SQL, [str(order_id), str(product_id)])
    logger.info("Removed product %s from order %s", product_id, order_id)
