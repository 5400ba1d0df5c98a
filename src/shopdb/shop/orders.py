"""Order status operations shared by every role, plus order approval."""

import logging

from shopdb.service import DatabaseAccessor

logger = logging.getLogger(__name__)

STATUS_PENDING = "pending"
STATUS_CANCELED = "canceled"
STATUS_RETURNED = "returned"
STATUS_APPROVED = "approved"

SELECT_STATUS_SQL = "SELECT status FROM orders WHERE order_id = $1"
INSERT_ORDER_SQL = "INSERT INTO orders (status) VALUES ($1)"
UPDATE_STATUS_SQL = "UPDATE orders SET status = $1 WHERE order_id = $2"


def view_order_status(db: DatabaseAccessor, order_id: int) -> str | None:
    """Return the order's status, or None if there is no such order."""
    rows = db.execute_query(SELECT_STATUS_SQL, [str(order_id)])
    return rows[0][0] if rows else None


def create_order(db: DatabaseAccessor) -> None:
    db.execute_non_query(INSERT_ORDER_SQL, [STATUS_PENDING])
    logger.info("Created a new %s order", STATUS_PENDING)


def set_order_status(db: DatabaseAccessor, order_id: int, status: str) -> None:
    db.execute_non_query(UPDATE_STATUS_SQL, [status, str(order_id)])
    logger.info("Order %s set to %s", order_id, status)


def cancel_order(db: DatabaseAccessor, order_id: int) -> None:
    set_order_status(db, order_id, STATUS_CANCELED)


def return_order(db: DatabaseAccessor, order_id: int) -> None:
    set_order_status(db, order_id, STATUS_RETURNED)


def approve_order(db: DatabaseAccessor, order_id: int) -> None:
    set_order_status(db, order_id, STATUS_APPROVED)
