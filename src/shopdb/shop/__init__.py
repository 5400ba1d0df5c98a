"""Shop operations: one parameterized statement per call."""

from shopdb.shop.order_items import add_to_order, remove_from_order
from shopdb.shop.orders import (
    approve_order,
    cancel_order,
    create_order,
    return_order,
    view_order_status,
)
from shopdb.shop.products import add_product, delete_product
from shopdb.shop.schema import ensure_shop_schema

__all__ = [
    "add_product",
    "add_to_order",
    "approve_order",
    "cancel_order",
    "create_order",
    "delete_product",
    "ensure_shop_schema",
    "remove_from_order",
    "return_order",
    "view_order_status",
]
