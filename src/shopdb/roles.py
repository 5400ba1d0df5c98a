"""Role capability sets.

Every role can view, create, cancel and return orders. Roles differ only in
their connection string and in a few extra actions.
"""

from dataclasses import dataclass
from typing import Any, Callable

from shopdb.config import Role
from shopdb.shop import (
    add_product,
    add_to_order,
    approve_order,
    cancel_order,
    create_order,
    delete_product,
    remove_from_order,
    return_order,
    view_order_status,
)

# (prompt, converter) for each positional argument after the accessor
Field = tuple[str, Callable[[str], Any]]


@dataclass(frozen=True)
class RoleAction:
    label: str
    func: Callable[..., Any]
    fields: tuple[Field, ...] = ()
    # formatted with the action's return value as {result}
    done: str = "Done."


def show_order_status(db, order_id: int) -> str:
    status = view_order_status(db, order_id)
    if status is None:
        return f"Order {order_id} not found."
    return f"Order {order_id} status: {status}"


ORDER_ID: Field = ("Order ID: ", int)
PRODUCT_ID: Field = ("Product ID: ", int)

COMMON_ACTIONS = (
    RoleAction("View order status", show_order_status, (ORDER_ID,), "{result}"),
    RoleAction("Create order", create_order, done="Order created."),
    RoleAction("Cancel order", cancel_order, (ORDER_ID,), "Order canceled."),
    RoleAction("Return order", return_order, (ORDER_ID,), "Order returned."),
)

ROLE_ACTIONS: dict[Role, tuple[RoleAction, ...]] = {
    Role.ADMIN: COMMON_ACTIONS
    + (
        RoleAction(
            "Add product",
            add_product,
            (("Product name: ", str), ("Price: ", float), ("Stock quantity: ", int)),
            "Product added.",
        ),
        RoleAction("Delete product", delete_product, (PRODUCT_ID,), "Product deleted."),
    ),
    Role.MANAGER: COMMON_ACTIONS
    + (RoleAction("Approve order", approve_order, (ORDER_ID,), "Order approved."),),
    Role.CUSTOMER: COMMON_ACTIONS
    + (
        RoleAction(
            "Add product to order",
            add_to_order,
            (ORDER_ID, PRODUCT_ID, ("Quantity: ", int)),
            "Product added to order.",
        ),
        RoleAction(
            "Remove product from order",
            remove_from_order,
            (ORDER_ID, PRODUCT_ID),
            "Product removed from order.",
        ),
    ),
}
