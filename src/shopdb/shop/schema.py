"""Shop tables: orders, products, order_items."""

from shopdb.service import DatabaseAccessor

SQLITE_SCHEMA_DDL = """
CREATE TABLE IF NOT EXISTS orders (
    order_id      INTEGER PRIMARY KEY AUTOINCREMENT,
    status        TEXT        NOT NULL DEFAULT 'pending'
);
CREATE TABLE IF NOT EXISTS products (
    product_id     INTEGER PRIMARY KEY AUTOINCREMENT,
    name           TEXT        NOT NULL,
    price          NUMERIC     NOT NULL,
    stock_quantity INTEGER     NOT NULL
);
CREATE TABLE IF NOT EXISTS order_items (
    order_id      INTEGER     NOT NULL REFERENCES orders(order_id),
    product_id    INTEGER     NOT NULL REFERENCES products(product_id),
    quantity      INTEGER     NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_order_items_order ON order_items(order_id);
"""

POSTGRES_SCHEMA_DDL = """
CREATE TABLE IF NOT EXISTS orders (
    order_id      SERIAL      PRIMARY KEY,
    status        VARCHAR(32) NOT NULL DEFAULT 'pending'
);
CREATE TABLE IF NOT EXISTS products (
    product_id     SERIAL        PRIMARY KEY,
    name           VARCHAR(255)  NOT NULL,
    price          DECIMAL(12,2) NOT NULL,
    stock_quantity INTEGER       NOT NULL
);
CREATE TABLE IF NOT EXISTS order_items (
    order_id      INTEGER     NOT NULL REFERENCES orders(order_id),
    product_id    INTEGER     NOT NULL REFERENCES products(product_id),
    quantity      INTEGER     NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_order_items_order ON order_items(order_id);
"""

SCHEMA_DDL = {
    "sqlite": SQLITE_SCHEMA_DDL,
    "postgresql": POSTGRES_SCHEMA_DDL,
}

SHOP_TABLES = ["order_items", "products", "orders"]


def ensure_shop_schema(db: DatabaseAccessor) -> None:
    """Create the shop tables if they don't exist."""
    db.execute_script(SCHEMA_DDL[db.dialect])
