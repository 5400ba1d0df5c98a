"""SQLite implementation of DatabaseAccessor."""

import sqlite3

from shopdb.service import PLACEHOLDER, DatabaseAccessor
from shopdb.types import Params


def sqlite_path(connection_string: str) -> str:
    """sqlite:///foo.db -> foo.db, sqlite:///:memory: -> :memory:, bare paths pass through."""
    if not connection_string.startswith("sqlite"):
        return connection_string
    return connection_string.split(":///", 1)[1] if ":///" in connection_string else ":memory:"


class SQLiteAccessor(DatabaseAccessor):
    """SQLite backend using stdlib sqlite3.

    The connection runs with ``isolation_level=None`` so that the module
    never opens transactions behind our back.
    """

    dialect = "sqlite"
    driver_error = sqlite3.Error

    def _connect(self, connection_string: str) -> sqlite3.Connection:
        conn = sqlite3.connect(sqlite_path(connection_string), isolation_level=None)
        conn.execute("PRAGMA foreign_keys=ON")
        return conn

    def _bind(self, sql: str, params: Params) -> tuple[str, tuple]:
        # sqlite understands numbered ?N placeholders natively
        return PLACEHOLDER.sub(r"?\1", sql), tuple(params)

    def _driver_in_transaction(self) -> bool:
        return self._conn.in_transaction
