"""PostgreSQL implementation of DatabaseAccessor."""

from typing import Any

import psycopg2
import psycopg2.extensions

from shopdb.service import PLACEHOLDER, DatabaseAccessor
from shopdb.types import Params


def to_pyformat(sql: str, params: Params) -> tuple[str, dict[str, Any] | None]:
    """Rewrite ``$N`` placeholders into psycopg2's ``%(pN)s`` style.

    Literal ``%`` is escaped only when parameters are bound, because psycopg2
    leaves the statement untouched otherwise. Like sqlite3, the number of
    parameters must match the highest placeholder index.
    """
    if not params:
        return sql, None

    values: dict[str, Any] = {}

    def substitute(match) -> str:
        index = int(match.group(1))
        if not 1 <= index <= len(params):
            raise psycopg2.ProgrammingError(
                f"placeholder ${index} has no parameter ({len(params)} supplied)"
            )
        values[f"p{index}"] = params[index - 1]
        return f"%(p{index})s"

    rewritten = PLACEHOLDER.sub(substitute, sql.replace("%", "%%"))
    highest = max((int(key[1:]) for key in values), default=0)
    if len(params) > highest:
        raise psycopg2.ProgrammingError(
            f"statement uses {highest} parameters, but {len(params)} were supplied"
        )
    return rewritten, values


class PostgresAccessor(DatabaseAccessor):
    """PostgreSQL backend using psycopg2.

    Accepts a libpq DSN (``dbname=shopdb user=admin password=...``) or a
    ``postgresql://`` URL.
    """

    dialect = "postgresql"
    driver_error = psycopg2.Error

    def _connect(self, connection_string: str):
        conn = psycopg2.connect(connection_string)
        conn.autocommit = True
        return conn

    def _bind(self, sql: str, params: Params) -> tuple[str, dict[str, Any] | None]:
        return to_pyformat(sql, params)

    def _driver_in_transaction(self) -> bool:
        status = self._conn.get_transaction_status()
        return status != psycopg2.extensions.TRANSACTION_STATUS_IDLE
