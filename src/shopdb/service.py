"""DatabaseAccessor: one connection, parameterized statements, explicit transactions."""

import logging
import re
from abc import ABC, abstractmethod
from contextlib import closing, contextmanager
from typing import Any, Iterator

from shopdb.errors import (
    CommandError,
    DatabaseConnectionError,
    QueryError,
    TransactionAlreadyOpen,
    TransactionError,
)
from shopdb.types import Params, ResultSet

# $1, $2, ... (1-indexed, may repeat)
PLACEHOLDER = re.compile(r"\$(\d+)")


class DatabaseAccessor(ABC):
    """Owns exactly one database connection.

    The connection is opened by the constructor and released by close() or
    by leaving a ``with`` block. Backends run the driver in autocommit mode;
    transactions are driven here with explicit BEGIN/COMMIT/ROLLBACK.

    States: Open/NoTransaction <-> Open/TransactionOpen, then Closed.
    - execute_query() reads outside any transaction, or inside the explicit
      one when it is open.
    - execute_non_query() commits its own single-statement unit, or joins
      the explicit transaction when it is open.
    - commit/rollback with no explicit transaction are no-ops.
    """

    dialect: str = ""
    driver_error: type[Exception] = Exception

    def __init__(self, connection_string: str, logger: logging.Logger | None = None):
        self._log = logger or logging.getLogger(__name__)
        self._conn: Any = None
        self._in_transaction = False
        # set when the database ended our explicit transaction on its own
        self._transaction_lost = False
        try:
            self._conn = self._connect(connection_string)
        except self.driver_error as e:
            self._log.error("Failed to connect to database: %s", e)
            raise DatabaseConnectionError(str(e)) from e
        self._log.info("Connection to database established.")

    @abstractmethod
    def _connect(self, connection_string: str) -> Any:
        """Open and return a DB-API connection in autocommit mode."""

    @abstractmethod
    def _bind(self, sql: str, params: Params) -> tuple[str, Any]:
        """Rewrite ``$N`` placeholders into the driver's paramstyle."""

    @abstractmethod
    def _driver_in_transaction(self) -> bool:
        """True while the driver reports an open transaction on the connection."""

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    @property
    def in_transaction(self) -> bool:
        return self._in_transaction

    def __enter__(self) -> "DatabaseAccessor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _require_open(self) -> Any:
        if self._conn is None:
            raise DatabaseConnectionError("Connection is closed.")
        return self._conn

    def _run(self, sql: str, params: Params | None = None) -> ResultSet | None:
        conn = self._require_open()
        driver_sql, driver_params = self._bind(sql, params or ())
        with closing(conn.cursor()) as cur:
            cur.execute(driver_sql, driver_params)
            if cur.description is None:
                return None
            return [[None if v is None else str(v) for v in row] for row in cur.fetchall()]

    def _rollback_quietly(self) -> None:
        try:
            self._run("ROLLBACK")
        except self.driver_error as e:
            self._log.warning("Rollback failed: %s", e)

    def _check_transaction(self) -> None:
        """Notice an explicit transaction the database has already ended.

        SQLite rolls back on its own for OR ROLLBACK conflicts and some I/O
        errors; the connection is then back in autocommit mode.
        """
        if self._in_transaction and not self._driver_in_transaction():
            self._log.warning("Transaction was ended by the database; its writes are lost.")
            self._in_transaction = False
            self._transaction_lost = True

    def _raise_if_transaction_lost(self) -> None:
        self._check_transaction()
        if self._transaction_lost:
            self._transaction_lost = False
            raise TransactionError("The open transaction was rolled back by the database.")

    @contextmanager
    def _statement_scope(self) -> Iterator[None]:
        """Single-statement unit of work, unless an explicit transaction is open."""
        self._raise_if_transaction_lost()
        if self._in_transaction:
            yield
            return
        self._run("BEGIN")
        try:
            yield
            self._run("COMMIT")
        except Exception:
            self._rollback_quietly()
            raise

    def execute_query(self, sql: str, params: Params | None = None) -> ResultSet:
        """Run a read statement and return its rows as text."""
        self._require_open()
        try:
            rows = self._run(sql, params)
        except self.driver_error as e:
            self._log.error("Error executing query: %s", e)
            self._check_transaction()
            raise QueryError(str(e), sql) from e
        return rows or []

    def execute_non_query(self, sql: str, params: Params | None = None) -> None:
        """Run a write statement.

        Without an explicit transaction the statement is committed on its own
        and rolled back on failure. Inside an explicit transaction a failure
        leaves that transaction open; the caller decides whether to roll back.
        If the database itself ended the transaction, in_transaction turns
        False and the next write or commit raises TransactionError.
        """
        self._require_open()
        try:
            with self._statement_scope():
                self._run(sql, params)
        except self.driver_error as e:
            self._log.error("Error executing non-query: %s", e)
            self._check_transaction()
            raise CommandError(str(e), sql) from e

    def execute_script(self, sql: str) -> None:
        """Run ``;``-separated statements (DDL included) as one unit."""
        self._require_open()
        statements = [s.strip() for s in sql.split(";") if s.strip()]
        try:
            with self._statement_scope():
                for statement in statements:
                    self._run(statement)
        except self.driver_error as e:
            self._log.error("Error executing script: %s", e)
            self._check_transaction()
            raise CommandError(str(e), sql) from e

    def begin_transaction(self) -> None:
        self._require_open()
        self._check_transaction()
        if self._in_transaction:
            raise TransactionAlreadyOpen("A transaction is already open on this connection.")
        self._transaction_lost = False
        try:
            self._run("BEGIN")
        except self.driver_error as e:
            self._log.error("Error beginning transaction: %s", e)
            raise TransactionError(str(e)) from e
        self._in_transaction = True

    def commit_transaction(self) -> None:
        """Commit the explicit transaction. No-op when none was begun.

        Raises TransactionError if the database already rolled it back.
        """
        self._raise_if_transaction_lost()
        if not self._in_transaction:
            return
        self._in_transaction = False
        try:
            self._run("COMMIT")
        except self.driver_error as e:
            self._log.error("Error committing transaction: %s", e)
            self._rollback_quietly()
            raise TransactionError(str(e)) from e

    def rollback_transaction(self) -> None:
        """Abort the explicit transaction. No-op when none is open."""
        self._check_transaction()
        self._transaction_lost = False
        if not self._in_transaction:
            return
        self._in_transaction = False
        try:
            self._run("ROLLBACK")
        except self.driver_error as e:
            self._log.error("Error rolling back transaction: %s", e)
            raise TransactionError(str(e)) from e

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Context manager: begins, commits on success, rolls back on error."""
        self.begin_transaction()
        try:
            yield
            self.commit_transaction()
        except Exception:
            self.rollback_transaction()
            raise

    def close(self) -> None:
        """Close the connection. Safe to call more than once.

        An explicit transaction still open at this point is rolled back; a
        failed rollback is logged and the connection is closed regardless.
        """
        if self._conn is None:
            return
        try:
            self._check_transaction()
            if self._in_transaction:
                self._log.warning("Closing connection with an open transaction; rolling back.")
                self.rollback_transaction()
        except TransactionError as e:
            self._log.warning("Rollback on close failed: %s", e)
        finally:
            conn, self._conn = self._conn, None
            self._in_transaction = False
            self._transaction_lost = False
            conn.close()
