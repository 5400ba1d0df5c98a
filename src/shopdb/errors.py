"""Error taxonomy for the database accessor."""


class AccessorError(Exception):
    """Base class for every failure raised by a DatabaseAccessor."""


class DatabaseConnectionError(AccessorError, ConnectionError):
    """The connection could not be opened, or is already closed."""


class StatementError(AccessorError):
    """A statement failed in the driver.

    The message is the driver's own message; ``sql`` is the template as the
    caller passed it.
    """

    def __init__(self, message: str, sql: str | None = None):
        super().__init__(message)
        self.sql = sql


class QueryError(StatementError):
    """A read statement failed."""


class CommandError(StatementError):
    """A write statement failed."""


class TransactionError(AccessorError):
    """An explicit transaction could not be started or committed."""


class TransactionAlreadyOpen(TransactionError):
    """begin_transaction() was called while a transaction is already open."""
