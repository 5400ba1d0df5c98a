"""Tests for DatabaseAccessor (SQLite backend)."""

import logging

import pytest

from shopdb import (
    CommandError,
    DatabaseConnectionError,
    QueryError,
    SQLiteAccessor,
    TransactionAlreadyOpen,
    TransactionError,
    create_accessor,
)


class TestLifecycle:
    def test_open_after_construction(self, accessor):
        assert accessor.is_open
        assert not accessor.in_transaction
        assert accessor.dialect == "sqlite"

    def test_factory_picks_sqlite(self, db_url):
        with create_accessor(db_url) as db:
            assert isinstance(db, SQLiteAccessor)

    def test_unreachable_database_raises(self, tmp_path, caplog):
        bad = f"sqlite:///{tmp_path / 'missing' / 'dir' / 'x.db'}"
        with caplog.at_level(logging.ERROR):
            with pytest.raises(DatabaseConnectionError):
                create_accessor(bad)
        assert "Failed to connect to database" in caplog.text

    def test_connection_error_is_builtin_connection_error(self, tmp_path):
        with pytest.raises(ConnectionError):
            create_accessor(f"sqlite:///{tmp_path / 'nope' / 'x.db'}")

    def test_logs_connect(self, db_url, caplog):
        with caplog.at_level(logging.INFO):
            create_accessor(db_url).close()
        assert "Connection to database established." in caplog.text

    def test_injected_logger(self, db_url, caplog):
        log = logging.getLogger("test.injected")
        with caplog.at_level(logging.INFO, logger="test.injected"):
            with create_accessor(db_url, log) as db:
                with pytest.raises(QueryError):
                    db.execute_query("SELECT * FROM nowhere")
        names = {r.name for r in caplog.records}
        assert "test.injected" in names

    def test_close_is_idempotent(self, accessor):
        accessor.close()
        accessor.close()
        assert not accessor.is_open

    def test_context_manager_closes(self, db_url):
        with create_accessor(db_url) as db:
            assert db.is_open
        assert not db.is_open

    def test_context_manager_closes_on_error(self, db_url):
        with pytest.raises(RuntimeError):
            with create_accessor(db_url) as db:
                raise RuntimeError("boom")
        assert not db.is_open

    def test_statements_after_close_raise(self, accessor):
        accessor.close()
        with pytest.raises(DatabaseConnectionError, match="closed"):
            accessor.execute_query("SELECT 1")
        with pytest.raises(DatabaseConnectionError):
            accessor.execute_non_query("CREATE TABLE t (id INTEGER)")


class TestStatements:
    def test_query_returns_rows_as_text(self, accessor):
        accessor.execute_non_query("CREATE TABLE t (id INTEGER PRIMARY KEY, name TEXT, price REAL)")
        accessor.execute_non_query(
            "INSERT INTO t (id, name, price) VALUES ($1, $2, $3)", ["1", "alice", "2.5"]
        )
        rows = accessor.execute_query("SELECT id, name, price FROM t")
        assert rows == [["1", "alice", "2.5"]]

    def test_null_is_none(self, accessor):
        assert accessor.execute_query("SELECT NULL") == [[None]]

    def test_empty_result(self, accessor):
        accessor.execute_non_query("CREATE TABLE t (id INTEGER)")
        assert accessor.execute_query("SELECT id FROM t") == []

    def test_repeated_placeholder(self, accessor):
        rows = accessor.execute_query("SELECT $1, $2, $1", ["a", "b"])
        assert rows == [["a", "b", "a"]]

    def test_non_query_commits(self, accessor, db_url):
        accessor.execute_non_query("CREATE TABLE t (id INTEGER)")
        accessor.execute_non_query("INSERT INTO t (id) VALUES ($1)", [7])
        with create_accessor(db_url) as other:
            assert other.execute_query("SELECT id FROM t") == [["7"]]

    def test_malformed_query_keeps_connection_open(self, accessor, caplog):
        with caplog.at_level(logging.ERROR):
            with pytest.raises(QueryError) as excinfo:
                accessor.execute_query("SELEC nonsense")
        assert excinfo.value.sql == "SELEC nonsense"
        assert "Error executing query" in caplog.text
        assert accessor.is_open
        assert accessor.execute_query("SELECT 1") == [["1"]]

    def test_missing_table_command_keeps_connection_open(self, accessor, caplog):
        with caplog.at_level(logging.ERROR):
            with pytest.raises(CommandError):
                accessor.execute_non_query("INSERT INTO missing (x) VALUES ($1)", ["1"])
        assert "Error executing non-query" in caplog.text
        assert accessor.is_open
        assert not accessor.in_transaction
        accessor.execute_non_query("CREATE TABLE t (id INTEGER)")

    def test_failed_command_rolls_back_its_unit(self, accessor):
        accessor.execute_non_query("CREATE TABLE t (id INTEGER PRIMARY KEY)")
        accessor.execute_non_query("INSERT INTO t (id) VALUES ($1)", ["1"])
        with pytest.raises(CommandError):
            accessor.execute_non_query("INSERT INTO t (id) VALUES ($1)", ["1"])
        assert accessor.execute_query("SELECT COUNT(*) FROM t") == [["1"]]

    def test_wrong_parameter_count(self, accessor):
        with pytest.raises(QueryError):
            accessor.execute_query("SELECT $1, $2", ["only one"])

    def test_driver_error_is_chained(self, accessor):
        with pytest.raises(QueryError) as excinfo:
            accessor.execute_query("SELECT * FROM nowhere")
        assert excinfo.value.__cause__ is not None
        assert "nowhere" in str(excinfo.value)

    def test_execute_script(self, accessor):
        accessor.execute_script(
            "CREATE TABLE a (id INTEGER); CREATE TABLE b (id INTEGER); INSERT INTO a VALUES (1);"
        )
        assert accessor.execute_query("SELECT id FROM a") == [["1"]]
        assert accessor.execute_query("SELECT id FROM b") == []

    def test_failed_script_is_atomic(self, accessor):
        with pytest.raises(CommandError):
            accessor.execute_script("CREATE TABLE a (id INTEGER); INSERT INTO nowhere VALUES (1)")
        with pytest.raises(QueryError):
            accessor.execute_query("SELECT * FROM a")


class TestTransactions:
    @pytest.fixture
    def table(self, accessor):
        accessor.execute_non_query("CREATE TABLE t (id INTEGER PRIMARY KEY, val TEXT)")
        return accessor

    def test_commit_without_transaction_is_noop(self, accessor):
        accessor.commit_transaction()
        accessor.commit_transaction()
        assert not accessor.in_transaction

    def test_rollback_without_transaction_is_noop(self, accessor):
        accessor.rollback_transaction()
        accessor.rollback_transaction()
        assert not accessor.in_transaction

    def test_begin_twice_raises(self, accessor):
        accessor.begin_transaction()
        with pytest.raises(TransactionAlreadyOpen):
            accessor.begin_transaction()
        assert accessor.in_transaction
        accessor.rollback_transaction()
        assert not accessor.in_transaction

    def test_writes_join_open_transaction_and_commit(self, table, db_url):
        table.begin_transaction()
        table.execute_non_query("INSERT INTO t (id, val) VALUES ($1, $2)", ["1", "a"])
        table.execute_non_query("INSERT INTO t (id, val) VALUES ($1, $2)", ["2", "b"])
        # visible on this connection, not yet committed
        assert len(table.execute_query("SELECT * FROM t")) == 2
        table.commit_transaction()

        with create_accessor(db_url) as other:
            assert other.execute_query("SELECT val FROM t ORDER BY id") == [["a"], ["b"]]

    def test_rollback_discards_joined_writes(self, table):
        table.begin_transaction()
        table.execute_non_query("INSERT INTO t (id, val) VALUES ($1, $2)", ["1", "a"])
        table.rollback_transaction()
        assert table.execute_query("SELECT * FROM t") == []

    def test_failed_write_leaves_explicit_transaction_open(self, table):
        table.begin_transaction()
        table.execute_non_query("INSERT INTO t (id, val) VALUES ($1, $2)", ["1", "a"])
        with pytest.raises(CommandError):
            table.execute_non_query("INSERT INTO t (id, val) VALUES ($1, $2)", ["1", "dup"])
        assert table.in_transaction
        table.rollback_transaction()
        assert table.execute_query("SELECT * FROM t") == []

    def test_transaction_context_commits(self, table):
        with table.transaction():
            table.execute_non_query("INSERT INTO t (id, val) VALUES ($1, $2)", ["1", "x"])
        assert not table.in_transaction
        assert table.execute_query("SELECT val FROM t") == [["x"]]

    def test_transaction_context_rolls_back_on_error(self, table):
        with pytest.raises(ValueError):
            with table.transaction():
                table.execute_non_query("INSERT INTO t (id, val) VALUES ($1, $2)", ["1", "x"])
                raise ValueError("simulated failure")
        assert not table.in_transaction
        assert table.execute_query("SELECT * FROM t") == []

    def test_close_with_open_transaction_rolls_back(self, table, db_url, caplog):
        table.begin_transaction()
        table.execute_non_query("INSERT INTO t (id, val) VALUES ($1, $2)", ["1", "x"])
        with caplog.at_level(logging.WARNING):
            table.close()
        assert "open transaction" in caplog.text
        with create_accessor(db_url) as other:
            assert other.execute_query("SELECT * FROM t") == []

    def test_failed_commit_resets_state(self, accessor, caplog):
        accessor.execute_script(
            "CREATE TABLE parent (id INTEGER PRIMARY KEY);"
            "CREATE TABLE child (parent_id INTEGER REFERENCES parent(id)"
            " DEFERRABLE INITIALLY DEFERRED)"
        )
        accessor.begin_transaction()
        accessor.execute_non_query("INSERT INTO child (parent_id) VALUES ($1)", ["99"])
        with caplog.at_level(logging.ERROR):
            with pytest.raises(TransactionError):
                accessor.commit_transaction()
        assert "Error committing transaction" in caplog.text
        assert not accessor.in_transaction
        assert accessor.execute_query("SELECT * FROM child") == []


class TestTransactionEndedByDatabase:
    """SQLite itself rolls back on an OR ROLLBACK conflict."""

    DUPLICATE = "INSERT OR ROLLBACK INTO t (id) VALUES ($1)"

    @pytest.fixture
    def rolled_back(self, accessor):
        accessor.execute_non_query("CREATE TABLE t (id INTEGER PRIMARY KEY)")
        accessor.begin_transaction()
        accessor.execute_non_query("INSERT INTO t (id) VALUES ($1)", ["1"])
        with pytest.raises(CommandError):
            accessor.execute_non_query(self.DUPLICATE, ["1"])
        return accessor

    def test_state_follows_driver(self, rolled_back):
        assert not rolled_back.in_transaction

    def test_next_write_refuses_to_autocommit(self, rolled_back, db_url):
        with pytest.raises(TransactionError):
            rolled_back.execute_non_query("INSERT INTO t (id) VALUES ($1)", ["2"])
        rolled_back.rollback_transaction()
        with create_accessor(db_url) as other:
            assert other.execute_query("SELECT id FROM t") == []

    def test_rollback_is_noop(self, rolled_back):
        rolled_back.rollback_transaction()
        assert not rolled_back.in_transaction
        rolled_back.execute_non_query("INSERT INTO t (id) VALUES ($1)", ["3"])
        assert rolled_back.execute_query("SELECT id FROM t") == [["3"]]

    def test_commit_raises(self, rolled_back):
        with pytest.raises(TransactionError):
            rolled_back.commit_transaction()
        rolled_back.commit_transaction()
        assert not rolled_back.in_transaction

    def test_new_transaction_can_begin(self, rolled_back):
        rolled_back.begin_transaction()
        rolled_back.execute_non_query("INSERT INTO t (id) VALUES ($1)", ["4"])
        rolled_back.commit_transaction()
        assert rolled_back.execute_query("SELECT id FROM t") == [["4"]]

    def test_close_does_not_raise(self, rolled_back):
        rolled_back.close()
        assert not rolled_back.is_open


class TestCloseWithFailedRollback:
    def test_body_exception_is_not_masked(self, db_url, monkeypatch, caplog):
        def failing_rollback():
            raise TransactionError("rollback failed")

        with caplog.at_level(logging.WARNING):
            with pytest.raises(ValueError, match="body"):
                with create_accessor(db_url) as db:
                    db.begin_transaction()
                    monkeypatch.setattr(db, "rollback_transaction", failing_rollback)
                    raise ValueError("body")
        assert not db.is_open
        assert "Rollback on close failed" in caplog.text
