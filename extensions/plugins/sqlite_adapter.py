#!/usr/bin/env python3
"""
League Archive SQLite Sink

Writes archived rows into a SQLite database. The connection runs in
autocommit mode (``isolation_level=None``) so that transactions are opened
and closed explicitly by ``SinkTransaction``; this keeps the CREATE TABLE
issued by the copy engine inside the same transaction as its rows.

Usage:
    with SQLiteSink('league.sqlite') as sink:
        with sink.transaction() as tx:
            sink.execute("CREATE TABLE t (id INTEGER)")
            insert = sink.prepare("INSERT INTO t VALUES (?)")
            insert.execute([1])
            tx.commit()
"""

import re
import sqlite3
import logging
from typing import Optional, Sequence

from core.errors import SinkError
from core.values import SinkParam

logger = logging.getLogger(__name__)

_LITERAL = re.compile(r"'(?:[^']|'')*'|\"(?:[^\"]|\"\")*\"")
_PARAMETER = re.compile(r"\?(\d*)")


def parameter_count(sql: str) -> int:
    """Number of positional parameters SQLite expects for ``sql``.

    Quoted strings and identifiers are skipped. A bare ``?`` takes the next
    index after the largest seen so far, ``?NNN`` takes index NNN.
    """
    count = 0
    for match in _PARAMETER.finditer(_LITERAL.sub("''", sql)):
        index = int(match.group(1)) if match.group(1) else count + 1
        count = max(count, index)
    return count


class PreparedStatement:
    """An insert bound to one cursor and re-executed for every row.

    sqlite3 keeps compiled statements in a per-connection cache keyed by SQL
    text, so re-executing the same string does not parse it again.
    """

    def __init__(self, connection: sqlite3.Connection, sql: str):
        self.sql = sql
        self._cursor = connection.cursor()

    def execute(self, params: Sequence[SinkParam]) -> None:
        try:
            self._cursor.execute(self.sql, tuple(params))
        except (sqlite3.Error, OverflowError) as e:
            raise SinkError(f"SQLite insert failed: {e}", details={'sql': self.sql}) from e


class SinkTransaction:
    """Scoped sink transaction: rolled back on exit unless committed."""

    def __init__(self, sink: 'SQLiteSink'):
        self._sink = sink
        self.committed = False

    def __enter__(self) -> 'SinkTransaction':
        self._sink._begin()
        return self

    def commit(self) -> None:
        self._sink._finish("COMMIT")
        self.committed = True

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.committed:
            return False
        if exc_type is not None:
            logger.warning(f"Rolling back sink transaction after {exc_type.__name__}")
        try:
            self._sink._rollback()
        except SinkError as e:
            if exc_type is None:
                raise
            # Keep the original error
            logger.error(f"Rollback after {exc_type.__name__} failed: {e}")
        return False


class SQLiteSink:
    """SQLite sink with explicit transactions."""

    def __init__(self, database: str = ':memory:', timeout: float = 30.0):
        """
        Open the sink database.

        Args:
            database: Path to SQLite database file or ':memory:' for in-memory
            timeout: Lock wait timeout in seconds
        """
        self.database = database
        self.timeout = timeout
        self._connection: Optional[sqlite3.Connection] = None
        self._in_transaction = False
        self._connect()
        logger.info(f"SQLite sink opened at {database}")

    def _connect(self) -> None:
        try:
            self._connection = sqlite3.connect(
                self.database,
                timeout=self.timeout,
                isolation_level=None
            )
        except sqlite3.Error as e:
            logger.error(f"Failed to open SQLite database {self.database}: {e}")
            raise SinkError(f"Failed to open SQLite database {self.database}: {e}") from e

    @property
    def connection(self) -> sqlite3.Connection:
        if self._connection is None:
            raise SinkError("SQLite sink is closed")
        return self._connection

    def transaction(self) -> SinkTransaction:
        return SinkTransaction(self)

    def _begin(self) -> None:
        if self._in_transaction:
            raise SinkError("A sink transaction is already open")
        try:
            self.connection.execute("BEGIN")
        except sqlite3.Error as e:
            raise SinkError(f"Failed to begin transaction: {e}") from e
        self._in_transaction = True

    def _finish(self, statement: str) -> None:
        if not self._in_transaction:
            raise SinkError(f"{statement} without an open transaction")
        try:
            self.connection.execute(statement)
        except sqlite3.Error as e:
            raise SinkError(f"{statement} failed: {e}") from e
        finally:
            self._in_transaction = self.connection.in_transaction

    def _rollback(self) -> None:
        # SQLite rolls back by itself on some errors (SQLITE_FULL, ON CONFLICT ROLLBACK)
        if not self.connection.in_transaction:
            self._in_transaction = False
            return
        self._finish("ROLLBACK")

    def execute(self, sql: str) -> None:
        """Run a statement that produces no result."""
        try:
            self.connection.execute(sql)
        except sqlite3.Error as e:
            raise SinkError(f"SQLite error: {e}", details={'sql': sql}) from e

    def prepare(self, sql: str) -> PreparedStatement:
        """Prepare a parameterized statement for repeated execution."""
        try:
            # Compiling here reports SQL errors before any row is read.
            self.connection.execute(f"EXPLAIN {sql}", (None,) * parameter_count(sql))
        except sqlite3.Error as e:
            raise SinkError(f"Failed to prepare statement: {e}", details={'sql': sql}) from e
        return PreparedStatement(self.connection, sql)

    def table_exists(self, name: str) -> bool:
        row = self.connection.execute(
            "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?", (name,)
        ).fetchone()
        return row is not None

    def close(self) -> None:
        """Close database connection."""
        if self._connection:
            self._connection.close()
            self._connection = None
            logger.info("SQLite sink closed")

    def __enter__(self) -> 'SQLiteSink':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
