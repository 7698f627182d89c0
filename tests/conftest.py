#!/usr/bin/env python3
"""
League Archive Test Configuration - PyTest Configuration and Fixtures

Provides a recording fake source, sink database paths and small table
descriptors shared by the archive tests.
"""

import pytest
import os
import sys
import sqlite3
from typing import Dict, List, Sequence

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.errors import SourceError
from core.tables import TableDescriptor
from core.values import SourceValue
from extensions.plugins.sqlite_adapter import SQLiteSink


class FakeSource:
    """Row source serving canned rows per select statement.

    Every query is recorded in ``queries`` so tests can check visiting order.
    A statement mapped to an exception raises it once iteration starts.
    """

    def __init__(self, rows_by_sql: Dict[str, object]):
        self.rows_by_sql = rows_by_sql
        self.queries: List[str] = []
        self.closed = False

    def query(self, sql: str):
        self.queries.append(sql)
        rows = self.rows_by_sql.get(sql, [])
        for row in rows:
            if isinstance(row, Exception):
                raise row
            yield list(row)

    def close(self):
        self.closed = True


def make_table(name: str, columns: Sequence[str] = ("id", "name")) -> TableDescriptor:
    """Build a small descriptor with INTEGER id and TEXT columns."""
    column_defs = ", ".join(
        f"{col} INTEGER" if col == "id" else f"{col} TEXT" for col in columns
    )
    return TableDescriptor(
        name=name,
        columns=tuple(columns),
        definition=f"CREATE TABLE {name} ({column_defs})",
        select_sql=f"SELECT {', '.join(columns)} FROM lg_{name}",
        insert_sql=f"INSERT INTO {name} VALUES ({', '.join('?' for _ in columns)})",
    )


def row(number: int, text: bytes):
    return [SourceValue.signed(number), SourceValue.from_bytes(text)]


@pytest.fixture
def sqlite_path(tmp_path):
    """Path of a fresh SQLite file"""
    return str(tmp_path / "league.sqlite")


@pytest.fixture
def sink(sqlite_path):
    """SQLite sink on a fresh file, closed after the test"""
    with SQLiteSink(sqlite_path) as sink:
        yield sink


@pytest.fixture
def read_rows(sqlite_path):
    """Read a table back through an independent connection"""
    def _read(table_name: str):
        with sqlite3.connect(sqlite_path) as conn:
            return conn.execute(f"SELECT * FROM {table_name}").fetchall()
    return _read


@pytest.fixture
def table_names(sqlite_path):
    """List the tables present in the sink file"""
    def _names():
        with sqlite3.connect(sqlite_path) as conn:
            rows = conn.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY name"
            ).fetchall()
        return [r[0] for r in rows]
    return _names


@pytest.fixture
def source_error():
    return SourceError("MySQL fetch failed: (2013, 'Lost connection to MySQL server during query')")
