"""
League Archiver
===============

Copies the registered league tables from the MySQL source into the SQLite
sink. Every table is copied inside its own sink transaction: either all of its
rows become visible together with its CREATE TABLE, or nothing does.
"""

import logging
import time
from typing import Iterable, Optional, Protocol, Sequence

from core.errors import CopyError
from core.tables import TABLES, TableDescriptor
from core.values import SourceValue, adapt_row

logger = logging.getLogger(__name__)

DEFAULT_PROGRESS_INTERVAL = 10000


class RowSource(Protocol):
    def query(self, sql: str) -> Iterable[Sequence[SourceValue]]: ...


class RowSink(Protocol):
    def transaction(self): ...
    def execute(self, sql: str) -> None: ...
    def prepare(self, sql: str): ...


class Archiver:
    """Copies tables from a row source into a row sink."""

    def __init__(self, source: RowSource, sink: RowSink,
                 progress_interval: int = DEFAULT_PROGRESS_INTERVAL):
        self.source = source
        self.sink = sink
        self.progress_interval = progress_interval

    @classmethod
    def from_urls(cls, mysql_url: str, sqlite_db: str,
                  progress_interval: int = DEFAULT_PROGRESS_INTERVAL) -> 'Archiver':
        """Open the MySQL source and the SQLite sink from their locations."""
        from extensions.plugins.mysql_adapter import MySQLSource
        from extensions.plugins.sqlite_adapter import SQLiteSink

        sink = SQLiteSink(sqlite_db)
        try:
            source = MySQLSource.from_url(mysql_url)
        except CopyError:
            sink.close()
            raise
        return cls(source, sink, progress_interval=progress_interval)

    def copy(self, table: TableDescriptor) -> int:
        """Copy one table, returning the number of rows copied."""
        logger.info(f"Copying table {table.name}...")
        start_time = time.time()
        count = 0

        try:
            with self.sink.transaction() as tx:
                self.sink.execute(table.definition)
                insert = self.sink.prepare(table.insert_sql)
                for row in self.source.query(table.select_sql):
                    params = adapt_row(row)
                    if len(params) != table.column_count:
                        raise AssertionError(
                            f"{table.name}: row has {len(params)} values, "
                            f"expected {table.column_count}"
                        )
                    insert.execute(params)
                    count += 1
                    if self.progress_interval and count % self.progress_interval == 0:
                        logger.debug(f"  {table.name}: {count} rows...")
                tx.commit()
        except CopyError as e:
            logger.error(f"Failed to copy {table.name} after {count} rows: {e}")
            raise

        logger.info(f"Copied {count} rows into {table.name} in {time.time() - start_time:.2f}s")
        return count

    def copy_all(self, tables: Optional[Iterable[TableDescriptor]] = None) -> int:
        """Copy every table in order, returning the total number of rows."""
        if tables is None:
            tables = TABLES
        total = 0
        for table in tables:
            total += self.copy(table)
        return total

    def close(self) -> None:
        """Close source and sink connections."""
        for resource in (self.source, self.sink):
            close = getattr(resource, 'close', None)
            if close is not None:
                close()

    def __enter__(self) -> 'Archiver':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
