"""SQLite executor.

Runs statements through the standard sqlite3 module in a worker thread.
$n placeholders map to SQLite's numbered ?n parameters, so the values are
bound as given.
"""

from __future__ import annotations

import asyncio
import sqlite3
import threading
from pathlib import Path

from persistkit.query.sql import Response, Statement, to_numbered_qmark


class SQLiteExecutor:
    """SQLite executor over a single connection.

    The connection opens on the first query and every statement is
    committed immediately. Calls on the connection are serialized.
    """

    def __init__(self, db_path: Path | str = ":memory:"):
        self.db_path = str(db_path)
        self.conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    def connect(self) -> None:
        """Establish database connection."""
        self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row

    def _execute(self, statement: Statement) -> Response:
        with self._lock:
            if self.conn is None:
                self.connect()
            try:
                cursor = self.conn.execute(
                    to_numbered_qmark(statement.text), statement.values
                )
                rows = [dict(row) for row in cursor.fetchall()]
                self.conn.commit()
            except sqlite3.Error:
                self.conn.rollback()
                raise

        # sqlite3 reports -1 for statements that only return rows
        row_count = cursor.rowcount if cursor.rowcount >= 0 else len(rows)
        return Response(rows=rows, row_count=row_count)

    async def query(self, statement: Statement) -> Response:
        return await asyncio.to_thread(self._execute, statement)

    def _close(self) -> None:
        with self._lock:
            if self.conn:
                self.conn.close()
                self.conn = None

    async def close(self) -> None:
        """Close database connection once running statements finish."""
        await asyncio.to_thread(self._close)
