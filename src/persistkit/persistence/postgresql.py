"""PostgreSQL executor.

Uses psycopg v3 (psycopg[binary]>=3.1.0) asynchronous connections with
the dict_row row factory. $n placeholders are rewritten to psycopg's %s
form before execution.
"""

from __future__ import annotations

import asyncio
from typing import Any

from persistkit.query.sql import Response, Statement, to_pyformat


class PostgreSQLExecutor:
    """PostgreSQL executor over one autocommit psycopg connection."""

    def __init__(self, url: str):
        # psycopg takes plain postgresql:// URLs
        self.url = url.replace("postgresql+psycopg://", "postgresql://")
        self.conn: Any = None
        self._lock = asyncio.Lock()

    async def connect(self) -> None:
        """Establish database connection if none is open."""
        import psycopg
        from psycopg.rows import dict_row

        async with self._lock:
            if self.conn is None:
                self.conn = await psycopg.AsyncConnection.connect(
                    self.url, autocommit=True, row_factory=dict_row
                )

    async def query(self, statement: Statement) -> Response:
        if self.conn is None:
            await self.connect()

        text, values = to_pyformat(statement.text, statement.values)
        cursor = await self.conn.execute(text, values)
        rows = [dict(row) for row in await cursor.fetchall()] if cursor.description else []
        row_count = cursor.rowcount if cursor.rowcount >= 0 else len(rows)
        return Response(rows=rows, row_count=row_count)

    async def close(self) -> None:
        """Close database connection."""
        if self.conn:
            conn, self.conn = self.conn, None
            await conn.close()
