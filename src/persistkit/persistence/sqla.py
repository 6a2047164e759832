"""SQLAlchemy executor for databases without a native executor.

Statements run on a pooled SQLAlchemy engine in a worker thread, one
transaction per statement. $n placeholders become :pn named binds.
"""

from __future__ import annotations

import asyncio
import threading
from typing import Any

from persistkit.query.sql import Response, Statement, to_named


class SQLAlchemyExecutor:
    """Executor backed by a SQLAlchemy engine.

    The engine is created on the first query. Concurrent first queries
    share one engine.
    """

    def __init__(self, url: str, **engine_options: Any):
        self.url = url
        self.engine_options = engine_options
        self.engine: Any = None
        self._lock = threading.Lock()

    def connect(self) -> Any:
        """Return the engine, creating it if none exists.

        Connections are opened by the engine's pool.
        """
        from sqlalchemy import create_engine

        with self._lock:
            if self.engine is None:
                self.engine = create_engine(self.url, **self.engine_options)
            return self.engine

    def _execute(self, statement: Statement) -> Response:
        from sqlalchemy import text

        engine = self.connect()
        sql, binds = to_named(statement.text, statement.values)
        with engine.begin() as conn:
            result = conn.execute(text(sql), binds)
            rows = [dict(row._mapping) for row in result] if result.returns_rows else []
            row_count = result.rowcount if result.rowcount >= 0 else len(rows)
        return Response(rows=rows, row_count=row_count)

    def _dispose(self) -> None:
        with self._lock:
            engine, self.engine = self.engine, None
        if engine is not None:
            engine.dispose()

    async def query(self, statement: Statement) -> Response:
        return await asyncio.to_thread(self._execute, statement)

    async def close(self) -> None:
        """Dispose of the engine and its pooled connections."""
        await asyncio.to_thread(self._dispose)
