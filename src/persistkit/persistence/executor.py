"""Executor Protocol: the store interface queries run against."""

from typing import Protocol, runtime_checkable

from persistkit.query.sql import Response, Statement


@runtime_checkable
class Executor(Protocol):
    """Interface all executors must implement.

    An executor runs one parameterized statement with $n placeholders and
    answers with the returned rows and the returned/affected row count.
    Failures are raised as the driver's own exceptions; the EntityConfig
    error normalizer decides how callers see them.
    """

    async def query(self, statement: Statement) -> Response: ...

    async def close(self) -> None: ...
