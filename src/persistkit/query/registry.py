"""Name-keyed collection of the queries of one entity type."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from persistkit.errors import InvalidArgumentError, UnknownQueryError
from persistkit.query.parameters import QueryParameters
from persistkit.query.query import Query

logger = logging.getLogger(__name__)


class QueryRegistry:
    """Queries of one EntityConfig, iterable in insertion order.

    Adding a query whose name is taken replaces the previous one.

    Example:
        queries = QueryRegistry.default()
        queries.create(name="touch", generate=gen, type="boolean")
        await queries.run("touch", params)
    """

    def __init__(self, queries: list[Query] | None = None):
        self._queries: dict[str, Query] = {}
        for query in queries or []:
            self.add(query)

    @classmethod
    def default(cls) -> QueryRegistry:
        """Build a registry holding fresh instances of the default queries."""
        from persistkit.query.defaults import default_queries

        return cls(default_queries())

    def add(self, query: Query) -> Query:
        """Add a query, keyed by its name.

        Raises:
            InvalidArgumentError: If query is not a Query
        """
        if not isinstance(query, Query):
            raise InvalidArgumentError(f"Expected a Query, got {type(query).__name__}")
        if query.name in self._queries:
            logger.debug("Replacing query '%s'", query.name)
        self._queries[query.name] = query
        return query

    def create(self, **kwargs: Any) -> Query:
        """Build a Query from keyword arguments and add it."""
        return self.add(Query(**kwargs))

    def get(self, name: str) -> Query | None:
        """Get a query by name, or None if absent."""
        return self._queries.get(name)

    def has(self, name: str) -> bool:
        """Check if a query is registered."""
        return name in self._queries

    def names(self) -> list[str]:
        """Names of the registered queries, in insertion order."""
        return list(self._queries)

    async def run(self, name: str, params: QueryParameters) -> Any:
        """Run the named query with params."""
        return await self[name].run(params)

    def __getitem__(self, name: str) -> Query:
        if name not in self._queries:
            raise UnknownQueryError(name)
        return self._queries[name]

    def __contains__(self, name: object) -> bool:
        return name in self._queries

    def __iter__(self) -> Iterator[Query]:
        return iter(list(self._queries.values()))

    def __len__(self) -> int:
        return len(self._queries)

    def __repr__(self) -> str:
        return f"QueryRegistry({self.names()!r})"
