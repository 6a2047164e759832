"""Named query: SQL generation, hook pipeline and result transform."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from typing import Any

from persistkit.errors import InvalidArgumentError, NotConnectedError, StoreError
from persistkit.hooks import HookChain, When
from persistkit.query.parameters import QueryParameters
from persistkit.query.sql import Statement
from persistkit.query.transforms import TransformFn, TransformRegistry, default_transform

logger = logging.getLogger(__name__)

QUERY_NAME_RE = re.compile(r"[a-zA-Z_][a-zA-Z0-9_]*")

# Generator signature: (QueryParameters) -> Statement
GenerateFn = Callable[[QueryParameters], Statement]


class Query:
    """A named operation against the store.

    A run is a strict sequence: before hooks, statement generation and
    execution, result transform, after hooks. Any failure stops the run.
    Nothing is retried and hooks that already ran are not compensated.

    Attributes:
        name: Identifier of the query, unique within its registry
        generate: Builds the Statement from the parameters
        transform: Turns params.res into the returned value
        type: Name of the registered transform, if one was requested
        hooks: The query's own HookChain
    """

    def __init__(
        self,
        name: str,
        generate: GenerateFn,
        transform: TransformFn | None = None,
        type: str | None = None,
    ):
        """Create a query.

        Args:
            name: Identifier matching [a-zA-Z_][a-zA-Z0-9_]*
            generate: Callable returning the Statement to execute
            transform: Optional result transform, exclusive with type
            type: Optional registered transform name, exclusive with transform

        Raises:
            InvalidArgumentError: On a bad name, a non-callable generator or
                transform, both transform and type, or an unknown type
        """
        if not isinstance(name, str) or not QUERY_NAME_RE.fullmatch(name):
            raise InvalidArgumentError(f"Invalid query name: {name!r}")
        if not callable(generate):
            raise InvalidArgumentError("Query generator must be callable")
        if transform is not None and type is not None:
            raise InvalidArgumentError(
                f"Query '{name}' accepts either a transform or a type, not both"
            )
        if transform is not None and not callable(transform):
            raise InvalidArgumentError("Query transform must be callable if given")

        if type is not None:
            transform = TransformRegistry.get(type)

        self.name = name
        self.generate = generate
        self.transform = transform
        self.type = type
        self.hooks = HookChain()

    async def run(self, params: QueryParameters) -> Any:
        """Run the query and return the transformed result.

        Raises:
            NotConnectedError: If the config has no connection
            StoreError: If the normalized store error is not an exception
            Exception: Whatever a hook, the transform or the error
                normalizer produced
        """
        conf = params.conf
        params.query = self

        await self.hooks.run(params, When.BEFORE)

        statement = self.generate(params)
        if conf.connection is None:
            raise NotConnectedError(
                f"Table '{conf.table}' has no connection, call setup() first"
            )
        logger.debug("Running query '%s': %s", self.name, statement.text)
        try:
            params.res = await conf.connection.query(statement)
        except Exception as e:
            logger.error("Query '%s' on '%s' failed: %s", self.name, conf.table, e)
            normalized = conf.error_normalizer(e)
            if normalized is e:
                raise
            if isinstance(normalized, BaseException):
                raise normalized from e
            raise StoreError(normalized) from e

        params.ret = (self.transform or default_transform)(params)

        await self.hooks.run(params, When.AFTER)
        return params.ret

    def __repr__(self) -> str:
        kind = self.type or ("custom" if self.transform else "default")
        return f"Query(name={self.name!r}, transform={kind}, hooks={self.hooks!r})"
