"""Per-entity-type persistence configuration."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable
from typing import Any

from persistkit.errors import AlreadyConnectedError, InvalidArgumentError, UnknownQueryError
from persistkit.hooks import HookFn, When, parse_when
from persistkit.persistence.config import DatabaseConfig, create_executor
from persistkit.persistence.executor import Executor
from persistkit.query.registry import QueryRegistry
from persistkit.query.sql import IDENTIFIER_RE, TABLE_NAME_RE

logger = logging.getLogger(__name__)


def _identity(value: Any) -> Any:
    return value


def _is_identifier(name: Any, pattern: re.Pattern[str] = IDENTIFIER_RE) -> bool:
    return isinstance(name, str) and pattern.fullmatch(name) is not None


def _names(value: Any, what: str) -> list[str]:
    """Validate an iterable collection of column names."""
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        raise InvalidArgumentError(f"{what} must be an iterable collection of names")
    names = list(value)
    for name in names:
        if not _is_identifier(name):
            raise InvalidArgumentError(f"{what} must contain SQL identifiers, got {name!r}")
    return names


class EntityConfig:
    """Persistence configuration shared by every entity of one type.

    Attributes:
        table: Table name of the entities
        primary_key: Column univocally identifying one row
        identifiers: Columns usable to address one row, primary key first
        columns: Persisted columns, identifiers first
        queries: The QueryRegistry of the entity type
        connection: The executor, None until setup()
        row_to_entity: Maps a row dict to the caller-facing entity
        error_normalizer: Maps a store exception to the error callers see

    Example:
        users = EntityConfig("users", "id", ids=["email"], columns=["name"])
        users.setup("sqlite:///app.db")
        users.add_hook("before", "save", check_email)
    """

    def __init__(
        self,
        table: str,
        primary_key: str,
        ids: Iterable[str] = (),
        columns: Iterable[str] = (),
        queries: QueryRegistry | None = None,
        row_to_entity: Callable[[dict[str, Any]], Any] = _identity,
        error_normalizer: Callable[[Exception], Any] = _identity,
    ):
        """Create a configuration.

        Raises:
            InvalidArgumentError: If table, primary_key or a name in ids or
                columns is not a SQL identifier, ids or columns is not a
                collection, or a mapper is not callable
        """
        if not _is_identifier(table, TABLE_NAME_RE):
            raise InvalidArgumentError(f"table must be a SQL identifier, got {table!r}")
        if not _is_identifier(primary_key):
            raise InvalidArgumentError(f"primary_key must be a SQL identifier, got {primary_key!r}")
        ids = _names(ids, "ids")
        columns = _names(columns, "columns")
        if not callable(row_to_entity) or not callable(error_normalizer):
            raise InvalidArgumentError("row_to_entity and error_normalizer must be callable")

        self.table = table
        self.primary_key = primary_key
        self.identifiers: tuple[str, ...] = tuple(dict.fromkeys([primary_key, *ids]))
        self.columns: tuple[str, ...] = tuple(dict.fromkeys([*self.identifiers, *columns]))
        self.queries = queries if queries is not None else QueryRegistry.default()
        self.connection: Executor | None = None
        self.row_to_entity = row_to_entity
        self.error_normalizer = error_normalizer

    def add_column(self, name: str, identifier: bool = False) -> None:
        """Add a persisted column, optionally usable as an identifier."""
        _names([name], "column")
        if identifier and name not in self.identifiers:
            self.identifiers += (name,)
        if name not in self.columns:
            self.columns += (name,)

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def add_hook(self, when: When | str, trigger: str, hook: HookFn) -> None:
        """Attach a hook to the named query.

        Args:
            when: "before" or "after"
            trigger: Name of the query triggering the hook
            hook: Sync or async callable taking the query parameters

        Raises:
            InvalidArgumentError: On an invalid when, a non-string trigger
                or a non-callable hook
            UnknownQueryError: If no query is named trigger
        """
        if when is None:
            raise InvalidArgumentError("'when' must be 'before' or 'after'")
        (moment,) = parse_when(when)
        if not isinstance(trigger, str):
            raise InvalidArgumentError("Hook trigger must be specified as a string")
        if not callable(hook):
            raise InvalidArgumentError("Hook must be callable")
        self.queries[trigger].hooks.add(hook, moment)

    def flush_hooks(self, when: When | str | None = None, trigger: str | None = None) -> None:
        """Remove hooks.

        Examples:
            conf.flush_hooks()                   # every hook
            conf.flush_hooks("before")           # every before hook
            conf.flush_hooks("after", "fetch")   # after hooks of fetch
            conf.flush_hooks(None, "fetch")      # every hook of fetch

        Raises:
            InvalidArgumentError: On an invalid when
            UnknownQueryError: If trigger is given but unknown
        """
        parse_when(when)
        if trigger is None:
            targets = list(self.queries)
        elif trigger in self.queries:
            targets = [self.queries[trigger]]
        else:
            raise UnknownQueryError(str(trigger))
        for query in targets:
            query.hooks.flush(when)

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    def setup(self, target: str | DatabaseConfig | Executor | None = None) -> None:
        """Attach a connection.

        Args:
            target: A database URL, a DatabaseConfig, a ready executor, or
                None to read the configuration from the environment

        Raises:
            AlreadyConnectedError: If a connection is attached; call
                cleanup() first
        """
        if self.connection is not None:
            raise AlreadyConnectedError(
                f"Table '{self.table}' is already set up, call cleanup() first"
            )
        if isinstance(target, Executor):
            self.connection = target
            return
        if target is None:
            target = DatabaseConfig.from_env()
        elif isinstance(target, str):
            target = DatabaseConfig(url=target)
        self.connection = create_executor(target)
        logger.debug("Table '%s' set up on %s", self.table, type(self.connection).__name__)

    async def cleanup(self) -> Exception | None:
        """Close and detach the connection, never raising.

        Returns:
            The exception raised while closing, or None
        """
        connection, self.connection = self.connection, None
        if connection is None:
            return None
        try:
            await connection.close()
        except Exception as e:
            logger.warning("Closing connection of '%s' failed: %s", self.table, e)
            return e
        return None

    def __repr__(self) -> str:
        return (
            f"EntityConfig(table={self.table!r}, primary_key={self.primary_key!r}, "
            f"columns={list(self.columns)!r})"
        )
