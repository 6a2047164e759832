"""Persistence capabilities for plain values.

A host value (dict, dataclass, any attribute-bearing object) gains
save/update/delete through a Persisted adapter, and its type gains
fetch/delete-by-identifier through a Repository. Both hold their
EntityConfig explicitly; nothing is attached to the host class.

Usage:
    users = Repository(EntityConfig("users", "id", columns=["name"]))
    alice = users.wrap({"id": 1, "name": "Alice"})
    await alice.save()
    await users.fetch("id", 1)
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any, Generic, TypeVar

from persistkit.config import EntityConfig
from persistkit.errors import InvalidArgumentError
from persistkit.query.parameters import (
    DeleteParams,
    FetchParams,
    FilterParams,
    SaveParams,
    UpdateParams,
)
from persistkit.query.sql import entity_field

T = TypeVar("T")


def select_columns(conf: EntityConfig, args: tuple[Any, ...]) -> list[str]:
    """Resolve the column selection of an update call.

    Accepts no arguments (every column), column names as separate
    arguments, or a single non-string iterable of names.

    Raises:
        InvalidArgumentError: If a column is not a string or not persisted
    """
    if not args:
        return list(conf.columns)
    if len(args) == 1 and not isinstance(args[0], str) and isinstance(args[0], Iterable):
        args = tuple(args[0])

    columns = list(args)
    for column in columns:
        if not isinstance(column, str):
            raise InvalidArgumentError("Columns must be specified as strings")
        if column not in conf.columns:
            raise InvalidArgumentError(f"{column} is not present in table '{conf.table}'")
    return columns


def _check_identifier(conf: EntityConfig, key: str) -> None:
    if key not in conf.identifiers:
        raise InvalidArgumentError(f"Field {key} is not a univocal identifier")


def _check_conditions(conf: EntityConfig, conditions: Mapping[str, Any]) -> None:
    for column in conditions:
        if column not in conf.columns:
            raise InvalidArgumentError(f"{column} is not present in table '{conf.table}'")


class Persisted(Generic[T]):
    """A host value together with the configuration persisting it.

    Attributes:
        entity: The wrapped host value
        conf: EntityConfig of the value's type
        exists: Whether the value is known to be stored
    """

    def __init__(self, entity: T, conf: EntityConfig, exists: bool = False):
        self.entity = entity
        self.conf = conf
        self.exists = exists

    @property
    def key_value(self) -> Any:
        """Primary key value of the wrapped entity."""
        return entity_field(self.entity, self.conf.primary_key)

    async def save(self) -> bool:
        """Insert the entity, or update it if it exists already.

        Returns:
            True if a row was written
        """
        if self.exists:
            return await self.update()
        saved = await self.conf.queries.run("save", SaveParams(self.conf, self.entity))
        if saved:
            self.exists = True
        return saved

    async def update(self, *columns: Any) -> bool:
        """Update all the persisted columns, or only the given ones.

        Examples:
            await user.update()
            await user.update("email", "name")
            await user.update({"email", "name"})

        Returns:
            True if a row was updated

        Raises:
            InvalidArgumentError: If a column is not a persisted column name
        """
        selected = select_columns(self.conf, columns)
        return await self.conf.queries.run(
            "update", UpdateParams(self.conf, self.entity, columns=selected)
        )

    async def delete(self) -> bool:
        """Remove the entity by primary key.

        Returns:
            True if a row was removed, False if not found or never saved
        """
        if not self.exists:
            return False
        deleted = await self.conf.queries.run(
            "delete", DeleteParams(self.conf, self.conf.primary_key, self.key_value)
        )
        if deleted:
            self.exists = False
        return deleted

    def __repr__(self) -> str:
        return f"Persisted({self.entity!r}, table={self.conf.table!r}, exists={self.exists})"


class Repository(Generic[T]):
    """Type-level operations of one entity type.

    If factory is given it builds the entities this repository fetches,
    in place of the config's row mapper. The config itself is left
    untouched, so repositories sharing it may map rows differently.
    """

    def __init__(self, conf: EntityConfig, factory: Callable[[dict[str, Any]], T] | None = None):
        if factory is not None and not callable(factory):
            raise InvalidArgumentError("Repository factory must be callable")
        self.conf = conf
        self.factory = factory

    def wrap(self, entity: T, exists: bool = False) -> Persisted[T]:
        """Attach persistence capabilities to a host value."""
        return Persisted(entity, self.conf, exists=exists)

    async def fetch(self, key: str, value: Any) -> T | None:
        """Fetch one entity by an identifier column.

        Raises:
            InvalidArgumentError: If key is not an identifier column
            TooManyResultsError: If the lookup matched several rows
        """
        _check_identifier(self.conf, key)
        return await self.conf.queries.run(
            "fetch", FetchParams(self.conf, key, value, row_to_entity=self.factory)
        )

    async def delete(self, key: str, value: Any) -> bool:
        """Remove one entity by an identifier column.

        Raises:
            InvalidArgumentError: If key is not an identifier column
        """
        _check_identifier(self.conf, key)
        return await self.conf.queries.run("delete", DeleteParams(self.conf, key, value))

    async def fetch_many(self, conditions: Mapping[str, Any] | None = None) -> list[T]:
        """Fetch every entity whose columns equal the given values (AND)."""
        conditions = dict(conditions or {})
        _check_conditions(self.conf, conditions)
        return await self.conf.queries.run(
            "fetch_many", FilterParams(self.conf, conditions, row_to_entity=self.factory)
        )

    async def delete_many(self, conditions: Mapping[str, Any]) -> int:
        """Remove every entity matching all conditions.

        Returns:
            Number of removed rows

        Raises:
            InvalidArgumentError: If no condition is given or a condition
                column is not persisted
        """
        conditions = dict(conditions or {})
        if not conditions:
            raise InvalidArgumentError("delete_many needs at least one condition")
        _check_conditions(self.conf, conditions)
        return await self.conf.queries.run("delete_many", FilterParams(self.conf, conditions))
