"""Query parameters passed through hooks, generators and transforms.

A QueryParameters instance is the only channel through which hooks, SQL
generators and result transforms observe the context of an operation. It
is built once per operation. Fields that were not given explicitly are
derived lazily from the config and the entity, at most once per instance.
Explicit values are kept verbatim, falsy ones included.

During a run the query also records itself and its results here:
    query: the executing Query
    res: the raw Response of the executor
    ret: the transformed result returned to the caller
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from functools import cached_property
from typing import TYPE_CHECKING, Any

from persistkit.errors import InvalidArgumentError
from persistkit.query.sql import Response, entity_field, entity_values

if TYPE_CHECKING:
    from persistkit.config import EntityConfig
    from persistkit.query.query import Query

_UNSET: Any = object()


class QueryParameters:
    """Lazily-resolved parameter bag for one query run.

    Attributes:
        conf: The EntityConfig of the entity type
        entities: Optional ordered entities the operation applies to
        query: Set by Query.run to the executing query
        res: Set by Query.run to the executor response
        ret: Set by Query.run to the transformed result
    """

    def __init__(
        self,
        conf: EntityConfig,
        *,
        ent: Any = _UNSET,
        entities: Iterable[Any] | None = None,
        key: Any = _UNSET,
        kval: Any = _UNSET,
        columns: Sequence[str] | None = None,
        values: Sequence[Any] | None = None,
        conditions: Mapping[str, Any] | None = None,
        row_to_entity: Callable[[dict[str, Any]], Any] | None = None,
    ):
        if conf is None:
            raise InvalidArgumentError("Query parameters need a config")
        if columns is not None and values is not None and len(columns) != len(values):
            raise InvalidArgumentError(
                f"Got {len(values)} value(s) for {len(columns)} column(s)"
            )

        self.conf = conf
        self.entities = list(entities) if entities is not None else []
        self.query: Query | None = None
        self.res: Response | None = None
        self.ret: Any = None

        # Explicit values shadow the cached_property derivations below
        if ent is not _UNSET:
            self.ent = ent
        if key is not _UNSET:
            self.key = key
        if kval is not _UNSET:
            self.kval = kval
        if columns is not None:
            self.columns = list(columns)
        if values is not None:
            self.values = list(values)
        if conditions is not None:
            self.conditions = dict(conditions)
        if row_to_entity is not None:
            if not callable(row_to_entity):
                raise InvalidArgumentError("row_to_entity must be callable")
            self.row_to_entity = row_to_entity

    @cached_property
    def ent(self) -> Any:
        """Subject entity, defaulting to the first of entities."""
        return self.entities[0] if self.entities else None

    @cached_property
    def key(self) -> Any:
        """Identifier column, defaulting to the primary key."""
        return self.conf.primary_key

    @cached_property
    def kval(self) -> Any:
        """Identifier value, defaulting to the entity's value for key."""
        return entity_field(self.ent, self.key)

    @cached_property
    def columns(self) -> list[str]:
        """Columns involved, defaulting to every persisted column."""
        return list(self.conf.columns)

    @cached_property
    def values(self) -> list[Any]:
        """Entity values of columns, in column order."""
        return entity_values(self.ent, self.columns)

    @cached_property
    def conditions(self) -> dict[str, Any]:
        """Column -> value equality filters for multi-row queries."""
        return {}

    @cached_property
    def row_to_entity(self) -> Callable[[dict[str, Any]], Any]:
        """Row mapper of this run, defaulting to the config's."""
        return self.conf.row_to_entity

    def __repr__(self) -> str:
        name = self.query.name if self.query is not None else None
        return f"{type(self).__name__}(table={self.conf.table!r}, query={name!r})"


class SaveParams(QueryParameters):
    """Parameters for inserting one entity."""

    def __init__(self, conf: EntityConfig, ent: Any, **kwargs: Any):
        super().__init__(conf, ent=ent, **kwargs)


class UpdateParams(QueryParameters):
    """Parameters for updating some columns of one entity."""

    def __init__(
        self,
        conf: EntityConfig,
        ent: Any,
        columns: Sequence[str] | None = None,
        **kwargs: Any,
    ):
        super().__init__(conf, ent=ent, columns=columns, **kwargs)


class FetchParams(QueryParameters):
    """Parameters for looking up one row by an identifier."""

    def __init__(self, conf: EntityConfig, key: str, kval: Any, **kwargs: Any):
        super().__init__(conf, key=key, kval=kval, **kwargs)


class DeleteParams(QueryParameters):
    """Parameters for removing one row by an identifier."""

    def __init__(self, conf: EntityConfig, key: str, kval: Any, **kwargs: Any):
        super().__init__(conf, key=key, kval=kval, **kwargs)


class FilterParams(QueryParameters):
    """Parameters for multi-row queries filtered by column equality."""

    def __init__(
        self,
        conf: EntityConfig,
        conditions: Mapping[str, Any] | None = None,
        **kwargs: Any,
    ):
        super().__init__(conf, conditions=conditions or {}, **kwargs)
