"""Query execution engine: parameters, transforms, queries and registries."""

from persistkit.query.parameters import (
    DeleteParams,
    FetchParams,
    FilterParams,
    QueryParameters,
    SaveParams,
    UpdateParams,
)
from persistkit.query.query import Query
from persistkit.query.registry import QueryRegistry
from persistkit.query.sql import Response, Statement
from persistkit.query.transforms import TransformRegistry, default_transform

__all__ = [
    "DeleteParams",
    "FetchParams",
    "FilterParams",
    "Query",
    "QueryParameters",
    "QueryRegistry",
    "Response",
    "SaveParams",
    "Statement",
    "TransformRegistry",
    "UpdateParams",
    "default_transform",
]
