"""persistkit - declarative persistence for plain data values.

An EntityConfig describes how values of one type map onto a table. Its
queries (save, fetch, update, delete, ...) run a hook pipeline around one
parameterized statement and transform the store's answer into a typed
result.

Usage:
    from persistkit import EntityConfig, Repository

    users = EntityConfig("users", "id", ids=["email"], columns=["name"])
    users.setup("sqlite:///app.db")
    users.add_hook("before", "save", lambda params: print(params.ent))

    repo = Repository(users)
    await repo.wrap({"id": 1, "email": "a@b.c", "name": "A"}).save()
    await repo.fetch("email", "a@b.c")
"""

from persistkit.config import EntityConfig
from persistkit.entity import Persisted, Repository
from persistkit.errors import (
    AlreadyConnectedError,
    InvalidArgumentError,
    NotConnectedError,
    PersistkitError,
    StoreError,
    TooManyResultsError,
    UnknownQueryError,
)
from persistkit.hooks import HookChain, When
from persistkit.persistence import DatabaseConfig, Executor, create_executor
from persistkit.query import (
    DeleteParams,
    FetchParams,
    FilterParams,
    Query,
    QueryParameters,
    QueryRegistry,
    Response,
    SaveParams,
    Statement,
    TransformRegistry,
    UpdateParams,
)

__all__ = [
    "AlreadyConnectedError",
    "DatabaseConfig",
    "DeleteParams",
    "EntityConfig",
    "Executor",
    "FetchParams",
    "FilterParams",
    "HookChain",
    "InvalidArgumentError",
    "NotConnectedError",
    "Persisted",
    "PersistkitError",
    "Query",
    "QueryParameters",
    "QueryRegistry",
    "Repository",
    "Response",
    "SaveParams",
    "Statement",
    "StoreError",
    "TooManyResultsError",
    "UnknownQueryError",
    "UpdateParams",
    "When",
    "create_executor",
]
