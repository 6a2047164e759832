"""Result transform registry.

A result transform turns the raw executor response stored in
``params.res`` into the value returned to the caller. Queries refer to
registered transforms by name through their ``type``.
"""

from collections.abc import Callable
from typing import Any

from persistkit.errors import InvalidArgumentError, TooManyResultsError

# Transform signature: (QueryParameters) -> result
TransformFn = Callable[[Any], Any]


def singular(params: Any) -> Any:
    """Map the first row to an entity, or None when no row came back.

    Extra rows are ignored.
    """
    rows = params.res.rows
    if not rows:
        return None
    return params.row_to_entity(rows[0])


def multiple(params: Any) -> list[Any]:
    """Map every row to an entity, keeping row order."""
    return [params.row_to_entity(row) for row in params.res.rows]


def boolean(params: Any) -> bool:
    """True if the statement returned or affected at least one row."""
    return params.res.row_count > 0


def count(params: Any) -> int:
    """Number of rows returned or affected."""
    return int(params.res.row_count)


def default_transform(params: Any) -> Any:
    """Transform used by queries built without transform or type.

    Behaves like a unique lookup: None for no rows, the mapped entity for
    one row.

    Raises:
        TooManyResultsError: If more than one row came back
    """
    rows = params.res.rows
    if not rows:
        return None
    if len(rows) > 1:
        raise TooManyResultsError(len(rows))
    return params.row_to_entity(rows[0])


class TransformRegistry:
    """Registry of named result transforms.

    Built-in transforms (singular, multiple, boolean, count) are registered
    at import time. Registering an existing name replaces it.

    Example:
        TransformRegistry.register("ids", lambda p: [r["id"] for r in p.res.rows])
        Query(name="user_ids", generate=gen, type="ids")
    """

    _transforms: dict[str, TransformFn] = {}

    @classmethod
    def register(cls, name: str, transform: TransformFn) -> None:
        """Register a transform by name, replacing any previous one.

        Raises:
            InvalidArgumentError: If name is blank or transform is not callable
        """
        if not isinstance(name, str) or not name.strip():
            raise InvalidArgumentError("Transform name must be a non-blank string")
        if not callable(transform):
            raise InvalidArgumentError(f"Transform '{name}' must be callable")
        cls._transforms[name] = transform

    @classmethod
    def get(cls, name: str) -> TransformFn:
        """Get a registered transform by name.

        Raises:
            InvalidArgumentError: If the transform is not registered
        """
        if name not in cls._transforms:
            raise InvalidArgumentError(
                f"Transform type '{name}' is not registered. "
                "Available types: " + ", ".join(cls.list_registered())
            )
        return cls._transforms[name]

    @classmethod
    def is_registered(cls, name: str) -> bool:
        """Check if a transform is registered."""
        return name in cls._transforms

    @classmethod
    def list_registered(cls) -> list[str]:
        """List all registered transform names."""
        return sorted(cls._transforms.keys())

    @classmethod
    def reset(cls) -> None:
        """Drop custom transforms and restore the built-ins. Primarily for testing."""
        cls._transforms.clear()
        register_builtin_transforms()


def register_builtin_transforms() -> None:
    """Register the transforms shipped with persistkit."""
    TransformRegistry.register("singular", singular)
    TransformRegistry.register("multiple", multiple)
    TransformRegistry.register("boolean", boolean)
    TransformRegistry.register("count", count)


register_builtin_transforms()
