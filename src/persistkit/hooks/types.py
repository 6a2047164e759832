"""Hook types for persistkit.

Defines the temporal trigger of a hook and the hook callable signature.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from enum import Enum
from typing import TYPE_CHECKING, Any

from persistkit.errors import InvalidArgumentError

if TYPE_CHECKING:
    from persistkit.query.parameters import QueryParameters

# Hook function signature: (QueryParameters) -> None | Awaitable[None]
HookFn = Callable[["QueryParameters"], Awaitable[Any] | Any]


class When(str, Enum):
    """Moment of a query run at which a hook fires."""

    BEFORE = "before"
    AFTER = "after"


ALL_MOMENTS = (When.BEFORE, When.AFTER)


def parse_when(when: Any) -> tuple[When, ...]:
    """Resolve an optional temporal trigger to the moments it selects.

    Args:
        when: "before", "after", a When member, or None for both

    Returns:
        The selected moments, in execution order

    Raises:
        InvalidArgumentError: If when is given but is not a valid moment
    """
    if when is None:
        return ALL_MOMENTS
    if isinstance(when, When):
        return (when,)
    if isinstance(when, str):
        try:
            return (When(when),)
        except ValueError:
            pass
    raise InvalidArgumentError(
        f"'when' must be None, 'before' or 'after', got {when!r}"
    )
