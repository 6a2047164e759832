"""Exception types raised by persistkit.

Construction and invocation errors are raised synchronously and never
wrapped. Errors raised by hooks and transforms propagate unchanged; only
errors coming from the store go through the config's error normalizer.
"""

from typing import Any


class PersistkitError(Exception):
    """Base class for every persistkit error."""


class InvalidArgumentError(PersistkitError, ValueError):
    """An argument failed validation (bad name, bad hook, bad column...)."""


class UnknownQueryError(InvalidArgumentError):
    """A trigger or query name is not present in the registry."""

    def __init__(self, name: str):
        super().__init__(f"Query '{name}' is not registered")
        self.name = name


class NotConnectedError(PersistkitError, RuntimeError):
    """A query was run before setup() attached a connection."""


class AlreadyConnectedError(PersistkitError, RuntimeError):
    """setup() was called while a connection is still attached."""


class TooManyResultsError(PersistkitError):
    """A lookup expected at most one row but the store returned more."""

    def __init__(self, count: int):
        super().__init__(f"Too many results were returned ({count}, expected 0 or 1)")
        self.count = count


class StoreError(PersistkitError):
    """A store failure whose normalized form is not an exception.

    Attributes:
        detail: Whatever the error normalizer returned
    """

    def __init__(self, detail: Any):
        super().__init__(str(detail))
        self.detail = detail
