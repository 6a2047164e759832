"""Ordered hook chains attached to a single query."""

import inspect
import logging
from typing import Any

from persistkit.errors import InvalidArgumentError
from persistkit.hooks.types import HookFn, When, parse_when

logger = logging.getLogger(__name__)


class HookChain:
    """Before and after callbacks of one query.

    Hooks run sequentially in insertion order and share the parameter
    object of the run. A raising hook stops the chain and its exception
    propagates to the caller. Each run iterates over a snapshot, so adding
    or flushing hooks never alters a run already in progress.

    Example:
        chain = HookChain()
        chain.add(validate_user, When.BEFORE)
        chain.add(audit)  # both before and after
        await chain.run(params, "before")
    """

    def __init__(self) -> None:
        self.before: list[HookFn] = []
        self.after: list[HookFn] = []

    def _hooks(self, when: When) -> list[HookFn]:
        return self.before if when is When.BEFORE else self.after

    def add(self, hook: HookFn, when: When | str | None = None) -> None:
        """Append a hook to the tail of the selected chain(s).

        Args:
            hook: Sync or async callable taking the query parameters
            when: "before", "after" or None to add it to both chains

        Raises:
            InvalidArgumentError: If when is invalid or hook is not callable
        """
        moments = parse_when(when)
        if not callable(hook):
            raise InvalidArgumentError("Hook must be callable")
        for moment in moments:
            self._hooks(moment).append(hook)

    async def run(self, params: Any, when: When | str | None = None) -> None:
        """Run the selected chain(s) in order, awaiting async hooks.

        With when=None every before hook runs, then every after hook.
        """
        for moment in parse_when(when):
            for hook in tuple(self._hooks(moment)):
                result = hook(params)
                if inspect.isawaitable(result):
                    await result

    def flush(self, when: When | str | None = None) -> None:
        """Remove every hook from the selected chain(s)."""
        for moment in parse_when(when):
            hooks = self._hooks(moment)
            if hooks:
                logger.debug("Flushing %d %s hook(s)", len(hooks), moment.value)
            hooks.clear()

    def __len__(self) -> int:
        return len(self.before) + len(self.after)

    def __repr__(self) -> str:
        return f"HookChain(before={len(self.before)}, after={len(self.after)})"
