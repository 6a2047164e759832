"""Query lifecycle hooks.

Every query owns a HookChain with two ordered lists:
- before: runs after the query is selected, before the statement executes
- after: runs once the store answered and the result was transformed

Usage:
    from persistkit.hooks import HookChain, When

    chain = HookChain()
    chain.add(lambda params: print(params.ent), When.BEFORE)
"""

from persistkit.hooks.chain import HookChain
from persistkit.hooks.types import ALL_MOMENTS, HookFn, When, parse_when

__all__ = [
    "ALL_MOMENTS",
    "HookChain",
    "HookFn",
    "When",
    "parse_when",
]
