"""SQL text helpers shared by the default queries and the executors.

Statements use positional ``$1, $2, ...`` placeholders, one per value,
numbered left to right.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

PLACEHOLDER_RE = re.compile(r"\$(\d+)")

# Names interpolated into SQL text: plain column names, optionally
# schema-qualified table names
IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
TABLE_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?")


@dataclass
class Statement:
    """A parameterized SQL statement.

    Attributes:
        text: SQL text with $n placeholders
        values: Ordered values bound to the placeholders
    """

    text: str
    values: list[Any] = field(default_factory=list)


@dataclass
class Response:
    """Raw answer of an executor.

    Attributes:
        rows: Returned rows as column -> value dicts
        row_count: Rows returned or affected by the statement
    """

    rows: list[dict[str, Any]] = field(default_factory=list)
    row_count: int = 0


def placeholders(n: int, start: int = 1) -> str:
    """Return '$start, ..., $(start+n-1)'.

    Example: placeholders(3) → '$1, $2, $3'
    """
    return ", ".join(f"${i}" for i in range(start, start + n))


def entity_field(ent: Any, name: str) -> Any:
    """Read a column value from a mapping or an attribute-bearing object.

    Missing columns read as None.
    """
    if ent is None:
        return None
    if isinstance(ent, Mapping):
        return ent.get(name)
    return getattr(ent, name, None)


def entity_values(ent: Any, columns: Iterable[str]) -> list[Any]:
    """Read the values of several columns, in column order."""
    return [entity_field(ent, c) for c in columns]


def where_clause(columns: Iterable[str], start: int = 1) -> str:
    """Build an AND-joined equality clause over columns.

    Example: where_clause(["a", "b"]) → 'a = $1 AND b = $2'
    """
    return " AND ".join(f"{c} = ${i}" for i, c in enumerate(columns, start))


def to_numbered_qmark(text: str) -> str:
    """Rewrite $n placeholders to SQLite's ?n form."""
    return PLACEHOLDER_RE.sub(r"?\1", text)


def to_pyformat(text: str, values: list[Any]) -> tuple[str, list[Any]]:
    """Rewrite $n placeholders to %s, reordering values per occurrence.

    Literal percent signs are escaped so the driver leaves them alone.
    A placeholder may appear more than once; its value is repeated.

    Raises:
        IndexError: If a placeholder refers past the end of values
    """
    ordered: list[Any] = []

    def _sub(match: re.Match[str]) -> str:
        ordered.append(values[int(match.group(1)) - 1])
        return "%s"

    rewritten = PLACEHOLDER_RE.sub(_sub, text.replace("%", "%%"))
    return rewritten, ordered


def to_named(text: str, values: list[Any]) -> tuple[str, dict[str, Any]]:
    """Rewrite $n placeholders to :pn named binds.

    Example: to_named("a = $1", [5]) → ('a = :p1', {'p1': 5})
    """
    rewritten = PLACEHOLDER_RE.sub(r":p\1", text)
    return rewritten, {f"p{i}": v for i, v in enumerate(values, 1)}
