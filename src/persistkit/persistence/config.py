"""Connection settings and the executor factory.

The scheme of the database URL picks the executor:

    sqlite:///path/to.db          SQLiteExecutor (sqlite:/// alone is in-memory)
    postgresql://user@host/db     PostgreSQLExecutor (psycopg)
    anything else                 SQLAlchemyExecutor
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from persistkit.persistence.executor import Executor

SQLITE_PREFIX = "sqlite:///"
DEFAULT_DB_NAME = "persistkit.db"


@dataclass
class DatabaseConfig:
    """Where entities are stored.

    Attributes:
        url: Database URL
        engine_options: Extra create_engine() keywords for SQLAlchemy URLs
    """

    url: str
    engine_options: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_env(cls, base_path: Path | None = None) -> DatabaseConfig:
        """Read the database location from the environment.

        DATABASE_URL wins over PERSISTKIT_DB_PATH (a SQLite file path).
        Without either, a persistkit.db SQLite file is used, under
        base_path/data when base_path is given.
        """
        if url := os.environ.get("DATABASE_URL"):
            return cls(url=url)
        if path := os.environ.get("PERSISTKIT_DB_PATH"):
            return cls(url=SQLITE_PREFIX + path)
        target = base_path / "data" / DEFAULT_DB_NAME if base_path else DEFAULT_DB_NAME
        return cls(url=f"{SQLITE_PREFIX}{target}")

    @property
    def scheme(self) -> str:
        return self.url.split(":", 1)[0].lower()

    @property
    def is_sqlite(self) -> bool:
        return self.scheme.startswith("sqlite")

    @property
    def is_postgresql(self) -> bool:
        return self.scheme.startswith("postgresql")

    @property
    def sqlite_path(self) -> str:
        """File path of a sqlite:/// URL, ':memory:' when empty."""
        path = self.url[len(SQLITE_PREFIX):] if self.url.startswith(SQLITE_PREFIX) else ""
        return path or ":memory:"

    @property
    def sqlalchemy_url(self) -> str:
        """The URL with the psycopg (v3) driver named for bare postgresql:// URLs."""
        if self.scheme == "postgresql":
            return "postgresql+psycopg" + self.url[len("postgresql"):]
        return self.url


def create_executor(config: DatabaseConfig) -> Executor:
    """Build the executor matching the URL scheme, not yet connected."""
    if config.is_sqlite:
        from persistkit.persistence.sqlite import SQLiteExecutor

        return SQLiteExecutor(config.sqlite_path)

    if config.is_postgresql:
        from persistkit.persistence.postgresql import PostgreSQLExecutor

        return PostgreSQLExecutor(config.url)

    from persistkit.persistence.sqla import SQLAlchemyExecutor

    return SQLAlchemyExecutor(config.sqlalchemy_url, **config.engine_options)
