"""Shared fixtures for persistkit tests."""

import sqlite3

import pytest

from persistkit import EntityConfig
from persistkit.query.sql import Response
from persistkit.query.transforms import TransformRegistry


class RecordingExecutor:
    """Executor stub recording statements and answering with queued responses."""

    def __init__(self, *responses):
        self.statements = []
        self.responses = list(responses)
        self.closed = False

    def respond(self, *responses):
        self.responses.extend(responses)

    async def query(self, statement):
        self.statements.append(statement)
        if self.responses:
            response = self.responses.pop(0)
            if isinstance(response, Exception):
                raise response
            return response
        return Response()

    async def close(self):
        self.closed = True


MOCKIES_DDL = """
CREATE TABLE mockies (
    id INTEGER PRIMARY KEY,
    uniq TEXT UNIQUE NOT NULL,
    msg TEXT,
    msg2 TEXT
)
"""


@pytest.fixture(autouse=True)
def reset_transforms():
    """Restore the built-in transforms after each test."""
    yield
    TransformRegistry.reset()


@pytest.fixture
def conf():
    """Config for the mockies table, not connected."""
    return EntityConfig("mockies", "id", ids=["uniq"], columns=["msg", "msg2"])


@pytest.fixture
def executor():
    return RecordingExecutor()


@pytest.fixture
def recorded_conf(conf, executor):
    """Config connected to a RecordingExecutor."""
    conf.setup(executor)
    return conf


@pytest.fixture
def sqlite_path(tmp_path):
    """SQLite database file with an empty mockies table."""
    path = tmp_path / "mockies.db"
    conn = sqlite3.connect(path)
    conn.execute(MOCKIES_DDL)
    conn.commit()
    conn.close()
    return path


@pytest.fixture
def sqlite_conf(conf, sqlite_path):
    """Config connected to a real SQLite database."""
    conf.setup(f"sqlite:///{sqlite_path}")
    yield conf
    # Closing a sqlite3 connection does no I/O worth awaiting
    if conf.connection is not None and conf.connection.conn is not None:
        conf.connection.conn.close()
