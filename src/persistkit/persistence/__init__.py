"""Persistence layer - executors the query engine runs statements on."""

from persistkit.persistence.config import DatabaseConfig, create_executor
from persistkit.persistence.executor import Executor

__all__ = ["DatabaseConfig", "Executor", "create_executor"]
