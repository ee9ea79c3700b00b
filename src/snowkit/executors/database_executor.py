"""
Database executor for Snowflake operations.

Databases hold data, so they are only ever created if absent; dropping one
cascades to every schema inside it.
"""

from snowkit.models import ResourceKind

from .base import BaseExecutor


class DatabaseExecutor(BaseExecutor):
    """Executor for database operations."""

    kind = ResourceKind.DATABASE
