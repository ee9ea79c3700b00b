"""
Schema executor for Snowflake operations.

Schemas hold tables and stages, so a re-run never replaces an existing one.
"""

from snowkit.models import ResourceKind

from .base import BaseExecutor


class SchemaExecutor(BaseExecutor):
    """Executor for schema operations."""

    kind = ResourceKind.SCHEMA
