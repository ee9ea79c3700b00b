"""
Stage executor for Snowflake operations.

Stages hold uploaded files (medical images, results, notebooks), so an
existing stage is never replaced by a re-run.
"""

from snowkit.models import ResourceKind

from .base import BaseExecutor


class StageExecutor(BaseExecutor):
    """Executor for internal stages."""

    kind = ResourceKind.STAGE
