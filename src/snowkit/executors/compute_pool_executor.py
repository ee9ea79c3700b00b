"""
Compute pool executor for Snowflake operations.

Compute pools are expensive to start and host running services, so they are
created only if absent and never replaced by a re-run.
"""

from typing import List

from snowkit.models import ResourceKind, ResourceSpec

from .base import BaseExecutor


class ComputePoolExecutor(BaseExecutor):
    """Executor for Snowpark Container Services compute pools."""

    kind = ResourceKind.COMPUTE_POOL

    def _validate_options(self, resource: ResourceSpec) -> List[str]:
        errors = []
        if not resource.option("INSTANCE_FAMILY"):
            errors.append(f"Compute pool {resource.name} needs an INSTANCE_FAMILY")

        min_nodes = resource.option("MIN_NODES", 1)
        max_nodes = resource.option("MAX_NODES", min_nodes)
        if not all(isinstance(n, int) and not isinstance(n, bool) for n in (min_nodes, max_nodes)):
            errors.append(f"MIN_NODES and MAX_NODES of {resource.name} must be integers")
        elif min_nodes < 1 or max_nodes < min_nodes:
            errors.append(
                f"Compute pool {resource.name} needs 1 <= MIN_NODES <= MAX_NODES, "
                f"got {min_nodes} and {max_nodes}"
            )
        return errors
