"""
Model and service executors.

Models are logged into the registry by notebook code at run time, never by
snowkit, so a model spec is teardown-only. Deploying a model for inference
spawns services whose names are chosen by the platform; they record the
model in their managing_object_name column and block the model (and the
role that owns it) from being dropped until they are gone.
"""

from typing import List, Optional

from snowkit.models import DependentResourceQuery, ResourceKind, ResourceSpec

from .base import BaseExecutor


class ModelExecutor(BaseExecutor):
    """Executor for registry models; discovers the services they spawn."""

    kind = ResourceKind.MODEL
    discovers = ResourceKind.SERVICE

    def _validate_options(self, resource: ResourceSpec) -> List[str]:
        if resource.provisioned:
            return [f"Model {resource.name} is created at run time; declare it with provisioned=False"]
        return []

    def dependent_query(self, resource: ResourceSpec) -> Optional[DependentResourceQuery]:
        return DependentResourceQuery(
            owner_kind=self.kind,
            owner_name=resource.name,
            candidate_kind=self.discovers,
            scope=resource.scope,
        )


class ServiceExecutor(BaseExecutor):
    """Executor for discovered services. Services are only ever dropped."""

    kind = ResourceKind.SERVICE
