"""
snowkit resource models.

Module organization:
- enums: All enumerations (ResourceKind, OperationType, OutcomeStatus, ErrorKind)
- base: Base model configuration and identifier helpers
- resources: ResourceSpec, Grant, DependentResourceQuery
- artifacts: ArtifactRef
- outcomes: OperationOutcome, ExecutionPlan
"""

from .artifacts import ArtifactRef
from .base import BaseSnowkitModel, as_identifier, normalize_identifier, qualify, split_identifier
from .enums import (
    CreateMode,
    ErrorKind,
    OperationType,
    OutcomeStatus,
    ResourceKind,
    ScopeLevel,
)
from .outcomes import ExecutionPlan, OperationOutcome
from .resources import MANAGED_BY_ATTRIBUTE, DependentResourceQuery, Grant, ResourceSpec

__all__ = [
    # Base
    "BaseSnowkitModel",
    "as_identifier",
    "normalize_identifier",
    "qualify",
    "split_identifier",
    # Enums
    "CreateMode",
    "ErrorKind",
    "OperationType",
    "OutcomeStatus",
    "ResourceKind",
    "ScopeLevel",
    # Resources
    "ResourceSpec",
    "Grant",
    "DependentResourceQuery",
    "MANAGED_BY_ATTRIBUTE",
    # Artifacts
    "ArtifactRef",
    # Outcomes
    "OperationOutcome",
    "ExecutionPlan",
]
