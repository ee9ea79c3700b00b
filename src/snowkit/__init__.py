"""
snowkit: idempotent Snowflake resource provisioning.

Quick Start:
    from snowkit import Orchestrator, ProvisioningConfig, SnowparkResourceClient
    from snowkit.blueprint import rerun_cleanup_specs, structural_specs
    from snowkit.connection import get_session

    config = ProvisioningConfig()
    orchestrator = Orchestrator(SnowparkResourceClient(get_session()), config.orchestrator)

    orchestrator.teardown(rerun_cleanup_specs(config))
    for outcome in orchestrator.provision(structural_specs(config)):
        print(outcome)
"""

__version__ = "0.1.0"

from snowkit.artifacts import ArtifactSyncPipeline, HttpFetcher
from snowkit.client import ResourceClient, SnowparkResourceClient, StageStore
from snowkit.config import OrchestratorSettings, ProvisioningConfig, SyncSettings, load_config
from snowkit.errors import (
    ArtifactFetchError,
    ArtifactIntegrityError,
    ConfigurationError,
    DependencyBlockedError,
    FetchTimeoutError,
    PermissionDeniedError,
    ResourceNotFoundError,
    SnowkitError,
    TransientPlatformError,
)
from snowkit.graph import DependencyGraph
from snowkit.models import (
    ArtifactRef,
    CreateMode,
    DependentResourceQuery,
    ErrorKind,
    ExecutionPlan,
    Grant,
    OperationOutcome,
    OperationType,
    OutcomeStatus,
    ResourceKind,
    ResourceSpec,
)
from snowkit.orchestrator import Orchestrator

__all__ = [
    "__version__",
    # Core
    "Orchestrator",
    "ArtifactSyncPipeline",
    "DependencyGraph",
    # Configuration
    "ProvisioningConfig",
    "OrchestratorSettings",
    "SyncSettings",
    "load_config",
    # Clients
    "ResourceClient",
    "SnowparkResourceClient",
    "StageStore",
    "HttpFetcher",
    # Models
    "ResourceKind",
    "ResourceSpec",
    "Grant",
    "DependentResourceQuery",
    "ArtifactRef",
    "CreateMode",
    "OperationOutcome",
    "OperationType",
    "OutcomeStatus",
    "ErrorKind",
    "ExecutionPlan",
    # Errors
    "SnowkitError",
    "ConfigurationError",
    "ResourceNotFoundError",
    "DependencyBlockedError",
    "PermissionDeniedError",
    "TransientPlatformError",
    "FetchTimeoutError",
    "ArtifactFetchError",
    "ArtifactIntegrityError",
]
