"""
Executor modules for applying Snowflake resource specs through a ResourceClient.
"""

from typing import Dict, Type

from snowkit.models import ResourceKind

from .base import BaseExecutor
from .compute_pool_executor import ComputePoolExecutor
from .database_executor import DatabaseExecutor
from .model_executor import ModelExecutor, ServiceExecutor
from .network_executor import ExternalAccessIntegrationExecutor, NetworkRuleExecutor
from .notebook_executor import NotebookExecutor
from .role_executor import RoleExecutor
from .schema_executor import SchemaExecutor
from .stage_executor import StageExecutor
from .warehouse_executor import WarehouseExecutor

# One executor class per resource kind
DEFAULT_EXECUTORS: Dict[ResourceKind, Type[BaseExecutor]] = {
    ResourceKind.DATABASE: DatabaseExecutor,
    ResourceKind.SCHEMA: SchemaExecutor,
    ResourceKind.ROLE: RoleExecutor,
    ResourceKind.WAREHOUSE: WarehouseExecutor,
    ResourceKind.STAGE: StageExecutor,
    ResourceKind.NETWORK_RULE: NetworkRuleExecutor,
    ResourceKind.EXTERNAL_ACCESS_INTEGRATION: ExternalAccessIntegrationExecutor,
    ResourceKind.COMPUTE_POOL: ComputePoolExecutor,
    ResourceKind.MODEL: ModelExecutor,
    ResourceKind.NOTEBOOK: NotebookExecutor,
    ResourceKind.SERVICE: ServiceExecutor,
}

__all__ = [
    # Base class
    'BaseExecutor',
    'DEFAULT_EXECUTORS',

    # Hierarchy executors
    'DatabaseExecutor',
    'SchemaExecutor',

    # Account-level executors
    'RoleExecutor',
    'WarehouseExecutor',
    'ComputePoolExecutor',
    'ExternalAccessIntegrationExecutor',

    # Schema-level executors
    'StageExecutor',
    'NetworkRuleExecutor',
    'ModelExecutor',
    'ServiceExecutor',
    'NotebookExecutor',
]
