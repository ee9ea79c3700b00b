"""
Enum definitions for snowkit resource models.

This module contains all enumeration types used throughout the provisioning system.
"""

from enum import Enum
from typing import Dict, FrozenSet


class ScopeLevel(str, Enum):
    """Where a resource lives in the Snowflake namespace."""
    ACCOUNT = "ACCOUNT"
    DATABASE = "DATABASE"  # Contained in a database (schemas)
    SCHEMA = "SCHEMA"  # Contained in a schema (stages, models, notebooks, ...)


class ResourceKind(str, Enum):
    """Identifies the type of Snowflake object managed by an executor."""
    DATABASE = "DATABASE"
    SCHEMA = "SCHEMA"
    ROLE = "ROLE"
    WAREHOUSE = "WAREHOUSE"
    STAGE = "STAGE"
    NETWORK_RULE = "NETWORK_RULE"
    EXTERNAL_ACCESS_INTEGRATION = "EXTERNAL_ACCESS_INTEGRATION"
    COMPUTE_POOL = "COMPUTE_POOL"
    MODEL = "MODEL"
    NOTEBOOK = "NOTEBOOK"

    # Created indirectly by models; never declared, only discovered
    SERVICE = "SERVICE"

    @property
    def keyword(self) -> str:
        """SQL object keyword used in CREATE/DROP/ALTER statements."""
        return _KEYWORDS.get(self, self.value.replace("_", " "))

    @property
    def show_keyword(self) -> str:
        """Plural keyword used in SHOW statements."""
        return _SHOW_KEYWORDS[self]

    @property
    def grant_keyword(self) -> str:
        """Object keyword used in GRANT ... ON <keyword> statements."""
        return _GRANT_KEYWORDS.get(self, self.keyword)

    @property
    def scope_level(self) -> ScopeLevel:
        if self in _SCHEMA_SCOPED:
            return ScopeLevel.SCHEMA
        if self == ResourceKind.SCHEMA:
            return ScopeLevel.DATABASE
        return ScopeLevel.ACCOUNT

    @property
    def holds_data(self) -> bool:
        """Data-holding kinds are created if absent and never replaced."""
        return self in _DATA_HOLDING

    @property
    def is_prerequisite(self) -> bool:
        """Security/ownership prerequisites; their failure is fatal downstream."""
        return self in _PREREQUISITES


class CreateMode(str, Enum):
    """How a create statement treats an existing object."""
    OR_REPLACE = "OR_REPLACE"
    IF_NOT_EXISTS = "IF_NOT_EXISTS"


class OperationType(str, Enum):
    """Types of operations that can be performed."""
    CREATE = "CREATE"
    REPLACE = "REPLACE"
    DELETE = "DELETE"
    DISCOVER = "DISCOVER"
    GRANT = "GRANT"
    ATTACH = "ATTACH"
    FETCH = "FETCH"
    PUBLISH = "PUBLISH"
    VERIFY = "VERIFY"
    NO_OP = "NO_OP"


class OutcomeStatus(str, Enum):
    """Final status of a single operation."""
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    SKIPPED = "SKIPPED"


class ErrorKind(str, Enum):
    """Error taxonomy shared by the orchestrator and the artifact pipeline."""
    NOT_FOUND = "NOT_FOUND"
    DEPENDENCY_BLOCKED = "DEPENDENCY_BLOCKED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    TIMEOUT = "TIMEOUT"
    CONFIGURATION = "CONFIGURATION"
    TRANSIENT = "TRANSIENT"
    INTEGRITY = "INTEGRITY"
    PLATFORM = "PLATFORM"


_KEYWORDS: Dict[ResourceKind, str] = {
    ResourceKind.EXTERNAL_ACCESS_INTEGRATION: "EXTERNAL ACCESS INTEGRATION",
}

_SHOW_KEYWORDS: Dict[ResourceKind, str] = {
    ResourceKind.DATABASE: "DATABASES",
    ResourceKind.SCHEMA: "SCHEMAS",
    ResourceKind.ROLE: "ROLES",
    ResourceKind.WAREHOUSE: "WAREHOUSES",
    ResourceKind.STAGE: "STAGES",
    ResourceKind.NETWORK_RULE: "NETWORK RULES",
    ResourceKind.EXTERNAL_ACCESS_INTEGRATION: "EXTERNAL ACCESS INTEGRATIONS",
    ResourceKind.COMPUTE_POOL: "COMPUTE POOLS",
    ResourceKind.MODEL: "MODELS",
    ResourceKind.NOTEBOOK: "NOTEBOOKS",
    ResourceKind.SERVICE: "SERVICES",
}

# GRANT ... ON INTEGRATION, not ON EXTERNAL ACCESS INTEGRATION
_GRANT_KEYWORDS: Dict[ResourceKind, str] = {
    ResourceKind.EXTERNAL_ACCESS_INTEGRATION: "INTEGRATION",
}

_SCHEMA_SCOPED: FrozenSet[ResourceKind] = frozenset({
    ResourceKind.STAGE,
    ResourceKind.NETWORK_RULE,
    ResourceKind.MODEL,
    ResourceKind.NOTEBOOK,
    ResourceKind.SERVICE,
})

_DATA_HOLDING: FrozenSet[ResourceKind] = frozenset({
    ResourceKind.DATABASE,
    ResourceKind.SCHEMA,
    ResourceKind.STAGE,
    ResourceKind.COMPUTE_POOL,
})

_PREREQUISITES: FrozenSet[ResourceKind] = frozenset({
    ResourceKind.ROLE,
    ResourceKind.DATABASE,
    ResourceKind.SCHEMA,
})
