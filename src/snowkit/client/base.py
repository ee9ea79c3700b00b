"""
Resource management API consumed by the executors.

ResourceClient is the synchronous request/response boundary between snowkit
and the account. Executors never issue SQL themselves; they call these
primitives, which lets tests substitute an in-memory implementation.

Implementations raise the snowkit error taxonomy (ResourceNotFoundError,
DependencyBlockedError, PermissionDeniedError, TransientPlatformError) rather
than client-library exceptions.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Sequence

from snowkit.models import CreateMode, ResourceKind, ResourceSpec


class ResourceClient(ABC):
    """Primitives the orchestrator needs from the managing platform."""

    @abstractmethod
    def exists(self, kind: ResourceKind, name: str) -> bool:
        """Check whether an object of the given kind and qualified name exists."""

    @abstractmethod
    def create(self, spec: ResourceSpec, mode: CreateMode) -> None:
        """
        Create an object from its spec.

        Args:
            spec: The resource to create
            mode: OR_REPLACE or IF_NOT_EXISTS
        """

    @abstractmethod
    def drop_if_exists(self, kind: ResourceKind, name: str) -> None:
        """
        Drop an object; dropping an absent object is a no-op.

        Raises:
            DependencyBlockedError: If live dependents prevent the drop
        """

    @abstractmethod
    def list_in_scope(self, kind: ResourceKind, scope: Optional[str]) -> List[Mapping[str, Any]]:
        """
        List every object of a kind registered in a database or schema.

        Raises:
            ResourceNotFoundError: If the scope itself does not exist
        """

    def get_attribute(self, record: Mapping[str, Any], attribute: str) -> Optional[Any]:
        """Read an attribute from a listed record, ignoring case of the column name."""
        if attribute in record:
            return record[attribute]
        wanted = attribute.lower()
        for key, value in record.items():
            if str(key).lower() == wanted:
                return value
        return None

    @abstractmethod
    def set_properties(self, kind: ResourceKind, name: str, properties: Dict[str, Any]) -> None:
        """ALTER ... SET properties on an existing object."""

    @abstractmethod
    def grant_privileges(
        self,
        privileges: Sequence[str],
        kind: ResourceKind,
        name: str,
        role: str,
    ) -> None:
        """Grant privileges on an object to a role."""

    @abstractmethod
    def grant_database_role(self, database_role: str, role: str) -> None:
        """Grant a database role (e.g. SNOWFLAKE.CORTEX_USER) to a role."""

    @abstractmethod
    def grant_role_to_current_user(self, role: str) -> None:
        """Grant a role to the user the session is authenticated as."""
