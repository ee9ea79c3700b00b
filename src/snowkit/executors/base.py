"""
Base executor class for Snowflake resource operations.

Provides common functionality for all executors including error handling,
idempotent create/drop semantics, transient-error retries and the per-kind
dependent discovery hook.
"""

import logging
import time
from typing import Any, Callable, List, Optional

from snowkit.client.base import ResourceClient
from snowkit.errors import (
    DependencyBlockedError,
    ResourceNotFoundError,
    TransientPlatformError,
    classify_error,
    describe_error,
)
from snowkit.models import (
    CreateMode,
    DependentResourceQuery,
    ErrorKind,
    OperationOutcome,
    OperationType,
    OutcomeStatus,
    ResourceKind,
    ResourceSpec,
    normalize_identifier,
)

logger = logging.getLogger(__name__)


class BaseExecutor:
    """
    Base class for all resource executors.

    Provides common functionality including:
    - Query-before-act existence checks
    - Create-or-replace vs create-if-absent semantics per kind
    - Drop-if-exists semantics (absent resources are a no-op)
    - Retries with backoff for transient platform failures
    - Errors returned as OperationOutcome, never raised

    Subclasses set `kind` and override hooks where a kind needs more than
    the generic DDL (grants to users, dependent discovery, attachment).
    """

    kind: ResourceKind
    # Candidate kind this executor discovers dependents of, if any
    discovers: Optional[ResourceKind] = None

    def __init__(self, client: ResourceClient, max_retries: int = 3):
        """
        Initialize the executor.

        Args:
            client: Resource management API
            max_retries: Maximum attempts for transient failures
        """
        self.client = client
        self.max_retries = max_retries

    def get_resource_type(self) -> str:
        """Get the type of resource this executor handles."""
        return self.kind.value

    def exists(self, resource: ResourceSpec) -> bool:
        """Check if a resource exists."""
        return self.execute_with_retry(self.client.exists, resource.kind, resource.name)

    def validate(self, resource: ResourceSpec) -> List[str]:
        """
        Validate a spec before any operation runs.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []
        if resource.kind != self.kind:
            errors.append(f"{self.__class__.__name__} cannot manage {resource.kind.value} {resource.name}")
        if resource.parent_name and resource.provisioned:
            deps = {normalize_identifier(d) for d in resource.depends_on}
            if normalize_identifier(resource.parent_name) not in deps:
                errors.append(f"{resource.name} must depend on its containing scope {resource.parent_name}")
        errors.extend(self._validate_options(resource))
        return errors

    def _validate_options(self, resource: ResourceSpec) -> List[str]:
        """Kind-specific option checks. Override in subclasses."""
        return []

    def _create_spec(self, resource: ResourceSpec) -> ResourceSpec:
        """Spec rendered into the CREATE statement; strips client-side options."""
        return resource

    def dependent_query(self, resource: ResourceSpec) -> Optional[DependentResourceQuery]:
        """
        Describe dependents with unknown names that block dropping this resource.

        Owner kinds that spawn dynamically-named objects override this; the
        default is no discovery.
        """
        return None

    def create(self, resource: ResourceSpec) -> OperationOutcome:
        """
        Create the resource using its kind's create mode.

        Data-holding resources are created only if absent; everything else is
        created or replaced so configuration changes take effect on re-run.
        """
        start_time = time.time()
        operation = OperationType.CREATE

        try:
            existed = self.exists(resource)
            mode = resource.create_mode

            if existed and mode == CreateMode.IF_NOT_EXISTS:
                return self._outcome(resource, OperationType.NO_OP, "Already exists")

            operation = OperationType.REPLACE if existed else OperationType.CREATE
            logger.info(f"{'Replacing' if existed else 'Creating'} {self.kind.keyword.lower()} {resource.name}")
            self.execute_with_retry(self.client.create, self._create_spec(resource), mode)

            return self._outcome(
                resource,
                operation,
                "Replaced successfully" if existed else "Created successfully",
                duration=time.time() - start_time,
            )

        except Exception as e:
            return self._handle_error(operation, resource.name, e)

    def grant(self, resource: ResourceSpec) -> List[OperationOutcome]:
        """Apply the grants declared on a resource; each grant fails in isolation."""
        outcomes = []
        for grant in resource.grants:
            target = f"{resource.name} -> {grant.role}"
            try:
                logger.info(f"Granting {', '.join(grant.privileges)} on {resource.name} to role {grant.role}")
                self.execute_with_retry(
                    self.client.grant_privileges, grant.privileges, resource.kind, resource.name, grant.role
                )
                outcomes.append(self._outcome(
                    resource,
                    OperationType.GRANT,
                    f"Granted {', '.join(grant.privileges)}",
                    target=target,
                ))
            except Exception as e:
                outcomes.append(self._handle_error(OperationType.GRANT, target, e))
        return outcomes

    def provision(self, resource: ResourceSpec) -> List[OperationOutcome]:
        """
        Create a resource and apply its grants.

        The first outcome is always the create outcome; grants are only
        attempted when the create succeeded.
        """
        if not resource.provisioned:
            return [self._outcome(
                resource,
                OperationType.NO_OP,
                "Created at run time; managed by teardown only",
            )]

        created = self.create(resource)
        if not created.success:
            return [created]
        return [created] + self.grant(resource)

    def delete(self, resource: ResourceSpec) -> OperationOutcome:
        """Drop a resource; dropping an absent resource is a successful no-op."""
        start_time = time.time()

        try:
            if not self.exists(resource):
                return self._outcome(resource, OperationType.NO_OP, "Does not exist")

            logger.info(f"Dropping {self.kind.keyword.lower()} {resource.name}")
            self.execute_with_retry(self.client.drop_if_exists, resource.kind, resource.name)

            return self._outcome(
                resource,
                OperationType.DELETE,
                "Deleted successfully",
                duration=time.time() - start_time,
            )

        except ResourceNotFoundError:
            return self._outcome(resource, OperationType.NO_OP, "Does not exist")
        except DependencyBlockedError as e:
            logger.warning(f"Drop of {resource.name} blocked by live dependents: {e}")
            return self._handle_error(OperationType.DELETE, resource.name, e)
        except Exception as e:
            return self._handle_error(OperationType.DELETE, resource.name, e)

    def execute_with_retry(self, operation: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """
        Execute an operation with retry logic.

        Only TransientPlatformError is retried, with exponential backoff.
        Not-found, permission and dependency errors are raised immediately.

        Raises:
            Exception: The last error if all retries fail
        """
        last_error = None

        for attempt in range(self.max_retries):
            try:
                return operation(*args, **kwargs)
            except TransientPlatformError as e:
                last_error = e
                if attempt < self.max_retries - 1:
                    wait_time = 2 ** attempt  # Exponential backoff
                    logger.warning(
                        f"Attempt {attempt + 1} failed: {e}. "
                        f"Retrying in {wait_time} seconds..."
                    )
                    time.sleep(wait_time)
                else:
                    logger.error(f"All {self.max_retries} attempts failed")

        if last_error:
            raise last_error

    def _outcome(
        self,
        resource: ResourceSpec,
        operation: OperationType,
        message: str,
        target: Optional[str] = None,
        duration: float = 0.0,
    ) -> OperationOutcome:
        return OperationOutcome(
            target=target or resource.name,
            status=OutcomeStatus.SUCCESS,
            operation=operation,
            resource_kind=self.get_resource_type(),
            message=message,
            duration_seconds=duration,
        )

    def _handle_error(
        self,
        operation: OperationType,
        resource_name: str,
        error: Exception
    ) -> OperationOutcome:
        """
        Turn an error during execution into a failed outcome.

        Args:
            operation: The operation that failed
            resource_name: Name of the resource
            error: The exception that occurred

        Returns:
            OperationOutcome with error details
        """
        error_kind = classify_error(error)
        detail = describe_error(error)

        outcome = OperationOutcome(
            target=resource_name,
            status=OutcomeStatus.FAILED,
            operation=operation,
            resource_kind=self.get_resource_type(),
            message=detail,
            error_detail=detail,
            error_kind=error_kind,
        )

        if error_kind == ErrorKind.PERMISSION_DENIED:
            logger.error(f"Permission denied, no retry: {outcome}")
        else:
            logger.error(f"Operation failed: {outcome}")

        return outcome
