"""
Role executor for Snowflake operations.

Besides the CREATE ROLE itself, a role spec may carry two client-side
options that are applied right after creation:

    DATABASE_ROLES: database roles granted to the new role
                    (e.g. ["SNOWFLAKE.CORTEX_USER"])
    GRANT_TO_CURRENT_USER: grant the role to the user running the session
"""

import logging
from typing import List

from snowkit.models import OperationOutcome, OperationType, ResourceKind, ResourceSpec

from .base import BaseExecutor

logger = logging.getLogger(__name__)

ROLE_DIRECTIVES = ("DATABASE_ROLES", "GRANT_TO_CURRENT_USER")


class RoleExecutor(BaseExecutor):
    """Executor for account roles."""

    kind = ResourceKind.ROLE

    def _create_spec(self, resource: ResourceSpec) -> ResourceSpec:
        options = {k: v for k, v in resource.configuration.items() if k not in ROLE_DIRECTIVES}
        return resource.model_copy(update={"configuration": options})

    def _validate_options(self, resource: ResourceSpec) -> List[str]:
        errors = []
        database_roles = resource.option("DATABASE_ROLES", [])
        if not isinstance(database_roles, list) or not all(isinstance(r, str) for r in database_roles):
            errors.append(f"DATABASE_ROLES of role {resource.name} must be a list of names")
        if not isinstance(resource.option("GRANT_TO_CURRENT_USER", False), bool):
            errors.append(f"GRANT_TO_CURRENT_USER of role {resource.name} must be true or false")
        return errors

    def provision(self, resource: ResourceSpec) -> List[OperationOutcome]:
        outcomes = super().provision(resource)
        if not resource.provisioned or not outcomes[0].success:
            return outcomes

        for database_role in resource.option("DATABASE_ROLES", []):
            target = f"{database_role} -> {resource.name}"
            try:
                logger.info(f"Granting database role {database_role} to role {resource.name}")
                self.execute_with_retry(self.client.grant_database_role, database_role, resource.name)
                outcomes.append(self._outcome(
                    resource, OperationType.GRANT, "Granted database role", target=target
                ))
            except Exception as e:
                outcomes.append(self._handle_error(OperationType.GRANT, target, e))

        if resource.option("GRANT_TO_CURRENT_USER", False):
            target = f"{resource.name} -> CURRENT_USER"
            try:
                logger.info(f"Granting role {resource.name} to the current user")
                self.execute_with_retry(self.client.grant_role_to_current_user, resource.name)
                outcomes.append(self._outcome(
                    resource, OperationType.GRANT, "Granted to current user", target=target
                ))
            except Exception as e:
                outcomes.append(self._handle_error(OperationType.GRANT, target, e))

        return outcomes
