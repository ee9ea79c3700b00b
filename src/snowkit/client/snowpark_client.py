"""
ResourceClient implementation over a Snowpark session.

Statements are rendered by snowkit.client.ddl and executed with
session.sql(...).collect(). SnowparkSQLException is translated into the
snowkit error taxonomy based on the SQL error code and, where Snowflake does
not use a dedicated code, the message text.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from snowflake.snowpark import Session
from snowflake.snowpark.exceptions import SnowparkSQLException

from snowkit.errors import (
    DependencyBlockedError,
    PermissionDeniedError,
    ResourceNotFoundError,
    SnowkitError,
    TransientPlatformError,
)
from snowkit.models import CreateMode, ResourceKind, ResourceSpec, normalize_identifier, split_identifier

from . import ddl
from .base import ResourceClient

logger = logging.getLogger(__name__)

# 002003: object does not exist or not authorized, 002043: object does not exist
NOT_FOUND_CODES = frozenset({2003, 2043})
# 003001: insufficient privileges, 003540: no active warehouse/role privileges
PERMISSION_CODES = frozenset({3001, 3540})

DEPENDENCY_MARKERS = (
    "cannot be dropped",
    "cannot drop",
    "still in use",
    "has dependent",
    "dependent object",
)
TRANSIENT_MARKERS = (
    "temporarily unavailable",
    "please try again",
    "service unavailable",
    "connection reset",
)


class SnowparkResourceClient(ResourceClient):
    """
    Resource management API backed by a Snowpark Session.

    Usage:
        from snowkit.connection import get_session

        client = SnowparkResourceClient(get_session())
        client.exists(ResourceKind.DATABASE, "MONAI_DB")
    """

    def __init__(self, session: Session):
        self.session = session

    # =========================================================================
    # QUERY EXECUTION
    # =========================================================================

    def execute(self, statement: str, target: Optional[str] = None) -> List[Dict[str, Any]]:
        """Run a statement and return its rows as dicts."""
        logger.debug(f"Executing: {statement}")
        try:
            rows = self.session.sql(statement).collect()
        except SnowparkSQLException as e:
            raise translate_error(e, target or statement) from e
        return [row.as_dict() for row in rows]

    # =========================================================================
    # RESOURCE PRIMITIVES
    # =========================================================================

    def exists(self, kind: ResourceKind, name: str) -> bool:
        wanted = normalize_identifier(split_identifier(name)[-1])
        try:
            rows = self.execute(ddl.render_show(kind, name), target=name)
        except ResourceNotFoundError:
            # The containing database or schema is gone
            return False
        return any(row.get("name") == wanted for row in rows)

    def create(self, spec: ResourceSpec, mode: CreateMode) -> None:
        self.execute(ddl.render_create(spec, mode), target=spec.name)

    def drop_if_exists(self, kind: ResourceKind, name: str) -> None:
        try:
            self.execute(ddl.render_drop(kind, name), target=name)
        except ResourceNotFoundError:
            # IF EXISTS still fails when the parent scope is missing
            logger.debug(f"{kind.value} {name} already absent")

    def list_in_scope(self, kind: ResourceKind, scope: Optional[str]) -> List[Mapping[str, Any]]:
        return self.execute(ddl.render_show_in_scope(kind, scope), target=scope or kind.value)

    def set_properties(self, kind: ResourceKind, name: str, properties: Dict[str, Any]) -> None:
        self.execute(ddl.render_alter_set(kind, name, properties), target=name)

    def grant_privileges(
        self,
        privileges: Sequence[str],
        kind: ResourceKind,
        name: str,
        role: str,
    ) -> None:
        self.execute(ddl.render_grant(privileges, kind, name, role), target=name)

    def grant_database_role(self, database_role: str, role: str) -> None:
        self.execute(ddl.render_grant_database_role(database_role, role), target=role)

    def grant_role_to_current_user(self, role: str) -> None:
        rows = self.execute("SELECT CURRENT_USER() AS CURRENT_USER")
        user = rows[0]["CURRENT_USER"]
        self.execute(ddl.render_grant_role_to_user(role, user), target=role)


def _error_code(error: SnowparkSQLException) -> Optional[int]:
    code = getattr(error, "sql_error_code", None)
    try:
        return int(code) if code is not None else None
    except (TypeError, ValueError):
        return None


def translate_error(error: SnowparkSQLException, target: str) -> SnowkitError:
    """Map a SnowparkSQLException onto the snowkit error taxonomy."""
    code = _error_code(error)
    message = str(getattr(error, "message", None) or error)
    lowered = message.lower()

    if code in NOT_FOUND_CODES or "does not exist" in lowered:
        return ResourceNotFoundError(target, message)
    if code in PERMISSION_CODES or "insufficient privileges" in lowered:
        return PermissionDeniedError(message)
    if any(marker in lowered for marker in DEPENDENCY_MARKERS):
        return DependencyBlockedError(target, message)
    if any(marker in lowered for marker in TRANSIENT_MARKERS):
        return TransientPlatformError(message)
    return SnowkitError(message)
