"""
Resource models for snowkit.

A ResourceSpec is the static declaration of one Snowflake object. Specs are
declared once per run; whether the object actually exists is always asked of
the account at run time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional

from pydantic import Field, field_validator, model_validator

from .base import BaseSnowkitModel, normalize_identifier, qualify, split_identifier
from .enums import CreateMode, ResourceKind, ScopeLevel

# Attribute a spawned service records to point back at the object that manages it
MANAGED_BY_ATTRIBUTE = "managing_object_name"

_SCOPE_DEPTH = {
    ScopeLevel.ACCOUNT: 0,
    ScopeLevel.DATABASE: 1,
    ScopeLevel.SCHEMA: 2,
}


class Grant(BaseSnowkitModel):
    """Privileges granted on the owning resource to a role."""

    privileges: List[str] = Field(..., min_length=1, description="Privileges, e.g. ['USAGE', 'OPERATE']")
    role: str = Field(..., min_length=1, description="Grantee role")

    @field_validator("privileges")
    @classmethod
    def upper_privileges(cls, v: List[str]) -> List[str]:
        return [p.strip().upper() for p in v]


class ResourceSpec(BaseSnowkitModel):
    """
    Declarative description of a single managed resource.

    Attributes:
        kind: Type of Snowflake object
        name: Qualified name (DB.SCHEMA.OBJECT for schema-level objects)
        parent_name: Containing scope; derived from the qualified name when omitted
        configuration: Ordered CREATE options (KEY -> value)
        depends_on: Qualified names that must exist before this resource
        comment: Object comment
        grants: Privileges granted on this resource after it is provisioned
        provisioned: False for objects created at run time by notebooks (teardown only)
        cleanup_on_rerun: Dropped by the cleanup phase of every run
    """

    kind: ResourceKind
    name: str = Field(..., min_length=1)
    parent_name: Optional[str] = None
    configuration: Dict[str, Any] = Field(default_factory=dict)
    depends_on: List[str] = Field(default_factory=list)
    comment: Optional[str] = Field(None, max_length=1024)
    grants: List[Grant] = Field(default_factory=list)
    provisioned: bool = True
    cleanup_on_rerun: bool = False

    @field_validator("configuration")
    @classmethod
    def upper_option_keys(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        """Option keys are SQL keywords; store them upper-cased."""
        return {key.upper(): value for key, value in v.items()}

    @model_validator(mode="after")
    def resolve_scope(self) -> "ResourceSpec":
        if self.kind == ResourceKind.SERVICE and self.provisioned:
            raise ValueError("SERVICE resources are discovered, not declared; set provisioned=False")

        parts = split_identifier(self.name)
        if self.parent_name and len(parts) == 1:
            self.name = qualify(self.parent_name, self.name)
            parts = split_identifier(self.name)
        elif self.parent_name is None and len(parts) > 1:
            self.parent_name = ".".join(parts[:-1])

        expected = _SCOPE_DEPTH[self.kind.scope_level]
        if len(parts) - 1 != expected:
            raise ValueError(
                f"{self.kind.value} '{self.name}' must be qualified with {expected} "
                f"parent level(s), got {len(parts) - 1}"
            )
        if self.parent_name and normalize_identifier(self.parent_name) != normalize_identifier(".".join(parts[:-1])):
            raise ValueError(f"parent_name '{self.parent_name}' does not contain '{self.name}'")
        return self

    @property
    def key(self) -> str:
        """Normalized qualified name used for graph lookups."""
        return normalize_identifier(self.name)

    @property
    def short_name(self) -> str:
        return split_identifier(self.name)[-1]

    @property
    def scope(self) -> Optional[str]:
        """Containing database or schema, None for account-level objects."""
        return self.parent_name

    @property
    def create_mode(self) -> CreateMode:
        """Data-holding resources are never replaced so re-runs keep user data."""
        return CreateMode.IF_NOT_EXISTS if self.kind.holds_data else CreateMode.OR_REPLACE

    def option(self, key: str, default: Any = None) -> Any:
        return self.configuration.get(key.upper(), default)


@dataclass(frozen=True)
class DependentResourceQuery:
    """
    How to find dependents with unknown names before an owner can be dropped.

    Discovery lists every candidate_kind object in scope and keeps those whose
    match_attribute points back at owner_name. The optional predicate replaces
    that comparison entirely.
    """

    owner_kind: ResourceKind
    owner_name: str
    candidate_kind: ResourceKind
    scope: Optional[str]
    match_attribute: str = MANAGED_BY_ATTRIBUTE
    predicate: Optional[Callable[[Mapping[str, Any]], bool]] = None

    def matches(
        self,
        record: Mapping[str, Any],
        get_attribute: Callable[[Mapping[str, Any], str], Optional[Any]],
    ) -> bool:
        if self.predicate is not None:
            return self.predicate(record)
        managed_by = get_attribute(record, self.match_attribute)
        if not managed_by:
            return False
        return normalize_identifier(str(managed_by)) == normalize_identifier(self.owner_name)
