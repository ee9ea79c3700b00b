"""
Factory functions for creating test models.

These factories create snowkit models with sensible defaults for testing.
All factories accept overrides for any field.
"""

from typing import Any, Dict, List, Optional

from snowkit.models import ArtifactRef, Grant, ResourceKind, ResourceSpec

TEST_DATABASE = "TEST_DB"
TEST_SCHEMA = "TEST_DB.UTILS"
TEST_STAGE = "TEST_DB.UTILS.NOTEBOOK_STG"


def make_spec(
    kind: ResourceKind = ResourceKind.WAREHOUSE,
    name: str = "TEST_WH",
    depends_on: Optional[List[str]] = None,
    configuration: Optional[Dict[str, Any]] = None,
    **overrides: Any,
) -> ResourceSpec:
    """Create a ResourceSpec; options default to what the kind's executor requires."""
    if configuration is None:
        configuration = _default_configuration(kind)
    return ResourceSpec(
        kind=kind,
        name=name,
        depends_on=depends_on or [],
        configuration=configuration,
        **overrides,
    )


def _default_configuration(kind: ResourceKind) -> Dict[str, Any]:
    if kind == ResourceKind.NETWORK_RULE:
        return {"MODE": "EGRESS", "TYPE": "HOST_PORT", "VALUE_LIST": ["example.com:443"]}
    if kind == ResourceKind.COMPUTE_POOL:
        return {"MIN_NODES": 1, "MAX_NODES": 2, "INSTANCE_FAMILY": "CPU_X64_XS"}
    if kind == ResourceKind.NOTEBOOK:
        return {"MAIN_FILE": "notebook.ipynb"}
    return {}


def make_database(name: str = TEST_DATABASE, **overrides: Any) -> ResourceSpec:
    """Create a DATABASE spec for testing."""
    return make_spec(ResourceKind.DATABASE, name, **overrides)


def make_schema(name: str = TEST_SCHEMA, database: str = TEST_DATABASE, **overrides: Any) -> ResourceSpec:
    """Create a SCHEMA spec that depends on its database."""
    depends_on = overrides.pop("depends_on", [database])
    return make_spec(ResourceKind.SCHEMA, name, depends_on=depends_on, **overrides)


def make_stage(name: str = TEST_STAGE, schema: str = TEST_SCHEMA, **overrides: Any) -> ResourceSpec:
    """Create a STAGE spec that depends on its schema."""
    depends_on = overrides.pop("depends_on", [schema])
    return make_spec(ResourceKind.STAGE, name, depends_on=depends_on, **overrides)


def make_role(name: str = "TEST_ROLE", **overrides: Any) -> ResourceSpec:
    """Create a ROLE spec for testing."""
    return make_spec(ResourceKind.ROLE, name, **overrides)


def make_model(name: str = f"{TEST_SCHEMA}.TEST_MODEL", schema: str = TEST_SCHEMA, **overrides: Any) -> ResourceSpec:
    """Create a teardown-only MODEL spec."""
    depends_on = overrides.pop("depends_on", [schema])
    return make_spec(
        ResourceKind.MODEL,
        name,
        depends_on=depends_on,
        provisioned=False,
        cleanup_on_rerun=True,
        **overrides,
    )


def make_notebook(
    name: str = f"{TEST_SCHEMA}.TEST_NOTEBOOK",
    main_file: str = "notebook.ipynb",
    integrations: Optional[List[str]] = None,
    schema: str = TEST_SCHEMA,
    **overrides: Any,
) -> ResourceSpec:
    """Create a NOTEBOOK spec backed by main_file."""
    configuration: Dict[str, Any] = {"MAIN_FILE": main_file, "QUERY_WAREHOUSE": "TEST_WH"}
    if integrations:
        configuration["EXTERNAL_ACCESS_INTEGRATIONS"] = integrations
    depends_on = overrides.pop("depends_on", [schema])
    return make_spec(ResourceKind.NOTEBOOK, name, depends_on=depends_on, configuration=configuration, **overrides)


def make_grant(privileges: Optional[List[str]] = None, role: str = "TEST_ROLE") -> Grant:
    """Create a Grant for testing."""
    return Grant(privileges=privileges or ["USAGE"], role=role)


def make_artifact_ref(
    file_name: str = "notebook.ipynb",
    stage: str = TEST_STAGE,
    base_url: str = "https://example.com/notebooks",
    content_hash: Optional[str] = None,
) -> ArtifactRef:
    """Create an ArtifactRef publishing file_name into stage."""
    return ArtifactRef(
        source_url=f"{base_url}/{file_name}",
        destination_path=f"@{stage}/{file_name}",
        content_hash=content_hash,
    )
