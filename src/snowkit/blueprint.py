"""
Resource blueprint: ProvisioningConfig -> ResourceSpecs and ArtifactRefs.

Declaration order follows the setup flow (database and schemas, role,
warehouse, stages, network egress, compute pool, model, notebooks). Every
resource that carries a grant to the role depends on the role, so the role
is created before them and dropped after them.
"""

from typing import List

from snowkit.config import ProvisioningConfig
from snowkit.models import ArtifactRef, Grant, ResourceKind, ResourceSpec, qualify


def _utils(config: ProvisioningConfig) -> str:
    return qualify(config.database, config.utils_schema)


def _results(config: ProvisioningConfig) -> str:
    return qualify(config.database, config.results_schema)


def _notebook_stage(config: ProvisioningConfig) -> str:
    return qualify(_utils(config), config.notebook_stage)


def _grants(config: ProvisioningConfig, *privilege_sets: List[str]) -> List[Grant]:
    return [Grant(privileges=privileges, role=config.role) for privileges in privilege_sets]


def build_resource_specs(config: ProvisioningConfig) -> List[ResourceSpec]:
    """Every resource the setup manages, in declaration order."""
    role = config.role
    database = config.database
    utils = _utils(config)
    results = _results(config)

    specs = [
        ResourceSpec(
            kind=ResourceKind.ROLE,
            name=role,
            comment=config.role_comment,
            configuration={
                "DATABASE_ROLES": list(config.database_roles),
                "GRANT_TO_CURRENT_USER": config.grant_role_to_current_user,
            },
            cleanup_on_rerun=True,
        ),
        ResourceSpec(
            kind=ResourceKind.DATABASE,
            name=database,
            comment=config.database_comment,
            depends_on=[role],
            grants=_grants(config, ["USAGE"]),
        ),
        ResourceSpec(
            kind=ResourceKind.SCHEMA,
            name=utils,
            comment=config.utils_schema_comment,
            depends_on=[database, role],
            grants=_grants(config, ["USAGE"], ["ALL"], ["CREATE NOTEBOOK", "CREATE MODEL", "CREATE TABLE"]),
        ),
        ResourceSpec(
            kind=ResourceKind.SCHEMA,
            name=results,
            comment=config.results_schema_comment,
            depends_on=[database, role],
            grants=_grants(config, ["USAGE"], ["ALL"], ["CREATE TABLE"]),
        ),
    ]

    warehouse = config.warehouse
    specs.append(ResourceSpec(
        kind=ResourceKind.WAREHOUSE,
        name=warehouse.name,
        comment=warehouse.comment,
        configuration={
            "WAREHOUSE_SIZE": warehouse.size,
            "WAREHOUSE_TYPE": warehouse.type,
            "AUTO_SUSPEND": warehouse.auto_suspend,
            "AUTO_RESUME": warehouse.auto_resume,
            "INITIALLY_SUSPENDED": warehouse.initially_suspended,
        },
        depends_on=[role],
        grants=_grants(config, ["USAGE"], ["OPERATE"]),
    ))

    for stage in config.stages:
        configuration = {}
        if stage.encrypted:
            configuration["ENCRYPTION"] = {"TYPE": "SNOWFLAKE_SSE"}
        configuration["DIRECTORY"] = {"ENABLE": stage.directory}
        specs.append(ResourceSpec(
            kind=ResourceKind.STAGE,
            name=qualify(utils, stage.name),
            comment=stage.comment,
            configuration=configuration,
            depends_on=[utils, role],
            grants=_grants(config, ["READ", "WRITE"]),
        ))

    for rule in config.network_rules:
        specs.append(ResourceSpec(
            kind=ResourceKind.NETWORK_RULE,
            name=qualify(utils, rule.name),
            comment=rule.comment,
            configuration={
                "MODE": "EGRESS",
                "TYPE": "HOST_PORT",
                "VALUE_LIST": list(rule.value_list),
            },
            depends_on=[utils],
        ))

    for integration in config.integrations:
        rules = [qualify(utils, name) for name in integration.network_rules]
        specs.append(ResourceSpec(
            kind=ResourceKind.EXTERNAL_ACCESS_INTEGRATION,
            name=integration.name,
            comment=integration.comment,
            configuration={
                "ALLOWED_NETWORK_RULES": rules,
                "ENABLED": True,
            },
            depends_on=rules + ([role] if integration.grant_usage else []),
            grants=_grants(config, ["USAGE"]) if integration.grant_usage else [],
        ))

    pool = config.compute_pool
    specs.append(ResourceSpec(
        kind=ResourceKind.COMPUTE_POOL,
        name=pool.name,
        comment=pool.comment,
        configuration={
            "MIN_NODES": pool.min_nodes,
            "MAX_NODES": pool.max_nodes,
            "INSTANCE_FAMILY": pool.instance_family,
        },
        depends_on=[role],
        grants=_grants(config, ["USAGE"], ["MONITOR"]),
    ))

    if config.model_name:
        # Logged by the training notebook; dropped before the role it blocks
        specs.append(ResourceSpec(
            kind=ResourceKind.MODEL,
            name=qualify(utils, config.model_name),
            depends_on=[utils, role],
            provisioned=False,
            cleanup_on_rerun=True,
        ))

    specs.extend(notebook_specs(config))
    return specs


def notebook_specs(config: ProvisioningConfig) -> List[ResourceSpec]:
    """Notebook specs; created by attach_artifacts once their files are published."""
    utils = _utils(config)
    integrations = list(config.notebook_integrations)
    return [
        ResourceSpec(
            kind=ResourceKind.NOTEBOOK,
            name=qualify(utils, notebook.name),
            comment=notebook.comment,
            configuration={
                "MAIN_FILE": notebook.main_file,
                "QUERY_WAREHOUSE": config.warehouse.name,
                "COMPUTE_POOL": config.compute_pool.name,
                "RUNTIME_NAME": config.runtime_name,
                "EXTERNAL_ACCESS_INTEGRATIONS": integrations,
            },
            depends_on=[
                utils,
                _notebook_stage(config),
                config.warehouse.name,
                config.compute_pool.name,
                *integrations,
                config.role,
            ],
            cleanup_on_rerun=True,
        )
        for notebook in config.notebooks
    ]


def structural_specs(config: ProvisioningConfig) -> List[ResourceSpec]:
    """Everything provision() creates: all declared resources except notebooks."""
    return [s for s in build_resource_specs(config) if s.kind != ResourceKind.NOTEBOOK]


def rerun_cleanup_specs(config: ProvisioningConfig) -> List[ResourceSpec]:
    """Resources dropped at the start of every run (model, notebooks, role)."""
    return [s for s in build_resource_specs(config) if s.cleanup_on_rerun]


def build_artifact_refs(config: ProvisioningConfig) -> List[ArtifactRef]:
    """One ArtifactRef per notebook file, in notebook order."""
    base_url = config.artifact_base_url.rstrip("/")
    stage = _notebook_stage(config)
    return [
        ArtifactRef(
            source_url=f"{base_url}/{notebook.main_file}",
            destination_path=f"@{stage}/{notebook.main_file}",
            content_hash=config.artifact_hashes.get(notebook.main_file),
        )
        for notebook in config.notebooks
    ]
