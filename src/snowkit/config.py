"""
Provisioning configuration.

ProvisioningConfig is the single explicit configuration object of a run. Its
defaults reproduce the MONAI distributed medical image processing setup; a
YAML file can override any part of it:

    database: MONAI_DB
    warehouse:
      size: MEDIUM
    sync:
      fetch_timeout_seconds: 120

The orchestrator and the sync pipeline only ever see their own settings
sections (OrchestratorSettings, SyncSettings), passed in by the driver.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from snowkit.errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "SNOWKIT_CONFIG"

DEFAULT_ARTIFACT_BASE_URL = (
    "https://raw.githubusercontent.com/Snowflake-Labs/"
    "sfguide-distributed-medical-image-processing-with-monai/main/notebooks"
)


class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class OrchestratorSettings(_Section):
    """Settings of the resource lifecycle orchestrator."""
    max_retries: int = Field(3, ge=1, le=10, description="Attempts for transient platform errors")


class SyncSettings(_Section):
    """Settings of the artifact sync pipeline."""
    fetch_timeout_seconds: float = Field(60.0, gt=0, description="Bound on each artifact fetch")


class WarehouseConfig(_Section):
    name: str = "MONAI_WH"
    size: str = "SMALL"
    type: str = "STANDARD"
    auto_suspend: int = Field(60, ge=0)
    auto_resume: bool = True
    initially_suspended: bool = True
    comment: str = "Warehouse for MONAI medical image processing"

    @field_validator("size", "type")
    @classmethod
    def upper(cls, v: str) -> str:
        return v.upper()


class StageConfig(_Section):
    """
    An internal stage in the utilities schema.

    Attributes:
        name: Stage name (unqualified)
        encrypted: Use server-side encryption (SNOWFLAKE_SSE)
        directory: Enable the directory table
        comment: Stage comment
    """
    name: str
    encrypted: bool = False
    directory: bool = True
    comment: Optional[str] = None


class NetworkRuleConfig(_Section):
    """Egress HOST_PORT rule in the utilities schema."""
    name: str
    value_list: List[str] = Field(..., min_length=1)
    comment: Optional[str] = None


class IntegrationConfig(_Section):
    """
    External access integration over one or more network rules.

    Attributes:
        name: Integration name
        network_rules: Unqualified names of rules in network_rules
        grant_usage: Grant USAGE on the integration to the role
        comment: Integration comment
    """
    name: str
    network_rules: List[str] = Field(..., min_length=1)
    grant_usage: bool = False
    comment: Optional[str] = None


class ComputePoolConfig(_Section):
    name: str = "MONAI_GPU_ML_M_POOL"
    min_nodes: int = Field(1, ge=1)
    max_nodes: int = Field(8, ge=1)
    instance_family: str = "GPU_NV_M"
    comment: str = "GPU compute pool for MONAI medical image processing"

    @model_validator(mode="after")
    def check_nodes(self) -> "ComputePoolConfig":
        if self.max_nodes < self.min_nodes:
            raise ValueError(f"max_nodes ({self.max_nodes}) must be >= min_nodes ({self.min_nodes})")
        return self


class NotebookConfig(_Section):
    """A notebook created from the artifact named main_file."""
    name: str
    main_file: str = Field(..., pattern=r"^[^/]+$")
    comment: Optional[str] = None


def _default_stages() -> List[StageConfig]:
    return [
        StageConfig(
            name="MONAI_MEDICAL_IMAGES_STG",
            encrypted=True,
            comment="Lung CT scans and segmentation masks in NIfTI format",
        ),
        StageConfig(
            name="RESULTS_STG",
            encrypted=True,
            comment="Registered images, model checkpoints, and inference outputs",
        ),
        StageConfig(name="NOTEBOOK_STG", comment="Stage for notebook files"),
    ]


def _default_network_rules() -> List[NetworkRuleConfig]:
    return [
        NetworkRuleConfig(
            name="ALLOW_ALL_NETWORK_RULES",
            value_list=["0.0.0.0:443", "0.0.0.0:80"],
            comment="Allow outbound HTTPS/HTTP for package installation",
        ),
        NetworkRuleConfig(
            name="GITHUB_NETWORK_RULE",
            value_list=["raw.githubusercontent.com:443"],
            comment="Allow access to GitHub for downloading notebooks",
        ),
    ]


def _default_integrations() -> List[IntegrationConfig]:
    return [
        IntegrationConfig(
            name="MONAI_ALLOW_ALL_EAI",
            network_rules=["ALLOW_ALL_NETWORK_RULES"],
            grant_usage=True,
            comment="External access for MONAI notebooks to install dependencies",
        ),
        IntegrationConfig(
            name="GITHUB_ACCESS_INTEGRATION",
            network_rules=["GITHUB_NETWORK_RULE"],
            comment="External access to GitHub for downloading notebooks",
        ),
    ]


def _default_notebooks() -> List[NotebookConfig]:
    return [
        NotebookConfig(
            name="MONAI_01_INGEST_DATA",
            main_file="01_ingest_data.ipynb",
            comment="MONAI Data Ingestion - Downloads and uploads lung CT scans",
        ),
        NotebookConfig(
            name="MONAI_02_MODEL_TRAINING",
            main_file="02_model_training.ipynb",
            comment="MONAI Model Training - Trains LocalNet registration model",
        ),
        NotebookConfig(
            name="MONAI_03_MODEL_INFERENCE",
            main_file="03_model_inference.ipynb",
            comment="MONAI Model Inference - Runs distributed inference",
        ),
    ]


class ProvisioningConfig(_Section):
    """
    Everything a provisioning run needs to know.

    Attributes:
        database: Database holding every schema-level object
        utils_schema: Schema for stages, network rules, models and notebooks
        results_schema: Schema for inference results
        role: Role the notebooks run as; recreated on every run
        database_roles: Database roles granted to the role
        grant_role_to_current_user: Grant the role to the user running setup
        notebook_stage: Stage (one of stages) the notebooks are published to
        notebook_integrations: Integrations wired into every notebook
        runtime_name: Container runtime of the notebooks
        model_name: Registry model logged by the training notebook
        artifact_base_url: Base URL notebooks are fetched from
        artifact_hashes: Optional pinned sha256 per notebook file name
    """
    database: str = "MONAI_DB"
    database_comment: str = "Database for MONAI medical image processing solution"
    utils_schema: str = "UTILS"
    utils_schema_comment: str = "MONAI utilities: stages, models, and configurations"
    results_schema: str = "RESULTS"
    results_schema_comment: str = "MONAI inference results and metrics"

    role: str = "MONAI_DATA_SCIENTIST"
    role_comment: str = "Role for MONAI medical image processing notebooks"
    database_roles: List[str] = Field(default_factory=lambda: ["SNOWFLAKE.CORTEX_USER"])
    grant_role_to_current_user: bool = True

    warehouse: WarehouseConfig = Field(default_factory=WarehouseConfig)
    stages: List[StageConfig] = Field(default_factory=_default_stages)
    notebook_stage: str = "NOTEBOOK_STG"
    network_rules: List[NetworkRuleConfig] = Field(default_factory=_default_network_rules)
    integrations: List[IntegrationConfig] = Field(default_factory=_default_integrations)
    compute_pool: ComputePoolConfig = Field(default_factory=ComputePoolConfig)

    notebooks: List[NotebookConfig] = Field(default_factory=_default_notebooks)
    notebook_integrations: List[str] = Field(default_factory=lambda: ["MONAI_ALLOW_ALL_EAI"])
    runtime_name: str = "SYSTEM$GPU_RUNTIME"
    model_name: Optional[str] = "LUNG_CT_REGISTRATION"

    artifact_base_url: str = Field(DEFAULT_ARTIFACT_BASE_URL, pattern=r"^https?://")
    artifact_hashes: Dict[str, str] = Field(default_factory=dict)

    orchestrator: OrchestratorSettings = Field(default_factory=OrchestratorSettings)
    sync: SyncSettings = Field(default_factory=SyncSettings)

    @model_validator(mode="after")
    def check_references(self) -> "ProvisioningConfig":
        """Cross-section references must point at declared objects."""
        stages = {s.name.upper() for s in self.stages}
        if self.notebook_stage.upper() not in stages:
            raise ValueError(f"notebook_stage '{self.notebook_stage}' is not one of the declared stages")

        rules = {r.name.upper() for r in self.network_rules}
        for integration in self.integrations:
            missing = [r for r in integration.network_rules if r.upper() not in rules]
            if missing:
                raise ValueError(f"Integration '{integration.name}' references undeclared network rules {missing}")

        integrations = {i.name.upper() for i in self.integrations}
        missing = [i for i in self.notebook_integrations if i.upper() not in integrations]
        if missing:
            raise ValueError(f"notebook_integrations references undeclared integrations {missing}")

        main_files = [n.main_file for n in self.notebooks]
        if len(main_files) != len(set(main_files)):
            raise ValueError("Each notebook needs its own main_file")

        unknown = set(self.artifact_hashes) - set(main_files)
        if unknown:
            raise ValueError(f"artifact_hashes has entries for unknown files {sorted(unknown)}")
        return self


def load_config(path: Optional[Union[str, Path]] = None) -> ProvisioningConfig:
    """
    Load the provisioning configuration.

    Args:
        path: YAML file; falls back to $SNOWKIT_CONFIG, then to the defaults

    Returns:
        Validated ProvisioningConfig

    Raises:
        ConfigurationError: If the file is missing, unparsable or invalid
    """
    path = path or os.environ.get(CONFIG_ENV_VAR)
    if not path:
        logger.debug("No configuration file given, using defaults")
        return ProvisioningConfig()

    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Cannot parse {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a mapping at the top level")

    try:
        config = ProvisioningConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {path}: {e}") from e

    logger.info(f"Loaded configuration from {path}")
    return config
