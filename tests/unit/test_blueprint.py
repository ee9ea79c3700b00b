"""
Unit tests for the resource blueprint built from ProvisioningConfig.
"""

from snowkit.blueprint import (
    build_artifact_refs,
    build_resource_specs,
    notebook_specs,
    rerun_cleanup_specs,
    structural_specs,
)
from snowkit.config import ProvisioningConfig
from snowkit.graph import DependencyGraph
from snowkit.models import ResourceKind
from snowkit.orchestrator import Orchestrator


class TestResourceSpecs:
    """Tests for build_resource_specs."""

    def test_full_declaration_is_valid(self, default_config: ProvisioningConfig) -> None:
        graph = Orchestrator(None).validate(build_resource_specs(default_config))

        assert len(graph) == 17

    def test_role_created_before_what_it_is_granted_on(self, default_config: ProvisioningConfig) -> None:
        order = [s.name for s in DependencyGraph(build_resource_specs(default_config)).order()]

        assert order[0] == "MONAI_DATA_SCIENTIST"
        assert order.index("MONAI_DB") < order.index("MONAI_DB.UTILS") < order.index("MONAI_DB.UTILS.NOTEBOOK_STG")

    def test_data_holding_resources(self, default_config: ProvisioningConfig) -> None:
        specs = {s.name: s for s in build_resource_specs(default_config)}

        assert specs["MONAI_DB.UTILS.MONAI_MEDICAL_IMAGES_STG"].configuration == {
            "ENCRYPTION": {"TYPE": "SNOWFLAKE_SSE"},
            "DIRECTORY": {"ENABLE": True},
        }
        assert specs["MONAI_DB.UTILS.NOTEBOOK_STG"].configuration == {"DIRECTORY": {"ENABLE": True}}
        assert specs["MONAI_GPU_ML_M_POOL"].configuration["INSTANCE_FAMILY"] == "GPU_NV_M"

    def test_integrations_reference_qualified_rules(self, default_config: ProvisioningConfig) -> None:
        specs = {s.name: s for s in build_resource_specs(default_config)}

        eai = specs["MONAI_ALLOW_ALL_EAI"]
        assert eai.option("ALLOWED_NETWORK_RULES") == ["MONAI_DB.UTILS.ALLOW_ALL_NETWORK_RULES"]
        assert [g.privileges for g in eai.grants] == [["USAGE"]]
        assert specs["GITHUB_ACCESS_INTEGRATION"].grants == []

    def test_model_is_teardown_only(self, default_config: ProvisioningConfig) -> None:
        model = next(s for s in build_resource_specs(default_config) if s.kind == ResourceKind.MODEL)

        assert model.name == "MONAI_DB.UTILS.LUNG_CT_REGISTRATION"
        assert not model.provisioned
        assert model.cleanup_on_rerun

    def test_no_model_configured(self) -> None:
        config = ProvisioningConfig(model_name=None)

        assert all(s.kind != ResourceKind.MODEL for s in build_resource_specs(config))


class TestPhaseSubsets:
    """Tests for the per-phase spec subsets."""

    def test_rerun_cleanup_set(self, default_config: ProvisioningConfig) -> None:
        specs = rerun_cleanup_specs(default_config)
        order = [s.name for s in DependencyGraph(specs, strict=False).reverse_order()]

        assert {s.kind for s in specs} == {ResourceKind.ROLE, ResourceKind.MODEL, ResourceKind.NOTEBOOK}
        # Role goes last: the model and notebooks it owns must be gone first
        assert order[-1] == "MONAI_DATA_SCIENTIST"

    def test_structural_specs_exclude_notebooks(self, default_config: ProvisioningConfig) -> None:
        specs = structural_specs(default_config)

        assert all(s.kind != ResourceKind.NOTEBOOK for s in specs)
        assert len(specs) == len(build_resource_specs(default_config)) - len(default_config.notebooks)

    def test_notebook_specs(self, default_config: ProvisioningConfig) -> None:
        training = notebook_specs(default_config)[1]

        assert training.name == "MONAI_DB.UTILS.MONAI_02_MODEL_TRAINING"
        assert training.option("MAIN_FILE") == "02_model_training.ipynb"
        assert training.option("QUERY_WAREHOUSE") == "MONAI_WH"
        assert training.option("COMPUTE_POOL") == "MONAI_GPU_ML_M_POOL"
        assert training.option("EXTERNAL_ACCESS_INTEGRATIONS") == ["MONAI_ALLOW_ALL_EAI"]


class TestArtifactRefs:
    """Tests for build_artifact_refs."""

    def test_one_ref_per_notebook(self, default_config: ProvisioningConfig) -> None:
        refs = build_artifact_refs(default_config)

        assert [r.file_name for r in refs] == [n.main_file for n in default_config.notebooks]
        assert refs[0].destination_path == "@MONAI_DB.UTILS.NOTEBOOK_STG/01_ingest_data.ipynb"
        assert refs[0].source_url.endswith("/notebooks/01_ingest_data.ipynb")

    def test_pinned_hashes(self) -> None:
        digest = "a" * 64
        config = ProvisioningConfig(
            artifact_base_url="https://example.com/nb/",
            artifact_hashes={"02_model_training.ipynb": digest},
        )

        refs = build_artifact_refs(config)

        assert refs[0].source_url == "https://example.com/nb/01_ingest_data.ipynb"
        assert refs[0].content_hash is None
        assert refs[1].content_hash == digest
