"""
Unit tests for Orchestrator.attach_artifacts and the notebook executor.
"""

import pytest

from snowkit.errors import ConfigurationError, PermissionDeniedError
from snowkit.models import CreateMode, ErrorKind, OperationType, OutcomeStatus, ResourceKind
from snowkit.orchestrator import Orchestrator
from tests.fixtures import (
    TEST_SCHEMA,
    TEST_STAGE,
    FakeResourceClient,
    make_artifact_ref,
    make_notebook,
    make_stage,
)

TRAINING = f"{TEST_SCHEMA}.MODEL_TRAINING"
INFERENCE = f"{TEST_SCHEMA}.MODEL_INFERENCE"


class TestAttachArtifacts:
    """Tests for wiring published files into notebooks."""

    def test_notebook_created_from_artifact_location(
        self, orchestrator: Orchestrator, scoped_client: FakeResourceClient
    ) -> None:
        """The notebook is created from the artifact's stage and then given its integrations."""
        notebook = make_notebook(TRAINING, main_file="02_model_training.ipynb", integrations=["ALLOW_ALL_EAI"])
        artifact = make_artifact_ref("02_model_training.ipynb")

        outcomes = orchestrator.attach_artifacts([notebook], [artifact])

        assert len(outcomes) == 1
        assert outcomes[0].operation == OperationType.ATTACH
        assert outcomes[0].success
        assert scoped_client.has(ResourceKind.NOTEBOOK, TRAINING)

        name, mode, options = scoped_client.created[0]
        assert name == TRAINING
        assert mode == CreateMode.OR_REPLACE
        assert options["FROM"] == f"@{TEST_STAGE}"
        assert options["MAIN_FILE"] == "02_model_training.ipynb"
        assert "EXTERNAL_ACCESS_INTEGRATIONS" not in options
        assert scoped_client.properties[TRAINING] == {"EXTERNAL_ACCESS_INTEGRATIONS": ["ALLOW_ALL_EAI"]}

    def test_unpublished_file_is_skipped(
        self, orchestrator: Orchestrator, scoped_client: FakeResourceClient
    ) -> None:
        """A notebook whose file was not published is skipped, not failed."""
        notebooks = [
            make_notebook(TRAINING, main_file="02_model_training.ipynb"),
            make_notebook(INFERENCE, main_file="03_model_inference.ipynb"),
        ]
        published = [make_artifact_ref("03_model_inference.ipynb")]

        outcomes = orchestrator.attach_artifacts(notebooks, published)

        assert outcomes[0].status == OutcomeStatus.SKIPPED
        assert outcomes[0].message == "Skipped: 02_model_training.ipynb was not published"
        assert outcomes[1].success
        assert scoped_client.call_targets("create") == [INFERENCE]

    def test_failure_is_isolated_per_notebook(
        self, orchestrator: Orchestrator, scoped_client: FakeResourceClient
    ) -> None:
        scoped_client.fail("create", TRAINING, PermissionDeniedError("CREATE NOTEBOOK not granted"))
        notebooks = [
            make_notebook(TRAINING, main_file="a.ipynb"),
            make_notebook(INFERENCE, main_file="b.ipynb"),
        ]

        outcomes = orchestrator.attach_artifacts(notebooks, [make_artifact_ref("a.ipynb"), make_artifact_ref("b.ipynb")])

        assert outcomes[0].failed
        assert outcomes[0].error_kind == ErrorKind.PERMISSION_DENIED
        assert outcomes[1].success

    def test_missing_schema_is_a_no_op(self, orchestrator: Orchestrator, fake_client: FakeResourceClient) -> None:
        outcomes = orchestrator.attach_artifacts([make_notebook(TRAINING)], [make_artifact_ref()])

        assert outcomes[0].operation == OperationType.NO_OP
        assert outcomes[0].success

    def test_first_published_artifact_wins(
        self, orchestrator: Orchestrator, scoped_client: FakeResourceClient
    ) -> None:
        first = make_artifact_ref(stage=TEST_STAGE)
        second = make_artifact_ref(stage=f"{TEST_SCHEMA}.OTHER_STG")

        orchestrator.attach_artifacts([make_notebook(TRAINING)], [first, second])

        assert scoped_client.created[0][2]["FROM"] == f"@{TEST_STAGE}"

    def test_only_notebooks_can_be_attached(self, orchestrator: Orchestrator) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            orchestrator.attach_artifacts([make_stage()], [make_artifact_ref()])
        assert TEST_STAGE in str(exc_info.value)

    @pytest.mark.parametrize("configuration,fragment", [
        ({}, "needs a MAIN_FILE"),
        ({"MAIN_FILE": "dir/nb.ipynb"}, "must be a file name"),
        ({"MAIN_FILE": "nb.ipynb", "FROM": "@STG"}, "FROM location"),
        ({"MAIN_FILE": "nb.ipynb", "EXTERNAL_ACCESS_INTEGRATIONS": "EAI"}, "must be a list"),
    ])
    def test_invalid_notebook_options(self, orchestrator: Orchestrator, configuration: dict, fragment: str) -> None:
        notebook = make_notebook(TRAINING)
        notebook = notebook.model_copy(update={"configuration": configuration})

        with pytest.raises(ConfigurationError) as exc_info:
            orchestrator.attach_artifacts([notebook], [])
        assert fragment in str(exc_info.value)

    def test_plan_attach(self) -> None:
        plan = Orchestrator(None).plan_attach([make_notebook(TRAINING, main_file="02_model_training.ipynb")])

        assert len(plan) == 1
        assert plan.operations[0].changes == {"main_file": "02_model_training.ipynb"}
