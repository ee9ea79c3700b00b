"""
Notebook executor for Snowflake operations.

A notebook is created from a file already published to a stage, so it is
not part of structural provisioning: the orchestrator attaches each notebook
to its artifact once the sync pipeline has published it. Attaching is
create-or-replace from the artifact's stage location, followed by an ALTER
that wires in the external access integrations (CREATE NOTEBOOK does not
accept them).
"""

import logging
import time
from typing import List

from snowkit.errors import ResourceNotFoundError
from snowkit.models import (
    ArtifactRef,
    CreateMode,
    OperationOutcome,
    OperationType,
    ResourceKind,
    ResourceSpec,
)

from .base import BaseExecutor

logger = logging.getLogger(__name__)

# Set with ALTER NOTEBOOK after creation
POST_CREATE_OPTIONS = ("EXTERNAL_ACCESS_INTEGRATIONS",)


class NotebookExecutor(BaseExecutor):
    """Executor for notebooks backed by a staged .ipynb file."""

    kind = ResourceKind.NOTEBOOK

    def _validate_options(self, resource: ResourceSpec) -> List[str]:
        errors = []
        main_file = resource.option("MAIN_FILE")
        if not main_file:
            errors.append(f"Notebook {resource.name} needs a MAIN_FILE")
        elif "/" in str(main_file):
            errors.append(f"MAIN_FILE of {resource.name} must be a file name, got '{main_file}'")
        if resource.option("FROM"):
            errors.append(f"Notebook {resource.name} takes its FROM location from the published artifact")
        integrations = resource.option("EXTERNAL_ACCESS_INTEGRATIONS")
        if integrations is not None and not isinstance(integrations, list):
            errors.append(f"EXTERNAL_ACCESS_INTEGRATIONS of {resource.name} must be a list")
        return errors

    def _create_spec(self, resource: ResourceSpec) -> ResourceSpec:
        options = {k: v for k, v in resource.configuration.items() if k not in POST_CREATE_OPTIONS}
        return resource.model_copy(update={"configuration": options})

    def attach(self, resource: ResourceSpec, artifact: ArtifactRef) -> OperationOutcome:
        """
        Create or replace the notebook from a published artifact.

        Args:
            resource: Notebook spec; MAIN_FILE names the artifact's file
            artifact: Published artifact whose stage location backs the notebook

        Returns:
            ATTACH outcome; NotFound while attaching is a successful no-op
        """
        start_time = time.time()

        try:
            options = {"FROM": artifact.stage_location}
            options.update(self._create_spec(resource).configuration)
            source = resource.model_copy(update={"configuration": options})

            logger.info(f"Attaching notebook {resource.name} to {artifact.destination_path}")
            self.execute_with_retry(self.client.create, source, CreateMode.OR_REPLACE)

            integrations = resource.option("EXTERNAL_ACCESS_INTEGRATIONS")
            if integrations:
                self.execute_with_retry(
                    self.client.set_properties,
                    self.kind,
                    resource.name,
                    {"EXTERNAL_ACCESS_INTEGRATIONS": integrations},
                )

            return self._outcome(
                resource,
                OperationType.ATTACH,
                f"Attached {artifact.file_name}",
                duration=time.time() - start_time,
            )

        except ResourceNotFoundError as e:
            logger.info(f"Nothing to attach for {resource.name}: {e}")
            return self._outcome(resource, OperationType.NO_OP, f"Not found: {e}")
        except Exception as e:
            return self._handle_error(OperationType.ATTACH, resource.name, e)
