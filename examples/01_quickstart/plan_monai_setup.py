"""
MONAI Setup Plan Example

Builds the resource declaration for the default MONAI configuration and
prints what each phase would do. Nothing is sent to Snowflake.
"""

from snowkit.blueprint import (
    build_artifact_refs,
    build_resource_specs,
    notebook_specs,
    rerun_cleanup_specs,
    structural_specs,
)
from snowkit.config import ProvisioningConfig
from snowkit.orchestrator import Orchestrator

config = ProvisioningConfig()
orchestrator = Orchestrator(None, config.orchestrator)

# Fails fast on cycles, dangling dependencies and invalid options
graph = orchestrator.validate(build_resource_specs(config))
print(f"Declared resources: {len(graph)}")
for spec in graph.order():
    print(f"  {spec.kind.value:<28} {spec.name}")

print()
print(orchestrator.plan_teardown(rerun_cleanup_specs(config)))
print()
print(orchestrator.plan_provision(structural_specs(config)))
print()
for ref in build_artifact_refs(config):
    print(f"{ref.source_url}\n  -> {ref.destination_path}")
print()
print(orchestrator.plan_attach(notebook_specs(config)))

# Output example (truncated):
# Declared resources: 17
#   ROLE                         MONAI_DATA_SCIENTIST
#   DATABASE                     MONAI_DB
#   SCHEMA                       MONAI_DB.UTILS
#   ...
# Teardown Plan:
#   1. DELETE NOTEBOOK MONAI_DB.UTILS.MONAI_03_MODEL_INFERENCE
#   ...
#   4. DISCOVER SERVICE MONAI_DB.UTILS.LUNG_CT_REGISTRATION
#       scope: MONAI_DB.UTILS
#       match: managing_object_name = MONAI_DB.UTILS.LUNG_CT_REGISTRATION
#   5. DELETE MODEL MONAI_DB.UTILS.LUNG_CT_REGISTRATION
#   6. DELETE ROLE MONAI_DATA_SCIENTIST
