"""
Dependent Discovery Example

A registry model that has been deployed for inference owns services whose
names the platform picks. Tearing the model down discovers those services
through their managing_object_name column and drops them first.

    SNOWFLAKE_CONNECTION_NAME=dev python drop_model_with_services.py MONAI_DB.UTILS.LUNG_CT_REGISTRATION
"""

import sys

from snowkit.client import SnowparkResourceClient
from snowkit.connection import get_session
from snowkit.models import ResourceKind, ResourceSpec
from snowkit.orchestrator import Orchestrator

model_name = sys.argv[1] if len(sys.argv) > 1 else "MONAI_DB.UTILS.LUNG_CT_REGISTRATION"

# Models are created by notebooks at run time, never provisioned
model = ResourceSpec(kind=ResourceKind.MODEL, name=model_name, provisioned=False)

session = get_session()
try:
    orchestrator = Orchestrator(SnowparkResourceClient(session))
    print(orchestrator.plan_teardown([model]))
    print()
    for outcome in orchestrator.teardown([model]):
        print(outcome)
finally:
    session.close()

# Output example:
# ✅ DISCOVER SERVICE MONAI_DB.UTILS.LUNG_CT_REGISTRATION: Found 1 dependent service(s)
# ✅ DELETE SERVICE MONAI_DB.UTILS.LUNG_CT_REGISTRATION_SVC: Deleted successfully
# ✅ DELETE MODEL MONAI_DB.UTILS.LUNG_CT_REGISTRATION: Deleted successfully
