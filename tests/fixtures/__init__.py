"""Test fixtures for snowkit."""

from .fake_client import FakeResourceClient
from .model_factories import (
    TEST_DATABASE,
    TEST_SCHEMA,
    TEST_STAGE,
    make_artifact_ref,
    make_database,
    make_grant,
    make_model,
    make_notebook,
    make_role,
    make_schema,
    make_spec,
    make_stage,
)

__all__ = [
    "FakeResourceClient",
    "TEST_DATABASE",
    "TEST_SCHEMA",
    "TEST_STAGE",
    "make_artifact_ref",
    "make_database",
    "make_grant",
    "make_model",
    "make_notebook",
    "make_role",
    "make_schema",
    "make_spec",
    "make_stage",
]
