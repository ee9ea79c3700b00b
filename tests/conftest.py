"""
Shared pytest fixtures for snowkit tests.

Provides the in-memory platform, an orchestrator wired to it, and
environment isolation for configuration and connection settings.
"""

import os
from typing import Generator, List

import pytest

from snowkit.config import OrchestratorSettings, ProvisioningConfig
from snowkit.models import ResourceSpec
from snowkit.orchestrator import Orchestrator
from tests.fixtures import (
    FakeResourceClient,
    TEST_SCHEMA,
    make_database,
    make_schema,
    make_stage,
)

SNOWKIT_ENV_VARS = (
    "SNOWKIT_CONFIG",
    "SNOWFLAKE_CONNECTION_NAME",
    "SNOWFLAKE_ACCOUNT",
    "SNOWFLAKE_USER",
    "SNOWFLAKE_PASSWORD",
    "SNOWFLAKE_AUTHENTICATOR",
    "SNOWFLAKE_PRIVATE_KEY_FILE",
    "SNOWFLAKE_ROLE",
    "SNOWFLAKE_WAREHOUSE",
    "SNOWFLAKE_HOST",
)


@pytest.fixture
def fake_client() -> FakeResourceClient:
    """Empty in-memory account."""
    return FakeResourceClient()


@pytest.fixture
def scoped_client(fake_client: FakeResourceClient) -> FakeResourceClient:
    """In-memory account that already holds TEST_DB and TEST_DB.UTILS."""
    fake_client.add_scope(TEST_SCHEMA)
    return fake_client


@pytest.fixture
def orchestrator(fake_client: FakeResourceClient) -> Orchestrator:
    """Orchestrator over the fake account, with a single attempt per call."""
    return Orchestrator(fake_client, OrchestratorSettings(max_retries=1))


@pytest.fixture
def default_config() -> ProvisioningConfig:
    """The built-in MONAI configuration."""
    return ProvisioningConfig()


@pytest.fixture
def hierarchy_specs() -> List[ResourceSpec]:
    """Database -> schema -> stage."""
    return [make_database(), make_schema(), make_stage()]


@pytest.fixture(autouse=True)
def no_backoff(monkeypatch: pytest.MonkeyPatch) -> None:
    """Retries never sleep in tests."""
    monkeypatch.setattr("snowkit.executors.base.time.sleep", lambda seconds: None)


@pytest.fixture(autouse=True)
def isolated_environment() -> Generator[None, None, None]:
    """
    Autouse fixture that hides snowkit and Snowflake settings from tests.

    This prevents a developer's environment from leaking into config
    loading and session creation.
    """
    original = {name: os.environ.pop(name) for name in SNOWKIT_ENV_VARS if name in os.environ}
    yield
    for name in SNOWKIT_ENV_VARS:
        os.environ.pop(name, None)
    os.environ.update(original)
