"""
Integration test fixtures for snowkit.

Provides a Snowpark session, an orchestrator over the live account, and
teardown of every resource a test declares.
"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Generator, List

import pytest
from snowflake.snowpark import Session

from snowkit.client import SnowparkResourceClient
from snowkit.config import OrchestratorSettings
from snowkit.connection import get_session
from snowkit.errors import ConfigurationError
from snowkit.models import ResourceSpec
from snowkit.orchestrator import Orchestrator

logger = logging.getLogger(__name__)


@dataclass
class ResourceTracker:
    """
    Tracks declared resources for cleanup after tests.

    Everything tracked is torn down together by the orchestrator, so the
    reverse dependency order of the declaration is respected.
    """

    specs: List[ResourceSpec] = field(default_factory=list)

    def add(self, *specs: ResourceSpec) -> None:
        """Track specs for cleanup."""
        known = {s.key for s in self.specs}
        self.specs.extend(s for s in specs if s.key not in known)


@pytest.fixture(autouse=True)
def isolated_environment() -> None:
    """Integration tests need the real SNOWFLAKE_* settings."""


@pytest.fixture(scope="session")
def snowpark_session() -> Generator[Session, None, None]:
    """
    Session-scoped Snowpark session.

    Respects SNOWFLAKE_CONNECTION_NAME or SNOWFLAKE_ACCOUNT/SNOWFLAKE_USER.
    """
    try:
        session = get_session()
        user = session.sql("SELECT CURRENT_USER() AS U").collect()[0]["U"]
        logger.info(f"Connected to Snowflake as {user}")
    except ConfigurationError as e:
        pytest.skip(f"No Snowflake connection configured: {e}")
    except Exception as e:
        pytest.skip(f"Could not connect to Snowflake: {e}")
    yield session
    session.close()


@pytest.fixture
def client(snowpark_session: Session) -> SnowparkResourceClient:
    return SnowparkResourceClient(snowpark_session)


@pytest.fixture
def orchestrator(client: SnowparkResourceClient) -> Orchestrator:
    return Orchestrator(client, OrchestratorSettings(max_retries=3))


@pytest.fixture
def test_prefix() -> str:
    """Unique upper-case prefix so concurrent runs never collide."""
    return f"SNOWKIT_IT_{uuid.uuid4().hex[:8].upper()}"


@pytest.fixture
def resource_tracker() -> ResourceTracker:
    """Fixture that provides a resource tracker for the test."""
    return ResourceTracker()


@pytest.fixture(autouse=True)
def cleanup_resources(
    orchestrator: Orchestrator,
    resource_tracker: ResourceTracker,
) -> Generator[None, None, None]:
    """
    Autouse fixture that tears down tracked resources after each test.

    Failed cleanups are logged but don't fail the test.
    """
    yield

    if not resource_tracker.specs:
        return
    for outcome in orchestrator.teardown(resource_tracker.specs):
        if outcome.failed:
            logger.warning(f"Cleanup failed: {outcome}")
