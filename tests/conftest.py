"""Shared test fixtures for the session client test suite."""

from unittest.mock import Mock

import pytest

from auth.config import AuthConfig
from auth.security_logger import SecurityLogger
from auth.service import SessionService
from auth.state import SessionState
from auth.token_store import MemoryTokenStore
from clients.api_client import AuthApiClient
from tests.factories import TEST_API_URL
from utils.scheduler import ManualClock, Scheduler


# =============================================================================
# CORE FIXTURES
# =============================================================================


@pytest.fixture
def config() -> AuthConfig:
    return AuthConfig(api_base_url=TEST_API_URL)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def scheduler(clock) -> Scheduler:
    return Scheduler(clock=clock)


@pytest.fixture
def state() -> SessionState:
    return SessionState()


@pytest.fixture
def token_store() -> MemoryTokenStore:
    return MemoryTokenStore()


@pytest.fixture
def security_logger() -> SecurityLogger:
    return SecurityLogger()


@pytest.fixture
def mock_api():
    """Mock API client - no HTTP in unit tests."""
    return Mock(spec=AuthApiClient)


@pytest.fixture
def service(config, mock_api, token_store, state, security_logger) -> SessionService:
    """SessionService with mocked API and in-memory token store."""
    return SessionService(
        config=config,
        api=mock_api,
        token_store=token_store,
        state=state,
        security_logger=security_logger,
    )
