"""API test fixtures - TestClient over real services with a mocked persistence client."""

import pytest
from starlette.testclient import TestClient

from api.app import create_app
from utils.config import EngineConfig


# =============================================================================
# SERVICES DICT
# =============================================================================


@pytest.fixture
def services(service):
    return {"service_order": service}


# =============================================================================
# APP & CLIENT FIXTURES
# =============================================================================


@pytest.fixture
def app(services):
    """FastAPI app with error handlers and data/actions routes."""
    return create_app(EngineConfig(), services=services)


@pytest.fixture
def test_client(app):
    return TestClient(app, raise_server_exceptions=False)
