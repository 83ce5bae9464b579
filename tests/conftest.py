"""Shared test fixtures for the service order test suite."""

from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from clients.service_order_client import ServiceOrderClient
from core.audit import AuditLogger
from core.event_bus import EventBus
from core.models import ServiceOrder
from core.services.service_order_service import ServiceOrderService


# =============================================================================
# CLOCK
# =============================================================================

FIXED_NOW = datetime(2024, 3, 10, 14, 30, tzinfo=timezone.utc)


@pytest.fixture
def fixed_now() -> datetime:
    """A fixed 'now' for status changes and clones."""
    return FIXED_NOW


# =============================================================================
# ORDER FIXTURES
# =============================================================================


def order_row(**overrides) -> dict:
    """A service order as the persistence API returns it (camelCase)."""
    row = {
        "_id": "65f0c0ffee0000000000abcd",
        "orderNumber": 1042,
        "customerId": "cust-1",
        "equipment": "Furadeira",
        "brand": "Bosch",
        "model": "GSB 550",
        "reportedDefect": "Não liga",
        "warranty": False,
        "status": "confirmar",
        "financial": "em_aberto",
        "paymentType": "cash",
        "installmentCount": 1,
        "services": [
            {"description": "Troca de escovas", "quantity": 1, "unitValue": 80, "discount": 0, "addition": 0},
        ],
        "discountPercentage": 0,
        "additionPercentage": 0,
        "entryDate": "2024-01-01T00:00:00.000Z",
    }
    row.update(overrides)
    return row


@pytest.fixture
def make_row():
    """Factory for raw API rows."""
    return order_row


@pytest.fixture
def make_order():
    """Factory for ServiceOrder models built from API rows."""
    def _make(**overrides) -> ServiceOrder:
        return ServiceOrder.model_validate(order_row(**overrides))
    return _make


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def client():
    """Persistence client double."""
    return Mock(spec=ServiceOrderClient)


@pytest.fixture
def audit():
    return Mock(spec=AuditLogger)


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def service(client, audit, event_bus):
    return ServiceOrderService(client, audit, event_bus)
