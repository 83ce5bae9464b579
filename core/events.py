"""
Domain events for service orders.

Immutable records of something that already happened to an order. The
service publishes them after the persistence API accepted the change;
handlers (notifications, dashboards) react without the service knowing
who listens.

Events carry the order as stored after the change, so handlers don't
need to re-fetch it.
"""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import uuid4

from core.models.service_order import FinancialStatus, ServiceOrder, ServiceOrderStatus
from utils.timezone import now_utc


@dataclass(frozen=True, kw_only=True)
class OrderEvent:
    """Base class for all service order events."""
    event_id: str = field(default_factory=lambda: str(uuid4()))
    occurred_at: datetime = field(default_factory=now_utc)
    order: ServiceOrder | None = None


@dataclass(frozen=True, kw_only=True)
class ServiceOrderCreated(OrderEvent):
    """A new order was created (also emitted for clones)."""
    cloned_from: str | None = None


@dataclass(frozen=True, kw_only=True)
class ServiceOrderUpdated(OrderEvent):
    """Equipment, items, notes or dates were edited."""
    changes: dict = field(default_factory=dict)


@dataclass(frozen=True, kw_only=True)
class StatusChanged(OrderEvent):
    """Technical status changed."""
    previous_status: ServiceOrderStatus | None = None
    new_status: ServiceOrderStatus | None = None


@dataclass(frozen=True, kw_only=True)
class FinancialStatusChanged(OrderEvent):
    """Financial status changed."""
    previous_financial: FinancialStatus | None = None
    new_financial: FinancialStatus | None = None


@dataclass(frozen=True, kw_only=True)
class ServiceOrderDeleted(OrderEvent):
    """Order was removed. Irreversible."""
