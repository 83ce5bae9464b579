"""
Lifecycle timeline reconstructed from an order's stored timestamps.

The timeline is derived for display only. It reads the order, never
modifies it, and is recomputed on every iteration: the "ready" marker and
the financial snapshot reflect the order's items at reconstruction time,
not at the moment the status changed.
"""

import math
from collections.abc import Iterator
from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from core.models.service_order import ServiceOrder, ServiceOrderStatus

_ONE_DAY = timedelta(days=1)


class TimelineEventKind(str, Enum):
    CREATED = "created"
    APPROVED = "approved"
    READY = "ready"
    DELIVERED = "delivered"
    FINANCIAL = "financial"


class TimelineEvent(BaseModel):
    """One point on the timeline. timestamp is None while pending."""

    kind: TimelineEventKind
    label: str
    timestamp: datetime | None
    description: str
    elapsed_days: int | None = None
    details: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_pending(self) -> bool:
        return self.timestamp is None


def elapsed_days(start: datetime, end: datetime) -> int:
    """Whole days between two dates, rounded up: ceil(|end - start| / 1 day)."""
    return math.ceil(abs(end - start) / _ONE_DAY)


class Timeline:
    """
    Restartable, lazy sequence of lifecycle events for one order.

    Usage:
        for event in Timeline(order):
            ...

    Each iteration rebuilds the events from the order, so iterating twice
    over an unchanged order yields equal sequences.
    """

    def __init__(self, order: ServiceOrder):
        self._order = order

    def __iter__(self) -> Iterator[TimelineEvent]:
        return _events(self._order)

    def to_list(self) -> list[TimelineEvent]:
        return list(self)


def _events(order: ServiceOrder) -> Iterator[TimelineEvent]:
    yield TimelineEvent(
        kind=TimelineEventKind.CREATED,
        label="Ordem Criada",
        timestamp=order.entry_date,
        description="Ordem de serviço criada e aguardando confirmação do cliente.",
        details={"status": order.status.value, "financial": order.financial.value},
    )

    if order.approval_date is not None:
        yield TimelineEvent(
            kind=TimelineEventKind.APPROVED,
            label="Ordem Aprovada",
            timestamp=order.approval_date,
            description="Cliente aprovou o orçamento e os serviços podem ser iniciados.",
            elapsed_days=elapsed_days(order.entry_date, order.approval_date),
        )

    if order.status == ServiceOrderStatus.PRONTO:
        yield TimelineEvent(
            kind=TimelineEventKind.READY,
            label="Serviços Concluídos",
            timestamp=None,
            description="Todos os serviços foram executados e estão prontos para entrega.",
            details={
                "item_count": len(order.services),
                "final_total": order.totals.final_total,
            },
        )

    if order.delivery_date is not None:
        yield TimelineEvent(
            kind=TimelineEventKind.DELIVERED,
            label="Ordem Entregue",
            timestamp=order.delivery_date,
            description="Equipamento entregue ao cliente e ordem finalizada.",
            elapsed_days=elapsed_days(order.entry_date, order.delivery_date),
            details={"warranty": order.warranty},
        )

    yield TimelineEvent(
        kind=TimelineEventKind.FINANCIAL,
        label="Status Financeiro",
        timestamp=None,
        description="Situação financeira atual da ordem de serviço.",
        details={
            "financial": order.financial.value,
            "totals": order.totals.model_dump(by_alias=True),
        },
    )
