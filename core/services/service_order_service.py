"""
Service order service.

Computes changes with the lifecycle engine, submits them to the
persistence API as a single request, then audits and publishes the result.

Nothing is recorded or published until the API accepts a change. If the
request fails, PersistenceError propagates to the caller and the stored
order is as it was. There is no retry and no concurrent-edit detection:
two editors writing the same order overwrite each other silently.
"""

import logging
from datetime import datetime

from clients.service_order_client import PersistenceError, ServiceOrderClient
from core.audit import AuditAction, AuditLogger, compute_changes
from core.event_bus import EventBus
from core.events import (
    FinancialStatusChanged,
    ServiceOrderCreated,
    ServiceOrderDeleted,
    ServiceOrderUpdated,
    StatusChanged,
)
from core.lifecycle import apply_patch, clone_order, plan_financial_change, plan_status_change
from core.metrics import ServiceOrderMetrics, compute_metrics
from core.models import (
    FinancialStatus,
    FinancialStatusUpdate,
    OrderTotals,
    ServiceOrder,
    ServiceOrderCreate,
    ServiceOrderStatus,
    ServiceOrderUpdate,
    StatusUpdate,
)
from core.timeline import Timeline
from core.validation import validate_service_order

logger = logging.getLogger(__name__)

_ENTITY = "service_order"


class ServiceOrderService:
    """Service for service order operations."""

    def __init__(self, client: ServiceOrderClient, audit: AuditLogger, event_bus: EventBus):
        self.client = client
        self.audit = audit
        self.event_bus = event_bus

    def _require(self, order_id: str) -> ServiceOrder:
        order = self.get_by_id(order_id)
        if order is None:
            raise ValueError(f"Service order {order_id} not found")
        return order

    def _submit(self, order_id: str, patch: dict, what: str) -> dict:
        try:
            row = self.client.update(order_id, patch)
        except PersistenceError:
            logger.error(f"{what} for service order {order_id} was not persisted")
            raise
        if row is None:
            raise ValueError(f"Service order {order_id} not found")
        return row

    def create(self, data: ServiceOrderCreate, cloned_from: str | None = None) -> ServiceOrder:
        """
        Create a new order.

        Args:
            data: Order payload
            cloned_from: Id of the source order when this is a clone

        Returns:
            Order as stored, with its assigned order number

        Raises:
            ValueError: If the payload fails business validation
            PersistenceError: If the API rejects the request or returns no order
        """
        errors = validate_service_order(data)
        if not errors.is_valid:
            raise ValueError("; ".join(errors.messages()))

        payload = data.model_dump(mode="json", by_alias=True, exclude_none=True)
        row = self.client.create(payload)
        if not row:
            # order number is assigned by the API
            logger.error("Create returned no service order")
            raise PersistenceError("Persistence API returned no order for create")
        order = ServiceOrder.model_validate(row)

        self.audit.log_change(
            entity_type=_ENTITY,
            entity_id=order.id,
            action=AuditAction.CREATE,
            changes={"created": payload},
        )
        self.event_bus.publish(ServiceOrderCreated(order=order, cloned_from=cloned_from))

        logger.info(f"Service order {order.order_number} created")
        return order

    def get_by_id(self, order_id: str) -> ServiceOrder | None:
        """
        Get order by id.

        Returns:
            ServiceOrder if found, None otherwise.
        """
        row = self.client.get(order_id)
        if row is None:
            return None
        return ServiceOrder.model_validate(row)

    def list_all(self, filters: dict | None = None) -> list[ServiceOrder]:
        """List orders, passing filters through to the API as query params."""
        return [ServiceOrder.model_validate(row) for row in self.client.list_orders(filters)]

    def update(self, order_id: str, data: ServiceOrderUpdate) -> ServiceOrder:
        """
        Edit equipment, items, notes, customer link or dates.

        Raises:
            ValueError: If order not found or the edit fails validation
            PersistenceError: If the API rejects the request
        """
        current = self._require(order_id)

        errors = validate_service_order(data, partial=True, stored=current)
        if not errors.is_valid:
            raise ValueError("; ".join(errors.messages()))

        patch = data.model_dump(mode="json", by_alias=True, exclude_none=True)
        if not patch:
            return current

        row = self._submit(order_id, patch, "Update")
        if row:
            updated = ServiceOrder.model_validate(row)
        else:
            # 204 or empty body: the API merged the patch, apply it the same way
            updated = current.model_copy(update={
                name: getattr(data, name)
                for name in data.model_fields_set
                if getattr(data, name) is not None
            })

        changes = compute_changes(
            current.model_dump(mode="json", by_alias=True),
            updated.model_dump(mode="json", by_alias=True),
        )
        if changes:
            self.audit.log_change(
                entity_type=_ENTITY,
                entity_id=order_id,
                action=AuditAction.UPDATE,
                changes=changes,
            )
        self.event_bus.publish(ServiceOrderUpdated(order=updated, changes=changes))

        return updated

    def update_status(
        self,
        order_id: str,
        request: StatusUpdate | ServiceOrderStatus,
        now: datetime | None = None,
    ) -> ServiceOrder:
        """
        Change the technical status, with its timestamp side effects.

        The status and the derived timestamps go out as one PUT.

        Args:
            order_id: Order id
            request: Target status, or StatusUpdate with extra timestamp fields
            now: Clock override

        Raises:
            ValueError: If order not found
            PersistenceError: If the API rejects the request; nothing changed
        """
        current = self._require(order_id)
        patch = plan_status_change(current, request, now)

        row = self._submit(order_id, patch.to_patch(), "Status change")
        updated = ServiceOrder.model_validate(row) if row else apply_patch(current, patch)

        self.audit.log_change(
            entity_type=_ENTITY,
            entity_id=order_id,
            action=AuditAction.UPDATE,
            changes=compute_changes(
                current.model_dump(mode="json", by_alias=True),
                updated.model_dump(mode="json", by_alias=True),
            ),
        )
        self.event_bus.publish(StatusChanged(
            order=updated,
            previous_status=current.status,
            new_status=updated.status,
        ))

        logger.info(
            f"Service order {current.order_number} status {current.status.value} -> {updated.status.value}"
        )
        return updated

    def update_financial(
        self,
        order_id: str,
        financial: FinancialStatus | FinancialStatusUpdate,
    ) -> ServiceOrder:
        """
        Change the financial status. No side effects on dates or status.

        Raises:
            ValueError: If order not found
            PersistenceError: If the API rejects the request; nothing changed
        """
        current = self._require(order_id)
        patch = plan_financial_change(financial)

        row = self._submit(order_id, patch.to_patch(), "Financial status change")
        updated = ServiceOrder.model_validate(row) if row else apply_patch(current, patch)

        self.audit.log_change(
            entity_type=_ENTITY,
            entity_id=order_id,
            action=AuditAction.UPDATE,
            changes={"financial": {"old": current.financial.value, "new": updated.financial.value}},
        )
        self.event_bus.publish(FinancialStatusChanged(
            order=updated,
            previous_financial=current.financial,
            new_financial=updated.financial,
        ))

        return updated

    def clone(self, order_id: str, now: datetime | None = None) -> ServiceOrder:
        """
        Create a new order from an existing one.

        The copy starts over: CONFIRMAR, EM_ABERTO, entry date now, and no
        approval or delivery dates.

        Raises:
            ValueError: If source order not found
            PersistenceError: If the API rejects the request
        """
        source = self._require(order_id)
        return self.create(clone_order(source, now), cloned_from=order_id)

    def delete(self, order_id: str) -> bool:
        """
        Delete an order. Irreversible.

        Returns:
            True if deleted, False if not found
        """
        current = self.get_by_id(order_id)
        if current is None:
            return False

        if not self.client.delete(order_id):
            return False

        self.audit.log_change(
            entity_type=_ENTITY,
            entity_id=order_id,
            action=AuditAction.DELETE,
            changes={"deleted": current.model_dump(mode="json", by_alias=True)},
        )
        self.event_bus.publish(ServiceOrderDeleted(order=current))

        return True

    def get_totals(self, order_id: str) -> OrderTotals:
        """Financial breakdown, computed from the order's current items."""
        return self._require(order_id).totals

    def get_timeline(self, order_id: str) -> Timeline:
        """Lifecycle timeline of the order as currently stored."""
        return Timeline(self._require(order_id))

    def get_metrics(self, filters: dict | None = None) -> ServiceOrderMetrics:
        """Dashboard metrics over the listed orders."""
        return compute_metrics(self.list_all(filters))
