"""
Service order lifecycle: technical status, financial status and cloning.

Status changes are not guarded. Any status may be assigned from any other;
what this module defines is the timestamp side effects each change carries:

- into APROVADO from another status: approval_date = now
- into ENTREGUE from another status: delivery_date = now
- into CONFIRMAR (from anything): approval_date, delivery_date and
  expected_delivery_date cleared
- anything else: status only

The persistence API is a plain field-merge PUT, so the complete patch
(status plus timestamps) is computed here, before submission, and sent as a
single request.
"""

from datetime import datetime

from core.models.service_order import (
    FinancialStatus,
    FinancialStatusUpdate,
    ServiceOrder,
    ServiceOrderCreate,
    ServiceOrderStatus,
    StatusUpdate,
)
from utils.timezone import now_utc

# Usual repair workflow. Shown as hints in the UI; not enforced.
WORKFLOW_TRANSITIONS: dict[ServiceOrderStatus, frozenset[ServiceOrderStatus]] = {
    ServiceOrderStatus.CONFIRMAR: frozenset({ServiceOrderStatus.APROVADO, ServiceOrderStatus.REPROVADO}),
    ServiceOrderStatus.APROVADO: frozenset({
        ServiceOrderStatus.PRONTO, ServiceOrderStatus.CONFIRMAR, ServiceOrderStatus.REPROVADO
    }),
    ServiceOrderStatus.PRONTO: frozenset({ServiceOrderStatus.ENTREGUE, ServiceOrderStatus.CONFIRMAR}),
    ServiceOrderStatus.ENTREGUE: frozenset({ServiceOrderStatus.CONFIRMAR}),
    ServiceOrderStatus.REPROVADO: frozenset({ServiceOrderStatus.CONFIRMAR}),
}

_DATE_FIELDS = ("approval_date", "delivery_date", "expected_delivery_date")


def is_workflow_transition(current: ServiceOrderStatus, target: ServiceOrderStatus) -> bool:
    """Whether current -> target follows the usual workflow."""
    return target in WORKFLOW_TRANSITIONS[current]


def plan_status_change(
    order: ServiceOrder,
    request: StatusUpdate | ServiceOrderStatus,
    now: datetime | None = None,
) -> StatusUpdate:
    """
    Build the patch for a technical status change.

    Args:
        order: Order as currently stored
        request: Target status, or a StatusUpdate carrying extra timestamp
            fields supplied by the caller (e.g. expected_delivery_date)
        now: Clock override, defaults to now_utc()

    Returns:
        StatusUpdate whose to_patch() holds exactly the fields to submit.
        Cleared timestamps are present as None.
    """
    if isinstance(request, ServiceOrderStatus):
        request = StatusUpdate(status=request)

    now = now or now_utc()
    target = request.status
    previous = order.status

    fields = {"status": target}
    for name in _DATE_FIELDS:
        if name in request.model_fields_set:
            fields[name] = getattr(request, name)

    if target == ServiceOrderStatus.CONFIRMAR:
        for name in _DATE_FIELDS:
            fields[name] = None
    elif target == ServiceOrderStatus.APROVADO and previous != ServiceOrderStatus.APROVADO:
        if fields.get("approval_date") is None:
            fields["approval_date"] = now
    elif target == ServiceOrderStatus.ENTREGUE and previous != ServiceOrderStatus.ENTREGUE:
        if fields.get("delivery_date") is None:
            fields["delivery_date"] = now

    return StatusUpdate(**fields)


def plan_financial_change(financial: FinancialStatus | FinancialStatusUpdate) -> FinancialStatusUpdate:
    """Build the patch for a financial status change. Any value to any value."""
    if isinstance(financial, FinancialStatusUpdate):
        return financial
    return FinancialStatusUpdate(financial=financial)


def apply_patch(order: ServiceOrder, patch: StatusUpdate | FinancialStatusUpdate) -> ServiceOrder:
    """
    Merge a patch into a copy of the order, the way the API merges a PUT.

    The input order is not modified.
    """
    updates = {name: getattr(patch, name) for name in patch.model_fields_set}
    return order.model_copy(update=updates)


def clone_order(order: ServiceOrder, now: datetime | None = None) -> ServiceOrderCreate:
    """
    New-order payload copied from an existing order.

    Equipment, customer, items, percentages and payment fields are carried
    over. Status resets to CONFIRMAR, financial to EM_ABERTO and entry_date to
    now; approval, expected delivery and delivery dates are dropped.
    """
    return ServiceOrderCreate(
        customer_id=order.customer_id or "",
        equipment=order.equipment or "",
        model=order.model,
        brand=order.brand,
        serial_number=order.serial_number,
        voltage=order.voltage,
        accessories=order.accessories,
        customer_observations=order.customer_observations,
        reported_defect=order.reported_defect,
        warranty=order.warranty,
        is_return=order.is_return,
        notes=order.notes,
        status=ServiceOrderStatus.CONFIRMAR,
        financial=FinancialStatus.EM_ABERTO,
        payment_type=order.payment_type,
        installment_count=max(order.installment_count, 1),
        services=[item.model_copy() for item in order.services],
        discount_percentage=order.discount_percentage,
        addition_percentage=order.addition_percentage,
        entry_date=now or now_utc(),
    )
