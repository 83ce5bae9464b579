"""Core domain models."""

from core.models.service_order import (
    FINANCIAL_LABELS,
    STATUS_LABELS,
    FinancialStatus,
    FinancialStatusUpdate,
    OrderTotals,
    PaymentType,
    ServiceItem,
    ServiceOrder,
    ServiceOrderCreate,
    ServiceOrderStatus,
    ServiceOrderUpdate,
    StatusUpdate,
)

__all__ = [
    # Enums
    "ServiceOrderStatus", "FinancialStatus", "PaymentType",
    "STATUS_LABELS", "FINANCIAL_LABELS",
    # Records
    "ServiceItem", "ServiceOrder", "OrderTotals",
    # Requests
    "ServiceOrderCreate", "ServiceOrderUpdate", "StatusUpdate", "FinancialStatusUpdate",
]
