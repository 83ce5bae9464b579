"""Dashboard metrics over a set of service orders."""

import math
from collections.abc import Iterable

from pydantic import BaseModel

from core.models.service_order import FinancialStatus, ServiceOrder, ServiceOrderStatus

_ONE_DAY_SECONDS = 24 * 60 * 60


class ServiceOrderMetrics(BaseModel):
    total_orders: int
    pending_orders: int
    completed_orders: int
    total_revenue: float
    average_completion_time: int
    orders_by_status: dict[ServiceOrderStatus, int]
    orders_by_financial: dict[FinancialStatus, int]


def compute_metrics(orders: Iterable[ServiceOrder]) -> ServiceOrderMetrics:
    """
    Summarize orders for the dashboard.

    total_revenue sums the amount actually paid on every order, whatever
    its financial status.
    average_completion_time is the rounded mean, in days, from entry to
    delivery over delivered orders; 0 when there are none.
    """
    orders = list(orders)

    by_status = {status: 0 for status in ServiceOrderStatus}
    by_financial = {financial: 0 for financial in FinancialStatus}
    revenue = 0.0
    completion_days = []

    for order in orders:
        by_status[order.status] += 1
        by_financial[order.financial] += 1

        revenue += order.total_amount_paid

        if order.status == ServiceOrderStatus.ENTREGUE and order.delivery_date is not None:
            seconds = (order.delivery_date - order.entry_date).total_seconds()
            completion_days.append(math.ceil(seconds / _ONE_DAY_SECONDS))

    average = 0
    if completion_days:
        # Round half up, not banker's rounding
        average = math.floor(sum(completion_days) / len(completion_days) + 0.5)

    return ServiceOrderMetrics(
        total_orders=len(orders),
        pending_orders=by_status[ServiceOrderStatus.CONFIRMAR],
        completed_orders=by_status[ServiceOrderStatus.ENTREGUE],
        total_revenue=revenue,
        average_completion_time=average,
        orders_by_status=by_status,
        orders_by_financial=by_financial,
    )
