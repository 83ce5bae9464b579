"""Tests for core/metrics.py - dashboard metrics."""

import pytest

from core.metrics import compute_metrics
from core.models import FinancialStatus, ServiceOrderStatus


class TestComputeMetrics:

    def test_empty(self):
        metrics = compute_metrics([])

        assert metrics.total_orders == 0
        assert metrics.total_revenue == 0
        assert metrics.average_completion_time == 0
        assert all(count == 0 for count in metrics.orders_by_status.values())
        assert set(metrics.orders_by_financial) == set(FinancialStatus)

    def test_counts(self, make_order):
        orders = [
            make_order(status="confirmar"),
            make_order(status="confirmar"),
            make_order(status="aprovado", financial="deve"),
            make_order(status="entregue", financial="pago", deliveryDate="2024-01-03"),
        ]

        metrics = compute_metrics(orders)

        assert metrics.total_orders == 4
        assert metrics.pending_orders == 2
        assert metrics.completed_orders == 1
        assert metrics.orders_by_status[ServiceOrderStatus.APROVADO] == 1
        assert metrics.orders_by_status[ServiceOrderStatus.REPROVADO] == 0
        assert metrics.orders_by_financial[FinancialStatus.DEVE] == 1

    def test_revenue_sums_amount_paid_on_every_order(self, make_order):
        items = [{"description": "Serviço", "quantity": 1, "unitValue": 100}]
        orders = [
            make_order(financial="pago", services=items, totalAmountPaid=100),
            make_order(financial="parcialmente_pago", services=items, totalAmountPaid=40, totalAmountLeft=60),
            make_order(financial="faturado", services=items, totalAmountPaid={"$numberDecimal": "25.50"}),
            make_order(financial="em_aberto", services=items),
        ]

        assert compute_metrics(orders).total_revenue == pytest.approx(165.5)

    def test_revenue_not_derived_from_order_total(self, make_order):
        items = [{"description": "Serviço", "quantity": 1, "unitValue": 100}]
        orders = [make_order(financial="pago", services=items)]

        assert compute_metrics(orders).total_revenue == 0

    def test_average_completion_time(self, make_order):
        orders = [
            make_order(status="entregue", entryDate="2024-01-01", deliveryDate="2024-01-03"),
            make_order(status="entregue", entryDate="2024-01-01", deliveryDate="2024-01-04T06:00:00Z"),
            # not delivered, ignored
            make_order(status="pronto", entryDate="2024-01-01"),
        ]

        # 2 days and 4 days (rounded up) -> 3
        assert compute_metrics(orders).average_completion_time == 3

    def test_average_rounds_half_up(self, make_order):
        orders = [
            make_order(status="entregue", entryDate="2024-01-01", deliveryDate="2024-01-02"),
            make_order(status="entregue", entryDate="2024-01-01", deliveryDate="2024-01-03"),
        ]

        assert compute_metrics(orders).average_completion_time == 2

    def test_delivered_without_date_ignored(self, make_order):
        orders = [make_order(status="entregue", deliveryDate=None)]
        assert compute_metrics(orders).average_completion_time == 0

    def test_json_dump_uses_status_values(self, make_order):
        dumped = compute_metrics([make_order()]).model_dump(mode="json")
        assert dumped["orders_by_status"]["confirmar"] == 1
        assert dumped["orders_by_financial"]["em_aberto"] == 1
