"""Tests for core/timeline.py - lifecycle timeline reconstruction."""

from datetime import datetime, timezone

from core.timeline import Timeline, TimelineEventKind, elapsed_days


def _kinds(timeline):
    return [event.kind for event in timeline]


class TestElapsedDays:

    def test_whole_days(self):
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        end = datetime(2024, 1, 4, tzinfo=timezone.utc)
        assert elapsed_days(start, end) == 3

    def test_partial_day_rounds_up(self):
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        end = datetime(2024, 1, 2, 1, tzinfo=timezone.utc)
        assert elapsed_days(start, end) == 2

    def test_same_instant_is_zero(self):
        moment = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert elapsed_days(moment, moment) == 0

    def test_end_before_start_is_positive(self):
        start = datetime(2024, 1, 4, tzinfo=timezone.utc)
        end = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert elapsed_days(start, end) == 3


class TestTimelineEvents:

    def test_new_order(self, make_order):
        events = Timeline(make_order(entryDate="2024-01-01")).to_list()

        assert _kinds(events) == [TimelineEventKind.CREATED, TimelineEventKind.FINANCIAL]
        assert events[0].label == "Ordem Criada"
        assert events[0].timestamp == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_approval_elapsed_days(self, make_order):
        """entryDate 2024-01-01, approvalDate 2024-01-04 -> 3 days."""
        order = make_order(status="aprovado", entryDate="2024-01-01", approvalDate="2024-01-04")

        approved = [e for e in Timeline(order) if e.kind == TimelineEventKind.APPROVED]

        assert len(approved) == 1
        assert approved[0].elapsed_days == 3
        assert approved[0].label == "Ordem Aprovada"

    def test_full_lifecycle_order(self, make_order):
        order = make_order(
            status="entregue",
            entryDate="2024-01-01",
            approvalDate="2024-01-02",
            deliveryDate="2024-01-08T12:00:00Z",
            warranty=True,
        )

        events = Timeline(order).to_list()

        assert _kinds(events) == [
            TimelineEventKind.CREATED,
            TimelineEventKind.APPROVED,
            TimelineEventKind.DELIVERED,
            TimelineEventKind.FINANCIAL,
        ]
        delivered = events[2]
        assert delivered.elapsed_days == 8
        assert delivered.details == {"warranty": True}

    def test_ready_marker_only_when_pronto(self, make_order):
        ready = make_order(status="pronto", approvalDate="2024-01-02")
        approved = make_order(status="aprovado", approvalDate="2024-01-02")

        assert TimelineEventKind.READY in _kinds(Timeline(ready))
        assert TimelineEventKind.READY not in _kinds(Timeline(approved))

    def test_ready_marker_is_pending_with_summary(self, make_order):
        order = make_order(
            status="pronto",
            services=[
                {"description": "Troca de cabo", "quantity": 1, "unitValue": 40},
                {"description": "Revisão", "quantity": 1, "unitValue": 60},
            ],
        )

        ready = next(e for e in Timeline(order) if e.kind == TimelineEventKind.READY)

        assert ready.is_pending
        assert ready.timestamp is None
        assert ready.details == {"item_count": 2, "final_total": 100}

    def test_financial_snapshot(self, make_order):
        order = make_order(
            financial="parcialmente_pago",
            services=[{"description": "Peça", "quantity": 2, "unitValue": 100}],
            discountPercentage=10,
        )

        financial = Timeline(order).to_list()[-1]

        assert financial.kind == TimelineEventKind.FINANCIAL
        assert financial.details["financial"] == "parcialmente_pago"
        assert financial.details["totals"]["finalTotal"] == 180

    def test_confirmed_then_reset_has_no_dates(self, make_order):
        order = make_order(status="confirmar", approvalDate=None, deliveryDate=None)
        assert _kinds(Timeline(order)) == [TimelineEventKind.CREATED, TimelineEventKind.FINANCIAL]


class TestTimelineIteration:

    def test_restartable(self, make_order):
        timeline = Timeline(make_order(status="entregue", approvalDate="2024-01-02", deliveryDate="2024-01-05"))

        first = list(timeline)
        second = list(timeline)

        assert first == second
        assert len(first) == 4

    def test_lazy(self, make_order):
        iterator = iter(Timeline(make_order()))
        assert next(iterator).kind == TimelineEventKind.CREATED

    def test_does_not_modify_order(self, make_order):
        order = make_order(status="pronto", approvalDate="2024-01-02")
        before = order.model_dump()

        Timeline(order).to_list()

        assert order.model_dump() == before
