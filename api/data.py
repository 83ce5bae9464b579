"""GET /api/data - read endpoints for service orders."""

from fastapi import APIRouter, Query, Request

from api.base import success_response
from core.timeline import Timeline, TimelineEvent
from utils.timezone import DISPLAY_TIMEZONE, to_local

VALID_INCLUDES = {"totals", "timeline"}


def _event_json(event: TimelineEvent, tz_name: str) -> dict:
    data = event.model_dump(mode="json")
    data["pending"] = event.is_pending
    data["local_timestamp"] = (
        to_local(event.timestamp, tz_name).isoformat() if event.timestamp else None
    )
    return data


def create_data_router(services: dict, tz_name: str = DISPLAY_TIMEZONE) -> APIRouter:
    router = APIRouter()

    order_svc = services["service_order"]

    # -------------------------------------------------------------------------
    # Fixed routes (must be registered before /{order_id})
    # -------------------------------------------------------------------------

    @router.get("/data/service-orders/metrics")
    async def service_order_metrics(request: Request, status: str | None = Query(None),
                                    financial: str | None = Query(None)):
        filters = {k: v for k, v in {"status": status, "financial": financial}.items() if v}
        metrics = order_svc.get_metrics(filters or None)
        return success_response(metrics.model_dump(mode="json")).model_dump(mode="json")

    @router.get("/data/service-orders")
    async def list_service_orders(
        request: Request,
        status: str | None = Query(None),
        financial: str | None = Query(None),
        customer_id: str | None = Query(None),
        limit: int = Query(50, ge=1, le=500),
        page: int = Query(1, ge=1),
    ):
        filters = {"limit": limit, "page": page}
        if status:
            filters["status"] = status
        if financial:
            filters["financial"] = financial
        if customer_id:
            filters["customerId"] = customer_id

        orders = order_svc.list_all(filters)
        return success_response(
            [o.model_dump(mode="json", by_alias=True) for o in orders]
        ).model_dump(mode="json")

    # -------------------------------------------------------------------------
    # Single order
    # -------------------------------------------------------------------------

    @router.get("/data/service-orders/{order_id}/totals")
    async def service_order_totals(request: Request, order_id: str):
        totals = order_svc.get_totals(order_id)
        return success_response(totals.model_dump(by_alias=True)).model_dump(mode="json")

    @router.get("/data/service-orders/{order_id}/timeline")
    async def service_order_timeline(request: Request, order_id: str):
        timeline = order_svc.get_timeline(order_id)
        return success_response(
            [_event_json(event, tz_name) for event in timeline]
        ).model_dump(mode="json")

    @router.get("/data/service-orders/{order_id}")
    async def get_service_order(request: Request, order_id: str, include: str | None = Query(None)):
        includes = set(include.split(",")) if include else set()
        unknown = includes - VALID_INCLUDES
        if unknown:
            raise ValueError(
                f"Unknown include '{', '.join(sorted(unknown))}'. "
                f"Valid includes: {', '.join(sorted(VALID_INCLUDES))}"
            )

        order = order_svc.get_by_id(order_id)
        if order is None:
            raise ValueError(f"Service order {order_id} not found")

        data = order.model_dump(mode="json", by_alias=True)
        if "totals" in includes:
            data["totals"] = order.totals.model_dump(by_alias=True)
        if "timeline" in includes:
            data["timeline"] = [_event_json(event, tz_name) for event in Timeline(order)]

        return success_response(data).model_dump(mode="json")

    return router
