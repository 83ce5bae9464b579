"""POST /api/actions - unified mutation endpoint."""

from fastapi import APIRouter, Request
from pydantic import BaseModel

from api.base import success_response
from core.models import (
    FinancialStatusUpdate,
    ServiceOrderCreate,
    ServiceOrderUpdate,
    StatusUpdate,
)


class ActionRequest(BaseModel):
    domain: str
    action: str
    data: dict


def _dump(order) -> dict:
    data = order.model_dump(mode="json", by_alias=True)
    data["totals"] = order.totals.model_dump(by_alias=True)
    return data


def create_actions_router(services: dict) -> APIRouter:
    router = APIRouter()

    handlers = {
        "service_order": ServiceOrderHandler(services["service_order"]),
    }

    @router.post("/actions")
    async def perform_action(request: Request, body: ActionRequest):
        handler = handlers.get(body.domain)
        if handler is None:
            raise ValueError(
                f"Unknown domain '{body.domain}'. "
                f"Valid domains: {', '.join(sorted(handlers.keys()))}"
            )

        if body.action not in handler.ALLOWED_ACTIONS:
            raise ValueError(
                f"Action '{body.action}' not allowed on '{body.domain}'. "
                f"Allowed: {', '.join(sorted(handler.ALLOWED_ACTIONS))}"
            )

        method = getattr(handler, f"_handle_{body.action}")
        result = method(dict(body.data))
        return success_response(result).model_dump(mode="json")

    return router


# =============================================================================
# HANDLER CLASSES
# =============================================================================


def _order_id(data: dict) -> str:
    order_id = data.pop("id", None) or data.pop("_id", None)
    if not order_id:
        raise ValueError("'id' is required")
    return str(order_id)


class ServiceOrderHandler:
    ALLOWED_ACTIONS = {"create", "update", "update_status", "update_financial", "clone", "delete"}

    def __init__(self, service):
        self.service = service

    def _handle_create(self, data: dict):
        order = self.service.create(ServiceOrderCreate.model_validate(data))
        return _dump(order)

    def _handle_update(self, data: dict):
        order_id = _order_id(data)
        order = self.service.update(order_id, ServiceOrderUpdate.model_validate(data))
        return _dump(order)

    def _handle_update_status(self, data: dict):
        order_id = _order_id(data)
        order = self.service.update_status(order_id, StatusUpdate.model_validate(data))
        return _dump(order)

    def _handle_update_financial(self, data: dict):
        order_id = _order_id(data)
        order = self.service.update_financial(order_id, FinancialStatusUpdate.model_validate(data))
        return _dump(order)

    def _handle_clone(self, data: dict):
        order = self.service.clone(_order_id(data))
        return _dump(order)

    def _handle_delete(self, data: dict):
        order_id = _order_id(data)
        deleted = self.service.delete(order_id)
        if not deleted:
            raise ValueError(f"Service order {order_id} not found")
        return {"deleted": True}
