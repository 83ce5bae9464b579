"""FastAPI application factory."""

from fastapi import FastAPI

from api.actions import create_actions_router
from api.data import create_data_router
from api.errors import register_error_handlers
from clients.service_order_client import ServiceOrderClient
from core.audit import AuditLogger
from core.event_bus import EventBus
from core.services.service_order_service import ServiceOrderService
from utils.config import EngineConfig, configure_logging, load_config


def build_services(config: EngineConfig, event_bus: EventBus | None = None) -> dict:
    """Wire the service graph from config."""
    client = ServiceOrderClient(
        base_url=config.api_base_url,
        api_token=config.api_token,
        timeout=config.request_timeout_seconds,
    )
    return {
        "service_order": ServiceOrderService(client, AuditLogger(), event_bus or EventBus()),
    }


def create_app(config: EngineConfig | None = None, services: dict | None = None) -> FastAPI:
    """
    Build the API app.

    Args:
        config: Defaults to load_config()
        services: Prebuilt services (tests); built from config when omitted
    """
    config = config or load_config()
    configure_logging(config.log_level)

    services = services or build_services(config)

    app = FastAPI(title="Service Orders")
    register_error_handlers(app)

    app.include_router(create_data_router(services, config.timezone), prefix="/api")
    app.include_router(create_actions_router(services), prefix="/api")

    return app
