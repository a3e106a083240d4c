from typing import Callable, Iterable
import logging

from fastapi import APIRouter, FastAPI, Request

from bookinfo.core.config import Settings, get_settings
from bookinfo.core.errors import register_exception_handlers
from bookinfo.core.headers import extract_headers
from bookinfo.core.logging import REQUEST_ID, configure_logging
from bookinfo.core.topology import build_topology, flatten_topology
from bookinfo.api.v1.routers.health import router as health_router

logger = logging.getLogger(__name__)


def create_service_app(
    service_label: str,
    routers: Iterable[APIRouter],
    lifespan: Callable,
    settings: Settings | None = None,
) -> FastAPI:
    """
    Shared wiring of the four services: logging, topology, error handlers,
    request-id logging context, /health and the service's own routers.
    The topology is resolved here so a bad configuration fails at startup.
    """
    settings = settings or get_settings()
    configure_logging(service_label.lower(), level=logging.DEBUG if settings.DEBUG else logging.INFO)

    topology = build_topology(settings)

    app = FastAPI(title=f"{settings.APP_NAME} {service_label}", lifespan=lifespan)
    app.state.settings = settings
    app.state.service_label = service_label
    app.state.topology = topology
    app.state.services = flatten_topology(topology)

    register_exception_handlers(app)

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        token = REQUEST_ID.set(extract_headers(request.headers).get("x-request-id", "-"))
        try:
            return await call_next(request)
        finally:
            REQUEST_ID.reset(token)

    # ------- Routes -------
    app.include_router(health_router)
    for router in routers:
        app.include_router(router)
    return app
