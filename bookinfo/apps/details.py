# bookinfo/apps/details.py
from bookinfo.core.config import Settings, get_settings
from bookinfo.core.lifespan import service_lifespan
from bookinfo.main import create_service_app
from bookinfo.api.v1.routers.details import router as details_router


def create_app(settings: Settings | None = None):
    return create_service_app("Details", routers=[details_router], lifespan=service_lifespan, settings=settings)


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("bookinfo.apps.details:app", host="0.0.0.0", port=get_settings().DETAILS_SERVICE_PORT, log_level="info")
