# bookinfo/apps/reviews.py
from bookinfo.core.config import Settings, get_settings
from bookinfo.core.lifespan import service_lifespan
from bookinfo.main import create_service_app
from bookinfo.api.v1.routers.reviews import router as reviews_router


def create_app(settings: Settings | None = None):
    return create_service_app("Reviews", routers=[reviews_router], lifespan=service_lifespan, settings=settings)


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("bookinfo.apps.reviews:app", host="0.0.0.0", port=get_settings().REVIEWS_SERVICE_PORT, log_level="info")
