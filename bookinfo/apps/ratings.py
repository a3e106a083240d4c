# bookinfo/apps/ratings.py
from bookinfo.core.config import Settings, get_settings
from bookinfo.core.lifespan import ratings_lifespan
from bookinfo.main import create_service_app
from bookinfo.api.v1.routers.ratings import router as ratings_router


def create_app(settings: Settings | None = None):
    # The store and the health simulator are owned by ratings_lifespan
    return create_service_app("Ratings", routers=[ratings_router], lifespan=ratings_lifespan, settings=settings)


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("bookinfo.apps.ratings:app", host="0.0.0.0", port=get_settings().RATINGS_SERVICE_PORT, log_level="info")
