# bookinfo/apps/productpage.py
from bookinfo.core.config import Settings, get_settings
from bookinfo.core.lifespan import service_lifespan
from bookinfo.main import create_service_app
from bookinfo.api.v1.routers.productpage import router as productpage_router
from bookinfo.api.v1.routers.products import router as products_router


def create_app(settings: Settings | None = None):
    return create_service_app(
        "Productpage",
        routers=[productpage_router, products_router],
        lifespan=service_lifespan,
        settings=settings,
    )


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("bookinfo.apps.productpage:app", host="0.0.0.0", port=get_settings().PRODUCTPAGE_SERVICE_PORT, log_level="info")
