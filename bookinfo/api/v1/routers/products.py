# bookinfo/api/v1/routers/products.py
from typing import Dict
import logging

from fastapi import APIRouter, Depends, Request

from bookinfo.api.deps import details_client, forwarded_headers, ratings_proxy_client, reviews_client
from bookinfo.clients.downstream import DownstreamClient
from bookinfo.domain.services.catalog_svc import get_products
from bookinfo.domain.services.proxy_svc import proxy_svc

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["products"])

## Thin proxies: downstream status and body are relayed untouched


@router.get("/products")
async def list_products():
    return [p.model_dump() for p in get_products()]


@router.get("/products/{product_id}")
async def product_details(
    product_id: str,
    request: Request,
    headers: Dict[str, str] = Depends(forwarded_headers),
    client: DownstreamClient = Depends(details_client),
):
    logger.info("Request: proxy details product_id=%s", product_id)
    return await proxy_svc(
        client, method=request.method, path=f"/details/{product_id}",
        headers=headers, body=await request.body(), kind="details",
    )


@router.get("/products/{product_id}/reviews")
async def product_reviews(
    product_id: str,
    request: Request,
    headers: Dict[str, str] = Depends(forwarded_headers),
    client: DownstreamClient = Depends(reviews_client),
):
    logger.info("Request: proxy reviews product_id=%s", product_id)
    return await proxy_svc(
        client, method=request.method, path=f"/reviews/{product_id}",
        headers=headers, body=await request.body(), kind="reviews",
    )


@router.get("/products/{product_id}/ratings")
async def product_ratings(
    product_id: str,
    request: Request,
    headers: Dict[str, str] = Depends(forwarded_headers),
    client: DownstreamClient = Depends(ratings_proxy_client),
):
    logger.info("Request: proxy ratings product_id=%s", product_id)
    return await proxy_svc(
        client, method=request.method, path=f"/ratings/{product_id}",
        headers=headers, body=await request.body(), kind="ratings",
    )
