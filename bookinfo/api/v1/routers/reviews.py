# bookinfo/api/v1/routers/reviews.py
from typing import Dict
import logging
import time

from fastapi import APIRouter, Depends

from bookinfo.api.deps import forwarded_headers, get_app_settings, ratings_client
from bookinfo.clients.downstream import DownstreamClient
from bookinfo.core.config import Settings
from bookinfo.domain.services.reviews_svc import get_reviews_svc

logger = logging.getLogger(__name__)

router = APIRouter(tags=["reviews"])


@router.get("/reviews/{product_id}")
async def book_reviews(
    product_id: str,
    headers: Dict[str, str] = Depends(forwarded_headers),
    settings: Settings = Depends(get_app_settings),
    ratings: DownstreamClient = Depends(ratings_client),
):
    """
    Two fixed reviews; ratings are attached when ENABLE_RATINGS is on,
    or the "unavailable" sentinel when the ratings service cannot answer.
    """
    t0 = time.perf_counter()
    res = await get_reviews_svc(
        product_id,
        headers,
        ratings_client=ratings,
        ratings_enabled=settings.ENABLE_RATINGS,
        star_color=settings.STAR_COLOR,
        podname=settings.HOSTNAME,
        clustername=settings.CLUSTER_NAME,
    )
    logger.info("Response: reviews product_id=%s elapsed_time=%.4fs", product_id, time.perf_counter() - t0)
    return res.to_payload()
