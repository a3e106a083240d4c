# bookinfo/domain/services/productpage_svc.py
import asyncio
import logging
import time
from typing import Any, Dict, Mapping, Optional, Tuple

from bookinfo.clients.downstream import DownstreamClient
from bookinfo.core.errors import DownstreamError, DownstreamUnavailable
from bookinfo.domain.models.product import ProductPageView
from bookinfo.domain.services.catalog_svc import DEFAULT_PRODUCT_ID, get_product

logger = logging.getLogger(__name__)

Captured = Tuple[int, Optional[Dict[str, Any]]]


async def capture(client: DownstreamClient, path: str, headers: Mapping[str, str]) -> Captured:
    """
    Call a dependency and never raise: (200, payload) on success,
    (status, None) for non-200 or malformed bodies, (503, None) on transport failure.
    """
    try:
        return 200, await client.get_json(path, headers)
    except (DownstreamError, DownstreamUnavailable) as e:
        logger.warning("productpage: %s degraded (%s): %s", client.node.name, e.status_code, e.message)
        return e.status_code, None


async def get_product_details(product_id: int, headers: Mapping[str, str], details_client: DownstreamClient) -> Captured:
    return await capture(details_client, f"/details/{product_id}", headers)


async def get_product_reviews(product_id: int, headers: Mapping[str, str], reviews_client: DownstreamClient) -> Captured:
    return await capture(reviews_client, f"/reviews/{product_id}", headers)


async def render_product_page_svc(
    headers: Mapping[str, str],
    *,
    details_client: DownstreamClient,
    reviews_client: DownstreamClient,
    product_id: int = DEFAULT_PRODUCT_ID,
) -> ProductPageView:
    """
    Merge catalog product + details + reviews (reviews pull ratings themselves).
    Details and reviews are independent and fetched concurrently; a failed
    section only degrades that section.
    """
    t0 = time.perf_counter()
    product = get_product(product_id)
    if product is None:
        raise LookupError(f"product {product_id} missing from catalog")

    (details_status, details), (reviews_status, reviews) = await asyncio.gather(
        get_product_details(product_id, headers, details_client),
        get_product_reviews(product_id, headers, reviews_client),
    )

    view = ProductPageView(
        product=product,
        details_status=details_status,
        details=details,
        reviews_status=reviews_status,
        reviews=reviews,
    )
    logger.info(
        "productpage merged details=%s reviews=%s degraded=%s time=%.3fs",
        details_status, reviews_status, view.degraded, time.perf_counter() - t0,
    )
    return view
