# bookinfo/api/v1/routers/details.py
from typing import Dict
import logging

import httpx
from fastapi import APIRouter, Depends

from bookinfo.api.deps import forwarded_headers, get_app_settings, get_http_client, parse_numeric_id
from bookinfo.core.config import Settings
from bookinfo.domain.services.details_svc import get_book_details_svc

logger = logging.getLogger(__name__)

router = APIRouter(tags=["details"])


@router.get("/details/{product_id}")
async def book_details(
    product_id: str,
    headers: Dict[str, str] = Depends(forwarded_headers),
    settings: Settings = Depends(get_app_settings),
    http: httpx.AsyncClient = Depends(get_http_client),
):
    pid = parse_numeric_id(product_id, "please provide numeric product id")
    logger.info("Request: details product_id=%s external=%s", pid, settings.ENABLE_EXTERNAL_BOOK_SERVICE)
    details = await get_book_details_svc(pid, headers, settings=settings, http=http)
    return details.to_payload()
