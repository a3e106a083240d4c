# bookinfo/api/v1/routers/productpage.py
from pathlib import Path
from typing import Dict
import logging
import time

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from bookinfo.api.deps import details_client, forwarded_headers, get_topology, reviews_client
from bookinfo.clients.downstream import DownstreamClient
from bookinfo.domain.models.topology import ServiceNode
from bookinfo.domain.services.productpage_svc import render_product_page_svc

logger = logging.getLogger(__name__)

router = APIRouter(tags=["productpage"])

TEMPLATES_DIR = Path(__file__).resolve().parents[3] / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


@router.get("/", response_class=HTMLResponse)
async def index(request: Request, topology: ServiceNode = Depends(get_topology)):
    """Service topology as a nested table."""
    return templates.TemplateResponse(request, "index.html", {"topology": topology})


@router.get("/productpage", response_class=HTMLResponse)
async def product_page(
    request: Request,
    headers: Dict[str, str] = Depends(forwarded_headers),
    details: DownstreamClient = Depends(details_client),
    reviews: DownstreamClient = Depends(reviews_client),
):
    """
    Always 200 once the template renders: failed dependencies only degrade
    their own section. A rendering failure is the one page-level error.
    """
    t0 = time.perf_counter()
    view = await render_product_page_svc(headers, details_client=details, reviews_client=reviews)
    response = templates.TemplateResponse(request, "productpage.html", {"view": view})
    logger.info(
        "Response: productpage details=%s reviews=%s elapsed_time=%.4fs",
        view.details_status, view.reviews_status, time.perf_counter() - t0,
    )
    return response
