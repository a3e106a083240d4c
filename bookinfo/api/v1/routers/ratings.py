# bookinfo/api/v1/routers/ratings.py
from typing import Dict
import json
import logging

from fastapi import APIRouter, Depends, Request
from pydantic import StrictInt, TypeAdapter, ValidationError

from bookinfo.api.deps import get_health_state, get_ratings_store, parse_numeric_id
from bookinfo.core.errors import ClientInputError, DownstreamUnavailable
from bookinfo.domain.repositories.ratings_repo import RatingsStore
from bookinfo.domain.services.health_simulator import ServiceHealthState

logger = logging.getLogger(__name__)

router = APIRouter(tags=["ratings"])

NUMERIC_ID_MESSAGE = "please provide numeric product ID"
_ratings_body = TypeAdapter(Dict[str, StrictInt])


@router.get("/ratings/{product_id}")
async def get_ratings(
    product_id: str,
    store: RatingsStore = Depends(get_ratings_store),
    health: ServiceHealthState = Depends(get_health_state),
):
    # Simulated outage: reject before any work, the store is never touched
    if health.unavailable:
        logger.warning("Request: ratings product_id=%s rejected, service simulated unavailable", product_id)
        raise DownstreamUnavailable("Service unavailable")

    pid = parse_numeric_id(product_id, NUMERIC_ID_MESSAGE)
    record = await store.fetch(pid)
    logger.info("Response: ratings product_id=%s backend=%s ratings=%s", pid, store.name, record.ratings())
    return record.to_payload()


@router.post("/ratings/{product_id}")
async def post_ratings(
    product_id: str,
    request: Request,
    store: RatingsStore = Depends(get_ratings_store),
):
    """
    Body: {"Reviewer1": <int>, "Reviewer2": <int>}. Only the in-memory backend accepts writes;
    database backed ones answer 501.
    """
    pid = parse_numeric_id(product_id, NUMERIC_ID_MESSAGE)
    try:
        ratings = _ratings_body.validate_python(json.loads(await request.body()))
    except (ValueError, ValidationError) as e:
        logger.warning("Request: post ratings product_id=%s invalid body: %s", pid, e)
        raise ClientInputError("please provide valid ratings JSON") from e

    record = await store.put(pid, ratings)
    return record.to_payload()
