# bookinfo/api/deps.py
import re
from typing import Dict

import httpx
from fastapi import Depends, Request

from bookinfo.clients.downstream import DownstreamClient
from bookinfo.core.config import Settings
from bookinfo.core.errors import ClientInputError
from bookinfo.core.headers import extract_headers
from bookinfo.core.topology import DETAILS, RATINGS, REVIEWS
from bookinfo.domain.models.topology import ServiceNode
from bookinfo.domain.repositories.ratings_repo import RatingsStore
from bookinfo.domain.services.health_simulator import ServiceHealthState

# Application-scoped objects live on app.state; these dependencies hand them to routes
def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings

def get_topology(request: Request) -> ServiceNode:
    return request.app.state.topology

def get_services(request: Request) -> Dict[str, ServiceNode]:
    return request.app.state.services

def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client

def get_ratings_store(request: Request) -> RatingsStore:
    return request.app.state.ratings_store

def get_health_state(request: Request) -> ServiceHealthState:
    return request.app.state.health_state

# Request-scoped: allow-listed tracing/auth headers of the inbound call
def forwarded_headers(request: Request) -> Dict[str, str]:
    return extract_headers(request.headers)


def _client_for(name: str, timeout_attr: str):
    def dependency(
        services: Dict[str, ServiceNode] = Depends(get_services),
        http: httpx.AsyncClient = Depends(get_http_client),
        settings: Settings = Depends(get_app_settings),
    ) -> DownstreamClient:
        return DownstreamClient(http, services[name], timeout_s=getattr(settings, timeout_attr))
    dependency.__name__ = f"{name}_client"
    return dependency

details_client = _client_for(DETAILS, "DOWNSTREAM_TIMEOUT_S")
reviews_client = _client_for(REVIEWS, "DOWNSTREAM_TIMEOUT_S")
ratings_proxy_client = _client_for(RATINGS, "DOWNSTREAM_TIMEOUT_S")   # productpage -> ratings
ratings_client = _client_for(RATINGS, "RATINGS_TIMEOUT_S")            # reviews -> ratings


_NUMERIC_ID = re.compile(r"[+-]?[0-9]+")
INT64_MIN, INT64_MAX = -(2 ** 63), 2 ** 63 - 1

def parse_numeric_id(raw: str, message: str = "please provide numeric product id") -> int:
    """Signed 64-bit ASCII decimal integers only (negative ids are valid); anything else is a 400."""
    if not _NUMERIC_ID.fullmatch(raw or ""):
        raise ClientInputError(message)
    try:
        value = int(raw)
    except ValueError as e:  # longer than the int conversion digit limit
        raise ClientInputError(message) from e
    if not INT64_MIN <= value <= INT64_MAX:
        raise ClientInputError(message)
    return value
