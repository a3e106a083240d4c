# bookinfo/clients/downstream.py
from __future__ import annotations
import logging
import time
from typing import Any, Dict, Mapping, Optional

import httpx

from bookinfo.core.errors import DownstreamError, DownstreamUnavailable
from bookinfo.core.headers import attach_headers
from bookinfo.domain.models.topology import ServiceNode

logger = logging.getLogger(__name__)


class DownstreamClient:
    """
    Calls one service of the topology over a shared httpx.AsyncClient.
    Every call carries the propagated headers and an explicit timeout; nothing is retried.
    """

    def __init__(self, http: httpx.AsyncClient, node: ServiceNode, timeout_s: float):
        self.http = http
        self.node = node
        self.timeout_s = timeout_s

    def url(self, path: str) -> str:
        return f"{self.node.base_url}{path}"

    async def request(
        self,
        method: str,
        path: str,
        headers: Mapping[str, str],
        content: Optional[bytes] = None,
    ) -> httpx.Response:
        """
        Send one request and return the response whatever its status.
        Raises DownstreamUnavailable on transport failures (refused, reset, timeout).
        """
        url = self.url(path)
        outbound = attach_headers(headers, {})
        t0 = time.perf_counter()
        try:
            resp = await self.http.request(method, url, headers=outbound, content=content, timeout=self.timeout_s)
        except httpx.RequestError as e:
            dt = time.perf_counter() - t0
            logger.warning("%s %s %s failed after %.3fs: %r", self.node.name, method, url, dt, e)
            raise DownstreamUnavailable(f"{self.node.name} unreachable: {e.__class__.__name__}") from e
        dt = time.perf_counter() - t0
        logger.info("%s %s %s -> %s in %.3fs", self.node.name, method, url, resp.status_code, dt)
        return resp

    async def get_json(self, path: str, headers: Mapping[str, str]) -> Dict[str, Any]:
        """
        GET and decode a JSON object.
        Raises DownstreamUnavailable (transport) or DownstreamError (non-200, malformed body).
        """
        resp = await self.request("GET", path, headers)
        if resp.status_code != httpx.codes.OK:
            raise DownstreamError(resp.status_code, f"{self.node.name} answered HTTP {resp.status_code}")
        try:
            payload = resp.json()
        except ValueError as e:
            raise DownstreamError(500, f"{self.node.name} returned a malformed body") from e
        if not isinstance(payload, dict):
            raise DownstreamError(500, f"{self.node.name} returned a non-object body")
        return payload
