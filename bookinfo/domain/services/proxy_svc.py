import logging
from typing import Mapping, Optional

from fastapi import Response

from bookinfo.clients.downstream import DownstreamClient
from bookinfo.core.errors import DownstreamUnavailable

logger = logging.getLogger(__name__)


async def proxy_svc(
    client: DownstreamClient,
    *,
    method: str,
    path: str,
    headers: Mapping[str, str],
    body: Optional[bytes],
    kind: str,
) -> Response:
    """
    Forward one call and relay the downstream status code and body bytes as-is,
    4xx/5xx included. Only transport failures become a local 500.
    """
    try:
        resp = await client.request(method, path, headers, content=body or None)
    except DownstreamUnavailable as e:
        raise DownstreamUnavailable(f"Failed to fetch product {kind}", status_code=500) from e

    return Response(
        content=resp.content,
        status_code=resp.status_code,
        media_type=resp.headers.get("content-type", "application/json"),
    )
