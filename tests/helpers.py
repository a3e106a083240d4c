# tests/helpers.py
import httpx


class RecordingTransport:
    """
    httpx.MockTransport wrapper that records every outbound request.
    `routes` maps a URL path prefix to a handler(request) -> httpx.Response.
    """

    def __init__(self, routes):
        self.routes = routes
        self.requests = []

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for prefix, handler in self.routes.items():
            if request.url.path.startswith(prefix):
                return handler(request)
        return httpx.Response(404, json={"error": "no route"})

    def requests_to(self, prefix: str):
        return [r for r in self.requests if r.url.path.startswith(prefix)]

    def client_dependency(self):
        """Drop-in override for bookinfo.api.deps.get_http_client."""
        async def _client():
            async with httpx.AsyncClient(transport=httpx.MockTransport(self.handle)) as client:
                yield client
        return _client

    def async_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handle))


def json_response(status_code: int, payload):
    return lambda request: httpx.Response(status_code, json=payload)


def raise_timeout(request: httpx.Request) -> httpx.Response:
    raise httpx.ReadTimeout("timed out", request=request)


def raise_connect_error(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)
