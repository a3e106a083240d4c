# tests/test_productpage_api.py
import httpx
import pytest
from fastapi.testclient import TestClient

from bookinfo.api.deps import get_http_client
from bookinfo.apps.productpage import create_app
from helpers import RecordingTransport, json_response, raise_connect_error, raise_timeout

DETAILS = {
    "id": 0, "author": "William Shakespeare", "year": 1595, "type": "paperback", "pages": 200,
    "publisher": "PublisherA", "language": "English", "ISBN-10": "1234567890", "ISBN-13": "123-1234567890",
}
REVIEWS = {
    "id": "0", "podname": "reviews-v2", "clustername": "c1",
    "reviews": [
        {"reviewer": "Reviewer1", "text": "An extremely entertaining play", "rating": {"stars": 5, "color": "black"}},
        {"reviewer": "Reviewer2", "text": "Absolutely fun", "rating": {"stars": -1, "color": "Ratings service is unavailable"}},
    ],
}


def _client(make_settings, routes, raise_server_exceptions=True, **overrides):
    transport = RecordingTransport(routes)
    app = create_app(make_settings(**overrides))
    app.dependency_overrides[get_http_client] = transport.client_dependency()
    return TestClient(app, raise_server_exceptions=raise_server_exceptions), transport


def test_index_lists_topology(make_settings):
    client, _ = _client(make_settings, {})
    with client:
        r = client.get("/")
    assert r.status_code == 200
    for fragment in ("productpage", "details", "reviews", "ratings", "http://localhost:9084", "http://localhost:8085"):
        assert fragment in r.text


def test_product_list(make_settings):
    client, _ = _client(make_settings, {})
    with client:
        r = client.get("/api/v1/products")
    assert r.status_code == 200
    products = r.json()
    assert [p["id"] for p in products] == [0]
    assert products[0]["title"] == "The Comedy of Errors"


def test_full_page(make_settings):
    client, transport = _client(make_settings, {
        "/details/0": json_response(200, DETAILS),
        "/reviews/0": json_response(200, REVIEWS),
    })
    with client:
        r = client.get("/productpage")

    assert r.status_code == 200
    assert "The Comedy of Errors" in r.text
    assert "PublisherA" in r.text
    assert "An extremely entertaining play" in r.text
    assert "&#9733;" * 5 in r.text
    assert 'class="rating-unavailable"' in r.text
    assert "Ratings service is unavailable" in r.text
    assert "Error fetching" not in r.text
    assert {str(req.url) for req in transport.requests} == {
        "http://localhost:9084/details/0",
        "http://localhost:9086/reviews/0",
    }


@pytest.mark.parametrize(
    "details_handler, details_status",
    [
        (json_response(500, {"error": "boom"}), "500"),
        (json_response(404, {"error": "nope"}), "404"),
        (raise_timeout, "503"),
        (raise_connect_error, "503"),
        (lambda request: httpx.Response(200, content=b"garbage"), "500"),
    ],
)
def test_failed_details_only_degrades_details(make_settings, details_handler, details_status):
    client, _ = _client(make_settings, {
        "/details/0": details_handler,
        "/reviews/0": json_response(200, REVIEWS),
    })
    with client:
        r = client.get("/productpage")

    assert r.status_code == 200
    assert "Error fetching product details!" in r.text
    assert f'data-status="{details_status}"' in r.text
    assert "Error fetching product reviews!" not in r.text
    assert "An extremely entertaining play" in r.text


def test_both_sections_degraded_still_200(make_settings):
    client, _ = _client(make_settings, {
        "/details/0": json_response(503, {"error": "down"}),
        "/reviews/0": raise_timeout,
    })
    with client:
        r = client.get("/productpage")

    assert r.status_code == 200
    assert "The Comedy of Errors" in r.text
    assert "Error fetching product details!" in r.text
    assert "Error fetching product reviews!" in r.text


def test_tracing_headers_reach_both_dependencies(make_settings):
    client, transport = _client(make_settings, {
        "/details/0": json_response(200, DETAILS),
        "/reviews/0": json_response(200, REVIEWS),
    })
    with client:
        client.get("/productpage", headers={"x-request-id": "req-9", "x-b3-sampled": "1", "x-custom": "no"})

    for prefix in ("/details/0", "/reviews/0"):
        sent = transport.requests_to(prefix)[0].headers
        assert sent["x-request-id"] == "req-9"
        assert sent["x-b3-sampled"] == "1"
        assert "x-custom" not in sent


def test_template_failure_is_500(make_settings, monkeypatch):
    from bookinfo.api.v1.routers import productpage as productpage_router

    def broken(*args, **kwargs):
        raise RuntimeError("template exploded")

    monkeypatch.setattr(productpage_router.templates, "TemplateResponse", broken)
    client, _ = _client(make_settings, {
        "/details/0": json_response(200, DETAILS),
        "/reviews/0": json_response(200, REVIEWS),
    }, raise_server_exceptions=False)
    with client:
        r = client.get("/productpage")

    assert r.status_code == 500


# ---------- proxies ----------

@pytest.mark.parametrize(
    "path, upstream",
    [
        ("/api/v1/products/0", "/details/0"),
        ("/api/v1/products/0/reviews", "/reviews/0"),
        ("/api/v1/products/0/ratings", "/ratings/0"),
    ],
)
def test_proxy_relays_status_and_body(make_settings, path, upstream):
    raw = b'{"error": "upstream says no"}'
    client, transport = _client(make_settings, {
        upstream: lambda request: httpx.Response(418, content=raw, headers={"content-type": "application/json"}),
    })
    with client:
        r = client.get(path, headers={"x-request-id": "req-p"})

    assert r.status_code == 418
    assert r.content == raw
    assert transport.requests[0].headers["x-request-id"] == "req-p"


def test_proxy_relays_success(make_settings):
    client, _ = _client(make_settings, {"/details/0": json_response(200, DETAILS)})
    with client:
        r = client.get("/api/v1/products/0")
    assert r.status_code == 200
    assert r.json() == DETAILS


def test_proxy_relays_downstream_503(make_settings):
    client, _ = _client(make_settings, {"/ratings/0": json_response(503, {"error": "Service unavailable"})})
    with client:
        r = client.get("/api/v1/products/0/ratings")
    assert r.status_code == 503
    assert r.json() == {"error": "Service unavailable"}


@pytest.mark.parametrize(
    "path, kind",
    [
        ("/api/v1/products/0", "details"),
        ("/api/v1/products/0/reviews", "reviews"),
        ("/api/v1/products/0/ratings", "ratings"),
    ],
)
def test_proxy_transport_failure_is_500(make_settings, path, kind):
    client, _ = _client(make_settings, {"/": raise_connect_error})
    with client:
        r = client.get(path)
    assert r.status_code == 500
    assert r.json() == {"error": f"Failed to fetch product {kind}"}


def test_productpage_health(make_settings):
    client, _ = _client(make_settings, {})
    with client:
        r = client.get("/health")
    assert r.json()["status"] == "Productpage is healthy"


def test_out_of_range_stars_render_at_most_five(make_settings):
    reviews = dict(REVIEWS, reviews=[
        {"reviewer": "Reviewer1", "text": "t1", "rating": {"stars": 10 ** 12, "color": "black"}},
        {"reviewer": "Reviewer2", "text": "t2", "rating": {"stars": 2, "color": "black"}},
    ])
    client, _ = _client(make_settings, {
        "/details/0": json_response(200, DETAILS),
        "/reviews/0": json_response(200, reviews),
    })
    with client:
        r = client.get("/productpage")

    assert r.status_code == 200
    assert r.text.count("&#9733;") == 5 + 2
