# tests/test_details_api.py
import pytest
from fastapi.testclient import TestClient

from bookinfo.api.deps import get_http_client
from bookinfo.apps.details import create_app
from helpers import RecordingTransport, json_response, raise_timeout

VOLUME = {
    "items": [{
        "volumeInfo": {
            "authors": ["William Shakespeare"],
            "publishedDate": "2002-11-01",
            "printType": "BOOK",
            "pageCount": 64,
            "publisher": "Dover Publications",
            "language": "en",
            "industryIdentifiers": [
                {"type": "ISBN_10", "identifier": "0486424618"},
                {"type": "ISBN_13", "identifier": "9780486424613"},
            ],
        }
    }]
}


def _client(make_settings, routes=None, **overrides):
    transport = RecordingTransport(routes or {})
    app = create_app(make_settings(**overrides))
    app.dependency_overrides[get_http_client] = transport.client_dependency()
    return TestClient(app), transport


def test_synthesized_details(make_settings):
    client, transport = _client(make_settings)
    with client:
        r = client.get("/details/0")

    assert r.status_code == 200
    assert r.json() == {
        "id": 0,
        "author": "William Shakespeare",
        "year": 1595,
        "type": "paperback",
        "pages": 200,
        "publisher": "PublisherA",
        "language": "English",
        "ISBN-10": "1234567890",
        "ISBN-13": "123-1234567890",
    }
    assert transport.requests == []


def test_details_id_is_echoed(make_settings):
    client, _ = _client(make_settings)
    with client:
        assert client.get("/details/12").json()["id"] == 12


@pytest.mark.parametrize("raw", ["abc", "1e3"])
def test_non_numeric_id_is_400(make_settings, raw):
    client, _ = _client(make_settings)
    with client:
        r = client.get(f"/details/{raw}")
    assert r.status_code == 400
    assert r.json() == {"error": "please provide numeric product id"}


def test_external_lookup_is_mapped(make_settings):
    client, transport = _client(
        make_settings,
        {"/books/v1/volumes": json_response(200, VOLUME)},
        ENABLE_EXTERNAL_BOOK_SERVICE=True,
    )
    with client:
        r = client.get("/details/3", headers={"x-request-id": "req-7"})

    assert r.status_code == 200
    assert r.json() == {
        "id": 3,
        "author": "William Shakespeare",
        "year": 2002,
        "type": "paperback",
        "pages": 64,
        "publisher": "Dover Publications",
        "language": "English",
        "ISBN-10": "0486424618",
        "ISBN-13": "9780486424613",
    }
    sent = transport.requests[0]
    assert sent.url.params["q"] == "isbn:0486424618"
    assert sent.headers["x-request-id"] == "req-7"


@pytest.mark.parametrize(
    "handler",
    [json_response(500, {}), json_response(200, {"totalItems": 0}), raise_timeout],
)
def test_external_failure_is_500(make_settings, handler):
    client, _ = _client(
        make_settings,
        {"/books/v1/volumes": handler},
        ENABLE_EXTERNAL_BOOK_SERVICE=True,
    )
    with client:
        r = client.get("/details/0")
    assert r.status_code == 500
    assert "error" in r.json()


@pytest.mark.parametrize("raw", [str(2 ** 63), "9" * 5000])
def test_oversized_id_is_400(make_settings, raw):
    client, _ = _client(make_settings)
    with client:
        r = client.get(f"/details/{raw}")
    assert r.status_code == 400
    assert r.json() == {"error": "please provide numeric product id"}


def test_malformed_identifier_entry_is_lookup_error(make_settings):
    volume = {"items": [{"volumeInfo": dict(VOLUME["items"][0]["volumeInfo"], industryIdentifiers=["0486424618"])}]}
    client, _ = _client(
        make_settings,
        {"/books/v1/volumes": json_response(200, volume)},
        ENABLE_EXTERNAL_BOOK_SERVICE=True,
    )
    with client:
        r = client.get("/details/0")
    assert r.status_code == 500
    assert r.json()["error"].startswith("unexpected external book payload")
