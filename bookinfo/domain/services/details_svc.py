# bookinfo/domain/services/details_svc.py
import logging
import time
from typing import Any, Dict, Mapping

import httpx

from bookinfo.core.config import Settings
from bookinfo.core.errors import DetailsLookupError
from bookinfo.core.headers import attach_headers
from bookinfo.domain.models.product import DetailsRecord

logger = logging.getLogger(__name__)


def synthesized_details(product_id: int) -> DetailsRecord:
    """Fixed fallback record, stamped with the requested product id."""
    return DetailsRecord(
        id=product_id,
        author="William Shakespeare",
        year=1595,
        type="paperback",
        pages=200,
        publisher="PublisherA",
        language="English",
        isbn10="1234567890",
        isbn13="123-1234567890",
    )


def _isbn(volume: Dict[str, Any], isbn_type: str) -> str:
    for identifier in volume.get("industryIdentifiers") or []:
        if identifier.get("type") == isbn_type:
            return identifier.get("identifier", "")
    return ""


def _publication_year(published: str) -> int:
    try:
        return int(published[:4])
    except (TypeError, ValueError):
        logger.warning("details could not extract year from publishedDate=%r", published)
        return 0


def details_from_volume(product_id: int, volume: Dict[str, Any]) -> DetailsRecord:
    """
    Map a Google Books `volumeInfo` onto a DetailsRecord.
    Raises KeyError / IndexError / TypeError when mandatory fields are missing.
    """
    return DetailsRecord(
        id=product_id,
        author=volume["authors"][0],
        year=_publication_year(volume.get("publishedDate", "")),
        type="paperback" if volume.get("printType") == "BOOK" else "unknown",
        pages=int(volume["pageCount"]),
        publisher=volume["publisher"],
        language="English" if volume.get("language") == "en" else "unknown",
        isbn10=_isbn(volume, "ISBN_10"),
        isbn13=_isbn(volume, "ISBN_13"),
    )


async def fetch_details_from_external_service(
    isbn: str,
    product_id: int,
    headers: Mapping[str, str],
    *,
    http: httpx.AsyncClient,
    url: str,
    timeout_s: float,
) -> DetailsRecord:
    t0 = time.perf_counter()
    try:
        resp = await http.get(
            url,
            params={"q": f"isbn:{isbn}"},
            headers=attach_headers(headers, {}),
            timeout=timeout_s,
        )
        resp.raise_for_status()
        result = resp.json()
    except httpx.HTTPError as e:
        logger.error("details external lookup failed isbn=%s err=%r", isbn, e)
        raise DetailsLookupError(f"external book service error: {e}") from e
    except ValueError as e:
        raise DetailsLookupError("external book service returned a malformed body") from e

    try:
        volume = result["items"][0]["volumeInfo"]
        details = details_from_volume(product_id, volume)
    except (KeyError, IndexError, TypeError, ValueError, AttributeError) as e:
        logger.error("details external payload not usable isbn=%s err=%r", isbn, e)
        raise DetailsLookupError(f"unexpected external book payload: {e!r}") from e

    logger.info("details external lookup ok isbn=%s time=%.3fs", isbn, time.perf_counter() - t0)
    return details


async def get_book_details_svc(
    product_id: int,
    headers: Mapping[str, str],
    *,
    settings: Settings,
    http: httpx.AsyncClient,
) -> DetailsRecord:
    if settings.ENABLE_EXTERNAL_BOOK_SERVICE:
        return await fetch_details_from_external_service(
            settings.BOOK_ISBN,
            product_id,
            headers,
            http=http,
            url=settings.EXTERNAL_BOOKS_URL,
            timeout_s=settings.EXTERNAL_BOOKS_TIMEOUT_S,
        )
    return synthesized_details(product_id)
