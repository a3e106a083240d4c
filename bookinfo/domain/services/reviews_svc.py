# bookinfo/domain/services/reviews_svc.py
import logging
import math
from typing import Any, Dict, Mapping, Optional, Tuple

from bookinfo.clients.downstream import DownstreamClient
from bookinfo.core.errors import DownstreamError, DownstreamUnavailable
from bookinfo.domain.models.reviews import (
    REVIEWER_1,
    REVIEWER_2,
    Rating,
    Review,
    ReviewsResponse,
)

logger = logging.getLogger(__name__)

REVIEW_TEXTS: Tuple[Tuple[str, str], ...] = (
    (REVIEWER_1, "An extremely entertaining play by Shakespeare. The slapstick humour is refreshing!"),
    (REVIEWER_2, "Absolutely fun and entertaining. The play lacks thematic depth when compared to other plays by Shakespeare."),
)


def _score(value: Any) -> Optional[int]:
    # JSON numbers only; bool is an int subclass but not a score, negatives collide with the sentinel
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None  # 1e999 and NaN decode to inf/nan
    score = int(value)
    return score if score >= 0 else None


def extract_scores(payload: Mapping[str, Any]) -> Tuple[Optional[int], Optional[int]]:
    """Read ratings.Reviewer1 / ratings.Reviewer2 out of a ratings service body."""
    ratings = payload.get("ratings")
    if not isinstance(ratings, dict):
        return None, None
    return _score(ratings.get(REVIEWER_1)), _score(ratings.get(REVIEWER_2))


async def fetch_ratings(
    product_id: str,
    headers: Mapping[str, str],
    ratings_client: DownstreamClient,
) -> Optional[Dict[str, Any]]:
    """Ratings body, or None when the ratings service cannot be used for this request."""
    try:
        return await ratings_client.get_json(f"/ratings/{product_id}", headers)
    except (DownstreamUnavailable, DownstreamError) as e:
        logger.warning("reviews: ratings unavailable for product_id=%s: %s", product_id, e.message)
        return None


def build_reviews(
    star_color: str,
    ratings_enabled: bool,
    scores: Tuple[Optional[int], Optional[int]] = (None, None),
) -> list:
    reviews = []
    for (reviewer, text), score in zip(REVIEW_TEXTS, scores):
        rating = None
        if ratings_enabled:
            rating = Rating(stars=score, color=star_color) if score is not None else Rating.unavailable()
        reviews.append(Review(reviewer=reviewer, text=text, rating=rating))
    return reviews


async def get_reviews_svc(
    product_id: str,
    headers: Mapping[str, str],
    *,
    ratings_client: DownstreamClient,
    ratings_enabled: bool,
    star_color: str,
    podname: str,
    clustername: str,
) -> ReviewsResponse:
    """
    Two fixed reviews, decorated with ratings when enabled.
    - ratings disabled: no rating on either review
    - ratings call failed: both reviews carry the sentinel rating
    - partial ratings body: the missing reviewer keeps the sentinel
    """
    scores: Tuple[Optional[int], Optional[int]] = (None, None)
    if ratings_enabled:
        payload = await fetch_ratings(product_id, headers, ratings_client)
        if payload is not None:
            scores = extract_scores(payload)
        logger.info("reviews product_id=%s scores=%s", product_id, scores)

    return ReviewsResponse(
        id=product_id,
        podname=podname,
        clustername=clustername,
        reviews=build_reviews(star_color, ratings_enabled, scores),
    )
