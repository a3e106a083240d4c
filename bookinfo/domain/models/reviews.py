from __future__ import annotations
from pydantic import BaseModel
from typing import Optional, List, Dict, Any, Mapping

# Reserved "no rating available" value, never a real score
SENTINEL_STARS = -1
UNAVAILABLE_LABEL = "Ratings service is unavailable"

REVIEWER_1 = "Reviewer1"
REVIEWER_2 = "Reviewer2"

class Rating(BaseModel):
    stars: int
    color: str

    model_config = {"frozen": True}

    @classmethod
    def unavailable(cls) -> "Rating":
        return cls(stars=SENTINEL_STARS, color=UNAVAILABLE_LABEL)

class Review(BaseModel):
    reviewer: str
    text: str
    rating: Optional[Rating] = None

class ReviewsResponse(BaseModel):
    id: str
    podname: str
    clustername: str
    reviews: List[Review]

    def to_payload(self) -> Dict[str, Any]:
        # A review without rating must not carry a "rating" key at all
        return self.model_dump(exclude_none=True)

class RatingsRecord(BaseModel):
    """
    Up to two reviewer scores for a product. None means "no score", never zero.
    """
    product_id: int
    reviewer1: Optional[int] = None
    reviewer2: Optional[int] = None

    model_config = {"frozen": True}

    @classmethod
    def from_mapping(cls, product_id: int, ratings: Mapping[str, int]) -> "RatingsRecord":
        return cls(product_id=product_id, reviewer1=ratings.get(REVIEWER_1), reviewer2=ratings.get(REVIEWER_2))

    @classmethod
    def from_scores(cls, product_id: int, scores: List[Optional[int]]) -> "RatingsRecord":
        """Map the first two scores onto reviewer1/reviewer2; anything beyond is dropped."""
        first = scores[0] if len(scores) > 0 else None
        second = scores[1] if len(scores) > 1 else None
        return cls(product_id=product_id, reviewer1=first, reviewer2=second)

    def ratings(self) -> Dict[str, int]:
        out: Dict[str, int] = {}
        if self.reviewer1 is not None:
            out[REVIEWER_1] = self.reviewer1
        if self.reviewer2 is not None:
            out[REVIEWER_2] = self.reviewer2
        return out

    def to_payload(self) -> Dict[str, Any]:
        return {"id": self.product_id, "ratings": self.ratings()}
