# bookinfo/domain/repositories/ratings_repo.py
from __future__ import annotations
import asyncio
import logging
import threading
from typing import Any, Dict, List, Mapping, Optional, Protocol

from bson.errors import BSONError
from fastapi.concurrency import run_in_threadpool
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import ConnectionFailure, PyMongoError
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlmodel import Session, select

from bookinfo.core.errors import (
    RatingsDecodeError,
    RatingsNotFound,
    StoreQueryError,
    StoreUnreachable,
    Unimplemented,
)
from bookinfo.db.mysql import RatingRow
from bookinfo.domain.models.reviews import REVIEWER_1, REVIEWER_2, RatingsRecord

logger = logging.getLogger(__name__)

# At most two reviewer scores are ever surfaced, whatever the backend holds
MAX_SCORES = 2
DEFAULT_RATINGS: Dict[str, int] = {REVIEWER_1: 5, REVIEWER_2: 4}
DB_PUT_NOT_IMPLEMENTED = "Post not implemented for database backed ratings"


def _as_score(value: Any) -> Optional[int]:
    """Integers only; bools, floats, strings and None are not scores."""
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return int(value)


class RatingsStore(Protocol):
    """
    Capability shared by every ratings backend. Selected once at startup.
    fetch() raises RatingsNotFound / StoreUnreachable / StoreQueryError / RatingsDecodeError;
    put() raises Unimplemented on read-only backends.
    """
    name: str

    async def fetch(self, product_id: int) -> RatingsRecord: ...

    async def put(self, product_id: int, ratings: Mapping[str, int]) -> RatingsRecord: ...


class InMemoryRatingsStore:
    """
    Process-local ratings. Unseen products answer with DEFAULT_RATINGS.
    A lock per product id serializes put/fetch on the same key.
    """
    name = "memory"

    def __init__(self, defaults: Mapping[str, int] = DEFAULT_RATINGS):
        self._defaults = dict(defaults)
        self._records: Dict[int, RatingsRecord] = {}
        self._locks: Dict[int, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, product_id: int) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(product_id, threading.Lock())

    async def fetch(self, product_id: int) -> RatingsRecord:
        # Reads never create a lock: only written keys own one
        with self._locks_guard:
            lock = self._locks.get(product_id)
        record = None
        if lock is not None:
            with lock:
                record = self._records.get(product_id)
        if record is None:
            return RatingsRecord.from_mapping(product_id, self._defaults)
        return record

    async def put(self, product_id: int, ratings: Mapping[str, int]) -> RatingsRecord:
        record = RatingsRecord.from_mapping(product_id, ratings)
        with self._lock_for(product_id):
            self._records[product_id] = record
        logger.info("ratings put product_id=%s ratings=%s", product_id, record.ratings())
        return record


class RelationalRatingsStore:
    """
    MySQL-backed ratings (any SQLAlchemy engine works, tests use SQLite).
    Runs the fixed query "SELECT Rating FROM ratings LIMIT 2"; the table carries
    no product column, so every product sees the same two rows.
    """
    name = "mysql"

    def __init__(self, engine: Engine, timeout_s: float = 5.0):
        self.engine = engine
        self.timeout_s = timeout_s

    def _select_scores(self) -> List[Any]:
        try:
            conn = self.engine.connect()
        except (DBAPIError, SQLAlchemyError) as e:
            logger.error("ratings mysql connect failed: %s", e)
            raise StoreUnreachable("could not connect to ratings database") from e

        with conn:
            try:
                with Session(bind=conn) as session:
                    return list(session.exec(select(RatingRow.Rating).limit(MAX_SCORES)).all())
            except SQLAlchemyError as e:
                logger.error("ratings mysql select failed: %s", e)
                raise StoreQueryError("could not perform select") from e

    async def fetch(self, product_id: int) -> RatingsRecord:
        try:
            rows = await asyncio.wait_for(run_in_threadpool(self._select_scores), timeout=self.timeout_s)
        except asyncio.TimeoutError as e:
            raise StoreUnreachable("could not connect to ratings database") from e

        if not rows:
            raise RatingsNotFound("ratings not found")

        scores: List[Optional[int]] = []
        for value in rows[:MAX_SCORES]:
            score = _as_score(value)
            if score is None:
                logger.error("ratings mysql non-integer rating value=%r", value)
                raise RatingsDecodeError("could not retrieve ratings")
            scores.append(score)
        return RatingsRecord.from_scores(product_id, scores)

    async def put(self, product_id: int, ratings: Mapping[str, int]) -> RatingsRecord:
        raise Unimplemented(DB_PUT_NOT_IMPLEMENTED)


class DocumentRatingsStore:
    """
    MongoDB-backed ratings: documents {"id": <product id>, "rating": <int>}.
    0, 1 or 2 matching documents give 0, 1 or 2 scores; a wrongly typed "rating" is absent.
    """
    name = "mongodb"

    def __init__(self, collection: AsyncIOMotorCollection, timeout_s: float = 5.0):
        self.col = collection
        self.timeout_s = timeout_s

    async def fetch(self, product_id: int) -> RatingsRecord:
        try:
            cursor = self.col.find({"id": product_id}, {"_id": 0, "rating": 1})
            docs = await asyncio.wait_for(cursor.to_list(length=MAX_SCORES), timeout=self.timeout_s)
        except (asyncio.TimeoutError, ConnectionFailure) as e:
            logger.error("ratings mongo unreachable product_id=%s err=%s", product_id, e)
            raise StoreUnreachable("could not connect to ratings database") from e
        except BSONError as e:
            logger.error("ratings mongo decode failed product_id=%s err=%s", product_id, e)
            raise RatingsDecodeError("could not decode ratings") from e
        except PyMongoError as e:
            logger.error("ratings mongo find failed product_id=%s err=%s", product_id, e)
            raise StoreQueryError("could not load ratings from database") from e

        scores: List[Optional[int]] = []
        for doc in docs[:MAX_SCORES]:
            score = _as_score(doc.get("rating"))
            if score is None:
                logger.warning("ratings mongo ignoring non-integer rating product_id=%s value=%r", product_id, doc.get("rating"))
            scores.append(score)
        return RatingsRecord.from_scores(product_id, scores)

    async def put(self, product_id: int, ratings: Mapping[str, int]) -> RatingsRecord:
        raise Unimplemented(DB_PUT_NOT_IMPLEMENTED)
