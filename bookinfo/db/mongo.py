# bookinfo/db/mongo.py
import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from bookinfo.core.config import Settings
import certifi

logger = logging.getLogger(__name__)

RATINGS_COLLECTION = "ratings"

_client: AsyncIOMotorClient | None = None
_db: AsyncIOMotorDatabase | None = None


def get_db() -> AsyncIOMotorDatabase:
    assert _db is not None, "Mongo DB not initialized"
    return _db


def get_ratings_collection() -> AsyncIOMotorCollection:
    return get_db()[RATINGS_COLLECTION]


async def connect(settings: Settings):
    """
    Create the Motor client with bounded timeouts.
    IMPORTANT: do not crash the service if the initial ping fails; the client
    stays lazy and requests report "store unreachable" until Mongo answers.
    """
    global _client, _db

    timeout_ms = int(settings.STORE_TIMEOUT_S * 1000)
    kwargs = dict(
        uuidRepresentation="standard",
        serverSelectionTimeoutMS=timeout_ms,
        connectTimeoutMS=timeout_ms,
        socketTimeoutMS=timeout_ms,
    )
    if settings.MONGO_DB_URL.startswith("mongodb+srv://"):
        # SRV implies TLS; use an explicit CA bundle inside containers
        kwargs.update(tls=True, tlsCAFile=certifi.where())

    _client = AsyncIOMotorClient(settings.MONGO_DB_URL, **kwargs)
    _db = _client[settings.MONGO_DB_NAME]
    try:
        await _client.admin.command("ping")
        logger.info("✅ Mongo connected (ping ok) db=%s", settings.MONGO_DB_NAME)
    except Exception as e:
        logger.warning("⚠️ Mongo ping at startup failed, will retry lazily on first query: %s", e)


async def disconnect():
    global _client, _db
    if _client:
        _client.close()
    _client = None
    _db = None
