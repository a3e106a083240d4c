# bookinfo/db/mysql.py
import logging
from typing import Optional

from sqlalchemy.engine import Engine
from sqlmodel import Field, SQLModel, create_engine

from bookinfo.core.config import Settings

logger = logging.getLogger(__name__)


class RatingRow(SQLModel, table=True):
    """ratingsdb.ratings: one row per review, no product column."""
    __tablename__ = "ratings"

    ReviewID: Optional[int] = Field(default=None, primary_key=True)
    Rating: Optional[int] = None


def mysql_url(settings: Settings) -> str:
    return (
        f"mysql+pymysql://{settings.MYSQL_DB_USER}:{settings.MYSQL_DB_PASSWORD}"
        f"@{settings.MYSQL_DB_HOST}:{settings.MYSQL_DB_PORT}/{settings.MYSQL_DB_NAME}"
    )


def create_mysql_engine(settings: Settings) -> Engine:
    """
    Lazy engine: nothing connects until the first query, so a missing database
    surfaces as "store unreachable" on requests instead of a startup crash.
    """
    timeout = max(1, int(settings.STORE_TIMEOUT_S))
    engine = create_engine(
        mysql_url(settings),
        echo=False,
        pool_pre_ping=True,
        pool_recycle=3600,
        connect_args={"connect_timeout": timeout, "read_timeout": timeout, "write_timeout": timeout},
    )
    logger.info(
        "MySQL engine ready host=%s port=%s db=%s",
        settings.MYSQL_DB_HOST, settings.MYSQL_DB_PORT, settings.MYSQL_DB_NAME,
    )
    return engine


def dispose(engine: Optional[Engine]) -> None:
    if engine is not None:
        engine.dispose()
