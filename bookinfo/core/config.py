from functools import lru_cache
from typing import Literal
import os
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["development", "production"]
DbType = Literal["mongodb", "mysql"]

# SERVICE_VERSION values that start the availability / health toggling timers
CHAOS_UNAVAILABLE_VERSIONS = {"v-unavailable", "v-chaos"}
CHAOS_UNHEALTHY_VERSIONS = {"v-unhealthy", "v-chaos"}
DATABASE_BACKED_VERSION = "v2"

def _env_file_for(app_env: EnvName) -> str:
    return ".env.development" if app_env == "development" else ".env.production"

class Settings(BaseSettings):

    # Core
    APP_ENV: EnvName = "development"
    APP_NAME: str = "Bookinfo"
    DEBUG: bool = False

    # Topology (productpage -> {details, reviews -> ratings})
    SERVICES_DOMAIN: str = ""
    PRODUCTPAGE_HOSTNAME: str = "localhost"
    PRODUCTPAGE_SERVICE_PORT: int = 8083
    DETAILS_HOSTNAME: str = "localhost"
    DETAILS_SERVICE_PORT: int = 9084
    REVIEWS_HOSTNAME: str = "localhost"
    REVIEWS_SERVICE_PORT: int = 9086
    RATINGS_HOSTNAME: str = "localhost"
    RATINGS_SERVICE_PORT: int = 8085

    # Details
    ENABLE_EXTERNAL_BOOK_SERVICE: bool = False
    EXTERNAL_BOOKS_URL: str = "https://www.googleapis.com/books/v1/volumes"
    BOOK_ISBN: str = "0486424618"

    # Reviews
    ENABLE_RATINGS: bool = True
    STAR_COLOR: str = "black"
    HOSTNAME: str = "unknown"        # pod label
    CLUSTER_NAME: str = "unknown"

    # Ratings: "v1" in-memory, "v2" database backed, "v-unavailable" / "v-unhealthy" / "v-chaos" simulators
    SERVICE_VERSION: str = "v1"
    DB_TYPE: DbType = "mongodb"

    # MySQL
    MYSQL_DB_HOST: str = "localhost"
    MYSQL_DB_PORT: int = 3306
    MYSQL_DB_USER: str = "root"
    MYSQL_DB_PASSWORD: str = ""
    MYSQL_DB_NAME: str = "ratingsdb"

    # Mongo
    MONGO_DB_URL: str = "mongodb://localhost:27017"
    MONGO_DB_NAME: str = "test"

    # Timeouts (seconds)
    STORE_TIMEOUT_S: float = 5.0
    DOWNSTREAM_TIMEOUT_S: float = 15.0      # productpage -> details/reviews/ratings
    RATINGS_TIMEOUT_S: float = 10.0         # reviews -> ratings
    EXTERNAL_BOOKS_TIMEOUT_S: float = 5.0   # details -> external metadata provider

    # Health simulator cadences (seconds)
    UNAVAILABLE_TOGGLE_INTERVAL_S: float = 60.0
    UNHEALTHY_TOGGLE_INTERVAL_S: float = 15 * 60.0

    # pydantic-settings config will be set dynamically in the factory below
    model_config = SettingsConfigDict(env_file=None, case_sensitive=True, extra="ignore")

    @property
    def database_backed(self) -> bool:
        return self.SERVICE_VERSION == DATABASE_BACKED_VERSION

    @property
    def toggles_availability(self) -> bool:
        return self.SERVICE_VERSION in CHAOS_UNAVAILABLE_VERSIONS

    @property
    def toggles_health(self) -> bool:
        return self.SERVICE_VERSION in CHAOS_UNHEALTHY_VERSIONS

@lru_cache
def get_settings() -> Settings:
    """
    Factory that chooses the right .env file based on APP_ENV.
    Cache makes it cheap to inject via FastAPI dependencies; tests call
    get_settings.cache_clear() after changing the environment.
    """
    app_env: EnvName = os.getenv("APP_ENV", "development")  # earliest switch
    env_file = _env_file_for(app_env)
    return Settings(
                _env_file=env_file,  # load .env.development or .env.production
                _env_file_encoding="utf-8"
    )
