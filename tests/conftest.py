# tests/conftest.py
import pytest

from bookinfo.core.config import Settings, get_settings


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_settings():
    """Settings isolated from .env files; keyword arguments win over the environment."""
    def _make(**overrides) -> Settings:
        base = dict(HOSTNAME="pod-test", CLUSTER_NAME="cluster-test", SERVICE_VERSION="v1")
        base.update(overrides)
        return Settings(_env_file=None, **base)
    return _make
