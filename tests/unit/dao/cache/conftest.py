from unittest.mock import MagicMock

import pytest
import redis
from pytest import MonkeyPatch

from linkshortener.constants import ENV


@pytest.fixture
def app_prefix() -> str:
    return 'testapp:test'


@pytest.fixture(autouse=True)
def _env(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setenv(ENV.ElastiCache.HOST_PARAM, '/linkshortener/test/elasticache/host')
    monkeypatch.setenv(ENV.ElastiCache.PORT_PARAM, '/linkshortener/test/elasticache/port')
    monkeypatch.setenv(ENV.ElastiCache.DB_PARAM, '/linkshortener/test/elasticache/db')
    monkeypatch.setenv(ENV.ElastiCache.USER_PARAM, '/linkshortener/test/elasticache/user')
    monkeypatch.setenv(ENV.ElastiCache.SECRET, 'linkshortener/test/elasticache/credentials')


@pytest.fixture
def redis_client() -> redis.Redis:
    """Mock a Redis client answering the healthcheck."""
    client = MagicMock(spec=redis.Redis)
    client.connection_pool = MagicMock(
        spec=redis.ConnectionPool,
        connection_kwargs={'host': 'cache.test', 'port': 6379, 'db': 1},
    )
    client.ping.return_value = True
    client.get.return_value = None
    return client
