"""Redis client setup shared by the backing store and the cache tier.

Classes:
    - RedisClientMixin: Connects a DAO to Redis, checks the connection and
      attaches the DAO's key schema.

NOTE:
    redis-py checks a connection out of the client's ConnectionPool for every
    command (or pipeline) and releases it in a `finally` block, so no DAO method
    holds a connection beyond its own call.

Example:
    >>> class LinkRedisDAO(RedisClientMixin, LinkBaseDAO):
    ...     pass
    ...
    >>> dao = LinkRedisDAO(redis_host='localhost', prefix='linkshortener:dev')
    >>> dao.keys.link_key('5f0c2a3e')
    'linkshortener:dev:links:5f0c2a3e'
"""

from typing import Optional

import redis

from linkshortener.dao.redis.redis_key_schema import RedisKeySchema
from linkshortener.dao.exceptions import DataStoreError


class RedisClientMixin:
    """Attach a Redis client and a key schema to a DAO

    Link records are read back as text, so clients are always created with
    decode_responses=True. An injected `redis_client` must be configured the
    same way.

    Args:
        redis_host, redis_port, redis_db, redis_username, redis_password:
            Connection parameters, used only when `redis_client` is None.
        redis_client (Optional[redis.Redis]):
            Pre-initialized client, e.g. one built by ElastiCacheClientMixin.
        prefix (Optional[str]):
            Namespace prefix for all keys, e.g. 'app:env'.

    Attributes:
        key_schema (type):
            Key schema class instantiated with `prefix`. Cache DAOs override it.
        redis (redis.Redis):
            Active client.
        keys:
            Key schema instance.

    Raises:
        DataStoreError:
            If Redis does not answer the healthcheck.
    """

    key_schema = RedisKeySchema

    def __init__(
        self,
        redis_host: Optional[str] = 'localhost',
        redis_port: Optional[int] = 6379,
        redis_db: Optional[int] = 0,
        redis_username: Optional[str] = None,
        redis_password: Optional[str] = None,
        redis_client: Optional[redis.Redis] = None,
        prefix: Optional[str] = None,
    ):
        if redis_client is None:
            redis_client = redis.Redis(
                host=redis_host,
                port=int(redis_port),
                db=int(redis_db),
                decode_responses=True,
                username=redis_username,
                password=redis_password,
            )

        self.redis = redis_client
        self.keys = self.key_schema(prefix=prefix)

        self._healthcheck()

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING Redis; False (or DataStoreError if `raise_error`) when unreachable"""
        try:
            self.redis.ping()
        except redis.exceptions.ConnectionError as e:
            if not raise_error:
                return False
            info = self.redis.connection_pool.connection_kwargs
            raise DataStoreError(
                f"Can't connect to Redis at {info.get('host')}:{info.get('port')}/{info.get('db')}. "
                'Check the provided configuration parameters.'
            ) from e
        return True
