"""DAO for caching serialized link records in Redis

Responsibilities:
    - Store LinkModel JSON documents keyed by short code (no TTL applied):
        * cache:<prefix>:links:<shortcode>  -> LinkModel.to_json()
    - Rename cache keys atomically (RENAME, never delete + insert)
    - Invalidate entries on delete

Classes:
    LinkCacheDAO:
        Concrete cache tier backed by Redis. Uses RedisClientMixin to initialize
        the Redis client and assigns CacheKeySchema for key generation.

Example:
    >>> cache = LinkCacheDAO(redis_host='localhost', prefix='linkshortener:dev')
    >>> cache.get('abc1234') is None
    True
    >>> cache.set('abc1234', link)
    >>> cache.get('abc1234').long_link
    'https://example.com'
    >>> cache.rename('abc1234', 'promo')
    True
    >>> cache.rename('abc1234', 'promo')  # old key is gone: no-op
    False
"""

import json
import logging

import redis
from beartype import beartype

from linkshortener.constants import CACHE_ERROR
from linkshortener.models import LinkModel
from linkshortener.dao.base import LinkCacheBaseDAO
from linkshortener.dao.cache.cache_key_schema import CacheKeySchema
from linkshortener.dao.redis.mixins import RedisClientMixin
from linkshortener.dao.redis.helpers import handle_redis_connection_error


logger = logging.getLogger(__name__)


class LinkCacheDAO(RedisClientMixin, LinkCacheBaseDAO):
    """Redis-backed cache tier for link records

    Attributes (via mixins):
        redis (redis.Redis):
            Redis client used to communicate with the cache.
        keys (CacheKeySchema):
            Key schema helper for generating namespaced cache keys.
    """

    key_schema = CacheKeySchema

    @handle_redis_connection_error
    @beartype
    def exists(self, shortcode: str) -> bool:
        return bool(self.redis.exists(self.keys.link_key(shortcode)))

    @handle_redis_connection_error
    @beartype
    def get(self, shortcode: str) -> LinkModel | None:
        """Retrieve a cached link

        An entry which can't be deserialized is reported and treated as a
        cache miss; the next write-back overwrites it.

        Returns:
            LinkModel | None: the cached link, None on CACHE MISS.

        Raises:
            DataStoreError:
                If a Redis connectivity issue occurs (handled by decorator).
        """
        blob = self.redis.get(self.keys.link_key(shortcode))
        if blob is None:
            return None

        try:
            return LinkModel.from_json(blob)
        except (json.JSONDecodeError, KeyError, TypeError, ValueError):
            logger.warning(
                'Discarding malformed cache entry.',
                extra={'shortcode': shortcode, 'event': CACHE_ERROR},
            )
            return None

    @handle_redis_connection_error
    @beartype
    def set(self, shortcode: str, link: LinkModel) -> None:
        self.redis.set(self.keys.link_key(shortcode), link.to_json())

    @handle_redis_connection_error
    @beartype
    def rename(self, old_shortcode: str, new_shortcode: str) -> bool:
        """Rename a cache key if it exists

        RENAME is atomic on the Redis side, so there is no window in which
        neither key holds the record. Redis answers "no such key" when the old
        key is absent; that case is a no-op.

        Returns:
            bool: True if the key was renamed, False if the old key was absent.
        """
        try:
            self.redis.rename(self.keys.link_key(old_shortcode), self.keys.link_key(new_shortcode))
        except redis.exceptions.ResponseError as e:
            if 'no such key' in str(e).lower():
                return False
            raise
        return True

    @handle_redis_connection_error
    @beartype
    def remove(self, shortcode: str) -> bool:
        """Remove a cache entry (UNLINK); removing a missing key is a no-op

        Returns:
            bool: True if an entry was removed, False if there was none.
        """
        return bool(self.redis.unlink(self.keys.link_key(shortcode)))
