from linkshortener.dao.cache.cache_key_schema import CacheKeySchema
from linkshortener.dao.cache.link_cache_dao import LinkCacheDAO
from linkshortener.dao.cache.mixins import CacheEndpoint, ElastiCacheClientMixin
from linkshortener.dao.cache.elasticache_link_cache_dao import ElastiCacheLinkCacheDAO

__all__ = [
    'CacheKeySchema',
    'LinkCacheDAO',
    'CacheEndpoint',
    'ElastiCacheClientMixin',
    'ElastiCacheLinkCacheDAO',
]
