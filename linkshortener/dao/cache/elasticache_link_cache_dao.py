from linkshortener.dao.cache.mixins import ElastiCacheClientMixin
from linkshortener.dao.cache.link_cache_dao import LinkCacheDAO


class ElastiCacheLinkCacheDAO(ElastiCacheClientMixin, LinkCacheDAO):
    """Link cache tier connected to AWS ElastiCache.

    Connection parameters come from SSM Parameter Store and credentials from
    Secrets Manager (see ElastiCacheClientMixin); cache operations are the ones
    of LinkCacheDAO.

    Example:
        >>> cache = ElastiCacheLinkCacheDAO(prefix='linkshortener:prod')
        >>> cache.exists('abc1234')
        False
    """
