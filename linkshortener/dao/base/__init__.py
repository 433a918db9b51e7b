from linkshortener.dao.base.link_base_dao import LinkBaseDAO, RESOLUTION_FIELDS
from linkshortener.dao.base.link_cache_base_dao import LinkCacheBaseDAO


__all__ = [
    'LinkBaseDAO',
    'LinkCacheBaseDAO',
    'RESOLUTION_FIELDS',
]
