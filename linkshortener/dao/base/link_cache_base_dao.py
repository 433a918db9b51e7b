"""Abstract base class for the link cache tier.

The cache tier holds serialized LinkModel records keyed by short code.
Entries carry no TTL: they are invalidated explicitly by the lifecycle
manager and refreshed by the resolver on every read.

Example:
    >>> from linkshortener.dao.cache import LinkCacheDAO
    >>> cache = LinkCacheDAO(redis_client=client, prefix='linkshortener:dev')
    >>> cache.set('abc1234', link)
    >>> cache.get('abc1234') == link
    True
    >>> cache.rename('abc1234', 'promo2025')
    True
    >>> cache.remove('abc1234')
    False
"""

from abc import ABC, abstractmethod

from linkshortener.models import LinkModel


class LinkCacheBaseDAO(ABC):
    """Interface for link cache DAOs.

    Methods:
        exists(shortcode: str) -> bool:
            True if a cache entry exists for the short code.

        get(shortcode: str) -> LinkModel | None:
            Deserialized cache entry, None on cache miss.

        set(shortcode: str, link: LinkModel) -> None:
            Store the serialized link under the short code.

        rename(old_shortcode: str, new_shortcode: str) -> bool:
            Rename the cache key. No-op returning False when the old key is absent.

        remove(shortcode: str) -> bool:
            Remove the cache entry. No-op returning False when absent.

    All methods raise DataStoreError on connectivity issues.
    """

    @abstractmethod
    def exists(self, shortcode: str) -> bool:
        pass

    @abstractmethod
    def get(self, shortcode: str) -> LinkModel | None:
        pass

    @abstractmethod
    def set(self, shortcode: str, link: LinkModel) -> None:
        pass

    @abstractmethod
    def rename(self, old_shortcode: str, new_shortcode: str) -> bool:
        pass

    @abstractmethod
    def remove(self, shortcode: str) -> bool:
        pass
