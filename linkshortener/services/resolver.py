"""Link resolution engine

Maps a short code to its long URL through the two storage tiers:

    1. Cache tier (LinkCacheBaseDAO), looked up first by exact short code
    2. Backing store (LinkBaseDAO), the source of truth, on CACHE MISS

Each resolution reconciles the record it touched: an expired link is flipped
to INACTIVE and persisted; an active one gets its usage counter incremented
and its expiration pushed one month ahead. Both tiers are written before the
long URL is returned.

A resolution writes only `status` (expiry) or `usage_statistics` and
`expiration_time` (success) to the store, and caches the record the store
returns. The long URL returned is the stored one, never a stale cached copy.

The cache is best-effort. DataStoreError raised by the cache tier is logged
and swallowed: reads fall back to the store, and the store write is the one
that counts. Errors from the backing store propagate unchanged.

Classes:
    LinkResolver

Example:
    >>> resolver = LinkResolver(store=LinkRedisDAO(...), cache=LinkCacheDAO(...))
    >>> resolver.resolve('abc1234')
    'https://example.com/page'
"""

import logging
from dataclasses import replace
from datetime import datetime, UTC

from linkshortener.constants import (
    CACHE_ERROR,
    CACHE_HIT,
    CACHE_MISS,
    LINK_EXPIRED,
    LINK_INACTIVE,
    LINK_NOT_FOUND,
    LINK_RESOLVED,
)
from linkshortener.dao.base import LinkBaseDAO, LinkCacheBaseDAO
from linkshortener.dao.exceptions import DataStoreError, LinkNotFoundError
from linkshortener.exceptions import InactiveLinkError, NotFoundError
from linkshortener.models import LinkModel, LinkStatus
from linkshortener.utils.helpers import one_month_from


logger = logging.getLogger(__name__)

_USAGE_FIELDS = ('usage_statistics', 'expiration_time')
_STATUS_FIELDS = ('status',)


class LinkResolver:
    """Resolve short codes and keep the cache tier in step with the store

    Args:
        store (LinkBaseDAO):
            Durable backing store.
        cache (LinkCacheBaseDAO):
            Cache tier keyed by short code.

    NOTE:
        No locks are taken. Two concurrent resolutions of one code may both
        write `usage_statistics + 1` and lose an increment (last writer wins).
    """

    def __init__(self, store: LinkBaseDAO, cache: LinkCacheBaseDAO):
        self.store = store
        self.cache = cache

    def resolve(self, short_code: str) -> str:
        """Return the long URL of a short code and record the usage

        Args:
            short_code (str):
                Short code to resolve.

        Returns:
            str: the long URL.

        Raises:
            NotFoundError:
                If neither tier knows the short code.
            InactiveLinkError:
                If the link is INACTIVE or has just expired.
            DataStoreError:
                If the backing store is unreachable.
        """
        now = datetime.now(UTC)
        cached = self._cached(short_code)

        # A cached copy that would not resolve is checked against the store
        link = cached if cached is not None and cached.is_active and not cached.is_expired(now) else None
        if link is None:
            link = self.store.find(short_code)
            if link is None:
                if cached is not None:
                    self.invalidate(short_code)
                logger.info('Short code not found.', extra={'shortcode': short_code, 'event': LINK_NOT_FOUND})
                raise NotFoundError()

        if link.status == LinkStatus.INACTIVE:
            logger.info('Link is inactive.', extra={'shortcode': short_code, 'event': LINK_INACTIVE})
            raise InactiveLinkError()

        if link.is_expired(now):
            self._persist(short_code, replace(link, status=LinkStatus.INACTIVE), _STATUS_FIELDS)
            logger.info('Link expired.', extra={'shortcode': short_code, 'event': LINK_EXPIRED})
            raise InactiveLinkError()

        # fmt: off
        resolved = self._persist(short_code, replace(link,
                                                     usage_statistics=link.usage_statistics + 1,
                                                     expiration_time=one_month_from(now)), _USAGE_FIELDS)
        # fmt: on
        if not resolved.is_active:
            # cached as ACTIVE, deactivated in the store meanwhile
            logger.info('Link is inactive.', extra={'shortcode': short_code, 'event': LINK_INACTIVE})
            raise InactiveLinkError()

        logger.info(
            'Link resolved.',
            extra={'shortcode': short_code, 'usageStatistics': resolved.usage_statistics, 'event': LINK_RESOLVED},
        )
        return resolved.long_link

    def rename(self, old_code: str, new_code: str) -> None:
        """Move a cache entry to a new key; no-op when the old key is not cached"""
        try:
            self.cache.rename(old_code, new_code)
        except DataStoreError:
            self._log_cache_error(old_code, 'rename')

    def overwrite_cache(self, short_code: str, link: LinkModel) -> None:
        """Replace a cached entry, only if the short code is currently cached

        Links which have never been resolved stay out of the cache.
        """
        try:
            if self.cache.exists(short_code):
                self.cache.set(short_code, link)
        except DataStoreError:
            self._log_cache_error(short_code, 'overwrite')

    def invalidate(self, short_code: str) -> None:
        """Drop the cache entry of a short code; missing entries are a no-op"""
        try:
            self.cache.remove(short_code)
        except DataStoreError:
            self._log_cache_error(short_code, 'remove')

    def _cached(self, short_code: str) -> LinkModel | None:
        try:
            link = self.cache.get(short_code)
        except DataStoreError:
            self._log_cache_error(short_code, 'get')
            return None

        event = CACHE_MISS if link is None else CACHE_HIT
        logger.debug('Cache lookup.', extra={'shortcode': short_code, 'event': event})
        return link

    def _persist(self, short_code: str, link: LinkModel, fields: tuple[str, ...]) -> LinkModel:
        """Record a resolution outcome in the store, then cache the stored link

        Only `fields` are written and the cache gets the record read back from
        the store, so a stale cached copy is corrected rather than written back. A record that is gone or no longer
        sits under `short_code` (deleted or renamed concurrently) has its cache
        entry dropped and is reported as not found.
        """
        try:
            stored = self.store.record_resolution(link, fields=fields)
        except LinkNotFoundError:
            stored = None

        if stored is None or stored.short_link != short_code:
            self.invalidate(short_code)
            logger.info('Short code not found.', extra={'shortcode': short_code, 'event': LINK_NOT_FOUND})
            raise NotFoundError()

        self._write_back(short_code, stored)
        return stored

    def _write_back(self, short_code: str, link: LinkModel) -> None:
        try:
            self.cache.set(short_code, link)
        except DataStoreError:
            self._log_cache_error(short_code, 'set')

    @staticmethod
    def _log_cache_error(short_code: str, operation: str) -> None:
        logger.warning(
            'Cache tier unavailable, continuing with the backing store.',
            exc_info=True,
            extra={'shortcode': short_code, 'operation': operation, 'event': CACHE_ERROR},
        )
