"""In-memory implementations of the storage ports for service-level tests.

InMemoryLinkStore mirrors LinkRedisDAO semantics (SET NX short code claims,
atomic counter, immutable id/owner/short code on save, resolutions writing
only the named fields and returning the stored record). InMemoryLinkCache
mirrors LinkCacheDAO, storing the serialized JSON form so every cache hit
goes through LinkModel.from_json(). Both can be switched into a failing mode
raising DataStoreError.
"""

import threading
from dataclasses import replace

import pytest

from linkshortener.dao.base import LinkBaseDAO, LinkCacheBaseDAO, RESOLUTION_FIELDS
from linkshortener.dao.exceptions import DataStoreError, LinkAlreadyExistsError, LinkNotFoundError
from linkshortener.models import LinkModel, LinkStatus
from linkshortener.services import CodeGenerator, LinkLifecycleManager, LinkResolver


class InMemoryLinkStore(LinkBaseDAO):
    def __init__(self):
        self.links: dict[str, LinkModel] = {}  # id -> link
        self.codes: dict[str, str] = {}  # short code -> id
        self.counter = 0
        self.writes = 0
        self.down = False
        self._lock = threading.Lock()

    def _check(self):
        if self.down:
            raise DataStoreError("Can't connect to Redis at store.test:6379/0.")

    def find(self, shortcode, **kwargs):
        self._check()
        link_id = self.codes.get(shortcode)
        return self.links.get(link_id) if link_id is not None else None

    def find_all_by_owner(self, owner_id, **kwargs):
        self._check()
        owned = [link for link in self.links.values() if link.owner_id == owner_id]
        return sorted(owned, key=lambda link: link.created_time)

    def find_all_active_by_owner(self, owner_id, **kwargs):
        return [link for link in self.find_all_by_owner(owner_id) if link.status == LinkStatus.ACTIVE]

    def insert(self, link, **kwargs):
        self._check()
        with self._lock:
            if link.short_link in self.codes:
                raise LinkAlreadyExistsError(f"Link with code '{link.short_link}' already exists.")
            self.codes[link.short_link] = link.id
            self.links[link.id] = link
        return link

    def save(self, link, **kwargs):
        self._check()
        self.writes += 1
        stored = self.links.get(link.id)
        if stored is None:
            raise LinkNotFoundError(f"Link with id '{link.id}' not found.")
        self.links[link.id] = replace(link, owner_id=stored.owner_id, short_link=stored.short_link)
        return link

    def record_resolution(self, link, fields=RESOLUTION_FIELDS, **kwargs):
        self._check()
        if not fields or not set(fields) <= set(RESOLUTION_FIELDS):
            raise ValueError(f'A resolution can only write {RESOLUTION_FIELDS} (given: {fields!r}).')
        self.writes += 1
        with self._lock:
            stored = self.links.get(link.id)
            if stored is None:
                raise LinkNotFoundError(f"Link with id '{link.id}' not found.")
            stored = replace(stored, **{field: getattr(link, field) for field in fields})
            self.links[link.id] = stored
        return stored

    def rename(self, link, new_shortcode, **kwargs):
        self._check()
        with self._lock:
            stored = self.links.get(link.id)
            if stored is None:
                raise LinkNotFoundError(f"Link with id '{link.id}' not found.")
            if new_shortcode in self.codes:
                raise LinkAlreadyExistsError(f"Link with code '{new_shortcode}' already exists.")
            self.codes[new_shortcode] = link.id
            del self.codes[stored.short_link]
            self.links[link.id] = replace(stored, short_link=new_shortcode)
        return replace(link, short_link=new_shortcode)

    def delete(self, link, **kwargs):
        self._check()
        self.links.pop(link.id, None)
        self.codes.pop(link.short_link, None)

    def exists(self, shortcode, **kwargs):
        self._check()
        return shortcode in self.codes

    def count(self, increment=False, **kwargs):
        self._check()
        with self._lock:
            if increment:
                self.counter += 1
            return self.counter


class InMemoryLinkCache(LinkCacheBaseDAO):
    def __init__(self):
        self.entries: dict[str, str] = {}
        self.down = False

    def _check(self):
        if self.down:
            raise DataStoreError("Can't connect to Redis at cache.test:6379/1.")

    def exists(self, shortcode):
        self._check()
        return shortcode in self.entries

    def get(self, shortcode):
        self._check()
        blob = self.entries.get(shortcode)
        return LinkModel.from_json(blob) if blob is not None else None

    def set(self, shortcode, link):
        self._check()
        self.entries[shortcode] = link.to_json()

    def rename(self, old_shortcode, new_shortcode):
        self._check()
        if old_shortcode not in self.entries:
            return False
        self.entries[new_shortcode] = self.entries.pop(old_shortcode)
        return True

    def remove(self, shortcode):
        self._check()
        return self.entries.pop(shortcode, None) is not None

    def cached(self, shortcode) -> LinkModel | None:
        """Peek at an entry without going through the failure switch."""
        blob = self.entries.get(shortcode)
        return LinkModel.from_json(blob) if blob is not None else None


@pytest.fixture
def store() -> InMemoryLinkStore:
    return InMemoryLinkStore()


@pytest.fixture
def cache() -> InMemoryLinkCache:
    return InMemoryLinkCache()


@pytest.fixture
def generator(store) -> CodeGenerator:
    return CodeGenerator(store, salt='unit_test_salt')


@pytest.fixture
def resolver(store, cache) -> LinkResolver:
    return LinkResolver(store, cache)


@pytest.fixture
def manager(store, resolver, generator) -> LinkLifecycleManager:
    return LinkLifecycleManager(store, resolver, generator)
