"""Unit tests for the LinkLifecycleManager

Test coverage includes:

1. Creation
   - Stores an ACTIVE link expiring one month from now, without caching it.
   - Rejects malformed URLs and missing owners.
   - Create then resolve returns the long URL with one recorded usage.

2. Deletion
   - Removes the record from both tiers, never-cached codes included.
   - Second delete raises NotFoundError; foreign requesters are forbidden.
   - Cache failures don't stop the delete.

3. Lookups with reconciliation
   - get(), exists(), find_all_by_owner(), find_all_active_by_owner(),
     usage_statistics_by_owner().

4. Short code rename

5. Field edits and reactivation
   - Edits and reactivations win over stale cached copies.

6. End-to-end expiry
"""

from dataclasses import replace
from datetime import datetime, timedelta, UTC
from unittest.mock import MagicMock

import pytest
from freezegun import freeze_time

from linkshortener.dao.exceptions import DataStoreError
from linkshortener.exceptions import (
    ForbiddenError,
    InactiveLinkError,
    InvalidArgumentError,
    InvalidShortCodeError,
    InvalidUrlError,
    NotFoundError,
    ShortCodeTakenError,
)
from linkshortener.models import LinkStatisticsModel, LinkStatus


NOW = datetime(2025, 10, 20, 12, 0, tzinfo=UTC)
PAST = datetime(2025, 10, 1, tzinfo=UTC)


# -------------------------------
# 1. Creation
# -------------------------------


@freeze_time(NOW)
def test_create_link(manager, store, cache):
    """Ensure create() stores a fresh ACTIVE link and leaves the cache alone."""
    link = manager.create('https://example.com/page', owner_id='user-1')

    assert store.find(link.short_link) == link
    assert link.owner_id == 'user-1'
    assert link.long_link == 'https://example.com/page'
    assert link.status == LinkStatus.ACTIVE
    assert link.usage_statistics == 0
    assert link.created_time == NOW
    assert link.expiration_time == datetime(2025, 11, 20, 12, 0, tzinfo=UTC)
    assert len(link.short_link) == 7
    assert cache.entries == {}


def test_create_assigns_distinct_ids_and_codes(manager):
    first = manager.create('https://example.com/a', owner_id='user-1')
    second = manager.create('https://example.com/a', owner_id='user-1')

    assert first.id != second.id
    assert first.short_link != second.short_link


@pytest.mark.parametrize('long_link', ['example.com', 'ftp://example.com', '', None])
def test_create_with_invalid_url(manager, store, long_link):
    with pytest.raises(InvalidUrlError):
        manager.create(long_link, owner_id='user-1')

    assert store.links == {}


@pytest.mark.parametrize('owner_id', [None, ''])
def test_create_without_owner(manager, owner_id):
    with pytest.raises(InvalidArgumentError, match="'owner_id'"):
        manager.create('https://example.com', owner_id=owner_id)


def test_create_retries_when_code_is_claimed_before_insert(manager, store, generator, monkeypatch):
    """Ensure a code grabbed between generation and insert leads to a fresh code."""
    codes = iter(['taken01', 'fresh01'])
    monkeypatch.setattr(generator, 'generate', lambda: next(codes))
    store.codes['taken01'] = 'someone-else'

    link = manager.create('https://example.com', owner_id='user-1')

    assert link.short_link == 'fresh01'


@freeze_time(NOW)
def test_create_then_resolve(manager, resolver, store):
    link = manager.create('https://example.com/page', owner_id='user-1')

    assert resolver.resolve(link.short_link) == 'https://example.com/page'
    assert store.find(link.short_link).usage_statistics == 1


# -------------------------------
# 2. Deletion
# -------------------------------


@freeze_time(NOW)
def test_delete_resolved_link(manager, resolver, store, cache):
    link = manager.create('https://example.com/page', owner_id='user-1')
    resolver.resolve(link.short_link)
    assert link.short_link in cache.entries

    manager.delete(link.short_link, requester_id='user-1')

    assert store.find(link.short_link) is None
    assert cache.entries == {}
    with pytest.raises(NotFoundError):
        resolver.resolve(link.short_link)


def test_delete_never_cached_link(manager, store, cache):
    link = manager.create('https://example.com/page', owner_id='user-1')

    manager.delete(link.short_link, requester_id='user-1')

    assert store.links == {}
    assert cache.entries == {}


def test_delete_twice(manager):
    link = manager.create('https://example.com/page', owner_id='user-1')
    manager.delete(link.short_link, requester_id='user-1')

    with pytest.raises(NotFoundError):
        manager.delete(link.short_link, requester_id='user-1')


def test_delete_by_another_user(manager, store):
    link = manager.create('https://example.com/page', owner_id='user-1')

    with pytest.raises(ForbiddenError):
        manager.delete(link.short_link, requester_id='user-2')

    assert store.find(link.short_link) == link


def test_delete_with_cache_down(manager, store, cache):
    link = manager.create('https://example.com/page', owner_id='user-1')
    cache.down = True

    manager.delete(link.short_link, requester_id='user-1')

    assert store.links == {}


@pytest.mark.parametrize('short_code, requester_id', [('', 'user-1'), ('abc1234', None)])
def test_delete_without_identifiers(manager, short_code, requester_id):
    with pytest.raises(InvalidArgumentError):
        manager.delete(short_code, requester_id=requester_id)


# -------------------------------
# 3. Lookups with reconciliation
# -------------------------------


@freeze_time(NOW)
def test_get_active_link_does_not_count_usage(manager, store, link):
    store.insert(link)

    assert manager.get('abc1234') == link
    assert store.writes == 0


@freeze_time(NOW)
def test_get_expired_link_is_reconciled(manager, store, cache, make_link):
    """Ensure get() flips an expired link, persists it and refreshes its cache entry."""
    expired = make_link(expiration_time=PAST)
    store.insert(expired)
    cache.set('abc1234', expired)

    link = manager.get('abc1234')

    assert link.status == LinkStatus.INACTIVE
    assert store.find('abc1234').status == LinkStatus.INACTIVE
    assert cache.cached('abc1234').status == LinkStatus.INACTIVE


def test_get_unknown_code(manager):
    with pytest.raises(NotFoundError):
        manager.get('missing')


def test_get_without_code(manager):
    with pytest.raises(InvalidArgumentError, match="'short_code'"):
        manager.get(None)


def test_exists(manager, store, link):
    store.insert(link)

    assert manager.exists('abc1234') is True
    assert manager.exists('missing') is False


@freeze_time(NOW)
def test_find_all_by_owner_reconciles(manager, store, make_link):
    active = make_link(id='id-1', short_link='active1', created_time=datetime(2025, 9, 1, tzinfo=UTC))
    expired = make_link(id='id-2', short_link='expired1', expiration_time=PAST, created_time=datetime(2025, 8, 1, tzinfo=UTC))
    foreign = make_link(id='id-3', short_link='foreign1', owner_id='user-2')
    for link in (active, expired, foreign):
        store.insert(link)

    links = manager.find_all_by_owner('user-1')

    assert [link.short_link for link in links] == ['expired1', 'active1']
    assert links[0].status == LinkStatus.INACTIVE
    assert store.find('expired1').status == LinkStatus.INACTIVE


@freeze_time(NOW)
def test_find_all_active_by_owner_excludes_flipped(manager, store, make_link):
    store.insert(make_link(id='id-1', short_link='active1'))
    store.insert(make_link(id='id-2', short_link='expired1', expiration_time=PAST))
    store.insert(make_link(id='id-3', short_link='inactive1', status=LinkStatus.INACTIVE))

    links = manager.find_all_active_by_owner('user-1')

    assert [link.short_link for link in links] == ['active1']
    assert store.find('expired1').status == LinkStatus.INACTIVE


def test_find_all_by_owner_without_owner(manager):
    with pytest.raises(InvalidArgumentError):
        manager.find_all_by_owner('')


@freeze_time(NOW)
def test_usage_statistics_by_owner(manager, store, make_link):
    store.insert(make_link(id='id-1', short_link='first1', usage_statistics=3))

    assert manager.usage_statistics_by_owner('user-1') == [
        LinkStatisticsModel(id='id-1', short_link='first1', long_link='https://example.com/article/123', usage_statistics=3)
    ]


# -------------------------------
# 4. Short code rename
# -------------------------------


@freeze_time(NOW)
def test_change_short_link_of_cached_link(manager, resolver, store, cache):
    """Ensure rename moves the store record and the present cache key."""
    link = manager.create('https://example.com/page', owner_id='user-1')
    resolver.resolve(link.short_link)

    renamed = manager.change_short_link(link.short_link, 'promo', requester_id='user-1')

    assert renamed.short_link == 'promo'
    assert store.find(link.short_link) is None
    assert store.find('promo').id == link.id
    assert link.short_link not in cache.entries
    assert cache.cached('promo').short_link == 'promo'
    assert resolver.resolve('promo') == 'https://example.com/page'


def test_change_short_link_of_uncached_link(manager, store, cache):
    link = manager.create('https://example.com/page', owner_id='user-1')

    manager.change_short_link(link.short_link, 'promo', requester_id='user-1')

    assert store.exists('promo')
    assert cache.entries == {}


@pytest.mark.parametrize('new_code', ['promo-2025', 'has space', ''])
def test_change_short_link_to_invalid_code(manager, new_code):
    link = manager.create('https://example.com/page', owner_id='user-1')

    with pytest.raises(InvalidShortCodeError):
        manager.change_short_link(link.short_link, new_code, requester_id='user-1')


def test_change_short_link_to_taken_code(manager):
    first = manager.create('https://example.com/a', owner_id='user-1')
    second = manager.create('https://example.com/b', owner_id='user-1')

    with pytest.raises(ShortCodeTakenError, match='This short code already exists.'):
        manager.change_short_link(first.short_link, second.short_link, requester_id='user-1')


def test_change_short_link_to_same_code(manager):
    link = manager.create('https://example.com/a', owner_id='user-1')

    with pytest.raises(ShortCodeTakenError):
        manager.change_short_link(link.short_link, link.short_link, requester_id='user-1')


def test_change_short_link_by_another_user(manager):
    link = manager.create('https://example.com/a', owner_id='user-1')

    with pytest.raises(ForbiddenError):
        manager.change_short_link(link.short_link, 'promo', requester_id='user-2')


# -------------------------------
# 5. Field edits and reactivation
# -------------------------------


@freeze_time(NOW)
def test_update_long_link(manager, resolver, store, cache):
    link = manager.create('https://example.com/old', owner_id='user-1')
    resolver.resolve(link.short_link)

    updated = manager.update_long_link(link.short_link, 'https://example.com/new', requester_id='user-1')

    assert updated.long_link == 'https://example.com/new'
    assert store.find(link.short_link).long_link == 'https://example.com/new'
    assert cache.cached(link.short_link).long_link == 'https://example.com/new'


def test_update_long_link_with_invalid_url(manager, store):
    link = manager.create('https://example.com/old', owner_id='user-1')

    with pytest.raises(InvalidUrlError):
        manager.update_long_link(link.short_link, 'not a url', requester_id='user-1')

    assert store.find(link.short_link).long_link == 'https://example.com/old'


@freeze_time(NOW)
def test_reactivate_expired_link(manager, resolver, store, make_link):
    """Ensure reactivation restores ACTIVE and restarts the expiration window."""
    store.insert(make_link(expiration_time=PAST))
    with pytest.raises(InactiveLinkError):
        resolver.resolve('abc1234')

    reactivated = manager.reactivate('abc1234', requester_id='user-1')

    assert reactivated.status == LinkStatus.ACTIVE
    assert reactivated.expiration_time == datetime(2025, 11, 20, 12, 0, tzinfo=UTC)
    assert resolver.resolve('abc1234') == 'https://example.com/article/123'


def test_reactivate_by_another_user(manager, store, link):
    store.insert(link)

    with pytest.raises(ForbiddenError):
        manager.reactivate('abc1234', requester_id='user-2')


@freeze_time(NOW)
def test_update_long_link_survives_stale_cache_entry(manager, resolver, store, cache, monkeypatch):
    """Ensure resolving a stale cached copy never writes the old URL back to the store."""
    link = manager.create('https://example.com/old', owner_id='user-1')
    resolver.resolve(link.short_link)

    monkeypatch.setattr(cache, 'exists', MagicMock(side_effect=DataStoreError('cache is down')))
    manager.update_long_link(link.short_link, 'https://example.com/new', requester_id='user-1')
    assert cache.cached(link.short_link).long_link == 'https://example.com/old'
    monkeypatch.undo()

    assert resolver.resolve(link.short_link) == 'https://example.com/new'
    assert store.find(link.short_link).long_link == 'https://example.com/new'
    assert store.find(link.short_link).usage_statistics == 2
    assert cache.cached(link.short_link).long_link == 'https://example.com/new'


@freeze_time(NOW)
def test_reactivate_survives_stale_inactive_cache_entry(manager, resolver, store, cache, make_link):
    store.insert(make_link(expiration_time=PAST))
    with pytest.raises(InactiveLinkError):
        resolver.resolve('abc1234')
    assert cache.cached('abc1234').status == LinkStatus.INACTIVE

    cache.down = True
    manager.reactivate('abc1234', requester_id='user-1')
    cache.down = False

    assert resolver.resolve('abc1234') == 'https://example.com/article/123'
    assert cache.cached('abc1234').status == LinkStatus.ACTIVE
    assert store.find('abc1234').usage_statistics == 1


# -------------------------------
# 6. End-to-end expiry
# -------------------------------


@freeze_time(NOW)
def test_link_expiring_after_first_use(manager, resolver, store, cache):
    """Create, resolve, let the link expire, then resolve again."""
    link = manager.create('https://example.com', owner_id='user-1')
    assert resolver.resolve(link.short_link) == 'https://example.com'

    expired = replace(store.find(link.short_link), expiration_time=NOW - timedelta(hours=1))
    store.links[link.id] = expired
    cache.set(link.short_link, expired)

    with pytest.raises(InactiveLinkError):
        resolver.resolve(link.short_link)

    assert store.find(link.short_link).status == LinkStatus.INACTIVE
    assert store.find(link.short_link).usage_statistics == 1
    assert cache.cached(link.short_link).status == LinkStatus.INACTIVE
