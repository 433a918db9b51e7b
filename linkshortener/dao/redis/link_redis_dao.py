"""Data Access Object (DAO) implementation for link records stored in Redis

This module provides a Redis-based implementation of LinkBaseDAO, the durable
backing store (source of truth) for LinkModel instances.

Responsibilities:
    - Insert, update, rename and delete link records;
    - Record resolution outcomes without touching the other fields;
    - Guarantee short code uniqueness via SET NX on the short code index key;
    - Maintain the per-owner link index;
    - Increment the global counter used for short code generation;
    - Provide defensive error handling and raise appropriate DAO exceptions.

Classes:
    LinkRedisDAO:
        DAO for storing and retrieving LinkModel in a Redis datastore.

Example:
    >>> from linkshortener.dao.redis import LinkRedisDAO

    >>> dao = LinkRedisDAO(prefix="linkshortener:dev")
    >>> dao.insert(link)
    LinkModel(id='...', short_link='abc1234', ...)

    >>> dao.find('abc1234').long_link
    'https://example.com/page'

    >>> dao.count(increment=True)
    124
"""

from contextlib import suppress
from dataclasses import replace

import redis
from beartype import beartype

from linkshortener.models import LinkModel, LinkStatus
from linkshortener.dao.base import LinkBaseDAO, RESOLUTION_FIELDS
from linkshortener.dao.redis.mixins import RedisClientMixin
from linkshortener.dao.redis.helpers import handle_redis_connection_error
from linkshortener.dao.exceptions import LinkAlreadyExistsError, LinkNotFoundError


# Fields fixed at creation or changed only through rename()
_IMMUTABLE_FIELDS = frozenset({'id', 'owner_id', 'short_link'})


class LinkRedisDAO(RedisClientMixin, LinkBaseDAO):
    """Redis-based Data Access Object (DAO) for link records

    This class implements the LinkBaseDAO interface using Redis as a data store.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    NOTE:
        record_resolution() overwrites fields without any compare-and-swap. Two
        concurrent resolutions of the same link may both write back
        `usage_statistics + 1` and lose one increment (last writer wins).
        A WATCH/MULTI transaction on the link hash would serialize them if
        exact counters are ever required.
    """

    def _load(self, link_id: str) -> LinkModel | None:
        data = self.redis.hgetall(self.keys.link_key(link_id))
        return LinkModel.from_dict(data) if data else None

    @handle_redis_connection_error
    @beartype
    def find(self, shortcode: str, **kwargs) -> LinkModel | None:
        """Retrieve a link by short code

        Args:
            shortcode (str):
                The short code to look up.

        Returns:
            LinkModel | None:
                The stored link, None if the short code is unknown.

        Raises:
            DataStoreError:
                If Redis connectivity issues occur.
        """
        link_id = self.redis.get(self.keys.shortcode_key(shortcode))
        if link_id is None:
            return None
        return self._load(link_id)

    @handle_redis_connection_error
    @beartype
    def find_all_by_owner(self, owner_id: str, **kwargs) -> list[LinkModel]:
        """Retrieve every link owned by a user, oldest first

        All link hashes are fetched in a single pipeline round trip.
        """
        link_ids = sorted(self.redis.smembers(self.keys.owner_links_key(owner_id)))
        if not link_ids:
            return []

        with self.redis.pipeline(transaction=False) as pipe:
            for link_id in link_ids:
                pipe.hgetall(self.keys.link_key(link_id))
            rows = pipe.execute()

        links = [LinkModel.from_dict(row) for row in rows if row]
        return sorted(links, key=lambda link: link.created_time)

    @handle_redis_connection_error
    @beartype
    def find_all_active_by_owner(self, owner_id: str, **kwargs) -> list[LinkModel]:
        """Retrieve every link owned by a user whose persisted status is ACTIVE

        NOTE: the persisted status may be stale (expired but not yet flipped).
              Reconciliation is the caller's responsibility.
        """
        return [link for link in self.find_all_by_owner(owner_id) if link.status == LinkStatus.ACTIVE]

    @handle_redis_connection_error
    @beartype
    def insert(self, link: LinkModel, **kwargs) -> LinkModel:
        """Insert a link record into Redis

        The short code is claimed first with SET NX, which is atomic: two
        concurrent inserts of the same short code can never both succeed.
        The link hash and the owner index are then written in one transaction;
        if that transaction fails the claim is released again.

        Args:
            link (LinkModel):
                LinkModel instance to insert.

        Returns:
            LinkModel: the inserted link

        Raises:
            LinkAlreadyExistsError:
                If a link with the same short code already exists.
            DataStoreError:
                If a Redis connection issue occurs.

        Example:
            >>> dao.insert(link)
            LinkModel(id='...', short_link='abc1234', ...)
        """
        claim_key = self.keys.shortcode_key(link.short_link)
        if not self.redis.set(claim_key, link.id, nx=True):
            raise LinkAlreadyExistsError(f"Link with code '{link.short_link}' already exists.")

        try:
            with self.redis.pipeline(transaction=True) as pipe:
                pipe.hset(self.keys.link_key(link.id), mapping=link.to_dict())
                pipe.sadd(self.keys.owner_links_key(link.owner_id), link.id)
                pipe.execute()
        except redis.exceptions.RedisError:
            with suppress(redis.exceptions.RedisError):
                self.redis.delete(claim_key)
            raise
        return link

    @handle_redis_connection_error
    @beartype
    def save(self, link: LinkModel, **kwargs) -> LinkModel:
        """Overwrite the mutable fields of a stored link

        `id`, `owner_id` and `short_link` are never written here, so a stale
        snapshot written back after a rename cannot resurrect the old short code.

        Raises:
            LinkNotFoundError:
                If the link doesn't exist (e.g. deleted concurrently).
            DataStoreError:
                If a Redis connection issue occurs.
        """
        link_key = self.keys.link_key(link.id)
        if not self.redis.exists(link_key):
            raise LinkNotFoundError(f"Link with id '{link.id}' not found.")

        mapping = {field: value for field, value in link.to_dict().items() if field not in _IMMUTABLE_FIELDS}
        self.redis.hset(link_key, mapping=mapping)
        return link

    @handle_redis_connection_error
    @beartype
    def record_resolution(self, link: LinkModel, fields: tuple[str, ...] = RESOLUTION_FIELDS, **kwargs) -> LinkModel:
        """Write the resolution fields named in `fields`, then read the link back

        The write and the read run in one transaction, so the returned link is
        the stored record right after the write: its `long_link`, `short_link`
        and unwritten fields are the current ones even if `link` came from a
        stale cache entry.

        Args:
            link (LinkModel):
                Link carrying the new field values.
            fields (tuple[str, ...]):
                Subset of `usage_statistics`, `expiration_time` and `status`.

        Raises:
            ValueError:
                If `fields` is empty or names any other field.
            LinkNotFoundError:
                If the link doesn't exist (e.g. deleted concurrently).
            DataStoreError:
                If a Redis connection issue occurs.
        """
        if not fields or not set(fields) <= set(RESOLUTION_FIELDS):
            raise ValueError(f'A resolution can only write {RESOLUTION_FIELDS} (given: {fields!r}).')

        link_key = self.keys.link_key(link.id)
        if not self.redis.exists(link_key):
            raise LinkNotFoundError(f"Link with id '{link.id}' not found.")

        values = link.to_dict()
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.hset(link_key, mapping={field: values[field] for field in fields})
            pipe.hgetall(link_key)
            _, stored = pipe.execute()

        # Deleted between the existence check and the write: drop the partial hash
        if 'id' not in stored:
            self.redis.delete(link_key)
            raise LinkNotFoundError(f"Link with id '{link.id}' not found.")
        return LinkModel.from_dict(stored)

    @handle_redis_connection_error
    @beartype
    def rename(self, link: LinkModel, new_shortcode: str, **kwargs) -> LinkModel:
        """Move a link to a new short code

        The new short code is claimed with SET NX before the old index key is
        released, so the link is reachable under at least one code at all times.

        Raises:
            LinkNotFoundError:
                If the link doesn't exist.
            LinkAlreadyExistsError:
                If the new short code is already taken.
            DataStoreError:
                If a Redis connection issue occurs.
        """
        link_key = self.keys.link_key(link.id)
        if not self.redis.exists(link_key):
            raise LinkNotFoundError(f"Link with id '{link.id}' not found.")

        if not self.redis.set(self.keys.shortcode_key(new_shortcode), link.id, nx=True):
            raise LinkAlreadyExistsError(f"Link with code '{new_shortcode}' already exists.")

        with self.redis.pipeline(transaction=True) as pipe:
            pipe.delete(self.keys.shortcode_key(link.short_link))
            pipe.hset(link_key, 'short_link', new_shortcode)
            pipe.execute()
        return replace(link, short_link=new_shortcode)

    @handle_redis_connection_error
    @beartype
    def delete(self, link: LinkModel, **kwargs) -> None:
        """Delete a link record, its short code index entry and its owner index entry"""
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.delete(self.keys.link_key(link.id))
            pipe.delete(self.keys.shortcode_key(link.short_link))
            pipe.srem(self.keys.owner_links_key(link.owner_id), link.id)
            pipe.execute()

    @handle_redis_connection_error
    @beartype
    def exists(self, shortcode: str, **kwargs) -> bool:
        return bool(self.redis.exists(self.keys.shortcode_key(shortcode)))

    @handle_redis_connection_error
    def count(self, increment: bool = False, **kwargs) -> int:
        """Retrieve global link counter

        Args:
            increment (bool):
                If True, increments the counter. Otherwise, retrieves its value.

        Returns:
            int:
                The updated or current global counter value.

        Example:
            >>> dao.count(increment=False)
            123
            >>> dao.count(increment=True)
            124
        """
        if increment:
            return int(self.redis.incr(self.keys.counter_key()))
        else:
            return int(self.redis.get(self.keys.counter_key()) or 0)
