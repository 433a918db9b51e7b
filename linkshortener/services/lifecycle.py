"""Link lifecycle management

Creates, edits, renames, reactivates and deletes links. Every mutation goes
to the backing store first (source of truth) and is then mirrored into the
cache tier through the LinkResolver:

    - create:   store insert only; the link is cached on its first resolution
    - edit:     store save, then overwrite the cache entry if one exists
    - rename:   store rename, then cache key rename, then cache overwrite
    - delete:   cache entry removed, then store record deleted

Reads (get, find_all_*) reconcile what they return: a link whose expiration
has passed but is still persisted as ACTIVE is flipped to INACTIVE, saved,
and its cache entry refreshed.

Classes:
    LinkLifecycleManager

Example:
    >>> manager = LinkLifecycleManager(store, resolver, generator)
    >>> link = manager.create('https://example.com/page', owner_id='user-1')
    >>> manager.change_short_link(link.short_link, 'promo', requester_id='user-1').short_link
    'promo'
"""

import uuid
import logging
from dataclasses import replace
from datetime import datetime, UTC

from linkshortener.constants import (
    LINK_CREATED,
    LINK_DELETED,
    LINK_EXPIRED,
    LINK_NOT_FOUND,
    LINK_REACTIVATED,
    LINK_RENAMED,
    LINK_UPDATED,
    SHORTCODE_COLLISION,
)
from linkshortener.dao.base import LinkBaseDAO
from linkshortener.dao.exceptions import LinkAlreadyExistsError, LinkNotFoundError
from linkshortener.exceptions import (
    ForbiddenError,
    GenerationExhaustedError,
    NotFoundError,
    ShortCodeTakenError,
)
from linkshortener.models import LinkModel, LinkStatisticsModel, LinkStatus
from linkshortener.services.code_generator import CodeGenerator
from linkshortener.services.resolver import LinkResolver
from linkshortener.utils.helpers import one_month_from
from linkshortener.utils.validators import require_identifier, validate_long_link, validate_shortcode


logger = logging.getLogger(__name__)


class LinkLifecycleManager:
    """Create, update and delete links across both storage tiers

    Args:
        store (LinkBaseDAO):
            Durable backing store.
        resolver (LinkResolver):
            Resolution engine, used for every cache tier update.
        generator (CodeGenerator):
            Source of new short codes.
    """

    def __init__(self, store: LinkBaseDAO, resolver: LinkResolver, generator: CodeGenerator):
        self.store = store
        self.resolver = resolver
        self.generator = generator

    def create(self, long_link: str, owner_id: str) -> LinkModel:
        """Create an ACTIVE link expiring one month from now

        Raises:
            InvalidUrlError:
                If `long_link` is not an absolute http(s) URL.
            InvalidArgumentError:
                If `owner_id` is missing.
            GenerationExhaustedError:
                If no unique short code could be generated.
        """
        long_link = validate_long_link(long_link)
        require_identifier(owner_id, 'owner_id')

        # A generated code can still be claimed by a concurrent rename
        # between the generator's existence check and the insert.
        for _ in range(self.generator.max_attempts):
            now = datetime.now(UTC)
            link = LinkModel(
                id=str(uuid.uuid4()),
                owner_id=owner_id,
                long_link=long_link,
                short_link=self.generator.generate(),
                created_time=now,
                expiration_time=one_month_from(now),
            )
            try:
                self.store.insert(link)
            except LinkAlreadyExistsError:
                logger.warning(
                    'Short code claimed before insert.',
                    extra={'shortcode': link.short_link, 'event': SHORTCODE_COLLISION},
                )
                continue

            logger.info(
                'Link created.',
                extra={'shortcode': link.short_link, 'ownerId': owner_id, 'event': LINK_CREATED},
            )
            return link

        raise GenerationExhaustedError()

    def delete(self, short_code: str, requester_id: str) -> None:
        """Delete a link from both tiers

        The cache entry goes first so no cached copy outlives the record.
        Cache failures are logged by the resolver and do not stop the delete.

        Raises:
            NotFoundError:
                If the short code is unknown.
            ForbiddenError:
                If `requester_id` does not own the link.
        """
        link = self._owned_link(short_code, requester_id)

        self.resolver.invalidate(link.short_link)
        self.store.delete(link)
        logger.info('Link deleted.', extra={'shortcode': short_code, 'ownerId': requester_id, 'event': LINK_DELETED})

    def get(self, short_code: str) -> LinkModel:
        """Return a link with its status reconciled, without counting a usage

        Raises:
            InvalidArgumentError:
                If `short_code` is missing.
            NotFoundError:
                If the short code is unknown.
        """
        require_identifier(short_code, 'short_code')

        link = self.store.find(short_code)
        if link is not None:
            link = self._reconcile(link, datetime.now(UTC))
        if link is None:
            logger.info('Short code not found.', extra={'shortcode': short_code, 'event': LINK_NOT_FOUND})
            raise NotFoundError()
        return link

    def exists(self, short_code: str) -> bool:
        require_identifier(short_code, 'short_code')
        return self.store.exists(short_code)

    def find_all_by_owner(self, owner_id: str) -> list[LinkModel]:
        """Return every link of an owner, oldest first, with statuses reconciled"""
        require_identifier(owner_id, 'owner_id')
        return self._reconcile_all(self.store.find_all_by_owner(owner_id))

    def find_all_active_by_owner(self, owner_id: str) -> list[LinkModel]:
        """Return the owner's ACTIVE links

        Links found expired while reading are flipped to INACTIVE and left out.
        """
        require_identifier(owner_id, 'owner_id')
        links = self._reconcile_all(self.store.find_all_active_by_owner(owner_id))
        return [link for link in links if link.is_active]

    def usage_statistics_by_owner(self, owner_id: str) -> list[LinkStatisticsModel]:
        return [LinkStatisticsModel.from_link(link) for link in self.find_all_by_owner(owner_id)]

    def change_short_link(self, short_code: str, new_code: str, requester_id: str) -> LinkModel:
        """Move a link to a new short code chosen by its owner

        Raises:
            InvalidShortCodeError:
                If `new_code` is empty or not alphanumeric.
            ShortCodeTakenError:
                If `new_code` is already used (including by this link).
            NotFoundError:
                If the short code is unknown.
            ForbiddenError:
                If `requester_id` does not own the link.
        """
        new_code = validate_shortcode(new_code)
        link = self._owned_link(short_code, requester_id)

        if self.store.exists(new_code):
            raise ShortCodeTakenError()

        try:
            renamed = self.store.rename(link, new_code)
        except LinkAlreadyExistsError as e:
            raise ShortCodeTakenError() from e
        except LinkNotFoundError as e:
            raise NotFoundError() from e

        self.resolver.rename(short_code, new_code)
        self.resolver.overwrite_cache(new_code, renamed)

        logger.info(
            'Link renamed.',
            extra={'shortcode': new_code, 'previousShortcode': short_code, 'event': LINK_RENAMED},
        )
        return renamed

    def update_long_link(self, short_code: str, long_link: str, requester_id: str) -> LinkModel:
        """Point a link at a new long URL

        Raises:
            InvalidUrlError:
                If `long_link` is not an absolute http(s) URL.
            NotFoundError, ForbiddenError:
                As in delete().
        """
        long_link = validate_long_link(long_link)
        link = self._owned_link(short_code, requester_id)

        updated = self._save(replace(link, long_link=long_link))
        logger.info('Link updated.', extra={'shortcode': short_code, 'event': LINK_UPDATED})
        return updated

    def reactivate(self, short_code: str, requester_id: str) -> LinkModel:
        """Mark a link ACTIVE again and restart its expiration window"""
        link = self._owned_link(short_code, requester_id)

        reactivated = self._save(replace(link, status=LinkStatus.ACTIVE, expiration_time=one_month_from()))
        logger.info('Link reactivated.', extra={'shortcode': short_code, 'event': LINK_REACTIVATED})
        return reactivated

    def _owned_link(self, short_code: str, requester_id: str) -> LinkModel:
        require_identifier(short_code, 'short_code')
        require_identifier(requester_id, 'requester_id')

        link = self.store.find(short_code)
        if link is None:
            logger.info('Short code not found.', extra={'shortcode': short_code, 'event': LINK_NOT_FOUND})
            raise NotFoundError()
        if link.owner_id != requester_id:
            raise ForbiddenError()
        return link

    def _save(self, link: LinkModel) -> LinkModel:
        try:
            saved = self.store.save(link)
        except LinkNotFoundError as e:
            raise NotFoundError() from e
        self.resolver.overwrite_cache(saved.short_link, saved)
        return saved

    def _reconcile(self, link: LinkModel, now: datetime) -> LinkModel | None:
        """Flip an expired ACTIVE link to INACTIVE; None if it vanished meanwhile"""
        if not (link.is_active and link.is_expired(now)):
            return link

        try:
            flipped = self._save(replace(link, status=LinkStatus.INACTIVE))
        except NotFoundError:
            return None

        logger.info('Link expired.', extra={'shortcode': link.short_link, 'event': LINK_EXPIRED})
        return flipped

    def _reconcile_all(self, links: list[LinkModel]) -> list[LinkModel]:
        now = datetime.now(UTC)
        reconciled = (self._reconcile(link, now) for link in links)
        return [link for link in reconciled if link is not None]
