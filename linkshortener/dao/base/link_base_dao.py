"""Abstract base class for link backing store data access objects (DAOs).

This class establishes a consistent contract for all backing store implementations,
regardless of the underlying storage mechanism (e.g., Redis, DynamoDB, PostgreSQL).
The backing store is the source of truth for link records.

Responsibilities:
    - Provide an interface for inserting, updating, renaming and deleting LinkModel objects.
    - Provide lookups by short code and by owner.
    - Provide the global counter used to derive new short codes.
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from linkshortener.dao.redis import LinkRedisDAO

        >>> dao = LinkRedisDAO(...)
        >>> dao.insert(link)
        >>> dao.find('a1b2c3').long_link
        'https://example.com/blog/article-123'
        >>> dao.find('missing') is None
        True
"""

from abc import ABC, abstractmethod

from linkshortener.models import LinkModel


# Fields a resolution may write (see LinkBaseDAO.record_resolution)
RESOLUTION_FIELDS = ('usage_statistics', 'expiration_time', 'status')


class LinkBaseDAO(ABC):
    """Interface for link backing store DAOs.

    Methods:
        find(shortcode: str) -> LinkModel | None:
            Retrieve a link by short code, None if absent.

        find_all_by_owner(owner_id: str) -> list[LinkModel]:
            Retrieve every link owned by a user.

        find_all_active_by_owner(owner_id: str) -> list[LinkModel]:
            Retrieve every link owned by a user whose persisted status is ACTIVE.

        insert(link: LinkModel) -> LinkModel:
            Insert a new link. Raises LinkAlreadyExistsError if the short code is taken.

        save(link: LinkModel) -> LinkModel:
            Overwrite the stored fields of an existing link.
            Raises LinkNotFoundError if the link doesn't exist.

        record_resolution(link: LinkModel) -> LinkModel:
            Write some of usage statistics, expiration and status; return the stored link.

        rename(link: LinkModel, new_shortcode: str) -> LinkModel:
            Move a link to a new short code.
            Raises LinkAlreadyExistsError if the new short code is taken.

        delete(link: LinkModel) -> None:
            Delete a link.

        exists(shortcode: str) -> bool:
            True if a link with the short code exists.

        count(increment: bool) -> int:
            Return (and optionally increment) the global counter.

    All methods raise DataStoreError on connection or I/O failure.
    """

    @abstractmethod
    def find(self, shortcode: str, **kwargs) -> LinkModel | None:
        pass

    @abstractmethod
    def find_all_by_owner(self, owner_id: str, **kwargs) -> list[LinkModel]:
        pass

    @abstractmethod
    def find_all_active_by_owner(self, owner_id: str, **kwargs) -> list[LinkModel]:
        pass

    @abstractmethod
    def insert(self, link: LinkModel, **kwargs) -> LinkModel:
        """Insert a new LinkModel into the data store.

        Args:
            link (LinkModel):
                The LinkModel instance to be inserted.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            LinkModel: the inserted link

        Raises:
            LinkAlreadyExistsError:
                If a link with the same short code already exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def save(self, link: LinkModel, **kwargs) -> LinkModel:
        """Overwrite every mutable field of an existing link.

        The link is identified by its id; `short_link` changes go through rename().

        Raises:
            LinkNotFoundError:
                If no link with the given id exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def record_resolution(self, link: LinkModel, fields: tuple[str, ...] = RESOLUTION_FIELDS, **kwargs) -> LinkModel:
        """Write the outcome of a resolution and return the stored link.

        Only the RESOLUTION_FIELDS named in `fields` are written; every other
        field keeps its stored value, so a stale snapshot can't roll back an
        edit.

        Returns:
            LinkModel: the link as stored after the write

        Raises:
            LinkNotFoundError:
                If no link with the given id exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def rename(self, link: LinkModel, new_shortcode: str, **kwargs) -> LinkModel:
        """Move a link from its current short code to a new one.

        Returns:
            LinkModel: the link carrying the new short code

        Raises:
            LinkAlreadyExistsError:
                If the new short code is already taken.

            LinkNotFoundError:
                If the link doesn't exist.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def delete(self, link: LinkModel, **kwargs) -> None:
        pass

    @abstractmethod
    def exists(self, shortcode: str, **kwargs) -> bool:
        pass

    @abstractmethod
    def count(self, increment: bool = False, **kwargs) -> int:
        """Retrieve the current counter value from the data store.

        Args:
            increment (bool):
                If True, increment the counter by 1 before returning the value.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            int: The current counter value.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass
