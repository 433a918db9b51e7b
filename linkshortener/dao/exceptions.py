"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    LinkNotFoundError:
        Raised when a LinkModel is not found in the data store.

    LinkAlreadyExistsError:
        Raised when attempting to store a LinkModel under a short code that is already taken.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, timeouts, OOM, etc.).

Example:
    >>> from linkshortener.dao.exceptions import LinkAlreadyExistsError
    >>> raise LinkAlreadyExistsError("Link with code 'abc123' already exists.")
    Traceback (most recent call last):
        ...
    linkshortener.dao.exceptions.LinkAlreadyExistsError: Link with code 'abc123' already exists.
"""


class DAOError(Exception):
    """Generic base class for DAO-related exceptions."""

    pass


class LinkNotFoundError(DAOError):
    """Exception raised when a LinkModel is not found in the data store."""

    pass


class LinkAlreadyExistsError(DAOError):
    """Exception raised when a short code is already taken in the data store."""

    pass


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, OOM, etc.
    """

    pass
