"""Application-specific errors raised by the link resolution core.

Every error carries a stable `error_code` and a default message suitable for
direct display. The transport layer maps these to its own status codes.

Classes:
    LinkShortenerError:
        Base exception for all application-specific errors.

    NotFoundError, InactiveLinkError, InvalidUrlError, ForbiddenError,
    InvalidArgumentError, GenerationExhaustedError:
        Link domain errors.

    InvalidShortCodeError, ShortCodeTakenError:
        Raised when renaming a link to an unusable short code.

    ConfigurationError, MissingEnvironmentVariableError, BadConfigurationError:
        Configuration errors.

Example:
    >>> from linkshortener.exceptions import InactiveLinkError
    >>> raise InactiveLinkError()
    Traceback (most recent call last):
        ...
    linkshortener.exceptions.InactiveLinkError: Link is no longer active.
"""


class LinkShortenerError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:linkshortener_error'
    default_message = 'Unexpected link shortener error.'

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class LinkError(LinkShortenerError):
    """Base exception for all link domain errors."""

    error_code = 'link:link_error'


class NotFoundError(LinkError):
    """Raised when no link exists for the given short code or id."""

    error_code = 'link:not_found'
    default_message = 'Link not found.'


class InactiveLinkError(LinkError):
    """Raised when a link exists but is expired or deactivated."""

    error_code = 'link:inactive'
    default_message = 'Link is no longer active.'


class InvalidUrlError(LinkError):
    """Raised when a long URL fails format validation."""

    error_code = 'link:invalid_url'
    default_message = 'Invalid URL format.'


class ForbiddenError(LinkError):
    """Raised when the requester does not own the target link."""

    error_code = 'link:forbidden'
    default_message = 'Operation is forbidden: requester does not own this link.'


class InvalidArgumentError(LinkError):
    """Raised when a required identifier argument is missing."""

    error_code = 'link:invalid_argument'
    default_message = 'Required argument is missing.'


class GenerationExhaustedError(LinkError):
    """Raised when no unique short code was found within the retry limit."""

    error_code = 'link:generation_exhausted'
    default_message = 'Could not generate a unique short code.'


class InvalidShortCodeError(LinkError):
    """Raised when a short code contains disallowed characters or is empty."""

    error_code = 'link:invalid_short_code'
    default_message = 'Invalid short code: only letters and digits are allowed.'


class ShortCodeTakenError(LinkError):
    """Raised when a short code is already used by another link."""

    error_code = 'link:short_code_taken'
    default_message = 'This short code already exists.'


class ConfigurationError(LinkShortenerError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
