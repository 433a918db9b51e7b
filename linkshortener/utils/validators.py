"""Input validation for link operations.

Functions:
    validate_long_link(long_link) -> str
        Ensure a long URL is a well-formed absolute http(s) URL.
    validate_shortcode(shortcode) -> str
        Ensure a short code only contains letters and digits.
    require_identifier(value, name) -> str
        Ensure a required identifier argument is present.
"""

import re
import urllib.parse

from linkshortener.exceptions import InvalidArgumentError, InvalidShortCodeError, InvalidUrlError


SHORTCODE_PATTERN = re.compile(r'[a-zA-Z0-9]+')
ALLOWED_SCHEMES = frozenset({'http', 'https'})


def validate_long_link(long_link: str | None) -> str:
    """Validate that `long_link` is an absolute http(s) URL with a host

    Raises:
        InvalidUrlError: if the URL is missing, relative, or malformed.

    Example:
        >>> validate_long_link('https://example.com/page?q=1')
        'https://example.com/page?q=1'
        >>> validate_long_link('example.com')
        Traceback (most recent call last):
            ...
        linkshortener.exceptions.InvalidUrlError: Invalid URL format.
    """
    if not isinstance(long_link, str) or not long_link.strip() or any(c.isspace() for c in long_link):
        raise InvalidUrlError()

    try:
        components = urllib.parse.urlparse(long_link)
        # accessing .port validates the port component
        components.port
    except ValueError as e:
        raise InvalidUrlError() from e

    if components.scheme.lower() not in ALLOWED_SCHEMES or not components.hostname:
        raise InvalidUrlError()
    return long_link


def validate_shortcode(shortcode: str | None) -> str:
    if not isinstance(shortcode, str) or not shortcode:
        raise InvalidShortCodeError('Invalid short link!')
    if not SHORTCODE_PATTERN.fullmatch(shortcode):
        raise InvalidShortCodeError('The following characters are not allowed!')
    return shortcode


def require_identifier(value: str | None, name: str) -> str:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidArgumentError(f"Required argument '{name}' is missing.")
    return value
