"""Runtime utilities

Functions:
    running_locally() -> bool:
        True if the application runs in a local environment, False otherwise.

Example:
    >>> from linkshortener.utils.runtime import running_locally
    >>> os.environ['APP_ENV'] = 'local'
    >>> running_locally()
    True
    >>> os.environ['APP_ENV'] = 'dev'
    >>> running_locally()
    False
"""

import os

from linkshortener.constants import ENV


def running_locally() -> bool:
    """Check if the application is running locally

    Returns:
        bool: True if APP_ENV is 'local' (the default), False otherwise.
    """
    return os.getenv(ENV.App.APP_ENV, 'local').lower() == 'local'
