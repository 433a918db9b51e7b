"""Helper utilities.

Functions:
    one_month_from(moment: datetime | None = None) -> datetime
        Same moment one calendar month later (day clamped to the month's end)
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present

Example:
    >>> from datetime import datetime, UTC
    >>> one_month_from(datetime(2025, 1, 31, 12, 0, tzinfo=UTC))
    datetime.datetime(2025, 2, 28, 12, 0, tzinfo=datetime.timezone.utc)
"""

import os
import calendar
import functools
from datetime import datetime, UTC
from collections.abc import Callable

from linkshortener.exceptions import MissingEnvironmentVariableError


def one_month_from(moment: datetime | None = None) -> datetime:
    """Compute the same moment one calendar month later.

    The day of month is clamped to the last day of the target month, so
    January 31st maps to the end of February.

    Args:
        moment (datetime | None):
            Starting point. Defaults to the current moment in UTC.

    Returns:
        datetime:
            Newly constructed datetime one month after `moment`, same tzinfo.

    Example:
        >>> one_month_from(datetime(2025, 12, 15, tzinfo=UTC))
        datetime.datetime(2026, 1, 15, 0, 0, tzinfo=datetime.timezone.utc)
    """
    moment = moment or datetime.now(UTC)
    year = moment.year + (1 if moment.month == 12 else 0)
    month = (moment.month % 12) + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])

    return moment.replace(year=year, month=month, day=day)


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        MissingEnvironmentVariableError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('AWS_ACCESS_KEY_ID', 'AWS_SECRET_ACCESS_KEY')
        ... def my_function():
        ...     pass
        >>> my_function()
        MissingEnvironmentVariableError: Missing required environment variables: 'AWS_ACCESS_KEY_ID', 'AWS_SECRET_ACCESS_KEY'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator
