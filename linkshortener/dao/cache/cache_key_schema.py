import functools
from collections.abc import Callable


__all__ = ['CacheKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class CacheKeySchema:
    """Provide standardized Redis keys for caching link records.

    An optional prefix can be provided to namespace all generated keys.
    It is highly encouraged to set a custom prefix for each app and environment,
    e.g. "linkshortener:prod" or "linkshortener:dev".

    NOTE: Yes, this class mirrors RedisKeySchema, but we don't want to spaghettify
    the caching layer with our Redis datastore backend. Cache keys live under
    'cache:<prefix>' so both tiers can share one Redis instance in local runs.
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = f'cache:{prefix}' if prefix is not None else 'cache'

    @prefix_key
    def link_key(self, shortcode: str) -> str:
        return f'links:{shortcode}'
