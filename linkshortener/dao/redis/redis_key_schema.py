import functools
from collections.abc import Callable


__all__ = ['RedisKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class RedisKeySchema:
    """Provide standardized Redis keys for storing link records.

    An optional prefix can be provided to namespace all generated keys.
    It is highly encouraged to set a custom prefix for each app and environment,
    e.g. "linkshortener:prod" or "linkshortener:dev".

    Layout:
        links:<id>              -> hash with every LinkModel field
        links:codes:<shortcode> -> id of the link owning the short code
        users:<owner_id>:links  -> set of link ids owned by the user
        links:counter           -> global counter feeding short code generation
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def link_key(self, link_id: str) -> str:
        return f'links:{link_id}'

    @prefix_key
    def shortcode_key(self, shortcode: str) -> str:
        return f'links:codes:{shortcode}'

    @prefix_key
    def owner_links_key(self, owner_id: str) -> str:
        return f'users:{owner_id}:links'

    @prefix_key
    def counter_key(self) -> str:
        return 'links:counter'
