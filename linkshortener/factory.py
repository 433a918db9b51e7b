"""Wiring of the link resolution core from application configuration

Expected configuration section (see linkshortener.utils.config.load_config):

    redis:                      # backing store
        host: localhost
        port: 6379
        db: 0
        username: null          # optional
        password: null          # optional
    cache:
        backend: redis          # redis | elasticache
        host: localhost         # redis backend only
        port: 6379
        db: 1
    links:
        code_length: 7
        code_salt: linkshortener
        max_generation_attempts: 10

The `elasticache` cache backend takes its connection parameters from SSM and
Secrets Manager instead (see ElastiCacheClientMixin).

Example:
    >>> from linkshortener.factory import build_link_service
    >>> service = build_link_service()
    >>> link = service.lifecycle.create('https://example.com', owner_id='user-1')
    >>> service.resolver.resolve(link.short_link)
    'https://example.com'
"""

import logging
from dataclasses import dataclass

from linkshortener.constants import Defaults
from linkshortener.dao.base import LinkBaseDAO, LinkCacheBaseDAO
from linkshortener.dao.cache import ElastiCacheLinkCacheDAO, LinkCacheDAO
from linkshortener.dao.redis import LinkRedisDAO
from linkshortener.exceptions import BadConfigurationError
from linkshortener.services import CodeGenerator, LinkLifecycleManager, LinkResolver
from linkshortener.utils.config import app_prefix, load_config
from linkshortener.utils.logging import initialize_logging


logger = logging.getLogger(__name__)

CACHE_BACKENDS = frozenset({'redis', 'elasticache'})


@dataclass(frozen=True)
class LinkService:
    store: LinkBaseDAO
    cache: LinkCacheBaseDAO
    resolver: LinkResolver
    generator: CodeGenerator
    lifecycle: LinkLifecycleManager


def _positive_int(section: dict, key: str, default: int) -> int:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise BadConfigurationError(f"'links.{key}' must be a positive integer (given value: {value!r}).")
    return value


def _redis_kwargs(section: dict) -> dict:
    return {
        'redis_host': section.get('host', 'localhost'),
        'redis_port': section.get('port', 6379),
        'redis_db': section.get('db', 0),
        'redis_username': section.get('username'),
        'redis_password': section.get('password'),
    }


def build_code_generator(store: LinkBaseDAO, links_config: dict) -> CodeGenerator:
    """Build a CodeGenerator from the `links` configuration section

    Raises:
        BadConfigurationError:
            If a value has the wrong type or is out of range.
    """
    salt = links_config.get('code_salt', Defaults.CODE_SALT)
    if not isinstance(salt, str) or not salt:
        raise BadConfigurationError(f"'links.code_salt' must be a non-empty string (given value: {salt!r}).")

    return CodeGenerator(
        store,
        salt=salt,
        length=_positive_int(links_config, 'code_length', Defaults.CODE_LENGTH),
        max_attempts=_positive_int(links_config, 'max_generation_attempts', Defaults.MAX_GENERATION_ATTEMPTS),
    )


def build_cache(cache_config: dict, prefix: str | None) -> LinkCacheBaseDAO:
    backend = cache_config.get('backend', 'redis')
    if backend not in CACHE_BACKENDS:
        raise BadConfigurationError(f"'cache.backend' must be one of {sorted(CACHE_BACKENDS)} (given value: {backend!r}).")

    if backend == 'elasticache':
        return ElastiCacheLinkCacheDAO(prefix=prefix)
    return LinkCacheDAO(**_redis_kwargs(cache_config), prefix=prefix)


def build_link_service(component: str = 'link_service') -> LinkService:
    """Load the component's configuration and wire the link resolution core

    Raises:
        BadConfigurationError:
            If the configuration holds invalid values.
        MissingEnvironmentVariableError:
            If AppConfig or ElastiCache environment variables are missing.
        DataStoreError:
            If the store or the cache can't be reached.
    """
    initialize_logging()
    config = load_config(component)
    prefix = app_prefix()

    for section in ('redis', 'cache', 'links'):
        if not isinstance(config.get(section, {}), dict):
            raise BadConfigurationError(f"'{section}' configuration section must be a mapping.")

    store = LinkRedisDAO(**_redis_kwargs(config.get('redis', {})), prefix=prefix)
    cache = build_cache(config.get('cache', {}), prefix)
    generator = build_code_generator(store, config.get('links', {}))
    resolver = LinkResolver(store, cache)
    lifecycle = LinkLifecycleManager(store, resolver, generator)

    logger.debug('Link service initialized.', extra={'component': component, 'prefix': prefix})
    return LinkService(store=store, cache=cache, resolver=resolver, generator=generator, lifecycle=lifecycle)
