from enum import StrEnum


class Defaults:
    """Default values for link generation."""

    CODE_LENGTH = 7  # 62**7 ~ 3.5e12 possible short codes
    CODE_SALT = 'linkshortener'
    MAX_GENERATION_ATTEMPTS = 10  # collisions tolerated before GenerationExhaustedError


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        PROJECT_ROOT = 'PROJECT_ROOT'
        LOG_LEVEL = 'LOG_LEVEL'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'

    class ElastiCache(StrEnum):
        # SSM parameter paths for ElastiCache connection details
        HOST_PARAM = 'ELASTICACHE_HOST_PARAM'
        PORT_PARAM = 'ELASTICACHE_PORT_PARAM'
        DB_PARAM = 'ELASTICACHE_DB_PARAM'
        USER_PARAM = 'ELASTICACHE_USER_PARAM'
        # Secrets Manager name holding credentials JSON: {"username": "...", "password": "..."}
        SECRET = 'ELASTICACHE_SECRET'  # noqa: S105

    class LocalStack(StrEnum):
        ENDPOINT = 'LOCALSTACK_ENDPOINT'  # usually http://localstack:4566


# Log events
LINK_CREATED = 'LINK_CREATED'
LINK_RESOLVED = 'LINK_RESOLVED'
LINK_EXPIRED = 'LINK_EXPIRED'
LINK_INACTIVE = 'LINK_INACTIVE'
LINK_NOT_FOUND = 'LINK_NOT_FOUND'
LINK_DELETED = 'LINK_DELETED'
LINK_RENAMED = 'LINK_RENAMED'
LINK_UPDATED = 'LINK_UPDATED'
LINK_REACTIVATED = 'LINK_REACTIVATED'
CACHE_HIT = 'CACHE_HIT'
CACHE_MISS = 'CACHE_MISS'
CACHE_ERROR = 'CACHE_ERROR'
SHORTCODE_COLLISION = 'SHORTCODE_COLLISION'
