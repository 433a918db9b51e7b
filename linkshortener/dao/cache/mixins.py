"""ElastiCache connection setup for the link cache tier.

The cache endpoint is not part of the application configuration: its host,
port and database index live in SSM Parameter Store and its AUTH token in
Secrets Manager, both provisioned with the cluster. Locally (APP_ENV=local)
both services are served by LocalStack and the connection is plain TCP;
everywhere else the connection uses TLS, which ElastiCache requires when an
AUTH token is set.

Classes:
    - CacheEndpoint: Resolved connection parameters of the cache cluster.
    - ElastiCacheClientMixin: Builds the Redis client from a CacheEndpoint and
      hands it to RedisClientMixin for the healthcheck.

Environment variables:
    - ELASTICACHE_HOST_PARAM  : SSM parameter path for the host
    - ELASTICACHE_PORT_PARAM  : SSM parameter path for the port
    - ELASTICACHE_DB_PARAM    : SSM parameter path for the DB index
    - ELASTICACHE_USER_PARAM  : SSM parameter path for the username (optional)
    - ELASTICACHE_SECRET      : Secrets Manager name for {"username": "...", "password": "..."}
    - LOCALSTACK_ENDPOINT     : LocalStack endpoint URL for local development

Example:
    >>> class ElastiCacheLinkCacheDAO(ElastiCacheClientMixin, LinkCacheDAO):
    ...     pass
    ...
    >>> dao = ElastiCacheLinkCacheDAO(prefix="linkshortener:dev")
    >>> dao.exists('abc1234')
    False
"""

import json
import os
from dataclasses import dataclass
from typing import Optional

import boto3
import redis
from botocore.client import BaseClient

from linkshortener.constants import ENV
from linkshortener.dao.cache.cache_key_schema import CacheKeySchema
from linkshortener.dao.redis.mixins import RedisClientMixin
from linkshortener.utils.runtime import running_locally
from linkshortener.utils.helpers import require_environment


@dataclass(frozen=True)
class CacheEndpoint:
    host: str
    port: int
    db: int
    username: Optional[str] = None
    password: Optional[str] = None


def _aws_client(service: str) -> BaseClient:
    if running_locally():
        return boto3.client(service, endpoint_url=os.environ.get(ENV.LocalStack.ENDPOINT, 'http://localhost:4566'))
    return boto3.client(service)


class ElastiCacheClientMixin(RedisClientMixin):
    """Connect a cache DAO to the ElastiCache cluster of the current environment

    Args:
        prefix (Optional[str]):
            Namespace prefix for all cache keys, e.g. 'app:env'.
        ssm_client (Optional[BaseClient]):
            boto3 SSM client; created on demand if None.
        secrets_client (Optional[BaseClient]):
            boto3 Secrets Manager client; created on demand if None.

    Raises:
        MissingEnvironmentVariableError:
            If an ELASTICACHE_* variable is missing.
        ValueError:
            If the SSM parameters or the secret are malformed.
        botocore.exceptions.BotoCoreError / ClientError:
            On AWS API failures.
        DataStoreError:
            If the cluster does not answer the healthcheck.
    """

    key_schema = CacheKeySchema

    def __init__(
        self,
        prefix: Optional[str] = None,
        ssm_client: Optional[BaseClient] = None,
        secrets_client: Optional[BaseClient] = None,
    ):
        endpoint = self.resolve_endpoint(ssm_client, secrets_client)
        redis_client = redis.Redis(
            host=endpoint.host,
            port=endpoint.port,
            db=endpoint.db,
            username=endpoint.username,
            password=endpoint.password,
            decode_responses=True,
            ssl=not running_locally(),
        )

        super().__init__(redis_client=redis_client, prefix=prefix)

    @staticmethod
    @require_environment(
        ENV.ElastiCache.HOST_PARAM,
        ENV.ElastiCache.PORT_PARAM,
        ENV.ElastiCache.DB_PARAM,
        ENV.ElastiCache.SECRET,
    )
    def resolve_endpoint(
        ssm_client: Optional[BaseClient] = None,
        secrets_client: Optional[BaseClient] = None,
    ) -> CacheEndpoint:
        """Read the cache endpoint from SSM and its credentials from Secrets Manager

        The username stored in the secret wins over the SSM username parameter.
        A password is mandatory outside local runs.
        """
        ssm = ssm_client or _aws_client('ssm')
        secrets = secrets_client or _aws_client('secretsmanager')

        def parameter(name: str) -> str:
            try:
                return ssm.get_parameter(Name=name)['Parameter']['Value']
            except KeyError as e:
                raise ValueError(f'Malformed SSM get_parameter response for {name!r}') from e

        host = parameter(os.environ[ENV.ElastiCache.HOST_PARAM])
        port = parameter(os.environ[ENV.ElastiCache.PORT_PARAM])
        db = parameter(os.environ[ENV.ElastiCache.DB_PARAM])
        user_param = os.environ.get(ENV.ElastiCache.USER_PARAM)

        try:
            port, db = int(port), int(db)
        except ValueError as e:
            raise ValueError(f'Invalid ElastiCache port/db values: port={port!r} db={db!r}') from e

        raw = secrets.get_secret_value(SecretId=os.environ[ENV.ElastiCache.SECRET]).get('SecretString')
        try:
            credentials = json.loads(raw or '{}')
        except json.JSONDecodeError as e:
            raise ValueError('Invalid JSON in ElastiCache secret payload') from e

        password = credentials.get('password')
        if not password and not running_locally():
            raise ValueError('ElastiCache secret must contain a non-empty "password" field')

        username = credentials.get('username') or (parameter(user_param) if user_param else None)
        return CacheEndpoint(host=host, port=port, db=db, username=username, password=password)
