"""Utility functions for application configuration management.

Configuration is stored in **AWS AppConfig**. Each environment (`APP_ENV`)
has a dedicated AppConfig *Environment* within the AppConfig *Application*
identified by `APP_NAME`. The configuration JSON document holds one section
per component:

    {
        "build": "2025-12-26.1",
        "configs": {
            "link_service": {
                "redis": {"host": "...", "port": 6379, "db": 0},
                "cache": {"backend": "redis", "host": "...", "port": 6379, "db": 1},
                "links": {"code_length": 7, "code_salt": "...", "max_generation_attempts": 10}
            }
        }
    }

For local development the same section can be kept in a YAML file under the
project root, which takes precedence over AppConfig when `APP_ENV=local`:

    config/
    └── link_service/
        ├── local.yml
        └── dev.yml

Functions:
    app_env() -> str
        Current application environment (`APP_ENV`), `'local'` by default.

    app_name() -> str | None
        Application name (`APP_NAME`), or None if not set.

    app_prefix() -> str | None
        Key prefix for DAOs, or None if `APP_NAME` is not set.

    project_root() -> Path
        Absolute path to the project root directory.

    load_config(component: str) -> dict
        Load the configuration section of a component.

Example:
    >>> from linkshortener.utils.config import load_config
    >>> config = load_config('link_service')
    >>> config['links']['code_length']
    7
"""

import os
import json
import functools
import logging
from pathlib import Path
from collections.abc import Callable

import boto3
import yaml

from linkshortener.constants import ENV
from linkshortener.exceptions import BadConfigurationError
from linkshortener.utils.helpers import require_environment
from linkshortener.utils.runtime import running_locally


logger = logging.getLogger(__name__)


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Example:
        >>> os.environ['APP_ENV'] = 'dev'
        >>> app_env()
        'dev'
    """
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    return os.environ.get(ENV.App.APP_NAME)


def project_root() -> Path:
    """Return the absolute path to the project root directory

    Uses the PROJECT_ROOT environment variable when set, otherwise the
    repository root this package lives in.
    """
    default = Path(__file__).resolve().parents[2]
    return Path(os.environ.get(ENV.App.PROJECT_ROOT, default))


def app_prefix() -> str | None:
    """Return application prefix for DAOs

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'linkshortener'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'linkshortener:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def _local_config_path(component: str) -> Path:
    return project_root() / 'config' / component / f'{app_env()}.yml'


def load_local_yaml_config(func: Callable[[str], dict]) -> Callable[[str], dict]:
    """Decorator: load configuration from a local YAML file when running locally

    Behavior:
        - If the application is running locally and config/<component>/<env>.yml
          exists under the project root, parse it with PyYAML and return it.
        - Else, call the wrapped function (which pulls from AWS AppConfig).

    Raises:
        BadConfigurationError:
            If the YAML file does not hold a mapping.
    """

    @functools.wraps(func)
    def wrapper(component: str, *args, **kwargs) -> dict:
        path = _local_config_path(component)
        if not running_locally() or not path.is_file():
            return func(component, *args, **kwargs)

        logger.debug('Loading local YAML config.', extra={'component': component, 'path': str(path)})
        with path.open('r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise BadConfigurationError(f"Config file '{path}' must contain a mapping.")
        return data

    return wrapper


@load_local_yaml_config
@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def load_config(component: str) -> dict:
    """Load configuration for a given component from AWS AppConfig

    Environment variables required:
        APPCONFIG_APP_ID       – AppConfig Application ID
        APPCONFIG_ENV_ID       – AppConfig Environment ID
        APPCONFIG_PROFILE_ID   – AppConfig Configuration Profile ID

    Args:
        component (str):
            Name of the component section (e.g. "link_service").

    Returns:
        dict: The component's config section.

    Raises:
        MissingEnvironmentVariableError:
            If an AppConfig identifier is not set.
        BadConfigurationError:
            If the document has no section for the component.
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.', extra={'component': component})

    appconfig = boto3.client('appconfigdata')

    session_token = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
        EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
        ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
    )['InitialConfigurationToken']

    response = appconfig.get_latest_configuration(ConfigurationToken=session_token)
    content = response['Configuration'].read()
    config = json.loads(content.decode('utf-8'))

    try:
        data = config['configs'][component]
    except KeyError as e:
        raise BadConfigurationError(f"AppConfig document has no section for '{component}'.") from e

    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'component': component, 'build': config.get('build')})
    return data
