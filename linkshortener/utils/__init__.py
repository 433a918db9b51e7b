from linkshortener.utils.config import app_env, app_name, project_root, app_prefix, load_config
from linkshortener.utils.helpers import one_month_from, require_environment
from linkshortener.utils.shortener import generate_shortcode
from linkshortener.utils.logging import initialize_logging
from linkshortener.utils.runtime import running_locally
from linkshortener.utils.validators import validate_long_link, validate_shortcode, require_identifier


__all__ = [
    'generate_shortcode',
    'app_env',
    'app_name',
    'app_prefix',
    'project_root',
    'load_config',
    'one_month_from',
    'require_environment',
    'initialize_logging',
    'running_locally',
    'validate_long_link',
    'validate_shortcode',
    'require_identifier',
]
