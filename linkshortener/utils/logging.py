"""Application-wide logging initialization

IMPORTANT: Call `initialize_logging()` once at process start-up, before any
other logging is done (see linkshortener.factory.build_link_service).

Every record is one JSON object per line on stdout. Fields passed through
`extra` are emitted at the top level next to the standard ones:
{
    "timestamp": "2025-12-26T12:00:00.000Z",
    "level": "INFO",
    "logger": "linkshortener.services.resolver",
    "message": "Link resolved.",
    "shortcode": "abc1234",
    "event": "LINK_RESOLVED"
}

Records logged with exc_info carry the traceback under "exception" and, for
LinkShortenerError and DataStoreError subclasses, the error class under
"error". Errors with a stable code also add "error_code".
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from linkshortener.constants import ENV


# Attributes every LogRecord carries, as opposed to the ones passed via `extra`
_RECORD_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {'message', 'asctime'}

# AWS SDK loggers flood DEBUG output with request dumps
_QUIET_LOGGERS = ('boto3', 'botocore', 'urllib3')


class JsonFormatter(logging.Formatter):
    """Render a LogRecord and its `extra` fields as a single JSON line"""

    def format(self, record: logging.LogRecord) -> str:
        # fmt: off
        timestamp = datetime.fromtimestamp(record.created, tz=UTC) \
                            .isoformat(timespec="milliseconds") \
                            .replace("+00:00", "Z")
        # fmt: on

        log = {
            'timestamp': timestamp,
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        log.update((key, value) for key, value in record.__dict__.items() if key not in _RECORD_ATTRS)

        if record.exc_info:
            error = record.exc_info[1]
            log['exception'] = self.formatException(record.exc_info)
            if error is not None and type(error).__module__.startswith('linkshortener.'):
                log['error'] = type(error).__name__
                if hasattr(error, 'error_code'):
                    log['error_code'] = error.error_code

        return json.dumps(log, default=str)


def initialize_logging(level: str | None = None) -> None:
    """Route all logging through JsonFormatter on stdout

    Args:
        level (str | None):
            Root log level. Defaults to $LOG_LEVEL, then INFO.
    """
    log_level = (level or os.getenv(ENV.App.LOG_LEVEL) or 'INFO').upper()
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'json': {
                    '()': JsonFormatter,
                }
            },
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'loggers': {name: {'level': 'WARNING'} for name in _QUIET_LOGGERS},
            'root': {
                'level': log_level,
                'handlers': ['stdout'],
            },
        }
    )
