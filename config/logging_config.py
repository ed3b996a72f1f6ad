"""
Centralized logging configuration for the Vernacular Ops session service.

Every record is rendered as one JSON object. Records emitted while a session
is handling a command carry the session and interaction identifiers, so a
single command cycle (user message, engine call, response) can be followed
across modules by filtering on `interaction_id`.
"""

import json
import logging
import logging.handlers # Required for RotatingFileHandler
import os
import sys # To ensure we can always output to stdout for console

CONTEXT_FIELDS = {
    'session_id': 'no_session',
    'interaction_id': 'no_id',
}

# Third-party loggers that are too chatty at INFO
QUIET_LOGGERS = ('uvicorn.access', 'multipart')

DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(interaction_id)s] - [%(session_id)s] - %(message)s'
DEFAULT_LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class StructuredLogFormatter(logging.Formatter):
    """
    JSON formatter carrying the session context of each record.

    Output keys: timestamp, level, logger, message, the context fields
    (session_id, interaction_id), any `extra_fields` mapping passed by the
    caller, and the formatted exception when one is attached.
    """

    def format(self, record):
        log_data = {
            'timestamp': self.formatTime(record, self.datefmt),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        for field, default in CONTEXT_FIELDS.items():
            log_data[field] = getattr(record, field, default)

        extra_fields = getattr(record, 'extra_fields', None)
        if isinstance(extra_fields, dict):
            log_data.update(extra_fields)

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ContextDefaultsFilter(logging.Filter):
    """Fills in missing context fields so plain `logging.getLogger` records format too."""

    def filter(self, record):
        for field, default in CONTEXT_FIELDS.items():
            if not hasattr(record, field):
                setattr(record, field, default)
        return True


def get_logger(name: str, **context) -> logging.LoggerAdapter:
    """
    Get a logger bound to a session context.

    Args:
        name (str): Logger name (usually __name__)
        **context: Values for the context fields, e.g. session_id=..., interaction_id=...

    Returns:
        logging.LoggerAdapter: Adapter that stamps the context on every record
    """
    fields = dict(CONTEXT_FIELDS)
    fields.update({key: value for key, value in context.items() if value is not None})
    return logging.LoggerAdapter(logging.getLogger(name), fields)


def _resolve_level(config: dict, default_level: int) -> int:
    level_name = str(config.get('level', logging.getLevelName(default_level))).upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        print(f"Warning: Invalid log level string '{level_name}'. Using default level {logging.getLevelName(default_level)}.", file=sys.stderr)
        return default_level
    return level


def _build_file_handler(config: dict, formatter: logging.Formatter):
    """Rotating file handler, or None when file logging is disabled or unavailable."""
    log_file_path = config.get('file_path', '')
    if not log_file_path:
        return None
    try:
        log_dir = os.path.dirname(log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handler = logging.handlers.RotatingFileHandler(
            log_file_path,
            maxBytes=int(config.get('max_bytes', 5*1024*1024)),  # 5 MB
            backupCount=int(config.get('backup_count', 3)),
            encoding='utf-8'
        )
    except OSError as e:
        print(f"Error setting up file logging to {log_file_path}: {e}. File logging will be disabled.", file=sys.stderr)
        return None
    handler.setFormatter(formatter)
    return handler


def setup_app_logging(config: dict = None, default_level=logging.INFO) -> None:
    """
    Set up logging for the entire application.

    Replaces the root logger's handlers with a stdout handler and, when
    configured, a rotating file handler. Both use `StructuredLogFormatter`.

    Args:
        config (dict, optional): Logging section of CONFIG. Recognized keys:
                                'level', 'file_path' (empty disables file logging),
                                'max_bytes', 'backup_count', 'format', 'date_format'.
        default_level (int, optional): Level used when 'level' is missing or invalid.
    """
    config = config or {}
    level = _resolve_level(config, default_level)
    formatter = StructuredLogFormatter(
        config.get('format', DEFAULT_LOG_FORMAT),
        datefmt=config.get('date_format', DEFAULT_LOG_DATE_FORMAT),
    )
    context_filter = ContextDefaultsFilter()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    handlers = [logging.StreamHandler(sys.stdout), _build_file_handler(config, formatter)]
    for handler in handlers:
        if handler is None:
            continue
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
        root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    get_logger("LoggingConfig").info("Application logging setup complete. Level: %s", logging.getLevelName(level))
