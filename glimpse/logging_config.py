from logging.config import dictConfig
import logging

from glimpse.config import settings


class SafeRequestIDFormatter(logging.Formatter):
    """
    A formatter that safely handles missing request_id attributes.
    """

    def format(self, record):
        # Records emitted outside a request (startup, alembic) carry no id
        if not hasattr(record, 'request_id'):
            record.request_id = 'no-request-id'
        return super().format(record)


LOG_LEVEL = "DEBUG" if settings.DEBUG else "INFO"

# Central logging configuration
LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "()": SafeRequestIDFormatter,
            "format": "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] - %(message)s",
        },
        "access": {
            "()": SafeRequestIDFormatter,
            "format": "%(asctime)s - %(levelname)s - [%(request_id)s] - %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
        },
        "access_console": {
            "class": "logging.StreamHandler",
            "formatter": "access",
        },
    },
    "root": {
        "level": LOG_LEVEL,
        "handlers": ["console"],
    },
    "loggers": {
        "glimpse": {  # Catch-all logger for all glimpse modules
            "level": LOG_LEVEL,
            "handlers": ["console"],
            "propagate": False,
        },
        "uvicorn.error": {
            "level": "INFO",
            "handlers": ["console"],
            "propagate": False,
        },
        "uvicorn.access": {
            "level": "INFO",
            "handlers": ["access_console"],
            "propagate": False,
        },
        "sqlalchemy.engine": {
            "level": "INFO" if settings.DEBUG else "WARNING",
            "handlers": ["console"],
            "propagate": False,
        },
    },
}

def configure_logging():
    """Configure logging for the application."""
    dictConfig(LOGGING_CONFIG)
