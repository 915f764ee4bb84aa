import logging
import logging.config
from world_api.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] - %(message)s"

LOG_LEVEL = "DEBUG" if settings.is_dev else "INFO"


class RequestIDFilter(logging.Filter):
    """Default request_id for records written outside of a request."""

    def filter(self, record):
        if not hasattr(record, "request_id"):
            record.request_id = "N/A"
        return True


def logging_config(level: str = LOG_LEVEL, sql_echo: bool = settings.db_echo) -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {"request_id": {"()": RequestIDFilter}},
        "formatters": {"default": {"format": LOG_FORMAT}},
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
                "formatter": "default",
                "filters": ["request_id"],
            },
        },
        "root": {"level": level, "handlers": ["stdout"]},
        "loggers": {
            "world_api": {"level": level},
            "uvicorn": {"level": level},
            # access lines come from RequestIDMiddleware
            "uvicorn.access": {"level": "WARNING"},
            "sqlalchemy.engine": {"level": "INFO" if sql_echo else "WARNING"},
        },
    }


def setup_logging() -> logging.Logger:
    logging.config.dictConfig(logging_config())
    return logging.getLogger("world_api")


def get_logger(name: str = "world_api") -> logging.Logger:
    return logging.getLogger(name)
