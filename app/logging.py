import logging
import logging.config

from app.config import settings

_CONFIGURED = False


def configure_logging(level: str | None = None, json_format: bool | None = None) -> None:
    """Configure root logging once for the process.

    Console only; log shipping is handled by the container runtime.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    level = (level or settings.log_level).upper()
    json_format = settings.log_json if json_format is None else json_format
    formatter = "json" if json_format else "default"

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
                "json": {
                    "format": (
                        '{"time": "%(asctime)s", "logger": "%(name)s", '
                        '"level": "%(levelname)s", "message": "%(message)s"}'
                    ),
                    "datefmt": "%Y-%m-%dT%H:%M:%S",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": level,
                    "formatter": formatter,
                    "stream": "ext://sys.stdout",
                },
            },
            "loggers": {
                "app": {"level": level, "handlers": ["console"], "propagate": False},
                "uvicorn.access": {"level": "INFO", "handlers": ["console"], "propagate": False},
                "sqlalchemy.engine": {"level": "WARNING", "handlers": ["console"], "propagate": False},
            },
            "root": {"level": level, "handlers": ["console"]},
        }
    )
    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
