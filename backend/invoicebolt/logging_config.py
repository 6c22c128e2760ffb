"""
Logging setup — one dictConfig call at application creation.
"""
import os
import logging
import logging.config

from invoicebolt.config import Settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(settings: Settings) -> None:
    """Configure the `invoicebolt` and uvicorn loggers from settings."""
    level = "DEBUG" if settings.DEBUG else settings.LOG_LEVEL.upper()
    handlers = ["console"]

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": LOG_FORMAT},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
            },
        },
        "loggers": {
            "uvicorn": {"handlers": ["console"], "level": level, "propagate": False},
            "uvicorn.error": {"level": level},
            "uvicorn.access": {"handlers": ["console"], "level": level, "propagate": False},
            "invoicebolt": {"handlers": handlers, "level": level, "propagate": False},
        },
    }

    if settings.LOG_TO_FILE:
        os.makedirs(settings.LOG_DIR, exist_ok=True)
        config["handlers"]["file"] = {
            "class": "logging.FileHandler",
            "formatter": "default",
            "filename": os.path.join(settings.LOG_DIR, "server.log"),
            "encoding": "utf-8",
        }
        handlers.append("file")

    logging.config.dictConfig(config)
    logging.getLogger("invoicebolt").debug("Logging configured at %s", level)
