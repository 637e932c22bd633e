import logging
import logging.config


def build_logging_config(level: str = "INFO") -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            },
        },
        "handlers": {
            "console": {
                "level": level,
                "class": "logging.StreamHandler",
                "formatter": "standard",
            },
        },
        "loggers": {
            "topbanana": {
                "handlers": ["console"],
                "level": level,
                "propagate": False,
            },
            "alembic": {
                "handlers": ["console"],
                "level": "INFO",
                "propagate": False,
            },
            "": {
                "handlers": ["console"],
                "level": "WARNING",
            },
        },
    }


def setup_logging(level: str = "INFO") -> None:
    logging.config.dictConfig(build_logging_config(level.upper()))
