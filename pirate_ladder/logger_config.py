import logging.config
import sys


def configure_logging(level="INFO"):
    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,

        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },

        "handlers": {
            "console": {
                "level": level,
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "stream": sys.stdout,
            },
        },

        "loggers": {
            "": {  # root
                "handlers": ["console"],
                "level": level,
            },
            # Font and backend chatter from the chart renderer
            "matplotlib": {
                "level": "WARNING",
            },
        },
    }

    logging.config.dictConfig(logging_config)
