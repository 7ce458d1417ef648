import logging
import logging.config

# Centralized logging configuration for the entire project
LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "rich": {
            "format": "%(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        }
    },
    "handlers": {
        "console": {
            "class": "rich.logging.RichHandler",
            "level": "INFO",
            "formatter": "rich",
            "show_time": True,
            "show_level": True,
            "show_path": False,
            "markup": True,
        }
    },
    "loggers": {
        # Prediction pipeline
        "prediction_cache": {"level": "DEBUG"},
        "prediction_cache_store_layer": {"level": "DEBUG"},
        # Persistent store
        "place_store": {"level": "INFO"},
        # Detail resolution
        "place_details": {"level": "DEBUG"},
        # Session facade
        "orchestrator": {"level": "DEBUG"},
        # External services
        "places_client": {"level": "DEBUG"},
        # External libraries
        "httpx": {"level": "WARNING"},
        "lancedb": {"level": "WARNING"},
    },
    "root": {"level": "INFO", "handlers": ["console"]},
}

# Track if logging has been configured to avoid duplicate configuration
_logging_configured = False


def get_logger(logger_name: str) -> logging.Logger:
    """
    Get a logger instance with the centralized configuration.

    Args:
        logger_name: Name of the logger (e.g., 'prediction_cache')

    Returns:
        Configured logger instance
    """
    global _logging_configured
    if not _logging_configured:
        logging.config.dictConfig(LOGGING_CONFIG)
        _logging_configured = True
    return logging.getLogger(logger_name)
