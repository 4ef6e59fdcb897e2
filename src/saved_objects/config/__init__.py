"""Configuration module for saved objects."""

import logging
import sys

from saved_objects.config.settings import Settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Global settings instance (lazy-loaded singleton)
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance.

    Returns a cached singleton instance of Settings. The settings are
    loaded from environment variables on first access.

    Returns:
        The global Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance.

    Args:
        settings: Settings instance to use globally
    """
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset the global settings instance.

    This forces settings to be reloaded on next access.
    """
    global _settings
    _settings = None


def setup_logging(settings: Settings) -> logging.Logger:
    """Configure logging for the saved_objects package.

    Sets up a stderr handler and, when `log_file` is configured, a file
    handler. Calling it again only updates the level.

    Args:
        settings: Settings providing log_level and log_file

    Returns:
        The package logger
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logger = logging.getLogger("saved_objects")
    logger.setLevel(level)

    # Avoid duplicate handlers if setup is called multiple times
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if settings.log_file:
        try:
            file_handler = logging.FileHandler(settings.log_file, encoding="utf-8")
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
        except OSError as e:
            logger.warning("Could not set up file logging to %s: %s", settings.log_file, e)

    return logger


__all__ = ["Settings", "get_settings", "set_settings", "reset_settings", "setup_logging"]
