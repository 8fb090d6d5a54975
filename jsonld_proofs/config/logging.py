"""Logging configuration for applications embedding jsonld_proofs."""

import logging
from importlib import resources
from logging.config import fileConfig
from typing import IO, Optional

from .settings import (
    LOG_CONFIG_SETTING,
    LOG_FILE_SETTING,
    LOG_LEVEL_SETTING,
    Settings,
)

DEFAULT_LOGGING_CONFIG_PATH_INI = "jsonld_proofs.config:default_logging_config.ini"


def load_resource(path: str, encoding: str = "utf-8") -> IO[str]:
    """Open a text resource given as `package:resource` or as a filesystem path."""
    package, sep, resource = path.rpartition(":")
    if not sep or not package:
        return open(path, encoding=encoding)
    return resources.files(package).joinpath(resource).open("r", encoding=encoding)


class LoggingConfigurator:
    """Utility class used to configure logging."""

    @classmethod
    def configure(
        cls,
        log_config_path: Optional[str] = None,
        log_level: Optional[str] = None,
        log_file: Optional[str] = None,
    ):
        """Configure logging from an ini file.

        Args:
            log_config_path: Custom config, the packaged default when omitted
            log_level: Level applied to the root logger
            log_file: File to write logs to, next to the configured handlers

        """
        with load_resource(
            log_config_path or DEFAULT_LOGGING_CONFIG_PATH_INI
        ) as config_file:
            fileConfig(config_file, disable_existing_loggers=False)

        root = logging.getLogger()
        if log_file:
            handler = logging.FileHandler(log_file, encoding="utf-8")
            if root.handlers:
                handler.setFormatter(root.handlers[0].formatter)
            root.addHandler(handler)
        if log_level:
            root.setLevel(log_level.upper())

    @classmethod
    def configure_from_settings(cls, settings: Settings):
        """Configure logging from the `log.*` settings."""
        cls.configure(
            log_config_path=settings.get_str(LOG_CONFIG_SETTING),
            log_level=settings.get_str(LOG_LEVEL_SETTING),
            log_file=settings.get_str(LOG_FILE_SETTING),
        )
