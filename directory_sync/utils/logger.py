"""
Directory Sync - Logging Utility
================================

Loguru setup driven by the ``logging`` section of settings.yaml:
- Console logging
- Optional rotating file and error-file sinks
- Optional JSON sink for log aggregation
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from directory_sync.core.config import Config
from directory_sync.core.errors import ConfigError

DEFAULT_LOGGING_CONFIG = {
    'level': 'INFO',
    'format': '<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan> - <level>{message}</level>',
    'console': {'enabled': True, 'colorize': True},
    'file': {'enabled': False},
    'error_file': {'enabled': False},
    'json': {'enabled': False},
}


def _configured_logging() -> dict:
    """Logging section of settings.yaml, or the defaults when unavailable"""
    try:
        return Config.get("logging", default=None) or DEFAULT_LOGGING_CONFIG
    except ConfigError:
        return DEFAULT_LOGGING_CONFIG


class LoggerSetup:
    """Configure and manage application logging"""

    def __init__(self, config: Optional[dict] = None):
        self.config = config if config is not None else _configured_logging()
        self._setup_logger()

    def _setup_logger(self):
        """Configure loguru logger"""
        logger.remove()

        log_level = self.config.get('level', 'INFO')
        log_format = self.config.get('format') or DEFAULT_LOGGING_CONFIG['format']

        console_config = self.config.get('console', {})
        if console_config.get('enabled', True):
            logger.add(
                sys.stderr,
                format=log_format,
                level=log_level,
                colorize=console_config.get('colorize', True),
                backtrace=True,
                diagnose=False,
            )

        file_config = self.config.get('file', {})
        if file_config.get('enabled', False):
            log_path = Path(file_config.get('path', './logs/directory-sync.log'))
            log_path.parent.mkdir(parents=True, exist_ok=True)

            logger.add(
                log_path,
                format=log_format,
                level=log_level,
                rotation=file_config.get('rotation', '50 MB'),
                retention=file_config.get('retention', '30 days'),
                compression=file_config.get('compression', 'zip'),
                backtrace=True,
                diagnose=False,
            )

        error_config = self.config.get('error_file', {})
        if error_config.get('enabled', False):
            error_path = Path(error_config.get('path', './logs/errors.log'))
            error_path.parent.mkdir(parents=True, exist_ok=True)

            logger.add(
                error_path,
                format=log_format,
                level=error_config.get('level', 'ERROR'),
                rotation=error_config.get('rotation', '10 MB'),
                retention=error_config.get('retention', '90 days'),
                backtrace=True,
                diagnose=False,
            )

        json_config = self.config.get('json', {})
        if json_config.get('enabled', False):
            json_path = Path(json_config.get('path', './logs/directory-sync.json'))
            json_path.parent.mkdir(parents=True, exist_ok=True)

            logger.add(
                json_path,
                format="{message}",
                level=log_level,
                serialize=True,
                rotation=file_config.get('rotation', '50 MB'),
                retention=file_config.get('retention', '30 days'),
            )

    def get_logger(self, name: Optional[str] = None):
        if name:
            return logger.bind(name=name)
        return logger


_logger_setup = None


def setup_logging(config: Optional[dict] = None, level: Optional[str] = None):
    """
    Initialize logging system

    Args:
        config: Explicit logging section; defaults to settings.yaml
        level: Override for the configured log level
    """
    global _logger_setup
    if level is not None:
        base = dict(config) if config is not None else None
        if base is None:
            base = _configured_logging()
        config = {**base, 'level': level.upper()}
    _logger_setup = LoggerSetup(config)
    logger.debug("Logging system initialized")


def get_logger(name: Optional[str] = None):
    """
    Get a logger instance

    Example:
        >>> from directory_sync.utils.logger import get_logger
        >>> log = get_logger(__name__)
        >>> log.info("Refreshing schools")
    """
    global _logger_setup
    if _logger_setup is None:
        setup_logging()
    return _logger_setup.get_logger(name)
