from __future__ import annotations

import logging
import sys
from types import MappingProxyType
from typing import TextIO

__all__ = ['CONFIG']

# SINGLE SOURCE OF TRUTH - immutable to prevent accidental modification
_DEFAULTS = MappingProxyType(
    {
        'config_name': 'repclust',
        'clustering': MappingProxyType(
            {
                'method': 'k_means',
                'distance': 'sqeuclidean',
                'drop_incomplete_last_period': False,
                'random_state': None,
            }
        ),
    }
)


class _ConsoleFormatter(logging.Formatter):
    """Single-line ``time level │ message`` format, milliseconds included."""

    default_time_format = '%Y-%m-%d %H:%M:%S'
    default_msec_format = '%s.%03d'

    def __init__(self) -> None:
        super().__init__('%(asctime)s %(levelname)-8s │ %(message)s')


class CONFIG:
    """Configuration for the repclust library.

    Attributes:
        Logging: Logging helpers.
        Clustering: Defaults used when a YAML config omits a clustering option.
        config_name: Configuration name.

    Examples:
        ```python
        CONFIG.Logging.enable_console('INFO')
        CONFIG.Clustering.method = 'k_medoids'
        CONFIG.reset()
        ```
    """

    class Logging:
        """Logging configuration helpers.

        repclust is silent by default (no handlers). All module loggers are
        children of the ``repclust`` logger, so standard ``logging``
        configuration works as well.
        """

        @classmethod
        def enable_console(cls, level: str | int = 'INFO', stream: TextIO | None = None) -> None:
            """Log to a stream.

            Args:
                level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL or logging constant)
                stream: Output stream (default: sys.stdout).
            """
            logger = logging.getLogger('repclust')

            if isinstance(level, str):
                level = getattr(logging, level.upper())
            logger.setLevel(level)

            if stream is None:
                stream = sys.stdout

            # Remove existing console handlers to avoid duplicates
            logger.handlers = [h for h in logger.handlers if not isinstance(h, logging.StreamHandler)]

            handler = logging.StreamHandler(stream)
            handler.setFormatter(_ConsoleFormatter())
            logger.addHandler(handler)
            logger.propagate = False

        @classmethod
        def disable(cls) -> None:
            """Remove all repclust handlers and mute the logger."""
            logger = logging.getLogger('repclust')
            logger.handlers.clear()
            logger.setLevel(logging.CRITICAL)

    class Clustering:
        method: str = _DEFAULTS['clustering']['method']
        distance: str = _DEFAULTS['clustering']['distance']
        drop_incomplete_last_period: bool = _DEFAULTS['clustering']['drop_incomplete_last_period']
        random_state: int | None = _DEFAULTS['clustering']['random_state']

    config_name: str = _DEFAULTS['config_name']

    @classmethod
    def reset(cls) -> None:
        """Reset all settings to their defaults and restore a silent logger."""
        for key, value in _DEFAULTS['clustering'].items():
            setattr(cls.Clustering, key, value)
        cls.config_name = _DEFAULTS['config_name']

        logger = logging.getLogger('repclust')
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)
        logger.propagate = True

    @classmethod
    def to_dict(cls) -> dict:
        """Current configuration as a plain dict."""
        return {
            'config_name': cls.config_name,
            'clustering': {key: getattr(cls.Clustering, key) for key in _DEFAULTS['clustering']},
        }
