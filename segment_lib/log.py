"""Logging setup for applications embedding the segmentation engine.

Library modules only create module-level loggers and never install
handlers. An application that wants to see detector, combiner and
refinement messages calls configure_logging() once at startup.
"""

from __future__ import annotations

import logging
from typing import List, Union

LOG_FORMAT = '%(asctime)s %(levelname)-8s [%(name)s] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _resolve_level(level: Union[str, int]) -> int:
    """Numeric level for a name such as 'debug'; unknown names give INFO."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO


def configure_logging(level: Union[str, int] = 'INFO', log_file: str | None = None) -> None:
    """Install stderr (and optionally file) handlers on the root logger.

    Handlers installed earlier are replaced, so calling this twice does
    not duplicate output.

    Args:
        level: Level name ('DEBUG', 'INFO', ...) or a logging constant.
        log_file: Also append records to this file when given.

    Example:
        Trace refinement while tuning thresholds::

            from segment_lib.log import configure_logging
            configure_logging(level='DEBUG', log_file='segmentation.log')
    """
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(_resolve_level(level))

    logging.getLogger(__name__).debug("configure_logging: level=%s log_file=%s", level, log_file)
