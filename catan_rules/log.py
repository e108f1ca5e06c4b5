"""Shared logging utilities for the rules engine."""

import logging

from . import settings

_PACKAGE_LOGGER = 'catan_rules'
# Rejected moves are logged by the move processor.
_REJECTION_LOGGER = 'catan_rules.engine.processor'


class RejectedMoveFilter(logging.Filter):
    """Filter out records about moves the engine rejected."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Return False to suppress rejected-move log entries."""
        return not getattr(record, 'rejected_move', False)


def configure_logging(quiet_rejections: bool = False) -> None:
    """Set the package log level from settings.

    With *quiet_rejections*, rejected-move records are dropped as well; bulk
    simulations produce a great many of them.
    """
    logging.getLogger(_PACKAGE_LOGGER).setLevel(settings.LOG_LEVEL)
    if not quiet_rejections:
        return
    logger = logging.getLogger(_REJECTION_LOGGER)
    if not any(isinstance(f, RejectedMoveFilter) for f in logger.filters):
        logger.addFilter(RejectedMoveFilter())
