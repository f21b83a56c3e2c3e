"""Logging helpers shared by the adapters."""

import logging

logger = logging.getLogger("metricwire")


def log_exception(message: str, **attributes: str | int | float | bool) -> None:
    """Log the exception currently being handled, with traceback.

    Must be called from inside an ``except`` block.

    Args:
        message: Description of what failed.
        **attributes: Additional structured fields passed as ``extra``.
    """
    logger.error(message, exc_info=True, extra=attributes)
