"""Helper functions."""
import logging


def _format_extra(kwargs: dict) -> str:
    return " ".join(f"{k}={v}" for k, v in kwargs.items())


def log_debug(logger: logging.Logger, context: str, message: str, **kwargs):
    """Log debug."""
    logger.debug("%s: %s %s", context, message, _format_extra(kwargs))


def log_info(logger: logging.Logger, context: str, message: str, **kwargs):
    """Log info."""
    logger.info("%s: %s %s", context, message, _format_extra(kwargs))


def log_error(logger: logging.Logger, context: str, message: str, **kwargs):
    """Log error."""
    logger.error("%s: %s %s", context, message, _format_extra(kwargs))
