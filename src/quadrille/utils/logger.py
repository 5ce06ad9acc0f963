"""Minimal logging utilities for Quadrille.

Provides a simple get_logger function that wraps the standard library logging.
The library never installs handlers; hosts configure logging themselves.

Example:
    >>> from quadrille.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Echo suppressed for notes.md")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "quadrille." prefix.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> logger = get_logger("engine")
        >>> logger.name
        'quadrille.engine'
    """
    if not (name == "quadrille" or name.startswith("quadrille.")):
        name = f"quadrille.{name}"
    return logging.getLogger(name)
