"""Utility modules for Quadrille.

Provides:
- logger: get_logger for namespaced logging
"""

from quadrille.utils.logger import get_logger

__all__ = [
    "get_logger",
]
