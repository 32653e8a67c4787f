"""Utility modules for Lamina.

Provides:
- logger: get_logger for namespaced logging
"""

from lamina.utils.logger import get_logger

__all__ = [
    "get_logger",
]
