"""
Engine interfaces.

This module defines abstract interfaces for:
- Storage Backend: IStorageBackend
"""

from .storage import IStorageBackend

__all__ = [
    "IStorageBackend",
]
