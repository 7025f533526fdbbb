"""
Storage layer implementations.

This module implements:
- MemoryStorage: In-memory storage (process lifetime only)
"""

from .memory import MemoryStorage

__all__ = [
    "MemoryStorage",
]
