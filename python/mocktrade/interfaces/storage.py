"""
Storage backend interface.

Key/value store for order audit records. The order book writes a record on
placement and rewrites it on fill; ``MarketSimulator.order_record`` reads it
back.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class IStorageBackend(ABC):
    """Storage backend interface.

    Keys follow the ``"<kind>:<id>"`` convention, e.g. ``"order:<order_id>"``.
    Records are plain dicts as produced by ``Order.to_dict()``.
    """

    @abstractmethod
    def save(self, key: str, data: Dict[str, Any]) -> None:
        """Write (or overwrite) the record under ``key``."""
        pass

    @abstractmethod
    def load(self, key: str) -> Optional[Dict[str, Any]]:
        """
        Read the record under ``key``.

        Returns:
            A copy of the record, or None when the key is unknown.
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Drop the record under ``key``; unknown keys are ignored."""
        pass

    @abstractmethod
    def keys(self, prefix: Optional[str] = None) -> List[str]:
        """Keys currently stored, restricted to ``prefix`` when given."""
        pass

    def clear(self, prefix: Optional[str] = None) -> None:
        """Delete every key (or every key under a prefix)."""
        for key in self.keys(prefix):
            self.delete(key)
