"""
Memory storage backend.

In-memory record store; contents live only as long as the process.
"""

from typing import Any, Dict, List, Optional

from ..interfaces.storage import IStorageBackend


class MemoryStorage(IStorageBackend):
    """In-memory storage backend."""

    def __init__(self):
        self.data: Dict[str, Dict[str, Any]] = {}

    def save(self, key: str, data: Dict[str, Any]) -> None:
        self.data[key] = data.copy()

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        record = self.data.get(key)
        return record.copy() if record is not None else None

    def delete(self, key: str) -> None:
        self.data.pop(key, None)

    def keys(self, prefix: Optional[str] = None) -> List[str]:
        if prefix:
            return [k for k in self.data if k.startswith(prefix)]
        return list(self.data)

    def clear(self, prefix: Optional[str] = None) -> None:
        if prefix is None:
            self.data.clear()
        else:
            super().clear(prefix)
