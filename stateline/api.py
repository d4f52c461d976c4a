"""Thread-safe store of JSON resources exposed to monitoring clients."""

from __future__ import annotations

import json
import threading
from typing import Any, Dict


class ApiResources:
    """Named JSON documents, each stored as its compact serialised text."""

    def __init__(self) -> None:
        self._resources: Dict[str, str] = {}
        self._lock = threading.Lock()

    def set(self, name: str, data: Any) -> None:
        text = json.dumps(data, separators=(",", ":"), sort_keys=True, ensure_ascii=False)
        with self._lock:
            self._resources[name] = text

    def get(self, name: str) -> str:
        """Return the stored text for ``name``, or an empty string if unset."""
        with self._lock:
            return self._resources.get(name, "")

    def get_all(self) -> str:
        """Return every resource as one JSON object, keys in sorted order."""
        with self._lock:
            snapshot = dict(self._resources)
        body = ",".join(f'"{name}": {snapshot[name]}' for name in sorted(snapshot))
        return "{" + body + "}"