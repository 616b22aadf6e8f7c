"""
Key/value storage interface for scan statistics.
"""

import copy
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable


class StatsStore(ABC):
    """
    Asynchronous key/value store holding counters and the history log.

    ``set`` must apply all given keys as one unit.
    """

    @abstractmethod
    async def get(self, keys: Iterable[str]) -> Dict[str, Any]:
        """Return the stored values for ``keys``; missing keys are omitted."""
        raise NotImplementedError("Must implement get")

    @abstractmethod
    async def set(self, values: Dict[str, Any]) -> None:
        """Persist all ``values`` together."""
        raise NotImplementedError("Must implement set")


class MemoryStatsStore(StatsStore):
    """Process-local store, used for embedding and tests."""

    def __init__(self, initial: Dict[str, Any] = None):
        self._data: Dict[str, Any] = copy.deepcopy(initial or {})

    async def get(self, keys: Iterable[str]) -> Dict[str, Any]:
        return {key: copy.deepcopy(self._data[key]) for key in keys if key in self._data}

    async def set(self, values: Dict[str, Any]) -> None:
        self._data.update(copy.deepcopy(values))
