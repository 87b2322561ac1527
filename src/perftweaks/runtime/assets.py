"""In-memory script/style registry the host renders from."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass
class Asset:
    handle: str
    src: str


class AssetRegistry:
    """Registered assets plus the ordered subset enqueued for output."""

    def __init__(self) -> None:
        self.registered: Dict[str, Asset] = {}
        self._queue: List[str] = []

    def register(self, handle: str, src: str) -> Asset:
        asset = Asset(handle=handle, src=src)
        self.registered[handle] = asset
        return asset

    def enqueue(self, handle: str, src: Optional[str] = None) -> None:
        if src is not None:
            self.register(handle, src)
        if handle not in self.registered:
            raise KeyError(f"Asset {handle!r} is not registered")
        if handle not in self._queue:
            self._queue.append(handle)

    def dequeue(self, handle: str) -> None:
        if handle in self._queue:
            self._queue.remove(handle)

    def deregister(self, handle: str) -> None:
        self.dequeue(handle)
        self.registered.pop(handle, None)

    def is_enqueued(self, handle: str) -> bool:
        return handle in self._queue

    @property
    def queue(self) -> List[Asset]:
        return [self.registered[handle] for handle in self._queue]


__all__ = ["Asset", "AssetRegistry"]
