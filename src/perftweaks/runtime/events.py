"""Typed event bus the host publishes lifecycle events on.

Handlers are subscribed per payload type and receive the payload instance;
filter-style handlers mutate it in place. ``publish`` returns the payload so
hosts can read back the filtered values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import count
from typing import Any, Callable, Dict, List, Tuple, Type, TypeVar

DEFAULT_PRIORITY = 10

E = TypeVar("E")
Handler = Callable[[Any], None]


@dataclass
class ResourceHintsEvent:
    """URLs the host is about to emit as ``<link rel=relation_type>`` hints."""

    urls: List[str]
    relation_type: str


@dataclass
class HeadEvent:
    """Page head is being generated; handlers append raw HTML lines."""

    lines: List[str] = field(default_factory=list)


@dataclass
class PrePingEvent:
    """Outbound pingback targets for a post about to be published."""

    links: List[str]


@dataclass
class EnqueueAssetsEvent:
    """Front-end scripts and styles are being enqueued."""


@dataclass
class StyleTagEvent:
    """A rendered ``<link rel=stylesheet>`` tag for ``handle``."""

    html: str
    handle: str


@dataclass
class ContentEvent:
    """Post content on its way to the page."""

    content: str


@dataclass
class HeartbeatSettingsEvent:
    """Client heartbeat configuration; ``settings["interval"]`` in seconds."""

    settings: Dict[str, Any] = field(default_factory=dict)


class EventBus:
    """Priority-ordered publish/subscribe keyed on payload type."""

    def __init__(self) -> None:
        self._handlers: Dict[type, List[Tuple[int, int, Handler]]] = {}
        self._sequence = count()

    def subscribe(self, event_type: Type[E], handler: Callable[[E], None], priority: int = DEFAULT_PRIORITY) -> None:
        """Run ``handler`` for every published ``event_type``.

        Lower priorities run first; equal priorities run in subscription order.
        Subscribing the same handler twice for one type is a no-op.
        """
        entries = self._handlers.setdefault(event_type, [])
        if any(existing is handler for _, _, existing in entries):
            return
        entries.append((priority, next(self._sequence), handler))
        entries.sort(key=lambda entry: (entry[0], entry[1]))

    def unsubscribe(self, event_type: type, handler: Handler) -> bool:
        entries = self._handlers.get(event_type, [])
        for entry in entries:
            if entry[2] is handler:
                entries.remove(entry)
                return True
        return False

    def has_subscribers(self, event_type: type) -> bool:
        return bool(self._handlers.get(event_type))

    def handlers(self, event_type: type) -> List[Handler]:
        return [handler for _, _, handler in self._handlers.get(event_type, [])]

    def publish(self, event: E) -> E:
        for handler in self.handlers(type(event)):
            handler(event)
        return event

    def clear(self) -> None:
        self._handlers.clear()


__all__ = [
    "ContentEvent",
    "EnqueueAssetsEvent",
    "EventBus",
    "HeadEvent",
    "HeartbeatSettingsEvent",
    "PrePingEvent",
    "ResourceHintsEvent",
    "StyleTagEvent",
]
