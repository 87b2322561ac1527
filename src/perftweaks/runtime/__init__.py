"""Host runtime abstractions the feature handlers act on."""

from .assets import Asset, AssetRegistry
from .constants import HostConstants
from .events import (
    ContentEvent,
    EnqueueAssetsEvent,
    EventBus,
    HeadEvent,
    HeartbeatSettingsEvent,
    PrePingEvent,
    ResourceHintsEvent,
    StyleTagEvent,
)
from .shortcodes import ShortcodeRegistry, strip_unregistered

__all__ = [
    "Asset",
    "AssetRegistry",
    "ContentEvent",
    "EnqueueAssetsEvent",
    "EventBus",
    "HeadEvent",
    "HeartbeatSettingsEvent",
    "HostConstants",
    "PrePingEvent",
    "ResourceHintsEvent",
    "ShortcodeRegistry",
    "StyleTagEvent",
    "strip_unregistered",
]
