"""Feature gate evaluation: decide which tweaks run and hook them up."""

from __future__ import annotations

import enum
import logging
from typing import Callable, Dict, Optional

from ..runtime.assets import AssetRegistry
from ..runtime.constants import AUTOSAVE_INTERVAL, EMPTY_TRASH_DAYS, POST_REVISIONS, HostConstants
from ..runtime.events import (
    ContentEvent,
    EnqueueAssetsEvent,
    EventBus,
    HeadEvent,
    HeartbeatSettingsEvent,
    PrePingEvent,
    ResourceHintsEvent,
    StyleTagEvent,
)
from ..runtime.shortcodes import ShortcodeRegistry, strip_unregistered
from . import features as f
from .features import BOOLEAN_FEATURES, FEATURES, NUMERIC_FEATURES
from .settings_store import SettingsStore

logger = logging.getLogger(__name__)

DNS_PREFETCH_META = '<meta http-equiv="x-dns-prefetch-control" content="off">'
GOOGLE_MAPS_HOSTS = ("maps.googleapis.com", "maps.google.com")
GOOGLE_FONTS_HOST = "fonts.googleapis.com"

# Asset handlers run late so everything other extensions enqueue is visible
LATE_PRIORITY = 99
# Head output goes first
EARLY_PRIORITY = 0

_CONSTANT_FEATURES = {
    f.POST_REVISIONS_LIMIT: POST_REVISIONS,
    f.EMPTY_TRASH_DAYS: EMPTY_TRASH_DAYS,
    f.AUTOSAVE_FREQUENCY: AUTOSAVE_INTERVAL,
}


class FeatureState(str, enum.Enum):
    INACTIVE = "inactive"
    ACTIVE = "active"


class FeatureGateEvaluator:
    """Reads feature flags once and wires the active ones into the host.

    Every dependency the handlers touch is passed in, so a host (or a test)
    supplies its own bus and registries. Features are evaluated
    independently: a bad value or an error in one leaves that feature
    inactive and does not affect the rest.
    """

    def __init__(
        self,
        store: SettingsStore,
        bus: EventBus,
        *,
        scripts: Optional[AssetRegistry] = None,
        styles: Optional[AssetRegistry] = None,
        constants: Optional[HostConstants] = None,
        shortcodes: Optional[ShortcodeRegistry] = None,
        home_url: str = "",
    ):
        self.store = store
        self.bus = bus
        self.scripts = scripts
        self.styles = styles
        self.constants = constants if constants is not None else HostConstants()
        self.shortcodes = shortcodes if shortcodes is not None else ShortcodeRegistry()
        self.home_url = home_url
        self._settings: Optional[Dict[str, str]] = None
        self._heartbeat_interval: Optional[int] = None
        self.states: Dict[str, FeatureState] = {}

    def settings(self) -> Dict[str, str]:
        """Every feature's stored value (or default), read from the store once."""
        if self._settings is None:
            self._settings = {
                key: self.store.get(key, feature.default) for key, feature in FEATURES.items()
            }
        return self._settings

    def register(self) -> Dict[str, FeatureState]:
        """Evaluate each feature and activate the ones whose gate passes."""
        activators: Dict[str, Callable[[str], bool]] = {
            f.DISABLE_DNS_PREFETCH: self._activate_dns_prefetch,
            f.DISABLE_SELF_PINGBACKS: self._activate_self_pingbacks,
            f.DISABLE_GOOGLE_MAPS: self._activate_google_maps,
            f.DISABLE_GOOGLE_FONTS: self._activate_google_fonts,
            f.POST_REVISIONS_LIMIT: self._define_constant,
            f.EMPTY_TRASH_DAYS: self._define_constant,
            f.AUTOSAVE_FREQUENCY: self._define_constant,
            f.ENABLE_SHORTCODE_CLEANUP: self._activate_shortcode_cleanup,
            f.HEARTBEAT_FREQUENCY: self._activate_heartbeat,
        }

        self.settings()
        if self.store.is_degraded:
            logger.warning("Settings unavailable, leaving every feature at host defaults")
            self.states = {key: FeatureState.INACTIVE for key in activators}
            return dict(self.states)

        for key, activate in activators.items():
            try:
                active = activate(key)
            except Exception:
                logger.exception("Feature evaluation failed", extra={"feature": key})
                active = False
            self.states[key] = FeatureState.ACTIVE if active else FeatureState.INACTIVE

        logger.debug(
            "Features evaluated",
            extra={"active": [k for k, s in self.states.items() if s is FeatureState.ACTIVE]},
        )
        return dict(self.states)

    def is_active(self, key: str) -> bool:
        return self.states.get(key) is FeatureState.ACTIVE

    # Gates

    def _flag(self, key: str) -> bool:
        return BOOLEAN_FEATURES[key].is_active(self.settings().get(key))

    def _number(self, key: str) -> Optional[int]:
        value = self.settings().get(key)
        number = NUMERIC_FEATURES[key].resolve(value)
        if number is None:
            logger.info(
                "Ignoring invalid override, host default stays in effect",
                extra={"feature": key, "value": value},
            )
        return number

    def _activate_dns_prefetch(self, key: str) -> bool:
        if not self._flag(key):
            return False
        self.bus.subscribe(ResourceHintsEvent, self.disable_dns_prefetch)
        self.bus.subscribe(HeadEvent, self.remove_dns_prefetch_meta, EARLY_PRIORITY)
        return True

    def _activate_self_pingbacks(self, key: str) -> bool:
        if not self._flag(key):
            return False
        self.bus.subscribe(PrePingEvent, self.disable_self_pingbacks)
        return True

    def _activate_google_maps(self, key: str) -> bool:
        if not self._flag(key):
            return False
        self.bus.subscribe(EnqueueAssetsEvent, self.disable_google_maps, LATE_PRIORITY)
        return True

    def _activate_google_fonts(self, key: str) -> bool:
        if not self._flag(key):
            return False
        self.bus.subscribe(EnqueueAssetsEvent, self.disable_google_fonts, LATE_PRIORITY)
        self.bus.subscribe(StyleTagEvent, self.filter_google_fonts)
        return True

    def _activate_shortcode_cleanup(self, key: str) -> bool:
        if not self._flag(key):
            return False
        self.bus.subscribe(ContentEvent, self.clean_shortcodes)
        return True

    def _activate_heartbeat(self, key: str) -> bool:
        interval = self._number(key)
        if interval is None:
            return False
        self._heartbeat_interval = interval
        self.bus.subscribe(HeartbeatSettingsEvent, self.apply_heartbeat_interval)
        return True

    def _define_constant(self, key: str) -> bool:
        name = _CONSTANT_FEATURES[key]
        if self.constants.is_defined(name):
            return False
        number = self._number(key)
        if number is None:
            return False
        return self.constants.define(name, number)

    # Handlers

    def disable_dns_prefetch(self, event: ResourceHintsEvent) -> None:
        if event.relation_type == "dns-prefetch":
            event.urls = []

    def remove_dns_prefetch_meta(self, event: HeadEvent) -> None:
        if DNS_PREFETCH_META not in event.lines:
            event.lines.append(DNS_PREFETCH_META)

    def disable_self_pingbacks(self, event: PrePingEvent) -> None:
        if not self.home_url:
            return
        event.links = [link for link in event.links if not link.startswith(self.home_url)]

    def disable_google_maps(self, event: EnqueueAssetsEvent) -> None:
        if self.scripts is None:
            return
        for handle, script in list(self.scripts.registered.items()):
            if any(host in (script.src or "") for host in GOOGLE_MAPS_HOSTS):
                self.scripts.dequeue(handle)
                self.scripts.deregister(handle)

    def disable_google_fonts(self, event: EnqueueAssetsEvent) -> None:
        if self.styles is None:
            return
        for handle, style in list(self.styles.registered.items()):
            if GOOGLE_FONTS_HOST in (style.src or ""):
                self.styles.dequeue(handle)
                self.styles.deregister(handle)

    def filter_google_fonts(self, event: StyleTagEvent) -> None:
        if GOOGLE_FONTS_HOST in event.html:
            event.html = ""

    def clean_shortcodes(self, event: ContentEvent) -> None:
        if not isinstance(event.content, str) or "[" not in event.content:
            return
        event.content = strip_unregistered(event.content, self.shortcodes)

    def apply_heartbeat_interval(self, event: HeartbeatSettingsEvent) -> None:
        if self._heartbeat_interval is not None:
            event.settings["interval"] = self._heartbeat_interval


__all__ = [
    "DNS_PREFETCH_META",
    "FeatureGateEvaluator",
    "FeatureState",
]
