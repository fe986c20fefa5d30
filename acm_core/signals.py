"""Typed publish/subscribe channels shared by addon code."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Generic, TypeVar

if TYPE_CHECKING:
    from acm_core.addon import AddonData

__all__ = [
    "AddonReadyEvent",
    "SettingsChangedEvent",
    "ExtensionTriggeredEvent",
    "CustomSignalEmittedEvent",
    "Signal",
    "SignalBus",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class AddonReadyEvent:
    """The host engine is ready and this addon announced itself."""

    addon_data: "AddonData"


@dataclass(frozen=True)
class SettingsChangedEvent:
    """Resolved settings after a change, with the actor that made it (if any)."""

    settings_data: dict[str, Any]
    actor: Any | None = None


@dataclass(frozen=True)
class ExtensionTriggeredEvent:
    extension_id: str
    actor: Any


@dataclass(frozen=True)
class CustomSignalEmittedEvent:
    """A signal broadcast by an addon through ``AddonLibrary.emit``."""

    addon_id: str
    emitter_id: str
    data: Any | None = None


class Signal(Generic[T]):
    """One event channel with its own set of subscribers.

    Subscribers are keyed by identity and called synchronously in
    subscription order. ``emit`` iterates a snapshot taken when it starts:
    callbacks added during an emit are first called on the next one, and
    callbacks removed during an emit may still receive the current event.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._subscribers: dict[Callable[[T], None], None] = {}

    def __len__(self) -> int:
        return len(self._subscribers)

    def __repr__(self) -> str:
        return f"Signal({self.name!r}, subscribers={len(self._subscribers)})"

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[T], None]:
        """Register ``callback``; returns it so it can be unsubscribed later."""

        self._subscribers.setdefault(callback, None)
        return callback

    def unsubscribe(self, callback: Callable[[T], None]) -> None:
        self._subscribers.pop(callback, None)

    def emit(self, event: T) -> None:
        for callback in tuple(self._subscribers):
            try:
                callback(event)
            except Exception:
                logger.exception("Error @ACM:%s subscriber %r", self.name, callback)


class SignalBus:
    """Holds the four process-wide channels.

    Build one per running host and hand it to every component that publishes
    or subscribes.
    """

    def __init__(self) -> None:
        self.on_addon_ready: Signal[AddonReadyEvent] = Signal("OnAddonReadyEvent")
        self.on_settings_changed: Signal[SettingsChangedEvent] = Signal("OnSettingsChangedEvent")
        self.on_extension_triggered: Signal[ExtensionTriggeredEvent] = Signal(
            "OnExtensionTriggeredEvent"
        )
        self.on_custom_signal_emitted: Signal[CustomSignalEmittedEvent] = Signal(
            "OnCustomSignalEmittedEvent"
        )

    def channels(self) -> tuple[Signal[Any], ...]:
        return (
            self.on_addon_ready,
            self.on_settings_changed,
            self.on_extension_triggered,
            self.on_custom_signal_emitted,
        )
