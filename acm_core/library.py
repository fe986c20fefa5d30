"""Addon facade: identity, host messages, settings and the file system."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable

from acm_core.addon import AddonData
from acm_core.channel import HostChannel, ScriptMessage
from acm_core.config import AcmConfig
from acm_core.errors import AlreadyExistsError, NotFoundError, UninitializedError
from acm_core.fs import DirectoryRegistry
from acm_core.ledger import LedgerStore
from acm_core.settings import SettingsReader
from acm_core.signals import (
    AddonReadyEvent,
    CustomSignalEmittedEvent,
    ExtensionTriggeredEvent,
    SettingsChangedEvent,
    SignalBus,
)

ENGINE_READY = "acm:engine_ready"
ADDON_READY = "acm:addon_ready"
HUD_HOME = "acm:hud_home"
HUD_ADDON = "acm:hud_addon"
EXTENSION_PREFIX = "acm:ext_"
SETTINGS_MESSAGE_PREFIX = "acm:settings_"
VOID_PAYLOAD = "void"

ActorResolver = Callable[[str], Any]

logger = logging.getLogger(__name__)


def _identity_actor(actor_id: str) -> Any:
    return actor_id


class AddonLibrary:
    """Glue between one addon, the host channel, the ledgers and the signal bus."""

    def __init__(
        self,
        channel: HostChannel,
        store: LedgerStore,
        signals: SignalBus,
        *,
        config: AcmConfig | None = None,
        actor_resolver: ActorResolver | None = None,
    ) -> None:
        self.config = config or AcmConfig()
        self.channel = channel
        self.store = store
        self.signals = signals
        self.addon_data: AddonData | None = None
        self.fs = DirectoryRegistry(store, lambda: self.identifier, root=self.config.fs_root)
        self.settings = SettingsReader(store, prefix=self.config.settings_prefix)
        self._resolve_actor = actor_resolver or _identity_actor
        self._response_address: str | None = None
        self.channel.subscribe(self._on_message)

    # ---------- Identity ----------

    @property
    def identifier(self) -> str:
        """``<author>_<packId>`` of the initialized addon."""

        if self.addon_data is None:
            raise UninitializedError("addon data is undefined; call init_addon() first")
        return self.addon_data.identifier

    def init_addon(self, addon_data: AddonData) -> None:
        if self.addon_data is not None:
            raise AlreadyExistsError("Addon already initialized", name=self.addon_data.identifier)
        self.addon_data = addon_data
        self._response_address = addon_data.identifier
        logger.info("initialized addon %s", addon_data.identifier)

    def close(self) -> None:
        self.channel.unsubscribe(self._on_message)

    # ---------- Inbound messages ----------

    def _on_message(self, event: ScriptMessage) -> None:
        if event.id == ENGINE_READY:
            self._on_world_ready()
        elif event.id.startswith(f"{self.config.signal_prefix}."):
            self._on_custom_signal(event)
        elif event.id.startswith(SETTINGS_MESSAGE_PREFIX):
            self._on_settings_message(event)
        elif event.id.startswith(EXTENSION_PREFIX):
            self._on_extension_message(event)

    def _on_world_ready(self) -> None:
        if self.addon_data is None:
            raise UninitializedError("addon data is undefined.")
        self.channel.send(ADDON_READY, json.dumps(self.addon_data.to_dict()))
        self.signals.on_addon_ready.emit(AddonReadyEvent(self.addon_data))

    def _on_custom_signal(self, event: ScriptMessage) -> None:
        parts = event.id.split(".")
        if len(parts) < 3:
            logger.debug("ignoring malformed signal address %s", event.id)
            return
        addon_id, emitter_id = parts[1].lower(), parts[2].lower()
        data = None if event.message == VOID_PAYLOAD else json.loads(event.message)
        self.signals.on_custom_signal_emitted.emit(
            CustomSignalEmittedEvent(addon_id=addon_id, emitter_id=emitter_id, data=data)
        )

    def _on_settings_message(self, event: ScriptMessage) -> None:
        expected = f"{SETTINGS_MESSAGE_PREFIX}{self._response_address}"
        if self._response_address is None or event.id != expected:
            return
        actor = None
        if event.message:
            actor_id = json.loads(event.message).get("playerId")
            if actor_id is not None:
                actor = self._resolve_actor(actor_id)
                if actor is None:
                    return
        self.notify_settings_changed(actor)

    def _on_extension_message(self, event: ScriptMessage) -> None:
        addon_data = self.addon_data
        if (
            addon_data is None
            or not addon_data.extensions
            or not event.message
            or self._response_address is None
            or event.id != f"{EXTENSION_PREFIX}{self._response_address}"
        ):
            return
        data = json.loads(event.message)
        extension_id = data.get("extensionId")
        if not extension_id:
            return
        if not any(extension_id in extension.id for extension in addon_data.extensions):
            return
        actor = self._resolve_actor(data.get("playerId"))
        if actor is None:
            logger.debug("actor %s for extension %s not found", data.get("playerId"), extension_id)
            return
        self.signals.on_extension_triggered.emit(
            ExtensionTriggeredEvent(extension_id=extension_id, actor=actor)
        )

    # ---------- Outbound API ----------

    def log(self, message: str) -> None:
        """Append ``message`` to the host's shared log ledger."""

        ledger = self.store.get(self.config.log_ledger)
        if ledger is None:
            raise NotFoundError("Log database not found", name=self.config.log_ledger)
        entry = len(ledger.entries()) + 1
        ledger.set_entry(f"{entry}: {message}", entry)

    def show_home_form(self, actor_id: str) -> None:
        self.channel.send(HUD_HOME, actor_id)

    def show_addon_form(self, actor_id: str) -> None:
        addon_data = self.addon_data.to_dict() if self.addon_data else None
        self.channel.send(HUD_ADDON, json.dumps({"playerId": actor_id, "addonData": addon_data}))

    def load_settings_data(self) -> dict[str, Any]:
        if self.addon_data is None:
            return {}
        return self.settings.load(self.addon_data)

    def notify_settings_changed(self, actor: Any | None = None) -> dict[str, Any]:
        settings = self.load_settings_data()
        self.signals.on_settings_changed.emit(SettingsChangedEvent(settings, actor))
        return settings

    def emit(self, event_id: str, data: Any | None = None) -> None:
        """Broadcast a custom signal to every addon listening on the host."""

        address = f"{self.config.signal_prefix}.{self.identifier}.{event_id}".upper()
        payload = VOID_PAYLOAD if data is None else json.dumps(data)
        self.channel.send(address, payload)
