"""Tests for the AddonLibrary facade."""

from __future__ import annotations

import json
from typing import Callable

import pytest

from acm_core.addon import AddonData, ExtensionData
from acm_core.channel import LocalBroadcastChannel, ScriptMessage
from acm_core.errors import AlreadyExistsError, NotFoundError, UninitializedError
from acm_core.ledger import MemoryLedgerStore
from acm_core.library import AddonLibrary
from acm_core.signals import (
    AddonReadyEvent,
    CustomSignalEmittedEvent,
    ExtensionTriggeredEvent,
    SettingsChangedEvent,
    SignalBus,
)

def test_identifier_requires_init(
    channel: LocalBroadcastChannel, store: MemoryLedgerStore, signals: SignalBus
) -> None:
    lib = AddonLibrary(channel, store, signals)
    with pytest.raises(UninitializedError):
        lib.identifier
    with pytest.raises(UninitializedError):
        lib.fs.new("saves")
    with pytest.raises(UninitializedError):
        lib.emit("ping")
    assert lib.load_settings_data() == {}


def test_init_addon_only_once(
    library: AddonLibrary, make_addon: Callable[..., AddonData]
) -> None:
    assert library.identifier == "voxel_tools"
    with pytest.raises(AlreadyExistsError):
        library.init_addon(make_addon())


def test_fs_is_scoped_to_addon(library: AddonLibrary) -> None:
    directory = library.fs.new("saves")
    assert directory.db_id == "ACM:FS.VOXEL_TOOLS.SAVES"
    directory.write("slot", {"level": 3})
    assert library.fs.get("saves").read("slot") == {"level": 3}


def test_engine_ready_announces_addon(
    library: AddonLibrary,
    channel: LocalBroadcastChannel,
    signals: SignalBus,
    sent: list[ScriptMessage],
) -> None:
    ready: list[AddonReadyEvent] = []
    signals.on_addon_ready.subscribe(ready.append)

    channel.send("acm:engine_ready")

    assert [event.addon_data for event in ready] == [library.addon_data]
    announced = [message for message in sent if message.id == "acm:addon_ready"]
    assert len(announced) == 1
    assert json.loads(announced[0].message)["description"]["packId"] == "tools"


def test_emit_round_trips_through_channel(
    library: AddonLibrary, signals: SignalBus, sent: list[ScriptMessage]
) -> None:
    received: list[CustomSignalEmittedEvent] = []
    signals.on_custom_signal_emitted.subscribe(received.append)

    library.emit("door_opened", {"x": 1})
    library.emit("tick")

    assert sent[0].id == "ACM:SIGNAL.VOXEL_TOOLS.DOOR_OPENED"
    assert sent[0].message == '{"x": 1}'
    assert sent[1].message == "void"
    assert received == [
        CustomSignalEmittedEvent(addon_id="voxel_tools", emitter_id="door_opened", data={"x": 1}),
        CustomSignalEmittedEvent(addon_id="voxel_tools", emitter_id="tick", data=None),
    ]


def test_malformed_signal_address_is_ignored(
    library: AddonLibrary, channel: LocalBroadcastChannel, signals: SignalBus
) -> None:
    received: list[CustomSignalEmittedEvent] = []
    signals.on_custom_signal_emitted.subscribe(received.append)
    channel.send("ACM:SIGNAL.ONLYADDON", "void")
    assert received == []


def test_extension_trigger_matches_registered_extension(
    library: AddonLibrary, channel: LocalBroadcastChannel, signals: SignalBus
) -> None:
    triggered: list[ExtensionTriggeredEvent] = []
    signals.on_extension_triggered.subscribe(triggered.append)

    payload = json.dumps({"playerId": "steve", "extensionId": "compass"})
    channel.send("acm:ext_voxel_tools", payload)
    channel.send("acm:ext_other_pack", payload)
    channel.send(
        "acm:ext_voxel_tools", json.dumps({"playerId": "steve", "extensionId": "unknown"})
    )

    assert triggered == [ExtensionTriggeredEvent(extension_id="compass", actor="steve")]


def test_extension_trigger_drops_unresolved_actor(
    channel: LocalBroadcastChannel,
    store: MemoryLedgerStore,
    signals: SignalBus,
    make_addon: Callable[..., AddonData],
) -> None:
    actors = {"alex": object()}
    lib = AddonLibrary(channel, store, signals, actor_resolver=actors.get)
    lib.init_addon(make_addon(extensions=[ExtensionData(id="voxel:compass")]))
    triggered: list[ExtensionTriggeredEvent] = []
    signals.on_extension_triggered.subscribe(triggered.append)

    channel.send("acm:ext_voxel_tools", json.dumps({"playerId": "ghost", "extensionId": "compass"}))
    channel.send("acm:ext_voxel_tools", json.dumps({"playerId": "alex", "extensionId": "compass"}))

    assert [event.actor for event in triggered] == [actors["alex"]]


def test_settings_message_emits_resolved_settings(
    library: AddonLibrary,
    channel: LocalBroadcastChannel,
    store: MemoryLedgerStore,
    signals: SignalBus,
) -> None:
    store.create("ACM:VOXEL_TOOLS").set_entry(json.dumps([{"label": "On", "value": True}]), 0)
    changes: list[SettingsChangedEvent] = []
    signals.on_settings_changed.subscribe(changes.append)

    channel.send("acm:settings_voxel_tools", json.dumps({"playerId": "steve"}))
    library.notify_settings_changed()

    assert changes == [
        SettingsChangedEvent({"On": True}, "steve"),
        SettingsChangedEvent({"On": True}, None),
    ]


def test_log_appends_numbered_entries(library: AddonLibrary, store: MemoryLedgerStore) -> None:
    with pytest.raises(NotFoundError):
        library.log("hello")

    store.create("ACM:LOG")
    library.log("hello")
    library.log("world")
    entries = store.get("ACM:LOG").entries()
    assert [(entry.label, entry.value) for entry in entries] == [("1: hello", 1), ("2: world", 2)]


def test_forms_are_broadcast(library: AddonLibrary, sent: list[ScriptMessage]) -> None:
    library.show_home_form("steve")
    library.show_addon_form("steve")

    assert sent[0] == ScriptMessage(id="acm:hud_home", message="steve")
    body = json.loads(sent[1].message)
    assert sent[1].id == "acm:hud_addon"
    assert body["playerId"] == "steve"
    assert body["addonData"]["description"]["author"] == "voxel"


def test_engine_ready_before_init_is_reported(
    channel: LocalBroadcastChannel,
    store: MemoryLedgerStore,
    signals: SignalBus,
    caplog: pytest.LogCaptureFixture,
) -> None:
    AddonLibrary(channel, store, signals)
    ready: list[AddonReadyEvent] = []
    signals.on_addon_ready.subscribe(ready.append)

    channel.send("acm:engine_ready")

    assert ready == []
    assert "UninitializedError" in caplog.text


def test_close_stops_listening(
    library: AddonLibrary, channel: LocalBroadcastChannel, signals: SignalBus
) -> None:
    ready: list[AddonReadyEvent] = []
    signals.on_addon_ready.subscribe(ready.append)
    library.close()
    channel.send("acm:engine_ready")
    assert ready == []
