"""Shared fixtures for the ACM core tests."""

from __future__ import annotations

from typing import Callable

import pytest

from acm_core.addon import AddonData, AddonDescription, ExtensionData
from acm_core.channel import LocalBroadcastChannel, ScriptMessage
from acm_core.fs import DirectoryRegistry
from acm_core.ledger import MemoryLedgerStore
from acm_core.library import AddonLibrary
from acm_core.signals import SignalBus

OWNER = "voxel_tools"


def build_addon(author: str = "voxel", pack_id: str = "tools", **kwargs) -> AddonData:
    return AddonData(
        format_version="1.0.0",
        description=AddonDescription(version="1.0.0", author=author, pack_id=pack_id),
        **kwargs,
    )


@pytest.fixture
def make_addon() -> Callable[..., AddonData]:
    return build_addon


@pytest.fixture
def store() -> MemoryLedgerStore:
    return MemoryLedgerStore()


@pytest.fixture
def registry(store: MemoryLedgerStore) -> DirectoryRegistry:
    return DirectoryRegistry(store, lambda: OWNER)


@pytest.fixture
def channel() -> LocalBroadcastChannel:
    return LocalBroadcastChannel()


@pytest.fixture
def sent(channel: LocalBroadcastChannel) -> list[ScriptMessage]:
    messages: list[ScriptMessage] = []
    channel.subscribe(messages.append)
    return messages


@pytest.fixture
def signals() -> SignalBus:
    return SignalBus()


@pytest.fixture
def library(
    channel: LocalBroadcastChannel,
    store: MemoryLedgerStore,
    signals: SignalBus,
) -> AddonLibrary:
    lib = AddonLibrary(channel, store, signals)
    lib.init_addon(build_addon(extensions=[ExtensionData(id="voxel:compass")]))
    return lib
