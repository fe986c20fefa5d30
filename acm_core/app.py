"""Application object that wires the ACM core services together."""

from __future__ import annotations

import logging

from acm_core.channel import HostChannel, LocalBroadcastChannel
from acm_core.config import AcmConfig
from acm_core.ledger import JsonLedgerStore, LedgerStore, MemoryLedgerStore
from acm_core.library import ActorResolver, AddonLibrary
from acm_core.signals import SignalBus


class AcmApp:
    """Build the ledger store, the signal bus, the channel and the addon library once."""

    def __init__(
        self,
        *,
        config: AcmConfig | None = None,
        store: LedgerStore | None = None,
        channel: HostChannel | None = None,
        actor_resolver: ActorResolver | None = None,
        persistent: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        self.logger = logger or logging.getLogger("acm_core.app")
        self.config = config or AcmConfig()
        self.store = store or self._default_store(persistent)
        self.channel = channel or LocalBroadcastChannel()
        self.signals = SignalBus()
        self.library = AddonLibrary(
            self.channel,
            self.store,
            self.signals,
            config=self.config,
            actor_resolver=actor_resolver,
        )

    def _default_store(self, persistent: bool) -> LedgerStore:
        if persistent and self.config.store_path is not None:
            self.logger.debug("using ledger file %s", self.config.store_path)
            return JsonLedgerStore(self.config.store_path)
        return MemoryLedgerStore()

    def ensure_log_ledger(self) -> None:
        """Create the shared log ledger the host normally provides."""

        if self.store.get(self.config.log_ledger) is None:
            self.store.create(self.config.log_ledger)

    def status(self) -> dict[str, str]:
        addon = self.library.addon_data
        return {
            "addon": addon.identifier if addon else "none",
            "ledgers": str(len(self.store.names())),
            "store": str(self.store.path) if isinstance(self.store, JsonLedgerStore) else "memory",
            "subscribers": ", ".join(
                f"{channel.name}={len(channel)}" for channel in self.signals.channels()
            ),
        }
