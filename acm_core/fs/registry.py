"""Create, resolve and delete ledger-backed directories."""

from __future__ import annotations

import logging
from typing import Callable

from acm_core.errors import NotFoundError
from acm_core.ledger import LedgerStore

from .directory import Directory

DEFAULT_ROOT = "ACM:FS"

IdentityProvider = Callable[[], str]

logger = logging.getLogger(__name__)


class DirectoryRegistry:
    """Namespace manager mapping directory names to ledgers.

    A directory called ``name`` lives in the ledger ``ROOT.OWNER.NAME`` where
    ``OWNER`` is the identity of the current addon; every component is
    upper-cased so lookups are case-insensitive.
    """

    def __init__(
        self,
        store: LedgerStore,
        identity: IdentityProvider,
        *,
        root: str = DEFAULT_ROOT,
    ) -> None:
        self.store = store
        self.root = root
        self._identity = identity

    def format(self, name: str, *, addon_id: str | None = None) -> str:
        owner = addon_id if addon_id is not None else self._identity()
        return f"{self.root}.{owner.upper()}.{name.upper()}"

    def is_valid(self, name: str) -> bool:
        return self.store.get(self.format(name)) is not None

    def get(self, name: str, *, addon_id: str | None = None) -> Directory | None:
        """Resolve a directory without creating it.

        ``addon_id`` resolves a directory published by another addon; the
        result stays owned by the current addon, so it is effectively
        read-only.
        """

        ledger = self.store.get(self.format(name, addon_id=addon_id))
        if ledger is None:
            return None
        return Directory(ledger, self._identity().upper())

    def new(self, name: str, ignore_warn: bool = False) -> Directory:
        formatted = self.format(name)
        if self.is_valid(name):
            if not ignore_warn:
                logger.warning("Directory %s already exists", formatted)
            existing = self.get(name)
            if existing is not None:
                return existing
        ledger = self.store.create(formatted)
        logger.debug("created directory %s", formatted)
        return Directory(ledger, self._identity().upper())

    def delete(self, name: str) -> None:
        if self.get(name) is None:
            raise NotFoundError(f"Directory {name} does not exist", name=name)
        self.store.delete(self.format(name))

    def list(self) -> list[str]:
        """Names of the current addon's directories, as stored (upper-cased)."""

        prefix = f"{self.root}.{self._identity().upper()}."
        return [
            ledger_name[len(prefix):]
            for ledger_name in self.store.names()
            if ledger_name.startswith(prefix)
        ]
