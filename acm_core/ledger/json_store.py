"""File-backed ledger store persisted as a single JSON document."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from .memory import MemoryLedger, MemoryLedgerStore

STORE_FORMAT_VERSION = 1

logger = logging.getLogger(__name__)


class JsonLedgerStore(MemoryLedgerStore):
    """Keep ledgers in memory and rewrite ``path`` after every mutation.

    The document keeps entries as ``[label, value]`` pairs so the ledger
    iteration order survives a reload.
    """

    def __init__(self, path: Path | str) -> None:
        super().__init__()
        self.path = Path(path)
        self._loading = False
        self._load()

    def _new_ledger(self, name: str, scores: dict[str, int]) -> MemoryLedger:
        return MemoryLedger(name, scores, on_change=self._changed)

    def _changed(self) -> None:
        if self._loading:
            return
        self.save()

    def save(self) -> None:
        payload: dict[str, Any] = {
            "version": STORE_FORMAT_VERSION,
            "ledgers": {
                name: [[label, value] for label, value in ledger.snapshot().items()]
                for name, ledger in self._ledgers.items()
            },
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        staging = self.path.with_name(f"{self.path.name}.tmp")
        staging.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        staging.replace(self.path)

    def _load(self) -> None:
        if not self.path.exists():
            return
        payload = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(payload, dict):
            raise ValueError(f"ledger store {self.path} is not a JSON object")
        version = payload.get("version", STORE_FORMAT_VERSION)
        if version != STORE_FORMAT_VERSION:
            logger.warning(
                "ledger store %s has format version %s (expected %s)",
                self.path,
                version,
                STORE_FORMAT_VERSION,
            )
        self._loading = True
        try:
            for name, pairs in (payload.get("ledgers") or {}).items():
                scores = {str(label): int(value) for label, value in pairs}
                self._ledgers[str(name)] = self._new_ledger(str(name), scores)
        finally:
            self._loading = False
        logger.debug("loaded %d ledgers from %s", len(self._ledgers), self.path)
