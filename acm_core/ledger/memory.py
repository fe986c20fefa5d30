"""In-process ledger backing."""

from __future__ import annotations

from typing import Callable

from acm_core.errors import AlreadyExistsError

from .base import Ledger, LedgerEntry, LedgerStore, entry_label


class MemoryLedger(Ledger):
    """Ledger kept in an insertion-ordered ``dict``."""

    def __init__(
        self,
        name: str,
        scores: dict[str, int] | None = None,
        *,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        super().__init__(name)
        self._scores: dict[str, int] = dict(scores or {})
        self._on_change = on_change

    def entries(self) -> list[LedgerEntry]:
        return [LedgerEntry(label, value) for label, value in self._scores.items()]

    def set_entry(self, label: str, value: int) -> None:
        self._scores[label] = int(value)
        self._changed()

    def remove_entry(self, entry: LedgerEntry | str) -> bool:
        label = entry_label(entry)
        if label not in self._scores:
            return False
        del self._scores[label]
        self._changed()
        return True

    def snapshot(self) -> dict[str, int]:
        return dict(self._scores)

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()


class MemoryLedgerStore(LedgerStore):
    """Ledger namespace that lives only as long as the process."""

    def __init__(self) -> None:
        self._ledgers: dict[str, MemoryLedger] = {}

    def create(self, name: str) -> MemoryLedger:
        if name in self._ledgers:
            raise AlreadyExistsError(f"ledger {name} already exists", name=name)
        ledger = self._new_ledger(name, {})
        self._ledgers[name] = ledger
        self._changed()
        return ledger

    def get(self, name: str) -> MemoryLedger | None:
        return self._ledgers.get(name)

    def delete(self, name: str) -> bool:
        if self._ledgers.pop(name, None) is None:
            return False
        self._changed()
        return True

    def names(self) -> tuple[str, ...]:
        return tuple(self._ledgers)

    def _new_ledger(self, name: str, scores: dict[str, int]) -> MemoryLedger:
        return MemoryLedger(name, scores)

    def _changed(self) -> None:
        """Hook for backings that persist the namespace."""
