"""Abstract interfaces for the host ledger primitive."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class LedgerEntry:
    """One ``(label, value)`` pair stored in a ledger."""

    label: str
    value: int


class Ledger(ABC):
    """A named collection of labelled integer entries.

    Labels are unique only by convention; the store never enforces it.
    """

    def __init__(self, name: str) -> None:
        self.name = name

    @abstractmethod
    def entries(self) -> list[LedgerEntry]:
        """Return a snapshot of every entry in iteration order."""

    @abstractmethod
    def set_entry(self, label: str, value: int) -> None:
        """Assign ``value`` to ``label``, adding the label when it is new."""

    @abstractmethod
    def remove_entry(self, entry: LedgerEntry | str) -> bool:
        """Remove the entry (or label); return whether anything was removed."""

    def __len__(self) -> int:
        return len(self.entries())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class LedgerStore(ABC):
    """Host-global namespace of named ledgers."""

    @abstractmethod
    def create(self, name: str) -> Ledger:
        """Create and return a new, empty ledger called ``name``."""

    @abstractmethod
    def get(self, name: str) -> Ledger | None:
        """Return the ledger called ``name`` or ``None`` when it is missing."""

    @abstractmethod
    def delete(self, name: str) -> bool:
        """Remove the ledger called ``name``; return whether it existed."""

    @abstractmethod
    def names(self) -> tuple[str, ...]:
        """List the names of every ledger in the store."""


def entry_label(entry: LedgerEntry | str) -> str:
    return entry.label if isinstance(entry, LedgerEntry) else entry
