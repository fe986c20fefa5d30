"""Ledger store primitive and its backings."""

from .base import Ledger, LedgerEntry, LedgerStore
from .json_store import JsonLedgerStore
from .memory import MemoryLedger, MemoryLedgerStore

__all__ = [
    "Ledger",
    "LedgerEntry",
    "LedgerStore",
    "MemoryLedger",
    "MemoryLedgerStore",
    "JsonLedgerStore",
]
