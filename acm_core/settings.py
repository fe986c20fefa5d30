"""Resolve addon settings stored by the host in dedicated ledgers."""

from __future__ import annotations

import json
import logging
from typing import Any

from acm_core.addon import AddonData, SettingsCategory, widget_from_dict
from acm_core.ledger import Ledger, LedgerStore

DEFAULT_SETTINGS_PREFIX = "ACM:"
CURRENT_SETTINGS_SLOT = 0

logger = logging.getLogger(__name__)


class SettingsReader:
    """Read the host-written settings blob for an addon.

    Flat settings live in ``ACM:<IDENT>``; categorised settings live in one
    ledger per category, ``ACM:<IDENT>_<TITLE>``. In each ledger the entry
    whose value is exactly ``0`` holds the current JSON array of widgets.
    """

    def __init__(self, store: LedgerStore, *, prefix: str = DEFAULT_SETTINGS_PREFIX) -> None:
        self.store = store
        self.prefix = prefix

    def ledger_name(self, identifier: str, category_title: str | None = None) -> str:
        name = f"{self.prefix}{identifier.upper()}"
        if category_title:
            name = f"{name}_{category_title.upper()}"
        return name

    def load(self, addon_data: AddonData) -> dict[str, Any]:
        identifier = addon_data.identifier
        if addon_data.has_setting_categories:
            return {
                category.title: self._read(identifier, category)
                for category in addon_data.settings
                if isinstance(category, SettingsCategory)
            }
        return self._read(identifier, None)

    def _read(self, identifier: str, category: SettingsCategory | None) -> dict[str, Any]:
        ledger = self.store.get(
            self.ledger_name(identifier, category.title if category else None)
        )
        if ledger is None:
            return {}
        raw = self._current_blob(ledger)
        if raw is None:
            return {}
        widgets = [widget_from_dict(item) for item in json.loads(raw)]
        return {widget.label: widget.resolved_value() for widget in widgets}

    @staticmethod
    def _current_blob(ledger: Ledger) -> str | None:
        for entry in ledger.entries():
            if entry.value == CURRENT_SETTINGS_SLOT:
                return entry.label
        logger.debug("settings ledger %s has no current entry", ledger.name)
        return None
