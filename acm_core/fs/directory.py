"""File system directory emulated over a single ledger.

Every file is one ledger entry whose label is ``"<fileName>:<json>"`` and
whose value is the slot number it was inserted at. Lookups scan the ledger
by label prefix, so every operation is linear in the number of files.

Mutations are split across several ledger calls and are not atomic:

* a new slot is the entry count read just before the entry is added, so two
  interleaved writers (or a write after a delete) can reuse a slot number;
* an overwrite removes every old entry for the file before adding the new
  one, so a ledger holding several entries for one name is cleaned up;
* ``rename`` and ``move`` delete and write in separate steps, so a failure
  between the two loses the file.

A directory only mutates its ledger when the owning addon's identity is part
of the ledger name. Other callers may read, but their writes are skipped
without an error.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from acm_core.errors import AlreadyExistsError, NotFoundError, PermissionDeniedError
from acm_core.ledger import Ledger, LedgerEntry

logger = logging.getLogger(__name__)

SEPARATOR = ":"


def encode_content(content: Any) -> str:
    """Serialize content the way the host stores it (compact JSON)."""

    return json.dumps(content, ensure_ascii=False, separators=(",", ":"))


def decode_content(raw: str) -> Any:
    return json.loads(raw)


def _validate_name(name: str) -> str:
    if not name:
        raise ValueError("file name cannot be empty.")
    if SEPARATOR in name:
        raise ValueError(f"file name may not contain {SEPARATOR!r}: {name!r}")
    return name


class Directory:
    """One directory of files backed by one ledger."""

    def __init__(self, ledger: Ledger, owner_id: str) -> None:
        self._ledger = ledger
        self.db_id = ledger.name
        self.owner_id = owner_id

    def __repr__(self) -> str:
        return f"Directory({self.db_id!r}, owner={self.owner_id!r})"

    # ---------- Ownership ----------

    @property
    def is_owned(self) -> bool:
        return self.owner_id.upper() in self.db_id.upper()

    def check_owner(self) -> None:
        """Raise ``PermissionDeniedError`` when the caller does not own this directory."""

        if not self.is_owned:
            raise PermissionDeniedError(
                f"directory {self.db_id} does not belong to addon {self.owner_id}"
            )

    def _may_mutate(self, operation: str, file_name: str) -> bool:
        if self.is_owned:
            return True
        logger.debug(
            "skipping %s of %s in %s: not owned by %s",
            operation,
            file_name,
            self.db_id,
            self.owner_id,
        )
        return False

    # ---------- Entry lookup ----------

    def _find_all(self, file_name: str) -> list[LedgerEntry]:
        prefix = f"{_validate_name(file_name)}{SEPARATOR}"
        return [entry for entry in self._ledger.entries() if entry.label.startswith(prefix)]

    def _find(self, file_name: str) -> LedgerEntry | None:
        matches = self._find_all(file_name)
        return matches[0] if matches else None

    def _remove_all(self, entries: list[LedgerEntry]) -> None:
        for entry in entries:
            self._ledger.remove_entry(entry)

    def _require(self, file_name: str, *, role: str = "File") -> LedgerEntry:
        entry = self._find(file_name)
        if entry is None:
            raise NotFoundError(f"{role} {file_name} does not exist", name=file_name)
        return entry

    @staticmethod
    def _payload(file_name: str, entry: LedgerEntry) -> str:
        return entry.label[len(file_name) + len(SEPARATOR):]

    # ---------- Public API ----------

    def exists(self, file_name: str) -> bool:
        return self._find(file_name) is not None

    def read(self, file_name: str) -> Any:
        entry = self._require(file_name)
        return decode_content(self._payload(file_name, entry))

    def write(self, file_name: str, content: Any, allow_overwrite: bool = True) -> None:
        """Store ``content`` under ``file_name``.

        Raises ``AlreadyExistsError`` when the file exists and
        ``allow_overwrite`` is false. Non-owners are skipped silently.
        """

        label = f"{_validate_name(file_name)}{SEPARATOR}{encode_content(content)}"
        existing = self._find_all(file_name)
        if existing and not allow_overwrite:
            raise AlreadyExistsError(f"File {file_name} already exists", name=file_name)

        if not self._may_mutate("write", file_name):
            return

        self._remove_all(existing)
        slot = len(self._ledger.entries())
        self._ledger.set_entry(label, slot)

    def delete(self, file_name: str) -> None:
        self._require(file_name)

        if not self._may_mutate("delete", file_name):
            return

        self._remove_all(self._find_all(file_name))

    def rename(self, old_file_name: str, new_file_name: str) -> None:
        entry = self._require(old_file_name)
        if self.exists(new_file_name):
            raise AlreadyExistsError(f"File {new_file_name} already exists", name=new_file_name)

        if not self._may_mutate("rename", old_file_name):
            return

        content = decode_content(self._payload(old_file_name, entry))
        self.delete(old_file_name)
        self.write(new_file_name, content)

    def copy(self, source_file_name: str, destination_file_name: str) -> None:
        entry = self._require(source_file_name, role="Source file")
        if self.exists(destination_file_name):
            raise AlreadyExistsError(
                f"Destination file {destination_file_name} already exists",
                name=destination_file_name,
            )

        if not self._may_mutate("copy", source_file_name):
            return

        content = decode_content(self._payload(source_file_name, entry))
        self.write(destination_file_name, content)

    def move(self, source_file_name: str, destination_file_name: str) -> None:
        """Copy then delete; each step checks ownership again on its own."""

        self._require(source_file_name, role="Source file")
        if self.exists(destination_file_name):
            raise AlreadyExistsError(
                f"Destination file {destination_file_name} already exists",
                name=destination_file_name,
            )

        if not self._may_mutate("move", source_file_name):
            return

        self.copy(source_file_name, destination_file_name)
        self.delete(source_file_name)

    def file_size(self, file_name: str) -> int:
        """Length in characters of the serialized content of ``file_name``."""

        entry = self._require(file_name)
        return len(encode_content(decode_content(self._payload(file_name, entry))))

    def size(self) -> int:
        """Total length of every encoded entry, file name prefixes included."""

        return sum(len(entry.label) for entry in self._ledger.entries())

    def list(self) -> list[str]:
        return [entry.label.split(SEPARATOR, 1)[0] for entry in self._ledger.entries()]

    def slots(self) -> dict[str, int]:
        """Map each file name to the slot number stored with its entry."""

        return {
            entry.label.split(SEPARATOR, 1)[0]: entry.value
            for entry in self._ledger.entries()
        }
