"""Error types raised by the ACM core."""

from __future__ import annotations


class AcmError(Exception):
    """Base type for ACM failures."""


class NotFoundError(AcmError):
    """Raised when a file, directory or ledger is required but missing."""

    def __init__(self, message: str, *, name: str | None = None) -> None:
        super().__init__(message)
        self.name = name


class AlreadyExistsError(AcmError):
    """Raised when a create, rename or copy target already exists."""

    def __init__(self, message: str, *, name: str | None = None) -> None:
        super().__init__(message)
        self.name = name


class PermissionDeniedError(AcmError):
    """Raised by ``Directory.check_owner`` for directories owned by another addon.

    The mutating directory operations never surface it; they turn a failed
    ownership check into a silent no-op.
    """


class UninitializedError(AcmError):
    """Raised when an operation needs the addon identity before ``init_addon``."""


class AddonManifestError(AcmError):
    """Raised when an addon descriptor cannot be loaded or parsed."""
