"""Core runtime pieces for the ACM addon library."""

from .addon import AcmIcon, AddonData, AddonDescription, ExtensionData, SettingsCategory
from .app import AcmApp
from .channel import HostChannel, LocalBroadcastChannel, ScriptMessage
from .config import AcmConfig, UserDirs, default_config_path
from .errors import (
    AcmError,
    AddonManifestError,
    AlreadyExistsError,
    NotFoundError,
    PermissionDeniedError,
    UninitializedError,
)
from .fs import Directory, DirectoryRegistry
from .ledger import JsonLedgerStore, LedgerStore, MemoryLedgerStore
from .library import AddonLibrary
from .settings import SettingsReader
from .signals import SignalBus

__all__ = [
    "AcmApp",
    "AcmConfig",
    "AcmError",
    "AcmIcon",
    "AddonData",
    "AddonDescription",
    "AddonLibrary",
    "AddonManifestError",
    "AlreadyExistsError",
    "Directory",
    "DirectoryRegistry",
    "ExtensionData",
    "HostChannel",
    "JsonLedgerStore",
    "LedgerStore",
    "LocalBroadcastChannel",
    "MemoryLedgerStore",
    "NotFoundError",
    "PermissionDeniedError",
    "ScriptMessage",
    "SettingsCategory",
    "SettingsReader",
    "SignalBus",
    "UninitializedError",
    "UserDirs",
    "default_config_path",
]
