"""Tests for layered configuration and the application wiring."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from acm_core.addon import AddonData
from acm_core.app import AcmApp
from acm_core.config import AcmConfig, UserDirs, default_config_path
from acm_core.ledger import JsonLedgerStore, MemoryLedgerStore

def _dirs(tmp_path: Path) -> UserDirs:
    return UserDirs(
        config_dir_override=tmp_path / "config",
        data_dir_override=tmp_path / "data",
    )


def test_defaults_use_user_data_dir(tmp_path: Path) -> None:
    config = AcmConfig.resolve(env={}, user_dirs=_dirs(tmp_path))
    assert config.fs_root == "ACM:FS"
    assert config.log_ledger == "ACM:LOG"
    assert config.store_path == tmp_path / "data" / "ledgers.json"


def test_layers_resolve_in_priority_order(tmp_path: Path) -> None:
    dirs = _dirs(tmp_path)
    config_file = default_config_path(dirs)
    config_file.parent.mkdir(parents=True)
    config_file.write_text(
        '[acm]\nfs_root = "FILE:FS"\nlog_ledger = "FILE:LOG"\nsignal_prefix = "FILE:SIG"\n',
        encoding="utf-8",
    )

    config = AcmConfig.resolve(
        overrides={"fs_root": "CLI:FS"},
        env={"ACM_LOG_LEDGER": "ENV:LOG", "ACM_STORE": str(tmp_path / "s.json")},
        user_dirs=dirs,
    )

    assert config.fs_root == "CLI:FS"
    assert config.log_ledger == "ENV:LOG"
    assert config.signal_prefix == "FILE:SIG"
    assert config.settings_prefix == "ACM:"
    assert config.store_path == tmp_path / "s.json"


def test_unreadable_config_file_is_ignored(tmp_path: Path) -> None:
    bad = tmp_path / "config.toml"
    bad.write_text("not = [valid", encoding="utf-8")
    config = AcmConfig.resolve(env={}, user_dirs=_dirs(tmp_path), config_path=bad)
    assert config.fs_root == "ACM:FS"


def test_app_wires_one_signal_bus(make_addon: Callable[..., AddonData]) -> None:
    app = AcmApp()
    assert isinstance(app.store, MemoryLedgerStore)
    assert app.library.signals is app.signals

    app.library.init_addon(make_addon())
    app.ensure_log_ledger()
    app.ensure_log_ledger()
    app.library.log("started")

    status = app.status()
    assert status["addon"] == "voxel_tools"
    assert status["store"] == "memory"
    assert status["ledgers"] == "1"


def test_app_persistent_store(tmp_path: Path, make_addon: Callable[..., AddonData]) -> None:
    config = AcmConfig(store_path=tmp_path / "ledgers.json")
    app = AcmApp(config=config, persistent=True)
    assert isinstance(app.store, JsonLedgerStore)

    app.library.init_addon(make_addon())
    app.library.fs.new("saves").write("a", 1)

    reopened = AcmApp(config=config, persistent=True)
    reopened.library.init_addon(make_addon())
    assert reopened.library.fs.get("saves").read("a") == 1
