"""Command line surface for inspecting and editing a persisted ledger store."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Sequence

from acm_core.app import AcmApp
from acm_core.config import AcmConfig
from acm_core.errors import AcmError, NotFoundError, UninitializedError
from acm_core.fs import Directory, DirectoryRegistry

CLI_VERSION = "0.1.0"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="acm",
        description="ACM: browse the ledger-backed addon file system.",
    )
    parser.add_argument("--version", action="version", version=f"acm v{CLI_VERSION}")
    parser.add_argument("--store", default=None, help="ledger store file (default: user data dir)")
    parser.add_argument("--addon", default=None, help="addon identity, <author>_<packId>")
    parser.add_argument("--verbose", "-v", action="store_true", help="enable debug logging")
    subparsers = parser.add_subparsers(dest="command")
    subparsers.required = False

    dirs_cmd = subparsers.add_parser("dirs", help="list the addon's directories")
    dirs_cmd.add_argument("--all", action="store_true", help="list every ledger in the store")
    dirs_cmd.set_defaults(func=_handle_dirs)

    mkdir_cmd = subparsers.add_parser("mkdir", help="create a directory")
    mkdir_cmd.add_argument("directory")
    mkdir_cmd.set_defaults(func=_handle_mkdir)

    rmdir_cmd = subparsers.add_parser("rmdir", help="delete a directory and its files")
    rmdir_cmd.add_argument("directory")
    rmdir_cmd.set_defaults(func=_handle_rmdir)

    ls_cmd = subparsers.add_parser("ls", help="list files in a directory")
    ls_cmd.add_argument("directory")
    ls_cmd.add_argument("--from", dest="source_addon", default=None, help="read another addon's directory")
    ls_cmd.set_defaults(func=_handle_ls)

    cat_cmd = subparsers.add_parser("cat", help="print a file's content as JSON")
    cat_cmd.add_argument("directory")
    cat_cmd.add_argument("file")
    cat_cmd.add_argument("--from", dest="source_addon", default=None, help="read another addon's directory")
    cat_cmd.set_defaults(func=_handle_cat)

    write_cmd = subparsers.add_parser("write", help="write JSON content to a file")
    write_cmd.add_argument("directory")
    write_cmd.add_argument("file")
    write_cmd.add_argument("content", help="JSON document")
    write_cmd.add_argument("--no-overwrite", action="store_true", help="fail if the file exists")
    write_cmd.set_defaults(func=_handle_write)

    rm_cmd = subparsers.add_parser("rm", help="delete a file")
    rm_cmd.add_argument("directory")
    rm_cmd.add_argument("file")
    rm_cmd.set_defaults(func=_handle_rm)

    mv_cmd = subparsers.add_parser("mv", help="move a file within a directory")
    mv_cmd.add_argument("directory")
    mv_cmd.add_argument("source")
    mv_cmd.add_argument("destination")
    mv_cmd.set_defaults(func=_handle_mv)

    cp_cmd = subparsers.add_parser("cp", help="copy a file within a directory")
    cp_cmd.add_argument("directory")
    cp_cmd.add_argument("source")
    cp_cmd.add_argument("destination")
    cp_cmd.set_defaults(func=_handle_cp)

    du_cmd = subparsers.add_parser("du", help="report directory or file size")
    du_cmd.add_argument("directory")
    du_cmd.add_argument("file", nargs="?", default=None)
    du_cmd.set_defaults(func=_handle_du)

    log_cmd = subparsers.add_parser("log", help="show or append to the shared log ledger")
    log_cmd.add_argument("--append", default=None, help="message to append")
    log_cmd.set_defaults(func=_handle_log)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if not getattr(args, "func", None):
        parser.print_help()
        return 0
    try:
        return int(args.func(args) or 0)
    except (AcmError, ValueError) as exc:
        print(f"[acm] error: {exc}", file=sys.stderr)
        return 1


# ---------- Helpers ----------


def _config(args: argparse.Namespace) -> AcmConfig:
    overrides = {"store_path": args.store} if args.store else None
    return AcmConfig.resolve(overrides=overrides)


def _app(args: argparse.Namespace) -> AcmApp:
    return AcmApp(config=_config(args), persistent=True)


def _registry(args: argparse.Namespace) -> DirectoryRegistry:
    app = _app(args)

    def identity() -> str:
        if not args.addon:
            raise UninitializedError("--addon is required for file system commands")
        return args.addon

    return DirectoryRegistry(app.store, identity, root=app.config.fs_root)


def _directory(args: argparse.Namespace, *, source_addon: str | None = None) -> Directory:
    registry = _registry(args)
    directory = registry.get(args.directory, addon_id=source_addon)
    if directory is None:
        raise NotFoundError(f"Directory {args.directory} does not exist", name=args.directory)
    return directory


def _print_json(value: Any) -> None:
    print(json.dumps(value, ensure_ascii=False, indent=2))


# ---------- Handlers ----------


def _handle_dirs(args: argparse.Namespace) -> int:
    if args.all:
        names = _app(args).store.names()
    else:
        names = tuple(_registry(args).list())
    if not names:
        print("[acm:fs] no directories")
        return 0
    for name in names:
        print(f"[acm:fs] {name}")
    return 0


def _handle_mkdir(args: argparse.Namespace) -> int:
    directory = _registry(args).new(args.directory, ignore_warn=True)
    print(f"[acm:fs] ready {directory.db_id}")
    return 0


def _handle_rmdir(args: argparse.Namespace) -> int:
    _registry(args).delete(args.directory)
    print(f"[acm:fs] removed {args.directory}")
    return 0


def _handle_ls(args: argparse.Namespace) -> int:
    directory = _directory(args, source_addon=args.source_addon)
    slots = directory.slots()
    for name in directory.list():
        print(f"{slots.get(name, 0):>4}  {directory.file_size(name):>8}  {name}")
    return 0


def _handle_cat(args: argparse.Namespace) -> int:
    directory = _directory(args, source_addon=args.source_addon)
    _print_json(directory.read(args.file))
    return 0


def _handle_write(args: argparse.Namespace) -> int:
    content = json.loads(args.content)
    directory = _registry(args).new(args.directory, ignore_warn=True)
    directory.check_owner()
    directory.write(args.file, content, allow_overwrite=not args.no_overwrite)
    print(f"[acm:fs] wrote {args.file} ({directory.file_size(args.file)} chars)")
    return 0


def _handle_rm(args: argparse.Namespace) -> int:
    _directory(args).delete(args.file)
    print(f"[acm:fs] deleted {args.file}")
    return 0


def _handle_mv(args: argparse.Namespace) -> int:
    _directory(args).move(args.source, args.destination)
    print(f"[acm:fs] moved {args.source} -> {args.destination}")
    return 0


def _handle_cp(args: argparse.Namespace) -> int:
    _directory(args).copy(args.source, args.destination)
    print(f"[acm:fs] copied {args.source} -> {args.destination}")
    return 0


def _handle_du(args: argparse.Namespace) -> int:
    directory = _directory(args)
    if args.file:
        print(f"{directory.file_size(args.file)}  {args.file}")
    else:
        print(f"{directory.size()}  {directory.db_id}")
    return 0


def _handle_log(args: argparse.Namespace) -> int:
    app = _app(args)
    if args.append is not None:
        app.ensure_log_ledger()
        app.library.log(args.append)
        return 0
    ledger = app.store.get(app.config.log_ledger)
    if ledger is None:
        raise NotFoundError("Log database not found", name=app.config.log_ledger)
    for item in sorted(ledger.entries(), key=lambda item: item.value):
        print(item.label)
    return 0
