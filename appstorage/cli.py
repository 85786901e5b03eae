"""
appstorage CLI — Inspect and manipulate application storage.

Commands:
- appstorage paths    — Show the resolved identity and storage roots
- appstorage ls       — List files and folders in a storage folder
- appstorage mkdir    — Create a folder (with a collision option)
- appstorage touch    — Create an empty file (with a collision option)
- appstorage exists   — Report whether a name is a file, a folder, or absent
- appstorage rm       — Delete a file or folder
- appstorage mv       — Move / rename a file

All names are relative to the local storage root, or the roaming root with
--roaming.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import Optional

from appstorage.engine.affinity import affinity_from_config
from appstorage.engine.config import load_storage_config
from appstorage.engine.errors import StorageArgumentError, StorageError
from appstorage.engine.logging import configure_logging
from appstorage.storage.filesystem import LocalFileSystem
from appstorage.storage.folder import LocalFolder
from appstorage.storage.options import (
    CreationCollisionOption,
    ExistenceCheckResult,
    NameCollisionOption,
)

logger = logging.getLogger("appstorage.cli")

CREATION_CHOICES = [o.value for o in CreationCollisionOption]
NAME_CHOICES = [o.value for o in NameCollisionOption]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="appstorage",
        description="appstorage — Cross-platform application storage",
    )
    parser.add_argument(
        "--config", default=None, help="Path to storage.yaml (default: auto-discover)"
    )
    parser.add_argument(
        "--roaming", action="store_true", help="Use roaming storage instead of local storage"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log at DEBUG level")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # appstorage paths
    subparsers.add_parser("paths", help="Show identity and storage roots")

    # appstorage ls
    ls_parser = subparsers.add_parser("ls", help="List a storage folder")
    ls_parser.add_argument("folder", nargs="?", help="Subfolder to list (default: root)")

    # appstorage mkdir
    mkdir_parser = subparsers.add_parser("mkdir", help="Create a folder")
    mkdir_parser.add_argument("name", help="Folder name, relative to the root")
    mkdir_parser.add_argument(
        "--collision",
        choices=CREATION_CHOICES,
        default=CreationCollisionOption.FAIL_IF_EXISTS.value,
        help="Collision option (default: fail_if_exists)",
    )

    # appstorage touch
    touch_parser = subparsers.add_parser("touch", help="Create an empty file")
    touch_parser.add_argument("name", help="File name, relative to the root")
    touch_parser.add_argument(
        "--collision",
        choices=CREATION_CHOICES,
        default=CreationCollisionOption.OPEN_IF_EXISTS.value,
        help="Collision option (default: open_if_exists)",
    )

    # appstorage exists
    exists_parser = subparsers.add_parser("exists", help="Check whether a name exists")
    exists_parser.add_argument("name", help="Name, relative to the root")

    # appstorage rm
    rm_parser = subparsers.add_parser("rm", help="Delete a file or folder")
    rm_parser.add_argument("name", help="Name, relative to the root")

    # appstorage mv
    mv_parser = subparsers.add_parser("mv", help="Move or rename a file")
    mv_parser.add_argument("source", help="File name, relative to the root")
    mv_parser.add_argument("destination", help="Destination, relative to the root")
    mv_parser.add_argument(
        "--collision",
        choices=NAME_CHOICES,
        default=NameCollisionOption.FAIL_IF_EXISTS.value,
        help="Collision option (default: fail_if_exists)",
    )

    return parser


def main(argv: Optional[list] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    try:
        config = load_storage_config(args.config)
    except StorageError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    if args.verbose:
        config.logging.level = "DEBUG"
    configure_logging(config.logging)

    commands = {
        "paths": cmd_paths,
        "ls": cmd_ls,
        "mkdir": cmd_mkdir,
        "touch": cmd_touch,
        "exists": cmd_exists,
        "rm": cmd_rm,
        "mv": cmd_mv,
    }
    handler = commands[args.command]

    async def _run() -> int:
        # Captured inside the loop so the loop thread is the protected one
        affinity = affinity_from_config(config.threading)
        fs = LocalFileSystem(config, affinity=affinity)
        try:
            return await handler(fs, args)
        finally:
            if affinity.executor is not None:
                affinity.executor.shutdown(wait=True)

    try:
        return asyncio.run(_run())
    except StorageError as e:
        logger.debug(e.to_json())
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1


def _root(fs: LocalFileSystem, args: argparse.Namespace) -> LocalFolder:
    return fs.roaming_storage if args.roaming else fs.local_storage


async def _resolve_parent(root: LocalFolder, relative: str):
    """Walk 'a/b/c' down from root; returns (parent folder, leaf name).

    '/' (no parts) names the root itself. '.', '..' and drive-qualified
    segments are rejected so a command never leaves the root.
    """
    parts = [p for p in relative.replace("\\", "/").split("/") if p]
    for part in parts:
        if part in (".", "..") or os.path.splitdrive(part)[0]:
            raise StorageArgumentError(
                f"Invalid path segment '{part}' in '{relative}'", parameter="name"
            )
    if not parts:
        return root, ""
    folder = root
    for part in parts[:-1]:
        folder = await folder.get_folder(part)
    return folder, parts[-1]


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

async def cmd_paths(fs: LocalFileSystem, args: argparse.Namespace) -> int:
    """Print identity and both roots."""
    identity = fs.paths.identity
    print(f"company:  {identity.company}")
    print(f"product:  {identity.product}")
    print(f"version:  {identity.version}")
    print(f"local:    {fs.local_storage.path}")
    print(f"roaming:  {fs.roaming_storage.path}")
    return 0


async def cmd_ls(fs: LocalFileSystem, args: argparse.Namespace) -> int:
    folder = _root(fs, args)
    if args.folder:
        parent, leaf = await _resolve_parent(folder, args.folder)
        folder = await parent.get_folder(leaf) if leaf else parent

    for sub in sorted(await folder.list_folders(), key=lambda f: f.name):
        print(f"{sub.name}/")
    for f in sorted(await folder.list_files(), key=lambda f: f.name):
        print(f.name)
    return 0


async def cmd_mkdir(fs: LocalFileSystem, args: argparse.Namespace) -> int:
    parent, leaf = await _resolve_parent(_root(fs, args), args.name)
    folder = await parent.create_folder(leaf, CreationCollisionOption(args.collision))
    print(folder.path)
    return 0


async def cmd_touch(fs: LocalFileSystem, args: argparse.Namespace) -> int:
    parent, leaf = await _resolve_parent(_root(fs, args), args.name)
    created = await parent.create_file(leaf, CreationCollisionOption(args.collision))
    print(created.path)
    return 0


async def cmd_exists(fs: LocalFileSystem, args: argparse.Namespace) -> int:
    parent, leaf = await _resolve_parent(_root(fs, args), args.name)
    result = await parent.check_exists(leaf)
    print(result.value)
    return 0 if result is not ExistenceCheckResult.NOT_FOUND else 1


async def cmd_rm(fs: LocalFileSystem, args: argparse.Namespace) -> int:
    parent, leaf = await _resolve_parent(_root(fs, args), args.name)
    if not leaf:
        # Root folders refuse deletion
        await parent.delete()
        return 0

    kind = await parent.check_exists(leaf)
    if kind is ExistenceCheckResult.FOLDER_EXISTS:
        await (await parent.get_folder(leaf)).delete()
    else:
        await (await parent.get_file(leaf)).delete()
    print(f"Deleted {leaf}")
    return 0


async def cmd_mv(fs: LocalFileSystem, args: argparse.Namespace) -> int:
    root = _root(fs, args)
    src_parent, src_leaf = await _resolve_parent(root, args.source)
    dst_parent, dst_leaf = await _resolve_parent(root, args.destination)
    source = await src_parent.get_file(src_leaf)
    await source.move(
        os.path.join(dst_parent.path, dst_leaf),
        NameCollisionOption(args.collision),
    )
    print(source.path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
