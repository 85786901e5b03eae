"""
appstorage File — A file on local disk bound to an absolute path.

A LocalFile has no side effect at construction: it wraps a file that exists
or is about to. ``path`` and ``name`` change only through move() / rename().
"""

from __future__ import annotations

import logging
import os
import shutil
from typing import BinaryIO, Optional

from appstorage.engine.affinity import (
    CancellationToken,
    ThreadAffinity,
    ensure_token,
    switch_off_main_thread,
)
from appstorage.engine.errors import StorageFileNotFoundError, StorageIOError
from appstorage.engine.logging import storage_extra
from appstorage.storage.base import BaseFile
from appstorage.storage.collision import file_unique_name, resolve_name
from appstorage.storage.guards import coerce_option, ensure_not_empty
from appstorage.storage.options import OPEN_MODES, FileAccess, NameCollisionOption

logger = logging.getLogger("appstorage.storage.file")


class LocalFile(BaseFile):
    """File entry. Operations switch off the affinity's main thread first."""

    def __init__(self, path: str, affinity: Optional[ThreadAffinity] = None):
        ensure_not_empty(path, "path")
        self._path = os.path.normpath(os.path.abspath(path))
        self._name = os.path.basename(self._path)
        self._affinity = affinity or ThreadAffinity()

    @property
    def name(self) -> str:
        return self._name

    @property
    def path(self) -> str:
        return self._path

    @property
    def affinity(self) -> ThreadAffinity:
        return self._affinity

    # -------------------------------------------------------------------
    # Delete / Open
    # -------------------------------------------------------------------

    def _require_exists(self, operation: str) -> None:
        if not os.path.isfile(self._path):
            raise StorageFileNotFoundError(
                f"File does not exist: {self._path}",
                path=self._path,
                operation=operation,
            )

    async def delete(self, cancellation_token: Optional[CancellationToken] = None) -> None:
        switch = switch_off_main_thread(self._affinity, cancellation_token)
        await switch.run(self._delete)

    def _delete(self) -> None:
        self._require_exists("delete")
        os.remove(self._path)
        logger.info(f"Deleted file: {self._path}", extra=storage_extra("delete_file", self._path))

    async def open(
        self,
        mode: FileAccess,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> BinaryIO:
        access = coerce_option(FileAccess, mode, "mode")
        switch = switch_off_main_thread(self._affinity, cancellation_token)
        return await switch.run(self._open, access)

    def _open(self, access: FileAccess) -> BinaryIO:
        self._require_exists("open")
        return open(self._path, OPEN_MODES[access])

    async def read_bytes(self, cancellation_token: Optional[CancellationToken] = None) -> bytes:
        """Read the whole file."""
        stream = await self.open(FileAccess.READ, cancellation_token)
        with stream:
            return stream.read()

    async def write_bytes(
        self,
        data: bytes,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> None:
        """Replace the file's contents with ``data``."""
        stream = await self.open(FileAccess.READ_WRITE, cancellation_token)
        with stream:
            stream.write(data)
            stream.truncate()

    # -------------------------------------------------------------------
    # Move / Rename
    # -------------------------------------------------------------------

    async def move(
        self,
        new_path: str,
        option: NameCollisionOption = NameCollisionOption.REPLACE_EXISTING,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> None:
        ensure_not_empty(new_path, "new_path")
        policy = coerce_option(NameCollisionOption, option, "option")
        switch = switch_off_main_thread(self._affinity, cancellation_token)
        await switch.run(self._move, new_path, policy, ensure_token(cancellation_token))

    def _move(self, new_path: str, policy: NameCollisionOption, token: CancellationToken) -> None:
        self._require_exists("move")
        destination = os.path.normpath(os.path.abspath(new_path))
        directory, desired_name = os.path.split(destination)

        if policy is NameCollisionOption.REPLACE_EXISTING and os.path.normcase(
            destination
        ) == os.path.normcase(self._path):
            return

        resolution = resolve_name(
            directory,
            desired_name,
            policy,
            exists=os.path.isfile,
            remove=os.remove,
            unique_name=file_unique_name,
            cancellation_token=token,
        )
        if os.path.isdir(resolution.path):
            raise StorageIOError(
                f"Cannot move a file onto a directory: {resolution.path}",
                path=resolution.path,
                operation="move",
            )
        source = self._path
        shutil.move(source, resolution.path)
        self._path = resolution.path
        self._name = resolution.name
        logger.info(
            f"Moved file: {source} -> {resolution.path}",
            extra=storage_extra("move_file", resolution.path, option=policy.value),
        )

    async def rename(
        self,
        new_name: str,
        option: NameCollisionOption = NameCollisionOption.FAIL_IF_EXISTS,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> None:
        ensure_not_empty(new_name, "new_name")
        await self.move(
            os.path.join(os.path.dirname(self._path), new_name),
            option,
            cancellation_token,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LocalFile):
            return NotImplemented
        return self._path == other._path

    __hash__ = None  # path is mutable

    def __repr__(self) -> str:
        return f"<LocalFile name='{self._name}' path='{self._path}'>"
