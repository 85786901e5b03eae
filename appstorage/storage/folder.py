"""
appstorage Folder — A directory on local disk bound to an absolute path.

Construction creates the directory unless ``must_exist=True`` is passed, in
which case a missing directory raises StorageDirectoryNotFoundError.

Two existence operations are kept apart on purpose:
- ensure_exists()   strict by default; fails when the directory is gone
- ensure_created()  self-healing; recreates a missing directory

create_file() / create_folder() self-heal their parent. Listing, lookup and
delete are strict, so entries obtained beneath a deleted folder fail with a
*NotFound error afterwards.
"""

from __future__ import annotations

import logging
import os
import shutil
from typing import List, Optional

from appstorage.engine.affinity import (
    CancellationToken,
    ThreadAffinity,
    ensure_token,
    switch_off_main_thread,
)
from appstorage.engine.errors import (
    StorageDirectoryNotFoundError,
    StorageFileNotFoundError,
    StorageIOError,
)
from appstorage.engine.logging import storage_extra
from appstorage.storage.base import BaseFolder
from appstorage.storage.collision import (
    file_unique_name,
    folder_unique_name,
    resolve_name,
)
from appstorage.storage.file import LocalFile
from appstorage.storage.guards import coerce_option, ensure_not_empty
from appstorage.storage.options import CreationCollisionOption, ExistenceCheckResult

logger = logging.getLogger("appstorage.storage.folder")


class LocalFolder(BaseFolder):
    """Folder entry. ``can_delete`` is False for root storage folders."""

    def __init__(
        self,
        path: str,
        can_delete: bool = False,
        *,
        affinity: Optional[ThreadAffinity] = None,
        must_exist: bool = False,
    ):
        ensure_not_empty(path, "path")
        full = os.path.normpath(os.path.abspath(path))
        if must_exist and not os.path.isdir(full):
            raise StorageDirectoryNotFoundError(
                f"Directory does not exist: {full}", path=full
            )
        os.makedirs(full, exist_ok=True)
        self._path = full
        self._name = os.path.basename(full)
        self._can_delete = can_delete
        self._affinity = affinity or ThreadAffinity()

    @property
    def name(self) -> str:
        return self._name

    @property
    def path(self) -> str:
        return self._path

    @property
    def can_delete(self) -> bool:
        return self._can_delete

    @property
    def affinity(self) -> ThreadAffinity:
        return self._affinity

    def _child(self, name: str) -> str:
        return os.path.join(self._path, name)

    def _folder(self, path: str, must_exist: bool = False) -> "LocalFolder":
        return LocalFolder(path, True, affinity=self._affinity, must_exist=must_exist)

    def _file(self, path: str) -> LocalFile:
        return LocalFile(path, affinity=self._affinity)

    # -------------------------------------------------------------------
    # Existence
    # -------------------------------------------------------------------

    async def ensure_exists(
        self,
        cancellation_token: Optional[CancellationToken] = None,
        fail_if_missing: bool = True,
    ) -> None:
        switch = switch_off_main_thread(self._affinity, cancellation_token)
        await switch.run(self._ensure_exists, fail_if_missing)

    async def ensure_created(self, cancellation_token: Optional[CancellationToken] = None) -> None:
        """Create the directory if it is missing. Never fails for absence."""
        await self.ensure_exists(cancellation_token, fail_if_missing=False)

    def _ensure_exists(self, fail_if_missing: bool) -> None:
        if fail_if_missing and not os.path.isdir(self._path):
            raise StorageDirectoryNotFoundError(
                f"A folder was not found at the path {self._path}",
                path=self._path,
            )
        os.makedirs(self._path, exist_ok=True)

    async def check_exists(
        self, name: str, cancellation_token: Optional[CancellationToken] = None
    ) -> ExistenceCheckResult:
        ensure_not_empty(name, "name")
        switch = switch_off_main_thread(self._affinity, cancellation_token)
        return await switch.run(self._check_exists, name)

    def _check_exists(self, name: str) -> ExistenceCheckResult:
        target = self._child(name)
        if os.path.isfile(target):
            return ExistenceCheckResult.FILE_EXISTS
        if os.path.isdir(target):
            return ExistenceCheckResult.FOLDER_EXISTS
        return ExistenceCheckResult.NOT_FOUND

    # -------------------------------------------------------------------
    # Create
    # -------------------------------------------------------------------

    async def create_file(
        self,
        desired_name: str,
        option: CreationCollisionOption,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> LocalFile:
        ensure_not_empty(desired_name, "desired_name")
        policy = coerce_option(CreationCollisionOption, option, "option")
        switch = switch_off_main_thread(self._affinity, cancellation_token)
        return await switch.run(
            self._create_file, desired_name, policy, ensure_token(cancellation_token)
        )

    def _create_file(
        self, desired_name: str, policy: CreationCollisionOption, token: CancellationToken
    ) -> LocalFile:
        self._ensure_exists(fail_if_missing=False)
        resolution = resolve_name(
            self._path,
            desired_name,
            policy,
            exists=os.path.isfile,
            remove=os.remove,
            unique_name=file_unique_name,
            cancellation_token=token,
        )
        if not resolution.opened_existing:
            with open(resolution.path, "wb"):
                pass
            logger.info(
                f"Created file: {resolution.path}",
                extra=storage_extra("create_file", resolution.path, option=policy.value),
            )
        return self._file(resolution.path)

    async def create_folder(
        self,
        desired_name: str,
        option: CreationCollisionOption,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> "LocalFolder":
        ensure_not_empty(desired_name, "desired_name")
        policy = coerce_option(CreationCollisionOption, option, "option")
        switch = switch_off_main_thread(self._affinity, cancellation_token)
        return await switch.run(
            self._create_folder, desired_name, policy, ensure_token(cancellation_token)
        )

    def _create_folder(
        self, desired_name: str, policy: CreationCollisionOption, token: CancellationToken
    ) -> "LocalFolder":
        self._ensure_exists(fail_if_missing=False)
        resolution = resolve_name(
            self._path,
            desired_name,
            policy,
            exists=os.path.isdir,
            remove=shutil.rmtree,
            unique_name=folder_unique_name,
            cancellation_token=token,
        )
        if not resolution.opened_existing:
            # exist_ok: concurrent OPEN_IF_EXISTS callers may race to create
            os.makedirs(resolution.path, exist_ok=True)
            logger.info(
                f"Created folder: {resolution.path}",
                extra=storage_extra("create_folder", resolution.path, option=policy.value),
            )
        return self._folder(resolution.path)

    # -------------------------------------------------------------------
    # Lookup / Enumerate
    # -------------------------------------------------------------------

    async def get_file(
        self, name: str, cancellation_token: Optional[CancellationToken] = None
    ) -> LocalFile:
        ensure_not_empty(name, "name")
        switch = switch_off_main_thread(self._affinity, cancellation_token)
        return await switch.run(self._get_file, name)

    def _get_file(self, name: str) -> LocalFile:
        target = self._child(name)
        if not os.path.isfile(target):
            raise StorageFileNotFoundError(
                f"File does not exist: {target}", path=target, name=name, operation="get_file"
            )
        return self._file(target)

    async def get_folder(
        self, name: str, cancellation_token: Optional[CancellationToken] = None
    ) -> "LocalFolder":
        ensure_not_empty(name, "name")
        switch = switch_off_main_thread(self._affinity, cancellation_token)
        return await switch.run(self._get_folder, name)

    def _get_folder(self, name: str) -> "LocalFolder":
        target = self._child(name)
        if not os.path.isdir(target):
            raise StorageDirectoryNotFoundError(
                f"Directory does not exist: {target}",
                path=target,
                name=name,
                operation="get_folder",
            )
        return self._folder(target, must_exist=True)

    async def list_files(
        self, cancellation_token: Optional[CancellationToken] = None
    ) -> List[LocalFile]:
        switch = switch_off_main_thread(self._affinity, cancellation_token)
        return await switch.run(self._list_files)

    def _list_files(self) -> List[LocalFile]:
        self._ensure_exists(fail_if_missing=True)
        with os.scandir(self._path) as entries:
            return [self._file(entry.path) for entry in entries if entry.is_file()]

    async def list_folders(
        self, cancellation_token: Optional[CancellationToken] = None
    ) -> List["LocalFolder"]:
        switch = switch_off_main_thread(self._affinity, cancellation_token)
        return await switch.run(self._list_folders)

    def _list_folders(self) -> List["LocalFolder"]:
        self._ensure_exists(fail_if_missing=True)
        with os.scandir(self._path) as entries:
            paths = [entry.path for entry in entries if entry.is_dir()]
        return [self._folder(p) for p in paths]

    # -------------------------------------------------------------------
    # Delete
    # -------------------------------------------------------------------

    async def delete(self, cancellation_token: Optional[CancellationToken] = None) -> None:
        if not self._can_delete:
            raise StorageIOError(
                "Cannot delete root storage folder.", path=self._path, operation="delete_folder"
            )
        switch = switch_off_main_thread(self._affinity, cancellation_token)
        await switch.run(self._delete)

    def _delete(self) -> None:
        self._ensure_exists(fail_if_missing=True)
        shutil.rmtree(self._path)
        logger.info(
            f"Deleted folder: {self._path}", extra=storage_extra("delete_folder", self._path)
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LocalFolder):
            return NotImplemented
        return self._path == other._path

    def __hash__(self) -> int:
        return hash(self._path)

    def __repr__(self) -> str:
        return (
            f"<LocalFolder name='{self._name}' path='{self._path}' "
            f"can_delete={self._can_delete}>"
        )
