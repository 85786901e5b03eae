"""
appstorage FileSystem — Entry point to application storage on local disk.

Usage:
    config = load_storage_config()
    fs = LocalFileSystem(config, affinity=ThreadAffinity.capture())
    folder = await fs.local_storage.create_folder("cache", CreationCollisionOption.OPEN_IF_EXISTS)

The configuration and the thread affinity are handed in explicitly; every
folder and file produced by the filesystem carries the same affinity.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from appstorage.engine.affinity import (
    CancellationToken,
    ThreadAffinity,
    switch_off_main_thread,
)
from appstorage.engine.config import StorageConfig, load_storage_config
from appstorage.storage.base import BaseFileSystem
from appstorage.storage.file import LocalFile
from appstorage.storage.folder import LocalFolder
from appstorage.storage.guards import ensure_not_empty
from appstorage.storage.paths import StoragePaths

logger = logging.getLogger("appstorage.storage.filesystem")


class LocalFileSystem(BaseFileSystem):
    """
    Local disk implementation of BaseFileSystem.

    local_storage / roaming_storage are root folders: they are created on
    access and refuse deletion.
    """

    def __init__(
        self,
        config: Optional[StorageConfig] = None,
        affinity: Optional[ThreadAffinity] = None,
        paths: Optional[StoragePaths] = None,
    ):
        self._config = config or StorageConfig()
        self._affinity = affinity or ThreadAffinity()
        self._paths = paths or StoragePaths.from_config(self._config)

    @classmethod
    def from_config_file(
        cls,
        config_path: Optional[str] = None,
        affinity: Optional[ThreadAffinity] = None,
    ) -> "LocalFileSystem":
        """Load storage.yaml and build a filesystem from it."""
        return cls(load_storage_config(config_path), affinity=affinity)

    @property
    def config(self) -> StorageConfig:
        return self._config

    @property
    def paths(self) -> StoragePaths:
        return self._paths

    @property
    def affinity(self) -> ThreadAffinity:
        return self._affinity

    @property
    def local_storage(self) -> LocalFolder:
        return LocalFolder(self._paths.local_root, False, affinity=self._affinity)

    @property
    def roaming_storage(self) -> LocalFolder:
        return LocalFolder(self._paths.roaming_root, False, affinity=self._affinity)

    async def get_file_from_path(
        self, path: str, cancellation_token: Optional[CancellationToken] = None
    ) -> Optional[LocalFile]:
        ensure_not_empty(path, "path")
        switch = switch_off_main_thread(self._affinity, cancellation_token)
        return await switch.run(self._get_file_from_path, path)

    def _get_file_from_path(self, path: str) -> Optional[LocalFile]:
        if not os.path.isfile(path):
            logger.debug(f"No file at {path}")
            return None
        return LocalFile(path, affinity=self._affinity)

    async def get_folder_from_path(
        self, path: str, cancellation_token: Optional[CancellationToken] = None
    ) -> Optional[LocalFolder]:
        ensure_not_empty(path, "path")
        switch = switch_off_main_thread(self._affinity, cancellation_token)
        return await switch.run(self._get_folder_from_path, path)

    def _get_folder_from_path(self, path: str) -> Optional[LocalFolder]:
        if not os.path.isdir(path):
            logger.debug(f"No folder at {path}")
            return None
        return LocalFolder(path, True, affinity=self._affinity)

    def __repr__(self) -> str:
        return f"<LocalFileSystem paths={self._paths!r}>"
