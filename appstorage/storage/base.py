"""
Abstract storage interfaces.

BaseFileSystem, BaseFolder and BaseFile describe the public surface; the
local disk implementations live in filesystem.py, folder.py and file.py.
All operations are coroutines and accept an optional CancellationToken.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import BinaryIO, List, Optional

from appstorage.engine.affinity import CancellationToken
from appstorage.storage.options import (
    CreationCollisionOption,
    ExistenceCheckResult,
    FileAccess,
    NameCollisionOption,
)


class BaseFile(ABC):
    """A file bound to an absolute path."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Leaf name, including the extension."""

    @property
    @abstractmethod
    def path(self) -> str:
        """Absolute path."""

    @abstractmethod
    async def delete(self, cancellation_token: Optional[CancellationToken] = None) -> None:
        """Delete the file. Raises StorageFileNotFoundError when absent."""

    @abstractmethod
    async def open(
        self,
        mode: FileAccess,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> BinaryIO:
        """Open a binary stream positioned at the start. The caller closes it."""

    @abstractmethod
    async def move(
        self,
        new_path: str,
        option: NameCollisionOption = NameCollisionOption.REPLACE_EXISTING,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> None:
        """Move the file; path and name are updated in place."""

    @abstractmethod
    async def rename(
        self,
        new_name: str,
        option: NameCollisionOption = NameCollisionOption.FAIL_IF_EXISTS,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> None:
        """Rename the file within its current folder."""


class BaseFolder(ABC):
    """A folder bound to an absolute path."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Leaf name."""

    @property
    @abstractmethod
    def path(self) -> str:
        """Absolute path."""

    @property
    @abstractmethod
    def can_delete(self) -> bool:
        """False for root storage folders."""

    @abstractmethod
    async def check_exists(
        self, name: str, cancellation_token: Optional[CancellationToken] = None
    ) -> ExistenceCheckResult:
        """Report whether ``name`` is a file, a folder, or absent."""

    @abstractmethod
    async def create_file(
        self,
        desired_name: str,
        option: CreationCollisionOption,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> BaseFile:
        """Create a file in this folder under a collision option."""

    @abstractmethod
    async def create_folder(
        self,
        desired_name: str,
        option: CreationCollisionOption,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> "BaseFolder":
        """Create a subfolder under a collision option."""

    @abstractmethod
    async def get_file(
        self, name: str, cancellation_token: Optional[CancellationToken] = None
    ) -> BaseFile:
        """Return an existing file. Raises StorageFileNotFoundError."""

    @abstractmethod
    async def get_folder(
        self, name: str, cancellation_token: Optional[CancellationToken] = None
    ) -> "BaseFolder":
        """Return an existing subfolder. Raises StorageDirectoryNotFoundError."""

    @abstractmethod
    async def list_files(
        self, cancellation_token: Optional[CancellationToken] = None
    ) -> List[BaseFile]:
        """Snapshot of the immediate files."""

    @abstractmethod
    async def list_folders(
        self, cancellation_token: Optional[CancellationToken] = None
    ) -> List["BaseFolder"]:
        """Snapshot of the immediate subfolders."""

    @abstractmethod
    async def delete(self, cancellation_token: Optional[CancellationToken] = None) -> None:
        """Recursively delete the folder."""

    @abstractmethod
    async def ensure_exists(
        self,
        cancellation_token: Optional[CancellationToken] = None,
        fail_if_missing: bool = True,
    ) -> None:
        """Fail when missing (strict) or create the folder."""


class BaseFileSystem(ABC):
    """Entry point: the two storage roots and path lookups."""

    @property
    @abstractmethod
    def local_storage(self) -> BaseFolder:
        """Machine-local application storage root."""

    @property
    @abstractmethod
    def roaming_storage(self) -> BaseFolder:
        """Roaming (per-user, synchronized) application storage root."""

    @abstractmethod
    async def get_file_from_path(
        self, path: str, cancellation_token: Optional[CancellationToken] = None
    ) -> Optional[BaseFile]:
        """The file at ``path``, or None when there is none."""

    @abstractmethod
    async def get_folder_from_path(
        self, path: str, cancellation_token: Optional[CancellationToken] = None
    ) -> Optional[BaseFolder]:
        """The folder at ``path``, or None when there is none."""
