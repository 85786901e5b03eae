"""
appstorage Storage — Folders and files behind small async interfaces.

Local disk implementation with collision handling for create / move / rename.
"""

from appstorage.storage.base import BaseFile, BaseFileSystem, BaseFolder
from appstorage.storage.file import LocalFile
from appstorage.storage.filesystem import LocalFileSystem
from appstorage.storage.folder import LocalFolder
from appstorage.storage.options import (
    CreationCollisionOption,
    ExistenceCheckResult,
    FileAccess,
    NameCollisionOption,
)
from appstorage.storage.paths import AppIdentity, StoragePaths, resolve_app_identity

__all__ = [
    "BaseFile",
    "BaseFileSystem",
    "BaseFolder",
    "LocalFile",
    "LocalFileSystem",
    "LocalFolder",
    "CreationCollisionOption",
    "ExistenceCheckResult",
    "FileAccess",
    "NameCollisionOption",
    "AppIdentity",
    "StoragePaths",
    "resolve_app_identity",
]
