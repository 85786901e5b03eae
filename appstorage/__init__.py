"""
appstorage — Cross-platform application storage
Version: 1.0

Folders and files behind small async interfaces, with collision policies for
create / move / rename and a thread-affinity switch that keeps blocking disk
work off a designated main thread.

    from appstorage import LocalFileSystem, CreationCollisionOption

    fs = LocalFileSystem()
    folder = await fs.local_storage.create_folder(
        "settings", CreationCollisionOption.OPEN_IF_EXISTS
    )
"""

__version__ = "1.0.0"

from appstorage.engine.affinity import (
    CancellationToken,
    CancellationTokenSource,
    ThreadAffinity,
)
from appstorage.engine.config import StorageConfig, load_storage_config
from appstorage.engine.errors import (
    OperationCanceledError,
    StorageAlreadyExistsError,
    StorageArgumentError,
    StorageConfigError,
    StorageDirectoryNotFoundError,
    StorageError,
    StorageFileNotFoundError,
    StorageIOError,
    StorageNotFoundError,
)
from appstorage.storage import (
    CreationCollisionOption,
    ExistenceCheckResult,
    FileAccess,
    LocalFile,
    LocalFileSystem,
    LocalFolder,
    NameCollisionOption,
)

__all__ = [
    "CancellationToken",
    "CancellationTokenSource",
    "ThreadAffinity",
    "StorageConfig",
    "load_storage_config",
    "OperationCanceledError",
    "StorageAlreadyExistsError",
    "StorageArgumentError",
    "StorageConfigError",
    "StorageDirectoryNotFoundError",
    "StorageError",
    "StorageFileNotFoundError",
    "StorageIOError",
    "StorageNotFoundError",
    "CreationCollisionOption",
    "ExistenceCheckResult",
    "FileAccess",
    "LocalFile",
    "LocalFileSystem",
    "LocalFolder",
    "NameCollisionOption",
]
