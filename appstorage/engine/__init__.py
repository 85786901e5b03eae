"""appstorage Engine — Errors, configuration, logging, thread affinity."""

from appstorage.engine.affinity import (  # noqa: F401
    CancellationToken,
    CancellationTokenSource,
    ThreadAffinity,
    switch_off_main_thread,
)
from appstorage.engine.config import StorageConfig, load_storage_config  # noqa: F401

__all__ = [
    "CancellationToken",
    "CancellationTokenSource",
    "ThreadAffinity",
    "switch_off_main_thread",
    "StorageConfig",
    "load_storage_config",
]
