"""
appstorage Error Hierarchy — Structured exceptions for storage operations.

Every error carries the path / name / operation it concerns so failures can be
logged as JSON and inspected without parsing messages.

Where a built-in exception has the same meaning the storage error also derives
from it, so callers may catch either ``StorageFileNotFoundError`` or plain
``FileNotFoundError``.

Hierarchy:
    StorageError
    ├── StorageArgumentError          — Null / empty / malformed argument (ValueError)
    ├── StorageNotFoundError          — Entry absent where presence is required
    │   ├── StorageFileNotFoundError      (FileNotFoundError)
    │   └── StorageDirectoryNotFoundError (FileNotFoundError)
    ├── StorageAlreadyExistsError     — Collision under FAIL_IF_EXISTS (FileExistsError)
    ├── StorageIOError                — Root deletion, generic I/O refusal (OSError)
    ├── OperationCanceledError        — Cancellation observed
    └── StorageConfigError            — Invalid storage.yaml
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class StorageError(Exception):
    """
    Base error for all appstorage failures.
    Context keyword arguments are kept and serialized by to_dict().
    """

    def __init__(self, message: str, **context: Any):
        self.message = message
        self.path: Optional[str] = context.get("path")
        self.name: Optional[str] = context.get("name")
        self.operation: Optional[str] = context.get("operation")
        self.error_type: str = self.__class__.__name__
        self.context: Dict[str, Any] = context
        self.timestamp: str = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Serialize error to JSON-compatible dict for logging."""
        return {
            "error_type": self.error_type,
            "message": self.message,
            "path": self.path,
            "name": self.name,
            "operation": self.operation,
            "timestamp": self.timestamp,
            "context": {
                k: str(v) for k, v in self.context.items()
                if k not in ("path", "name", "operation")
            },
        }

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), default=str)

    def __repr__(self) -> str:
        parts = [f"{self.error_type}: {self.message}"]
        if self.path:
            parts.append(f"path={self.path}")
        if self.operation:
            parts.append(f"operation={self.operation}")
        return " | ".join(parts)


class StorageArgumentError(StorageError, ValueError):
    """
    An argument was None, empty, or started with the NUL character.
    ``parameter`` names the offending argument.
    """

    def __init__(self, message: str, **context: Any):
        self.parameter: Optional[str] = context.get("parameter")
        super().__init__(message, **context)

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["parameter"] = self.parameter
        return d


class StorageNotFoundError(StorageError):
    """A file or directory is absent where presence is required."""
    pass


class StorageFileNotFoundError(StorageNotFoundError, FileNotFoundError):
    """The file does not exist."""
    pass


class StorageDirectoryNotFoundError(StorageNotFoundError, FileNotFoundError):
    """The directory does not exist."""
    pass


class StorageAlreadyExistsError(StorageError, FileExistsError):
    """Target name is taken and the collision option is FAIL_IF_EXISTS."""
    pass


class StorageIOError(StorageError, OSError):
    """Generic I/O refusal, e.g. an attempt to delete a root storage folder."""
    pass


class OperationCanceledError(StorageError):
    """
    Cancellation was observed. ``token`` is the CancellationToken whose
    cancellation caused the failure, so callers can tell requests apart.
    """

    def __init__(self, message: str = "The operation was canceled.", **context: Any):
        self.token = context.pop("token", None)
        super().__init__(message, **context)


class StorageConfigError(StorageError):
    """Configuration error — unreadable or invalid storage.yaml."""

    def __init__(self, message: str, **context: Any):
        self.config_path: Optional[str] = context.get("config_path")
        self.validation_errors: Optional[list] = context.get("validation_errors")
        super().__init__(message, **context)

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["config_path"] = self.config_path
        d["validation_errors"] = self.validation_errors
        return d
