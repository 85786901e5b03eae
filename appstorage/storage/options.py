"""Enumerated option and result values for storage operations."""

from __future__ import annotations

from enum import Enum
from typing import Union


class CreationCollisionOption(str, Enum):
    """What create_file / create_folder do when the name is taken."""
    GENERATE_UNIQUE_NAME = "generate_unique_name"
    REPLACE_EXISTING = "replace_existing"
    FAIL_IF_EXISTS = "fail_if_exists"
    OPEN_IF_EXISTS = "open_if_exists"


class NameCollisionOption(str, Enum):
    """What move / rename do when the destination is taken."""
    GENERATE_UNIQUE_NAME = "generate_unique_name"
    REPLACE_EXISTING = "replace_existing"
    FAIL_IF_EXISTS = "fail_if_exists"


class ExistenceCheckResult(str, Enum):
    FILE_EXISTS = "file_exists"
    FOLDER_EXISTS = "folder_exists"
    NOT_FOUND = "not_found"


class FileAccess(str, Enum):
    READ = "read"
    READ_WRITE = "read_write"


CollisionOption = Union[CreationCollisionOption, NameCollisionOption]

# FileAccess → open() mode; files are always opened in binary
OPEN_MODES = {
    FileAccess.READ: "rb",
    FileAccess.READ_WRITE: "r+b",
}
