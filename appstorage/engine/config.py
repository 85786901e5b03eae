"""
appstorage Configuration — Load and validate storage.yaml.

The loaded StorageConfig is returned to the caller and handed explicitly to
LocalFileSystem; nothing is cached at module level.

Resolution order for identity / location fields:
    1. Environment variables (APPSTORAGE_*)
    2. storage.yaml (or the model passed by the caller)
    3. Defaults (None → resolved later from package metadata / platformdirs)

Usage:
    from appstorage.engine.config import load_storage_config
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from appstorage.engine.errors import StorageConfigError

DEFAULT_CONFIG_FILENAME = "storage.yaml"

# env var → (section, field)
ENV_OVERRIDES = {
    "APPSTORAGE_COMPANY": ("identity", "company"),
    "APPSTORAGE_PRODUCT": ("identity", "product"),
    "APPSTORAGE_VERSION": ("identity", "version"),
    "APPSTORAGE_DISTRIBUTION": ("identity", "distribution"),
    "APPSTORAGE_LOCAL_DIR": ("locations", "local_base_dir"),
    "APPSTORAGE_ROAMING_DIR": ("locations", "roaming_base_dir"),
    "APPSTORAGE_DATA_DIR": ("locations", "data_directory"),
}


# ---------------------------------------------------------------------------
# Pydantic models for storage.yaml
# ---------------------------------------------------------------------------

class IdentityConfig(BaseModel):
    company: Optional[str] = None
    product: Optional[str] = None
    version: Optional[str] = None
    # Installed distribution to read Name / Version / Author from
    distribution: Optional[str] = None


class LocationsConfig(BaseModel):
    local_base_dir: Optional[str] = None
    roaming_base_dir: Optional[str] = None
    data_directory: Optional[str] = None


class ThreadingConfig(BaseModel):
    offload_from_main_thread: bool = True
    max_workers: Optional[int] = None

    @field_validator("max_workers")
    @classmethod
    def validate_max_workers(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 1:
            raise ValueError(f"max_workers must be >= 1, got {v}")
        return v


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "text"
    directory: Optional[str] = None
    backup_count: int = 7

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"level must be a standard logging level, got '{v}'")
        return v

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        if v not in ("text", "json"):
            raise ValueError(f"format must be text/json, got '{v}'")
        return v


class StorageConfig(BaseModel):
    """Root model for storage.yaml."""
    identity: IdentityConfig = IdentityConfig()
    locations: LocationsConfig = LocationsConfig()
    threading: ThreadingConfig = ThreadingConfig()
    logging: LoggingConfig = LoggingConfig()


# ---------------------------------------------------------------------------
# Config Loading Functions
# ---------------------------------------------------------------------------

def _find_config_file() -> Optional[Path]:
    """Walk up from CWD looking for storage.yaml."""
    current = Path.cwd()
    for parent in [current, *current.parents]:
        candidate = parent / DEFAULT_CONFIG_FILENAME
        if candidate.exists():
            return candidate
    return None


def apply_env_overrides(
    data: Dict[str, Any],
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """Overlay APPSTORAGE_* environment variables onto raw config data."""
    env = os.environ if environ is None else environ
    for var, (section, key) in ENV_OVERRIDES.items():
        value = env.get(var)
        if value:
            section_data = dict(data.get(section) or {})
            section_data[key] = value
            data[section] = section_data
    return data


def build_storage_config(
    raw: Optional[Dict[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
    config_path: Optional[str] = None,
) -> StorageConfig:
    """Validate raw (already parsed) config data into a StorageConfig."""
    raw = dict(raw or {})
    # storage.yaml may wrap everything under a top-level "storage" key
    data = dict(raw.get("storage", raw) or {})
    data = apply_env_overrides(data, environ)
    try:
        return StorageConfig(**data)
    except ValidationError as e:
        raise StorageConfigError(
            f"Invalid storage configuration: {e.error_count()} error(s)",
            config_path=config_path,
            validation_errors=e.errors(),
        ) from e


def load_storage_config(
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> StorageConfig:
    """
    Load and validate storage.yaml.

    Args:
        config_path: Explicit path to storage.yaml. If None, auto-discovers
                     by walking up from the current directory.
        environ: Environment mapping for overrides (defaults to os.environ).

    Returns:
        Validated StorageConfig instance. Defaults when no file exists.
    """
    path = Path(config_path) if config_path else _find_config_file()
    if path is None or not path.exists():
        return build_storage_config({}, environ)

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise StorageConfigError(
            f"Could not parse {path}: {e}", config_path=str(path)
        ) from e

    if not isinstance(raw, dict):
        raise StorageConfigError(
            f"Expected a mapping at the top of {path}", config_path=str(path)
        )

    return build_storage_config(raw, environ, config_path=str(path))
