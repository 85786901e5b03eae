"""
appstorage Test Suite — Shared fixtures and configuration.

Run:  pytest tests/ -v
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from appstorage.engine.config import (
    IdentityConfig,
    LocationsConfig,
    StorageConfig,
)


# ---------------------------------------------------------------------------
# Isolation: keep handlers installed by configure_logging() out of other tests
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _isolate_logging():
    """Remove handlers added to the appstorage logger during a test."""
    root = logging.getLogger("appstorage")
    before = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in before:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


@pytest.fixture(autouse=True)
def _clear_storage_env(monkeypatch):
    """APPSTORAGE_* variables from the developer's shell must not leak in."""
    for var in (
        "APPSTORAGE_COMPANY",
        "APPSTORAGE_PRODUCT",
        "APPSTORAGE_VERSION",
        "APPSTORAGE_DISTRIBUTION",
        "APPSTORAGE_LOCAL_DIR",
        "APPSTORAGE_ROAMING_DIR",
        "APPSTORAGE_DATA_DIR",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def storage_config(tmp_path) -> StorageConfig:
    """A config with a fixed identity and both bases under tmp_path."""
    return StorageConfig(
        identity=IdentityConfig(company="Acme", product="Notes", version="2.1"),
        locations=LocationsConfig(
            local_base_dir=str(tmp_path / "local"),
            roaming_base_dir=str(tmp_path / "roaming"),
        ),
    )


@pytest.fixture
def filesystem(storage_config):
    """LocalFileSystem over tmp_path; work completes inline."""
    from appstorage.storage.filesystem import LocalFileSystem

    return LocalFileSystem(storage_config)


@pytest.fixture
def root(filesystem):
    """The local storage root folder."""
    return filesystem.local_storage


@pytest.fixture
def config_file(tmp_path) -> Path:
    """A storage.yaml pointing at tmp_path."""
    path = tmp_path / "storage.yaml"
    path.write_text(
        "storage:\n"
        "  identity:\n"
        "    company: Acme\n"
        "    product: Notes\n"
        "    version: '2.1'\n"
        "  locations:\n"
        f"    local_base_dir: '{(tmp_path / 'local').as_posix()}'\n"
        f"    roaming_base_dir: '{(tmp_path / 'roaming').as_posix()}'\n"
        "  threading:\n"
        "    offload_from_main_thread: true\n"
        "    max_workers: 2\n"
        "  logging:\n"
        "    level: WARNING\n",
        encoding="utf-8",
    )
    return path
