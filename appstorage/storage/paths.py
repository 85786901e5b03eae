"""
appstorage Paths — Build the application-specific storage roots.

Layout:
    <base dir>/<company>/<product>/<version>/

Base directories come from StorageConfig.locations when set, otherwise from
platformdirs (user_data_dir for local storage, user_data_dir(roaming=True)
for roaming storage).

The company / product / version triple is resolved once per StoragePaths by
resolve_app_identity(), first match wins:
    1. StorageConfig.identity (APPSTORAGE_* env vars already applied)
    2. Installed distribution metadata (identity.distribution, or the
       distribution that owns the __main__ module's top-level package)
    3. The __main__ package name (last segment → product, first → company)
    4. Literal fallbacks
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from email.utils import parseaddr
from importlib import metadata
from typing import Optional, Tuple

import platformdirs

from appstorage.engine.config import StorageConfig

logger = logging.getLogger("appstorage.storage.paths")

FALLBACK_PRODUCT = "Application"
FALLBACK_VERSION = "1.0.0.0"


@dataclass(frozen=True)
class AppIdentity:
    company: str
    product: str
    version: str

    def segments(self) -> Tuple[str, str, str]:
        return (self.company, self.product, self.version)


# ---------------------------------------------------------------------------
# Identity resolution
# ---------------------------------------------------------------------------

def _main_package() -> Optional[str]:
    """Dotted package of the running __main__ module, if any."""
    main = sys.modules.get("__main__")
    if main is None:
        return None
    spec = getattr(main, "__spec__", None)
    package = getattr(spec, "parent", None) or getattr(main, "__package__", None)
    return package or None


def _distribution_for_package(package: str) -> Optional[str]:
    top_level = package.split(".")[0]
    candidates = metadata.packages_distributions().get(top_level) or []
    return candidates[0] if candidates else None


def _company_from_metadata(meta) -> Optional[str]:
    author = (meta.get("Author") or "").strip()
    if author:
        return author
    author_email = meta.get("Author-email") or ""
    name, _ = parseaddr(author_email.split(",")[0])
    return name.strip() or None


def _identity_from_distribution(distribution: str) -> dict:
    try:
        meta = metadata.metadata(distribution)
    except metadata.PackageNotFoundError:
        logger.warning(f"Distribution '{distribution}' is not installed; ignoring")
        return {}
    return {
        "company": _company_from_metadata(meta),
        "product": (meta.get("Name") or "").strip() or None,
        "version": (meta.get("Version") or "").strip() or None,
    }


def _identity_from_package(package: str) -> dict:
    parts = [p for p in package.split(".") if p]
    if not parts:
        return {}
    return {"company": parts[0], "product": parts[-1]}


def resolve_app_identity(config: Optional[StorageConfig] = None) -> AppIdentity:
    """Resolve company / product / version using the documented fallback order."""
    config = config or StorageConfig()
    resolved = {
        "company": config.identity.company,
        "product": config.identity.product,
        "version": config.identity.version,
    }

    def fill(values: dict) -> None:
        for key, value in values.items():
            if not resolved.get(key) and value:
                resolved[key] = value

    if not all(resolved.values()):
        package = _main_package()
        distribution = config.identity.distribution
        if distribution is None and package:
            distribution = _distribution_for_package(package)
        if distribution:
            fill(_identity_from_distribution(distribution))
        if package:
            fill(_identity_from_package(package))

    product = resolved["product"] or FALLBACK_PRODUCT
    identity = AppIdentity(
        company=resolved["company"] or product,
        product=product,
        version=resolved["version"] or FALLBACK_VERSION,
    )
    logger.debug(f"Resolved app identity: {identity}")
    return identity


# ---------------------------------------------------------------------------
# Storage roots
# ---------------------------------------------------------------------------

class StoragePaths:
    """
    Computes (and creates) the local and roaming application storage roots.

    Roots are created on first access, never at construction.
    """

    def __init__(
        self,
        identity: AppIdentity,
        local_base_dir: Optional[str] = None,
        roaming_base_dir: Optional[str] = None,
        data_directory: Optional[str] = None,
    ):
        self._identity = identity
        self._local_base = local_base_dir or platformdirs.user_data_dir()
        self._roaming_base = roaming_base_dir or platformdirs.user_data_dir(roaming=True)
        self._data_directory = data_directory

    @classmethod
    def from_config(cls, config: Optional[StorageConfig] = None) -> "StoragePaths":
        config = config or StorageConfig()
        return cls(
            resolve_app_identity(config),
            local_base_dir=config.locations.local_base_dir,
            roaming_base_dir=config.locations.roaming_base_dir,
            data_directory=config.locations.data_directory,
        )

    @property
    def identity(self) -> AppIdentity:
        return self._identity

    def app_specific_path(self, base_path: str) -> str:
        """Create and return <base>/<company>/<product>/<version>."""
        full = os.path.abspath(os.path.join(base_path, *self._identity.segments()))
        os.makedirs(full, exist_ok=True)
        return full

    @property
    def local_root(self) -> str:
        return self.app_specific_path(self._local_base)

    @property
    def roaming_root(self) -> str:
        return self.app_specific_path(self._roaming_base)

    @property
    def data_directory(self) -> str:
        """Explicit data directory when configured, else the local root."""
        if self._data_directory:
            full = os.path.abspath(self._data_directory)
            os.makedirs(full, exist_ok=True)
            return full
        return self.local_root

    def __repr__(self) -> str:
        return (
            f"<StoragePaths identity={self._identity.segments()} "
            f"local_base='{self._local_base}' roaming_base='{self._roaming_base}'>"
        )
