"""
appstorage Collision Handling — Decide the final path for a create / move.

One routine, resolve_name(), serves folder creation, file creation and file
move/rename. Callers supply the existence predicate, the removal capability
and the unique-name builder for their kind of entry:

    resolution = resolve_name(
        parent, "report.txt", CreationCollisionOption.GENERATE_UNIQUE_NAME,
        exists=os.path.isfile, remove=os.remove, unique_name=file_unique_name,
    )
    if not resolution.opened_existing:
        create(resolution.path)

GENERATE_UNIQUE_NAME probes "name (2)", "name (3)", ... strictly in order and
takes the first free slot.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Callable, Optional

from appstorage.engine.affinity import CancellationToken, ensure_token
from appstorage.engine.errors import StorageAlreadyExistsError
from appstorage.storage.options import CollisionOption, CreationCollisionOption

logger = logging.getLogger("appstorage.storage.collision")

FIRST_UNIQUE_COUNTER = 2


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolve_name()."""
    path: str
    name: str
    # True only for OPEN_IF_EXISTS on an occupied name; the caller must not create
    opened_existing: bool = False


def file_unique_name(desired_name: str, counter: int) -> str:
    """'report.txt', 2 → 'report (2).txt'"""
    stem, ext = os.path.splitext(desired_name)
    return f"{stem} ({counter}){ext}"


def folder_unique_name(desired_name: str, counter: int) -> str:
    """'Photos', 2 → 'Photos (2)'"""
    return f"{desired_name} ({counter})"


def _normalize_option(option: CollisionOption) -> CreationCollisionOption:
    # NameCollisionOption values are a subset of CreationCollisionOption values
    return CreationCollisionOption(getattr(option, "value", option))


def resolve_name(
    directory: str,
    desired_name: str,
    option: CollisionOption,
    *,
    exists: Callable[[str], bool],
    remove: Callable[[str], None],
    unique_name: Callable[[str, int], str],
    cancellation_token: Optional[CancellationToken] = None,
) -> Resolution:
    """
    Resolve ``directory/desired_name`` under a collision option.

    Args:
        directory: Absolute parent directory.
        desired_name: Requested leaf name.
        option: Creation or name collision option.
        exists: Predicate telling whether a candidate path is taken.
        remove: Deletes the entry at a path (REPLACE_EXISTING).
        unique_name: Builds the candidate name for a counter value.
        cancellation_token: Checked on every uniqueness probe.

    Returns:
        Resolution with the final path. Nothing is created here; for
        REPLACE_EXISTING the previous entry has already been removed.

    Raises:
        StorageAlreadyExistsError: name taken under FAIL_IF_EXISTS.
        OperationCanceledError: token canceled during uniqueness probing.
    """
    policy = _normalize_option(option)
    token = ensure_token(cancellation_token)
    candidate = os.path.join(directory, desired_name)

    if not exists(candidate):
        return Resolution(candidate, desired_name)

    if policy is CreationCollisionOption.FAIL_IF_EXISTS:
        raise StorageAlreadyExistsError(
            f"An entry named '{desired_name}' already exists: {candidate}",
            path=candidate,
            name=desired_name,
            option=policy.value,
        )

    if policy is CreationCollisionOption.REPLACE_EXISTING:
        logger.info(f"Replacing existing entry: {candidate}")
        remove(candidate)
        return Resolution(candidate, desired_name)

    if policy is CreationCollisionOption.OPEN_IF_EXISTS:
        return Resolution(candidate, desired_name, opened_existing=True)

    counter = FIRST_UNIQUE_COUNTER
    while True:
        token.throw_if_cancellation_requested()
        name = unique_name(desired_name, counter)
        candidate = os.path.join(directory, name)
        if not exists(candidate):
            logger.debug(f"Generated unique name '{name}' for '{desired_name}'")
            return Resolution(candidate, name)
        counter += 1
