"""
Mapping of YouTrack users to GitLab users.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final

from .exceptions import MigrationError
from .models import UserMapping

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .models import TargetUser

logger: logging.Logger = logging.getLogger(__name__)

UNASSIGNED_USERNAME: Final[str] = "Unassigned"

# Field name -> accepted keys in the mapping file, first match wins.
# The yt_*/gl_* spellings are those of the original yt2gl users.json files.
_FIELD_KEYS: Final[dict[str, tuple[str, ...]]] = {
    "source_username": ("source_username", "yt_username"),
    "source_display_name": ("source_display_name", "source_displayname", "yt_name"),
    "target_username": ("target_username", "gl_username"),
    "target_private_token": ("target_private_token", "gl_private_token"),
}


def _mapping_from_dict(entry: dict[str, Any]) -> UserMapping:
    values: dict[str, Any] = {}
    for field_name, keys in _FIELD_KEYS.items():
        values[field_name] = next((entry[key] for key in keys if entry.get(key) is not None), None)
    return UserMapping(**values)


def load_user_mappings(users_file: str | Path) -> list[UserMapping]:
    """Load the user mapping file and append the synthetic "Unassigned" entry.

    Args:
        users_file: Path to a JSON file holding a list of mapping objects

    Returns:
        Mappings in file order, followed by the "Unassigned" mapping

    Raises:
        MigrationError: If the file cannot be read or has an unexpected shape
    """
    path = Path(users_file)
    try:
        data: object = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Cannot read users file: {path}"
        raise MigrationError(msg) from e
    except json.JSONDecodeError as e:
        msg = f"Users file is not valid JSON: {path}: {e}"
        raise MigrationError(msg) from e

    if not isinstance(data, list):
        msg = f"Users file must contain a JSON list: {path}"
        raise MigrationError(msg)

    mappings: list[UserMapping] = []
    for index, entry in enumerate(data):
        if not isinstance(entry, dict):
            msg = f"Users file entry {index} is not an object: {path}"
            raise MigrationError(msg)
        mappings.append(_mapping_from_dict(entry))

    mappings.append(UserMapping(source_username=UNASSIGNED_USERNAME))
    logger.info(f"Loaded {len(mappings) - 1} user mappings from {path}")
    return mappings


def resolve_user_ids(mappings: Iterable[UserMapping], target_users: Sequence[TargetUser]) -> list[UserMapping]:
    """Attach GitLab user ids to the mappings.

    The first GitLab user whose username equals ``target_username`` wins.
    Entries without a match keep ``target_id`` unset; whether that matters is
    decided by validation and by the migrator.

    Returns:
        New list of mappings; the input is left untouched
    """
    resolved: list[UserMapping] = []
    for mapping in mappings:
        user = next((u for u in target_users if u.username == mapping.target_username), None)
        if user is None:
            if mapping.target_username is not None:
                logger.warning(f"GitLab user not found: {mapping.target_username}")
            resolved.append(mapping)
            continue
        resolved.append(dataclasses.replace(mapping, target_id=user.id))
    return resolved


def find_by_source_username(mappings: Iterable[UserMapping], username: str) -> UserMapping | None:
    """Find the mapping for a YouTrack login name (used for assignees)."""
    for mapping in mappings:
        if mapping.source_username is not None and mapping.source_username == username:
            return mapping
    return None


def find_by_source_display_name(mappings: Iterable[UserMapping], display_name: str) -> UserMapping | None:
    """Find the mapping for a YouTrack full name (used for reporters)."""
    for mapping in mappings:
        if mapping.source_display_name is not None and mapping.source_display_name == display_name:
            return mapping
    return None
