"""
Derivation of GitLab labels from YouTrack issue fields.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterable

# Values every YouTrack issue carries unless changed; labelling them is noise.
DEFAULT_TYPE: Final[str] = "Task"
DEFAULT_PRIORITY: Final[str] = "Normal"
NO_SUBSYSTEM: Final[str] = "No subsystem"

CLOSED_STATES: Final[frozenset[str]] = frozenset(
    {
        "Can't Reproduce",
        "Duplicate",
        "Fixed",
        "Won't fix",
        "Incomplete",
        "Obsolete",
        "Verified",
        "Rejected",
    }
)


def parse_tags(value: str | None) -> tuple[str, ...]:
    """Split the comma-separated Tags cell of the export."""
    if not value:
        return ()
    return tuple(tag.strip() for tag in value.split(",") if tag.strip())


def derive_labels(
    tags: Iterable[str] | None,
    issue_type: str | None,
    priority: str | None,
    subsystem: str | None,
) -> str:
    """Build the comma-joined GitLab label list for an issue.

    Tags are kept as they are and in order. Type, priority and subsystem are
    appended as ``type:``, ``priority:`` and ``subsystem:`` labels (lowercased)
    unless empty or equal to their YouTrack default.

    Examples:
        >>> derive_labels(["bug"], "Task", "Normal", "No subsystem")
        'bug'
        >>> derive_labels([], "Bug", "Critical", "UI")
        'type:bug,priority:critical,subsystem:ui'
    """
    labels: list[str] = list(tags or [])

    if issue_type and issue_type != DEFAULT_TYPE:
        labels.append(f"type:{issue_type.lower()}")

    if priority and priority != DEFAULT_PRIORITY:
        labels.append(f"priority:{priority.lower()}")

    if subsystem and subsystem != NO_SUBSYSTEM:
        labels.append(f"subsystem:{subsystem.lower()}")

    return ",".join(labels)


def is_closed_state(state: str | None) -> bool:
    """Whether a YouTrack state means the GitLab issue must be closed."""
    return state in CLOSED_STATES
