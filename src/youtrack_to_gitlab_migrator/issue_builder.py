"""Build GitLab issue content from YouTrack rows."""

from __future__ import annotations


def build_description(description: str, issue_id: str) -> str:
    """Append the YouTrack issue id to the description.

    The id stays as a reference back to the original issue, on its own line
    after the description, or alone when the description is empty.

    Examples:
        >>> build_description("", "X-1")
        'X-1'
        >>> build_description("foo", "X-1")
        'foo\\nX-1'
    """
    if not description:
        return issue_id
    return f"{description}\n{issue_id}"
