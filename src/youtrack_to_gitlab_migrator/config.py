"""
Run configuration for the YouTrack to GitLab migration tool.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Final

DEFAULT_DELAY_SECONDS: Final[float] = 1.0


def normalize_gitlab_url(host: str) -> str:
    """Turn a GitLab host name or URL into the base URL python-gitlab expects.

    A bare host gets the https scheme. A trailing slash and an ``/api/v3`` or
    ``/api/v4`` suffix are removed.

    Examples:
        >>> normalize_gitlab_url("gitlab.example.com")
        'https://gitlab.example.com'
        >>> normalize_gitlab_url("http://gitlab.local/api/v3/")
        'http://gitlab.local'
    """
    url = host.strip()
    if not re.match(r"^[A-Za-z][A-Za-z0-9+.-]*://", url):
        url = f"https://{url}"
    url = url.rstrip("/")
    return re.sub(r"/api/v[34]$", "", url)


@dataclass(frozen=True)
class MigrationConfig:
    """Parameters of a single migration run."""

    input_file: Path
    users_file: Path
    gitlab_url: str
    project_path: str
    admin_token: str
    delay: float = DEFAULT_DELAY_SECONDS
    dry_run: bool = False
