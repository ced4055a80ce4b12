"""
Utility functions for the YouTrack to GitLab migration tool.
"""

from __future__ import annotations

import logging
import re
import subprocess
from typing import Final

LOG_FILE: Final[str] = "migration.log"
LOG_FORMAT: Final[str] = "%(asctime)s - %(levelname)s - %(message)s"


class PassError(Exception):
    """Raised when a value cannot be read from the pass utility."""


def setup_logging(*, verbosity: int = 0) -> None:
    """Configure logging for the migration process.

    The log file always receives DEBUG records. The console shows warnings by
    default, INFO with verbosity 1 and DEBUG with verbosity 2 or more.
    """
    if verbosity >= 2:
        console_level = logging.DEBUG
    elif verbosity == 1:
        console_level = logging.INFO
    else:
        console_level = logging.WARNING

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)

    file_handler = logging.FileHandler(LOG_FILE, mode="a")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)


def _validate_pass_path(pass_path: str) -> None:
    if not re.fullmatch(r"(?:[A-Za-z0-9_-]+)(?:/[A-Za-z0-9_-]+)*", pass_path):
        msg = f"Invalid pass path: {pass_path}"
        raise ValueError(msg)


def get_pass_value(pass_path: str) -> str:
    """Get value from pass utility at specified path."""
    _validate_pass_path(pass_path)

    try:
        result = subprocess.run(  # noqa: S603
            ["pass", pass_path], capture_output=True, text=True, check=True
        )
    except FileNotFoundError as e:
        msg = "The pass utility is not installed"
        raise PassError(msg) from e
    except subprocess.CalledProcessError as e:
        msg = f"Failed to get value from pass at '{pass_path}': {e.stderr.strip()} (return code {e.returncode})"
        raise PassError(msg) from e

    # pass prints the secret on the first line, followed by optional metadata
    return result.stdout.splitlines()[0].strip() if result.stdout else ""
