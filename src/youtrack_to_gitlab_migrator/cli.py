"""
Command-line interface for the YouTrack to GitLab migration tool.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import gitlab_utils as glu
from .config import DEFAULT_DELAY_SECONDS, MigrationConfig, normalize_gitlab_url
from .exceptions import MigrationError, UnmappedUsersError
from .migrator import YouTrackToGitLabMigrator
from .utils import PassError, setup_logging

logger: logging.Logger = logging.getLogger(__name__)


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Migrate issues exported from YouTrack as CSV to a GitLab project")

    _ = parser.add_argument(
        "--input", "-i", required=True, help="CSV file exported from YouTrack (example: issues.csv)"
    )
    _ = parser.add_argument("--users", "-u", required=True, help="User mapping file (example: users.json)")
    _ = parser.add_argument(
        "--gitlab-url", "-g", required=True, help="GitLab host name or URL (example: gitlab.example.com)"
    )
    _ = parser.add_argument(
        "--project", "-p", required=True, help="GitLab project path including namespace (example: mycorp/myproj)"
    )
    _ = parser.add_argument("--token", "-t", help="Private token of a GitLab administrator")
    _ = parser.add_argument(
        "--token-pass-path", help="Path of the administrator token in the pass utility (alternative to --token)"
    )
    _ = parser.add_argument(
        "--delay",
        type=float,
        default=DEFAULT_DELAY_SECONDS,
        help=f"Minimum seconds between two issue creations (default: {DEFAULT_DELAY_SECONDS})",
    )
    _ = parser.add_argument(
        "--dry-run", action="store_true", help="Check project, users and input, but do not create any issue"
    )
    _ = parser.add_argument(
        "--verbose", "-v", action="count", default=0, help="Increase console logging (-v: info, -vv: debug)"
    )

    args = parser.parse_args(argv)

    if args.token and args.token_pass_path:
        parser.error("--token and --token-pass-path are mutually exclusive")
    if args.delay < 0:
        parser.error("--delay must not be negative")

    try:
        args.token = glu.get_token(args.token, args.token_pass_path)
    except (PassError, ValueError) as e:
        parser.error(str(e))
    if not args.token:
        parser.error("a GitLab admin token is required: use --token, --token-pass-path or GITLAB_TOKEN")

    return args


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = parse_arguments(argv)

    setup_logging(verbosity=args.verbose)

    config = MigrationConfig(
        input_file=Path(args.input),
        users_file=Path(args.users),
        gitlab_url=normalize_gitlab_url(args.gitlab_url),
        project_path=args.project,
        admin_token=args.token,
        delay=args.delay,
        dry_run=args.dry_run,
    )

    try:
        migrator = YouTrackToGitLabMigrator(config)
        _ = migrator.migrate()
    except UnmappedUsersError as e:
        logger.error(f"Migration aborted: {e}")
        sys.exit(1)
    except MigrationError as e:
        logger.error(f"Error: {e}")
        sys.exit(1)

    sys.exit(0)
