"""
Reading of YouTrack CSV exports.
"""

from __future__ import annotations

import csv
import datetime as dt
import email.utils
import logging
from pathlib import Path
from typing import Final

from .exceptions import MigrationError
from .labels import parse_tags
from .models import SourceIssue

logger: logging.Logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: Final[tuple[str, ...]] = (
    "Issue Id",
    "Summary",
    "Description",
    "Assignee",
    "Tags",
    "Type",
    "Priority",
    "Subsystem",
    "Reporter",
    "State",
    "Created",
)

# Tried after ISO 8601 and before RFC 2822
_DATE_FORMATS: Final[tuple[str, ...]] = (
    "%d.%m.%Y %H:%M:%S",
    "%d.%m.%Y %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
)


def _to_naive_utc(value: dt.datetime) -> dt.datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(dt.UTC).replace(tzinfo=None)


def parse_created(value: str) -> dt.datetime:
    """Parse the Created column of the export.

    Timezone-aware values are converted to naive UTC so that rows with and
    without offsets can be sorted together.

    Raises:
        MigrationError: If the value matches none of the supported formats
    """
    text = value.strip()
    try:
        return _to_naive_utc(dt.datetime.fromisoformat(text))
    except ValueError:
        pass

    for fmt in _DATE_FORMATS:
        try:
            return dt.datetime.strptime(text, fmt)  # noqa: DTZ007
        except ValueError:
            continue

    try:
        return _to_naive_utc(email.utils.parsedate_to_datetime(text))
    except (TypeError, ValueError) as e:
        msg = f"Cannot parse creation date: {value!r}"
        raise MigrationError(msg) from e


def read_rows(input_file: str | Path) -> list[SourceIssue]:
    """Read all issues from a YouTrack CSV export.

    Raises:
        MigrationError: If the file cannot be read, lacks a required column or
            holds an unparsable creation date
    """
    path = Path(input_file)
    try:
        with path.open(encoding="utf-8-sig", newline="") as f:
            reader = csv.DictReader(f)
            missing = [column for column in REQUIRED_COLUMNS if column not in (reader.fieldnames or [])]
            if missing:
                msg = f"Input file {path} lacks columns: {', '.join(missing)}"
                raise MigrationError(msg)
            records = list(reader)
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        msg = f"Cannot read input file: {path}"
        raise MigrationError(msg) from e

    rows: list[SourceIssue] = []
    for record in records:
        issue_id = record["Issue Id"] or ""
        try:
            created = parse_created(record["Created"] or "")
        except MigrationError as e:
            msg = f"{issue_id}: {e}"
            raise MigrationError(msg) from e

        rows.append(
            SourceIssue(
                issue_id=issue_id,
                summary=record["Summary"] or "",
                description=record["Description"] or "",
                assignee=record["Assignee"] or "",
                reporter=record["Reporter"] or "",
                created=created,
                tags=parse_tags(record["Tags"]),
                type=record["Type"] or "",
                priority=record["Priority"] or "",
                subsystem=record["Subsystem"] or "",
                state=record["State"] or "",
            )
        )

    logger.info(f"Read {len(rows)} issues from {path}")
    return rows
