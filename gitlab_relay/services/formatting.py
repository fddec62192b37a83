"""Formatting helpers shared by every assembler and both renderers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import Final, Iterable

from gitlab_relay.schemas.events import Commit

# GitLab sends forty zeros as ``before`` for a new ref and as ``after`` for a
# deleted one.
ZERO_SHA: Final = "0" * 40

_REF_PREFIXES: Final = ("refs/heads/", "refs/tags/")

# Builds in these states mean the pipeline has not finished yet.
IN_FLIGHT_STATUSES: Final = frozenset({"created", "running", "pending"})

DEFAULT_COLOR: Final = "comment"


@dataclass(frozen=True)
class StatusInfo:
    """Display attributes of a pipeline or build status."""

    label: str
    color: str = DEFAULT_COLOR
    icon: str = ""


STATUS_TABLE: Final[dict[str, StatusInfo]] = {
    "failed": StatusInfo("failed", "warning", "✗"),
    "success": StatusInfo("succeeded", "info", "✓"),
    "running": StatusInfo("running", DEFAULT_COLOR, "⏳"),
    "pending": StatusInfo("pending", "warning", "🔄"),
    "canceled": StatusInfo("canceled"),
    "skipped": StatusInfo("skipped"),
    "manual": StatusInfo("needs manual trigger"),
}

PIPELINE_SOURCES: Final = {
    "push": "a push",
    "merge_request_event": "a merge request",
    "web": "a web run",
}

MERGE_REQUEST_STATES: Final = {
    "opened": ("opened", "requires maintainer review"),
    "closed": ("closed", "requires submitter review"),
    "locked": ("locked", None),
    "merged": ("merged", None),
}

_TRAILING_ZONE = re.compile(r"\s+(UTC|Z|[+-]\d{2}:?\d{2})$")


def format_status(status: str) -> StatusInfo:
    """Look up the label, font colour and icon for a GitLab status."""
    info = STATUS_TABLE.get(status)
    if info is None:
        return StatusInfo(f"unknown status ({status})")
    return info


def format_duration(seconds: int) -> str:
    """Render a pipeline duration.

    Durations of an hour or more are shown as raw seconds.
    """
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m {seconds % 60}s"
    return f"{seconds}s"


def format_source(source: str | None) -> str:
    """Describe what triggered a pipeline."""
    phrase = PIPELINE_SOURCES.get(source or "")
    if phrase is None:
        return f"operation({source})"
    return phrase


def format_merge_state(state: str) -> tuple[str, str | None]:
    """Return the verb and optional call to action for a merge request state.

    Unknown states pass through verbatim with no call to action.
    """
    return MERGE_REQUEST_STATES.get(state, (state, None))


def strip_ref(ref: str) -> str:
    """``refs/heads/main`` -> ``main``; already-short names are unchanged."""
    for prefix in _REF_PREFIXES:
        if ref.startswith(prefix):
            return ref[len(prefix):]
    return ref


def ref_operation(before: str, after: str) -> str | None:
    """Classify a ref update as ``created``, ``deleted``, or ``None`` for a plain push."""
    if before == ZERO_SHA:
        return "created"
    if after == ZERO_SHA:
        return "deleted"
    return None


def collapse_whitespace(text: str) -> str:
    """Trim and squeeze every whitespace run (newlines included) to one space."""
    return " ".join(text.split())


@dataclass(frozen=True)
class ChangeCounts:
    added: int = 0
    modified: int = 0
    removed: int = 0


def count_changes(commits: Iterable[Commit]) -> ChangeCounts:
    """Sum added, modified and removed paths across *commits*."""
    added = modified = removed = 0
    for commit in commits:
        added += len(commit.added)
        modified += len(commit.modified)
        removed += len(commit.removed)
    return ChangeCounts(added=added, modified=modified, removed=removed)


def parse_timestamp(value: str) -> datetime | None:
    """Parse the timestamp formats GitLab webhooks use.

    Handles ISO 8601 (``2024-05-01T08:30:00Z``) and the legacy
    ``2024-05-01 08:30:00 UTC`` / ``2024-05-01 08:30:00 +0800`` forms.
    Naive values are taken as UTC. Returns ``None`` when unparseable.
    """
    text = value.strip()
    match = _TRAILING_ZONE.search(text)
    if match:
        zone = match.group(1)
        if zone in ("UTC", "Z"):
            offset = "+00:00"
        else:
            offset = zone if ":" in zone else f"{zone[:3]}:{zone[3:]}"
        text = text[: match.start()] + offset
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: str, tz: tzinfo | None = None) -> str:
    """Render *value* as ``MM-DD HH:mm``, in *tz* when given.

    Unparseable values are returned unchanged.
    """
    parsed = parse_timestamp(value)
    if parsed is None:
        return value
    if tz is not None:
        parsed = parsed.astimezone(tz)
    return parsed.strftime("%m-%d %H:%M")
