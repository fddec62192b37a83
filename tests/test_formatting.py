"""Tests for the shared formatting helpers."""

from datetime import timezone
from zoneinfo import ZoneInfo

import pytest

from gitlab_relay.schemas.events import Commit
from gitlab_relay.services.formatting import (
    ZERO_SHA,
    StatusInfo,
    collapse_whitespace,
    count_changes,
    format_duration,
    format_merge_state,
    format_source,
    format_status,
    format_timestamp,
    parse_timestamp,
    ref_operation,
    strip_ref,
)


class TestFormatDuration:
    """Durations render as seconds, minutes+seconds, or raw seconds past an hour."""

    def test_under_a_minute(self) -> None:
        assert format_duration(45) == "45s"

    def test_zero(self) -> None:
        assert format_duration(0) == "0s"

    def test_minutes_and_seconds(self) -> None:
        assert format_duration(125) == "2m 5s"

    def test_exact_minute(self) -> None:
        assert format_duration(60) == "1m 0s"

    def test_just_under_an_hour(self) -> None:
        assert format_duration(3599) == "59m 59s"

    def test_an_hour_or_more_uses_raw_seconds(self) -> None:
        assert format_duration(3600) == "3600s"
        assert format_duration(3601) == "3601s"


class TestStripRef:
    @pytest.mark.parametrize(
        ("ref", "expected"),
        [
            ("refs/heads/main", "main"),
            ("refs/heads/feature/login", "feature/login"),
            ("refs/tags/v1.2.0", "v1.2.0"),
            ("main", "main"),
        ],
    )
    def test_strip_ref(self, ref: str, expected: str) -> None:
        assert strip_ref(ref) == expected

    def test_idempotent(self) -> None:
        assert strip_ref(strip_ref("refs/heads/main")) == "main"


class TestRefOperation:
    def test_zero_before_is_created_regardless_of_after(self) -> None:
        assert ref_operation(ZERO_SHA, "a1b2c3") == "created"
        assert ref_operation(ZERO_SHA, ZERO_SHA) == "created"

    def test_zero_after_is_deleted(self) -> None:
        assert ref_operation("a1b2c3", ZERO_SHA) == "deleted"

    def test_regular_push(self) -> None:
        assert ref_operation("a1b2c3", "d4e5f6") is None

    def test_sentinel_is_forty_zeros(self) -> None:
        assert ZERO_SHA == "0" * 40
        assert ref_operation("0" * 39, "d4e5f6") is None


class TestFormatStatus:
    """Every known status maps to its label, colour and icon."""

    @pytest.mark.parametrize(
        ("status", "label", "color", "icon"),
        [
            ("failed", "failed", "warning", "✗"),
            ("success", "succeeded", "info", "✓"),
            ("running", "running", "comment", "⏳"),
            ("pending", "pending", "warning", "🔄"),
            ("canceled", "canceled", "comment", ""),
            ("skipped", "skipped", "comment", ""),
            ("manual", "needs manual trigger", "comment", ""),
        ],
    )
    def test_known_statuses(self, status: str, label: str, color: str, icon: str) -> None:
        assert format_status(status) == StatusInfo(label, color, icon)

    def test_unknown_status(self) -> None:
        info = format_status("scheduled")
        assert info.label == "unknown status (scheduled)"
        assert info.color == "comment"
        assert info.icon == ""


def test_format_source_known() -> None:
    assert format_source("push") == "a push"
    assert format_source("merge_request_event") == "a merge request"
    assert format_source("web") == "a web run"


def test_format_source_unknown() -> None:
    assert format_source("schedule") == "operation(schedule)"
    assert format_source(None) == "operation(None)"


def test_format_merge_state() -> None:
    assert format_merge_state("opened") == ("opened", "requires maintainer review")
    assert format_merge_state("closed") == ("closed", "requires submitter review")
    assert format_merge_state("locked") == ("locked", None)
    assert format_merge_state("merged") == ("merged", None)


def test_format_merge_state_passes_unknown_through() -> None:
    assert format_merge_state("reopened") == ("reopened", None)


def test_collapse_whitespace() -> None:
    assert collapse_whitespace("  fix bug\n\nsecond   line\t") == "fix bug second line"
    assert collapse_whitespace("") == ""


def test_count_changes_sums_across_commits() -> None:
    commits = [
        Commit(
            message="one",
            url="https://x/c1",
            author={"name": "alice"},
            added=["a.txt", "b.txt"],
            modified=["c.txt"],
        ),
        Commit(
            message="two",
            url="https://x/c2",
            author={"name": "bob"},
            removed=["d.txt"],
            modified=["e.txt"],
        ),
    ]
    changes = count_changes(commits)
    assert (changes.added, changes.modified, changes.removed) == (2, 2, 1)


def test_count_changes_empty() -> None:
    changes = count_changes([])
    assert (changes.added, changes.modified, changes.removed) == (0, 0, 0)


class TestTimestamps:
    """GitLab timestamp formats parse and render as MM-DD HH:mm."""

    def test_iso_with_z(self) -> None:
        parsed = parse_timestamp("2024-05-01T08:30:00Z")
        assert parsed is not None
        assert parsed.utcoffset() == timezone.utc.utcoffset(None)

    def test_legacy_utc_suffix(self) -> None:
        assert format_timestamp("2024-05-01 08:30:00 UTC") == "05-01 08:30"

    def test_numeric_offset_without_colon(self) -> None:
        assert format_timestamp("2024-05-01 08:30:00 +0800") == "05-01 08:30"

    def test_converts_to_display_zone(self) -> None:
        formatted = format_timestamp("2024-05-01T20:30:00Z", ZoneInfo("Asia/Shanghai"))
        assert formatted == "05-02 04:30"

    def test_naive_is_treated_as_utc(self) -> None:
        formatted = format_timestamp("2024-05-01T08:30:00", ZoneInfo("Asia/Shanghai"))
        assert formatted == "05-01 16:30"

    def test_unparseable_passes_through(self) -> None:
        assert parse_timestamp("yesterday") is None
        assert format_timestamp("yesterday") == "yesterday"
