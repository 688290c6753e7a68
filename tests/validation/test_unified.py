"""Tests for the unified, time-budgeted validation wrapper."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable, Sequence

import pytest

from themeplane.index.models import FileRecord
from themeplane.validation.models import Issue, IssueCategory, ProposedChange, Severity
from themeplane.validation.unified import validate_code_changes, validate_code_changes_sync

Edit = Callable[..., ProposedChange]


def _info(file: str, description: str = "note") -> Issue:
    return Issue(
        severity=Severity.INFO,
        category=IssueCategory.CROSS_FILE,
        file=file,
        description=description,
        source="test",
    )


class StaticChecker:
    def __init__(self, name: str, issues: list[Issue]) -> None:
        self.name = name
        self._issues = issues

    def check(self, changes: Sequence[ProposedChange], project_files: Sequence[FileRecord]) -> list[Issue]:
        return list(self._issues)


class FailingChecker:
    name = "failing"

    def check(self, changes: Sequence[ProposedChange], project_files: Sequence[FileRecord]) -> list[Issue]:
        raise RuntimeError("boom")


class SlowChecker:
    name = "slow"

    def check(self, changes: Sequence[ProposedChange], project_files: Sequence[FileRecord]) -> list[Issue]:
        time.sleep(0.05)
        return []


class RecordingAsyncChecker:
    def __init__(self, name: str = "recording", delay: float = 0.0, fail: bool = False) -> None:
        self.name = name
        self.delay = delay
        self.fail = fail
        self.seen: list[str] = []
        self.cancelled = False

    async def check_file(self, change: ProposedChange) -> list[Issue]:
        self.seen.append(change.normalized_path)
        try:
            await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        if self.fail:
            raise ValueError("token service down")
        return [_info(change.normalized_path, f"checked by {self.name}")]


class TestDefaults:
    """Default checker pipeline."""

    @pytest.mark.asyncio
    async def test_change_set_errors_reported(
        self, theme_files: list[FileRecord], edit: Edit
    ) -> None:
        change = edit("sections/header.liquid", append="{% render 'cart-icon' %}")

        result = await validate_code_changes([change], theme_files)

        assert result.valid is False
        assert [i.category for i in result.issues] == [IssueCategory.SNIPPET_REFERENCE]
        assert result.elapsed_ms >= 0
        assert result.skipped == []

    @pytest.mark.asyncio
    async def test_cross_file_warnings_merged(
        self, theme_files: list[FileRecord], edit: Edit
    ) -> None:
        change = edit("snippets/logo.liquid", "")

        result = await validate_code_changes([change], theme_files)

        assert result.valid is True
        assert [i.source for i in result.issues] == ["cross-file"]

    @pytest.mark.asyncio
    async def test_issues_sorted_by_severity(self, theme_files: list[FileRecord], edit: Edit) -> None:
        warning = Issue(
            severity=Severity.WARNING,
            category=IssueCategory.CROSS_FILE,
            file="a",
            description="w",
        )
        error = Issue(
            severity=Severity.ERROR,
            category=IssueCategory.CROSS_FILE,
            file="a",
            description="e",
        )
        result = await validate_code_changes(
            [],
            theme_files,
            sync_checkers=[StaticChecker("one", [_info("a"), warning]), StaticChecker("two", [error])],
        )
        assert [i.severity for i in result.issues] == [Severity.ERROR, Severity.WARNING, Severity.INFO]
        assert result.valid is False


class TestFailureIsolation:
    """Checker failures never propagate."""

    @pytest.mark.asyncio
    async def test_sync_failure_swallowed(self, theme_files: list[FileRecord]) -> None:
        result = await validate_code_changes(
            [],
            theme_files,
            sync_checkers=[FailingChecker(), StaticChecker("after", [_info("x")])],
        )
        assert [i.file for i in result.issues] == ["x"]
        assert result.valid is True

    @pytest.mark.asyncio
    async def test_async_failure_swallowed(self, theme_files: list[FileRecord], edit: Edit) -> None:
        failing = RecordingAsyncChecker("flaky", fail=True)
        healthy = RecordingAsyncChecker("healthy")

        result = await validate_code_changes(
            [edit("assets/theme.css", append="\n")],
            theme_files,
            sync_checkers=[],
            async_checkers=[failing, healthy],
        )

        assert [i.description for i in result.issues] == ["checked by healthy"]
        assert result.skipped == []


class TestTimeBudget:
    """Budget checks between checkers and the async race."""

    @pytest.mark.asyncio
    async def test_remaining_sync_checkers_skipped(self, theme_files: list[FileRecord]) -> None:
        result = await validate_code_changes(
            [],
            theme_files,
            sync_checkers=[SlowChecker(), StaticChecker("late", [_info("x")])],
            timeout_ms=10,
        )
        assert result.skipped == ["late"]
        assert result.issues == []

    @pytest.mark.asyncio
    async def test_async_checkers_skipped_after_sync_overrun(
        self, theme_files: list[FileRecord], edit: Edit
    ) -> None:
        async_checker = RecordingAsyncChecker("tokens")
        result = await validate_code_changes(
            [edit("assets/theme.css", append="\n")],
            theme_files,
            sync_checkers=[SlowChecker()],
            async_checkers=[async_checker],
            timeout_ms=10,
        )
        assert result.skipped == ["tokens"]
        assert async_checker.seen == []

    @pytest.mark.asyncio
    async def test_slow_async_checker_dropped_and_cancelled(
        self, theme_files: list[FileRecord], edit: Edit
    ) -> None:
        """A hung async checker loses the race, sync issues are still returned."""
        slow = RecordingAsyncChecker("tokens", delay=5.0)
        started = time.perf_counter()

        result = await validate_code_changes(
            [edit("sections/header.liquid", append="{% render 'nope' %}")],
            theme_files,
            async_checkers=[slow],
            timeout_ms=300,
            min_async_timeout_ms=20,
        )

        assert time.perf_counter() - started < 2.0
        assert result.skipped == ["tokens"]
        assert [i.category for i in result.issues] == [IssueCategory.SNIPPET_REFERENCE]
        assert slow.cancelled is True

    @pytest.mark.asyncio
    async def test_async_runs_only_for_code_files(
        self, theme_files: list[FileRecord], edit: Edit
    ) -> None:
        recorder = RecordingAsyncChecker()
        await validate_code_changes(
            [
                edit("templates/index.json", append=" "),
                edit("sections/header.liquid", append=" "),
                edit("assets/theme.css", append=" "),
            ],
            theme_files,
            sync_checkers=[],
            async_checkers=[recorder],
        )
        assert sorted(recorder.seen) == ["assets/theme.css", "sections/header.liquid"]


class TestSyncEntryPoint:
    def test_runs_without_event_loop(self, theme_files: list[FileRecord], edit: Edit) -> None:
        result = validate_code_changes_sync(
            [edit("sections/header.liquid", append="{% render 'nope' %}")], theme_files
        )
        assert result.valid is False
        data = result.to_dict()
        assert data["valid"] is False
        assert data["issues"][0]["category"] == "snippet-reference"
