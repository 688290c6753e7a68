"""Unified validation: every checker under one wall-clock budget.

Synchronous checkers run first, in order, and the budget is re-checked
before each one starts. Asynchronous per-file checkers are fanned out
together and raced against whatever budget is left. A checker that
raises or runs out of time contributes nothing. The call itself never
fails.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Protocol

import structlog

from themeplane.config.constants import DEFAULT_VALIDATION_TIMEOUT_MS, MIN_ASYNC_TIMEOUT_MS
from themeplane.extraction.paths import FileKind, infer_kind
from themeplane.index.models import FileRecord
from themeplane.validation.changeset import ChangeSetValidator
from themeplane.validation.consistency import CrossFileConsistencyChecker
from themeplane.validation.models import Issue, ProposedChange, has_errors, sort_issues

log = structlog.get_logger(__name__)

_ASYNC_KINDS = frozenset({FileKind.LIQUID, FileKind.CSS, FileKind.JAVASCRIPT})


class SyncChecker(Protocol):
    name: str

    def check(
        self, changes: Sequence[ProposedChange], project_files: Sequence[FileRecord]
    ) -> list[Issue]: ...


class AsyncChecker(Protocol):
    name: str

    async def check_file(self, change: ProposedChange) -> list[Issue]: ...


@dataclass
class UnifiedValidationResult:
    """Merged, severity-sorted issues from every checker that finished in time."""

    valid: bool
    issues: list[Issue] = field(default_factory=list)
    elapsed_ms: float = 0.0
    skipped: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "valid": self.valid,
            "issues": [issue.to_dict() for issue in self.issues],
            "elapsed_ms": round(self.elapsed_ms, 3),
            "skipped": list(self.skipped),
        }


def default_sync_checkers() -> list[SyncChecker]:
    return [ChangeSetValidator(), CrossFileConsistencyChecker()]


class _Clock:
    def __init__(self, timeout_ms: float) -> None:
        self._start = time.perf_counter()
        self.timeout_ms = timeout_ms

    @property
    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self._start) * 1000

    @property
    def remaining_ms(self) -> float:
        return self.timeout_ms - self.elapsed_ms

    @property
    def exhausted(self) -> bool:
        return self.elapsed_ms > self.timeout_ms


async def _run_file_check(checker: AsyncChecker, change: ProposedChange) -> list[Issue]:
    try:
        return await checker.check_file(change)
    except asyncio.CancelledError:
        raise
    except Exception as exc:
        log.warning(
            "validation.checker_failed",
            checker=checker.name,
            path=change.normalized_path,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return []


async def validate_code_changes(
    changes: Sequence[ProposedChange],
    project_files: Iterable[FileRecord],
    *,
    sync_checkers: Sequence[SyncChecker] | None = None,
    async_checkers: Sequence[AsyncChecker] = (),
    timeout_ms: float = DEFAULT_VALIDATION_TIMEOUT_MS,
    min_async_timeout_ms: float = MIN_ASYNC_TIMEOUT_MS,
) -> UnifiedValidationResult:
    """Run all checkers within ``timeout_ms`` and merge their issues."""
    clock = _Clock(timeout_ms)
    changes = list(changes)
    files = list(project_files)
    checkers = list(sync_checkers) if sync_checkers is not None else default_sync_checkers()

    issues: list[Issue] = []
    skipped: list[str] = []

    for position, checker in enumerate(checkers):
        if clock.exhausted:
            skipped.extend(c.name for c in checkers[position:])
            break
        try:
            issues.extend(checker.check(changes, files))
        except Exception as exc:
            log.warning(
                "validation.checker_failed",
                checker=checker.name,
                error=str(exc),
                error_type=type(exc).__name__,
            )

    if async_checkers:
        if skipped or clock.exhausted:
            skipped.extend(c.name for c in async_checkers)
        else:
            targets = [c for c in changes if infer_kind(c.normalized_path) in _ASYNC_KINDS]
            coros = [_run_file_check(chk, change) for chk in async_checkers for change in targets]
            if coros:
                budget_s = max(clock.remaining_ms, min_async_timeout_ms) / 1000
                try:
                    results = await asyncio.wait_for(asyncio.gather(*coros), timeout=budget_s)
                except asyncio.TimeoutError:
                    skipped.extend(c.name for c in async_checkers)
                    log.info("validation.async_timeout", budget_ms=round(budget_s * 1000, 1))
                else:
                    for found in results:
                        issues.extend(found)

    if skipped:
        log.info("validation.budget_exhausted", skipped=skipped, timeout_ms=timeout_ms)

    ordered = sort_issues(issues)
    result = UnifiedValidationResult(
        valid=not has_errors(ordered),
        issues=ordered,
        elapsed_ms=clock.elapsed_ms,
        skipped=skipped,
    )
    log.debug(
        "validation.completed",
        issues=len(ordered),
        valid=result.valid,
        elapsed_ms=round(result.elapsed_ms, 1),
    )
    return result


def validate_code_changes_sync(
    changes: Sequence[ProposedChange],
    project_files: Iterable[FileRecord],
    *,
    sync_checkers: Sequence[SyncChecker] | None = None,
    async_checkers: Sequence[AsyncChecker] = (),
    timeout_ms: float = DEFAULT_VALIDATION_TIMEOUT_MS,
    min_async_timeout_ms: float = MIN_ASYNC_TIMEOUT_MS,
) -> UnifiedValidationResult:
    """Blocking entry point for callers without an event loop."""
    return asyncio.run(
        validate_code_changes(
            changes,
            project_files,
            sync_checkers=sync_checkers,
            async_checkers=async_checkers,
            timeout_ms=timeout_ms,
            min_async_timeout_ms=min_async_timeout_ms,
        )
    )
