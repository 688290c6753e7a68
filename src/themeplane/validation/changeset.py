"""Before/after differential validation of a change batch.

The same rule pipeline runs twice: once on the project with the batch
applied, once on the project with every changed file at its original
content. Only issues whose key is absent from the second run are
reported, so pre-existing problems never reach the caller.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import structlog

from themeplane.index.models import FileRecord
from themeplane.validation.companion import check_companion_coverage
from themeplane.validation.models import (
    Issue,
    ProposedChange,
    ValidationResult,
    find_duplicate_targets,
)
from themeplane.validation.rules import SNAPSHOT_RULES, Rule, SnapshotContext, run_snapshot_rules
from themeplane.validation.snapshot import build_merged_snapshot, revert_changes

log = structlog.get_logger(__name__)


def run_checks(
    changes: Sequence[ProposedChange],
    project_files: Sequence[FileRecord],
    rules: tuple[Rule, ...] = SNAPSHOT_RULES,
) -> list[Issue]:
    """Every issue present in the project once ``changes`` are applied."""
    snapshot = build_merged_snapshot(changes, project_files)
    ctx = SnapshotContext.from_snapshot(snapshot)
    issues = run_snapshot_rules(snapshot, rules, ctx)
    issues.extend(check_companion_coverage(changes, ctx))
    return issues


def validate_change_set(
    changes: Sequence[ProposedChange],
    project_files: Iterable[FileRecord],
    rules: tuple[Rule, ...] = SNAPSHOT_RULES,
) -> ValidationResult:
    """Report only the structural problems the batch introduces.

    Never raises for malformed file content: unparsable JSON or markup
    contributes no references rather than an error.
    """
    changes = list(changes)
    files = list(project_files)

    duplicates = find_duplicate_targets(changes)
    if duplicates:
        log.warning("validation.duplicate_targets", paths=duplicates)

    after = run_checks(changes, files, rules)
    before = run_checks(revert_changes(changes), files, rules)

    baseline = {issue.key for issue in before}
    regressions = [issue for issue in after if issue.key not in baseline]

    result = ValidationResult.from_issues(regressions)
    log.debug(
        "validation.regressions",
        changes=len(changes),
        after=len(after),
        before=len(before),
        regressions=len(regressions),
        valid=result.valid,
    )
    return result


class ChangeSetValidator:
    """Checker adapter around ``validate_change_set`` for the unified wrapper."""

    name = "change-set"

    def __init__(self, rules: tuple[Rule, ...] = SNAPSHOT_RULES) -> None:
        self._rules = rules

    def check(
        self, changes: Sequence[ProposedChange], project_files: Sequence[FileRecord]
    ) -> list[Issue]:
        return validate_change_set(changes, project_files, self._rules).issues
