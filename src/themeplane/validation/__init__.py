"""Validation module - change-set differential and pluggable checkers."""

from themeplane.validation.changeset import ChangeSetValidator, validate_change_set
from themeplane.validation.consistency import CrossFileConsistencyChecker
from themeplane.validation.design_tokens import DesignTokenChecker, StaticTokenSource, TokenSource
from themeplane.validation.models import (
    Issue,
    IssueCategory,
    ProposedChange,
    Severity,
    ValidationResult,
    find_duplicate_targets,
    sort_issues,
)
from themeplane.validation.snapshot import MergedEntry, build_merged_snapshot
from themeplane.validation.unified import (
    UnifiedValidationResult,
    validate_code_changes,
    validate_code_changes_sync,
)

__all__ = [
    "ChangeSetValidator",
    "CrossFileConsistencyChecker",
    "DesignTokenChecker",
    "Issue",
    "IssueCategory",
    "MergedEntry",
    "ProposedChange",
    "Severity",
    "StaticTokenSource",
    "TokenSource",
    "UnifiedValidationResult",
    "ValidationResult",
    "build_merged_snapshot",
    "find_duplicate_targets",
    "sort_issues",
    "validate_change_set",
    "validate_code_changes",
    "validate_code_changes_sync",
]
