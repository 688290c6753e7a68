"""Validation models - proposed changes, issues and results."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from themeplane.extraction.paths import normalize_path


class Severity(Enum):
    """Issue severity level."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        """Sort rank: errors first."""
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {Severity.ERROR: 0, Severity.WARNING: 1, Severity.INFO: 2}


class IssueCategory(Enum):
    """Closed set of structural problem categories."""

    SNIPPET_REFERENCE = "snippet-reference"
    CSS_CLASS = "css-class"
    TEMPLATE_SECTION = "template-section"
    SCHEMA_SETTING = "schema-setting"
    ASSET_REFERENCE = "asset-reference"
    DEPRECATED_CONSTRUCT = "deprecated-construct"
    LOCALE_KEY = "locale-key"
    COMPANION_STYLESHEET = "companion-stylesheet"
    COMPANION_SCRIPT = "companion-script"
    COMPANION_SCHEMA = "companion-schema"
    CROSS_FILE = "cross-file"
    DESIGN_TOKEN = "design-token"


@dataclass(frozen=True, slots=True)
class Issue:
    """One detected problem. Produced fresh by every validation call."""

    severity: Severity
    category: IssueCategory
    file: str
    description: str
    suggestion: str | None = None
    source: str = "change-set"

    @property
    def key(self) -> str:
        """Structural identity used to diff issues across before/after snapshots."""
        return f"{self.severity.value}:{self.category.value}:{self.file}:{self.description}"

    def to_dict(self) -> dict[str, str | None]:
        return {
            "severity": self.severity.value,
            "category": self.category.value,
            "file": self.file,
            "description": self.description,
            "suggestion": self.suggestion,
            "source": self.source,
        }


def sort_issues(issues: Iterable[Issue]) -> list[Issue]:
    """Errors, then warnings, then info; stable within a severity."""
    return sorted(issues, key=lambda i: i.severity.rank)


def has_errors(issues: Iterable[Issue]) -> bool:
    return any(i.severity is Severity.ERROR for i in issues)


@dataclass(frozen=True, slots=True)
class ProposedChange:
    """One file's edit within a batch, as produced by a specialist agent."""

    path: str
    original_content: str
    proposed_content: str
    rationale: str = ""
    agent: str = ""
    file_id: str | None = None

    @property
    def normalized_path(self) -> str:
        return normalize_path(self.path)


def find_duplicate_targets(changes: Iterable[ProposedChange]) -> list[str]:
    """Paths targeted by more than one change in a batch."""
    counts = Counter(c.normalized_path for c in changes)
    return sorted(path for path, n in counts.items() if n > 1)


@dataclass
class ValidationResult:
    """Outcome of one change-set validation."""

    valid: bool
    issues: list[Issue] = field(default_factory=list)

    @classmethod
    def from_issues(cls, issues: list[Issue]) -> ValidationResult:
        return cls(valid=not has_errors(issues), issues=issues)

    @property
    def error_count(self) -> int:
        return sum(1 for i in self.issues if i.severity is Severity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for i in self.issues if i.severity is Severity.WARNING)
