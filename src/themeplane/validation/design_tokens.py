"""Design-token checker: hard-coded colours that duplicate a project token.

This is the asynchronous checker of the unified wrapper. Token values
come from a ``TokenSource``, which in production sits in front of a
network-backed style-guide service. The checker runs once per changed
file and is raced against the wrapper's time budget.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Protocol

import structlog

from themeplane.extraction.paths import FileKind, infer_kind, is_stylesheet
from themeplane.index.models import FileRecord
from themeplane.validation.models import Issue, IssueCategory, ProposedChange, Severity

log = structlog.get_logger(__name__)

SOURCE = "design-tokens"

# 3, 4, 6 or 8 hex digits. In-page anchors (href="#abc") and HTML entities are not colours.
HEX_COLOR_RE = re.compile(
    r"(?<![\w&#])(?<!href=\")(?<!href=')"
    r"#(?:[0-9a-fA-F]{8}|[0-9a-fA-F]{6}|[0-9a-fA-F]{3,4})\b"
)
FUNC_COLOR_RE = re.compile(r"(?:rgba?|hsla?)\([^)]+\)")
TOKEN_DECLARATION_RE = re.compile(r"^\s*--[\w-]+\s*:")
CSS_VAR_DECL_RE = re.compile(r"--([\w-]+)\s*:\s*([^;}]+)")

_CHECKED_KINDS = frozenset({FileKind.LIQUID, FileKind.CSS, FileKind.JAVASCRIPT})


class TokenSource(Protocol):
    """Supplies ``{token_name: value}`` for a project."""

    async def get_tokens(self, project_id: str) -> Mapping[str, str]: ...


class StaticTokenSource:
    """In-memory token source, one mapping per project id."""

    def __init__(self, tokens: Mapping[str, Mapping[str, str]] | None = None) -> None:
        self._tokens = {pid: dict(values) for pid, values in (tokens or {}).items()}

    def set_tokens(self, project_id: str, tokens: Mapping[str, str]) -> None:
        self._tokens[project_id] = dict(tokens)

    async def get_tokens(self, project_id: str) -> Mapping[str, str]:
        return self._tokens.get(project_id, {})

    @classmethod
    def from_stylesheets(cls, project_id: str, files: Iterable[FileRecord]) -> StaticTokenSource:
        """Tokens from the CSS custom properties a theme declares."""
        tokens: dict[str, str] = {}
        for record in files:
            if is_stylesheet(record.path, record.kind):
                for name, value in extract_custom_properties(record.content).items():
                    tokens.setdefault(name, value)
        return cls({project_id: tokens})


def extract_custom_properties(content: str) -> dict[str, str]:
    """``--name: value`` declarations whose value is a colour literal."""
    found: dict[str, str] = {}
    for match in CSS_VAR_DECL_RE.finditer(content):
        value = match.group(2).strip()
        if HEX_COLOR_RE.fullmatch(value) or FUNC_COLOR_RE.fullmatch(value):
            found.setdefault(match.group(1), value)
    return found


def normalize_color(value: str) -> str:
    """Canonical spelling for comparison: lower case, no spaces, long hex."""
    value = re.sub(r"\s+", "", value.strip().lower())
    if re.fullmatch(r"#[0-9a-f]{3,4}", value):
        value = "#" + "".join(ch * 2 for ch in value[1:])
    return value


def find_color_literals(line: str) -> list[str]:
    return [m.group(0) for m in HEX_COLOR_RE.finditer(line)] + [
        m.group(0) for m in FUNC_COLOR_RE.finditer(line)
    ]


class DesignTokenChecker:
    """Flags colour literals equal to a design token's value."""

    name = "design-tokens"

    def __init__(self, source: TokenSource, project_id: str) -> None:
        self._source = source
        self._project_id = project_id

    async def _token_lookup(self) -> dict[str, str]:
        tokens = await self._source.get_tokens(self._project_id)
        lookup: dict[str, str] = {}
        for name, value in sorted(tokens.items()):
            lookup.setdefault(normalize_color(str(value)), name.removeprefix("--"))
        return lookup

    async def check_file(self, change: ProposedChange) -> list[Issue]:
        path = change.normalized_path
        if infer_kind(path) not in _CHECKED_KINDS:
            return []
        lookup = await self._token_lookup()
        if not lookup:
            return []

        issues: list[Issue] = []
        for line_no, line in enumerate(change.proposed_content.splitlines(), start=1):
            if TOKEN_DECLARATION_RE.match(line):
                continue
            for literal in find_color_literals(line):
                token = lookup.get(normalize_color(literal))
                if token is None:
                    continue
                issues.append(
                    Issue(
                        severity=Severity.WARNING,
                        category=IssueCategory.DESIGN_TOKEN,
                        file=path,
                        description=(
                            f'Line {line_no}: hard-coded "{literal}" matches design token "{token}"'
                        ),
                        suggestion=f"Use var(--{token}) instead.",
                        source=SOURCE,
                    )
                )
        log.debug("design_tokens.checked", path=path, issues=len(issues))
        return issues
