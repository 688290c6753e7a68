"""Lightweight cross-file heuristics run after the change-set validator.

These look for edits that silently break a counterpart the batch did
not touch: a selector removed while markup still uses it, a partial
emptied while still rendered, a data hook dropped while a script still
queries it. All findings are warnings.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from themeplane.config.constants import MAX_LISTED_IDENTIFIERS
from themeplane.extraction.markup import (
    extract_css_classes,
    extract_data_attributes,
    extract_liquid_classes,
)
from themeplane.extraction.paths import FileKind, is_liquid, is_stylesheet
from themeplane.extraction.references import detect_references
from themeplane.index.models import FileRecord
from themeplane.validation.models import Issue, IssueCategory, ProposedChange, Severity
from themeplane.validation.snapshot import MergedSnapshot, build_merged_snapshot

SOURCE = "cross-file"
_PARTIAL_PREFIXES = ("snippets/", "sections/")


def dataset_property(attribute: str) -> str:
    """``data-product-id`` -> ``productId`` (the ``element.dataset`` key)."""
    parts = attribute.removeprefix("data-").split("-")
    return parts[0] + "".join(p[:1].upper() + p[1:] for p in parts[1:])


def script_queries_attribute(script: str, attribute: str) -> bool:
    """True when a script selects ``[data-x]`` or reads ``dataset.x``."""
    selector = re.compile(r"\[\s*" + re.escape(attribute) + r"\s*[\]=~|^$*]")
    if selector.search(script):
        return True
    prop = re.compile(r"\bdataset\.\s*" + re.escape(dataset_property(attribute)) + r"\b")
    return prop.search(script) is not None


def _files(paths: Sequence[str]) -> str:
    shown = ", ".join(paths[:MAX_LISTED_IDENTIFIERS])
    extra = len(paths) - MAX_LISTED_IDENTIFIERS
    return f"{shown} (+{extra} more)" if extra > 0 else shown


class CrossFileConsistencyChecker:
    """Heuristic checks for breakage in files the batch did not edit."""

    name = "cross-file"

    def check(
        self, changes: Sequence[ProposedChange], project_files: Sequence[FileRecord]
    ) -> list[Issue]:
        snapshot = build_merged_snapshot(changes, project_files)
        issues: list[Issue] = []
        for change in changes:
            path = change.normalized_path
            entry = snapshot.get(path)
            kind = entry.kind if entry is not None else None
            if is_stylesheet(path, kind):
                issues.extend(self._removed_selectors(change, path, snapshot))
            if path.startswith(_PARTIAL_PREFIXES):
                issues.extend(self._emptied_partial(change, path, snapshot))
            if is_liquid(path, kind):
                issues.extend(self._removed_data_hooks(change, path, snapshot))
        return issues

    def _removed_selectors(
        self, change: ProposedChange, path: str, snapshot: MergedSnapshot
    ) -> list[Issue]:
        removed = extract_css_classes(change.original_content) - extract_css_classes(
            change.proposed_content
        )
        if not removed:
            return []

        still_declared: set[str] = set()
        used_in: dict[str, list[str]] = {}
        for other_path, entry in snapshot.items():
            if is_stylesheet(other_path, entry.kind):
                if other_path != path:
                    still_declared.update(extract_css_classes(entry.content))
            elif is_liquid(other_path, entry.kind):
                for cls in extract_liquid_classes(entry.content) & removed:
                    used_in.setdefault(cls, []).append(other_path)

        issues = []
        for cls in sorted(removed - still_declared):
            users = sorted(used_in.get(cls, []))
            if users:
                issues.append(
                    Issue(
                        severity=Severity.WARNING,
                        category=IssueCategory.CROSS_FILE,
                        file=path,
                        description=f'Removed selector ".{cls}" is still used by {_files(users)}',
                        suggestion="Keep the selector or update the markup that uses it.",
                        source=SOURCE,
                    )
                )
        return issues

    def _emptied_partial(
        self, change: ProposedChange, path: str, snapshot: MergedSnapshot
    ) -> list[Issue]:
        if change.proposed_content.strip() or not change.original_content.strip():
            return []
        referrers = sorted(
            other_path
            for other_path, entry in snapshot.items()
            if other_path != path and path in detect_references(entry.kind, other_path, entry.content)
        )
        if not referrers:
            return []
        return [
            Issue(
                severity=Severity.WARNING,
                category=IssueCategory.CROSS_FILE,
                file=path,
                description=f"File is emptied but still referenced by {_files(referrers)}",
                source=SOURCE,
            )
        ]

    def _removed_data_hooks(
        self, change: ProposedChange, path: str, snapshot: MergedSnapshot
    ) -> list[Issue]:
        removed = extract_data_attributes(change.original_content) - extract_data_attributes(
            change.proposed_content
        )
        if not removed:
            return []
        scripts = [
            (other_path, entry.content)
            for other_path, entry in snapshot.items()
            if entry.kind is FileKind.JAVASCRIPT
        ]
        issues = []
        for attribute in sorted(removed):
            readers = sorted(p for p, content in scripts if script_queries_attribute(content, attribute))
            if readers:
                issues.append(
                    Issue(
                        severity=Severity.WARNING,
                        category=IssueCategory.CROSS_FILE,
                        file=path,
                        description=f"Removed {attribute} is still queried by {_files(readers)}",
                        source=SOURCE,
                    )
                )
        return issues
