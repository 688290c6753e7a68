"""Structural rules evaluated against one merged snapshot.

Each rule is a pure function ``(path, entry, ctx) -> list[Issue]``. The
change-set validator applies every rule to every snapshot entry, so a
new rule only has to describe what is wrong. Whether the problem is a
regression is decided by the before/after diff, not here.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from themeplane.extraction.markup import (
    extract_css_classes,
    extract_liquid_classes,
    extract_translation_keys,
    iter_settings_accesses,
    schema_setting_ids,
    split_schema_block,
)
from themeplane.extraction.paths import is_liquid, is_stylesheet, is_template_json, section_path
from themeplane.extraction.references import (
    extract_asset_references,
    extract_snippet_references,
    iter_template_sections,
)
from themeplane.validation.models import Issue, IssueCategory, Severity
from themeplane.validation.snapshot import MergedEntry, MergedSnapshot, snapshot_locale_keys

DEPRECATED_INCLUDE_RE = re.compile(r"\{%-?\s*include\s+['\"]")
DEPRECATED_IMG_URL_RE = re.compile(r"\|\s*img_url\b")


@dataclass(frozen=True)
class SnapshotContext:
    """Lookups shared by every rule, computed once per snapshot."""

    file_set: frozenset[str]
    css_classes: frozenset[str]
    locale_keys: frozenset[str]

    @classmethod
    def from_snapshot(cls, snapshot: MergedSnapshot) -> SnapshotContext:
        return cls(
            file_set=frozenset(snapshot),
            css_classes=frozenset(stylesheet_classes(snapshot)),
            locale_keys=frozenset(snapshot_locale_keys(snapshot)),
        )


Rule = Callable[[str, MergedEntry, SnapshotContext], list[Issue]]


def stylesheet_classes(snapshot: MergedSnapshot) -> set[str]:
    """Every class selector declared by a stylesheet in the snapshot."""
    classes: set[str] = set()
    for path, entry in snapshot.items():
        if is_stylesheet(path, entry.kind):
            classes.update(extract_css_classes(entry.content))
    return classes


def check_snippet_references(path: str, entry: MergedEntry, ctx: SnapshotContext) -> list[Issue]:
    if not is_liquid(path, entry.kind):
        return []
    return [
        Issue(
            severity=Severity.ERROR,
            category=IssueCategory.SNIPPET_REFERENCE,
            file=path,
            description=f'Snippet reference "{target}" not found in project',
        )
        for target in extract_snippet_references(entry.content)
        if target not in ctx.file_set
    ]


def check_template_sections(path: str, entry: MergedEntry, ctx: SnapshotContext) -> list[Issue]:
    if not is_template_json(path):
        return []
    issues: list[Issue] = []
    for key, section_type in iter_template_sections(entry.content):
        target = section_path(section_type)
        if target not in ctx.file_set:
            issues.append(
                Issue(
                    severity=Severity.ERROR,
                    category=IssueCategory.TEMPLATE_SECTION,
                    file=path,
                    description=(
                        f'Template references section "{target}" (key "{key}") '
                        "which does not exist"
                    ),
                )
            )
    return issues


def check_asset_references(path: str, entry: MergedEntry, ctx: SnapshotContext) -> list[Issue]:
    if not is_liquid(path, entry.kind):
        return []
    return [
        Issue(
            severity=Severity.WARNING,
            category=IssueCategory.ASSET_REFERENCE,
            file=path,
            description=f'Asset "{target}" referenced but not found in project',
        )
        for target in extract_asset_references(entry.content)
        if target not in ctx.file_set
    ]


def check_schema_settings(path: str, entry: MergedEntry, ctx: SnapshotContext) -> list[Issue]:
    if not is_liquid(path, entry.kind):
        return []
    schema, markup, present = split_schema_block(entry.content)
    if not present or schema is None:
        return []
    declared = schema_setting_ids(schema)
    if not declared:
        return []

    issues: list[Issue] = []
    seen: set[tuple[str, str]] = set()
    for scope, setting in iter_settings_accesses(markup):
        if setting in declared or (scope, setting) in seen:
            continue
        seen.add((scope, setting))
        issues.append(
            Issue(
                severity=Severity.WARNING,
                category=IssueCategory.SCHEMA_SETTING,
                file=path,
                description=f"{scope}.settings.{setting} referenced but not defined in {{% schema %}}",
            )
        )
    return issues


def check_css_classes(path: str, entry: MergedEntry, ctx: SnapshotContext) -> list[Issue]:
    if not is_liquid(path, entry.kind) or not ctx.css_classes:
        return []
    return [
        Issue(
            severity=Severity.WARNING,
            category=IssueCategory.CSS_CLASS,
            file=path,
            description=(
                f'Class "{cls}" used in Liquid but not found in project CSS '
                "(may be from external styles)"
            ),
        )
        for cls in sorted(extract_liquid_classes(entry.content))
        if cls not in ctx.css_classes
    ]


def check_deprecated_constructs(
    path: str, entry: MergedEntry, ctx: SnapshotContext
) -> list[Issue]:
    if not path.endswith(".liquid"):
        return []
    issues: list[Issue] = []
    if DEPRECATED_INCLUDE_RE.search(entry.content):
        issues.append(
            Issue(
                severity=Severity.WARNING,
                category=IssueCategory.DEPRECATED_CONSTRUCT,
                file=path,
                description="Deprecated Liquid tag `{% include %}` detected",
                suggestion="Use `{% render %}` instead.",
            )
        )
    if DEPRECATED_IMG_URL_RE.search(entry.content):
        issues.append(
            Issue(
                severity=Severity.WARNING,
                category=IssueCategory.DEPRECATED_CONSTRUCT,
                file=path,
                description="Deprecated Liquid filter `img_url` detected",
                suggestion="Use `image_url` instead.",
            )
        )
    return issues


def check_locale_keys(path: str, entry: MergedEntry, ctx: SnapshotContext) -> list[Issue]:
    if not path.endswith(".liquid") or not ctx.locale_keys:
        return []
    issues: list[Issue] = []
    for key in dict.fromkeys(extract_translation_keys(entry.content)):
        if key not in ctx.locale_keys:
            issues.append(
                Issue(
                    severity=Severity.WARNING,
                    category=IssueCategory.LOCALE_KEY,
                    file=path,
                    description=f'Translation key "{key}" not found in locale files',
                )
            )
    return issues


SNAPSHOT_RULES: tuple[Rule, ...] = (
    check_snippet_references,
    check_template_sections,
    check_asset_references,
    check_schema_settings,
    check_css_classes,
    check_deprecated_constructs,
    check_locale_keys,
)


def run_snapshot_rules(
    snapshot: MergedSnapshot,
    rules: tuple[Rule, ...] = SNAPSHOT_RULES,
    ctx: SnapshotContext | None = None,
) -> list[Issue]:
    """Apply every rule to every entry, in snapshot order."""
    ctx = ctx or SnapshotContext.from_snapshot(snapshot)
    issues: list[Issue] = []
    for path, entry in snapshot.items():
        for rule in rules:
            issues.extend(rule(path, entry, ctx))
    return issues
