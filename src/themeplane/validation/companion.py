"""Companion-coverage contract for liquid edits.

Unlike the snapshot rules this looks at each change's own diff
(original vs. proposed) together with the shape of the whole batch:
markup that grows new classes, data hooks or settings must come with
the stylesheet, script or schema that backs them.
"""

from __future__ import annotations

from collections.abc import Sequence

from themeplane.config.constants import MAX_LISTED_IDENTIFIERS
from themeplane.extraction.markup import (
    extract_data_attributes,
    extract_liquid_classes,
    extract_settings_references,
    schema_setting_ids,
    split_schema_block,
)
from themeplane.extraction.paths import is_asset_script, is_asset_stylesheet
from themeplane.validation.models import Issue, IssueCategory, ProposedChange, Severity
from themeplane.validation.rules import SnapshotContext


def _listing(items: Sequence[str], *, quoted: bool = False) -> str:
    shown = items[:MAX_LISTED_IDENTIFIERS]
    return ", ".join(f'"{item}"' if quoted else item for item in shown)


def _added(before: set[str], after: set[str]) -> list[str]:
    return sorted(after - before)


def check_companion_coverage(
    changes: Sequence[ProposedChange], ctx: SnapshotContext
) -> list[Issue]:
    """Flag liquid changes whose new identifiers have no backing edit in the batch."""
    paths = [c.normalized_path for c in changes]
    has_css_change = any(is_asset_stylesheet(p) for p in paths)
    has_js_change = any(is_asset_script(p) for p in paths)

    issues: list[Issue] = []
    for change, path in zip(changes, paths):
        if not path.endswith(".liquid"):
            continue
        original = change.original_content or ""
        proposed = change.proposed_content or ""

        added_classes = _added(extract_liquid_classes(original), extract_liquid_classes(proposed))
        unstyled = [cls for cls in added_classes if cls not in ctx.css_classes]
        if unstyled and not has_css_change:
            issues.append(
                Issue(
                    severity=Severity.ERROR,
                    category=IssueCategory.COMPANION_STYLESHEET,
                    file=path,
                    description=(
                        "Liquid introduces new class(es) without companion CSS change: "
                        f"{_listing(unstyled, quoted=True)}"
                    ),
                    suggestion="Add the selectors to a stylesheet under assets/ in the same change set.",
                )
            )

        added_attrs = _added(extract_data_attributes(original), extract_data_attributes(proposed))
        if added_attrs and not has_js_change:
            issues.append(
                Issue(
                    severity=Severity.WARNING,
                    category=IssueCategory.COMPANION_SCRIPT,
                    file=path,
                    description=(
                        "Liquid introduces new data-attribute(s) without JS changes: "
                        f"{_listing(added_attrs)}"
                    ),
                )
            )

        if path.startswith("sections/"):
            added_refs = _added(
                extract_settings_references(original), extract_settings_references(proposed)
            )
            if added_refs:
                schema, _markup, _present = split_schema_block(proposed)
                declared = schema_setting_ids(schema)
                missing = [ref for ref in added_refs if ref not in declared]
                if missing:
                    issues.append(
                        Issue(
                            severity=Severity.ERROR,
                            category=IssueCategory.COMPANION_SCHEMA,
                            file=path,
                            description=(
                                "New section/block settings reference(s) missing from "
                                f"{{% schema %}}: {_listing(missing)}"
                            ),
                        )
                    )
    return issues
