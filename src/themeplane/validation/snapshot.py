"""Merged snapshots: project files overlaid with a change batch.

A snapshot is ephemeral. The validator builds two per call (after and
before) and throws them away.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from themeplane.extraction.markup import collect_locale_keys
from themeplane.extraction.paths import FileKind, infer_kind, is_locale_json, normalize_path
from themeplane.index.models import FileRecord
from themeplane.validation.models import ProposedChange


@dataclass(frozen=True, slots=True)
class MergedEntry:
    content: str
    kind: FileKind


MergedSnapshot = dict[str, MergedEntry]


def build_merged_snapshot(
    changes: Sequence[ProposedChange],
    project_files: Iterable[FileRecord],
) -> MergedSnapshot:
    """Overlay each change's proposed content onto the project files.

    Changes are matched by path or file id. When two changes target the
    same path the last one wins. Changes to paths the project does not
    have yet add new entries with an inferred kind.
    """
    by_path: dict[str, ProposedChange] = {}
    by_id: dict[str, ProposedChange] = {}
    for change in changes:
        by_path[change.normalized_path] = change
        if change.file_id:
            by_id[change.file_id] = change

    snapshot: MergedSnapshot = {}
    for record in project_files:
        path = normalize_path(record.path)
        change = by_path.get(path) or by_id.get(record.file_id)
        content = change.proposed_content if change is not None else record.content
        snapshot[path] = MergedEntry(content=content, kind=record.kind)

    for path, change in by_path.items():
        if path not in snapshot:
            snapshot[path] = MergedEntry(content=change.proposed_content, kind=infer_kind(path))

    return snapshot


def revert_changes(changes: Sequence[ProposedChange]) -> list[ProposedChange]:
    """The same batch with every edit undone (proposed == original)."""
    return [
        ProposedChange(
            path=c.path,
            original_content=c.original_content,
            proposed_content=c.original_content,
            rationale=c.rationale,
            agent=c.agent,
            file_id=c.file_id,
        )
        for c in changes
    ]


def snapshot_locale_keys(snapshot: MergedSnapshot) -> set[str]:
    return collect_locale_keys(
        entry.content for path, entry in snapshot.items() if is_locale_json(path)
    )
