"""Disk adapter - theme directories and change-set files.

The analysis core works on in-memory ``FileRecord``s. This module is the
one place that touches the filesystem, for the CLI and for callers that
keep their themes on disk.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import structlog

from themeplane.config.models import FilesConfig, ThemePlaneConfig
from themeplane.core.errors import InputError
from themeplane.extraction.paths import normalize_path
from themeplane.index.models import FileRecord
from themeplane.validation.models import ProposedChange

log = structlog.get_logger(__name__)


def _is_excluded(rel: Path, files: FilesConfig) -> bool:
    if any(part in files.excluded_dirs for part in rel.parts[:-1]):
        return True
    return rel.name.lower().endswith(tuple(files.excluded_suffixes))


def load_theme(root: Path | str, config: ThemePlaneConfig | None = None) -> list[FileRecord]:
    """Read every text file of a theme directory, sorted by path.

    File ids are the theme-relative paths. Oversized, excluded and
    non-UTF-8 files are skipped.

    Raises:
        InputError: If ``root`` is not a directory.
    """
    root = Path(root)
    if not root.is_dir():
        raise InputError.not_found(str(root))

    files_config = (config or ThemePlaneConfig()).files
    max_bytes = files_config.max_file_size_kb * 1024

    records: list[FileRecord] = []
    skipped = 0
    for item in sorted(root.rglob("*")):
        if not item.is_file():
            continue
        rel = item.relative_to(root)
        if _is_excluded(rel, files_config):
            continue
        try:
            stat = item.stat()
            if stat.st_size > max_bytes:
                skipped += 1
                continue
            content = item.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            skipped += 1
            continue
        records.append(
            FileRecord.from_path(rel.as_posix(), content, updated_at=stat.st_mtime)
        )

    records.sort(key=lambda r: r.path)
    log.debug("theme.loaded", root=str(root), files=len(records), skipped=skipped)
    return records


def _parse_change(index: int, raw: Any, originals: dict[str, str]) -> ProposedChange:
    if not isinstance(raw, dict):
        raise InputError.invalid_change(index, "expected an object")
    path = raw.get("path")
    proposed = raw.get("proposed_content")
    if not isinstance(path, str) or not path.strip():
        raise InputError.invalid_change(index, "missing 'path'")
    if not isinstance(proposed, str):
        raise InputError.invalid_change(index, "missing 'proposed_content'")

    original = raw.get("original_content")
    if original is None:
        original = originals.get(normalize_path(path), "")
    elif not isinstance(original, str):
        raise InputError.invalid_change(index, "'original_content' must be a string")

    file_id = raw.get("file_id")
    return ProposedChange(
        path=normalize_path(path),
        original_content=original,
        proposed_content=proposed,
        rationale=str(raw.get("rationale") or ""),
        agent=str(raw.get("agent") or ""),
        file_id=str(file_id) if file_id is not None else None,
    )


def load_changes(path: Path | str, theme_files: Iterable[FileRecord] = ()) -> list[ProposedChange]:
    """Read a change batch from JSON.

    The document is a list of ``{path, proposed_content, original_content?,
    rationale?, agent?, file_id?}`` objects, or an object with such a list
    under ``"changes"``. A missing ``original_content`` is taken from
    ``theme_files`` (empty for new files).

    Raises:
        InputError: If the file is missing, is not JSON, or holds a malformed change.
    """
    path = Path(path)
    if not path.is_file():
        raise InputError.not_found(str(path))
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise InputError.parse_error(str(path), str(e)) from e

    if isinstance(data, dict) and "changes" in data:
        data = data["changes"]
    if not isinstance(data, list):
        raise InputError.parse_error(str(path), "expected a list of changes")

    originals = {record.path: record.content for record in theme_files}
    return [_parse_change(i, raw, originals) for i, raw in enumerate(data)]
