"""Tests for loading themes and change sets from disk.

Covers:
- Directory walking with exclusions and size limits
- Skipping non-UTF-8 files
- Change files in list and object form
- Error codes for malformed input
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from themeplane.config.models import FilesConfig, ThemePlaneConfig
from themeplane.core.errors import ErrorCode, InputError
from themeplane.extraction.paths import FileKind
from themeplane.files.loader import load_changes, load_theme
from themeplane.index.models import FileRecord


@pytest.fixture
def theme_dir(tmp_path: Path) -> Path:
    """Create a small on-disk theme."""
    for rel, content in {
        "sections/header.liquid": "<header>{% render 'logo' %}</header>",
        "snippets/logo.liquid": "<img class=\"logo\">",
        "assets/theme.css": ".logo { width: 4rem; }",
        "assets/vendor.min.js": "!function(){}",
        "templates/index.json": '{"sections": {}}',
        "node_modules/pkg/index.js": "module.exports = 1;",
    }.items():
        target = tmp_path / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    return tmp_path


class TestLoadTheme:
    """Tests for load_theme."""

    def test_loads_sorted_records(self, theme_dir: Path) -> None:
        """Records come back sorted, with path ids and inferred kinds."""
        records = load_theme(theme_dir)

        assert [r.path for r in records] == [
            "assets/theme.css",
            "sections/header.liquid",
            "snippets/logo.liquid",
            "templates/index.json",
        ]
        assert all(r.file_id == r.path for r in records)
        assert records[0].kind == FileKind.CSS
        assert records[1].kind == FileKind.LIQUID

    def test_records_modification_time(self, theme_dir: Path) -> None:
        records = load_theme(theme_dir)
        assert all(r.updated_at > 0 for r in records)

    def test_excluded_dirs_and_suffixes_skipped(self, theme_dir: Path) -> None:
        paths = {r.path for r in load_theme(theme_dir)}
        assert "assets/vendor.min.js" not in paths
        assert "node_modules/pkg/index.js" not in paths

    def test_custom_exclusions(self, theme_dir: Path) -> None:
        config = ThemePlaneConfig(files=FilesConfig(excluded_dirs=["templates"], excluded_suffixes=[]))
        paths = {r.path for r in load_theme(theme_dir, config)}
        assert "templates/index.json" not in paths
        assert "assets/vendor.min.js" in paths

    def test_oversized_files_skipped(self, theme_dir: Path) -> None:
        (theme_dir / "assets" / "big.css").write_text("a" * 3000, encoding="utf-8")
        config = ThemePlaneConfig(files=FilesConfig(max_file_size_kb=2))
        paths = {r.path for r in load_theme(theme_dir, config)}
        assert "assets/big.css" not in paths
        assert "assets/theme.css" in paths

    def test_binary_files_skipped(self, theme_dir: Path) -> None:
        (theme_dir / "assets" / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n\xff\xfe\x00")
        paths = {r.path for r in load_theme(theme_dir)}
        assert "assets/logo.png" not in paths

    def test_missing_root_raises(self, tmp_path: Path) -> None:
        with pytest.raises(InputError) as exc_info:
            load_theme(tmp_path / "nope")
        assert exc_info.value.code == ErrorCode.INPUT_NOT_FOUND


class TestLoadChanges:
    """Tests for load_changes."""

    def _write(self, tmp_path: Path, data: object) -> Path:
        path = tmp_path / "changes.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    def test_list_form(self, tmp_path: Path) -> None:
        path = self._write(
            tmp_path,
            [
                {
                    "path": "/snippets/new.liquid",
                    "proposed_content": "<p>new</p>",
                    "rationale": "add snippet",
                    "agent": "layout",
                }
            ],
        )
        (change,) = load_changes(path)

        assert change.path == "snippets/new.liquid"
        assert change.original_content == ""
        assert change.rationale == "add snippet"
        assert change.agent == "layout"
        assert change.file_id is None

    def test_object_form(self, tmp_path: Path) -> None:
        path = self._write(
            tmp_path,
            {"changes": [{"path": "a.css", "proposed_content": "", "file_id": 7}]},
        )
        (change,) = load_changes(path)
        assert change.file_id == "7"

    def test_original_taken_from_theme(self, tmp_path: Path) -> None:
        theme = [FileRecord.from_path("assets/theme.css", ".a {}")]
        path = self._write(tmp_path, [{"path": "assets/theme.css", "proposed_content": ".b {}"}])

        (change,) = load_changes(path, theme)

        assert change.original_content == ".a {}"

    def test_explicit_original_wins(self, tmp_path: Path) -> None:
        theme = [FileRecord.from_path("assets/theme.css", ".a {}")]
        path = self._write(
            tmp_path,
            [{"path": "assets/theme.css", "original_content": ".x {}", "proposed_content": ""}],
        )
        (change,) = load_changes(path, theme)
        assert change.original_content == ".x {}"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(InputError) as exc_info:
            load_changes(tmp_path / "missing.json")
        assert exc_info.value.code == ErrorCode.INPUT_NOT_FOUND

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "changes.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(InputError) as exc_info:
            load_changes(path)
        assert exc_info.value.code == ErrorCode.INPUT_PARSE_ERROR

    def test_wrong_top_level_shape(self, tmp_path: Path) -> None:
        with pytest.raises(InputError) as exc_info:
            load_changes(self._write(tmp_path, {"path": "a.css"}))
        assert exc_info.value.code == ErrorCode.INPUT_PARSE_ERROR

    @pytest.mark.parametrize(
        "entry",
        [
            "not-an-object",
            {"proposed_content": ""},
            {"path": "  ", "proposed_content": ""},
            {"path": "a.css"},
            {"path": "a.css", "proposed_content": "", "original_content": 3},
        ],
    )
    def test_malformed_change(self, tmp_path: Path, entry: object) -> None:
        with pytest.raises(InputError) as exc_info:
            load_changes(self._write(tmp_path, [entry]))
        assert exc_info.value.code == ErrorCode.INPUT_INVALID_CHANGE
        assert exc_info.value.details["index"] == 0
