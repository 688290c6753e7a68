"""Tests for the design-token checker."""

from __future__ import annotations

import pytest

from themeplane.index.models import FileRecord
from themeplane.validation.design_tokens import (
    DesignTokenChecker,
    StaticTokenSource,
    extract_custom_properties,
    find_color_literals,
    normalize_color,
)
from themeplane.validation.models import IssueCategory, ProposedChange, Severity


def _change(path: str, content: str) -> ProposedChange:
    return ProposedChange(path=path, original_content="", proposed_content=content)


@pytest.fixture
def checker() -> DesignTokenChecker:
    source = StaticTokenSource(
        {"shop": {"--color-brand": "#FF0000", "color-ink": "rgb(0, 0, 0)"}}
    )
    return DesignTokenChecker(source, "shop")


class TestNormalizeColor:
    def test_short_hex_expanded(self) -> None:
        assert normalize_color("#F00") == "#ff0000"

    def test_function_whitespace_removed(self) -> None:
        assert normalize_color("rgb(0, 0, 0)") == "rgb(0,0,0)"


class TestFindColorLiterals:
    @pytest.mark.parametrize("literal", ["#f00", "#f00a", "#ff0000", "#ff0000aa"])
    def test_valid_hex_lengths(self, literal: str) -> None:
        assert find_color_literals(f"color: {literal};") == [literal]

    @pytest.mark.parametrize("text", ["color: #12345;", "color: #1234567;", "color: #123456789;"])
    def test_invalid_hex_lengths(self, text: str) -> None:
        assert find_color_literals(text) == []

    def test_anchor_links_ignored(self) -> None:
        assert find_color_literals('<a href="#abc">Top</a> <a href=\'#fade\'>x</a>') == []

    def test_entities_ignored(self) -> None:
        assert find_color_literals("&#123; and &#x2014;") == []

    def test_function_colours(self) -> None:
        assert find_color_literals("a: rgba(0, 0, 0, .5); b: #000") == ["#000", "rgba(0, 0, 0, .5)"]


class TestDesignTokenChecker:
    """Hard-coded values that duplicate a token."""

    @pytest.mark.asyncio
    async def test_flags_hex_with_line_number(self, checker: DesignTokenChecker) -> None:
        issues = await checker.check_file(
            _change("assets/theme.css", ".a { }\n.b { color: #f00; }\n")
        )

        assert len(issues) == 1
        issue = issues[0]
        assert issue.severity is Severity.WARNING
        assert issue.category is IssueCategory.DESIGN_TOKEN
        assert issue.description.startswith("Line 2:")
        assert issue.suggestion == "Use var(--color-brand) instead."
        assert issue.source == "design-tokens"

    @pytest.mark.asyncio
    async def test_flags_rgb_in_liquid(self, checker: DesignTokenChecker) -> None:
        issues = await checker.check_file(
            _change("sections/a.liquid", '<p style="color: rgb(0,0,0)">x</p>')
        )
        assert [i.suggestion for i in issues] == ["Use var(--color-ink) instead."]

    @pytest.mark.asyncio
    async def test_token_declarations_skipped(self, checker: DesignTokenChecker) -> None:
        issues = await checker.check_file(_change("assets/theme.css", ":root {\n  --color-brand: #ff0000;\n}"))
        assert issues == []

    @pytest.mark.asyncio
    async def test_unrelated_values_ignored(self, checker: DesignTokenChecker) -> None:
        assert await checker.check_file(_change("assets/theme.css", ".a { color: #123456; }")) == []

    @pytest.mark.asyncio
    async def test_other_kinds_skipped(self, checker: DesignTokenChecker) -> None:
        assert await checker.check_file(_change("config/settings_data.json", '"#ff0000"')) == []

    @pytest.mark.asyncio
    async def test_unknown_project_has_no_tokens(self) -> None:
        checker = DesignTokenChecker(StaticTokenSource(), "nobody")
        assert await checker.check_file(_change("assets/a.css", ".a { color: #ff0000; }")) == []


class TestStaticTokenSource:
    def test_extract_custom_properties(self) -> None:
        css = ":root { --brand: #ff0000; --gap: 4px; --ink: rgb(1, 2, 3) }"
        assert extract_custom_properties(css) == {"brand": "#ff0000", "ink": "rgb(1, 2, 3)"}

    @pytest.mark.asyncio
    async def test_from_stylesheets(self) -> None:
        files = [
            FileRecord.from_path("assets/base.css", ":root { --brand: #00f; }"),
            FileRecord.from_path("sections/a.liquid", "--ignored: #fff;"),
        ]
        source = StaticTokenSource.from_stylesheets("p", files)
        assert await source.get_tokens("p") == {"brand": "#00f"}

    @pytest.mark.asyncio
    async def test_set_tokens(self) -> None:
        source = StaticTokenSource()
        source.set_tokens("p", {"a": "#000"})
        assert await source.get_tokens("p") == {"a": "#000"}
