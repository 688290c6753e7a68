"""Shared fixtures for index tests."""

from __future__ import annotations

import pytest

from themeplane.index.engine import ContextEngine
from themeplane.index.models import FileRecord


@pytest.fixture
def small_theme() -> list[FileRecord]:
    """Layout rendering a header that renders two snippets."""
    return [
        FileRecord.from_path("layout/theme.liquid", "{% section 'header' %}{{ 'theme.css' | asset_url }}"),
        FileRecord.from_path("sections/header.liquid", "{% render 'logo' %}{% render 'cart-icon' %}"),
        FileRecord.from_path("snippets/logo.liquid", "<img>"),
        FileRecord.from_path("snippets/cart-icon.liquid", "<svg></svg>"),
        FileRecord.from_path("assets/cart.js", "export function open() {}"),
        FileRecord.from_path("assets/theme.css", ".logo { }"),
        FileRecord.from_path("templates/product.json", '{"sections": {"main": {"type": "main-product"}}}'),
    ]


@pytest.fixture
def engine(small_theme: list[FileRecord]) -> ContextEngine:
    """Engine over the small theme with topic boosting disabled."""
    eng = ContextEngine(use_topics=False)
    eng.index_files(small_theme)
    return eng
