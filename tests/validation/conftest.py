"""Shared helpers for validation tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from themeplane.index.models import FileRecord
from themeplane.validation.models import ProposedChange


@pytest.fixture
def edit(theme_files: list[FileRecord]) -> Callable[..., ProposedChange]:
    """Build a change whose original content is taken from the theme."""
    by_path = {f.path: f.content for f in theme_files}

    def _edit(path: str, proposed: str | None = None, *, append: str = "") -> ProposedChange:
        original = by_path.get(path, "")
        return ProposedChange(
            path=path,
            original_content=original,
            proposed_content=(proposed if proposed is not None else original) + append,
        )

    return _edit
