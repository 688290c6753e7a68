"""Tests for config/models.py."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from themeplane.config.constants import DEFAULT_MAX_TOKENS, MAX_TOKENS_CEILING
from themeplane.config.models import (
    ContextConfig,
    FilesConfig,
    LogOutputConfig,
    ThemePlaneConfig,
    ValidationConfig,
)


class TestDefaults:
    """Built-in defaults."""

    def test_root_config_has_all_sections(self) -> None:
        """Every section is populated without any input."""
        config = ThemePlaneConfig()
        assert config.context.max_tokens == DEFAULT_MAX_TOKENS
        assert config.context.fuzzy_top_n == 5
        assert config.context.use_topics is True
        assert config.validation.timeout_ms == 2000
        assert config.validation.min_async_timeout_ms == 100
        assert config.validation.cross_file is True
        assert config.validation.design_tokens is False
        assert config.cache.max_entries == 8
        assert config.cache.ttl_seconds is None

    def test_files_defaults_exclude_vcs_and_minified(self) -> None:
        """Loader skips VCS metadata and minified bundles by default."""
        files = FilesConfig()
        assert ".git" in files.excluded_dirs
        assert ".min.js" in files.excluded_suffixes


class TestContextConfig:
    """Context section validation."""

    @pytest.mark.parametrize("value", [0, -5, MAX_TOKENS_CEILING + 1])
    def test_rejects_out_of_range_budget(self, value: int) -> None:
        """Budgets outside 1..ceiling are rejected."""
        with pytest.raises(ValidationError):
            ContextConfig(max_tokens=value)

    def test_rejects_non_positive_top_n(self) -> None:
        """fuzzy_top_n must be at least one."""
        with pytest.raises(ValidationError):
            ContextConfig(fuzzy_top_n=0)


class TestValidationConfig:
    """Validation section."""

    def test_rejects_zero_timeout(self) -> None:
        with pytest.raises(ValidationError):
            ValidationConfig(timeout_ms=0)

    def test_accepts_custom_budget(self) -> None:
        assert ValidationConfig(timeout_ms=5000).timeout_ms == 5000


class TestLogOutputConfig:
    """Log output destination validation."""

    def test_console_destinations_pass_through(self) -> None:
        assert LogOutputConfig(destination="stdout").destination == "stdout"

    def test_relative_file_destination_rejected(self) -> None:
        """File destinations must be absolute."""
        with pytest.raises(ValidationError):
            LogOutputConfig(destination="logs/themeplane.log")
