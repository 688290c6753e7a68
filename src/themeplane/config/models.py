"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (THEMEPLANE__SECTION__KEY)
3. Repo YAML (<theme>/.themeplane/config.yaml)
4. Global YAML (~/.config/themeplane/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    THEMEPLANE__<SECTION>__<KEY>=<VALUE>

Examples:
    THEMEPLANE__LOGGING__LEVEL=DEBUG
    THEMEPLANE__CONTEXT__MAX_TOKENS=32000
    THEMEPLANE__VALIDATION__TIMEOUT_MS=5000
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from themeplane.config.constants import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_VALIDATION_TIMEOUT_MS,
    MAX_TOKENS_CEILING,
    MIN_ASYNC_TIMEOUT_MS,
)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        THEMEPLANE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every rule pass and is verbose.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ContextConfig(BaseModel):
    """Context assembly configuration.

    Env vars:
        THEMEPLANE__CONTEXT__MAX_TOKENS: Default token budget per context bundle
        THEMEPLANE__CONTEXT__FUZZY_TOP_N: Default number of fuzzy matches
        THEMEPLANE__CONTEXT__USE_TOPICS: Enable theme topic boosting and topic file selection
    """

    max_tokens: int = Field(
        default=DEFAULT_MAX_TOKENS,
        description="Default token budget for a context bundle. "
        "TRADEOFF: Larger budgets give agents more files but cost more per call.",
    )
    fuzzy_top_n: int = Field(
        default=5,
        description="Default number of results returned by fuzzy file search.",
    )
    use_topics: bool = Field(
        default=True,
        description="Boost files matching theme topics (product, cart, header...) "
        "mentioned in a query.",
    )

    @field_validator("max_tokens")
    @classmethod
    def validate_max_tokens(cls, v: int) -> int:
        if not (0 < v <= MAX_TOKENS_CEILING):
            raise ValueError(f"max_tokens must be 1-{MAX_TOKENS_CEILING}, got {v}")
        return v

    @field_validator("fuzzy_top_n")
    @classmethod
    def validate_top_n(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"fuzzy_top_n must be positive, got {v}")
        return v


class ValidationConfig(BaseModel):
    """Change-set validation configuration.

    Env vars:
        THEMEPLANE__VALIDATION__TIMEOUT_MS: Total wall-clock budget for one validation call
        THEMEPLANE__VALIDATION__CROSS_FILE: Run the cross-file heuristic checker
        THEMEPLANE__VALIDATION__DESIGN_TOKENS: Run the design-token checker
    """

    timeout_ms: int = Field(
        default=DEFAULT_VALIDATION_TIMEOUT_MS,
        description="Total budget for one validation call. Checkers that would start "
        "after the budget is spent are skipped and reported in 'skipped'.",
    )
    min_async_timeout_ms: int = Field(
        default=MIN_ASYNC_TIMEOUT_MS,
        description="Minimum time granted to async checkers, even when the "
        "synchronous checks used most of the budget.",
    )
    cross_file: bool = Field(
        default=True,
        description="Run the cross-file heuristic checker after the change-set validator.",
    )
    design_tokens: bool = Field(
        default=False,
        description="Run the design-token checker. Requires a token source.",
    )

    @field_validator("timeout_ms", "min_async_timeout_ms")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"Timeout must be positive, got {v}")
        return v


class CacheConfig(BaseModel):
    """Per-project engine cache configuration.

    Env vars:
        THEMEPLANE__CACHE__MAX_ENTRIES: Max cached project engines
        THEMEPLANE__CACHE__TTL_SECONDS: Drop cached engines older than this
    """

    max_entries: int = Field(
        default=8,
        description="Max project engines kept in memory (LRU eviction).",
    )
    ttl_seconds: float | None = Field(
        default=None,
        description="Expire cached engines after this many seconds. None keeps them "
        "until evicted or invalidated.",
    )


class FilesConfig(BaseModel):
    """Theme directory loading configuration.

    Env vars:
        THEMEPLANE__FILES__MAX_FILE_SIZE_KB: Skip files larger than this
    """

    max_file_size_kb: int = Field(
        default=512,
        description="Skip files larger than this (KB). Vendor bundles rarely help agents.",
    )
    excluded_dirs: list[str] = Field(
        default_factory=lambda: [".git", ".themeplane", "node_modules", ".shopify"],
        description="Directory names never traversed when loading a theme.",
    )
    excluded_suffixes: list[str] = Field(
        default_factory=lambda: [".min.js", ".min.css", ".map"],
        description="File suffixes skipped when loading a theme.",
    )


class ThemePlaneConfig(BaseModel):
    """Root configuration for ThemePlane.

    All settings can be configured via:
    1. Environment variables: THEMEPLANE__SECTION__KEY
    2. YAML config files (repo or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    context: ContextConfig = Field(default_factory=ContextConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    files: FilesConfig = Field(default_factory=FilesConfig)
