"""Config module exports."""

from themeplane.config.loader import load_config
from themeplane.config.models import (
    CacheConfig,
    ContextConfig,
    FilesConfig,
    LoggingConfig,
    ThemePlaneConfig,
    ValidationConfig,
)

__all__ = [
    "load_config",
    "CacheConfig",
    "ContextConfig",
    "FilesConfig",
    "LoggingConfig",
    "ThemePlaneConfig",
    "ValidationConfig",
]
