"""Core module exports."""

from themeplane.core.errors import (
    ConfigError,
    ErrorCode,
    InputError,
    ThemePlaneError,
)
from themeplane.core.logging import (
    clear_request_id,
    configure_logging,
    get_logger,
    get_request_id,
    set_request_id,
)
from themeplane.core.tokens import TokenEstimator, estimate_tokens

__all__ = [
    # Errors
    "ConfigError",
    "ErrorCode",
    "InputError",
    "ThemePlaneError",
    # Logging
    "clear_request_id",
    "configure_logging",
    "get_logger",
    "get_request_id",
    "set_request_id",
    # Tokens
    "TokenEstimator",
    "estimate_tokens",
]
