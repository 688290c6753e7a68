"""ThemePlane error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Input (theme directories, change files)

The analysis core (extraction, index, validation) never raises these;
malformed content degrades to "no references" and missing references
surface as issues. They are raised only at the edges: config loading,
the disk loader and the CLI.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Input (3xxx)
    INPUT_PARSE_ERROR = 3001
    INPUT_NOT_FOUND = 3002
    INPUT_INVALID_CHANGE = 3003


@dataclass(frozen=True, slots=True)
class ThemePlaneError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(ThemePlaneError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class InputError(ThemePlaneError):
    """Errors reading a theme directory or a change-set file."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "InputError":
        return cls(
            code=ErrorCode.INPUT_PARSE_ERROR,
            message=f"Failed to parse {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def not_found(cls, path: str) -> "InputError":
        return cls(
            code=ErrorCode.INPUT_NOT_FOUND,
            message=f"Path not found: {path}",
            details={"path": path},
        )

    @classmethod
    def invalid_change(cls, index: int, reason: str) -> "InputError":
        return cls(
            code=ErrorCode.INPUT_INVALID_CHANGE,
            message=f"Invalid change at position {index}: {reason}",
            details={"index": index, "reason": reason},
        )
