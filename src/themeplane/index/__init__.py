"""Index module - file index and token-budgeted context assembly."""

from themeplane.index.cache import EngineCache
from themeplane.index.engine import ContextEngine
from themeplane.index.memory import (
    Convention,
    Decision,
    MemoryEntry,
    MemoryFeedback,
    MemoryKind,
    Preference,
)
from themeplane.index.models import (
    ContextBudget,
    ContextResult,
    FileMetadata,
    FileRecord,
    TermMapping,
)
from themeplane.index.topics import THEME_TOPICS, ThemeTopic

__all__ = [
    "THEME_TOPICS",
    "ContextBudget",
    "ContextEngine",
    "ContextResult",
    "Convention",
    "Decision",
    "EngineCache",
    "FileMetadata",
    "FileRecord",
    "MemoryEntry",
    "MemoryFeedback",
    "MemoryKind",
    "Preference",
    "TermMapping",
    "ThemeTopic",
]
