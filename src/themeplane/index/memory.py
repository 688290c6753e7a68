"""Developer memory: learned conventions, decisions and preferences.

Memories are supplied by the caller (usually loaded from storage at
session start). Active entries are rendered into one prompt block that
agents prepend to their system prompt; the context engine reserves its
tokens before admitting any file.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from themeplane.config.constants import DEFAULT_MEMORY_MIN_CONFIDENCE


class MemoryKind(str, Enum):
    CONVENTION = "convention"
    DECISION = "decision"
    PREFERENCE = "preference"


class MemoryFeedback(str, Enum):
    CORRECT = "correct"
    WRONG = "wrong"


@dataclass(frozen=True, slots=True)
class Convention:
    """A detected codebase convention, e.g. BEM class naming."""

    pattern: str
    confidence: float
    source: str = "custom"
    examples: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Decision:
    context: str
    choice: str
    reasoning: str


@dataclass(frozen=True, slots=True)
class Preference:
    preference: str
    category: str = "style"
    anti_pattern: str | None = None
    observation_count: int = 1


MemoryContent = Convention | Decision | Preference

_KIND_BY_CONTENT: dict[type, MemoryKind] = {
    Convention: MemoryKind.CONVENTION,
    Decision: MemoryKind.DECISION,
    Preference: MemoryKind.PREFERENCE,
}


@dataclass(frozen=True, slots=True)
class MemoryEntry:
    content: MemoryContent
    confidence: float
    feedback: MemoryFeedback | None = None
    memory_id: str = ""

    @property
    def kind(self) -> MemoryKind:
        return _KIND_BY_CONTENT[type(self.content)]


def filter_active_memories(
    entries: Iterable[MemoryEntry],
    min_confidence: float = DEFAULT_MEMORY_MIN_CONFIDENCE,
) -> list[MemoryEntry]:
    """Entries the developer has not rejected, at or above ``min_confidence``."""
    return [
        e
        for e in entries
        if e.feedback is not MemoryFeedback.WRONG and e.confidence >= min_confidence
    ]


def _memory_line(content: MemoryContent) -> str:
    if isinstance(content, Convention):
        return (
            f"- {content.pattern} "
            f"(confidence: {content.confidence * 100:.0f}%, source: {content.source})"
        )
    if isinstance(content, Decision):
        return f"- {content.choice}: {content.reasoning}"
    avoid = f" (avoid: {content.anti_pattern})" if content.anti_pattern else ""
    return f"- {content.preference}{avoid}"


_SECTION_TITLES = (
    (MemoryKind.CONVENTION, "Detected Conventions"),
    (MemoryKind.DECISION, "Past Decisions"),
    (MemoryKind.PREFERENCE, "User Preferences"),
)


def format_memory_prompt(entries: Iterable[MemoryEntry]) -> str:
    """Render entries grouped by kind. Empty string when there are none."""
    entries = list(entries)
    if not entries:
        return ""

    sections: list[str] = []
    for kind, title in _SECTION_TITLES:
        lines = [_memory_line(e.content) for e in entries if e.kind is kind]
        if lines:
            sections.append(f"## {title}\n" + "\n".join(lines))

    body = "\n\n".join(sections)
    return (
        "\n--- Developer Memory ---\n"
        "The following conventions, decisions, and preferences have been learned "
        "from this project. Follow them when generating code.\n\n"
        f"{body}\n--- End Developer Memory ---\n"
    )
