"""Index models - file records, derived metadata and context bundles.

All models are plain dataclasses: the index never persists anything, it
is rebuilt from a caller-supplied snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from themeplane.extraction.paths import FileKind, file_name, infer_kind, normalize_path


@dataclass(frozen=True, slots=True)
class FileRecord:
    """One project file as supplied by the storage layer.

    ``path`` is the join key for reference resolution and is unique within
    a snapshot. ``content`` is never mutated; an edit produces a new record.
    """

    file_id: str
    path: str
    content: str
    kind: FileKind = FileKind.OTHER
    updated_at: float = 0.0

    @classmethod
    def from_path(
        cls,
        path: str,
        content: str,
        *,
        file_id: str | None = None,
        updated_at: float = 0.0,
    ) -> FileRecord:
        """Build a record whose kind is inferred from the extension."""
        normalized = normalize_path(path)
        return cls(
            file_id=file_id or normalized,
            path=normalized,
            content=content,
            kind=infer_kind(normalized),
            updated_at=updated_at,
        )

    @property
    def file_name(self) -> str:
        return file_name(self.path)


@dataclass(frozen=True, slots=True)
class FileMetadata:
    """Per-snapshot derived facts about one file."""

    file_id: str
    path: str
    kind: FileKind
    size_bytes: int
    token_estimate: int
    updated_at: float
    references: tuple[str, ...] = ()

    @property
    def file_name(self) -> str:
        return file_name(self.path)


@dataclass
class ContextBudget:
    """Token accounting for one context assembly. ``used_tokens`` only grows."""

    max_tokens: int
    used_tokens: int = 0

    @property
    def remaining_tokens(self) -> int:
        return max(0, self.max_tokens - self.used_tokens)

    def fits(self, tokens: int) -> bool:
        return self.used_tokens + tokens <= self.max_tokens

    def consume(self, tokens: int) -> None:
        if tokens > 0:
            self.used_tokens += tokens


@dataclass
class ContextResult:
    """Files admitted into a context bundle, in admission order."""

    files: list[FileRecord] = field(default_factory=list)
    budget: ContextBudget = field(default_factory=lambda: ContextBudget(max_tokens=0))
    excluded: list[str] = field(default_factory=list)
    memory_prompt: str = ""

    @property
    def file_ids(self) -> list[str]:
        return [f.file_id for f in self.files]

    @property
    def paths(self) -> list[str]:
        return [f.path for f in self.files]


@dataclass(frozen=True, slots=True)
class TermMapping:
    """A learned association between a query term and theme files."""

    term: str
    file_paths: tuple[str, ...]
    confidence: float = 1.0
