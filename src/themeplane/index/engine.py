"""Context engine - file index, fuzzy lookup, dependency closure, budgeted assembly.

The engine holds one in-memory snapshot of a theme. ``index_files``
replaces it wholesale; every other method only reads it, so concurrent
queries against one snapshot are safe while a rebuild racing with reads
is not (callers serialise rebuild-vs-query per project).

Inclusion policy for context bundles, highest priority first:

1. priority files (active file, explicit mentions, topic files)
2. explicitly requested files
3. transitive dependencies of (1) and (2)

Admission is all-or-nothing per file. A file that does not fit is
recorded in ``excluded`` and the walk continues with the next one.
"""

from __future__ import annotations

import re
from collections import deque
from collections.abc import Iterable

import structlog

from themeplane.config.constants import (
    CURRENT_MESSAGE_FUZZY_TOP_N,
    DEFAULT_MEMORY_MIN_CONFIDENCE,
    DEFAULT_MAX_TOKENS,
    RECENT_MESSAGE_FUZZY_TOP_N,
)
from themeplane.core.tokens import TokenEstimator, estimate_tokens
from themeplane.extraction.paths import FileKind, lookup_key, normalize_path, paths_match
from themeplane.extraction.references import detect_references, extract_mentions
from themeplane.index.memory import (
    MemoryEntry,
    MemoryKind,
    filter_active_memories,
    format_memory_prompt,
)
from themeplane.index.models import (
    ContextBudget,
    ContextResult,
    FileMetadata,
    FileRecord,
    TermMapping,
)
from themeplane.index.topics import THEME_TOPICS, ThemeTopic, match_topics, topic_matches_path

log = structlog.get_logger(__name__)

# Scoring rubric for fuzzy_match
EXACT_MATCH_SCORE = 10
TERM_MAPPING_SCORE = 6
SEGMENT_MATCH_SCORE = 5
SUBSTRING_MATCH_SCORE = 3
KIND_HINT_SCORE = 3
RECENCY_SCORE = 1

_SEGMENT_SPLIT_RE = re.compile(r"[/\\\-_.\s]+")
_STUB_CONTENT_RE = re.compile(r"^\[\d+\s+chars")

STYLE_HINTS = frozenset(
    {"style", "styles", "css", "stylesheet", "color", "font", "layout", "theme"}
)
SCRIPT_HINTS = frozenset(
    {"script", "scripts", "js", "javascript", "function", "event", "click", "interactive"}
)


def to_segments(value: str) -> list[str]:
    """Lowercase segments split on ``/ \\ - _ .`` and whitespace, deduplicated."""
    return list(dict.fromkeys(s for s in _SEGMENT_SPLIT_RE.split(value.lower()) if s))


def is_stub_content(content: str) -> bool:
    """Un-hydrated placeholder content (``[1234 chars]``) from the storage layer."""
    return content.startswith("[") and _STUB_CONTENT_RE.match(content) is not None


def _dedupe(ids: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(ids))


class ContextEngine:
    """In-memory index over one theme snapshot."""

    def __init__(
        self,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        *,
        estimator: TokenEstimator = estimate_tokens,
        use_topics: bool = True,
        topics: tuple[ThemeTopic, ...] = THEME_TOPICS,
    ) -> None:
        self.max_tokens = max_tokens
        self._estimate = estimator
        self._use_topics = use_topics
        self._topics = topics

        self._index: dict[str, FileMetadata] = {}
        self._records: dict[str, FileRecord] = {}
        self._by_key: dict[str, str] = {}
        self._dep_cache: dict[tuple[str, ...], list[str]] = {}

        self._term_index: dict[str, list[str]] = {}
        self._memories: list[MemoryEntry] = []
        self._memory_min_confidence = DEFAULT_MEMORY_MIN_CONFIDENCE

    # -----------------------------------------------------------------
    # Indexing
    # -----------------------------------------------------------------

    def index_files(self, files: Iterable[FileRecord]) -> None:
        """Rebuild the index from scratch (full replace, not incremental)."""
        self._index.clear()
        self._records.clear()
        self._by_key.clear()
        self._dep_cache.clear()

        reference_count = 0
        for record in files:
            stub = is_stub_content(record.content)
            references = (
                () if stub else tuple(detect_references(record.kind, record.path, record.content))
            )
            reference_count += len(references)
            meta = FileMetadata(
                file_id=record.file_id,
                path=normalize_path(record.path),
                kind=record.kind,
                size_bytes=0 if stub else len(record.content.encode("utf-8")),
                token_estimate=self._estimate(record.content),
                updated_at=record.updated_at,
                references=references,
            )
            self._index[record.file_id] = meta
            self._records[record.file_id] = record
            self._by_key.setdefault(lookup_key(meta.path), record.file_id)

        log.debug("context.indexed", files=len(self._index), references=reference_count)

    def file_index(self) -> list[FileMetadata]:
        """Metadata for every indexed file, in index order."""
        return list(self._index.values())

    def get(self, file_id: str) -> FileMetadata | None:
        return self._index.get(file_id)

    def find_by_path(self, ref_path: str) -> FileMetadata | None:
        """Resolve a (possibly partial) path: exact match first, then suffix match."""
        key = lookup_key(ref_path)
        if not key:
            return None
        exact = self._by_key.get(key)
        if exact is not None:
            return self._index[exact]
        for meta in self._index.values():
            if paths_match(meta.path, key):
                return meta
        return None

    # -----------------------------------------------------------------
    # Learned term mappings
    # -----------------------------------------------------------------

    def load_term_mappings(self, mappings: Iterable[TermMapping]) -> None:
        """Replace the learned term -> file mappings used by fuzzy_match."""
        self._term_index.clear()
        for mapping in mappings:
            paths = self._term_index.setdefault(mapping.term.lower(), [])
            for path in mapping.file_paths:
                if path not in paths:
                    paths.append(path)

    @property
    def term_mapping_count(self) -> int:
        return len(self._term_index)

    # -----------------------------------------------------------------
    # Developer memory
    # -----------------------------------------------------------------

    def load_memories(
        self,
        entries: Iterable[MemoryEntry],
        min_confidence: float = DEFAULT_MEMORY_MIN_CONFIDENCE,
    ) -> None:
        """Replace the developer memories injected into every context bundle."""
        self._memories = list(entries)
        self._memory_min_confidence = min_confidence

    def active_memories(self, kind: MemoryKind | None = None) -> list[MemoryEntry]:
        active = filter_active_memories(self._memories, self._memory_min_confidence)
        if kind is None:
            return active
        return [e for e in active if e.kind is kind]

    def memory_prompt(self) -> str:
        """Prompt block for the active memories, or an empty string."""
        return format_memory_prompt(self.active_memories())

    # -----------------------------------------------------------------
    # Fuzzy matching
    # -----------------------------------------------------------------

    def fuzzy_match(self, query: str, top_n: int = 5) -> list[FileMetadata]:
        """Rank files against a natural-language query.

        Scoring (additive):
          - exact filename or full-path match     +10
          - theme topic pattern match             +8..10 per matched topic
          - learned term mapping                  +6 (once per file)
          - query segment equals a path segment   +5 each
          - query word (2+ chars) in filename     +3 each
          - style/script hint matching file kind  +3
          - the single most recently updated file +1

        Only files scoring above zero are returned. A file whose path or
        filename equals the query always comes first, whatever the other
        files collect from topic boosts; the rest are ordered by score
        descending and then by path.
        """
        query_key = lookup_key(query.strip())
        words = to_segments(query)
        topics = match_topics(query, self._topics) if self._use_topics else []
        wants_style = any(w in STYLE_HINTS for w in words)
        wants_script = any(w in SCRIPT_HINTS for w in words)
        newest_id = self._single_newest()

        scored: list[tuple[bool, int, str, FileMetadata]] = []
        for meta in self._index.values():
            score = 0
            name_lower = meta.file_name.lower()
            path_lower = lookup_key(meta.path)
            path_segments = set(to_segments(meta.path))

            is_exact = bool(query_key) and query_key in (name_lower, path_lower)
            if is_exact:
                score += EXACT_MATCH_SCORE

            for topic in topics:
                if topic_matches_path(topic, meta.path):
                    score += topic.boost

            if self._term_index and self._matches_term(words, meta.path):
                score += TERM_MAPPING_SCORE

            for word in words:
                if word in path_segments:
                    score += SEGMENT_MATCH_SCORE

            for word in words:
                if len(word) >= 2 and word in name_lower:
                    score += SUBSTRING_MATCH_SCORE

            if wants_style and meta.kind is FileKind.CSS:
                score += KIND_HINT_SCORE
            if wants_script and meta.kind is FileKind.JAVASCRIPT:
                score += KIND_HINT_SCORE

            if meta.file_id == newest_id:
                score += RECENCY_SCORE

            if score > 0:
                scored.append((is_exact, score, meta.path, meta))

        scored.sort(key=lambda item: (not item[0], -item[1], item[2]))
        return [meta for _exact, _score, _path, meta in scored[:top_n]]

    def _single_newest(self) -> str | None:
        """Id of the file with the strictly greatest timestamp, if exactly one exists.

        When several files share the newest timestamp none of them is
        returned, so no file gets the recency bonus (ties do not each get +1).
        """
        newest: FileMetadata | None = None
        tied = False
        for meta in self._index.values():
            if newest is None or meta.updated_at > newest.updated_at:
                newest, tied = meta, False
            elif meta.updated_at == newest.updated_at:
                tied = True
        if newest is None or tied or newest.updated_at <= 0:
            return None
        return newest.file_id

    def _matches_term(self, words: list[str], path: str) -> bool:
        for word in words:
            for mapped in self._term_index.get(word, ()):
                if paths_match(path, mapped):
                    return True
        return False

    # -----------------------------------------------------------------
    # Dependency resolution
    # -----------------------------------------------------------------

    def resolve_with_dependencies(self, file_ids: Iterable[str]) -> list[str]:
        """Breadth-first closure over outgoing references.

        Seeds come first in the given order, followed by discovered files in
        discovery order. References that do not resolve to an indexed file
        are dropped silently.
        """
        seeds = _dedupe(file_ids)
        cache_key = tuple(seeds)
        cached = self._dep_cache.get(cache_key)
        if cached is not None:
            return list(cached)

        resolved: list[str] = list(seeds)
        visited = set(seeds)
        queue: deque[str] = deque(seeds)

        while queue:
            current = self._index.get(queue.popleft())
            if current is None:
                continue
            for ref in current.references:
                target = self.find_by_path(ref)
                if target is not None and target.file_id not in visited:
                    visited.add(target.file_id)
                    resolved.append(target.file_id)
                    queue.append(target.file_id)

        self._dep_cache[cache_key] = resolved
        return list(resolved)

    # -----------------------------------------------------------------
    # Context assembly
    # -----------------------------------------------------------------

    def build_context(
        self,
        requested_ids: Iterable[str],
        priority_ids: Iterable[str] | None = None,
        token_budget: int | None = None,
    ) -> ContextResult:
        """Assemble a token-budgeted file set (priority > requested > dependencies).

        The developer memory prompt is reserved from the budget before any
        file is admitted. A prompt that alone exceeds the budget is left out.
        """
        priority = _dedupe(priority_ids or ())
        requested = _dedupe(requested_ids)
        explicit = _dedupe([*priority, *requested])
        explicit_set = set(explicit)

        dependencies = [
            fid for fid in self.resolve_with_dependencies(explicit) if fid not in explicit_set
        ]
        ordered = _dedupe([*priority, *requested, *dependencies])

        budget = ContextBudget(max_tokens=token_budget if token_budget is not None else self.max_tokens)
        result = ContextResult(budget=budget)

        memory_prompt = self.memory_prompt()
        if memory_prompt:
            memory_tokens = self._estimate(memory_prompt)
            if budget.fits(memory_tokens):
                budget.consume(memory_tokens)
                result.memory_prompt = memory_prompt
            else:
                log.warning(
                    "context.memory_dropped",
                    memory_tokens=memory_tokens,
                    max_tokens=budget.max_tokens,
                )

        for file_id in ordered:
            meta = self._index.get(file_id)
            record = self._records.get(file_id)
            if meta is None or record is None or not budget.fits(meta.token_estimate):
                result.excluded.append(file_id)
                continue
            budget.consume(meta.token_estimate)
            result.files.append(record)

        log.debug(
            "context.built",
            admitted=len(result.files),
            excluded=len(result.excluded),
            used_tokens=budget.used_tokens,
            max_tokens=budget.max_tokens,
            memory=bool(result.memory_prompt),
        )
        return result

    def select_relevant_files(
        self,
        message: str,
        recent_messages: Iterable[str] | None = None,
        active_file_path: str | None = None,
        budget: int | None = None,
    ) -> ContextResult:
        """Pick the context for one conversational turn.

        Priority: active file, explicit mentions, topic files, then their
        dependencies. Remaining budget goes to fuzzy matches of the current
        message and, after those, of prior turns.
        """
        active_id: str | None = None
        if active_file_path:
            active = self.find_by_path(active_file_path)
            active_id = active.file_id if active else None

        explicit_ids = _dedupe(
            meta.file_id
            for meta in (self.find_by_path(ref) for ref in extract_mentions(message))
            if meta is not None
        )
        topic_ids = self._resolve_topic_files(message) if self._use_topics else []

        core_ids = _dedupe([*([active_id] if active_id else []), *explicit_ids, *topic_ids])
        core_set = set(core_ids)
        dependency_ids = [
            fid for fid in self.resolve_with_dependencies(core_ids) if fid not in core_set
        ]
        priority_ids = _dedupe([*core_ids, *dependency_ids])
        priority_set = set(priority_ids)

        fuzzy_ids = [m.file_id for m in self.fuzzy_match(message, CURRENT_MESSAGE_FUZZY_TOP_N)]
        for previous in recent_messages or ():
            fuzzy_ids.extend(
                m.file_id for m in self.fuzzy_match(previous, RECENT_MESSAGE_FUZZY_TOP_N)
            )
        fuzzy_ids = [fid for fid in _dedupe(fuzzy_ids) if fid not in priority_set]

        return self.build_context(fuzzy_ids, priority_ids, budget)

    def _resolve_topic_files(self, message: str) -> list[str]:
        matched: list[str] = []
        for topic in match_topics(message, self._topics):
            for meta in self._index.values():
                if topic_matches_path(topic, meta.path):
                    matched.append(meta.file_id)
        return _dedupe(matched)
