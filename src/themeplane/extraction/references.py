"""Cross-file reference scanners.

Each scanner is a small pure function over file content that returns
canonical target paths (see ``paths.py``). The template language is
scanned, never parsed: broken markup yields fewer references, not an
error.
"""

from __future__ import annotations

import re

from themeplane.extraction.markup import parse_json
from themeplane.extraction.paths import (
    FileKind,
    asset_path,
    is_template_json,
    section_path,
    snippet_path,
)

SNIPPET_DIRECTIVE_RE = re.compile(r"\{%-?\s*(?:render|include)\s+['\"]([^'\"]+)['\"]")
SECTION_DIRECTIVE_RE = re.compile(r"\{%-?\s*section\s+['\"]([^'\"]+)['\"]")
ASSET_URL_RE = re.compile(r"\{\{-?\s*['\"]([^'\"]+)['\"]\s*\|\s*asset_(?:img_)?url\b")
MENTIONED_PATH_RE = re.compile(
    r"\b(?:sections|snippets|assets|templates|layout|config|blocks|locales)/[\w.-]+"
)


def _dedupe(refs: list[str]) -> list[str]:
    return list(dict.fromkeys(refs))


def extract_snippet_references(content: str) -> list[str]:
    """``{% render 'x' %}`` / ``{% include 'x' %}`` -> ``snippets/x.liquid``."""
    return _dedupe([snippet_path(m.group(1)) for m in SNIPPET_DIRECTIVE_RE.finditer(content)])


def extract_section_references(content: str) -> list[str]:
    """``{% section 'x' %}`` -> ``sections/x.liquid``."""
    return _dedupe([section_path(m.group(1)) for m in SECTION_DIRECTIVE_RE.finditer(content)])


def extract_asset_references(content: str) -> list[str]:
    """``{{ 'x' | asset_url }}`` and ``asset_img_url`` -> ``assets/x``."""
    return _dedupe([asset_path(m.group(1)) for m in ASSET_URL_RE.finditer(content)])


def iter_template_sections(content: str) -> list[tuple[str, str]]:
    """(section key, declared type) pairs from a JSON template.

    Invalid JSON or an unexpected shape yields nothing.
    """
    data = parse_json(content)
    if not isinstance(data, dict):
        return []
    sections = data.get("sections")
    if not isinstance(sections, dict):
        return []

    pairs: list[tuple[str, str]] = []
    for key, section in sections.items():
        if not isinstance(section, dict):
            continue
        section_type = section.get("type")
        if isinstance(section_type, str) and section_type:
            pairs.append((str(key), section_type))
    return pairs


def extract_template_section_references(content: str) -> list[str]:
    """Section types declared by a JSON template -> ``sections/<type>.liquid``."""
    return _dedupe([section_path(t) for _key, t in iter_template_sections(content)])


def detect_references(kind: FileKind, path: str, content: str) -> list[str]:
    """All outgoing references of one file, deduplicated in order of appearance."""
    refs: list[str] = []
    if kind is FileKind.LIQUID:
        refs.extend(extract_snippet_references(content))
        refs.extend(extract_section_references(content))
        refs.extend(extract_asset_references(content))
    if is_template_json(path):
        refs.extend(extract_template_section_references(content))
    return _dedupe(refs)


def extract_mentions(text: str) -> list[str]:
    """File references in free text: explicit paths plus directive syntax.

    Used on chat messages, where paths tend to be followed by punctuation.
    """
    refs: list[str] = []
    for match in MENTIONED_PATH_RE.finditer(text):
        mention = match.group(0).rstrip(".")
        if "/" in mention and not mention.endswith("/"):
            refs.append(mention)
    refs.extend(extract_snippet_references(text))
    refs.extend(extract_asset_references(text))
    return _dedupe(refs)
