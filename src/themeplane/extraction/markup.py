"""Markup, stylesheet, schema and locale scanners used by the validator."""

from __future__ import annotations

import json
import re
from collections.abc import Iterable
from typing import Any

CLASS_ATTR_RE = re.compile(r"(?<![\w-])class\s*=\s*[\"']([^\"']+)[\"']")
CSS_CLASS_SELECTOR_RE = re.compile(r"\.([a-zA-Z_][a-zA-Z0-9_-]*)(?=\s*[:{\s,.>+~\[)])")
DATA_ATTR_RE = re.compile(r"\b(data-[a-zA-Z0-9_-]+)\b")
SETTINGS_ACCESS_RE = re.compile(r"\b(section|block)\.settings\.(\w+)")
SCHEMA_BLOCK_RE = re.compile(r"\{%-?\s*schema\s*-?%\}(.*?)\{%-?\s*endschema\s*-?%\}", re.DOTALL)
TRANSLATION_RE = re.compile(r"['\"]([a-zA-Z0-9_.-]+)['\"]\s*\|\s*t\b")
LEADING_BLOCK_COMMENT_RE = re.compile(r"\A\s*/\*.*?\*/", re.DOTALL)

_LIQUID_DELIMITERS = ("{{", "}}", "{%", "%}")


def parse_json(content: str) -> Any | None:
    """Parse theme JSON, tolerating the generated ``/* ... */`` header.

    Returns None for anything unparsable.
    """
    text = LEADING_BLOCK_COMMENT_RE.sub("", content or "", count=1)
    try:
        return json.loads(text)
    except (ValueError, TypeError):
        return None


def extract_liquid_classes(content: str) -> set[str]:
    """Literal class tokens from ``class="..."`` attributes.

    Tokens that are (part of) a Liquid expression are skipped: dynamic
    class names cannot be checked against stylesheets.
    """
    classes: set[str] = set()
    for match in CLASS_ATTR_RE.finditer(content):
        value = match.group(1)
        if any(d in value for d in _LIQUID_DELIMITERS):
            value = re.sub(r"\{\{.*?\}\}|\{%.*?%\}", " ", value)
            if any(d in value for d in _LIQUID_DELIMITERS):
                continue
        for token in value.split():
            if token:
                classes.add(token)
    return classes


def extract_css_classes(content: str) -> set[str]:
    """Class selectors declared in a stylesheet (``.btn``, ``.btn-primary``)."""
    return {m.group(1) for m in CSS_CLASS_SELECTOR_RE.finditer(content)}


def extract_data_attributes(content: str) -> set[str]:
    return {m.group(1) for m in DATA_ATTR_RE.finditer(content)}


def iter_settings_accesses(content: str) -> list[tuple[str, str]]:
    """(scope, setting id) for every ``section.settings.X`` / ``block.settings.X``."""
    return [(m.group(1), m.group(2)) for m in SETTINGS_ACCESS_RE.finditer(content)]


def extract_settings_references(content: str) -> set[str]:
    return {setting for _scope, setting in iter_settings_accesses(content)}


def split_schema_block(content: str) -> tuple[Any | None, str, bool]:
    """Separate the embedded ``{% schema %}`` block from the markup.

    Returns (parsed schema or None, markup without the block, block present).
    """
    match = SCHEMA_BLOCK_RE.search(content)
    if match is None:
        return None, content, False
    markup = content[: match.start()] + content[match.end() :]
    try:
        schema = json.loads(match.group(1).strip())
    except (ValueError, TypeError):
        schema = None
    return schema, markup, True


def schema_setting_ids(schema: Any) -> set[str]:
    """Setting ids declared at the top level and per block of a section schema."""
    ids: set[str] = set()
    if not isinstance(schema, dict):
        return ids

    def _collect(settings: Any) -> None:
        if not isinstance(settings, list):
            return
        for item in settings:
            if isinstance(item, dict) and isinstance(item.get("id"), str):
                ids.add(item["id"])

    _collect(schema.get("settings"))
    blocks = schema.get("blocks")
    if isinstance(blocks, list):
        for block in blocks:
            if isinstance(block, dict):
                _collect(block.get("settings"))
    return ids


def flatten_locale_keys(data: Any, prefix: str = "") -> list[str]:
    """Dot-joined leaf keys of a nested locale mapping."""
    if not isinstance(data, dict):
        return []
    keys: list[str] = []
    for key, value in data.items():
        current = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict):
            keys.extend(flatten_locale_keys(value, current))
        else:
            keys.append(current)
    return keys


def collect_locale_keys(contents: Iterable[str]) -> set[str]:
    """Union of the keys of every parsable locale file."""
    keys: set[str] = set()
    for content in contents:
        keys.update(flatten_locale_keys(parse_json(content)))
    return keys


def extract_translation_keys(content: str) -> list[str]:
    """Keys passed through the translation filter (``'x.y' | t``), in order."""
    return [m.group(1) for m in TRANSLATION_RE.finditer(content)]
