"""Theme path normalisation and file-kind inference.

Reference targets are always expressed as canonical theme-relative paths
(``snippets/x.liquid``, ``sections/y.liquid``, ``assets/z.css``) so that
every scanner, the index and the validator join on the same key.
"""

from __future__ import annotations

from enum import Enum


class FileKind(str, Enum):
    """Which extraction rules apply to a file."""

    LIQUID = "liquid"
    CSS = "css"
    JAVASCRIPT = "javascript"
    OTHER = "other"


_KIND_BY_SUFFIX: dict[str, FileKind] = {
    ".liquid": FileKind.LIQUID,
    ".css": FileKind.CSS,
    ".scss": FileKind.CSS,
    ".sass": FileKind.CSS,
    ".less": FileKind.CSS,
    ".js": FileKind.JAVASCRIPT,
    ".mjs": FileKind.JAVASCRIPT,
    ".ts": FileKind.JAVASCRIPT,
}

LIQUID_SUFFIX = ".liquid"
STYLESHEET_SUFFIXES = (".css", ".scss")
SCRIPT_SUFFIXES = (".js", ".mjs", ".ts")


def normalize_path(path: str) -> str:
    """Canonical slash-separated form: backslashes flipped, leading ./ or / removed."""
    normalized = str(path or "").replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized.lstrip("/")


def lookup_key(path: str) -> str:
    """Case-folded form used for comparisons only."""
    return normalize_path(path).lower()


def paths_match(indexed_path: str, reference: str) -> bool:
    """Exact or suffix match of a reference against an indexed path.

    ``foo/bar.ext`` matches ``foo/bar.ext`` and anything ending in
    ``/foo/bar.ext``, tolerating partial or relative reference strings.
    """
    indexed = lookup_key(indexed_path)
    ref = lookup_key(reference)
    if not ref:
        return False
    return indexed == ref or indexed.endswith("/" + ref)


def file_name(path: str) -> str:
    return normalize_path(path).rsplit("/", 1)[-1]


def infer_kind(path: str) -> FileKind:
    """Infer a file's kind from its extension."""
    name = file_name(path).lower()
    dot = name.rfind(".")
    if dot == -1:
        return FileKind.OTHER
    return _KIND_BY_SUFFIX.get(name[dot:], FileKind.OTHER)


def snippet_path(name: str) -> str:
    return f"snippets/{name}" if name.endswith(LIQUID_SUFFIX) else f"snippets/{name}{LIQUID_SUFFIX}"


def section_path(name: str) -> str:
    return f"sections/{name}" if name.endswith(LIQUID_SUFFIX) else f"sections/{name}{LIQUID_SUFFIX}"


def asset_path(name: str) -> str:
    return name if name.startswith("assets/") else f"assets/{name}"


def is_template_json(path: str) -> bool:
    """JSON templates (``templates/product.json``) declare the sections a page renders."""
    normalized = normalize_path(path)
    return "templates/" in normalized and normalized.endswith(".json")


def is_locale_json(path: str) -> bool:
    normalized = normalize_path(path)
    return normalized.startswith("locales/") and normalized.endswith(".json")


def is_stylesheet(path: str, kind: FileKind | None = None) -> bool:
    return kind is FileKind.CSS or normalize_path(path).lower().endswith(STYLESHEET_SUFFIXES)


def is_asset_stylesheet(path: str) -> bool:
    normalized = normalize_path(path).lower()
    return normalized.startswith("assets/") and normalized.endswith(STYLESHEET_SUFFIXES)


def is_asset_script(path: str) -> bool:
    normalized = normalize_path(path).lower()
    return normalized.startswith("assets/") and normalized.endswith(SCRIPT_SUFFIXES)


def is_liquid(path: str, kind: FileKind | None = None) -> bool:
    return kind is FileKind.LIQUID or normalize_path(path).endswith(LIQUID_SUFFIX)
