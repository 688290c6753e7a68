"""Extraction module - pure scanners for cross-file references and markup facts."""

from themeplane.extraction.markup import (
    collect_locale_keys,
    extract_css_classes,
    extract_data_attributes,
    extract_liquid_classes,
    extract_settings_references,
    extract_translation_keys,
    flatten_locale_keys,
    parse_json,
    schema_setting_ids,
    split_schema_block,
)
from themeplane.extraction.paths import (
    FileKind,
    infer_kind,
    lookup_key,
    normalize_path,
    paths_match,
)
from themeplane.extraction.references import (
    detect_references,
    extract_asset_references,
    extract_mentions,
    extract_section_references,
    extract_snippet_references,
    extract_template_section_references,
)

__all__ = [
    "FileKind",
    "collect_locale_keys",
    "detect_references",
    "extract_asset_references",
    "extract_css_classes",
    "extract_data_attributes",
    "extract_liquid_classes",
    "extract_mentions",
    "extract_section_references",
    "extract_settings_references",
    "extract_snippet_references",
    "extract_template_section_references",
    "extract_translation_keys",
    "flatten_locale_keys",
    "infer_kind",
    "lookup_key",
    "normalize_path",
    "parse_json",
    "paths_match",
    "schema_setting_ids",
    "split_schema_block",
]
