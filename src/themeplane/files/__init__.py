"""Files module - loading themes and change sets from disk."""

from themeplane.files.loader import load_changes, load_theme

__all__ = ["load_changes", "load_theme"]
