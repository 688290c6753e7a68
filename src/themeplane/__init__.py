"""ThemePlane - cross-file context assembly and change-set validation for theme agents."""

__version__ = "0.1.0"
