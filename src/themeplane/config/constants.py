"""Configuration constants.

This module contains truly constant values that should NOT be user-configurable.
For configurable values, see models.py (ContextConfig, ValidationConfig, etc.).
"""

# =============================================================================
# Context assembly
# =============================================================================

DEFAULT_MAX_TOKENS = 16_000
"""Default token budget for one specialist's context bundle."""

MAX_TOKENS_CEILING = 1_000_000
"""Hard cap on any configured token budget."""

CURRENT_MESSAGE_FUZZY_TOP_N = 10
"""Fuzzy matches taken from the current message in select_relevant_files."""

RECENT_MESSAGE_FUZZY_TOP_N = 5
"""Fuzzy matches taken from each prior conversation turn."""

DEFAULT_MEMORY_MIN_CONFIDENCE = 0.6
"""Developer memories below this confidence stay out of the memory prompt."""

# =============================================================================
# Validation
# =============================================================================

DEFAULT_VALIDATION_TIMEOUT_MS = 2_000
"""Default wall-clock budget for one unified validation call."""

MIN_ASYNC_TIMEOUT_MS = 100
"""Minimum race window granted to async checkers."""

MAX_LISTED_IDENTIFIERS = 5
"""Identifiers listed in one companion-coverage description before truncation."""
