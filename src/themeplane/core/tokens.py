"""Token estimation.

The analysis core never talks to a tokenizer. Budgets are computed with a
character heuristic that callers may replace by passing their own
``TokenEstimator`` to the context engine.
"""

from __future__ import annotations

import math
from collections.abc import Callable

TokenEstimator = Callable[[str], int]

CHARS_PER_TOKEN = 4


def estimate_tokens(text: str) -> int:
    """Approximate language-model token count (~4 characters per token)."""
    if not text:
        return 0
    return math.ceil(len(text) / CHARS_PER_TOKEN)
