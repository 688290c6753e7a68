"""Tests for the token estimator."""

from themeplane.core.tokens import CHARS_PER_TOKEN, estimate_tokens


class TestEstimateTokens:
    """Character-based token estimation."""

    def test_empty_text_is_zero(self) -> None:
        """Empty content costs nothing."""
        assert estimate_tokens("") == 0

    def test_rounds_up(self) -> None:
        """Partial tokens round up."""
        assert estimate_tokens("a") == 1
        assert estimate_tokens("a" * CHARS_PER_TOKEN) == 1
        assert estimate_tokens("a" * (CHARS_PER_TOKEN + 1)) == 2

    def test_monotonic_in_length(self) -> None:
        """Longer text never estimates fewer tokens."""
        sizes = [estimate_tokens("x" * n) for n in range(0, 50)]
        assert sizes == sorted(sizes)
