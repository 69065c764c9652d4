"""Insight Drafting — verifies the heuristic drafter."""

from whiteloop.services.insight_drafting import (
    FALLBACK_THEME, HEURISTIC_RATIONALE, HeuristicInsightDrafter,
)


def test_theme_is_leading_text():
    draft = HeuristicInsightDrafter(theme_max_chars=10).draft("  Shipping costs were a surprise")
    assert draft.theme == "Shipping"
    assert draft.rationale == HEURISTIC_RATIONALE
    assert draft.sentiment == "neutral"


def test_quote_is_truncated():
    draft = HeuristicInsightDrafter(quote_max_chars=5).draft("abcdefgh")
    assert draft.evidence == {"quotes": ["abcde"]}


def test_empty_transcript_uses_fallback_theme():
    draft = HeuristicInsightDrafter().draft("")
    assert draft.theme == FALLBACK_THEME
    assert draft.evidence is None
    assert draft.tags == []
