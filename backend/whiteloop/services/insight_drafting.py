"""Insight Drafting — pluggable seam that turns a transcript into insight fields.

Invariants:
    - Drafters never write to the database; SessionArtifactPipeline records
    - draft() always returns a non-empty theme and rationale

Design Decisions:
    - Protocol over ABC: an LLM-backed drafter can be dropped in without
      inheriting from anything here
    - HeuristicInsightDrafter is a placeholder: first characters of the
      transcript as theme, one opening quote as evidence, neutral sentiment
"""

from dataclasses import dataclass, field
from typing import Protocol

from whiteloop.config import get_settings
from whiteloop.core.domain_types import Sentiment

FALLBACK_THEME = "General sentiment"
HEURISTIC_RATIONALE = (
    "Initial automated heuristic. Replace with model-based extraction."
)


@dataclass
class InsightDraft:
    theme: str
    rationale: str
    evidence: dict | None = None
    sentiment: str | None = None
    tags: list[str] = field(default_factory=list)


class InsightDrafter(Protocol):
    def draft(self, raw_text: str) -> InsightDraft: ...


class HeuristicInsightDrafter:

    def __init__(self, theme_max_chars: int = 80, quote_max_chars: int = 160):
        self.theme_max_chars = theme_max_chars
        self.quote_max_chars = quote_max_chars

    def draft(self, raw_text: str) -> InsightDraft:
        text = raw_text or ""
        theme = text[: self.theme_max_chars].strip() or FALLBACK_THEME
        return InsightDraft(
            theme=theme,
            rationale=HEURISTIC_RATIONALE,
            evidence={"quotes": [text[: self.quote_max_chars]]} if text else None,
            sentiment=Sentiment.NEUTRAL.value,
        )


def get_insight_drafter() -> InsightDrafter:
    """FastAPI dependency — override in tests or to plug in another drafter."""
    settings = get_settings()
    return HeuristicInsightDrafter(
        theme_max_chars=settings.insight_theme_max_chars,
        quote_max_chars=settings.insight_quote_max_chars,
    )
