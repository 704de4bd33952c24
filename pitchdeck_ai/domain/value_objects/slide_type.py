"""
Slide type value object.
"""

import re
from enum import Enum
from typing import Optional


class SlideType(str, Enum):
    """The twelve pitch deck slide kinds."""

    COVER = "cover"
    PROBLEM = "problem"
    SOLUTION = "solution"
    MARKET = "market"
    PRODUCT = "product"
    BUSINESS_MODEL = "business_model"
    GO_TO_MARKET = "go_to_market"
    COMPETITION = "competition"
    TEAM = "team"
    FINANCIALS = "financials"
    TRACTION = "traction"
    FUNDING_ASK = "funding_ask"

    @property
    def default_title(self) -> str:
        """Business rule: title used when the model output carries no Title label."""
        return _DEFAULT_TITLES[self]

    @classmethod
    def from_label(cls, label: Optional[str]) -> "SlideType":
        """
        Map a free-text label ("Business Model", "go-to-market") onto the enum.

        Unrecognized labels default to COVER.
        """
        if not label:
            return cls.COVER
        normalized = re.sub(r"[*_#\[\]()]", " ", label).strip().lower()
        normalized = re.sub(r"\s+", " ", normalized).rstrip(":.- ")
        return _LABELS.get(normalized, cls.COVER)

    @classmethod
    def infer_from_title(cls, title: str) -> "SlideType":
        """Best-effort type guess from a slide title's keywords."""
        lowered = title.lower()
        for keywords, slide_type in _TITLE_KEYWORDS:
            if any(keyword in lowered for keyword in keywords):
                return slide_type
        return cls.COVER


_DEFAULT_TITLES = {
    SlideType.COVER: "Company Overview",
    SlideType.PROBLEM: "The Problem We're Solving",
    SlideType.SOLUTION: "Our Solution",
    SlideType.MARKET: "Market Opportunity",
    SlideType.PRODUCT: "Product Overview",
    SlideType.BUSINESS_MODEL: "Business Model",
    SlideType.GO_TO_MARKET: "Go-to-Market Strategy",
    SlideType.COMPETITION: "Competitive Landscape",
    SlideType.TEAM: "Our Team",
    SlideType.FINANCIALS: "Financial Projections",
    SlideType.TRACTION: "Traction & Milestones",
    SlideType.FUNDING_ASK: "Funding Ask",
}

_LABELS = {
    "cover": SlideType.COVER,
    "cover slide": SlideType.COVER,
    "problem": SlideType.PROBLEM,
    "problem statement": SlideType.PROBLEM,
    "solution": SlideType.SOLUTION,
    "solution overview": SlideType.SOLUTION,
    "market": SlideType.MARKET,
    "market opportunity": SlideType.MARKET,
    "product": SlideType.PRODUCT,
    "business model": SlideType.BUSINESS_MODEL,
    "business_model": SlideType.BUSINESS_MODEL,
    "go-to-market": SlideType.GO_TO_MARKET,
    "go to market": SlideType.GO_TO_MARKET,
    "go_to_market": SlideType.GO_TO_MARKET,
    "competition": SlideType.COMPETITION,
    "team": SlideType.TEAM,
    "financials": SlideType.FINANCIALS,
    "traction": SlideType.TRACTION,
    "funding": SlideType.FUNDING_ASK,
    "funding ask": SlideType.FUNDING_ASK,
    "funding_ask": SlideType.FUNDING_ASK,
}

# First match wins: "go-to-market" before "market", the generic "overview" last.
_TITLE_KEYWORDS = (
    (("problem",), SlideType.PROBLEM),
    (("solution",), SlideType.SOLUTION),
    (("go-to-market", "marketing"), SlideType.GO_TO_MARKET),
    (("market",), SlideType.MARKET),
    (("product",), SlideType.PRODUCT),
    (("business", "model"), SlideType.BUSINESS_MODEL),
    (("competition", "competitive"), SlideType.COMPETITION),
    (("team",), SlideType.TEAM),
    (("financial", "revenue"), SlideType.FINANCIALS),
    (("traction", "milestone"), SlideType.TRACTION),
    (("funding", "investment"), SlideType.FUNDING_ASK),
    (("cover", "overview"), SlideType.COVER),
)
