"""
Heuristic confidence scoring for raw model output.
"""

import re
from dataclasses import dataclass
from typing import Optional

BULLET_MARKERS = ("•", "-")

_FIGURES_RE = re.compile(
    r"\d+%|\$[\d,]+|[\d,]+\s*(?:million|billion)", re.IGNORECASE
)


@dataclass(frozen=True)
class ConfidenceWeights:
    """Bonus values are tunable configuration, not calibrated constants."""

    length_threshold: int = 100
    length_bonus: float = 0.1
    bullet_bonus: float = 0.1
    figures_bonus: float = 0.2


class ConfidenceScorer:
    """
    Scores text in [0, 1] from a per-backend baseline plus quality bonuses.

    Not a calibrated probability: it only rewards length, list structure and
    concrete figures, which investors' slides tend to have.
    """

    def __init__(self, weights: Optional[ConfidenceWeights] = None) -> None:
        self.weights = weights or ConfidenceWeights()

    def score(self, text: str, baseline: float) -> float:
        w = self.weights
        confidence = baseline
        if len(text) > w.length_threshold:
            confidence += w.length_bonus
        if any(marker in text for marker in BULLET_MARKERS):
            confidence += w.bullet_bonus
        if _FIGURES_RE.search(text):
            confidence += w.figures_bonus
        return max(0.0, min(1.0, confidence))
