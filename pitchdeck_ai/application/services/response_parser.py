"""
Label-based extraction of slide data from free-text model output.

Backends return prose that loosely follows the ``Title:`` / ``Content:`` /
``SLIDE n:`` conventions requested by the prompt templates. There is no fixed
schema, so extraction is forgiving: missing labels fall back to defaults, and
deck segments without a title or body are dropped.
"""

import re
from typing import List, Optional, Pattern, Sequence

from pitchdeck_ai.domain.entities import ParsedDeckSlide, ParsedSlide
from pitchdeck_ai.domain.exceptions import ResponseParseError
from pitchdeck_ai.domain.value_objects import SlideType


# Section labels that close a ``Content:`` block. Each must start a new line.
SECTION_LABELS: Sequence[str] = (
    "Speaker Notes",
    "Impact",
    "Benefits",
    "Growth",
    "Timing",
    "Differentiation",
    "Status",
    "Economics",
    "Validation",
    "Channels",
    "Partnerships",
    "Advantages",
    "Barriers",
    "Expertise",
    "Advisors",
    "Assumptions",
    "Profitability",
    "Customers",
    "Milestones",
    "Returns",
)

DECK_SEGMENT_DELIMITER = "---"

# The title may sit on the line after its label, but never on a following label.
_TITLE_RE = re.compile(
    r"\bTitle:[ \t]*\n?[ \t]*(?!(?:Content|Speaker Notes):)(\S[^\n]*)", re.IGNORECASE
)
_CONTENT_RE = re.compile(r"\bContent:[ \t]*", re.IGNORECASE)
_SPEAKER_NOTES_RE = re.compile(r"\bSpeaker Notes:[ \t]*", re.IGNORECASE)
_SLIDE_MARKER_RE = re.compile(r"SLIDE\s+\d+\s*:", re.IGNORECASE)
_NUMBERED_HEADING_RE = re.compile(r"^[ \t]*\d+\.[ \t]+(\S[^\n]*)$", re.MULTILINE)


def _stop_pattern(labels: Sequence[str]) -> Pattern[str]:
    alternatives = "|".join(re.escape(label) for label in labels)
    return re.compile(r"\n[ \t]*(?:%s):" % alternatives, re.IGNORECASE)


_CONTENT_STOP_RE = _stop_pattern(SECTION_LABELS)
_NOTES_STOP_RE = _stop_pattern([l for l in SECTION_LABELS if l != "Speaker Notes"])


def _extract_section(
    text: str, label_re: Pattern[str], stop_re: Pattern[str]
) -> Optional[str]:
    """Text after ``label_re`` up to the first ``stop_re`` hit, or None if unlabeled."""
    match = label_re.search(text)
    if not match:
        return None
    rest = text[match.end():]
    stop = stop_re.search(rest)
    body = rest[: stop.start()] if stop else rest
    return body.strip()


def _clean_heading(heading: str) -> str:
    return heading.strip().strip("*#").strip().rstrip(":").strip()


class ResponseParser:
    """Shared parser used by every backend adapter."""

    def parse_single(
        self, text: str, slide_type: SlideType, provider: Optional[str] = None
    ) -> ParsedSlide:
        """
        Extract ``{title, content, speaker_notes}`` from one slide response.

        Args:
            text: Raw model output
            slide_type: Slide kind, used for the default title
            provider: Backend name, only used in error messages

        Returns:
            ParsedSlide with non-empty title and content

        Raises:
            ResponseParseError: If the extracted title or content is empty
        """
        title_match = _TITLE_RE.search(text)
        title = title_match.group(1).strip() if title_match else ""
        if not title:
            title = SlideType(slide_type).default_title

        content = _extract_section(text, _CONTENT_RE, _CONTENT_STOP_RE)
        if content is None:
            content = text.strip()

        speaker_notes = _extract_section(text, _SPEAKER_NOTES_RE, _NOTES_STOP_RE)

        slide = ParsedSlide(
            title=title, content=content, speaker_notes=speaker_notes or None
        )
        if not slide.is_complete():
            raise ResponseParseError("extracted title or content is empty", provider)
        return slide

    def parse_deck(
        self, text: str, heuristic_fallback: bool = False
    ) -> List[ParsedDeckSlide]:
        """
        Segment a multi-slide response on ``SLIDE n:`` markers.

        Segments missing a title or content are dropped; ``slide_order`` is
        assigned to the surviving slides in input order, starting at 0.

        Args:
            text: Raw model output
            heuristic_fallback: When no marker is present, segment on numbered
                headings (``1. Problem``) instead of returning nothing

        Returns:
            Ordered list of slide skeletons, possibly empty
        """
        markers = list(_SLIDE_MARKER_RE.finditer(text))
        if not markers:
            return self._parse_numbered_sections(text) if heuristic_fallback else []

        slides: List[ParsedDeckSlide] = []
        for index, marker in enumerate(markers):
            end = markers[index + 1].start() if index + 1 < len(markers) else len(text)
            segment = text[marker.end():end]

            type_label = segment.split("\n", 1)[0]
            title_match = _TITLE_RE.search(segment)
            title = title_match.group(1).strip() if title_match else ""

            content_match = _CONTENT_RE.search(segment)
            content = ""
            if content_match:
                body = segment[content_match.end():]
                delimiter = body.find(DECK_SEGMENT_DELIMITER)
                content = (body[:delimiter] if delimiter >= 0 else body).strip()

            if not title or not content:
                continue

            slides.append(
                ParsedDeckSlide(
                    slide_order=len(slides),
                    slide_type=SlideType.from_label(type_label),
                    title=title,
                    content=content,
                )
            )
        return slides

    def _parse_numbered_sections(self, text: str) -> List[ParsedDeckSlide]:
        headings = list(_NUMBERED_HEADING_RE.finditer(text))
        slides: List[ParsedDeckSlide] = []
        for index, heading in enumerate(headings):
            end = headings[index + 1].start() if index + 1 < len(headings) else len(text)
            title = _clean_heading(heading.group(1))
            content = text[heading.end():end].strip()
            if content.endswith(DECK_SEGMENT_DELIMITER):
                content = content[: -len(DECK_SEGMENT_DELIMITER)].strip()
            if not title or not content:
                continue
            slides.append(
                ParsedDeckSlide(
                    slide_order=len(slides),
                    slide_type=SlideType.infer_from_title(title),
                    title=title,
                    content=content,
                )
            )
        return slides
