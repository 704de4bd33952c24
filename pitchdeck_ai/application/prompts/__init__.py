"""
Prompt templates for pitch deck generation.
"""

from .pitch_deck import PitchDeckPrompts, SLIDE_TEMPLATES, SYSTEM_PROMPT

__all__ = ["PitchDeckPrompts", "SLIDE_TEMPLATES", "SYSTEM_PROMPT"]
