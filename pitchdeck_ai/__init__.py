"""PitchDeck AI - multi-provider generation orchestration for pitch deck content."""

__version__ = "0.1.0"
