"""
Request/response schemas for the generation API.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from typing_extensions import Literal

from pitchdeck_ai.application.cancellation import CancellationToken
from pitchdeck_ai.domain.entities import GenerationOptions, SlideContext
from pitchdeck_ai.domain.value_objects import CostTier, ProviderStatus, SlideType


# ---------- REQUESTS ----------
class GenerationOptionsIn(BaseModel):
    """Caller options shared by every generation request."""

    model: Optional[str] = Field(
        None, description="Model id, e.g. 'groq-llama-8b', 'llama3.1-8b' or 'gpt-4'"
    )
    temperature: Optional[float] = Field(None, ge=0.0, le=2.0)
    max_tokens: Optional[int] = Field(None, ge=1, le=32_000)
    user_api_key: Optional[str] = Field(
        None, description="Per-request key for the cloud backends"
    )

    def to_domain(self, cancel_token: Optional[CancellationToken] = None) -> GenerationOptions:
        return GenerationOptions(
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            user_api_key=self.user_api_key,
            cancel_token=cancel_token,
        )


class SlideGenerationRequest(BaseModel):
    slide_type: SlideType
    company_name: Optional[str] = None
    industry: Optional[str] = None
    target_market: Optional[str] = None
    user_feedback: Optional[str] = Field(None, max_length=5_000)
    user_preferences: Optional[Dict[str, Any]] = None
    previous_content: Optional[str] = None
    options: GenerationOptionsIn = Field(default_factory=GenerationOptionsIn)

    def to_context(self) -> SlideContext:
        return SlideContext(
            company_name=self.company_name,
            industry=self.industry,
            target_market=self.target_market,
            user_feedback=self.user_feedback,
            user_preferences=self.user_preferences,
            previous_content=self.previous_content,
        )


class DeckGenerationRequest(BaseModel):
    prompt: str = Field(..., min_length=1, max_length=10_000)
    preferences: Optional[Dict[str, Any]] = None
    options: GenerationOptionsIn = Field(default_factory=GenerationOptionsIn)


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=5_000)
    deck_context: Optional[Dict[str, Any]] = None
    slide_context: Optional[Dict[str, Any]] = None
    options: GenerationOptionsIn = Field(default_factory=GenerationOptionsIn)


class SpeakerNotesRequest(BaseModel):
    slide_title: str = Field(..., min_length=1)
    slide_type: SlideType
    slide_content: str = ""
    current_notes: str = ""
    improvement_type: Literal["clarity", "engagement", "structure", "detail"] = "clarity"
    options: GenerationOptionsIn = Field(default_factory=GenerationOptionsIn)


# ---------- RESPONSES ----------
class SlideOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    title: str
    content: str
    speaker_notes: Optional[str] = None


class DeckSlideOut(SlideOut):
    slide_order: int
    slide_type: SlideType


class GenerationResponse(BaseModel):
    """Successful orchestration outcome; failures are returned as HTTP 503."""

    success: bool = True
    provider: str
    model: str
    tokens_used: Optional[int] = None
    confidence: Optional[float] = Field(None, ge=0.0, le=1.0)


class SlideGenerationResponse(GenerationResponse):
    content: SlideOut


class DeckGenerationResponse(GenerationResponse):
    content: List[DeckSlideOut]


class ChatResponse(GenerationResponse):
    content: str


class SpeakerNotesResponse(GenerationResponse):
    content: str = Field(..., description="Improved speaker notes")
    original_notes: str
    improvement_type: str
    slide_title: str


class ProviderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    display_name: str
    supported_models: List[str]
    cost_tier: CostTier
    is_local: bool
    status: Optional[ProviderStatus] = None


class ProvidersResponse(BaseModel):
    providers: List[ProviderOut]
