"""
Strict schema for the Lead Analyzer's model output.

The model is told to follow this shape; we check it anyway.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Industry = Literal[
    "saas",
    "ecommerce",
    "fintech",
    "healthcare",
    "b2b_services",
    "manufacturing",
    "real_estate",
    "education",
    "marketing_agencies",
    "other",
]
Decision = Literal["good_fit", "ok_fit", "not_a_fit"]
EmotionalState = Literal["excited", "frustrated", "overwhelmed", "curious", "neutral"]
UrgencyLevel = Literal["high", "medium", "low"]
CompanyStage = Literal["startup", "growth", "enterprise", "unknown"]


class RecommendedService(BaseModel):
    model_config = ConfigDict(frozen=True)

    service: str = Field(..., min_length=1)
    description: str


class LeadAnalysis(BaseModel):
    """Fit classification and strategic signals for one lead."""

    model_config = ConfigDict(frozen=True)

    name: str
    language: Literal["English", "Arabic"]
    business_context: str | None = None
    industry: Industry
    decision: Decision
    confidence: int = Field(..., ge=1, le=10)
    justification: str
    emotional_state: EmotionalState
    urgency_level: UrgencyLevel
    company_stage: CompanyStage
    recommended_services: list[RecommendedService] = Field(default_factory=list)
