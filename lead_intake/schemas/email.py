"""Strict schema for the Email Composer's model output."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

Level = Literal["high", "medium", "low"]


class EstimatedPerformance(BaseModel):
    """Heuristic targets the model predicts for itself, in percent. Not measured."""

    model_config = ConfigDict(frozen=True)

    open_rate: float = Field(..., ge=0, le=100)
    reply_rate: float = Field(..., ge=0, le=100)
    meeting_probability: float = Field(..., ge=0, le=100)

    @field_validator("open_rate", "reply_rate", "meeting_probability", mode="before")
    @classmethod
    def strip_percent(cls, v):
        # "45%" -> "45"
        if isinstance(v, str):
            return v.strip().rstrip("%").strip()
        return v


class ComposedEmail(BaseModel):
    """Sales email drafted for one lead, plus the model's own metadata."""

    model_config = ConfigDict(frozen=True)

    subject: str = Field(..., min_length=1)
    subject_variations: list[str] = Field(default_factory=list)
    body: str = Field(..., min_length=1)
    psychology_techniques: list[str] = Field(default_factory=list)
    emotional_adaptation: str = ""
    industry_template: str = ""
    confidence_level: Level
    estimated_performance: EstimatedPerformance
    personalization_depth: Level = "medium"
    natural_language_score: float = Field(..., ge=0, le=10)

    @field_validator("natural_language_score", mode="before")
    @classmethod
    def strip_out_of_ten(cls, v):
        # "8/10" -> "8"
        if isinstance(v, str):
            return v.split("/", 1)[0].strip()
        return v
