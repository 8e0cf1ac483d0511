"""
Intake schema for POST /api/process-lead.

Immutable once built; unknown fields are rejected.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from lead_intake.schemas.analysis import LeadAnalysis
from lead_intake.schemas.email import EstimatedPerformance

Language = Literal["English", "Arabic"]


class LeadSubmission(BaseModel):
    """A prospect captured from the external intake form."""

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    name: str = Field(..., min_length=1)
    email: EmailStr
    description: str = Field(..., min_length=1)
    phone: str | None = None
    business_type: str | None = None
    preferred_language: Language = "English"
    schedule_time: datetime | None = None


class ProcessLeadResponse(BaseModel):
    """Success body for POST /api/process-lead."""

    success: bool = True
    analysis: LeadAnalysis
    metrics: EstimatedPerformance | None = None
