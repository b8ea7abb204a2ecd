# triage_intake/intake/schema.py
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

RISK_LEVELS = ("Routine", "Urgent", "Emergency")
CONFIDENCE_LEVELS = ("HIGH", "MEDIUM", "LOW")


class ClinicalSuggestion(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = None
    type: str = Field("test", description="'test' or 'medication'")
    name: str = ""
    ai_reason: str = Field("", alias="aiReason")
    status: str = "Pending"


class ClinicalNote(BaseModel):
    """Four-part (SOAP) note drafted for the reviewing clinician."""

    model_config = ConfigDict(extra="ignore")

    subjective: str = ""
    objective: str = ""
    assessment: str = ""
    plan: str = ""


class NarrativeSummary(BaseModel):
    """
    Structured output of the narrative summarizer.

    Every field has a default so a partial model response still parses.
    Values outside the allowed scales are dropped to the default rather
    than rejected.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    summary: str = ""
    risk_level: Optional[Literal["Routine", "Urgent", "Emergency"]] = Field(None, alias="riskLevel")
    confidence_level: Literal["HIGH", "MEDIUM", "LOW"] = Field("LOW", alias="confidenceLevel")
    suggestions: List[ClinicalSuggestion] = Field(default_factory=list)
    soap: ClinicalNote = Field(default_factory=ClinicalNote)
    risks: List[str] = Field(default_factory=list)
    condition: str = "Unknown"

    @field_validator("risk_level", mode="before")
    @classmethod
    def _known_risk_level(cls, value):
        return value if value in RISK_LEVELS else None

    @field_validator("confidence_level", mode="before")
    @classmethod
    def _known_confidence(cls, value):
        return value if value in CONFIDENCE_LEVELS else "LOW"

    @field_validator("suggestions", "risks", mode="before")
    @classmethod
    def _list_or_empty(cls, value):
        return value if isinstance(value, list) else []

    @field_validator("soap", mode="before")
    @classmethod
    def _note_or_empty(cls, value):
        return value if isinstance(value, dict) else {}

    @field_validator("summary", "condition", mode="before")
    @classmethod
    def _text(cls, value):
        return value if isinstance(value, str) else ""


class SummaryReport(BaseModel):
    """What the coordinator hands back: the narrative plus how it was produced."""

    visit_id: str
    narrative: NarrativeSummary
    triage_level: str
    deterministic_summary: str
    fallback_used: bool = False
    notice: Optional[str] = None
