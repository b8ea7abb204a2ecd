# triage_intake/api/schemas.py
from __future__ import annotations

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

from triage_intake.intake.catalog import AnswerKind, ComplaintType, Language
from triage_intake.intake.phases import IntakePhase
from triage_intake.intake.regions import BodyRegion, BodySide
from triage_intake.intake.schema import SummaryReport


class QuestionSchema(BaseModel):
    id: str
    text: str
    phase: IntakePhase
    kind: AnswerKind
    options: List[str] = Field(default_factory=list)
    red_flag: bool = False


class ProgressSchema(BaseModel):
    phase: IntakePhase
    phase_answered: int
    phase_total: int
    phase_progress: str
    total_answered: int
    minimum_required: int
    is_complete: bool


class EmergencySchema(BaseModel):
    action: str
    allow_continue: bool
    message: Dict[str, str] = Field(default_factory=dict)
    matched: List[str] = Field(default_factory=list)


class ValidationSchema(BaseModel):
    is_valid: bool
    error_code: Optional[str] = None
    suggestions: List[str] = Field(default_factory=list)
    error_message: str = ""
    help_text: str = ""


class StartIntakeRequest(BaseModel):
    complaint_type: ComplaintType
    patient_id: Optional[str] = None
    visit_id: Optional[str] = None
    language: Optional[Language] = None


class StartIntakeResponse(BaseModel):
    visit_id: str
    patient_id: str
    complaint_type: ComplaintType
    language: Language
    requires_body_map: bool
    first_question: Optional[QuestionSchema]
    progress: ProgressSchema


class BodyRegionRequest(BaseModel):
    region: BodyRegion
    side: Optional[BodySide] = None


class BodyRegionResponse(BaseModel):
    region: BodyRegion
    side: BodySide
    region_label: str
    added_questions: List[str]
    next_question: Optional[QuestionSchema]


class AnswerRequest(BaseModel):
    question_id: str
    answer: Union[str, List[str]]


class AnswerResponse(BaseModel):
    accepted: bool
    next_question: Optional[QuestionSchema]
    progress: ProgressSchema
    validation: Optional[ValidationSchema] = None
    emergency: Optional[EmergencySchema] = None
    is_complete: bool


class TriageResponse(BaseModel):
    level: str
    rank: int
    reasoning: str
    concerns: List[str]
    summary: str
    red_flags: List[str]
    emergency_detected: bool


class NarrativeResponse(SummaryReport):
    pass
