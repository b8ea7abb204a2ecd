# triage_intake/api/routes.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from triage_intake.intake.engine import IntakeProgress, QuestionPrompt
from triage_intake.intake.errors import (
    BodyRegionAlreadySetError,
    DuplicateAnswerError,
    IntakeClosedError,
    IntakeError,
    SessionExistsError,
    SessionNotFoundError,
    SummaryInProgressError,
    UnknownQuestionError,
)
from triage_intake.intake.regions import region_label, requires_body_map
from triage_intake.services import IntakeSessionService
from .schemas import (
    AnswerRequest,
    AnswerResponse,
    BodyRegionRequest,
    BodyRegionResponse,
    EmergencySchema,
    NarrativeResponse,
    ProgressSchema,
    QuestionSchema,
    StartIntakeRequest,
    StartIntakeResponse,
    TriageResponse,
    ValidationSchema,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/intake", tags=["intake"])

_STATUS_FOR_ERROR = {
    SessionNotFoundError: 404,
    UnknownQuestionError: 400,
    DuplicateAnswerError: 409,
    IntakeClosedError: 409,
    BodyRegionAlreadySetError: 409,
    SessionExistsError: 409,
    SummaryInProgressError: 409,
}


def intake_error_handler(request: Request, exc: IntakeError) -> JSONResponse:
    status_code = _STATUS_FOR_ERROR.get(type(exc), 400)
    logger.info("%s %s -> %d: %s", request.method, request.url.path, status_code, exc)
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error": type(exc).__name__},
    )


def get_service(request: Request) -> IntakeSessionService:
    return request.app.state.intake_service


def _question(prompt: Optional[QuestionPrompt]) -> Optional[QuestionSchema]:
    if prompt is None:
        return None
    return QuestionSchema.model_validate(prompt, from_attributes=True)


def _progress(progress: IntakeProgress) -> ProgressSchema:
    return ProgressSchema.model_validate(progress, from_attributes=True)


@router.post("/start", response_model=StartIntakeResponse)
def start_intake(
    payload: StartIntakeRequest,
    service: IntakeSessionService = Depends(get_service),
) -> StartIntakeResponse:
    """
    Start a new intake session and return the first question.
    """
    session, first_question = service.start_session(
        complaint_type=payload.complaint_type,
        patient_id=payload.patient_id,
        visit_id=payload.visit_id,
        language=payload.language,
    )
    return StartIntakeResponse(
        visit_id=session.visit_id,
        patient_id=session.patient_id,
        complaint_type=session.complaint_type,
        language=session.language,
        requires_body_map=requires_body_map(session.complaint_type),
        first_question=_question(first_question),
        progress=_progress(service.get_progress(session.visit_id)),
    )


@router.post("/{visit_id}/body-region", response_model=BodyRegionResponse)
def register_body_region(
    visit_id: str,
    payload: BodyRegionRequest,
    service: IntakeSessionService = Depends(get_service),
) -> BodyRegionResponse:
    added, next_question = service.register_body_region(visit_id, payload.region, payload.side)
    session = service.get_session(visit_id)
    return BodyRegionResponse(
        region=session.body_region,
        side=session.body_side,
        region_label=region_label(session.body_region, session.language),
        added_questions=[question.id for question in added],
        next_question=_question(next_question),
    )


@router.post("/{visit_id}/answer", response_model=AnswerResponse)
def submit_answer(
    visit_id: str,
    payload: AnswerRequest,
    service: IntakeSessionService = Depends(get_service),
) -> AnswerResponse:
    result = service.submit_answer(visit_id, payload.question_id, payload.answer)

    validation = None
    if result.validation is not None:
        validation = ValidationSchema(
            is_valid=result.validation.is_valid,
            error_code=result.validation.error_code,
            suggestions=result.validation.suggestions,
            error_message=result.error_message,
            help_text=result.help_text,
        )

    emergency = None
    if result.emergency is not None:
        emergency = EmergencySchema(
            action=result.emergency.action.value,
            allow_continue=result.emergency.allow_continue,
            message=result.emergency.message,
            matched=result.emergency.matched,
        )

    return AnswerResponse(
        accepted=result.accepted,
        next_question=_question(result.next_question),
        progress=_progress(result.progress),
        validation=validation,
        emergency=emergency,
        is_complete=result.progress.is_complete,
    )


@router.get("/{visit_id}/progress", response_model=ProgressSchema)
def get_progress(
    visit_id: str,
    service: IntakeSessionService = Depends(get_service),
) -> ProgressSchema:
    return _progress(service.get_progress(visit_id))


@router.get("/{visit_id}/triage", response_model=TriageResponse)
def get_triage(
    visit_id: str,
    service: IntakeSessionService = Depends(get_service),
) -> TriageResponse:
    outcome = service.get_triage(visit_id)
    session = service.get_session(visit_id)
    return TriageResponse(
        level=outcome.level.value,
        rank=outcome.level.rank,
        reasoning=outcome.reasoning,
        concerns=outcome.concerns,
        summary=outcome.summary,
        red_flags=list(session.red_flags),
        emergency_detected=session.emergency_detected,
    )


@router.post("/{visit_id}/narrative", response_model=NarrativeResponse)
async def generate_narrative(
    visit_id: str,
    service: IntakeSessionService = Depends(get_service),
) -> NarrativeResponse:
    report = await service.generate_narrative(visit_id)
    return NarrativeResponse(**report.model_dump())


@router.delete("/{visit_id}", status_code=204)
def abandon_intake(
    visit_id: str,
    service: IntakeSessionService = Depends(get_service),
) -> None:
    service.abandon_session(visit_id)
