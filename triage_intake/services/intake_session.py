# triage_intake/services/intake_session.py
from __future__ import annotations

import logging
import threading
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union

from triage_intake.intake.catalog import ComplaintType, Language, Question
from triage_intake.intake.emergency import (
    DEFAULT_EMERGENCY_NUMBER,
    EmergencyDirective,
    is_positive_red_flag,
    screen_safety_answer,
    screen_selected_options,
    screen_text,
)
from triage_intake.intake.engine import IntakeEngine, IntakeProgress, QuestionPrompt
from triage_intake.intake.errors import (
    IntakeClosedError,
    SessionExistsError,
    SessionNotFoundError,
)
from triage_intake.intake.regions import BodyRegion, BodySide
from triage_intake.intake.schema import SummaryReport
from triage_intake.intake.state import IntakeSession
from triage_intake.intake.summarizer import NarrativeSummarizer
from triage_intake.intake.triage import TriageOutcome, calculate_triage
from triage_intake.intake.validation import ValidationResult, error_message, help_text, validate

logger = logging.getLogger(__name__)

RawAnswer = Union[str, Sequence[str]]


@dataclass
class TurnResult:
    """Outcome of one submitted answer."""

    visit_id: str
    accepted: bool
    next_question: Optional[QuestionPrompt]
    progress: IntakeProgress
    validation: Optional[ValidationResult] = None
    emergency: Optional[EmergencyDirective] = None
    error_message: str = ""
    help_text: str = ""


@dataclass
class _ManagedSession:
    session: IntakeSession
    engine: IntakeEngine
    lock: threading.Lock = field(default_factory=threading.Lock)


class IntakeSessionService:
    """
    Service that coordinates:
      - the in-memory registry of open intake sessions
      - emergency screening of every utterance before it is validated
      - validation, then recording through the session's IntakeEngine
      - triage and the optional narrative summary

    Each session is single-writer: every mutation holds that session's lock.
    """

    def __init__(
        self,
        summarizer: Optional[NarrativeSummarizer] = None,
        emergency_number: str = DEFAULT_EMERGENCY_NUMBER,
        default_language: Language = Language.EN,
    ):
        self.summarizer = summarizer or NarrativeSummarizer()
        self.emergency_number = emergency_number
        self.default_language = Language(default_language)
        self._sessions: Dict[str, _ManagedSession] = {}
        self._registry_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def start_session(
        self,
        complaint_type: ComplaintType,
        patient_id: Optional[str] = None,
        visit_id: Optional[str] = None,
        language: Optional[Language] = None,
    ) -> Tuple[IntakeSession, Optional[QuestionPrompt]]:
        """
        Open a new intake.

        Returns:
          - the session
          - the first question to show the patient
        """
        session = IntakeSession(
            visit_id=visit_id or uuid.uuid4().hex,
            patient_id=patient_id or uuid.uuid4().hex,
            complaint_type=ComplaintType(complaint_type),
            language=Language(language) if language else self.default_language,
        )
        managed = _ManagedSession(session=session, engine=IntakeEngine(session))

        with self._registry_lock:
            if session.visit_id in self._sessions:
                raise SessionExistsError(session.visit_id)
            self._sessions[session.visit_id] = managed

        logger.info(
            "Visit %s: intake started (%s, %s)",
            session.visit_id,
            session.complaint_type.value,
            session.language.value,
        )
        with managed.lock:
            return session, managed.engine.get_next_question()

    def get_session(self, visit_id: str) -> IntakeSession:
        return self._get(visit_id).session

    def abandon_session(self, visit_id: str) -> None:
        with self._registry_lock:
            managed = self._sessions.pop(visit_id, None)
        if managed is None:
            raise SessionNotFoundError(visit_id)

        self.summarizer.cancel(visit_id)
        logger.info("Visit %s: intake abandoned", visit_id)

    # ------------------------------------------------------------------
    # Turns
    # ------------------------------------------------------------------

    def register_body_region(
        self,
        visit_id: str,
        region: BodyRegion,
        side: Optional[BodySide] = None,
    ) -> Tuple[List[Question], Optional[QuestionPrompt]]:
        with self._locked(visit_id) as managed:
            added = managed.engine.register_body_region(BodyRegion(region), BodySide(side) if side else None)
            return added, managed.engine.get_next_question()

    def next_question(self, visit_id: str) -> Optional[QuestionPrompt]:
        with self._locked(visit_id) as managed:
            return managed.engine.get_next_question()

    def submit_answer(self, visit_id: str, question_id: str, raw: RawAnswer) -> TurnResult:
        """
        Handle a single patient answer:
          - screen the raw text / selected options for emergencies
          - validate and normalize it
          - record it and flag positive red-flag answers
          - return the next question (or None if done)

        A failed validation leaves the session untouched and re-asks the
        same question.
        """
        with self._locked(visit_id) as managed:
            session, engine = managed.session, managed.engine
            if session.is_complete:
                raise IntakeClosedError(visit_id)

            directive = self._screen(raw)
            if directive.is_emergency:
                engine.escalate_emergency(directive.matched)
                return self._result(managed, accepted=False, emergency=directive)

            question = engine.question(question_id)
            language = session.language

            validation = validate(question.kind, raw, language)
            if not validation.is_valid:
                logger.info(
                    "Visit %s: answer to '%s' rejected (%s)",
                    visit_id,
                    question_id,
                    validation.error_code,
                )
                return self._result(
                    managed,
                    accepted=False,
                    validation=validation,
                    error_message=error_message(question.kind, language),
                    help_text=help_text(question.kind, language),
                )

            value = validation.sanitized_value
            flags = [question.id] if is_positive_red_flag(question, value) else []
            safety = screen_safety_answer(question, value, session.phase, self.emergency_number)
            engine.record_answer(question_id, value, red_flags=flags)
            if safety.is_emergency:
                engine.escalate_emergency(safety.matched)
                return self._result(managed, accepted=True, validation=validation, emergency=safety)

            return self._result(managed, accepted=True, validation=validation)

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    def get_progress(self, visit_id: str) -> IntakeProgress:
        with self._locked(visit_id) as managed:
            return managed.engine.get_progress()

    def get_triage(self, visit_id: str) -> TriageOutcome:
        with self._locked(visit_id) as managed:
            return calculate_triage(managed.session)

    async def generate_narrative(self, visit_id: str) -> SummaryReport:
        """
        Ask the summarizer for prose. Triage never waits on this; the
        report falls back to the deterministic summary on any failure.
        """
        with self._locked(visit_id) as managed:
            snapshot = managed.session.snapshot()
        return await self.summarizer.summarize(snapshot)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _get(self, visit_id: str) -> _ManagedSession:
        with self._registry_lock:
            managed = self._sessions.get(visit_id)
        if managed is None:
            raise SessionNotFoundError(visit_id)
        return managed

    @contextmanager
    def _locked(self, visit_id: str) -> Iterator[_ManagedSession]:
        managed = self._get(visit_id)
        with managed.lock:
            yield managed

    def _screen(self, raw: RawAnswer) -> EmergencyDirective:
        if isinstance(raw, str):
            return screen_text(raw, self.emergency_number)
        return screen_selected_options(raw, self.emergency_number)

    def _result(self, managed: _ManagedSession, accepted: bool, **kwargs) -> TurnResult:
        engine = managed.engine
        return TurnResult(
            visit_id=managed.session.visit_id,
            accepted=accepted,
            next_question=engine.get_next_question(),
            progress=engine.get_progress(),
            **kwargs,
        )
