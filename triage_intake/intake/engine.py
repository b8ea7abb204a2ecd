# triage_intake/intake/engine.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional

from triage_intake.intake.catalog import (
    AnswerKind,
    IntakeTree,
    Question,
    get_question,
    tree_for,
)
from triage_intake.intake.errors import (
    BodyRegionAlreadySetError,
    DuplicateAnswerError,
    IntakeClosedError,
    UnknownQuestionError,
)
from triage_intake.intake.phases import PHASE_ORDER, IntakePhase, next_phase
from triage_intake.intake.regions import BodyRegion, BodySide, refine_questions, side_for_region
from triage_intake.intake.state import IntakeSession

logger = logging.getLogger(__name__)


@dataclass
class QuestionPrompt:
    id: str
    text: str
    phase: IntakePhase
    kind: AnswerKind
    options: List[str] = field(default_factory=list)
    red_flag: bool = False


@dataclass
class IntakeProgress:
    phase: IntakePhase
    phase_answered: int
    phase_total: int
    phase_progress: str
    total_answered: int
    minimum_required: int
    is_complete: bool


class IntakeEngine:
    """
    IntakeEngine walks one session through its phases.

    Phases:
      - SAFETY: the complaint's red-flag screen, every question answered
      - DIAGNOSTIC: characterization and associated symptoms, closes once
        `minimum_required` answers exist overall or the list runs out
      - HISTORY: history, risk factors, exposures, then region refinements
      - COMPLETE: terminal, the session no longer changes

    One engine per session. The engine does not validate or screen
    answers; callers do that before `record_answer`.
    """

    def __init__(self, session: IntakeSession):
        self.session = session
        self.tree: IntakeTree = tree_for(session.complaint_type)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get_next_question(self) -> Optional[QuestionPrompt]:
        self._advance()
        if self.session.is_complete:
            return None

        for question_id in self.phase_question_ids(self.session.phase):
            if question_id not in self.session.answers:
                return self._prompt(self.question(question_id))
        return None

    def record_answer(self, question_id: str, value: Any, red_flags: Iterable[str] = ()) -> None:
        """
        Store a validated answer and advance the phase. Red flags raised by
        this answer are added only once the answer itself is accepted.
        """
        session = self.session
        if session.is_complete:
            raise IntakeClosedError(session.visit_id)

        self.question(question_id)
        if question_id in session.answers:
            raise DuplicateAnswerError(question_id)

        session.answers[question_id] = value
        if question_id not in session.asked:
            session.asked.append(question_id)
        session.touch()
        self._add_red_flags(red_flags)
        logger.info(
            "Visit %s: recorded '%s' (%d answered, phase %s)",
            session.visit_id,
            question_id,
            len(session.answers),
            session.phase.value,
        )

        self._advance()

    def get_progress(self) -> IntakeProgress:
        session = self.session
        phase_ids = self.phase_question_ids(session.phase)
        answered = sum(1 for question_id in phase_ids if question_id in session.answers)
        return IntakeProgress(
            phase=session.phase,
            phase_answered=answered,
            phase_total=len(phase_ids),
            phase_progress=f"{answered}/{len(phase_ids)}",
            total_answered=len(session.answers),
            minimum_required=self.tree.minimum_required,
            is_complete=session.is_complete,
        )

    def register_body_region(self, region: BodyRegion, side: Optional[BodySide] = None) -> List[Question]:
        """
        Set the body location once and merge the region's follow-up
        questions into the history phase. Returns the questions added.
        """
        session = self.session
        if session.is_complete:
            raise IntakeClosedError(session.visit_id)
        if session.body_region is not None:
            raise BodyRegionAlreadySetError(session.visit_id)

        side = side or side_for_region(region)
        known = set(self.tree.all_ids())
        added = [
            question
            for question in refine_questions(session.complaint_type, region, side)
            if question.id not in known
        ]

        session.body_region = region
        session.body_side = side
        session.refinements = added
        session.touch()
        logger.info(
            "Visit %s: body region %s/%s registered, %d refinement question(s)",
            session.visit_id,
            region.value,
            side.value,
            len(added),
        )
        return added

    def flag_red_flags(self, flags: Iterable[str]) -> List[str]:
        if self.session.is_complete:
            raise IntakeClosedError(self.session.visit_id)
        return self._add_red_flags(flags)

    def escalate_emergency(self, flags: Iterable[str]) -> None:
        """Record the flags and force the session to its terminal emergency state."""
        self.flag_red_flags(flags)
        session = self.session
        session.emergency_detected = True
        session.phase = IntakePhase.COMPLETE
        session.touch()
        logger.warning("Visit %s: intake stopped for emergency", session.visit_id)

    # ------------------------------------------------------------------
    # Question lookup
    # ------------------------------------------------------------------

    def phase_question_ids(self, phase: IntakePhase) -> List[str]:
        if phase == IntakePhase.SAFETY:
            return list(self.tree.safety)
        if phase == IntakePhase.DIAGNOSTIC:
            return self.tree.diagnostic_ids()
        if phase == IntakePhase.HISTORY:
            return self.tree.history_ids() + [q.id for q in self.session.refinements]
        return []

    def question(self, question_id: str) -> Question:
        for refinement in self.session.refinements:
            if refinement.id == question_id:
                return refinement
        if question_id not in self.tree.all_ids():
            raise UnknownQuestionError(question_id)
        return get_question(question_id)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _add_red_flags(self, flags: Iterable[str]) -> List[str]:
        session = self.session
        added = [flag for flag in flags if session.add_red_flag(flag)]
        if added:
            session.touch()
            logger.warning("Visit %s: red flags added: %s", session.visit_id, ", ".join(added))
        return added

    def _prompt(self, question: Question) -> QuestionPrompt:
        language = self.session.language
        return QuestionPrompt(
            id=question.id,
            text=question.prompt(language),
            phase=self.session.phase,
            kind=question.kind,
            options=question.options_for(language),
            red_flag=question.red_flag,
        )

    def _phase_closed(self, phase: IntakePhase) -> bool:
        answers = self.session.answers
        pending = [qid for qid in self.phase_question_ids(phase) if qid not in answers]
        if phase == IntakePhase.DIAGNOSTIC:
            return not pending or len(answers) >= self.tree.minimum_required
        return not pending

    def _advance(self) -> None:
        """
        Move forward past every closed phase. Bounded by the number of
        phases, so a misconfigured tree cannot loop.
        """
        session = self.session
        for _ in range(len(PHASE_ORDER)):
            if session.is_complete or not self._phase_closed(session.phase):
                return
            previous = session.phase
            session.phase = next_phase(previous)
            session.touch()
            logger.debug(
                "Visit %s: phase %s -> %s",
                session.visit_id,
                previous.value,
                session.phase.value,
            )
