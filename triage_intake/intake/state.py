# triage_intake/intake/state.py
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from triage_intake.intake.catalog import ComplaintType, Language, Question
from triage_intake.intake.phases import IntakePhase
from triage_intake.intake.regions import BodyRegion, BodySide


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class IntakeSession:
    """
    In-memory representation of one patient's intake.

    Storage is the caller's concern. The engine is the only writer and
    every mutation goes through it so the forward-only phase, unique
    answers and append-only red flags hold.
    """

    visit_id: str
    patient_id: str
    complaint_type: ComplaintType
    language: Language = Language.EN
    phase: IntakePhase = IntakePhase.SAFETY

    # question id -> normalized value, in the order answered
    answers: Dict[str, Any] = field(default_factory=dict)
    asked: List[str] = field(default_factory=list)

    body_region: Optional[BodyRegion] = None
    body_side: Optional[BodySide] = None
    refinements: List[Question] = field(default_factory=list)

    red_flags: List[str] = field(default_factory=list)
    emergency_detected: bool = False

    created_at: datetime = field(default_factory=utcnow)
    last_updated: datetime = field(default_factory=utcnow)

    @property
    def is_complete(self) -> bool:
        return self.phase == IntakePhase.COMPLETE

    def touch(self) -> None:
        self.last_updated = utcnow()

    def add_red_flag(self, flag: str) -> bool:
        if flag in self.red_flags:
            return False
        self.red_flags.append(flag)
        return True

    def snapshot(self) -> IntakeSession:
        """Copy that later answers or flags on this session do not affect."""
        return replace(
            self,
            answers=dict(self.answers),
            asked=list(self.asked),
            refinements=list(self.refinements),
            red_flags=list(self.red_flags),
        )
