# triage_intake/intake/triage.py
"""
Deterministic triage and provider summary.

Both are recomputed from the session on demand and never stored on it.
Rules are evaluated top to bottom and the first match wins. Missing data
never produces a reassuring level.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from triage_intake.intake.catalog import ComplaintType
from triage_intake.intake.regions import BodyRegion, BodySide
from triage_intake.intake.state import IntakeSession


class TriageLevel(str, Enum):
    IMMEDIATE = "IMMEDIATE"
    URGENT = "URGENT"
    SEMI_URGENT = "SEMI_URGENT"
    NON_URGENT = "NON_URGENT"
    INFORMATIONAL = "INFORMATIONAL"

    # Aliases used by the patient-facing risk scale.
    EMERGENCY = "IMMEDIATE"
    MODERATE = "SEMI_URGENT"
    MILD = "NON_URGENT"

    @property
    def rank(self) -> int:
        """Higher is more urgent."""
        return _RANKS[self.value]


_RANKS = {
    "IMMEDIATE": 4,
    "URGENT": 3,
    "SEMI_URGENT": 2,
    "NON_URGENT": 1,
    "INFORMATIONAL": 0,
}


@dataclass
class TriageOutcome:
    level: TriageLevel
    reasoning: str
    concerns: List[str] = field(default_factory=list)
    summary: str = ""


ASSOCIATED_SYMPTOM_LABELS = [
    ("nausea", "nausea"),
    ("sweating", "sweating"),
    ("shortness_of_breath", "dyspnea"),
    ("fever", "fever"),
]

CAUDA_EQUINA_SIGNS = ["numbness", "bowel_bladder", "saddle_numbness"]


def is_positive(value: Any) -> bool:
    return value is True or (isinstance(value, str) and value.strip().lower() == "yes")


def _severity(answers: Dict[str, Any]) -> Optional[int]:
    value = answers.get("severity")
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


# ----------------------------------------------------------------------
# Triage
# ----------------------------------------------------------------------


def _composite_rule(session: IntakeSession) -> Optional[TriageOutcome]:
    answers = session.answers
    complaint = session.complaint_type
    region = session.body_region

    if (
        complaint == ComplaintType.ABDOMINAL_PAIN
        and region == BodyRegion.LOWER_ABDOMEN
        and session.body_side == BodySide.RIGHT
        and is_positive(answers.get("nausea"))
    ):
        return TriageOutcome(
            level=TriageLevel.URGENT,
            reasoning="Right lower abdominal pain with nausea - appendicitis concern",
            concerns=["Appendicitis"],
        )

    if complaint == ComplaintType.CHEST_PAIN and region == BodyRegion.CHEST:
        severity = _severity(answers)
        if severity is not None and severity >= 7:
            return TriageOutcome(
                level=TriageLevel.IMMEDIATE,
                reasoning="Severe chest pain - cardiac evaluation needed",
                concerns=["Acute coronary syndrome"],
            )
        return TriageOutcome(
            level=TriageLevel.URGENT,
            reasoning="Chest pain requires prompt evaluation",
            concerns=["Cardiac chest pain"],
        )

    if (
        complaint == ComplaintType.BACK_PAIN
        and region == BodyRegion.BACK_LOWER
        and any(is_positive(answers.get(sign)) for sign in CAUDA_EQUINA_SIGNS)
    ):
        return TriageOutcome(
            level=TriageLevel.URGENT,
            reasoning="Back pain with neurological symptoms - cauda equina concern",
            concerns=["Cauda equina syndrome"],
        )

    return None


def calculate_triage(session: IntakeSession) -> TriageOutcome:
    if session.red_flags:
        outcome = TriageOutcome(
            level=TriageLevel.IMMEDIATE,
            reasoning="Red flags identified: " + ", ".join(session.red_flags),
        )
    else:
        outcome = _composite_rule(session)

    if outcome is None:
        severity = _severity(session.answers)
        if not session.answers:
            outcome = TriageOutcome(
                level=TriageLevel.INFORMATIONAL,
                reasoning="No answers recorded yet",
            )
        elif severity is None:
            outcome = TriageOutcome(
                level=TriageLevel.SEMI_URGENT,
                reasoning="Severity not reported - needs clinician review",
            )
        elif severity >= 8:
            outcome = TriageOutcome(level=TriageLevel.URGENT, reasoning="Severe pain")
        elif severity >= 5:
            outcome = TriageOutcome(level=TriageLevel.SEMI_URGENT, reasoning="Moderate pain")
        else:
            outcome = TriageOutcome(level=TriageLevel.NON_URGENT, reasoning="Mild symptoms")

    outcome.summary = generate_summary(session)
    return outcome


# ----------------------------------------------------------------------
# Summary
# ----------------------------------------------------------------------


def generate_summary(session: IntakeSession) -> str:
    """Line-oriented brief for the reviewing provider."""
    answers = session.answers
    lines = [f"Chief Complaint: {session.complaint_type.value.replace('_', ' ')}"]

    if session.body_region is not None:
        location = session.body_region.value.replace("_", " ")
        if session.body_side is not None:
            location = f"{session.body_side.value.lower()} {location}"
        lines.append(f"Location: {location}")

    if answers.get("chief_complaint"):
        lines.append(f"Patient Statement: {answers['chief_complaint']}")

    if answers.get("onset"):
        lines.append(f"Onset: {answers['onset']}")

    severity = _severity(answers)
    if severity is not None:
        lines.append(f"Severity: {severity}/10")

    symptoms = [label for qid, label in ASSOCIATED_SYMPTOM_LABELS if is_positive(answers.get(qid))]
    if symptoms:
        lines.append(f"Associated: {', '.join(symptoms)}")

    if session.red_flags:
        lines.append(f"Red Flags: {', '.join(session.red_flags)}")

    if session.emergency_detected:
        lines.append("EMERGENCY: intake stopped and patient directed to emergency care")

    return "\n".join(lines)
