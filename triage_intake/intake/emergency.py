# triage_intake/intake/emergency.py
"""
Emergency / red-flag detection.

Screens every raw utterance and selected option, in any phase, before the
answer is validated or recorded. Matching is plain case-insensitive
substring search with no negation handling: "no chest pain" still matches.
Over-triage is accepted here; the reviewing clinician removes it.
"""
from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List

from triage_intake.intake.catalog import EMERGENCY_OPTIONS, Language, Question
from triage_intake.intake.phases import IntakePhase

logger = logging.getLogger(__name__)

DEFAULT_EMERGENCY_NUMBER = "1122"


EMERGENCY_PHRASES: Dict[Language, List[str]] = {
    Language.EN: [
        "chest pain", "can't breathe", "shortness of breath", "difficulty breathing",
        "unconscious", "severe bleeding", "suicide", "self harm", "overdose",
        "stroke", "heart attack", "seizure", "heavy bleeding", "crushing pain",
        "numbness", "slurred speech", "facial drooping",
    ],
    Language.UR: [
        "سینے میں درد", "سانس نہیں آرہی", "سانس لینے میں دقت", "بے ہوش",
        "خون بہہ رہا", "خودکشی", "زیادہ خون", "دل کا دورہ", "فالج",
        "بولنے میں مشکل", "چہرہ لٹک جانا",
    ],
}


class DirectiveAction(str, Enum):
    CONTINUE = "CONTINUE"
    STOP_AND_EMERGENCY = "STOP_AND_EMERGENCY"


@dataclass
class EmergencyDirective:
    action: DirectiveAction
    allow_continue: bool = True
    message: Dict[str, str] = field(default_factory=dict)
    matched: List[str] = field(default_factory=list)

    @property
    def is_emergency(self) -> bool:
        return self.action == DirectiveAction.STOP_AND_EMERGENCY


def emergency_message(emergency_number: str = DEFAULT_EMERGENCY_NUMBER) -> Dict[str, str]:
    return {
        Language.EN.value: f"⚠️ This is an emergency! Go to hospital immediately or call {emergency_number}",
        Language.UR.value: f"⚠️ یہ ایمرجنسی ہے! فوری طور پر ہسپتال جائیں یا {emergency_number} کال کریں",
    }


def fingerprint(text: str) -> str:
    """Short SHA-256 digest used in logs in place of patient text."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()[:12]


def _continue() -> EmergencyDirective:
    return EmergencyDirective(action=DirectiveAction.CONTINUE, allow_continue=True)


def _stop(matched: List[str], emergency_number: str) -> EmergencyDirective:
    return EmergencyDirective(
        action=DirectiveAction.STOP_AND_EMERGENCY,
        allow_continue=False,
        message=emergency_message(emergency_number),
        matched=matched,
    )


# ----------------------------------------------------------------------
# Detection
# ----------------------------------------------------------------------


def detect_emergency_phrases(text: str) -> List[str]:
    """Return every bilingual emergency phrase found in `text`, in list order."""
    if not text:
        return []
    lowered = text.lower()
    found: List[str] = []
    for phrases in EMERGENCY_PHRASES.values():
        for phrase in phrases:
            if phrase in lowered and phrase not in found:
                found.append(phrase)
    return found


def screen_text(text: str, emergency_number: str = DEFAULT_EMERGENCY_NUMBER) -> EmergencyDirective:
    matched = detect_emergency_phrases(text)
    if not matched:
        return _continue()

    logger.critical(
        "Emergency phrase detected (fingerprint=%s, matches=%d)",
        fingerprint(text),
        len(matched),
    )
    return _stop(matched, emergency_number)


def screen_selected_options(
    options: Iterable[str],
    emergency_number: str = DEFAULT_EMERGENCY_NUMBER,
) -> EmergencyDirective:
    matched = [option for option in options if option in EMERGENCY_OPTIONS]
    if not matched:
        return _continue()

    logger.critical("Emergency option selected: %s", ", ".join(matched))
    return _stop(matched, emergency_number)


def _is_yes(value: Any) -> bool:
    return value is True or (isinstance(value, str) and value.lower() == "yes")


def is_positive_red_flag(question: Question, value: Any) -> bool:
    return question.red_flag and _is_yes(value)


def screen_safety_answer(
    question: Question,
    value: Any,
    phase: IntakePhase,
    emergency_number: str = DEFAULT_EMERGENCY_NUMBER,
) -> EmergencyDirective:
    """A confirmed "yes" to a red-flag question in the safety screen halts intake."""
    if phase != IntakePhase.SAFETY or not is_positive_red_flag(question, value):
        return _continue()

    logger.critical("Safety screen positive for '%s'", question.id)
    return _stop([question.id], emergency_number)
