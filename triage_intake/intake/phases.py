# triage_intake/intake/phases.py
from enum import Enum
from typing import Optional


class IntakePhase(str, Enum):
    SAFETY = "SAFETY"
    DIAGNOSTIC = "DIAGNOSTIC"
    HISTORY = "HISTORY"
    COMPLETE = "COMPLETE"


PHASE_ORDER = [
    IntakePhase.SAFETY,
    IntakePhase.DIAGNOSTIC,
    IntakePhase.HISTORY,
    IntakePhase.COMPLETE,
]


def next_phase(current: IntakePhase) -> IntakePhase:
    """Return the phase after `current`. COMPLETE is terminal."""
    index = PHASE_ORDER.index(current)
    if index >= len(PHASE_ORDER) - 1:
        return IntakePhase.COMPLETE
    return PHASE_ORDER[index + 1]


def phase_index(phase: Optional[IntakePhase]) -> int:
    return PHASE_ORDER.index(phase) if phase is not None else -1
