# triage_intake/intake/__init__.py
from .catalog import AnswerKind, ComplaintType, Language, Question
from .engine import IntakeEngine, IntakeProgress, QuestionPrompt
from .phases import IntakePhase
from .regions import BodyRegion, BodySide
from .state import IntakeSession
from .triage import TriageLevel, TriageOutcome, calculate_triage, generate_summary

__all__ = [
    "AnswerKind",
    "ComplaintType",
    "Language",
    "Question",
    "IntakeEngine",
    "IntakeProgress",
    "QuestionPrompt",
    "IntakePhase",
    "BodyRegion",
    "BodySide",
    "IntakeSession",
    "TriageLevel",
    "TriageOutcome",
    "calculate_triage",
    "generate_summary",
]
