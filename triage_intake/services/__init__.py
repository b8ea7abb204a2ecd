# triage_intake/services/__init__.py
from .intake_session import IntakeSessionService, TurnResult

__all__ = ["IntakeSessionService", "TurnResult"]
