# triage_intake/intake/errors.py
from __future__ import annotations


class IntakeError(Exception):
    """Base class for invariant violations in the intake core.

    These are programmer / integration errors, never patient-facing.
    Validation failures and emergencies are returned as values instead.
    """


class UnknownQuestionError(IntakeError):
    def __init__(self, question_id: str):
        super().__init__(f"Question '{question_id}' is not part of this intake")
        self.question_id = question_id


class DuplicateAnswerError(IntakeError):
    def __init__(self, question_id: str):
        super().__init__(f"Question '{question_id}' has already been answered")
        self.question_id = question_id


class IntakeClosedError(IntakeError):
    def __init__(self, visit_id: str):
        super().__init__(f"Intake for visit '{visit_id}' is complete and can no longer change")
        self.visit_id = visit_id


class BodyRegionAlreadySetError(IntakeError):
    def __init__(self, visit_id: str):
        super().__init__(f"Body region for visit '{visit_id}' has already been registered")
        self.visit_id = visit_id


class SessionNotFoundError(IntakeError):
    def __init__(self, visit_id: str):
        super().__init__(f"No intake session for visit '{visit_id}'")
        self.visit_id = visit_id


class SessionExistsError(IntakeError):
    def __init__(self, visit_id: str):
        super().__init__(f"An intake session for visit '{visit_id}' already exists")
        self.visit_id = visit_id


class SummaryInProgressError(IntakeError):
    def __init__(self, visit_id: str):
        super().__init__(f"A narrative summary is already being generated for visit '{visit_id}'")
        self.visit_id = visit_id
