"""Shared helpers for driving intakes in tests."""

from __future__ import annotations

from typing import Dict, Optional

from triage_intake.intake.catalog import NO_WARNING_SIGNS, AnswerKind
from triage_intake.intake.engine import IntakeEngine, QuestionPrompt

# Raw answers as a patient would type them; none contains an emergency phrase.
TYPED_ANSWERS = {
    AnswerKind.YES_NO: "no",
    AnswerKind.SEVERITY: "3",
    AnswerKind.DURATION: "2 days",
    AnswerKind.CHIEF_COMPLAINT: "Dull ache across my lower back",
    AnswerKind.MEDICATION: "none",
    AnswerKind.TEXT: "rest helps",
}

# Already-normalized values for driving the engine directly.
NORMALIZED_ANSWERS = {
    AnswerKind.YES_NO: "no",
    AnswerKind.SEVERITY: 3,
    AnswerKind.DURATION: "2 days",
    AnswerKind.CHIEF_COMPLAINT: "Dull ache across my lower back",
    AnswerKind.MEDICATION: "none",
    AnswerKind.TEXT: "rest helps",
}


def typed_answer(prompt: QuestionPrompt):
    if prompt.kind == AnswerKind.MULTI_CHOICE:
        return [NO_WARNING_SIGNS]
    if prompt.kind == AnswerKind.CHOICE:
        return prompt.options[0]
    return TYPED_ANSWERS[prompt.kind]


def normalized_answer(prompt: QuestionPrompt):
    if prompt.kind == AnswerKind.MULTI_CHOICE:
        return [NO_WARNING_SIGNS]
    if prompt.kind == AnswerKind.CHOICE:
        return prompt.options[0]
    return NORMALIZED_ANSWERS[prompt.kind]


def walk_engine(engine: IntakeEngine, overrides: Optional[Dict[str, object]] = None, limit: int = 100):
    """Answer every question the engine asks. Returns the ids in asked order."""
    overrides = overrides or {}
    asked = []
    for _ in range(limit):
        prompt = engine.get_next_question()
        if prompt is None:
            break
        asked.append(prompt.id)
        engine.record_answer(prompt.id, overrides.get(prompt.id, normalized_answer(prompt)))
    return asked
