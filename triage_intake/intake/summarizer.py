# triage_intake/intake/summarizer.py
from __future__ import annotations

import asyncio
import json
import logging
import re
import threading
from typing import Dict, List, Optional, Set

from triage_intake.intake.catalog import Language
from triage_intake.intake.errors import SummaryInProgressError
from triage_intake.intake.schema import ClinicalNote, NarrativeSummary, SummaryReport
from triage_intake.intake.state import IntakeSession
from triage_intake.intake.triage import TriageLevel, TriageOutcome, calculate_triage
from triage_intake.llm import LLMClient

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0

# Reassuring or diagnostic wording the narrative must never contain.
UNSAFE_PHRASES = [
    "you are safe", "nothing to worry", "no need to see a doctor",
    "no need to visit", "everything is fine", "don't worry",
    "you should take 500mg", "you should take 1000mg",
    "diagnosis is", "you have cancer", "you have a heart attack",
    "guaranteed cure", "100% safe",
]

FALLBACK_NOTICES: Dict[Language, str] = {
    Language.EN: (
        "The AI summary could not be generated. "
        "This report was built from the structured intake answers; please review the transcript."
    ),
    Language.UR: (
        "اے آئی خلاصہ تیار نہیں ہو سکا۔ "
        "یہ رپورٹ انٹیک کے جوابات سے بنائی گئی ہے، براہ کرم گفتگو خود دیکھیں۔"
    ),
}

_RISK_FOR_LEVEL = {
    TriageLevel.IMMEDIATE: "Emergency",
    TriageLevel.URGENT: "Urgent",
}

SCHEMA_DESCRIPTION = """
Return a single JSON object (no markdown formatting) with this structure:
{
  "summary": "Narrative summary: chief complaint, symptoms, duration, severity, relevant history",
  "riskLevel": "Routine" | "Urgent" | "Emergency",
  "confidenceLevel": "HIGH" | "MEDIUM" | "LOW",
  "suggestions": [
    {"id": "unique-id", "type": "test" | "medication", "name": "...", "aiReason": "...", "status": "Pending"}
  ],
  "soap": {"subjective": "...", "objective": "...", "assessment": "...", "plan": "..."},
  "risks": ["identified risk factors or red flags"],
  "condition": "Primary condition the clinician may want to discuss"
}
"""


def _clean_json_from_llm(raw: str) -> dict:
    """
    Try to robustly parse JSON from the LLM response.
    Handles ```json fences, prose around the object and stray whitespace.
    """
    text = raw.replace("\ufeff", "").replace("\u00a0", " ").strip()
    text = re.sub(r"```(?:json)?\s*", "", text, flags=re.IGNORECASE)

    match = re.search(r"\{.*\}", text, flags=re.DOTALL)
    if match:
        text = match.group(0)

    # strict=False tolerates raw newlines inside string values
    data = json.loads(text, strict=False)
    if not isinstance(data, dict):
        raise ValueError("Expected a JSON object from the summarizer")
    return data


def is_unsafe_text(text: str) -> bool:
    lowered = text.lower()
    return any(phrase in lowered for phrase in UNSAFE_PHRASES)


def build_transcript(session: IntakeSession) -> str:
    """
    Plain text transcript in answer order:

      question_id: answer
    """
    lines: List[str] = []
    for question_id in session.asked:
        if question_id not in session.answers:
            continue
        value = session.answers[question_id]
        if isinstance(value, list):
            value = ", ".join(str(item) for item in value)
        lines.append(f"{question_id}: {value}")
    return "\n".join(lines)


class NarrativeSummarizer:
    """
    Optional prose layer on top of the deterministic triage.

    The blocking LLM call runs in the default executor under a timeout.
    Any failure (timeout, transport error, malformed or unsafe output) is
    logged and replaced with a report built from the deterministic summary.
    At most one summary is in flight per visit.
    """

    def __init__(
        self,
        llm_client: Optional[LLMClient] = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        model: Optional[str] = None,
    ):
        self.llm_client = llm_client
        self.timeout_seconds = timeout_seconds
        self.model = model
        self._inflight: Dict[str, asyncio.Future] = {}
        self._cancelled: Set[str] = set()
        # cancel() may be called from worker threads
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def is_running(self, visit_id: str) -> bool:
        with self._lock:
            return visit_id in self._inflight

    def cancel(self, visit_id: str) -> bool:
        """
        Stop waiting for a running summary; the caller gets the fallback
        report. Safe to call from any thread.
        """
        with self._lock:
            future = self._inflight.get(visit_id)
            if future is None or future.done():
                return False
            self._cancelled.add(visit_id)
        future.get_loop().call_soon_threadsafe(future.cancel)
        logger.info("Visit %s: narrative summary cancellation requested", visit_id)
        return True

    async def summarize(self, session: IntakeSession) -> SummaryReport:
        visit_id = session.visit_id
        if self.is_running(visit_id):
            raise SummaryInProgressError(visit_id)

        outcome = calculate_triage(session)
        if self.llm_client is None:
            logger.warning("Visit %s: no LLM client configured, using deterministic summary", visit_id)
            return self._fallback(session, outcome)

        messages = self._build_messages(session, outcome)
        loop = asyncio.get_running_loop()
        future = loop.run_in_executor(None, self._chat, messages)
        with self._lock:
            self._inflight[visit_id] = future

        try:
            raw = await asyncio.wait_for(future, timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.warning("Visit %s: summarizer timed out after %.1fs", visit_id, self.timeout_seconds)
            return self._fallback(session, outcome)
        except asyncio.CancelledError:
            with self._lock:
                requested = visit_id in self._cancelled
            if not requested:
                raise
            logger.info("Visit %s: narrative summary cancelled", visit_id)
            return self._fallback(session, outcome)
        except Exception as e:
            logger.warning("Visit %s: summarizer call failed: %s", visit_id, e)
            return self._fallback(session, outcome)
        finally:
            with self._lock:
                self._inflight.pop(visit_id, None)
                self._cancelled.discard(visit_id)

        try:
            narrative = NarrativeSummary.model_validate(_clean_json_from_llm(raw))
        except ValueError as e:
            # json.JSONDecodeError and pydantic.ValidationError are both ValueErrors
            logger.warning("Visit %s: could not parse summarizer output: %s", visit_id, e)
            return self._fallback(session, outcome)

        if self._is_unsafe(narrative):
            logger.warning("Visit %s: summarizer output rejected by safety guard", visit_id)
            return self._fallback(session, outcome)

        return SummaryReport(
            visit_id=visit_id,
            narrative=narrative,
            triage_level=outcome.level.value,
            deterministic_summary=outcome.summary,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _chat(self, messages: List[Dict[str, str]]) -> str:
        return self.llm_client.chat(messages, temperature=0.1, model=self.model)

    def _build_messages(self, session: IntakeSession, outcome: TriageOutcome) -> List[Dict[str, str]]:
        baseline = [
            f"- Complaint type: {session.complaint_type.value}",
            f"- Language: {session.language.value}",
            f"- Deterministic triage level: {outcome.level.value} ({outcome.reasoning})",
            "- Structured summary:",
            outcome.summary,
        ]
        return [
            {
                "role": "system",
                "content": (
                    "You are a clinical intake assistant preparing notes for a doctor. "
                    "You never diagnose and never reassure the patient. "
                    "The deterministic triage level has already been decided; do not lower it.\n"
                    "Do NOT invent details that are not in the transcript. "
                    "Leave fields empty if information is missing.\n"
                ),
            },
            {
                "role": "user",
                "content": (
                    "Here are the answers from a structured patient intake.\n\n"
                    f"{SCHEMA_DESCRIPTION}\n"
                    "Baseline context:\n"
                    + "\n".join(baseline)
                    + "\n\nTranscript:\n"
                    f"{build_transcript(session)}\n\n"
                    "Consider cultural context (Pakistan). Return ONLY the JSON object."
                ),
            },
        ]

    def _is_unsafe(self, narrative: NarrativeSummary) -> bool:
        texts = [
            narrative.summary,
            narrative.condition,
            narrative.soap.subjective,
            narrative.soap.objective,
            narrative.soap.assessment,
            narrative.soap.plan,
            *narrative.risks,
            *(suggestion.name for suggestion in narrative.suggestions),
            *(suggestion.ai_reason for suggestion in narrative.suggestions),
        ]
        return any(is_unsafe_text(text) for text in texts if text)

    def _fallback(self, session: IntakeSession, outcome: TriageOutcome) -> SummaryReport:
        narrative = NarrativeSummary(
            summary=outcome.summary,
            risk_level=_RISK_FOR_LEVEL.get(outcome.level, "Routine"),
            confidence_level="LOW",
            soap=ClinicalNote(
                subjective=str(session.answers.get("chief_complaint", "")),
                objective="",
                assessment=outcome.reasoning,
                plan="Manual review required",
            ),
            risks=list(session.red_flags),
            condition="Unknown",
        )
        return SummaryReport(
            visit_id=session.visit_id,
            narrative=narrative,
            triage_level=outcome.level.value,
            deterministic_summary=outcome.summary,
            fallback_used=True,
            notice=FALLBACK_NOTICES.get(session.language, FALLBACK_NOTICES[Language.EN]),
        )
