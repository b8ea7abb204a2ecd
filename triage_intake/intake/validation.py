# triage_intake/intake/validation.py
"""
Response validation for patient answers.

Each answer kind has a rule: a pure validator plus localized error and help
text. A failed validation is returned as a value so the UI can re-prompt;
it never raises and never moves the intake forward.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from triage_intake.intake.catalog import AnswerKind, Language


@dataclass
class ValidationResult:
    is_valid: bool
    sanitized_value: Any = None
    suggestions: List[str] = field(default_factory=list)
    error_code: Optional[str] = None


@dataclass(frozen=True)
class ValidationRule:
    validator: Callable[[str, Language], ValidationResult]
    error_message: Dict[Language, str]
    help_text: Dict[Language, str] = field(default_factory=dict)


# ----------------------------------------------------------------------
# Token lists
# ----------------------------------------------------------------------

TIME_KEYWORDS = [
    "hour", "hours", "day", "days", "week", "weeks", "month", "months",
    "year", "years", "minute", "minutes", "today", "yesterday", "ago",
    "گھنٹے", "گھنٹا", "دن", "ہفتہ", "ہفتے", "مہینہ", "مہینے", "سال", "آج", "کل",
]

VAGUE_TERMS = [
    "something", "thing", "i dont know", "not sure", "problem", "issue",
    "کچھ", "نہیں معلوم", "مسئلہ",
]

NONE_TERMS = {"none", "no", "n/a", "na", "nothing", "کوئی نہیں", "نہیں"}
YES_TERMS = {"yes", "y", "yeah", "yep", "ہاں", "جی", "جی ہاں"}
NO_TERMS = {"no", "n", "nope", "نہیں"}

_LEADING_INT = re.compile(r"^[+-]?\d+")


_SUGGESTIONS: Dict[str, Dict[Language, List[str]]] = {
    "severity.NOT_A_NUMBER": {
        Language.EN: ["Please enter a number between 0 and 10", "0 = no pain, 10 = worst pain"],
        Language.UR: ["براہ کرم 0 سے 10 کے درمیان کوئی عدد لکھیں", "0 = کوئی درد نہیں، 10 = سب سے زیادہ تکلیف"],
    },
    "severity.OUT_OF_RANGE": {
        Language.EN: ["Number must be between 0 and 10"],
        Language.UR: ["عدد 0 اور 10 کے درمیان ہونا چاہیے"],
    },
    "duration.TOO_SHORT": {
        Language.EN: ["Please describe how long you've had this symptom"],
        Language.UR: ["براہ کرم بتائیں کہ یہ علامت کب سے ہے"],
    },
    "duration.MISSING_TIME_REFERENCE": {
        Language.EN: [
            'Include time period (e.g., "3 days", "2 weeks", "since yesterday")',
            'Examples: "started this morning", "for 2 days", "3 hours ago"',
        ],
        Language.UR: [
            'وقت کی مدت شامل کریں (مثال: "3 دن", "2 ہفتے", "کل سے")',
            'مثالیں: "آج صبح سے", "2 دن سے", "3 گھنٹے پہلے"',
        ],
    },
    "chief_complaint.TOO_SHORT": {
        Language.EN: ["Please describe your main concern in more detail"],
        Language.UR: ["براہ کرم اپنی تکلیف کو تفصیل سے بیان کریں"],
    },
    "chief_complaint.TOO_VAGUE": {
        Language.EN: [
            "Try to be specific about your symptoms",
            "What exactly are you experiencing?",
            "Where does it hurt? What does it feel like?",
        ],
        Language.UR: [
            "اپنی علامات کے بارے میں واضح بتائیں",
            "آپ کو بالکل کیا محسوس ہو رہا ہے؟",
            "درد کہاں ہے؟ کیسا محسوس ہوتا ہے؟",
        ],
    },
    "medication.TOO_SHORT": {
        Language.EN: ["Please enter the medication name"],
        Language.UR: ["براہ کرم دوا کا نام لکھیں"],
    },
    "yes_no.INVALID_YES_NO": {
        Language.EN: ['Please answer "yes" or "no"'],
        Language.UR: ['"ہاں" یا "نہیں" جواب دیں'],
    },
    "any.EMPTY_RESPONSE": {
        Language.EN: ["Please provide an answer"],
        Language.UR: ["براہ کرم جواب دیں"],
    },
}


def _fail(key: str, language: Language) -> ValidationResult:
    code = key.split(".", 1)[1]
    hints = _SUGGESTIONS.get(key, {})
    return ValidationResult(
        is_valid=False,
        suggestions=list(hints.get(language) or hints.get(Language.EN, [])),
        error_code=code,
    )


# ----------------------------------------------------------------------
# Validators
# ----------------------------------------------------------------------


def validate_severity(value: str, language: Language = Language.EN) -> ValidationResult:
    match = _LEADING_INT.match(value.strip())
    if match is None:
        return _fail("severity.NOT_A_NUMBER", language)

    number = int(match.group(0))
    if number < 0 or number > 10:
        return _fail("severity.OUT_OF_RANGE", language)

    return ValidationResult(is_valid=True, sanitized_value=number)


def validate_duration(value: str, language: Language = Language.EN) -> ValidationResult:
    trimmed = value.strip().lower()
    if len(trimmed) < 3:
        return _fail("duration.TOO_SHORT", language)

    if not any(keyword in trimmed for keyword in TIME_KEYWORDS):
        return _fail("duration.MISSING_TIME_REFERENCE", language)

    return ValidationResult(is_valid=True, sanitized_value=trimmed)


def validate_chief_complaint(value: str, language: Language = Language.EN) -> ValidationResult:
    trimmed = value.strip()
    if len(trimmed) < 10:
        return _fail("chief_complaint.TOO_SHORT", language)

    lowered = trimmed.lower()
    if len(trimmed) < 20 and any(term in lowered for term in VAGUE_TERMS):
        return _fail("chief_complaint.TOO_VAGUE", language)

    return ValidationResult(is_valid=True, sanitized_value=trimmed)


def validate_medication(value: str, language: Language = Language.EN) -> ValidationResult:
    trimmed = value.strip()
    if len(trimmed) < 2:
        return _fail("medication.TOO_SHORT", language)

    if trimmed.lower() in NONE_TERMS:
        return ValidationResult(is_valid=True, sanitized_value="none")

    return ValidationResult(is_valid=True, sanitized_value=trimmed)


def validate_yes_no(value: str, language: Language = Language.EN) -> ValidationResult:
    trimmed = value.strip().lower()
    if trimmed in YES_TERMS:
        return ValidationResult(is_valid=True, sanitized_value="yes")
    if trimmed in NO_TERMS:
        return ValidationResult(is_valid=True, sanitized_value="no")
    return _fail("yes_no.INVALID_YES_NO", language)


def validate_non_empty(value: str, language: Language = Language.EN) -> ValidationResult:
    trimmed = value.strip()
    if not trimmed:
        return _fail("any.EMPTY_RESPONSE", language)
    return ValidationResult(is_valid=True, sanitized_value=trimmed)


VALIDATION_RULES: Dict[AnswerKind, ValidationRule] = {
    AnswerKind.SEVERITY: ValidationRule(
        validator=validate_severity,
        error_message={
            Language.EN: "Severity must be a number between 0 and 10",
            Language.UR: "شدت 0 سے 10 کے درمیان ایک عدد ہونا چاہیے",
        },
        help_text={
            Language.EN: "0 = no pain, 10 = worst pain imaginable",
            Language.UR: "0 = کوئی درد نہیں، 10 = سب سے زیادہ تکلیف",
        },
    ),
    AnswerKind.DURATION: ValidationRule(
        validator=validate_duration,
        error_message={
            Language.EN: 'Please specify how long (e.g., "3 days", "2 weeks")',
            Language.UR: 'براہ کرم وقت کی مدت بتائیں (مثال: "3 دن", "2 ہفتے")',
        },
        help_text={
            Language.EN: "When did symptoms start?",
            Language.UR: "علامات کب شروع ہوئیں؟",
        },
    ),
    AnswerKind.CHIEF_COMPLAINT: ValidationRule(
        validator=validate_chief_complaint,
        error_message={
            Language.EN: "Please describe your main concern",
            Language.UR: "براہ کرم اپنی مرکزی تشویش بیان کریں",
        },
        help_text={
            Language.EN: "What is bothering you the most?",
            Language.UR: "آپ کو سب سے زیادہ کیا پریشان کر رہا ہے؟",
        },
    ),
    AnswerKind.MEDICATION: ValidationRule(
        validator=validate_medication,
        error_message={
            Language.EN: 'Please enter medication name or "none"',
            Language.UR: 'براہ کرم دوا کا نام یا "کوئی نہیں" درج کریں',
        },
    ),
    AnswerKind.YES_NO: ValidationRule(
        validator=validate_yes_no,
        error_message={
            Language.EN: 'Please answer "yes" or "no"',
            Language.UR: '"ہاں" یا "نہیں" جواب دیں',
        },
    ),
}


def validate(
    kind: AnswerKind,
    raw: Union[str, Sequence[str]],
    language: Language = Language.EN,
) -> ValidationResult:
    """
    Validate and normalize one answer.

    `raw` is the typed text, or the list of selected options for choice
    questions. Kinds without a dedicated rule only require a non-empty
    answer.
    """
    language = Language(language)

    if not isinstance(raw, str):
        selected = [str(item).strip() for item in raw if str(item).strip()]
        if not selected:
            return _fail("any.EMPTY_RESPONSE", language)
        if kind == AnswerKind.MULTI_CHOICE:
            return ValidationResult(is_valid=True, sanitized_value=selected)
        if len(selected) == 1:
            raw = selected[0]
        else:
            raw = ", ".join(selected)

    rule = VALIDATION_RULES.get(kind)
    if rule is None:
        return validate_non_empty(raw, language)
    return rule.validator(raw, language)


def error_message(kind: AnswerKind, language: Language = Language.EN) -> str:
    rule = VALIDATION_RULES.get(kind)
    if rule is None:
        return ""
    return rule.error_message.get(Language(language), "")


def help_text(kind: AnswerKind, language: Language = Language.EN) -> str:
    rule = VALIDATION_RULES.get(kind)
    if rule is None:
        return ""
    return rule.help_text.get(Language(language), "")
