# triage_intake/intake/catalog.py
"""
Static question catalog.

Questions are keyed by id and carry English and Urdu prompt text, the kind
of answer the validator should expect, and a red-flag marker. Intake trees
group question ids per complaint type into the clinical categories the
phase sequencer walks through.
"""
from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from triage_intake.intake.errors import UnknownQuestionError


class Language(str, Enum):
    EN = "en"
    UR = "ur"


class AnswerKind(str, Enum):
    SEVERITY = "severity"
    DURATION = "duration"
    CHIEF_COMPLAINT = "chief_complaint"
    MEDICATION = "medication"
    YES_NO = "yes_no"
    CHOICE = "choice"
    MULTI_CHOICE = "multi_choice"
    TEXT = "text"


class ComplaintType(str, Enum):
    CHEST_PAIN = "CHEST_PAIN"
    ABDOMINAL_PAIN = "ABDOMINAL_PAIN"
    BACK_PAIN = "BACK_PAIN"
    LIMB_PAIN = "LIMB_PAIN"
    HEADACHE = "HEADACHE"
    GENERAL = "GENERAL"


class Question(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    text: Dict[Language, str]
    kind: AnswerKind = AnswerKind.YES_NO
    options: Dict[Language, List[str]] = Field(default_factory=dict)
    red_flag: bool = False

    def prompt(self, language: Language = Language.EN) -> str:
        return self.text.get(language) or self.text[Language.EN]

    def options_for(self, language: Language = Language.EN) -> List[str]:
        return list(self.options.get(language) or self.options.get(Language.EN, []))


class IntakeTree(BaseModel):
    """
    Ordered question ids for one complaint type.

    `minimum_required` is the number of answered questions after which the
    diagnostic phase may close even if optional questions remain.
    """

    model_config = ConfigDict(frozen=True)

    safety: List[str]
    characterization: List[str] = Field(default_factory=list)
    associated: List[str] = Field(default_factory=list)
    localization: List[str] = Field(default_factory=list)
    pattern: List[str] = Field(default_factory=list)
    symptoms: List[str] = Field(default_factory=list)
    function: List[str] = Field(default_factory=list)
    pain: List[str] = Field(default_factory=list)
    history: List[str] = Field(default_factory=list)
    risk: List[str] = Field(default_factory=list)
    exposure: List[str] = Field(default_factory=list)
    minimum_required: int

    def diagnostic_ids(self) -> List[str]:
        return [
            *self.characterization,
            *self.associated,
            *self.localization,
            *self.pattern,
            *self.symptoms,
            *self.function,
            *self.pain,
        ]

    def history_ids(self) -> List[str]:
        return [*self.history, *self.risk, *self.exposure]

    def all_ids(self) -> List[str]:
        return [*self.safety, *self.diagnostic_ids(), *self.history_ids()]


# Exact option strings of the warning-signs checklist that mean an emergency.
EMERGENCY_OPTIONS = [
    "💔 سینے میں شدید درد (Severe chest pain)",
    "😮‍💨 سانس لینے میں بہت مشکل (Severe difficulty breathing)",
    "😵 بے ہوشی / چکر (Loss of consciousness / fainting)",
    "🩸 شدید خون بہنا (Severe bleeding)",
    "😰 اچانک شدید کمزوری (Sudden severe weakness)",
    "🤒 تیز بخار اور الجھن (High fever with confusion)",
]
NO_WARNING_SIGNS = "✅ ان میں سے کوئی نہیں (None of these)"


def build_question(
    qid: str,
    en: str,
    ur: str,
    kind: AnswerKind = AnswerKind.YES_NO,
    red_flag: bool = False,
    options_en: Optional[List[str]] = None,
    options_ur: Optional[List[str]] = None,
) -> Question:
    options: Dict[Language, List[str]] = {}
    if options_en:
        options[Language.EN] = options_en
        options[Language.UR] = options_ur or options_en
    return Question(
        id=qid,
        text={Language.EN: en, Language.UR: ur},
        kind=kind,
        options=options,
        red_flag=red_flag,
    )


_QUESTION_LIST: List[Question] = [
    # ------------------------------------------------------------------
    # Safety screen
    # ------------------------------------------------------------------
    build_question("severe_chest_pain", "Do you have severe chest pain right now?",
                   "کیا سینے میں شدید درد ہے؟", red_flag=True),
    build_question("shortness_of_breath", "Are you having difficulty breathing?",
                   "کیا سانس لینے میں کوئی دشواری ہے؟", red_flag=True),
    build_question("loss_of_consciousness", "Have you fainted or lost consciousness?",
                   "کیا آپ بے ہوش ہوئے؟", red_flag=True),
    build_question("severe_bleeding", "Is there severe bleeding that will not stop?",
                   "کیا شدید خون بہہ رہا ہے جو رک نہیں رہا؟", red_flag=True),
    build_question("vomiting_blood", "Have you vomited blood?",
                   "کیا الٹی میں خون آیا ہے؟", red_flag=True),
    build_question("rigid_abdomen", "Is your belly hard and extremely painful to touch?",
                   "کیا پیٹ سخت ہے اور چھونے سے شدید درد ہوتا ہے؟", red_flag=True),
    build_question("leg_weakness", "Any sudden weakness in your legs?",
                   "کیا ٹانگوں میں اچانک کمزوری ہے؟", red_flag=True),
    build_question("limb_deformity", "Is the arm or leg visibly deformed, or is bone showing?",
                   "کیا بازو یا ٹانگ ٹیڑھی ہو گئی ہے یا ہڈی نظر آ رہی ہے؟", red_flag=True),
    build_question("limb_cold_pale", "Is the limb cold, pale or blue?",
                   "کیا بازو یا ٹانگ ٹھنڈی، پیلی یا نیلی ہے؟", red_flag=True),
    build_question("worst_headache_ever", "Is this the worst headache of your life?",
                   "کیا یہ آپ کی زندگی کا سب سے شدید سر درد ہے؟", red_flag=True),
    build_question("sudden_onset", "Did it start suddenly (thunderclap)?",
                   "کیا یہ اچانک شروع ہوا؟ (ایک دم زور سے)", red_flag=True),
    build_question("fever_neck_stiffness", "Do you have fever and neck stiffness?",
                   "کیا آپ کو بخار اور گردن میں اکڑاہٹ ہے؟", red_flag=True),
    build_question("vision_or_speech_change", "Any vision or speech changes?",
                   "کیا نظر یا بولنے میں کوئی تبدیلی ہے؟", red_flag=True),
    build_question("warning_signs", "Do you have any of these right now? Select all that apply.",
                   "کیا آپ کو ابھی ان میں سے کوئی علامت ہے؟ جو لاگو ہوں منتخب کریں",
                   AnswerKind.MULTI_CHOICE,
                   options_en=EMERGENCY_OPTIONS + [NO_WARNING_SIGNS]),
    # ------------------------------------------------------------------
    # Characterization
    # ------------------------------------------------------------------
    build_question("chief_complaint", "What is your main complaint today? Describe it in one sentence.",
                   "آج آپ کی کیا شکایت ہے؟ ایک جملے میں بتائیں", AnswerKind.CHIEF_COMPLAINT),
    build_question("onset", "When did this start? (for example: 3 days ago)",
                   "یہ مسئلہ کب شروع ہوا؟ (مثال: 3 دن پہلے)", AnswerKind.DURATION),
    build_question("severity", "How severe is it, from 0 (none) to 10 (worst)?",
                   "تکلیف کی شدت کتنی ہے؟ (0 سے 10)", AnswerKind.SEVERITY),
    build_question("character", "How does it feel?", "یہ کیسا محسوس ہوتا ہے؟", AnswerKind.CHOICE,
                   options_en=["Sharp", "Dull", "Crushing", "Burning", "Pressure"],
                   options_ur=["تیز درد (Sharp)", "ہلکا سا درد (Dull)", "کسنے والا (Crushing)",
                               "جلن (Burning)", "دبانے والا (Pressure)"]),
    build_question("duration_pattern", "Is it constant or does it come and go?",
                   "کیا یہ مسلسل ہے یا آتی جاتی ہے؟", AnswerKind.CHOICE,
                   options_en=["Constant", "Comes and goes", "Comes in attacks"],
                   options_ur=["مسلسل ہے (Constant)", "آتی جاتی ہے (Comes and goes)",
                               "حملوں میں آتی ہے (Comes in attacks)"]),
    build_question("aggravating_factors", "What makes it worse?",
                   "کن چیزوں سے یہ بڑھ جاتی ہے؟", AnswerKind.TEXT),
    build_question("relieving_factors", "What makes it better?",
                   "کن چیزوں سے آرام ملتا ہے؟", AnswerKind.TEXT),
    build_question("headache_location", "Where is the headache?", "سر درد کہاں ہے؟", AnswerKind.CHOICE,
                   options_en=["Front", "Back", "One side", "All over", "Behind eyes"],
                   options_ur=["سامنے (Front)", "پیچھے (Back)", "ایک طرف (One side)",
                               "پورے سر میں (All over)", "آنکھوں کے پیچھے (Behind eyes)"]),
    # ------------------------------------------------------------------
    # Associated symptoms
    # ------------------------------------------------------------------
    build_question("nausea", "Do you have nausea or vomiting?", "کیا آپ کو متلی یا الٹی ہے؟"),
    build_question("palpitations", "Does your heart feel like it is racing or skipping beats?",
                   "کیا دل کی دھڑکن تیز یا بے ترتیب محسوس ہوتی ہے؟"),
    build_question("cough", "Do you have a cough?", "کیا آپ کو کھانسی ہے؟"),
    build_question("bowel_movement", "When was your last bowel movement?",
                   "آپ کو آخری بار پاخانہ کب ہوا؟", AnswerKind.CHOICE,
                   options_en=["Today", "Yesterday", "2-3 days ago", "More than 3 days ago"],
                   options_ur=["آج (Today)", "کل (Yesterday)", "2-3 دن پہلے (2-3 days ago)",
                               "3 دن سے زیادہ (More than 3 days ago)"]),
    build_question("blood_in_stool", "Is there blood in your stool?",
                   "کیا پاخانے میں خون آتا ہے؟", red_flag=True),
    build_question("diarrhea", "Do you have diarrhea?", "کیا آپ کو دست ہیں؟"),
    build_question("numbness", "Do you have numbness or tingling in your legs?",
                   "کیا آپ کی ٹانگوں میں بے حسی یا جھنجھناہٹ ہے؟"),
    build_question("radiating_pain", "Does the pain travel down your leg?",
                   "کیا درد ٹانگ کی طرف جاتا ہے؟"),
    build_question("recent_injury", "Any recent fall or injury?", "کوئی حالیہ گرنا یا چوٹ؟"),
    build_question("can_bear_weight", "Can you put weight on it or use it normally?",
                   "کیا آپ اس پر وزن ڈال سکتے ہیں یا اسے معمول کے مطابق استعمال کر سکتے ہیں؟"),
    build_question("joint_swelling", "Is a nearby joint swollen?", "کیا قریبی جوڑ سوجا ہوا ہے؟"),
    build_question("photophobia", "Does light bother you?", "کیا روشنی بری لگتی ہے؟"),
    build_question("weakness", "Any weakness in your arms or legs?",
                   "کیا بازو یا ٹانگوں میں کمزوری ہے؟", red_flag=True),
    build_question("fever", "Do you have a fever?", "کیا آپ کو بخار ہے؟"),
    # ------------------------------------------------------------------
    # History and risk factors
    # ------------------------------------------------------------------
    build_question("current_medications", "Which medicines are you taking now? (write 'none' if none)",
                   "آپ اس وقت کون سی دوائیں لے رہے ہیں؟ (اگر کوئی نہیں تو 'کوئی نہیں' لکھیں)",
                   AnswerKind.MEDICATION),
    build_question("drug_allergies", "Do you have any drug allergies?",
                   "کیا آپ کو کسی دوا سے الرجی ہے؟"),
    build_question("previous_episodes", "Have you had this problem before?",
                   "کیا یہ مسئلہ پہلے بھی ہوا ہے؟"),
    build_question("heart_disease", "Have you ever been told you have heart disease?",
                   "کیا آپ کو کبھی دل کی بیماری بتائی گئی ہے؟"),
    build_question("hypertension", "Do you have high blood pressure?", "کیا آپ کو ہائی بلڈ پریشر ہے؟"),
    build_question("diabetes", "Do you have diabetes?", "کیا آپ کو شوگر (ذیابیطس) ہے؟"),
    build_question("smoking", "Do you smoke?", "کیا آپ سگریٹ پیتے ہیں؟"),
    build_question("pregnancy_possible", "Is there any chance you are pregnant?",
                   "کیا آپ کے حاملہ ہونے کا کوئی امکان ہے؟"),
    build_question("previous_abdominal_surgery", "Have you had surgery on your abdomen before?",
                   "کیا پہلے کبھی پیٹ کا آپریشن ہوا ہے؟"),
    build_question("heavy_lifting", "Does your work involve heavy lifting?",
                   "کیا آپ کے کام میں بھاری وزن اٹھانا شامل ہے؟"),
    build_question("diagnosed_migraine", "Have you ever been diagnosed with migraines?",
                   "کیا کبھی مائیگرین (آدھے سر کا درد) کی تشخیص ہوئی ہے؟"),
    build_question("blood_thinners", "Do you take blood thinners?",
                   "کیا آپ خون پتلا کرنے والی دوا لیتے ہیں؟"),
]

QUESTIONS: Dict[str, Question] = {q.id: q for q in _QUESTION_LIST}


GENERAL_SAFETY = [
    "severe_chest_pain",
    "shortness_of_breath",
    "loss_of_consciousness",
    "severe_bleeding",
]

COMMON_HISTORY = [
    "current_medications",
    "drug_allergies",
    "previous_episodes",
]


INTAKE_TREES: Dict[ComplaintType, IntakeTree] = {
    ComplaintType.CHEST_PAIN: IntakeTree(
        safety=["shortness_of_breath", "loss_of_consciousness", "severe_bleeding"],
        characterization=["chief_complaint", "onset", "severity", "character", "duration_pattern"],
        associated=["nausea", "palpitations", "cough"],
        pattern=["aggravating_factors", "relieving_factors"],
        history=COMMON_HISTORY + ["heart_disease"],
        risk=["hypertension", "diabetes", "smoking"],
        minimum_required=11,
    ),
    ComplaintType.ABDOMINAL_PAIN: IntakeTree(
        safety=GENERAL_SAFETY + ["vomiting_blood", "rigid_abdomen"],
        characterization=["chief_complaint", "onset", "severity", "character", "duration_pattern"],
        associated=["nausea", "bowel_movement", "blood_in_stool", "diarrhea"],
        pattern=["aggravating_factors", "relieving_factors"],
        history=COMMON_HISTORY + ["previous_abdominal_surgery"],
        risk=["pregnancy_possible", "diabetes"],
        minimum_required=14,
    ),
    ComplaintType.BACK_PAIN: IntakeTree(
        safety=GENERAL_SAFETY + ["leg_weakness"],
        characterization=["chief_complaint", "onset", "severity", "character", "duration_pattern"],
        associated=["numbness", "radiating_pain", "fever"],
        pattern=["recent_injury", "aggravating_factors", "relieving_factors"],
        history=COMMON_HISTORY,
        risk=["heavy_lifting", "diabetes"],
        exposure=["blood_thinners"],
        minimum_required=12,
    ),
    ComplaintType.LIMB_PAIN: IntakeTree(
        safety=GENERAL_SAFETY + ["limb_deformity", "limb_cold_pale"],
        characterization=["chief_complaint", "onset", "severity", "character"],
        function=["can_bear_weight", "joint_swelling"],
        pattern=["recent_injury", "aggravating_factors"],
        history=COMMON_HISTORY,
        risk=["diabetes", "smoking", "blood_thinners"],
        minimum_required=12,
    ),
    ComplaintType.HEADACHE: IntakeTree(
        safety=["worst_headache_ever", "sudden_onset", "fever_neck_stiffness", "vision_or_speech_change"],
        characterization=["chief_complaint", "headache_location", "onset", "severity", "duration_pattern"],
        associated=["nausea", "photophobia", "weakness"],
        pattern=["aggravating_factors", "relieving_factors"],
        history=COMMON_HISTORY + ["diagnosed_migraine"],
        risk=["hypertension", "smoking"],
        minimum_required=12,
    ),
    ComplaintType.GENERAL: IntakeTree(
        safety=["warning_signs"] + GENERAL_SAFETY,
        characterization=["chief_complaint", "onset", "severity"],
        associated=["fever", "nausea"],
        history=list(COMMON_HISTORY),
        risk=["hypertension", "diabetes"],
        minimum_required=9,
    ),
}


def get_question(question_id: str) -> Question:
    try:
        return QUESTIONS[question_id]
    except KeyError:
        raise UnknownQuestionError(question_id) from None


def tree_for(complaint: ComplaintType) -> IntakeTree:
    return INTAKE_TREES.get(complaint, INTAKE_TREES[ComplaintType.GENERAL])
