# triage_intake/intake/regions.py
"""
Body-region refinement.

Once the patient marks where the problem is, a complaint + region (+ side)
combination can add targeted follow-up questions, for example an
appendicitis screen for right lower abdominal pain.
"""
from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional, Tuple

from triage_intake.intake.catalog import (
    QUESTIONS,
    ComplaintType,
    Language,
    Question,
    build_question,
)


class BodyRegion(str, Enum):
    HEAD = "HEAD"
    NECK = "NECK"
    CHEST = "CHEST"
    UPPER_ABDOMEN = "UPPER_ABDOMEN"
    LOWER_ABDOMEN = "LOWER_ABDOMEN"
    BACK_UPPER = "BACK_UPPER"
    BACK_LOWER = "BACK_LOWER"
    LEFT_ARM = "LEFT_ARM"
    RIGHT_ARM = "RIGHT_ARM"
    LEFT_LEG = "LEFT_LEG"
    RIGHT_LEG = "RIGHT_LEG"
    PELVIS = "PELVIS"


class BodySide(str, Enum):
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    MIDLINE = "MIDLINE"


REGION_LABELS: Dict[Language, Dict[BodyRegion, str]] = {
    Language.EN: {
        BodyRegion.HEAD: "Head",
        BodyRegion.NECK: "Neck",
        BodyRegion.CHEST: "Chest",
        BodyRegion.UPPER_ABDOMEN: "Upper Abdomen",
        BodyRegion.LOWER_ABDOMEN: "Lower Abdomen",
        BodyRegion.BACK_UPPER: "Upper Back",
        BodyRegion.BACK_LOWER: "Lower Back",
        BodyRegion.LEFT_ARM: "Left Arm",
        BodyRegion.RIGHT_ARM: "Right Arm",
        BodyRegion.LEFT_LEG: "Left Leg",
        BodyRegion.RIGHT_LEG: "Right Leg",
        BodyRegion.PELVIS: "Pelvis",
    },
    Language.UR: {
        BodyRegion.HEAD: "سر",
        BodyRegion.NECK: "گردن",
        BodyRegion.CHEST: "سینہ",
        BodyRegion.UPPER_ABDOMEN: "اوپری پیٹ",
        BodyRegion.LOWER_ABDOMEN: "نچلا پیٹ",
        BodyRegion.BACK_UPPER: "اوپری کمر",
        BodyRegion.BACK_LOWER: "نچلی کمر",
        BodyRegion.LEFT_ARM: "بایاں بازو",
        BodyRegion.RIGHT_ARM: "دایاں بازو",
        BodyRegion.LEFT_LEG: "بایاں پاؤں",
        BodyRegion.RIGHT_LEG: "دایاں پاؤں",
        BodyRegion.PELVIS: "شرونی",
    },
}

COMPLAINTS_REQUIRING_BODY_MAP = {
    ComplaintType.CHEST_PAIN,
    ComplaintType.ABDOMINAL_PAIN,
    ComplaintType.BACK_PAIN,
    ComplaintType.LIMB_PAIN,
}


def requires_body_map(complaint: ComplaintType) -> bool:
    return complaint in COMPLAINTS_REQUIRING_BODY_MAP


def side_for_region(region: BodyRegion) -> BodySide:
    """Lateral side implied by the region name itself."""
    if "LEFT" in region.value:
        return BodySide.LEFT
    if "RIGHT" in region.value:
        return BodySide.RIGHT
    return BodySide.MIDLINE


def region_label(region: BodyRegion, language: Language = Language.EN) -> str:
    return REGION_LABELS[Language(language)][region]


# ----------------------------------------------------------------------
# Refinement questions
# ----------------------------------------------------------------------

_CHEST_DISCOMFORT = build_question(
    "chest_discomfort", "Any discomfort in your chest?",
    "آپ کے سینے میں کوئی تکلیف؟", red_flag=True,
)

_CARDIAC_SCREEN = [
    build_question("radiation_to_arm", "Does the pain spread to your arm, neck, or jaw?",
                   "کیا درد آپ کے بازو، گردن یا جبڑے تک پھیلتا ہے؟", red_flag=True),
    build_question("sweating", "Are you sweating or feeling clammy?",
                   "کیا آپ کو پسینہ آ رہا ہے یا چپچپا محسوس کر رہے ہیں؟", red_flag=True),
    build_question("worse_with_exertion", "Does the pain get worse with activity?",
                   "کیا سرگرمی سے درد بڑھ جاتا ہے؟"),
]

_APPENDICITIS_SCREEN = [
    build_question("rebound_tenderness", "Does it hurt more when you release pressure on the area?",
                   "جب آپ اس جگہ سے دباؤ ہٹاتے ہیں تو کیا درد زیادہ ہوتا ہے؟", red_flag=True),
    build_question("pain_on_movement", "Is the pain worse when walking or coughing?",
                   "کیا چلتے یا کھانستے وقت درد بڑھ جاتا ہے؟"),
    QUESTIONS["fever"],
    build_question("appetite_loss", "Have you lost your appetite?",
                   "کیا آپ کی بھوک ختم ہو گئی ہے؟"),
]

_GASTRIC_SCREEN = [
    build_question("heartburn", "Do you have heartburn or a burning sensation?",
                   "کیا آپ کو سینے میں جلن ہے؟"),
    build_question("worse_after_eating", "Does it get worse after eating?",
                   "کیا کھانے کے بعد درد بڑھ جاتا ہے؟"),
    _CHEST_DISCOMFORT,
]

# saddle_numbness and bowel_bladder feed the cauda equina rule in triage
# rather than the generic red-flag path.
_LOWER_BACK_SCREEN = [
    build_question("saddle_numbness", "Any numbness around your groin or buttocks?",
                   "کیا ران کے اندرونی حصے یا کولہوں کے گرد سن پن ہے؟"),
    build_question("bowel_bladder", "Any new loss of bowel or bladder control?",
                   "کیا پیشاب یا پاخانے پر قابو ختم ہوا ہے؟"),
    build_question("flank_pain", "Is the pain more to the side (flank)?",
                   "کیا درد زیادہ پہلو کی طرف ہے؟"),
    build_question("painful_urination", "Is urination painful or bloody?",
                   "کیا پیشاب میں درد یا خون آتا ہے؟", red_flag=True),
]

_LEG_CLOT_SCREEN = [
    build_question("leg_swelling", "Is there swelling?", "کیا سوجن ہے؟", red_flag=True),
    build_question("leg_warmth", "Does the area feel warm?", "کیا یہ جگہ گرم محسوس ہوتی ہے؟",
                   red_flag=True),
    build_question("recent_surgery_or_travel", "Any recent surgery or long travel?",
                   "کوئی حالیہ سرجری یا لمبا سفر؟", red_flag=True),
]

RegionKey = Tuple[ComplaintType, BodyRegion, Optional[BodySide]]

REFINEMENT_TABLE: Dict[RegionKey, List[Question]] = {
    (ComplaintType.CHEST_PAIN, BodyRegion.CHEST, None): _CARDIAC_SCREEN,
    (ComplaintType.ABDOMINAL_PAIN, BodyRegion.LOWER_ABDOMEN, BodySide.RIGHT): _APPENDICITIS_SCREEN,
    (ComplaintType.ABDOMINAL_PAIN, BodyRegion.UPPER_ABDOMEN, None): _GASTRIC_SCREEN,
    (ComplaintType.BACK_PAIN, BodyRegion.BACK_LOWER, None): _LOWER_BACK_SCREEN,
    (ComplaintType.LIMB_PAIN, BodyRegion.LEFT_LEG, None): _LEG_CLOT_SCREEN,
    (ComplaintType.LIMB_PAIN, BodyRegion.RIGHT_LEG, None): _LEG_CLOT_SCREEN,
    (ComplaintType.LIMB_PAIN, BodyRegion.LEFT_ARM, None): [_CHEST_DISCOMFORT],
}


def refine_questions(
    complaint: ComplaintType,
    region: BodyRegion,
    side: Optional[BodySide] = None,
) -> List[Question]:
    """
    Extra questions for this complaint at this body location.

    An exact (complaint, region, side) entry wins over the side-agnostic
    one. Unknown combinations yield an empty list.
    """
    questions = REFINEMENT_TABLE.get((complaint, region, side))
    if questions is None:
        questions = REFINEMENT_TABLE.get((complaint, region, None), [])
    return list(questions)
