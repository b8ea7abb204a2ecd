"""
Phase sequencing through IntakeEngine.

Run with: python -m pytest tests/test_engine.py -v
"""

from __future__ import annotations

import unittest

from triage_intake.intake.catalog import INTAKE_TREES, AnswerKind, ComplaintType, Language
from triage_intake.intake.engine import IntakeEngine
from triage_intake.intake.errors import (
    BodyRegionAlreadySetError,
    DuplicateAnswerError,
    IntakeClosedError,
    UnknownQuestionError,
)
from triage_intake.intake.phases import IntakePhase, phase_index
from triage_intake.intake.regions import BodyRegion, BodySide
from triage_intake.intake.state import IntakeSession
from tests.support import normalized_answer, walk_engine


def make_engine(complaint: ComplaintType, language: Language = Language.EN) -> IntakeEngine:
    session = IntakeSession(
        visit_id=f"visit-{complaint.value.lower()}",
        patient_id="patient-1",
        complaint_type=complaint,
        language=language,
    )
    return IntakeEngine(session)


class TestPhaseSequencing(unittest.TestCase):

    def test_starts_with_first_safety_question(self):
        engine = make_engine(ComplaintType.CHEST_PAIN)
        prompt = engine.get_next_question()
        self.assertEqual(prompt.id, INTAKE_TREES[ComplaintType.CHEST_PAIN].safety[0])
        self.assertEqual(prompt.phase, IntakePhase.SAFETY)
        self.assertTrue(prompt.red_flag)

    def test_phases_only_move_forward_and_no_question_repeats(self):
        for complaint in ComplaintType:
            with self.subTest(complaint=complaint):
                engine = make_engine(complaint)
                seen = []
                last_index = phase_index(engine.session.phase)
                for _ in range(100):
                    prompt = engine.get_next_question()
                    if prompt is None:
                        break
                    self.assertNotIn(prompt.id, seen)
                    seen.append(prompt.id)
                    engine.record_answer(prompt.id, normalized_answer(prompt))
                    current = phase_index(engine.session.phase)
                    self.assertGreaterEqual(current, last_index)
                    last_index = current

                self.assertEqual(engine.session.phase, IntakePhase.COMPLETE)
                self.assertEqual(engine.session.asked, seen)
                self.assertEqual(list(engine.session.answers), seen)

    def test_diagnostic_closes_at_minimum_required(self):
        engine = make_engine(ComplaintType.CHEST_PAIN)
        tree = engine.tree
        for question_id in tree.safety:
            engine.record_answer(question_id, "no")
        self.assertEqual(engine.session.phase, IntakePhase.DIAGNOSTIC)

        needed = tree.minimum_required - len(tree.safety)
        diagnostic = tree.diagnostic_ids()
        for question_id in diagnostic[: needed - 1]:
            prompt = engine.get_next_question()
            self.assertEqual(prompt.id, question_id)
            engine.record_answer(question_id, normalized_answer(prompt))
        self.assertEqual(engine.session.phase, IntakePhase.DIAGNOSTIC)

        prompt = engine.get_next_question()
        engine.record_answer(prompt.id, normalized_answer(prompt))
        self.assertEqual(engine.session.phase, IntakePhase.HISTORY)
        self.assertEqual(engine.get_next_question().id, tree.history_ids()[0])

    def test_prompts_follow_session_language(self):
        engine = make_engine(ComplaintType.HEADACHE, Language.UR)
        prompt = engine.get_next_question()
        self.assertEqual(prompt.text, "کیا یہ آپ کی زندگی کا سب سے شدید سر درد ہے؟")

    def test_choice_prompt_carries_options(self):
        engine = make_engine(ComplaintType.GENERAL)
        prompt = engine.get_next_question()
        self.assertEqual(prompt.id, "warning_signs")
        self.assertEqual(prompt.kind, AnswerKind.MULTI_CHOICE)
        self.assertEqual(len(prompt.options), 7)


class TestRecordAnswer(unittest.TestCase):

    def test_unknown_question_raises(self):
        engine = make_engine(ComplaintType.HEADACHE)
        with self.assertRaises(UnknownQuestionError):
            engine.record_answer("rebound_tenderness", "no")

    def test_duplicate_answer_raises(self):
        engine = make_engine(ComplaintType.HEADACHE)
        engine.record_answer("worst_headache_ever", "no")
        with self.assertRaises(DuplicateAnswerError):
            engine.record_answer("worst_headache_ever", "yes")
        self.assertEqual(engine.session.answers["worst_headache_ever"], "no")

    def test_red_flags_land_with_the_answer(self):
        engine = make_engine(ComplaintType.HEADACHE)
        engine.record_answer("worst_headache_ever", "yes", red_flags=["worst_headache_ever"])
        self.assertEqual(engine.session.red_flags, ["worst_headache_ever"])

    def test_rejected_answer_adds_no_red_flags(self):
        engine = make_engine(ComplaintType.HEADACHE)
        engine.record_answer("sudden_onset", "no")
        with self.assertRaises(DuplicateAnswerError):
            engine.record_answer("sudden_onset", "yes", red_flags=["sudden_onset"])
        with self.assertRaises(UnknownQuestionError):
            engine.record_answer("rebound_tenderness", "yes", red_flags=["rebound_tenderness"])
        self.assertEqual(engine.session.red_flags, [])

    def test_complete_session_is_closed(self):
        engine = make_engine(ComplaintType.GENERAL)
        walk_engine(engine)
        with self.assertRaises(IntakeClosedError):
            engine.record_answer("nausea", "no")
        self.assertIsNone(engine.get_next_question())

    def test_answer_updates_timestamp(self):
        engine = make_engine(ComplaintType.GENERAL)
        before = engine.session.last_updated
        engine.record_answer("severe_bleeding", "no")
        self.assertGreaterEqual(engine.session.last_updated, before)
        self.assertIn("severe_bleeding", engine.session.asked)


class TestProgress(unittest.TestCase):

    def test_initial_progress(self):
        engine = make_engine(ComplaintType.CHEST_PAIN)
        progress = engine.get_progress()
        self.assertEqual(progress.phase, IntakePhase.SAFETY)
        self.assertEqual(progress.phase_progress, "0/3")
        self.assertEqual(progress.total_answered, 0)
        self.assertEqual(progress.minimum_required, 11)
        self.assertFalse(progress.is_complete)

    def test_progress_is_idempotent(self):
        engine = make_engine(ComplaintType.BACK_PAIN)
        engine.record_answer("severe_chest_pain", "no")
        first = engine.get_progress()
        second = engine.get_progress()
        self.assertEqual(first, second)
        self.assertEqual(first.phase_progress, "1/5")
        self.assertEqual(engine.session.phase, IntakePhase.SAFETY)


class TestBodyRegion(unittest.TestCase):

    def test_refinements_are_asked_at_end_of_history(self):
        engine = make_engine(ComplaintType.CHEST_PAIN)
        added = engine.register_body_region(BodyRegion.CHEST)
        self.assertEqual([q.id for q in added], ["radiation_to_arm", "sweating", "worse_with_exertion"])
        self.assertEqual(engine.session.body_side, BodySide.MIDLINE)

        asked = walk_engine(engine)
        self.assertEqual(asked[-3:], ["radiation_to_arm", "sweating", "worse_with_exertion"])

    def test_refinement_shared_with_catalog_is_answerable(self):
        engine = make_engine(ComplaintType.ABDOMINAL_PAIN)
        engine.register_body_region(BodyRegion.LOWER_ABDOMEN, BodySide.RIGHT)
        engine.record_answer("fever", "yes")
        self.assertEqual(engine.session.answers["fever"], "yes")

    def test_region_can_only_be_set_once(self):
        engine = make_engine(ComplaintType.LIMB_PAIN)
        engine.register_body_region(BodyRegion.LEFT_LEG)
        with self.assertRaises(BodyRegionAlreadySetError):
            engine.register_body_region(BodyRegion.RIGHT_LEG)
        self.assertEqual(engine.session.body_region, BodyRegion.LEFT_LEG)

    def test_region_after_completion_is_rejected(self):
        engine = make_engine(ComplaintType.BACK_PAIN)
        walk_engine(engine)
        with self.assertRaises(IntakeClosedError):
            engine.register_body_region(BodyRegion.BACK_LOWER)


class TestEmergencyEscalation(unittest.TestCase):

    def test_escalation_completes_session(self):
        engine = make_engine(ComplaintType.HEADACHE)
        engine.record_answer("worst_headache_ever", "no")
        engine.escalate_emergency(["slurred speech"])

        self.assertTrue(engine.session.emergency_detected)
        self.assertEqual(engine.session.phase, IntakePhase.COMPLETE)
        self.assertEqual(engine.session.red_flags, ["slurred speech"])
        self.assertIsNone(engine.get_next_question())
        self.assertTrue(engine.get_progress().is_complete)

    def test_red_flags_are_not_duplicated(self):
        engine = make_engine(ComplaintType.GENERAL)
        self.assertEqual(engine.flag_red_flags(["stroke", "stroke"]), ["stroke"])
        self.assertEqual(engine.flag_red_flags(["stroke", "seizure"]), ["seizure"])
        self.assertEqual(engine.session.red_flags, ["stroke", "seizure"])


if __name__ == "__main__":
    unittest.main()
