"""
Response validation: every answer kind, in both languages.

Run with: python -m pytest tests/test_validation.py -v
"""

from __future__ import annotations

import unittest

from triage_intake.intake.catalog import AnswerKind, Language
from triage_intake.intake.validation import error_message, help_text, validate


class TestSeverity(unittest.TestCase):

    def test_in_range_number_is_sanitized_to_int(self):
        result = validate(AnswerKind.SEVERITY, " 7 ")
        self.assertTrue(result.is_valid)
        self.assertEqual(result.sanitized_value, 7)

    def test_leading_integer_is_used(self):
        result = validate(AnswerKind.SEVERITY, "8/10")
        self.assertTrue(result.is_valid)
        self.assertEqual(result.sanitized_value, 8)

    def test_eleven_is_out_of_range(self):
        result = validate(AnswerKind.SEVERITY, "11")
        self.assertFalse(result.is_valid)
        self.assertEqual(result.error_code, "OUT_OF_RANGE")
        self.assertIsNone(result.sanitized_value)

    def test_negative_is_out_of_range(self):
        self.assertEqual(validate(AnswerKind.SEVERITY, "-1").error_code, "OUT_OF_RANGE")

    def test_words_are_not_a_number(self):
        result = validate(AnswerKind.SEVERITY, "very bad")
        self.assertEqual(result.error_code, "NOT_A_NUMBER")
        self.assertTrue(result.suggestions)

    def test_bounds_are_inclusive(self):
        self.assertEqual(validate(AnswerKind.SEVERITY, "0").sanitized_value, 0)
        self.assertEqual(validate(AnswerKind.SEVERITY, "10").sanitized_value, 10)


class TestDuration(unittest.TestCase):

    def test_days_are_accepted_and_normalized(self):
        result = validate(AnswerKind.DURATION, "  3 Days ")
        self.assertTrue(result.is_valid)
        self.assertEqual(result.sanitized_value, "3 days")

    def test_tomorrow_has_no_time_reference(self):
        result = validate(AnswerKind.DURATION, "tomorrow")
        self.assertFalse(result.is_valid)
        self.assertEqual(result.error_code, "MISSING_TIME_REFERENCE")

    def test_too_short(self):
        self.assertEqual(validate(AnswerKind.DURATION, "2d").error_code, "TOO_SHORT")

    def test_urdu_time_unit(self):
        result = validate(AnswerKind.DURATION, "3 دن سے")
        self.assertTrue(result.is_valid)

    def test_suggestions_follow_language(self):
        result = validate(AnswerKind.DURATION, "tomorrow", Language.UR)
        self.assertIn("وقت", result.suggestions[0])


class TestChiefComplaint(unittest.TestCase):

    def test_short_answer_rejected(self):
        self.assertEqual(validate(AnswerKind.CHIEF_COMPLAINT, "pain").error_code, "TOO_SHORT")

    def test_short_vague_answer_rejected(self):
        result = validate(AnswerKind.CHIEF_COMPLAINT, "some problem")
        self.assertEqual(result.error_code, "TOO_VAGUE")
        self.assertEqual(len(result.suggestions), 3)

    def test_long_answer_with_vague_word_is_accepted(self):
        result = validate(AnswerKind.CHIEF_COMPLAINT, "a problem with sharp pain in my knee")
        self.assertTrue(result.is_valid)

    def test_descriptive_answer_is_trimmed(self):
        result = validate(AnswerKind.CHIEF_COMPLAINT, "  Sharp pain in my lower back ")
        self.assertEqual(result.sanitized_value, "Sharp pain in my lower back")


class TestMedication(unittest.TestCase):

    def test_none_synonyms(self):
        for raw in ("no", "None", "n/a", "nothing", "کوئی نہیں"):
            with self.subTest(raw=raw):
                self.assertEqual(validate(AnswerKind.MEDICATION, raw).sanitized_value, "none")

    def test_single_character_rejected(self):
        self.assertEqual(validate(AnswerKind.MEDICATION, "x").error_code, "TOO_SHORT")

    def test_name_kept_as_typed(self):
        self.assertEqual(validate(AnswerKind.MEDICATION, " Panadol ").sanitized_value, "Panadol")


class TestYesNo(unittest.TestCase):

    def test_english_and_urdu_tokens(self):
        cases = {"Yes": "yes", "y": "yes", "جی ہاں": "yes", "ہاں": "yes", "nope": "no", "نہیں": "no"}
        for raw, expected in cases.items():
            with self.subTest(raw=raw):
                self.assertEqual(validate(AnswerKind.YES_NO, raw).sanitized_value, expected)

    def test_other_words_rejected(self):
        result = validate(AnswerKind.YES_NO, "maybe")
        self.assertFalse(result.is_valid)
        self.assertEqual(result.error_code, "INVALID_YES_NO")


class TestOtherKinds(unittest.TestCase):

    def test_blank_text_is_empty_response(self):
        self.assertEqual(validate(AnswerKind.TEXT, "   ").error_code, "EMPTY_RESPONSE")

    def test_empty_selection_is_empty_response(self):
        self.assertEqual(validate(AnswerKind.MULTI_CHOICE, []).error_code, "EMPTY_RESPONSE")

    def test_multi_choice_keeps_selected_options(self):
        result = validate(AnswerKind.MULTI_CHOICE, ["Fever", " ", "Cough"])
        self.assertEqual(result.sanitized_value, ["Fever", "Cough"])

    def test_single_choice_from_list(self):
        self.assertEqual(validate(AnswerKind.CHOICE, ["Sharp"]).sanitized_value, "Sharp")

    def test_validation_is_deterministic(self):
        first = validate(AnswerKind.SEVERITY, "12")
        second = validate(AnswerKind.SEVERITY, "12")
        self.assertEqual(first, second)


class TestMessages(unittest.TestCase):

    def test_localized_error_message(self):
        self.assertIn("0", error_message(AnswerKind.SEVERITY, Language.EN))
        self.assertEqual(error_message(AnswerKind.SEVERITY, Language.UR), "شدت 0 سے 10 کے درمیان ایک عدد ہونا چاہیے")

    def test_missing_help_text_is_empty(self):
        self.assertEqual(help_text(AnswerKind.MEDICATION, Language.EN), "")
        self.assertEqual(error_message(AnswerKind.TEXT), "")


if __name__ == "__main__":
    unittest.main()
