"""
HTTP adapter smoke tests.

Run with: python -m pytest tests/test_api.py -v
"""

from __future__ import annotations

import unittest

from fastapi.testclient import TestClient

from triage_intake.config import Settings
from triage_intake.main import create_app
from triage_intake.services import IntakeSessionService


class TestIntakeAPI(unittest.TestCase):

    def setUp(self):
        self.service = IntakeSessionService()
        self.client = TestClient(create_app(settings=Settings(), service=self.service))

    def _start(self, complaint: str = "CHEST_PAIN", **extra) -> dict:
        response = self.client.post("/api/intake/start", json={"complaint_type": complaint, **extra})
        self.assertEqual(response.status_code, 200)
        return response.json()

    def test_root(self):
        self.assertEqual(self.client.get("/").status_code, 200)

    def test_start(self):
        body = self._start(visit_id="api-1", language="ur")
        self.assertEqual(body["visit_id"], "api-1")
        self.assertEqual(body["language"], "ur")
        self.assertTrue(body["requires_body_map"])
        self.assertEqual(body["first_question"]["id"], "shortness_of_breath")
        self.assertEqual(body["first_question"]["phase"], "SAFETY")
        self.assertEqual(body["progress"]["phase_progress"], "0/3")

    def test_invalid_complaint_type(self):
        response = self.client.post("/api/intake/start", json={"complaint_type": "TOOTHACHE"})
        self.assertEqual(response.status_code, 422)

    def test_body_region_once(self):
        visit_id = self._start()["visit_id"]
        response = self.client.post(f"/api/intake/{visit_id}/body-region", json={"region": "CHEST"})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["side"], "MIDLINE")
        self.assertEqual(body["region_label"], "Chest")
        self.assertEqual(body["added_questions"], ["radiation_to_arm", "sweating", "worse_with_exertion"])

        again = self.client.post(f"/api/intake/{visit_id}/body-region", json={"region": "CHEST"})
        self.assertEqual(again.status_code, 409)
        self.assertEqual(again.json()["error"], "BodyRegionAlreadySetError")

    def test_invalid_answer(self):
        visit_id = self._start()["visit_id"]
        response = self.client.post(
            f"/api/intake/{visit_id}/answer",
            json={"question_id": "shortness_of_breath", "answer": "perhaps"},
        )
        body = response.json()
        self.assertEqual(response.status_code, 200)
        self.assertFalse(body["accepted"])
        self.assertEqual(body["validation"]["error_code"], "INVALID_YES_NO")
        self.assertEqual(body["next_question"]["id"], "shortness_of_breath")

    def test_emergency_answer(self):
        visit_id = self._start()["visit_id"]
        response = self.client.post(
            f"/api/intake/{visit_id}/answer",
            json={"question_id": "shortness_of_breath", "answer": "yes and I can't breathe"},
        )
        body = response.json()
        self.assertEqual(body["emergency"]["action"], "STOP_AND_EMERGENCY")
        self.assertFalse(body["emergency"]["allow_continue"])
        self.assertTrue(body["is_complete"])
        self.assertIsNone(body["next_question"])

        triage = self.client.get(f"/api/intake/{visit_id}/triage").json()
        self.assertEqual(triage["level"], "IMMEDIATE")
        self.assertTrue(triage["emergency_detected"])
        self.assertEqual(triage["red_flags"], ["can't breathe"])

        closed = self.client.post(
            f"/api/intake/{visit_id}/answer",
            json={"question_id": "loss_of_consciousness", "answer": "no"},
        )
        self.assertEqual(closed.status_code, 409)

    def test_unknown_question_and_visit(self):
        visit_id = self._start()["visit_id"]
        response = self.client.post(
            f"/api/intake/{visit_id}/answer",
            json={"question_id": "not_a_question", "answer": "no"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.client.get("/api/intake/missing/progress").status_code, 404)

    def test_progress_and_triage(self):
        visit_id = self._start()["visit_id"]
        self.client.post(
            f"/api/intake/{visit_id}/answer",
            json={"question_id": "shortness_of_breath", "answer": "no"},
        )
        progress = self.client.get(f"/api/intake/{visit_id}/progress").json()
        self.assertEqual(progress["phase_progress"], "1/3")
        self.assertEqual(progress["total_answered"], 1)

        triage = self.client.get(f"/api/intake/{visit_id}/triage").json()
        self.assertEqual(triage["level"], "SEMI_URGENT")
        self.assertTrue(triage["summary"].startswith("Chief Complaint: CHEST PAIN"))

    def test_narrative_without_llm_uses_fallback(self):
        visit_id = self._start()["visit_id"]
        response = self.client.post(f"/api/intake/{visit_id}/narrative")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["fallback_used"])
        self.assertEqual(body["narrative"]["confidenceLevel"], "LOW")
        self.assertTrue(body["narrative"]["summary"].startswith("Chief Complaint: CHEST PAIN"))

    def test_abandon(self):
        visit_id = self._start()["visit_id"]
        self.assertEqual(self.client.delete(f"/api/intake/{visit_id}").status_code, 204)
        self.assertEqual(self.client.get(f"/api/intake/{visit_id}/progress").status_code, 404)


if __name__ == "__main__":
    unittest.main()
