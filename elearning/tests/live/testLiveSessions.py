"""
Tests für Live-Sitzungen: Übersicht, Anmeldung, Fragen, Upvotes und Moderation.
"""

from datetime import timedelta

from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from elearning.models import AuditLog, LiveQuestion, LiveRSVP, LiveSession
from elearning.services import AdminActionService, LiveSessionService

from ..helpers import create_user


def create_session(title="Fragestunde", days=1):
    return LiveSession.objects.create(
        title=title,
        scheduled_at=timezone.now() + timedelta(days=days),
        join_url="https://meet.test/live",
    )


class LiveSessionServiceTests(TestCase):
    def setUp(self):
        self.service = LiveSessionService()
        self.student = create_user("student")
        self.session = create_session()

    def testUebersichtTrenntAnstehendUndVergangen(self):
        later = create_session("Später", days=5)
        for i in range(12):
            create_session(f"Alt {i}", days=-(i + 1))
        self.service.rsvp(self.student, self.session)

        sessions = self.service.list_sessions()

        upcoming = list(sessions["upcoming"])
        self.assertEqual([s.pk for s in upcoming], [self.session.pk, later.pk])
        self.assertEqual(upcoming[0].rsvp_count, 1)
        past = list(sessions["past"])
        self.assertEqual(len(past), 10)
        self.assertEqual(past[0].title, "Alt 0")

    def testAnmeldungIstIdempotent(self):
        _, created = self.service.rsvp(self.student, self.session)
        self.assertTrue(created)
        _, created = self.service.rsvp(self.student, self.session)
        self.assertFalse(created)
        self.assertEqual(LiveRSVP.objects.count(), 1)

        details = self.service.session_details(self.student, self.session)
        self.assertTrue(details["has_rsvped"])
        self.assertEqual(details["rsvp_count"], 1)

    def testFrageWirdGetrimmt(self):
        question = self.service.submit_question(self.student, self.session, "  Wie geht das?  ")
        self.assertEqual(question.text, "Wie geht das?")
        self.assertEqual(question.status, LiveQuestion.Status.PENDING)

    def testLeereFrageWirdAbgelehnt(self):
        with self.assertRaises(ValueError):
            self.service.submit_question(self.student, self.session, "   ")
        self.assertFalse(LiveQuestion.objects.exists())

    def testUpvoteNurEinmalProSchueler(self):
        question = self.service.submit_question(self.student, self.session, "Frage")
        other = create_user("other")

        question, counted = self.service.upvote_question(other, question)
        self.assertTrue(counted)
        question, counted = self.service.upvote_question(other, question)
        self.assertFalse(counted)
        question, _ = self.service.upvote_question(self.student, question)
        self.assertEqual(question.upvotes, 2)

    def testFragenReihenfolge(self):
        answered = self.service.submit_question(self.student, self.session, "Beantwortet")
        popular = self.service.submit_question(self.student, self.session, "Beliebt")
        older = self.service.submit_question(self.student, self.session, "Älter")
        pinned = self.service.submit_question(self.student, self.session, "Angeheftet")
        LiveQuestion.objects.filter(pk=popular.pk).update(upvotes=5)
        LiveQuestion.objects.filter(pk=answered.pk).update(status=LiveQuestion.Status.ANSWERED, upvotes=9)
        LiveQuestion.objects.filter(pk=pinned.pk).update(status=LiveQuestion.Status.PINNED)

        details = self.service.session_details(self.student, self.session)

        self.assertEqual(
            [q.pk for q in details["questions"]],
            [pinned.pk, popular.pk, older.pk, answered.pk],
        )


class LiveSessionAdminTests(TestCase):
    def setUp(self):
        self.service = AdminActionService()
        self.staff = create_user("staff", is_staff=True)
        self.student = create_user("student")
        self.session = create_session()
        self.question = LiveSessionService().submit_question(self.student, self.session, "Frage")

    def testSitzungAnlegen(self):
        session = self.service.create_live_session(
            self.staff,
            title="Sprechstunde",
            scheduled_at=timezone.now() + timedelta(days=3),
            join_url="https://meet.test/neu",
        )
        self.assertEqual(session.duration_minutes, 60)
        self.assertTrue(AuditLog.objects.filter(action="create_live_session", target_id=str(session.pk)).exists())

    def testBeantwortenSetztZeitstempel(self):
        question = self.service.update_question_status(self.staff, self.question, LiveQuestion.Status.PINNED)
        self.assertIsNone(question.answered_at)

        question = self.service.update_question_status(self.staff, self.question, LiveQuestion.Status.ANSWERED)
        question.refresh_from_db()
        self.assertEqual(question.status, LiveQuestion.Status.ANSWERED)
        self.assertIsNotNone(question.answered_at)

    def testUnbekannterStatus(self):
        with self.assertRaises(ValueError):
            self.service.update_question_status(self.staff, self.question, "deleted")

    def testAufzeichnungHinzufuegen(self):
        self.service.add_session_replay(self.staff, self.session, "https://videos.test/replay", notes="Zusammenfassung")
        self.session.refresh_from_db()
        self.assertEqual(self.session.replay_url, "https://videos.test/replay")
        self.assertEqual(self.session.notes, "Zusammenfassung")

        # Ohne Notizen bleiben die bisherigen erhalten
        self.service.add_session_replay(self.staff, self.session, "https://videos.test/replay2")
        self.session.refresh_from_db()
        self.assertEqual(self.session.notes, "Zusammenfassung")


class LiveSessionViewTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.staff = create_user("staff", is_staff=True)
        self.student = create_user("student")
        self.session = create_session()

    def testAnmeldungPerApi(self):
        self.client.force_authenticate(self.student)
        url = f"/api/elearning/live/sessions/{self.session.pk}/rsvp/"

        self.assertEqual(self.client.post(url).status_code, status.HTTP_201_CREATED)
        self.assertEqual(self.client.post(url).status_code, status.HTTP_200_OK)

        response = self.client.get(f"/api/elearning/live/sessions/{self.session.pk}/")
        self.assertTrue(response.json()["has_rsvped"])
        self.assertEqual(response.json()["rsvp_count"], 1)

    def testFrageUndUpvotePerApi(self):
        self.client.force_authenticate(self.student)
        response = self.client.post(
            f"/api/elearning/live/sessions/{self.session.pk}/questions/",
            {"text": "  Was ist ein Generator? "},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.json()["text"], "Was ist ein Generator?")

        question_id = response.json()["id"]
        response = self.client.post(f"/api/elearning/live/questions/{question_id}/upvote/")
        self.assertEqual(response.json(), {"id": question_id, "upvotes": 1, "counted": True})

    def testLeereFragePerApi(self):
        self.client.force_authenticate(self.student)
        response = self.client.post(
            f"/api/elearning/live/sessions/{self.session.pk}/questions/",
            {"text": "   "},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def testUebersichtPerApi(self):
        self.client.force_authenticate(self.student)
        response = self.client.get("/api/elearning/live/sessions/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["upcoming"][0]["id"], self.session.pk)
        self.assertEqual(response.json()["past"], [])

    def testModerationNurFuerStaff(self):
        question = LiveSessionService().submit_question(self.student, self.session, "Frage")
        url = f"/api/elearning/admin/live-questions/{question.pk}/status/"

        self.client.force_authenticate(self.student)
        self.assertEqual(
            self.client.patch(url, {"status": "answered"}, format="json").status_code,
            status.HTTP_403_FORBIDDEN,
        )

        self.client.force_authenticate(self.staff)
        response = self.client.patch(url, {"status": "answered"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["status"], "answered")
        self.assertIsNotNone(response.json()["answered_at"])

    def testSitzungUndAufzeichnungPerApi(self):
        self.client.force_authenticate(self.staff)
        response = self.client.post(
            "/api/elearning/admin/live-sessions/",
            {
                "title": "Sprechstunde",
                "scheduled_at": (timezone.now() + timedelta(days=2)).isoformat(),
                "join_url": "https://meet.test/neu",
                "duration_minutes": 90,
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        session_id = response.json()["id"]
        self.assertEqual(response.json()["duration_minutes"], 90)

        response = self.client.post(
            f"/api/elearning/admin/live-sessions/{session_id}/replay/",
            {"replay_url": "https://videos.test/replay"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["replay_url"], "https://videos.test/replay")
