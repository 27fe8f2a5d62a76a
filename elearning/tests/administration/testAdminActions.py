"""
Tests für die Staff-Aktionen und das Audit-Log.
"""

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from elearning.models import (
    AdminNote,
    Affiliate,
    AuditLog,
    Certificate,
    MilestoneAward,
    ModuleProgress,
    Payout,
    QuizAttempt,
)
from elearning.services import AdminActionService, ProgressionService

from ..helpers import answers_for, create_course, create_milestones, create_quiz, create_user


class AdminActionServiceTests(TestCase):
    def setUp(self):
        self.service = AdminActionService()
        self.progression = ProgressionService()
        self.staff = create_user("staff", is_staff=True)
        self.student = create_user("student")
        self.course, self.modules = create_course(modules=3)
        create_milestones(self.course)
        self.quiz = create_quiz(self.modules[0], questions=2)
        self.progression.initialize_module_progress(self.student, self.course)

    def status_of(self, module):
        return ModuleProgress.objects.get(student=self.student, module=module).status

    def testModulFreischalten(self):
        self.service.unlock_module(self.staff, self.student, self.modules[2])
        self.assertEqual(self.status_of(self.modules[2]), ModuleProgress.Status.UNLOCKED)
        self.assertEqual(self.status_of(self.modules[1]), ModuleProgress.Status.LOCKED)
        log = AuditLog.objects.get(action="unlock_module")
        self.assertEqual(log.actor, self.staff)
        self.assertEqual(log.target_id, str(self.student.pk))

    def testModulAbschliessenSchaltetNaechstesFrei(self):
        awards = self.service.complete_module(self.staff, self.student, self.modules[0])
        self.assertEqual(self.status_of(self.modules[0]), ModuleProgress.Status.COMPLETED)
        self.assertEqual(self.status_of(self.modules[1]), ModuleProgress.Status.UNLOCKED)
        self.assertTrue(awards)

    def testQuizZuruecksetzen(self):
        self.progression.submit_quiz(self.student, self.quiz, answers_for(self.quiz, 0))
        self.progression.submit_quiz(self.student, self.quiz, answers_for(self.quiz, 0))

        deleted = self.service.reset_quiz(self.staff, self.student, self.quiz)
        self.assertEqual(deleted, 2)

        result = self.progression.submit_quiz(self.student, self.quiz, answers_for(self.quiz, 0))
        self.assertEqual(result.attempt.attempt_number, 1)

    def testFortschrittZuruecksetzen(self):
        self.progression.submit_quiz(self.student, self.quiz, answers_for(self.quiz, 2))
        self.service.grant_certificate(self.staff, self.student, self.course)

        counts = self.service.reset_progress(self.staff, self.student, self.course)

        self.assertEqual(counts["module_progress"], 3)
        self.assertEqual(counts["quiz_attempts"], 1)
        self.assertEqual(counts["certificates"], 1)
        self.assertGreater(counts["milestone_awards"], 0)
        self.assertFalse(QuizAttempt.objects.filter(student=self.student).exists())
        self.assertFalse(MilestoneAward.objects.filter(student=self.student).exists())
        self.assertFalse(Certificate.objects.filter(student=self.student).exists())
        self.assertEqual(self.status_of(self.modules[0]), ModuleProgress.Status.UNLOCKED)
        self.assertEqual(self.status_of(self.modules[1]), ModuleProgress.Status.LOCKED)
        self.assertTrue(AuditLog.objects.filter(action="reset_progress").exists())

    def testBestehensgrenzeAusserhalbDesBereichs(self):
        with self.assertRaises(ValueError):
            self.service.update_passing_score(self.staff, self.course, 0)
        self.service.update_passing_score(self.staff, self.course, 70)
        self.course.refresh_from_db()
        self.assertEqual(self.course.passing_score, 70)

    def testAuszahlung(self):
        affiliate = Affiliate.objects.create(user=create_user("partner"), code="REF-PARTNE-0001")
        self.service.update_affiliate_status(self.staff, affiliate, Affiliate.Status.APPROVED)
        payout = self.service.create_payout(self.staff, affiliate, 5000)
        self.service.mark_payout_paid(self.staff, payout)

        payout.refresh_from_db()
        self.assertEqual(payout.status, Payout.Status.PAID)
        self.assertIsNotNone(payout.paid_at)
        self.assertEqual(
            set(AuditLog.objects.values_list("action", flat=True)),
            {"update_affiliate_status", "create_payout", "mark_payout_paid"},
        )


class AdminViewTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.staff = create_user("staff", is_staff=True)
        self.student = create_user("student")
        self.course, self.modules = create_course(modules=2)
        ProgressionService().initialize_module_progress(self.student, self.course)

    def testNurStaffDarfAktionenAusfuehren(self):
        self.client.force_authenticate(self.student)
        response = self.client.post(
            f"/api/elearning/admin/students/{self.student.pk}/modules/{self.modules[1].pk}/unlock/"
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def testModulFreischaltenPerApi(self):
        self.client.force_authenticate(self.staff)
        response = self.client.post(
            f"/api/elearning/admin/students/{self.student.pk}/modules/{self.modules[1].pk}/unlock/"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["status"], ModuleProgress.Status.UNLOCKED)

    def testFortschrittZuruecksetzenPerApi(self):
        self.client.force_authenticate(self.staff)
        response = self.client.post(
            f"/api/elearning/admin/students/{self.student.pk}/courses/{self.course.pk}/reset-progress/"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["deleted"]["module_progress"], 2)

    def testUngueltigeBestehensgrenze(self):
        self.client.force_authenticate(self.staff)
        response = self.client.patch(
            f"/api/elearning/admin/courses/{self.course.pk}/passing-score/",
            {"passing_score": 101},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class AdminNoteTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.staff = create_user("staff", is_staff=True, first_name="Sam")
        self.student = create_user("student")
        self.service = AdminActionService()

    def testNotizAnlegenUndLoeschen(self):
        note = self.service.add_note(self.staff, self.student, "  Hat nach Ratenzahlung gefragt ")
        self.assertEqual(note.content, "Hat nach Ratenzahlung gefragt")
        log = AuditLog.objects.get(action="add_note")
        self.assertEqual(log.target_type, "user")
        self.assertEqual(log.target_id, str(self.student.pk))
        self.assertEqual(log.details, {"note_id": note.pk})

        note_id = note.pk
        self.service.delete_note(self.staff, note)
        self.assertFalse(AdminNote.objects.exists())
        log = AuditLog.objects.get(action="delete_note")
        self.assertEqual(log.target_id, str(self.student.pk))
        self.assertEqual(log.details, {"note_id": note_id})

    def testLeereNotiz(self):
        with self.assertRaises(ValueError):
            self.service.add_note(self.staff, self.student, "  ")

    def testNotizenNeuesteZuerstPerApi(self):
        self.service.add_note(self.staff, self.student, "Erste")
        self.service.add_note(self.staff, self.student, "Zweite")
        self.client.force_authenticate(self.staff)

        response = self.client.get(f"/api/elearning/admin/students/{self.student.pk}/notes/")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([n["content"] for n in response.json()], ["Zweite", "Erste"])
        self.assertEqual(response.json()[0]["author_name"], "Sam")

    def testNotizPerApiAnlegenUndLoeschen(self):
        self.client.force_authenticate(self.staff)
        response = self.client.post(
            f"/api/elearning/admin/students/{self.student.pk}/notes/",
            {"content": "Support-Anruf"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        response = self.client.delete(f"/api/elearning/admin/notes/{response.json()['id']}/")
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(AdminNote.objects.exists())

    def testNotizenNurFuerStaff(self):
        self.client.force_authenticate(self.student)
        response = self.client.get(f"/api/elearning/admin/students/{self.student.pk}/notes/")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
