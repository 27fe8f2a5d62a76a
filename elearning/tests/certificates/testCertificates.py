"""
Tests für die Ausstellung und Verifizierung von Zertifikaten.
"""

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from elearning.exceptions import NotEligible, NotFound
from elearning.models import Certificate
from elearning.services import CertificateService, ProgressionService

from ..helpers import answers_for, create_course, create_quiz, create_user


class CertificateServiceTests(TestCase):
    def setUp(self):
        self.service = CertificateService()
        self.progression = ProgressionService()
        self.student = create_user("student", first_name="Max", last_name="Muster")
        self.course, self.modules = create_course(modules=2, bonus_modules=1)
        self.quizzes = [create_quiz(m, questions=2) for m in self.modules[:2]]
        self.progression.initialize_module_progress(self.student, self.course)

    def finish_course(self):
        for quiz in self.quizzes:
            self.progression.submit_quiz(self.student, quiz, answers_for(quiz, 2))

    def testOffeneModuleSindNichtBerechtigt(self):
        self.progression.submit_quiz(self.student, self.quizzes[0], answers_for(self.quizzes[0], 2))
        with self.assertRaises(NotEligible):
            self.service.grant_certificate(self.student, self.course)
        self.assertFalse(Certificate.objects.exists())

    def testBonusModulIstNichtErforderlich(self):
        self.finish_course()
        self.assertTrue(self.service.is_eligible(self.student, self.course))

    def testAbgeschlossenOhneBestandenesQuiz(self):
        for module in self.modules[:2]:
            self.progression.advance_module(self.student, module)
        self.assertFalse(self.service.is_eligible(self.student, self.course))

    def testZertifikatWirdHoechstensEinmalAusgestellt(self):
        self.finish_course()
        first, created = self.service.grant_certificate(self.student, self.course)
        second, created_again = self.service.grant_certificate(self.student, self.course)

        self.assertTrue(created)
        self.assertFalse(created_again)
        self.assertEqual(first.pk, second.pk)
        self.assertTrue(first.certificate_code.startswith("CERT-"))
        self.assertEqual(len(first.certificate_code), len("CERT-") + 8)
        self.assertEqual(Certificate.objects.count(), 1)

    def testAdminUeberspringtPruefung(self):
        certificate, created = self.service.grant_certificate(self.student, self.course, override=True)
        self.assertTrue(created)
        self.assertTrue(certificate.issued_by_admin)

    def testVerifizierung(self):
        certificate, _ = self.service.grant_certificate(self.student, self.course, override=True)
        self.assertEqual(self.service.verify_certificate(certificate.certificate_code).pk, certificate.pk)
        with self.assertRaises(NotFound):
            self.service.verify_certificate("CERT-UNKNOWN")


class CertificateViewTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.student = create_user("student", first_name="Max", last_name="Muster")
        self.course, self.modules = create_course(modules=1)
        ProgressionService().initialize_module_progress(self.student, self.course)

    def testNichtBerechtigtGibt400(self):
        self.client.force_authenticate(self.student)
        response = self.client.post(f"/api/elearning/courses/{self.course.pk}/certificate/")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def testAbgeschlossenerKursGibtZertifikat(self):
        ProgressionService().advance_module(self.student, self.modules[0])
        self.client.force_authenticate(self.student)

        response = self.client.post(f"/api/elearning/courses/{self.course.pk}/certificate/")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        again = self.client.post(f"/api/elearning/courses/{self.course.pk}/certificate/")
        self.assertEqual(again.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["certificate_code"], again.json()["certificate_code"])

    def testOeffentlicheVerifizierung(self):
        certificate, _ = CertificateService().grant_certificate(self.student, self.course, override=True)

        response = self.client.get(f"/api/elearning/certificates/{certificate.certificate_code}/verify/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        body = response.json()
        self.assertTrue(body["valid"])
        self.assertEqual(body["student_name"], "Max Muster")
        self.assertEqual(body["course_title"], self.course.title)

        missing = self.client.get("/api/elearning/certificates/CERT-NOPE0000/verify/")
        self.assertEqual(missing.status_code, status.HTTP_404_NOT_FOUND)
