"""
Tests für den Lektionsfortschritt (Abschluss und Videofortschritt).
"""

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from elearning.exceptions import ModuleLocked
from elearning.models import Lesson, LessonProgress
from elearning.services import AdminActionService, LessonService, ProgressionService

from ..helpers import create_course, create_user


class LessonServiceTests(TestCase):
    def setUp(self):
        self.service = LessonService()
        self.student = create_user("student")
        self.course, self.modules = create_course(modules=2)
        self.lesson = Lesson.objects.create(module=self.modules[0], title="Einführung", order=1)
        self.locked_lesson = Lesson.objects.create(module=self.modules[1], title="Schleifen", order=1)
        ProgressionService().initialize_module_progress(self.student, self.course)

    def testLektionAbschliessen(self):
        progress = self.service.mark_lesson_complete(self.student, self.lesson)

        self.assertTrue(progress.completed)
        self.assertIsNotNone(progress.completed_at)
        self.assertEqual(progress.watched_percent, 100.0)

    def testErneuterAbschlussBehaeltZeitstempel(self):
        first = self.service.mark_lesson_complete(self.student, self.lesson)
        second = self.service.mark_lesson_complete(self.student, self.lesson)
        self.assertEqual(first.completed_at, second.completed_at)
        self.assertEqual(LessonProgress.objects.count(), 1)

    def testVideofortschrittUnterSchwelle(self):
        progress = self.service.update_video_progress(self.student, self.lesson, 50)
        self.assertFalse(progress.completed)
        self.assertEqual(progress.watched_percent, 50.0)

    def testVideofortschrittAbNeunzigProzentSchliesstAb(self):
        progress = self.service.update_video_progress(self.student, self.lesson, 90)
        self.assertTrue(progress.completed)
        self.assertIsNotNone(progress.completed_at)
        self.assertEqual(progress.watched_percent, 90.0)

    def testZurueckspulenVerliertKeinenFortschritt(self):
        self.service.update_video_progress(self.student, self.lesson, 95)
        progress = self.service.update_video_progress(self.student, self.lesson, 20)

        self.assertEqual(progress.watched_percent, 95.0)
        self.assertTrue(progress.completed)

    def testAktivitaetWirdAktualisiert(self):
        self.assertIsNone(self.student.profile.last_activity_at)
        self.service.update_video_progress(self.student, self.lesson, 10)
        self.student.profile.refresh_from_db()
        self.assertIsNotNone(self.student.profile.last_activity_at)

    def testGesperrtesModul(self):
        with self.assertRaises(ModuleLocked):
            self.service.mark_lesson_complete(self.student, self.locked_lesson)
        with self.assertRaises(ModuleLocked):
            self.service.update_video_progress(self.student, self.locked_lesson, 95)
        self.assertFalse(LessonProgress.objects.exists())

    def testLektionenImFortschrittsueberblick(self):
        self.service.update_video_progress(self.student, self.lesson, 40)
        overview = ProgressionService().student_progress(self.student, self.course)

        lessons = overview["modules"][0]["lessons"]
        self.assertEqual(len(lessons), 1)
        self.assertEqual(lessons[0]["watched_percent"], 40.0)
        self.assertFalse(lessons[0]["completed"])
        self.assertEqual(overview["modules"][1]["lessons"][0]["watched_percent"], 0.0)

    def testFortschrittZuruecksetzenLoeschtLektionen(self):
        self.service.mark_lesson_complete(self.student, self.lesson)
        counts = AdminActionService().reset_progress(
            create_user("staff", is_staff=True), self.student, self.course
        )
        self.assertEqual(counts["lesson_progress"], 1)
        self.assertFalse(LessonProgress.objects.exists())


class LessonViewTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.student = create_user("student")
        self.course, self.modules = create_course(modules=2)
        self.lesson = Lesson.objects.create(
            module=self.modules[0], title="Einführung", order=1, video_url="https://videos.test/1"
        )
        self.locked_lesson = Lesson.objects.create(module=self.modules[1], title="Schleifen", order=1)
        ProgressionService().initialize_module_progress(self.student, self.course)
        self.client.force_authenticate(self.student)

    def testLektionAbrufen(self):
        response = self.client.get(f"/api/elearning/lessons/{self.lesson.pk}/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["title"], "Einführung")
        self.assertIsNone(response.json()["progress"])

    def testVideofortschrittPerApi(self):
        response = self.client.post(
            f"/api/elearning/lessons/{self.lesson.pk}/video-progress/",
            {"watched_percent": 92.5},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.json()["completed"])
        self.assertEqual(response.json()["watched_percent"], 92.5)

    def testUngueltigerVideofortschritt(self):
        response = self.client.post(
            f"/api/elearning/lessons/{self.lesson.pk}/video-progress/",
            {"watched_percent": "viel"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def testAbschlussPerApi(self):
        response = self.client.post(f"/api/elearning/lessons/{self.lesson.pk}/complete/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.json()["completed"])

    def testGesperrteLektionPerApi(self):
        response = self.client.post(f"/api/elearning/lessons/{self.locked_lesson.pk}/complete/")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["detail"].code, "module_locked")
