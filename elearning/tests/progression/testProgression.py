"""
Tests für Modul-Freischaltung, Quiz-Bewertung und Meilensteine.
"""

from decimal import Decimal

from django.test import TestCase

from elearning.exceptions import ModuleLocked
from elearning.models import Milestone, MilestoneAward, ModuleProgress, QuizAttempt
from elearning.services import ProgressionService
from elearning.services.progression import calculate_score, grade_answers

from ..helpers import answers_for, create_course, create_milestones, create_quiz, create_user


class ScoreCalculationTests(TestCase):
    def testScoreWirdKaufmaennischGerundet(self):
        self.assertEqual(calculate_score(3, 5), Decimal("60.00"))
        self.assertEqual(calculate_score(2, 3), Decimal("66.67"))
        self.assertEqual(calculate_score(0, 0), Decimal("0.00"))

    def testNurErsteAntwortProFrageZaehlt(self):
        course, modules = create_course(modules=1)
        quiz = create_quiz(modules[0], questions=1)
        question = quiz.questions.get()
        graded = grade_answers(
            [question],
            [
                {"question_id": question.id, "selected_option_id": "b"},
                {"question_id": question.id, "selected_option_id": "a"},
            ],
        )
        self.assertEqual(len(graded), 1)
        self.assertFalse(graded[0]["correct"])


class InitializeProgressTests(TestCase):
    def setUp(self):
        self.service = ProgressionService()
        self.student = create_user("student")
        self.course, self.modules = create_course(modules=3, bonus_modules=1)

    def statuses(self):
        return dict(
            ModuleProgress.objects.filter(student=self.student).values_list("module__order", "status")
        )

    def testErstesPflichtmodulUndBonusSindFrei(self):
        created = self.service.initialize_module_progress(self.student, self.course)
        self.assertEqual(created, 4)
        self.assertEqual(
            self.statuses(),
            {
                1: ModuleProgress.Status.UNLOCKED,
                2: ModuleProgress.Status.LOCKED,
                3: ModuleProgress.Status.LOCKED,
                4: ModuleProgress.Status.UNLOCKED,
            },
        )

    def testZweiterAufrufUeberschreibtNichts(self):
        self.service.initialize_module_progress(self.student, self.course)
        self.service.advance_module(self.student, self.modules[0])

        created = self.service.initialize_module_progress(self.student, self.course)

        self.assertEqual(created, 0)
        self.assertEqual(ModuleProgress.objects.filter(student=self.student).count(), 4)
        self.assertEqual(self.statuses()[1], ModuleProgress.Status.COMPLETED)
        self.assertEqual(self.statuses()[2], ModuleProgress.Status.UNLOCKED)


class SubmitQuizTests(TestCase):
    def setUp(self):
        self.service = ProgressionService()
        self.student = create_user("student")
        self.course, self.modules = create_course(modules=2, bonus_modules=1)
        self.quiz = create_quiz(self.modules[0], questions=5)
        self.service.initialize_module_progress(self.student, self.course)

    def testDreiVonFuenfIstNichtBestanden(self):
        result = self.service.submit_quiz(self.student, self.quiz, answers_for(self.quiz, 3))

        self.assertEqual(result.score, Decimal("60.00"))
        self.assertFalse(result.passed)
        self.assertEqual(result.passing_score, 80)
        self.assertEqual(result.attempt.attempt_number, 1)
        second = ModuleProgress.objects.get(student=self.student, module=self.modules[1])
        self.assertEqual(second.status, ModuleProgress.Status.LOCKED)

    def testVersucheWerdenFortlaufendNummeriert(self):
        for expected in (1, 2, 3):
            result = self.service.submit_quiz(self.student, self.quiz, answers_for(self.quiz, 1))
            self.assertEqual(result.attempt.attempt_number, expected)
        self.assertEqual(
            list(
                QuizAttempt.objects.filter(student=self.student, quiz=self.quiz)
                .order_by("attempt_number")
                .values_list("attempt_number", flat=True)
            ),
            [1, 2, 3],
        )

    def testBestandenSchaltetNaechstesModulFrei(self):
        result = self.service.submit_quiz(self.student, self.quiz, answers_for(self.quiz, 4))

        self.assertTrue(result.passed)
        self.assertEqual(result.score, Decimal("80.00"))
        first = ModuleProgress.objects.get(student=self.student, module=self.modules[0])
        second = ModuleProgress.objects.get(student=self.student, module=self.modules[1])
        self.assertEqual(first.status, ModuleProgress.Status.COMPLETED)
        self.assertIsNotNone(first.completed_at)
        self.assertEqual(second.status, ModuleProgress.Status.UNLOCKED)

    def testEigeneBestehensgrenzeDesQuiz(self):
        self.quiz.passing_score = 60
        self.quiz.save()
        result = self.service.submit_quiz(self.student, self.quiz, answers_for(self.quiz, 3))
        self.assertTrue(result.passed)
        self.assertEqual(result.passing_score, 60)

    def testGesperrtesModulWirftModuleLocked(self):
        locked_quiz = create_quiz(self.modules[1], questions=2)
        with self.assertRaises(ModuleLocked):
            self.service.submit_quiz(self.student, locked_quiz, answers_for(locked_quiz, 2))
        self.assertFalse(QuizAttempt.objects.filter(quiz=locked_quiz).exists())

    def testNichtEingeschriebenerStudentWirdAbgewiesen(self):
        other = create_user("other")
        with self.assertRaises(ModuleLocked):
            self.service.submit_quiz(other, self.quiz, answers_for(self.quiz, 5))

    def testBonusModulSchaltetNichtsFrei(self):
        bonus = self.modules[2]
        self.service.advance_module(self.student, bonus)
        second = ModuleProgress.objects.get(student=self.student, module=self.modules[1])
        self.assertEqual(second.status, ModuleProgress.Status.LOCKED)


class MilestoneTests(TestCase):
    def setUp(self):
        self.service = ProgressionService()
        self.student = create_user("student")
        self.course, self.modules = create_course(modules=4)
        self.milestones = create_milestones(self.course)
        self.service.initialize_module_progress(self.student, self.course)

    def awarded(self):
        return set(
            MilestoneAward.objects.filter(student=self.student).values_list(
                "milestone__trigger_type", flat=True
            )
        )

    def testMeilensteineEntlangDesKurses(self):
        T = Milestone.Trigger
        self.service.advance_module(self.student, self.modules[0])
        self.assertEqual(self.awarded(), {T.FIRST_MODULE, T.QUARTER})

        self.service.advance_module(self.student, self.modules[1])
        self.assertEqual(self.awarded(), {T.FIRST_MODULE, T.QUARTER, T.HALF})

        self.service.advance_module(self.student, self.modules[2])
        self.service.advance_module(self.student, self.modules[3])
        self.assertEqual(
            self.awarded(),
            {T.FIRST_MODULE, T.QUARTER, T.HALF, T.THREE_QUARTER, T.COURSE_COMPLETE},
        )

    def testMeilensteinWirdNurEinmalVergeben(self):
        first = self.service.advance_module(self.student, self.modules[0])
        again = self.service.advance_module(self.student, self.modules[0])
        self.assertEqual(len(first), 2)
        self.assertEqual(again, [])
        self.assertEqual(MilestoneAward.objects.filter(student=self.student).count(), 2)

    def testErsterQuizErfolg(self):
        quiz = create_quiz(self.modules[0], questions=2)
        result = self.service.submit_quiz(self.student, quiz, answers_for(quiz, 2))
        triggers = {award.milestone.trigger_type for award in result.new_milestones}
        self.assertIn(Milestone.Trigger.FIRST_QUIZ_PASS, triggers)

    def testOhneDefinitionKeinMeilenstein(self):
        Milestone.objects.filter(course=self.course).delete()
        self.assertEqual(self.service.advance_module(self.student, self.modules[0]), [])


class StudentProgressTests(TestCase):
    def testUebersichtZaehltNurPflichtmodule(self):
        service = ProgressionService()
        student = create_user("student")
        course, modules = create_course(modules=4, bonus_modules=1)
        create_quiz(modules[0], questions=2)
        service.initialize_module_progress(student, course)
        service.advance_module(student, modules[0])
        service.advance_module(student, modules[4])

        progress = service.student_progress(student, course)

        self.assertEqual(progress["completed_required"], 1)
        self.assertEqual(progress["total_required"], 4)
        self.assertEqual(progress["percent_complete"], Decimal("25.00"))
        self.assertEqual([m["order"] for m in progress["modules"]], [1, 2, 3, 4, 5])
        self.assertEqual(progress["modules"][0]["quiz"]["passing_score"], 80)
        self.assertIsNone(progress["modules"][1]["quiz"])
