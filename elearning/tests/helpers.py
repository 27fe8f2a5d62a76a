"""
Gemeinsame Test-Daten für die E-Learning Tests.
"""

from django.contrib.auth.models import User

from elearning.models import Course, Module, Quiz, Question, Milestone


def create_user(username, **kwargs):
    return User.objects.create_user(username=username, password="testPassword", **kwargs)


def create_course(modules=4, bonus_modules=0, price=30000, installments=3, passing_score=80, slug="python-kurs"):
    """
    Published course with ``modules`` required and ``bonus_modules`` bonus
    modules, ordered from 1. Returns (course, [modules]).
    """
    course = Course.objects.create(
        title="Python Kurs",
        slug=slug,
        price=price,
        installments_count=installments,
        passing_score=passing_score,
        is_published=True,
    )
    created = []
    for i in range(modules + bonus_modules):
        created.append(
            Module.objects.create(
                course=course,
                title=f"Modul {i + 1}",
                order=i + 1,
                is_bonus=i >= modules,
            )
        )
    return course, created


def create_quiz(module, questions=5, passing_score=None):
    """Quiz whose correct option is always ``a``."""
    quiz = Quiz.objects.create(module=module, title=f"Quiz {module.title}", passing_score=passing_score)
    for i in range(questions):
        Question.objects.create(
            quiz=quiz,
            prompt=f"Frage {i + 1}",
            options=[{"id": "a", "label": "Richtig"}, {"id": "b", "label": "Falsch"}],
            correct_option_id="a",
            order=i + 1,
        )
    return quiz


def answers_for(quiz, correct):
    """Answers with the first ``correct`` questions right and the rest wrong."""
    return [
        {"question_id": question.id, "selected_option_id": "a" if i < correct else "b"}
        for i, question in enumerate(quiz.questions.order_by("order"))
    ]


def create_milestones(course):
    return {
        trigger: Milestone.objects.create(course=course, trigger_type=trigger, title=label)
        for trigger, label in Milestone.Trigger.choices
    }
