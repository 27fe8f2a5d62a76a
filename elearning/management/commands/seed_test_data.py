import logging
from django.core.management.base import BaseCommand
from django.db import transaction
from django.contrib.auth.models import User

from ...models import (
    Course,
    Module,
    Quiz,
    Question,
    Milestone,
    Enrollment,
    Affiliate,
    Payment,
)
from ...services import EnrollmentService

# Configure logger
logger = logging.getLogger(__name__)

COURSE_SLUG = "python-data-academy"

# Modul-Titel in Reihenfolge; (Titel, Bonus?)
COURSE_MODULES = [
    ("Python Grundlagen", False),
    ("Python Datenstrukturen", False),
    ("Python Funktionen Deep Dive", False),
    ("Pandas Grundlagen", False),
    ("Datenvisualisierung mit Matplotlib", False),
    ("Bonus: Git & GitHub Basics", True),
]

# Fragen pro Modul: (Frage, Optionen, richtige Option)
QUIZ_QUESTIONS = {
    "Python Grundlagen": [
        ("Welcher Datentyp ist 3.14?", ["int", "float", "str"], "float"),
        ("Wie gibt man Text aus?", ["echo()", "print()", "write()"], "print()"),
        ("Welches Keyword definiert eine Bedingung?", ["if", "for", "def"], "if"),
    ],
    "Python Datenstrukturen": [
        ("Welche Struktur ist unveränderlich?", ["list", "tuple", "dict"], "tuple"),
        ("Womit greift man auf einen Dict-Wert zu?", ["Index", "Key", "Slice"], "Key"),
        ("Welche Struktur enthält keine Duplikate?", ["set", "list", "tuple"], "set"),
    ],
    "Python Funktionen Deep Dive": [
        ("Welches Keyword definiert eine Funktion?", ["func", "def", "lambda"], "def"),
        ("Was sammelt *args?", ["Keyword-Argumente", "Positionsargumente", "Rückgabewerte"], "Positionsargumente"),
    ],
    "Pandas Grundlagen": [
        ("Wie heißt die 2D-Struktur in Pandas?", ["Series", "DataFrame", "Panel"], "DataFrame"),
        ("Womit liest man eine CSV-Datei?", ["pd.read_csv", "pd.open", "pd.load"], "pd.read_csv"),
    ],
    "Datenvisualisierung mit Matplotlib": [
        ("Womit zeigt man einen Plot an?", ["plt.show()", "plt.draw()", "plt.open()"], "plt.show()"),
        ("Welche Funktion erzeugt ein Balkendiagramm?", ["plt.bar", "plt.pie", "plt.hist"], "plt.bar"),
    ],
}

MILESTONES = [
    (Milestone.Trigger.FIRST_MODULE, "Erster Schritt", "🚀"),
    (Milestone.Trigger.FIRST_QUIZ_PASS, "Quiz bestanden", "✅"),
    (Milestone.Trigger.QUARTER, "25% geschafft", "🌱"),
    (Milestone.Trigger.HALF, "Halbzeit", "🔥"),
    (Milestone.Trigger.THREE_QUARTER, "Fast am Ziel", "⭐"),
    (Milestone.Trigger.COURSE_COMPLETE, "Kurs abgeschlossen", "🏆"),
]


class Command(BaseCommand):
    help = "Cleans and seeds the database with a published academy course, quizzes, milestones and test users."

    def _create_quiz(self, module, questions):
        quiz = Quiz.objects.create(module=module, title=f"Quiz: {module.title}")
        for order, (prompt, labels, correct) in enumerate(questions, start=1):
            options = [
                {"id": chr(ord("a") + i), "label": label} for i, label in enumerate(labels)
            ]
            correct_id = next(o["id"] for o in options if o["label"] == correct)
            Question.objects.create(
                quiz=quiz,
                prompt=prompt,
                options=options,
                correct_option_id=correct_id,
                order=order,
            )
        return quiz

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write(
            self.style.WARNING("Starting database cleanup before seeding...")
        )

        # --- Cleanup existing data ---
        Payment.objects.filter(course__slug=COURSE_SLUG).delete()
        Course.objects.filter(slug=COURSE_SLUG).delete()
        self.stdout.write("  - Kurs-Daten gelöscht.")

        User.objects.filter(username__in=["test", "student", "partner"]).delete()
        self.stdout.write("  - Test User gelöscht.")
        self.stdout.write(self.style.SUCCESS("Cleanup finished."))

        # --- Create Test Users ---
        self.stdout.write("Erstelle Test User...")
        admin_user = User.objects.create_user(
            username="test",
            password="test",
            email="test@test.com",
            is_staff=True,
            is_superuser=True,
        )
        student = User.objects.create_user(
            username="student", password="student", email="student@test.com"
        )
        partner = User.objects.create_user(
            username="partner",
            password="partner",
            email="partner@test.com",
            first_name="Pat",
            last_name="Partner",
        )
        Affiliate.objects.create(
            user=partner, code="REF-PARTNE-TEST", status=Affiliate.Status.APPROVED
        )
        self.stdout.write(
            self.style.SUCCESS(
                f'Test User "{admin_user.username}", "{student.username}" und "{partner.username}" erstellt.'
            )
        )

        # --- Create Course ---
        self.stdout.write(self.style.SUCCESS("Starting database seeding..."))
        course = Course.objects.create(
            title="Python & Data Academy",
            slug=COURSE_SLUG,
            description="Vom ersten print() bis zur Datenanalyse mit Pandas.",
            price=30000,
            currency="usd",
            passing_score=80,
            installments_count=3,
            is_published=True,
        )

        for order, (title, is_bonus) in enumerate(COURSE_MODULES, start=1):
            module = Module.objects.create(
                course=course,
                title=title,
                description=f"Lerninhalte zum Thema {title}.",
                order=order,
                is_bonus=is_bonus,
            )
            questions = QUIZ_QUESTIONS.get(title)
            if questions:
                self._create_quiz(module, questions)
            self.stdout.write(f'  - Modul erstellt: "{title}"')

        for trigger, title, emoji in MILESTONES:
            Milestone.objects.create(
                course=course, trigger_type=trigger, title=title, badge_emoji=emoji
            )
        self.stdout.write(f"  - {len(MILESTONES)} Meilensteine erstellt.")

        # Student ohne Zahlung einschreiben, damit das Frontend sofort testbar ist
        EnrollmentService().enroll(
            student, course, source=Enrollment.Source.ADMIN, reference="seed"
        )
        self.stdout.write(f'  - "{student.username}" in "{course.title}" eingeschrieben.')

        logger.info("Seeded course %s", course.slug)
        self.stdout.write(self.style.SUCCESS("Database seeding completed."))
