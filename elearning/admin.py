"""
E-Learning Application Django Admin Configuration

This module provides the Django admin (Jazzmin) configuration for all
E-Learning models: the student support console for courses, progression,
payments and the affiliate program.

The admin interface is organized into logical sections:
- User Management: User administration with profile integration
- Course Management: Courses, modules, quizzes and milestones
- Progression: Enrollments, module progress, attempts, awards, certificates
- Lessons: Lessons and lesson progress
- Payments: Payment ledger (dj-stripe registers its own event admin)
- Live Sessions: Sessions, RSVPs and moderated questions
- Affiliate Program: Affiliates, clicks, conversions and payouts
- Audit Log: Read-only trail of staff actions, internal student notes

Staff actions that change student state go through AdminActionService so
they are written to the audit log.

Author: DSP Development Team
Version: 1.0.0
"""

from typing import Optional
from django.contrib import admin, messages
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.models import User
from django.utils.translation import gettext_lazy as _
from django.db.models import Count, QuerySet
from django.http import HttpRequest

# Import all models from the central models registry
from .models import (
    Profile,
    Course,
    Module,
    Enrollment,
    ModuleProgress,
    Lesson,
    LessonProgress,
    Milestone,
    MilestoneAward,
    Quiz,
    Question,
    QuizAttempt,
    Certificate,
    Payment,
    Affiliate,
    AffiliateClick,
    AffiliateConversion,
    Payout,
    LiveSession,
    LiveRSVP,
    LiveQuestion,
    AuditLog,
    AdminNote,
)
from .services import AdminActionService

# --- User Management Administration ---


class ProfileInline(admin.StackedInline):
    """
    Inline admin configuration for user profiles.

    Referral code and enrollment date are maintained by the services and
    shown read-only.
    """

    model = Profile
    can_delete = False
    verbose_name_plural = "Profile Information"
    fk_name = "user"
    fields = ("referral_code", "enrolled_at", "last_activity_at")
    readonly_fields = ("enrolled_at", "last_activity_at")

    def get_extra(
        self, request: HttpRequest, obj: Optional[User] = None, **kwargs
    ) -> int:
        """Return 0 extra forms since profile should exist or be created automatically."""
        return 0


class UserAdmin(BaseUserAdmin):
    """
    User administration with profile information.
    """

    inlines = (ProfileInline,)
    list_display = (
        "username",
        "email",
        "first_name",
        "last_name",
        "is_staff",
        "is_active",
        "get_referral_code",
    )
    list_select_related = ("profile",)
    list_filter = ("is_staff", "is_superuser", "is_active", "date_joined")
    search_fields = ("username", "first_name", "last_name", "email", "profile__referral_code")
    ordering = ("username",)

    @admin.display(description=_("Referral Code"))
    def get_referral_code(self, instance: User) -> Optional[str]:
        try:
            return instance.profile.referral_code
        except Profile.DoesNotExist:
            return None

    def get_queryset(self, request: HttpRequest) -> QuerySet:
        """Optimize queryset with profile prefetch for better performance."""
        return super().get_queryset(request).select_related("profile")


# Register enhanced user administration
admin.site.unregister(User)
admin.site.register(User, UserAdmin)

# --- Course Administration ---


class ModuleInline(admin.TabularInline):
    """Inline admin for the modules of a course."""

    model = Module
    extra = 1
    fields = ("title", "order", "is_bonus")
    ordering = ("order",)


class MilestoneInline(admin.TabularInline):
    model = Milestone
    extra = 0
    fields = ("trigger_type", "title", "badge_emoji")


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    """
    Administration interface for courses.

    Changing the passing score here affects every quiz without an own
    passing score override.
    """

    list_display = ("title", "price", "currency", "installments_count", "passing_score", "is_published", "module_count")
    list_filter = ("is_published", "currency")
    search_fields = ("title", "slug", "description")
    prepopulated_fields = {"slug": ("title",)}
    inlines = [ModuleInline, MilestoneInline]

    fieldsets = (
        (_("Basic Information"), {"fields": ("title", "slug", "description", "is_published")}),
        (_("Pricing"), {"fields": ("price", "currency", "installments_count")}),
        (_("Progression"), {"fields": ("passing_score",)}),
    )

    def get_queryset(self, request: HttpRequest) -> QuerySet:
        return super().get_queryset(request).annotate(_module_count=Count("modules"))

    @admin.display(description=_("Modules"), ordering="_module_count")
    def module_count(self, obj: Course) -> int:
        return obj._module_count


class QuestionInline(admin.StackedInline):
    model = Question
    extra = 1
    fields = ("order", "prompt", "options", "correct_option_id")
    ordering = ("order",)


class LessonInline(admin.TabularInline):
    model = Lesson
    extra = 1
    fields = ("order", "title", "video_url", "duration_seconds")
    ordering = ("order",)


@admin.register(Module)
class ModuleAdmin(admin.ModelAdmin):
    list_display = ("title", "course", "order", "is_bonus")
    list_filter = ("course", "is_bonus")
    search_fields = ("title", "course__title")
    list_select_related = ("course",)
    ordering = ("course", "order")
    inlines = [LessonInline]


@admin.register(Quiz)
class QuizAdmin(admin.ModelAdmin):
    list_display = ("title", "module", "passing_score")
    search_fields = ("title", "module__title")
    list_select_related = ("module__course",)
    inlines = [QuestionInline]


@admin.register(Milestone)
class MilestoneAdmin(admin.ModelAdmin):
    list_display = ("title", "course", "trigger_type", "badge_emoji")
    list_filter = ("course", "trigger_type")


# --- Progression Administration ---


@admin.register(Enrollment)
class EnrollmentAdmin(admin.ModelAdmin):
    list_display = ("student", "course", "source", "reference", "enrolled_at")
    list_filter = ("course", "source")
    search_fields = ("student__username", "student__email", "reference")
    list_select_related = ("student", "course")
    readonly_fields = ("enrolled_at",)


@admin.register(ModuleProgress)
class ModuleProgressAdmin(admin.ModelAdmin):
    """
    Module lock state per student.

    The bulk actions run through the progression rules, so completing a
    module here unlocks the next one and awards milestones.
    """

    list_display = ("student", "module", "status", "completed_at", "updated_at")
    list_filter = ("status", "module__course")
    search_fields = ("student__username", "module__title")
    list_select_related = ("student", "module__course")
    actions = ["unlock_selected", "complete_selected"]

    @admin.action(description=_("Unlock selected modules"))
    def unlock_selected(self, request: HttpRequest, queryset: QuerySet) -> None:
        service = AdminActionService()
        for progress in queryset.select_related("student", "module"):
            service.unlock_module(request.user, progress.student, progress.module)
        self.message_user(request, _("%d module(s) unlocked.") % queryset.count(), messages.SUCCESS)

    @admin.action(description=_("Complete selected modules"))
    def complete_selected(self, request: HttpRequest, queryset: QuerySet) -> None:
        service = AdminActionService()
        for progress in queryset.select_related("student", "module"):
            service.complete_module(request.user, progress.student, progress.module)
        self.message_user(request, _("%d module(s) completed.") % queryset.count(), messages.SUCCESS)


@admin.register(QuizAttempt)
class QuizAttemptAdmin(admin.ModelAdmin):
    list_display = ("student", "quiz", "attempt_number", "score", "passed", "created_at")
    list_filter = ("passed", "quiz__module__course")
    search_fields = ("student__username", "quiz__title")
    list_select_related = ("student", "quiz")
    readonly_fields = ("student", "quiz", "attempt_number", "score", "passed", "answers", "created_at")


@admin.register(MilestoneAward)
class MilestoneAwardAdmin(admin.ModelAdmin):
    list_display = ("student", "milestone", "awarded_at")
    list_filter = ("milestone__course", "milestone__trigger_type")
    list_select_related = ("student", "milestone")


@admin.register(Certificate)
class CertificateAdmin(admin.ModelAdmin):
    list_display = ("certificate_code", "student", "course", "issued_by_admin", "issued_at")
    list_filter = ("course", "issued_by_admin")
    search_fields = ("certificate_code", "student__username", "student__email")
    list_select_related = ("student", "course")
    readonly_fields = ("certificate_code", "issued_at")


@admin.register(LessonProgress)
class LessonProgressAdmin(admin.ModelAdmin):
    list_display = ("student", "lesson", "completed", "watched_percent", "updated_at")
    list_filter = ("completed", "lesson__module__course")
    search_fields = ("student__username", "student__email", "lesson__title")
    list_select_related = ("student", "lesson__module")
    readonly_fields = ("completed_at", "updated_at")


# --- Payments Administration ---


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """
    Payment ledger. Mutated by the Stripe reconciler only, so the
    administration is read-only.
    """

    list_display = (
        "id",
        "student",
        "course",
        "payment_type",
        "status",
        "amount_paid",
        "amount_total",
        "installments_paid",
        "installments_total",
        "created_at",
    )
    list_filter = ("status", "payment_type", "course")
    search_fields = (
        "student__username",
        "student__email",
        "external_checkout_id",
        "external_subscription_id",
        "external_customer_id",
    )
    list_select_related = ("student", "course")

    def has_add_permission(self, request: HttpRequest) -> bool:
        return False

    def has_change_permission(self, request: HttpRequest, obj=None) -> bool:
        return False


# --- Affiliate Program Administration ---


@admin.register(Affiliate)
class AffiliateAdmin(admin.ModelAdmin):
    list_display = ("code", "user", "status", "commission_rate", "created_at")
    list_filter = ("status",)
    search_fields = ("code", "user__username", "user__email")
    list_select_related = ("user",)
    actions = ["approve_selected", "reject_selected"]

    def _set_status(self, request: HttpRequest, queryset: QuerySet, status: str) -> None:
        service = AdminActionService()
        for affiliate in queryset:
            service.update_affiliate_status(request.user, affiliate, status)
        self.message_user(request, _("%d affiliate(s) updated.") % queryset.count(), messages.SUCCESS)

    @admin.action(description=_("Approve selected affiliates"))
    def approve_selected(self, request: HttpRequest, queryset: QuerySet) -> None:
        self._set_status(request, queryset, Affiliate.Status.APPROVED)

    @admin.action(description=_("Reject selected affiliates"))
    def reject_selected(self, request: HttpRequest, queryset: QuerySet) -> None:
        self._set_status(request, queryset, Affiliate.Status.REJECTED)


@admin.register(AffiliateClick)
class AffiliateClickAdmin(admin.ModelAdmin):
    list_display = ("affiliate", "ip_address", "created_at")
    list_filter = ("affiliate",)
    list_select_related = ("affiliate",)


@admin.register(AffiliateConversion)
class AffiliateConversionAdmin(admin.ModelAdmin):
    list_display = ("affiliate", "student", "payment", "amount", "commission", "created_at")
    list_filter = ("affiliate",)
    search_fields = ("affiliate__code", "student__username")
    list_select_related = ("affiliate", "student", "payment")


@admin.register(Payout)
class PayoutAdmin(admin.ModelAdmin):
    list_display = ("affiliate", "amount", "status", "paid_at", "created_at")
    list_filter = ("status",)
    list_select_related = ("affiliate",)
    actions = ["mark_paid"]

    @admin.action(description=_("Mark selected payouts as paid"))
    def mark_paid(self, request: HttpRequest, queryset: QuerySet) -> None:
        service = AdminActionService()
        pending = queryset.filter(status=Payout.Status.PENDING)
        count = 0
        for payout in pending:
            service.mark_payout_paid(request.user, payout)
            count += 1
        self.message_user(request, _("%d payout(s) marked as paid.") % count, messages.SUCCESS)


# --- Live Sessions Administration ---


class LiveQuestionInline(admin.TabularInline):
    model = LiveQuestion
    extra = 0
    fields = ("student", "text", "status", "upvotes", "answered_at")
    readonly_fields = ("student", "text", "upvotes", "answered_at")


@admin.register(LiveSession)
class LiveSessionAdmin(admin.ModelAdmin):
    list_display = ("title", "scheduled_at", "duration_minutes", "rsvp_count", "has_replay")
    search_fields = ("title",)
    ordering = ("-scheduled_at",)
    inlines = [LiveQuestionInline]

    def get_queryset(self, request: HttpRequest) -> QuerySet:
        return super().get_queryset(request).annotate(rsvp_total=Count("rsvps"))

    @admin.display(description=_("RSVPs"), ordering="rsvp_total")
    def rsvp_count(self, obj: LiveSession) -> int:
        return obj.rsvp_total

    @admin.display(boolean=True, description=_("Replay"))
    def has_replay(self, obj: LiveSession) -> bool:
        return bool(obj.replay_url)


@admin.register(LiveRSVP)
class LiveRSVPAdmin(admin.ModelAdmin):
    list_display = ("student", "session", "created_at")
    list_select_related = ("student", "session")


# --- Audit Log ---


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("created_at", "actor", "action", "target_type", "target_id")
    list_filter = ("action", "target_type")
    search_fields = ("actor__username", "action")
    list_select_related = ("actor",)
    readonly_fields = ("actor", "action", "target_type", "target_id", "details", "created_at")

    def has_add_permission(self, request: HttpRequest) -> bool:
        return False


@admin.register(AdminNote)
class AdminNoteAdmin(admin.ModelAdmin):
    list_display = ("student", "author", "created_at")
    search_fields = ("student__username", "student__email", "content")
    list_select_related = ("student", "author")
    readonly_fields = ("author", "created_at")

    def save_model(self, request: HttpRequest, obj: AdminNote, form, change: bool) -> None:
        if not change:
            note = AdminActionService().add_note(request.user, obj.student, obj.content)
            obj.pk, obj.author, obj.created_at = note.pk, note.author, note.created_at
            return
        super().save_model(request, obj, form, change)

    def delete_model(self, request: HttpRequest, obj: AdminNote) -> None:
        AdminActionService().delete_note(request.user, obj)
