from rest_framework import serializers

from .models import Course, Module, Milestone, MilestoneAward, ModuleProgress


class ModuleListSerializer(serializers.ModelSerializer):
    has_quiz = serializers.SerializerMethodField()

    class Meta:
        model = Module
        fields = ["id", "title", "description", "order", "is_bonus", "has_quiz"]

    def get_has_quiz(self, obj):
        return hasattr(obj, "quiz")


class CourseListSerializer(serializers.ModelSerializer):
    installment_amount = serializers.IntegerField(read_only=True)

    class Meta:
        model = Course
        fields = [
            "id",
            "title",
            "slug",
            "description",
            "price",
            "currency",
            "installments_count",
            "installment_amount",
        ]


class CourseDetailSerializer(CourseListSerializer):
    """
    Course with its ordered modules.
    """

    modules = serializers.SerializerMethodField()

    class Meta(CourseListSerializer.Meta):
        fields = CourseListSerializer.Meta.fields + ["passing_score", "modules"]

    def get_modules(self, obj):
        return ModuleListSerializer(
            obj.ordered_modules().select_related("quiz"), many=True
        ).data


class ModuleProgressSerializer(serializers.ModelSerializer):
    module_title = serializers.CharField(source="module.title", read_only=True)

    class Meta:
        model = ModuleProgress
        fields = ["id", "module", "module_title", "status", "completed_at", "updated_at"]


class MilestoneSerializer(serializers.ModelSerializer):
    class Meta:
        model = Milestone
        fields = ["id", "trigger_type", "title", "description", "badge_emoji"]


class MilestoneAwardSerializer(serializers.ModelSerializer):
    milestone = MilestoneSerializer(read_only=True)

    class Meta:
        model = MilestoneAward
        fields = ["id", "milestone", "awarded_at"]


class QuizAttemptSummarySerializer(serializers.Serializer):
    attempt_number = serializers.IntegerField()
    score = serializers.DecimalField(max_digits=5, decimal_places=2)
    passed = serializers.BooleanField()
    created_at = serializers.DateTimeField()


class QuizProgressSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    title = serializers.CharField()
    passing_score = serializers.IntegerField()
    passed = serializers.BooleanField()
    attempts = QuizAttemptSummarySerializer(many=True)


class ModuleStatusSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    title = serializers.CharField()
    order = serializers.IntegerField()
    is_bonus = serializers.BooleanField()
    status = serializers.CharField()
    quiz = QuizProgressSerializer(allow_null=True)


class StudentProgressSerializer(serializers.Serializer):
    """
    Renders the overview built by ProgressionService.student_progress().
    """

    course_id = serializers.IntegerField()
    completed_required = serializers.IntegerField()
    total_required = serializers.IntegerField()
    percent_complete = serializers.DecimalField(max_digits=5, decimal_places=2)
    modules = ModuleStatusSerializer(many=True)
    milestones = MilestoneAwardSerializer(many=True)
    certificate_code = serializers.CharField(allow_null=True)
