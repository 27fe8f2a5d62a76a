from rest_framework import serializers

from ..modules.serializers import MilestoneAwardSerializer
from .models import Quiz, Question, QuizAttempt


class QuestionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Question
        fields = ["id", "prompt", "options", "order"]


class QuestionWithAnswerSerializer(QuestionSerializer):
    class Meta(QuestionSerializer.Meta):
        fields = QuestionSerializer.Meta.fields + ["correct_option_id"]


class QuizSerializer(serializers.ModelSerializer):
    """
    Quiz for a student. Correct option ids are only included when the
    serializer context carries ``reveal_answers=True``.
    """

    passing_score = serializers.IntegerField(source="resolved_passing_score", read_only=True)
    module_id = serializers.IntegerField(read_only=True)
    questions = serializers.SerializerMethodField()
    has_passed = serializers.SerializerMethodField()

    class Meta:
        model = Quiz
        fields = ["id", "module_id", "title", "passing_score", "has_passed", "questions"]

    def get_questions(self, obj):
        serializer_class = (
            QuestionWithAnswerSerializer
            if self.context.get("reveal_answers")
            else QuestionSerializer
        )
        return serializer_class(obj.questions.order_by("order", "id"), many=True).data

    def get_has_passed(self, obj):
        return bool(self.context.get("reveal_answers"))


class AnswerSerializer(serializers.Serializer):
    question_id = serializers.IntegerField()
    selected_option_id = serializers.CharField(max_length=64)


class QuizSubmissionSerializer(serializers.Serializer):
    answers = AnswerSerializer(many=True, allow_empty=False)


class QuizAttemptSerializer(serializers.ModelSerializer):
    class Meta:
        model = QuizAttempt
        fields = ["id", "quiz", "attempt_number", "score", "passed", "created_at"]


class QuizResultSerializer(serializers.Serializer):
    attempt = QuizAttemptSerializer()
    score = serializers.DecimalField(max_digits=5, decimal_places=2)
    passed = serializers.BooleanField()
    passing_score = serializers.IntegerField()
    correct_count = serializers.IntegerField()
    total_questions = serializers.IntegerField()
    new_milestones = MilestoneAwardSerializer(many=True)
