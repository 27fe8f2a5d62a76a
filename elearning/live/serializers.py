from rest_framework import serializers

from .models import LiveQuestion, LiveSession


class LiveSessionSerializer(serializers.ModelSerializer):
    rsvp_count = serializers.IntegerField(read_only=True, default=0)
    question_count = serializers.IntegerField(read_only=True, default=0)

    class Meta:
        model = LiveSession
        fields = [
            "id",
            "title",
            "description",
            "scheduled_at",
            "duration_minutes",
            "join_url",
            "replay_url",
            "notes",
            "rsvp_count",
            "question_count",
        ]


class LiveQuestionSerializer(serializers.ModelSerializer):
    student_name = serializers.SerializerMethodField()

    class Meta:
        model = LiveQuestion
        fields = ["id", "session", "text", "status", "upvotes", "answered_at", "created_at", "student_name"]
        read_only_fields = ["id", "session", "text", "status", "upvotes", "answered_at", "created_at"]

    def get_student_name(self, obj):
        return obj.student.get_full_name() or obj.student.username


class QuestionSubmitSerializer(serializers.Serializer):
    text = serializers.CharField(max_length=2000, trim_whitespace=True)
