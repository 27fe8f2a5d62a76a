from rest_framework import serializers

from .models import Lesson, LessonProgress


class LessonSerializer(serializers.ModelSerializer):
    module_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Lesson
        fields = ["id", "module_id", "title", "content", "video_url", "order", "duration_seconds"]


class LessonProgressSerializer(serializers.ModelSerializer):
    lesson_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = LessonProgress
        fields = ["lesson_id", "completed", "completed_at", "watched_percent", "updated_at"]


class VideoProgressSerializer(serializers.Serializer):
    watched_percent = serializers.FloatField(min_value=0, max_value=100)
