from rest_framework import serializers

from ..affiliates.models import Affiliate
from ..live.models import LiveQuestion
from .models import AdminNote, AuditLog


class PassingScoreSerializer(serializers.Serializer):
    passing_score = serializers.IntegerField(min_value=1, max_value=100)


class AffiliateStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Affiliate.Status.choices)
    commission_rate = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=0, max_value=100, required=False
    )


class PayoutCreateSerializer(serializers.Serializer):
    affiliate_id = serializers.IntegerField()
    amount = serializers.IntegerField(min_value=1)


class AuditLogSerializer(serializers.ModelSerializer):
    actor_username = serializers.CharField(source="actor.username", read_only=True, default=None)

    class Meta:
        model = AuditLog
        fields = ["id", "actor", "actor_username", "action", "target_type", "target_id", "details", "created_at"]


class AdminNoteSerializer(serializers.ModelSerializer):
    author_name = serializers.SerializerMethodField()

    class Meta:
        model = AdminNote
        fields = ["id", "student", "author", "author_name", "content", "created_at"]
        read_only_fields = ["id", "student", "author", "author_name", "created_at"]

    def get_author_name(self, obj):
        if obj.author is None:
            return None
        return obj.author.get_full_name() or obj.author.email or obj.author.username


class LiveSessionCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    scheduled_at = serializers.DateTimeField()
    duration_minutes = serializers.IntegerField(min_value=1, required=False)
    join_url = serializers.URLField()


class LiveQuestionStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=LiveQuestion.Status.choices)


class LiveSessionReplaySerializer(serializers.Serializer):
    replay_url = serializers.URLField()
    notes = serializers.CharField(required=False, allow_blank=True)
