from rest_framework import serializers

from .models import Affiliate, AffiliateConversion, Payout


class AffiliateSerializer(serializers.ModelSerializer):
    referral_link = serializers.SerializerMethodField()

    class Meta:
        model = Affiliate
        fields = ["id", "code", "status", "commission_rate", "referral_link", "created_at"]
        read_only_fields = fields

    def get_referral_link(self, obj):
        request = self.context.get("request")
        path = f"/api/elearning/affiliates/track/?ref={obj.code}"
        return request.build_absolute_uri(path) if request else path


class AffiliateConversionSerializer(serializers.ModelSerializer):
    class Meta:
        model = AffiliateConversion
        fields = ["id", "payment", "amount", "commission", "created_at"]


class PayoutSerializer(serializers.ModelSerializer):
    class Meta:
        model = Payout
        fields = ["id", "affiliate", "amount", "status", "paid_at", "created_at"]
        read_only_fields = ["status", "paid_at", "created_at"]


class AffiliateStatsSerializer(serializers.Serializer):
    """
    Renders the dashboard built by AffiliateService.affiliate_stats().
    """

    affiliate = AffiliateSerializer()
    total_clicks = serializers.IntegerField()
    total_conversions = serializers.IntegerField()
    total_commission = serializers.IntegerField()
    total_paid = serializers.IntegerField()
    balance = serializers.IntegerField()
    recent_conversions = AffiliateConversionSerializer(many=True)
    payouts = PayoutSerializer(many=True)
