from rest_framework import serializers

from .models import Certificate


class CertificateSerializer(serializers.ModelSerializer):
    course_title = serializers.CharField(source="course.title", read_only=True)

    class Meta:
        model = Certificate
        fields = ["id", "certificate_code", "course", "course_title", "issued_by_admin", "issued_at"]
        read_only_fields = fields


class CertificateVerificationSerializer(serializers.ModelSerializer):
    """
    Public view of a certificate. Exposes the holder's display name only.
    """

    valid = serializers.SerializerMethodField()
    student_name = serializers.SerializerMethodField()
    course_title = serializers.CharField(source="course.title", read_only=True)

    class Meta:
        model = Certificate
        fields = ["valid", "certificate_code", "student_name", "course_title", "issued_at"]

    def get_valid(self, obj):
        return True

    def get_student_name(self, obj):
        return obj.student.get_full_name() or obj.student.username
