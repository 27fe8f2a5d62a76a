from django.shortcuts import get_object_or_404
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from ...modules.models import Course
from ...services import CertificateService
from ..serializers import CertificateSerializer, CertificateVerificationSerializer


class ClaimCertificateView(APIView):
    """
    Self-service certificate for a finished course. Returns 201 for a new
    certificate and 200 with the existing one on repeated requests.
    """

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        course = get_object_or_404(Course, pk=pk)
        certificate, created = CertificateService().grant_certificate(request.user, course)
        return Response(
            CertificateSerializer(certificate).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


class VerifyCertificateView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def get(self, request, code):
        certificate = CertificateService().verify_certificate(code)
        return Response(CertificateVerificationSerializer(certificate).data)
