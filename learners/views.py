# learners/views.py
from __future__ import annotations

from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import RegisterSerializer, UsernameSerializer
from .services import IdentityIssuer


class RegisterView(APIView):
    """POST /api/auth/register (409 when the username is taken)."""
    authentication_classes = []
    permission_classes = [AllowAny]
    issuer_class = IdentityIssuer

    def post(self, request):
        ser = RegisterSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)
        issued = self.issuer_class().register(ser.validated_data["username"])
        return Response(issued.as_response(), status=status.HTTP_201_CREATED)


class LoginView(APIView):
    """POST /api/auth/login (404 when the username is unknown)."""
    authentication_classes = []
    permission_classes = [AllowAny]
    issuer_class = IdentityIssuer

    def post(self, request):
        ser = UsernameSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)
        issued = self.issuer_class().login(ser.validated_data["username"])
        return Response(issued.as_response(), status=status.HTTP_200_OK)
