import logging

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.models import User
from core.services.auth_codes import (
    gen_code,
    can_send,
    store_code,
    verify_code,
)
from accounts.serializers import (
    RegistrationSerializer,
    SetPasswordSerializer,
    ProfileSerializer,
    PasswordResetRequestSerializer,
    PasswordResetCheckSerializer,
    PasswordResetConfirmSerializer,
)
from tools.email import send_password_reset_email

logger = logging.getLogger(__name__)


class RegistrationAPIView(APIView):
    """
    Registers a new account.

    Responses:
        201: {"message": "User registered successfully", "user": {...}}
        400: validation error (passwords differ, weak password, email taken).
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request, *args, **kwargs):
        serializer = RegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        logger.info("User %s registered", user.id)

        return Response(
            {"message": "User registered successfully", "user": ProfileSerializer(user).data},
            status=status.HTTP_201_CREATED
        )


class PasswordResetRequestAPIView(APIView):
    """
    Sends a six-digit password reset code to the given email.

    Throttled to one email per minute per address (429 otherwise).
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = PasswordResetRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        email = serializer.validated_data["email"]
        user = serializer.validated_data["user"]

        if not can_send(email):
            return Response({"detail": "Too often. Try later."}, status=status.HTTP_429_TOO_MANY_REQUESTS)

        code = gen_code()
        store_code(user.id, code)
        send_password_reset_email(user.email, code)

        return Response(
            {"message": "Password reset code sent to email"},
            status=status.HTTP_200_OK
        )


class PasswordResetCheckAPIView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = PasswordResetCheckSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        return Response({"message": "Code is valid"}, status=status.HTTP_200_OK)


class PasswordResetConfirmAPIView(APIView):
    """
    Applies a new password when the reset code is valid. The code is consumed.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = PasswordResetConfirmSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = serializer.validated_data["user"]
        code = serializer.validated_data["code"]

        if not verify_code(user.id, code):
            return Response({"detail": "Invalid or expired code"}, status=status.HTTP_400_BAD_REQUEST)

        user.set_password(serializer.validated_data["password"])
        user.save(update_fields=["password"])

        logger.info("Password reset for user %s", user.id)

        return Response({"message": "Password successfully reset"}, status=status.HTTP_200_OK)


class SetPasswordAPIView(APIView):
    """
    Lets an invited user set a password using the token from the invite email.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = SetPasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        logger.info("Password set for invited user %s", user.id)

        return Response({"message": "Password successfully set"}, status=status.HTTP_200_OK)


class ProfileAPIView(APIView):
    """
    GET returns the current user's profile, PUT partially updates it.
    """

    permission_classes = [IsAuthenticated]
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    def get(self, request):
        serializer = ProfileSerializer(request.user, context={"request": request})
        return Response(serializer.data, status=status.HTTP_200_OK)

    def put(self, request):
        serializer = ProfileSerializer(
            request.user, data=request.data, partial=True, context={"request": request}
        )
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data, status=status.HTTP_200_OK)


class UserProfileAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        user = get_object_or_404(User, id=pk)
        serializer = ProfileSerializer(user, context={"request": request})
        return Response(serializer.data, status=status.HTTP_200_OK)
