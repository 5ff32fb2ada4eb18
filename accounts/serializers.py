from typing import Any, Dict

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers
from rest_framework.validators import UniqueValidator
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import AccessToken

from core.services.auth_codes import check_code

User = get_user_model()


class RegistrationSerializer(serializers.ModelSerializer):
    """
    Serializer for user registration.

    Checks that both passwords match, runs Django's password validators and
    ensures the email is not taken yet.
    """

    email = serializers.EmailField(
        required=True,
        validators=[UniqueValidator(queryset=User.objects.all(), lookup="iexact")]
    )
    password = serializers.CharField(write_only=True, required=True, style={'input_type': 'password'})
    password2 = serializers.CharField(write_only=True, required=True, style={'input_type': 'password'})

    class Meta:
        model = User
        fields = ['email', 'password', 'password2', 'first_name', 'last_name', 'bio']

    def validate(self, data: Dict[str, Any]) -> Dict[str, Any]:
        if data['password'] != data['password2']:
            raise serializers.ValidationError("Passwords must match.")

        candidate = User(
            email=data.get('email', ''),
            first_name=data.get('first_name', ''),
            last_name=data.get('last_name', ''),
        )
        validate_password(data['password'], user=candidate)

        return data

    def create(self, validated_data: Dict[str, Any]):
        validated_data.pop('password2')
        return User.objects.create_user(**validated_data)


class SetPasswordSerializer(serializers.Serializer):
    """
    Sets a password for an invited user.

    The `token` is the access token from the invite email. It is only accepted
    while the account is still inactive; saving activates it.
    """

    token = serializers.CharField()
    password = serializers.CharField(write_only=True, min_length=8, style={'input_type': 'password'})

    def validate(self, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            access_token = AccessToken(data['token'])
            user = User.objects.get(id=access_token['user_id'])
        except (TokenError, KeyError, User.DoesNotExist):
            raise serializers.ValidationError({"token": "Invalid or expired token"})

        if user.is_active:
            raise serializers.ValidationError({"token": "Invalid or expired token"})

        validate_password(data['password'], user=user)

        data['user'] = user
        return data

    def save(self, **kwargs):
        user = self.validated_data['user']
        user.is_active = True
        user.set_password(self.validated_data['password'])
        user.save(update_fields=['password', 'is_active'])
        return user


class ProfileSerializer(serializers.ModelSerializer):
    """
    Full profile of a user: personal info, avatar and account metadata.
    """

    date_joined_to_system = serializers.DateTimeField(
        source="date_joined",
        format="%Y-%m-%d %H:%M:%S",
        read_only=True
    )
    full_name = serializers.CharField(source="get_full_name", read_only=True)
    initials = serializers.CharField(read_only=True)
    avatar_image = serializers.ImageField(required=False, allow_null=True)

    class Meta:
        model = User
        fields = [
            'id', 'email', 'first_name', 'last_name', 'full_name', 'initials', 'bio',
            'avatar_background', 'avatar_emoji', 'avatar_image',
            'is_active', 'is_staff', 'date_joined_to_system',
        ]
        read_only_fields = ['id', 'email', 'date_joined_to_system', 'is_staff', 'is_active']


class UserShortSerializer(serializers.ModelSerializer):
    """Compact user representation embedded into tasks and member lists."""

    full_name = serializers.CharField(source="get_full_name", read_only=True)
    initials = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = ['id', 'email', 'first_name', 'last_name', 'full_name', 'initials', 'avatar_emoji', 'avatar_background']
        read_only_fields = fields


def find_active_user_by_email(email: str):
    """
    Case-insensitive lookup of an active account. Oldest account wins when
    several addresses differ only in case.
    """

    return User.objects.filter(email__iexact=email, is_active=True).order_by("id").first()


class PasswordResetRequestSerializer(serializers.Serializer):
    email = serializers.EmailField()

    def validate(self, data: Dict[str, Any]) -> Dict[str, Any]:
        user = find_active_user_by_email(data["email"])
        if user is None:
            raise serializers.ValidationError({"email": "User with this email does not exist."})

        data["user"] = user
        return data


class PasswordResetCodeSerializer(serializers.Serializer):
    """
    Resolves the user a password reset code was sent to.

    Attaches the matching user to the validated data.
    """

    email = serializers.EmailField()
    code = serializers.CharField(max_length=6, min_length=6)

    def validate(self, data: Dict[str, Any]) -> Dict[str, Any]:
        user = find_active_user_by_email(data.get("email"))
        if user is None:
            raise serializers.ValidationError({"email": "User not found."})

        data["user"] = user
        return data


class PasswordResetCheckSerializer(PasswordResetCodeSerializer):
    """
    Verifies a password reset code without consuming it. Every check counts
    as a verification attempt.
    """

    def validate(self, data: Dict[str, Any]) -> Dict[str, Any]:
        data = super().validate(data)

        if not check_code(data["user"].id, data["code"]):
            raise serializers.ValidationError({"code": "Invalid or expired code."})

        return data


class PasswordResetConfirmSerializer(PasswordResetCodeSerializer):
    """
    Validates the new password. The code itself is verified (and consumed)
    by the view.
    """

    password = serializers.CharField(
        write_only=True,
        min_length=8,
        style={"input_type": "password"}
    )

    def validate(self, data: Dict[str, Any]) -> Dict[str, Any]:
        data = super().validate(data)
        validate_password(data["password"], user=data["user"])
        return data
