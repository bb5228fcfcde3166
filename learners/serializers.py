# learners/serializers.py
from rest_framework import serializers

from .services import MIN_USERNAME_LENGTH


class UsernameSerializer(serializers.Serializer):
    """
    Body of POST /api/auth/register and /api/auth/login.
    The username is taken verbatim: no trimming, case-sensitive.
    """
    username = serializers.CharField(max_length=150, trim_whitespace=False)


class RegisterSerializer(UsernameSerializer):
    def validate_username(self, v: str):
        if len(v) < MIN_USERNAME_LENGTH:
            raise serializers.ValidationError(
                f"Username must be at least {MIN_USERNAME_LENGTH} characters."
            )
        return v
