from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from authentication.domain.models import CustomUser
from utils.serializers import StrictSerializer


class UserSerializer(serializers.ModelSerializer):
    isEmailVerified = serializers.BooleanField(source="is_email_verified", read_only=True)
    isBlocked = serializers.BooleanField(source="is_blocked", read_only=True)
    lastLogin = serializers.DateTimeField(source="last_login", read_only=True)
    createdAt = serializers.DateTimeField(source="date_joined", read_only=True)

    class Meta:
        model = CustomUser
        fields = ("id", "email", "name", "role", "isEmailVerified", "isBlocked", "lastLogin", "createdAt")
        read_only_fields = fields


class RegisterRequestSerializer(StrictSerializer):
    name = serializers.CharField(max_length=100)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=8, style={"input_type": "password"})
    role = serializers.ChoiceField(choices=["buyer", "seller"], required=False, default="buyer")

    def validate_password(self, value):
        validate_password(value)
        return value


class LoginRequestSerializer(StrictSerializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={"input_type": "password"})


class ProfileUpdateSerializer(StrictSerializer):
    name = serializers.CharField(max_length=100)


class AdminUserUpdateSerializer(StrictSerializer):
    role = serializers.ChoiceField(choices=[c[0] for c in CustomUser.ROLE_CHOICES], required=False)
    isBlocked = serializers.BooleanField(required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("Provide role and/or isBlocked")
        return attrs


class UserDeleteSerializer(StrictSerializer):
    confirm = serializers.BooleanField(required=False, default=False)


class AuthResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    message = serializers.CharField(required=False)
    data = serializers.DictField()
