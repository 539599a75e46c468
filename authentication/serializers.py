from rest_framework import serializers
from .models import CustomUser

# ------------------------------------------------------
# BASE USER SERIALIZER
# ------------------------------------------------------
class UserBaseSerializer(serializers.ModelSerializer):
    class Meta:
        model = CustomUser
        fields = [
            'id',
            'email',
            'full_name',
            'phone_number',
            'role',
            'created_at',
        ]
        read_only_fields = ['id', 'email', 'role', 'created_at']


# ------------------------------------------------------
# TOKEN SERIALIZERS
# ------------------------------------------------------
class TokenSerializer(serializers.Serializer):
    access_token = serializers.CharField(help_text="JWT access token for API requests")
    refresh_token = serializers.CharField(help_text="JWT refresh token for obtaining new access tokens")
    token_type = serializers.CharField(help_text="Authorization header scheme")
    expires_in = serializers.IntegerField(help_text="Access token lifetime in seconds")
    refresh_expires_in = serializers.IntegerField(help_text="Refresh token lifetime in seconds")


class AuthDataSerializer(serializers.Serializer):
    user = UserBaseSerializer(help_text="User profile information")
    tokens = TokenSerializer(help_text="JWT tokens for authentication")
    is_new_user = serializers.BooleanField(required=False, help_text="Indicates if this is a newly created account")


# ------------------------------------------------------
# AUTH SERIALIZERS
# ------------------------------------------------------
class UserRegistrationSerializer(serializers.Serializer):
    email = serializers.EmailField(help_text="User email address")
    password = serializers.CharField(write_only=True, min_length=8, help_text="User password (minimum 8 characters)")
    phone_number = serializers.CharField(required=False, allow_blank=True, help_text="User phone number")
    full_name = serializers.CharField(required=False, allow_blank=True, help_text="User full name")


class UserLoginSerializer(serializers.Serializer):
    email = serializers.EmailField(help_text="User email address")
    password = serializers.CharField(write_only=True, help_text="User password")


class AuthResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField(help_text="Whether the operation was successful")
    message = serializers.CharField(required=False, help_text="Human-readable message")
    data = AuthDataSerializer(required=False, help_text="Response data containing user and tokens")
    error = serializers.CharField(required=False, help_text="Error message if operation failed")
