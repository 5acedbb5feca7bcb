from rest_framework import serializers
from .models import User


class UserSerializer(serializers.ModelSerializer):
    """Public profile of an account."""

    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'email', 'name', 'createdAt']
        read_only_fields = fields


class UserMinimalSerializer(serializers.ModelSerializer):
    """Minimal user info for nested serialization."""

    class Meta:
        model = User
        fields = ['id', 'email', 'name']
        read_only_fields = fields


class SignupSerializer(serializers.Serializer):
    """Input for account creation."""

    email = serializers.EmailField(max_length=255)
    password = serializers.CharField(
        write_only=True,
        min_length=8,
        style={'input_type': 'password'}
    )
    name = serializers.CharField(min_length=2, max_length=255, required=False)


class LoginSerializer(serializers.Serializer):
    """Input for email/password login."""

    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={'input_type': 'password'})
