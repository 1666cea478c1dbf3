from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from .models import User


class UserSerializer(serializers.ModelSerializer):
    """Basic user serializer for profile display."""

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'name',
            'role',
            'is_active',
            'created_at',
            'updated_at',
            'last_login',
        ]
        read_only_fields = fields


class UserMinimalSerializer(serializers.ModelSerializer):
    """Compact user info embedded in activities, tasks and expenses."""

    class Meta:
        model = User
        fields = ['id', 'email', 'name']
        read_only_fields = fields


class UserRegistrationSerializer(serializers.Serializer):
    """Serializer for user registration."""

    email = serializers.EmailField(max_length=255)
    name = serializers.CharField(min_length=2, max_length=100)
    password = serializers.CharField(
        write_only=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    password_confirm = serializers.CharField(
        write_only=True,
        style={'input_type': 'password'}
    )

    def validate(self, attrs):
        """Validate password confirmation."""
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({
                'password_confirm': 'Passwords do not match'
            })
        return attrs


class UserLoginSerializer(serializers.Serializer):
    """Serializer for user login."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )


class LogoutSerializer(serializers.Serializer):
    refresh = serializers.CharField(help_text="Refresh token to revoke")


class UserUpdateSerializer(serializers.Serializer):
    """Partial profile update; blank values leave the field untouched."""

    name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    email = serializers.EmailField(max_length=255, required=False, allow_blank=True)

    def validate_name(self, value):
        if value.strip() and len(value.strip()) < 2:
            raise serializers.ValidationError('Name must be at least 2 characters.')
        return value


class UserRoleSerializer(serializers.Serializer):
    role = serializers.CharField(max_length=20)

    def validate_role(self, value):
        # Accept "Admin"/"User" as well as the stored lower-case form
        return value.strip().lower()


class SystemStatisticsSerializer(serializers.Serializer):
    total_users = serializers.IntegerField()
    active_users = serializers.IntegerField()
    total_activities = serializers.IntegerField()
    total_tasks = serializers.IntegerField()
    completed_tasks = serializers.IntegerField()
    total_expenses = serializers.IntegerField()
    total_expense_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
