from rest_framework import serializers

from apps.accounts.serializers import UserMinimalSerializer
from apps.tasks.serializers import TaskListSerializer

from .models import Activity, ActivityUser


# =============================================================================
# Input Serializers
# =============================================================================

class ActivityCreateSerializer(serializers.Serializer):
    """Validate input for creating an activity."""

    name = serializers.CharField(min_length=2, max_length=200)
    description = serializers.CharField(max_length=1000, required=False, allow_blank=True)
    start_date = serializers.DateTimeField(required=False, allow_null=True)
    end_date = serializers.DateTimeField(required=False, allow_null=True)
    location = serializers.CharField(max_length=100, required=False, allow_blank=True)

    def validate_name(self, value):
        if len(value.strip()) < 2:
            raise serializers.ValidationError('Name must be at least 2 characters.')
        return value

    def validate(self, attrs):
        """Validate date range."""
        start_date = attrs.get('start_date')
        end_date = attrs.get('end_date')

        if start_date and end_date and end_date < start_date:
            raise serializers.ValidationError({
                'end_date': 'End date must be after start date'
            })

        return attrs


class ActivityUpdateSerializer(serializers.Serializer):
    """
    Validate input for updating an activity.

    All fields are optional; a blank name is ignored, a blank description
    or location clears the field.
    The combined date range is checked by the service.
    """

    name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    description = serializers.CharField(max_length=1000, required=False, allow_blank=True)
    start_date = serializers.DateTimeField(required=False, allow_null=True)
    end_date = serializers.DateTimeField(required=False, allow_null=True)
    location = serializers.CharField(max_length=100, required=False, allow_blank=True)

    def validate_name(self, value):
        if value.strip() and len(value.strip()) < 2:
            raise serializers.ValidationError('Name must be at least 2 characters.')
        return value


class ParticipantAdminSerializer(serializers.Serializer):
    is_admin = serializers.BooleanField()


# =============================================================================
# Output Serializers
# =============================================================================

class ActivityParticipantSerializer(serializers.ModelSerializer):
    """Participant row with embedded user."""

    user = UserMinimalSerializer(read_only=True)

    class Meta:
        model = ActivityUser
        fields = ['id', 'user', 'is_admin', 'joined_at']
        read_only_fields = fields


class ActivityListSerializer(serializers.ModelSerializer):
    """Lightweight activity representation for lists."""

    created_by = UserMinimalSerializer(read_only=True)
    participant_count = serializers.SerializerMethodField()

    class Meta:
        model = Activity
        fields = [
            'id',
            'name',
            'description',
            'start_date',
            'end_date',
            'location',
            'created_by',
            'participant_count',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_participant_count(self, obj):
        return len(obj.participants.all())


class ActivitySerializer(ActivityListSerializer):
    """Full activity with participants and tasks."""

    participants = ActivityParticipantSerializer(many=True, read_only=True)
    tasks = TaskListSerializer(many=True, read_only=True)

    class Meta(ActivityListSerializer.Meta):
        fields = ActivityListSerializer.Meta.fields + ['participants', 'tasks']
        read_only_fields = fields
