from rest_framework import serializers

from apps.accounts.serializers import UserMinimalSerializer

from .models import Task, TaskStatus, TaskPriority


# =============================================================================
# Input Serializers
# =============================================================================

class TaskFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for task filtering.

    Query Parameters:
        activity (UUID): Tasks of this activity; without it, tasks assigned to me
        status (str): Filter by status
        assigned_to (UUID): Filter by assignee
    """

    activity = serializers.UUIDField(required=False)
    status = serializers.ChoiceField(choices=TaskStatus.choices, required=False)
    assigned_to = serializers.UUIDField(required=False)


class TaskCreateSerializer(serializers.Serializer):
    activity = serializers.UUIDField()
    name = serializers.CharField(max_length=200)
    description = serializers.CharField(max_length=1000, required=False, allow_blank=True)
    due_date = serializers.DateTimeField(required=False, allow_null=True)
    priority = serializers.ChoiceField(
        choices=TaskPriority.choices,
        default=TaskPriority.MEDIUM
    )
    status = serializers.ChoiceField(
        choices=TaskStatus.choices,
        default=TaskStatus.PENDING
    )
    assigned_to = serializers.UUIDField(required=False, allow_null=True)

    def validate_name(self, value):
        if not value.strip():
            raise serializers.ValidationError('Name cannot be blank.')
        return value


class TaskUpdateSerializer(serializers.Serializer):
    """All fields optional; send ``assigned_to: null`` to unassign."""

    name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    description = serializers.CharField(max_length=1000, required=False, allow_blank=True)
    due_date = serializers.DateTimeField(required=False, allow_null=True)
    priority = serializers.ChoiceField(choices=TaskPriority.choices, required=False)
    status = serializers.ChoiceField(choices=TaskStatus.choices, required=False)
    assigned_to = serializers.UUIDField(required=False, allow_null=True)


# =============================================================================
# Output Serializers
# =============================================================================

class TaskListSerializer(serializers.ModelSerializer):
    """Task summary used in lists and inside activity details."""

    assigned_to = UserMinimalSerializer(read_only=True)

    class Meta:
        model = Task
        fields = [
            'id',
            'name',
            'status',
            'priority',
            'due_date',
            'assigned_to',
            'completed_at',
        ]
        read_only_fields = fields


class TaskSerializer(serializers.ModelSerializer):
    """Full task representation."""

    assigned_to = UserMinimalSerializer(read_only=True)
    created_by = UserMinimalSerializer(read_only=True)
    activity_name = serializers.CharField(source='activity.name', read_only=True)

    class Meta:
        model = Task
        fields = [
            'id',
            'activity',
            'activity_name',
            'name',
            'description',
            'due_date',
            'status',
            'priority',
            'assigned_to',
            'created_by',
            'completed_at',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields
