from rest_framework import serializers

from apps.accounts.serializers import UserMinimalSerializer

from .models import Invitation, InvitationStatus


class InvitationFilterSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=InvitationStatus.choices, required=False)


class InvitationCreateSerializer(serializers.Serializer):
    """Invite by email or by user ID."""

    activity = serializers.UUIDField()
    email = serializers.EmailField(required=False)
    user_id = serializers.UUIDField(required=False)
    message = serializers.CharField(max_length=500, required=False, allow_blank=True)

    def validate(self, attrs):
        if not attrs.get('email') and not attrs.get('user_id'):
            raise serializers.ValidationError({
                'email': 'Provide the email or user_id of the user to invite.'
            })
        return attrs


class InvitationRespondSerializer(serializers.Serializer):
    accept = serializers.BooleanField()


class InvitationSerializer(serializers.ModelSerializer):
    invited_by = UserMinimalSerializer(read_only=True)
    invited_user = UserMinimalSerializer(read_only=True)
    activity_name = serializers.CharField(source='activity.name', read_only=True)

    class Meta:
        model = Invitation
        fields = [
            'id',
            'activity',
            'activity_name',
            'invited_by',
            'invited_user',
            'status',
            'message',
            'created_at',
            'responded_at',
        ]
        read_only_fields = fields
