from django.db import models
from django.db.models import Q
from django.utils import timezone
import uuid


class InvitationStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    ACCEPTED = 'accepted', 'Accepted'
    REJECTED = 'rejected', 'Rejected'
    CANCELLED = 'cancelled', 'Cancelled'


class Invitation(models.Model):
    """Request for a user to join an activity."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    activity = models.ForeignKey(
        'activities.Activity',
        on_delete=models.CASCADE,
        related_name='invitations'
    )
    invited_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='sent_invitations'
    )
    invited_user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='received_invitations'
    )
    status = models.CharField(
        max_length=20,
        choices=InvitationStatus.choices,
        default=InvitationStatus.PENDING
    )
    message = models.TextField(max_length=500, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    responded_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'invitations'
        constraints = [
            models.UniqueConstraint(
                fields=['activity', 'invited_user'],
                condition=Q(status='pending'),
                name='unique_pending_invitation',
            ),
        ]
        indexes = [
            models.Index(fields=['invited_user', 'status'], name='invitation_user_status_idx'),
            models.Index(fields=['activity', 'status'], name='invitation_act_status_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.invited_user} -> {self.activity} ({self.status})"

    @property
    def is_pending(self):
        return self.status == InvitationStatus.PENDING

    def resolve(self, status):
        """Move a pending invitation to its final state."""
        self.status = status
        self.responded_at = timezone.now()
        self.save(update_fields=['status', 'responded_at'])
