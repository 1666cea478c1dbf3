from django.core.exceptions import ValidationError
from django.core.validators import MinLengthValidator
from django.db import models
import uuid


class Activity(models.Model):
    """A trip or event that groups participants, tasks and expenses."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200, validators=[MinLengthValidator(2)])
    description = models.TextField(max_length=1000, blank=True)
    start_date = models.DateTimeField(null=True, blank=True)
    end_date = models.DateTimeField(null=True, blank=True)
    location = models.CharField(max_length=100, blank=True)
    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='created_activities'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'activities'
        indexes = [
            models.Index(fields=['created_by', 'created_at'], name='activity_creator_idx'),
            models.Index(fields=['start_date'], name='activity_start_idx'),
        ]
        ordering = ['-created_at']
        verbose_name_plural = 'activities'

    def __str__(self):
        return self.name

    def clean(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError({'end_date': 'End date must be after start date.'})

    def is_creator(self, user):
        return self.created_by_id == user.id

    def has_participant(self, user):
        return self.participants.filter(user=user).exists()

    def has_access(self, user):
        """Creator or participant."""
        return self.is_creator(user) or self.has_participant(user)

    def is_admin(self, user):
        """Creator or a participant flagged as admin."""
        if self.is_creator(user):
            return True
        return self.participants.filter(user=user, is_admin=True).exists()


class ActivityUser(models.Model):
    """Participation of a user in an activity."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    activity = models.ForeignKey(Activity, on_delete=models.CASCADE, related_name='participants')
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='activity_participations'
    )
    is_admin = models.BooleanField(default=False)
    joined_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'activity_users'
        unique_together = [['activity', 'user']]
        indexes = [
            models.Index(fields=['user', 'joined_at'], name='activity_user_joined_idx'),
        ]
        ordering = ['joined_at']

    def __str__(self):
        return f"{self.user.get_display_name()} in {self.activity.name}"

    def save(self, *args, **kwargs):
        if self.activity.created_by_id == self.user_id:
            self.is_admin = True
        super().save(*args, **kwargs)
