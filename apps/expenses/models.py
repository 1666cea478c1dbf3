from decimal import Decimal
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator, RegexValidator
from django.db import models
from django.utils import timezone
import uuid


def default_currency():
    return settings.DEFAULT_CURRENCY


class SplitType(models.TextChoices):
    EQUAL = 'equal', 'Equal'
    PERCENTAGE = 'percentage', 'Percentage'
    AMOUNT = 'amount', 'Amount'


class Expense(models.Model):
    """A cost paid by one participant and shared among several."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    activity = models.ForeignKey(
        'activities.Activity',
        on_delete=models.CASCADE,
        related_name='expenses'
    )
    task = models.ForeignKey(
        'tasks.Task',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='expenses'
    )
    name = models.CharField(max_length=200)
    description = models.TextField(max_length=500, blank=True)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    currency = models.CharField(
        max_length=3,
        default=default_currency,
        validators=[RegexValidator(r'^[A-Z]{3}$', 'Currency must be a 3-letter ISO code.')]
    )
    expense_date = models.DateTimeField(default=timezone.now)
    paid_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='paid_expenses'
    )
    split_type = models.CharField(
        max_length=20,
        choices=SplitType.choices,
        default=SplitType.EQUAL
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'expenses'
        indexes = [
            models.Index(fields=['activity', 'expense_date'], name='expense_activity_date_idx'),
            models.Index(fields=['paid_by', 'expense_date'], name='expense_payer_date_idx'),
        ]
        ordering = ['-expense_date', '-created_at']

    def __str__(self):
        return f"{self.name} - {self.amount} {self.currency}"

    def get_total_shares(self):
        """Sum of share amounts; may differ from amount by rounding drift."""
        return self.shares.aggregate(total=models.Sum('share_amount'))['total'] or Decimal('0.00')

    def get_outstanding_balance(self):
        """Sum of unpaid share amounts."""
        return (
            self.shares.filter(is_paid=False)
            .aggregate(total=models.Sum('share_amount'))['total']
            or Decimal('0.00')
        )


class ExpenseShare(models.Model):
    """One participant's portion of an expense."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    expense = models.ForeignKey(Expense, on_delete=models.CASCADE, related_name='shares')
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='expense_shares'
    )
    share_amount = models.DecimalField(max_digits=12, decimal_places=2)
    share_percentage = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01')), MaxValueValidator(Decimal('100.00'))]
    )
    is_paid = models.BooleanField(default=False)
    paid_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'expense_shares'
        unique_together = [['expense', 'user']]
        indexes = [
            models.Index(fields=['user', 'is_paid'], name='share_user_paid_idx'),
            models.Index(fields=['expense', 'is_paid'], name='share_expense_paid_idx'),
        ]
        ordering = ['created_at']

    def __str__(self):
        state = 'paid' if self.is_paid else 'unpaid'
        return f"{self.user.get_display_name()} owes {self.share_amount} ({state})"

    def mark_paid(self):
        """Mark share as paid; a second call keeps the original timestamp."""
        if self.is_paid:
            return False
        self.is_paid = True
        self.paid_at = timezone.now()
        self.save(update_fields=['is_paid', 'paid_at'])
        return True

    def mark_unpaid(self):
        if not self.is_paid:
            return False
        self.is_paid = False
        self.paid_at = None
        self.save(update_fields=['is_paid', 'paid_at'])
        return True
