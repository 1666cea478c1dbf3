"""
Share payment service.

Marks expense shares paid or unpaid. Both operations are idempotent:
repeating them leaves the share unchanged and succeeds.
"""

import logging
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.activities.services import get_accessible_activity
from apps.expenses.models import Expense, ExpenseShare

from .exceptions import ExpenseNotFoundError, ExpensePermissionError, ExpenseShareNotFoundError

logger = logging.getLogger(__name__)


def _get_share_for_update(
    activity_id: UUID,
    expense_id: UUID,
    share_id: UUID,
    user: User
) -> ExpenseShare:
    """
    Resolve activity -> expense -> share and check who may touch the share.

    Only the share owner or the expense payer may change its paid state.
    """
    activity = get_accessible_activity(activity_id, user)

    try:
        expense = Expense.objects.get(id=expense_id, activity=activity)
    except (Expense.DoesNotExist, DjangoValidationError):
        raise ExpenseNotFoundError(f"Expense with ID {expense_id} not found in this activity")

    try:
        share = (
            ExpenseShare.objects
            .select_for_update()
            .select_related('expense', 'user')
            .get(id=share_id, expense=expense)
        )
    except (ExpenseShare.DoesNotExist, DjangoValidationError):
        raise ExpenseShareNotFoundError(f"Share with ID {share_id} not found for this expense")

    if share.user_id != user.id and expense.paid_by_id != user.id:
        raise ExpensePermissionError(
            "Only the share owner or the payer can change its payment status"
        )

    return share


@transaction.atomic
def mark_share_paid(
    *,
    activity_id: UUID,
    expense_id: UUID,
    share_id: UUID,
    user: User
) -> ExpenseShare:
    """
    Mark a share as paid.

    Marking an already paid share keeps its original ``paid_at``.

    Raises:
        ActivityNotFoundError: If activity doesn't exist
        ActivityAccessDeniedError: If user has no access
        ExpenseNotFoundError: If expense is not in the activity
        ExpenseShareNotFoundError: If share is not in the expense
        ExpensePermissionError: If user is neither share owner nor payer
    """
    share = _get_share_for_update(activity_id, expense_id, share_id, user)

    if share.mark_paid():
        logger.info("Share %s marked paid by %s", share.id, user.id)

    return share


@transaction.atomic
def unmark_share_paid(
    *,
    activity_id: UUID,
    expense_id: UUID,
    share_id: UUID,
    user: User
) -> ExpenseShare:
    """
    Mark a share as unpaid again.

    Unmarking an unpaid share is a no-op.

    Raises:
        Same as mark_share_paid
    """
    share = _get_share_for_update(activity_id, expense_id, share_id, user)

    if share.mark_unpaid():
        logger.info("Share %s marked unpaid by %s", share.id, user.id)

    return share


@transaction.atomic
def mark_all_paid_for_activity(*, activity_id: UUID, user: User) -> int:
    """
    Settle every unpaid share in an activity.

    Allowed for the creator, participants and system admins.

    Returns:
        Number of shares that changed state

    Raises:
        ActivityNotFoundError: If activity doesn't exist
        ActivityAccessDeniedError: If user has no access
    """
    activity = get_accessible_activity(activity_id, user, for_update=True, allow_system_admin=True)

    updated = (
        ExpenseShare.objects
        .filter(expense__activity=activity, is_paid=False)
        .update(is_paid=True, paid_at=timezone.now())
    )

    logger.info("Marked %d shares paid in activity %s by %s", updated, activity.id, user.id)
    return updated
