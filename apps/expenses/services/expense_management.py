"""
Expense management service.

Creates, updates and deletes expenses together with their share sets.
Every share set is computed by ExpenseSplitService and validated before it
is written, inside the same transaction as the expense itself.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional
from uuid import UUID

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import F, QuerySet, Sum
from django.utils import timezone

from apps.accounts.models import User
from apps.activities.models import Activity, ActivityUser
from apps.activities.services import get_accessible_activity
from apps.expenses.models import Expense, ExpenseShare, SplitType
from apps.tasks.models import Task

from .exceptions import (
    ExpenseNotFoundError,
    ExpensePermissionError,
    InvalidExpenseTaskError,
    InvalidShareUserError,
    InvalidSplitError,
)
from .split_calculation import ExpenseSplitService

logger = logging.getLogger(__name__)

# Distinguishes "leave linked task alone" from "unlink" (None)
UNSET = object()


def _activity_members(activity: Activity) -> List[User]:
    """Creator first, then participants in joining order."""
    members = [activity.created_by]
    for participation in (
        ActivityUser.objects
        .filter(activity=activity)
        .exclude(user_id=activity.created_by_id)
        .select_related('user')
        .order_by('joined_at')
    ):
        members.append(participation.user)
    return members


def _resolve_members(activity: Activity, user_ids: Iterable[UUID]) -> List[User]:
    """
    Map user IDs to users, keeping order.

    Raises:
        InvalidSplitError: If an ID is listed twice
        InvalidShareUserError: If a user is not a member of the activity
    """
    members = {str(member.id): member for member in _activity_members(activity)}
    resolved = []
    seen = set()

    for user_id in user_ids:
        key = str(user_id).lower()
        if key in seen:
            raise InvalidSplitError(f"User {user_id} appears more than once in the split")
        seen.add(key)

        member = members.get(key)
        if member is None:
            raise InvalidShareUserError(f"User {user_id} is not a participant of this activity")
        resolved.append(member)

    return resolved


def _resolve_payer(activity: Activity, paid_by_id: Optional[UUID], default: User) -> User:
    if paid_by_id is None:
        payer = default
    else:
        try:
            payer = User.objects.get(id=paid_by_id)
        except (User.DoesNotExist, DjangoValidationError):
            raise InvalidShareUserError(f"User with ID {paid_by_id} not found")

    if not activity.has_access(payer):
        raise InvalidShareUserError("The payer must be a participant of the activity")
    return payer


def _resolve_task(activity: Activity, task_id: Optional[UUID]) -> Optional[Task]:
    if task_id is None:
        return None
    try:
        return Task.objects.get(id=task_id, activity=activity)
    except (Task.DoesNotExist, DjangoValidationError):
        raise InvalidExpenseTaskError(f"Task {task_id} does not belong to this activity")


def _compute_share_set(
    activity: Activity,
    amount: Decimal,
    split_type: str,
    participant_ids: Optional[List[UUID]],
    shares: Optional[List[dict]]
) -> list:
    """
    Build and validate (user, percentage, amount) triples.

    Equal splits use the given participants or, when none are given, every
    member of the activity. Percentage splits take ``shares`` as
    ``[{'user_id': ..., 'percentage': ...}]``, amount splits as
    ``[{'user_id': ..., 'amount': ...}]``.
    """
    if split_type in (SplitType.PERCENTAGE, SplitType.AMOUNT):
        key = 'percentage' if split_type == SplitType.PERCENTAGE else 'amount'
        if not shares:
            raise InvalidSplitError(f"{split_type.capitalize()} split requires a list of shares")
        if any(share.get(key) is None for share in shares):
            raise InvalidSplitError(f"Every share of a {split_type} split needs a {key}")

        users = _resolve_members(activity, [share['user_id'] for share in shares])
        values = [(user, Decimal(share[key])) for user, share in zip(users, shares)]
        if split_type == SplitType.AMOUNT:
            percentages = ExpenseSplitService.percentages_from_amounts(amount, values)
        else:
            percentages = values
    else:
        if participant_ids:
            users = _resolve_members(activity, participant_ids)
        else:
            users = _activity_members(activity)
        percentages = ExpenseSplitService.calculate_equal_percentages(users)

    share_set = ExpenseSplitService.build_shares(amount, percentages)
    ExpenseSplitService.validate_share_set(amount, share_set)
    return share_set


def _write_shares(expense: Expense, share_set: list) -> List[ExpenseShare]:
    return ExpenseShare.objects.bulk_create([
        ExpenseShare(
            expense=expense,
            user=user,
            share_percentage=pct,
            share_amount=share_amount,
        )
        for user, pct, share_amount in share_set
    ])


def _get_expense_for_update(expense_id: UUID) -> Expense:
    try:
        return (
            Expense.objects
            .select_for_update()
            .select_related('activity', 'paid_by')
            .get(id=expense_id)
        )
    except (Expense.DoesNotExist, DjangoValidationError):
        raise ExpenseNotFoundError(f"Expense with ID {expense_id} not found")


def _check_can_modify(expense: Expense, user: User) -> None:
    if expense.paid_by_id != user.id and not expense.activity.is_creator(user):
        raise ExpensePermissionError(
            "Only the payer or the activity creator can modify this expense"
        )


def _expenses_with_relations() -> QuerySet:
    return (
        Expense.objects
        .select_related('activity', 'paid_by', 'task')
        .prefetch_related('shares__user')
    )


@transaction.atomic
def create_expense(
    *,
    activity_id: UUID,
    user: User,
    name: str,
    amount: Decimal,
    description: str = "",
    currency: Optional[str] = None,
    expense_date: Optional[datetime] = None,
    paid_by_id: Optional[UUID] = None,
    task_id: Optional[UUID] = None,
    split_type: str = SplitType.EQUAL,
    participant_ids: Optional[List[UUID]] = None,
    shares: Optional[List[dict]] = None
) -> Expense:
    """
    Record an expense and split it among participants.

    Args:
        activity_id: UUID of the owning activity
        user: User recording the expense (must have activity access)
        name: Expense name
        amount: Positive amount
        description: Optional description
        currency: 3-letter code, defaults to DEFAULT_CURRENCY
        expense_date: When the money was spent, defaults to now
        paid_by_id: Payer, defaults to the caller; must be a participant
        task_id: Optional task of the same activity
        split_type: 'equal', 'percentage' or 'amount'
        participant_ids: Equal split subset; all members when omitted
        shares: Split entries ``{'user_id', 'percentage'}`` or
            ``{'user_id', 'amount'}``

    Returns:
        Created Expense instance with its shares

    Raises:
        ActivityNotFoundError: If activity doesn't exist
        ActivityAccessDeniedError: If user has no access
        InvalidShareUserError: If payer or a share user is not a participant
        InvalidExpenseTaskError: If task belongs to another activity
        InvalidSplitError: If the share set breaks the split rules
    """
    activity = get_accessible_activity(activity_id, user)
    payer = _resolve_payer(activity, paid_by_id, default=user)
    task = _resolve_task(activity, task_id)

    share_set = _compute_share_set(activity, amount, split_type, participant_ids, shares)

    expense = Expense.objects.create(
        activity=activity,
        task=task,
        name=name.strip(),
        description=(description or "").strip(),
        amount=amount,
        currency=(currency or settings.DEFAULT_CURRENCY).upper(),
        expense_date=expense_date or timezone.now(),
        paid_by=payer,
        split_type=split_type,
    )
    _write_shares(expense, share_set)

    logger.info(
        "Expense %s (%s %s) created in activity %s with %d shares",
        expense.id, expense.amount, expense.currency, activity.id, len(share_set)
    )
    return _expenses_with_relations().get(id=expense.id)


@transaction.atomic
def update_expense(
    *,
    expense_id: UUID,
    user: User,
    name: Optional[str] = None,
    description: Optional[str] = None,
    amount: Optional[Decimal] = None,
    currency: Optional[str] = None,
    expense_date: Optional[datetime] = None,
    paid_by_id: Optional[UUID] = None,
    task_id=UNSET,
    split_type: Optional[str] = None,
    participant_ids: Optional[List[UUID]] = None,
    shares: Optional[List[dict]] = None
) -> Expense:
    """
    Update an expense.

    Only the payer or the activity creator may update. When the split is
    redefined (``split_type``, ``participant_ids`` or ``shares`` given) the
    share set is rebuilt and paid flags start over. When only the amount
    changes, share amounts are recomputed from the stored percentages and
    paid flags are kept.

    Raises:
        ExpenseNotFoundError: If expense doesn't exist
        ActivityAccessDeniedError: If user has no access to the activity
        ExpensePermissionError: If user is neither payer nor creator
        InvalidSplitError: If the new share set breaks the split rules
    """
    expense = _get_expense_for_update(expense_id)
    activity = get_accessible_activity(expense.activity_id, user)
    _check_can_modify(expense, user)

    if name is not None and name.strip():
        expense.name = name.strip()
    if description is not None:
        expense.description = description.strip()
    if currency:
        expense.currency = currency.upper()
    if expense_date is not None:
        expense.expense_date = expense_date
    if paid_by_id is not None:
        expense.paid_by = _resolve_payer(activity, paid_by_id, default=user)
    if task_id is not UNSET:
        expense.task = _resolve_task(activity, task_id)

    amount_changed = amount is not None and amount != expense.amount
    if amount is not None:
        expense.amount = amount

    resplit = split_type is not None or participant_ids is not None or shares is not None

    if resplit:
        expense.split_type = split_type or expense.split_type
        share_set = _compute_share_set(
            activity, expense.amount, expense.split_type, participant_ids, shares
        )
        expense.shares.all().delete()
        _write_shares(expense, share_set)
    elif amount_changed:
        existing = list(expense.shares.select_for_update().select_related('user'))
        share_set = [
            (share.user, share.share_percentage,
             ExpenseSplitService.calculate_share_amount(expense.amount, share.share_percentage))
            for share in existing
        ]
        ExpenseSplitService.validate_share_set(expense.amount, share_set)
        for share, (_, _, share_amount) in zip(existing, share_set):
            share.share_amount = share_amount
        ExpenseShare.objects.bulk_update(existing, ['share_amount'])

    expense.save()
    return _expenses_with_relations().get(id=expense.id)


@transaction.atomic
def delete_expense(*, expense_id: UUID, user: User) -> None:
    """
    Delete an expense and its shares.

    Raises:
        ExpenseNotFoundError: If expense doesn't exist
        ActivityAccessDeniedError: If user has no access to the activity
        ExpensePermissionError: If user is neither payer nor creator
    """
    expense = _get_expense_for_update(expense_id)
    get_accessible_activity(expense.activity_id, user)
    _check_can_modify(expense, user)

    expense.delete()
    logger.info("Expense %s deleted by %s", expense_id, user.id)


def get_expense(*, expense_id: UUID, user: User) -> Expense:
    """Get an expense from an activity the user can access."""
    try:
        expense = _expenses_with_relations().get(id=expense_id)
    except (Expense.DoesNotExist, DjangoValidationError):
        raise ExpenseNotFoundError(f"Expense with ID {expense_id} not found")

    get_accessible_activity(expense.activity_id, user)
    return expense


def list_activity_expenses(*, activity_id: UUID, user: User) -> QuerySet:
    """
    Expenses of an activity, newest first.

    Raises:
        ActivityNotFoundError: If activity doesn't exist
        ActivityAccessDeniedError: If user has no access
    """
    activity = get_accessible_activity(activity_id, user)
    return _expenses_with_relations().filter(activity=activity)


def get_outstanding_shares(*, user: User) -> QuerySet:
    """Unpaid shares the user owes to other payers."""
    return (
        ExpenseShare.objects
        .filter(user=user, is_paid=False)
        .exclude(expense__paid_by=user)
        .select_related('expense', 'expense__activity', 'expense__paid_by', 'user')
        .order_by('expense__expense_date')
    )


def _summary_users(activity: Activity, expenses: QuerySet, shares: QuerySet) -> List[User]:
    """
    Current members in creator-then-join order, followed by anyone who left
    but still paid for or shares in one of the activity's expenses.
    """
    users = _activity_members(activity)
    known = {member.id for member in users}

    involved = set(expenses.values_list('paid_by', flat=True))
    involved.update(shares.values_list('user', flat=True))
    former = involved - known

    if former:
        users.extend(User.objects.filter(id__in=former).order_by('name', 'email'))
    return users


def get_activity_expense_summary(*, activity_id: UUID, user: User) -> dict:
    """
    Per-participant balances for an activity.

    For every member, and every former member still tied to an expense:
    ``paid`` (expenses they paid), ``owed`` (sum of their shares),
    ``balance = paid - owed`` and ``unpaid`` (their unpaid shares on
    expenses paid by someone else). Balances always sum to the rounding
    drift with the sign flipped.

    Returns:
        Dict with activity_id, expense_count, total_amount, unpaid_total,
        rounding_drift and a participants list.

    Raises:
        ActivityNotFoundError: If activity doesn't exist
        ActivityAccessDeniedError: If user has no access
    """
    activity = get_accessible_activity(activity_id, user, allow_system_admin=True)
    zero = Decimal('0.00')

    expenses = Expense.objects.filter(activity=activity)
    shares = ExpenseShare.objects.filter(expense__activity=activity)
    outstanding = shares.filter(is_paid=False).exclude(expense__paid_by=F('user'))

    paid_by_user = {
        row['paid_by']: row['total']
        for row in expenses.values('paid_by').annotate(total=Sum('amount'))
    }
    owed_by_user = {
        row['user']: row['total']
        for row in shares.values('user').annotate(total=Sum('share_amount'))
    }
    unpaid_by_user = {
        row['user']: row['total']
        for row in outstanding.values('user').annotate(total=Sum('share_amount'))
    }

    participants = []
    for member in _summary_users(activity, expenses, shares):
        paid = paid_by_user.get(member.id) or zero
        owed = owed_by_user.get(member.id) or zero
        participants.append({
            'user': member,
            'paid': paid,
            'owed': owed,
            'balance': paid - owed,
            'unpaid': unpaid_by_user.get(member.id) or zero,
        })

    total_amount = expenses.aggregate(total=Sum('amount'))['total'] or zero
    total_shares = shares.aggregate(total=Sum('share_amount'))['total'] or zero
    unpaid_total = outstanding.aggregate(total=Sum('share_amount'))['total'] or zero

    return {
        'activity_id': activity.id,
        'expense_count': expenses.count(),
        'total_amount': total_amount,
        'unpaid_total': unpaid_total,
        'rounding_drift': total_shares - total_amount,
        'participants': participants,
    }
