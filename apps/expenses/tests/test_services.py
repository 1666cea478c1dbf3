"""
Service layer tests for expenses app.

Tests cover:
- Equal and percentage splits
- Membership checks for payer and share users
- Update rules (re-split vs. rescale)
- Share payment idempotency
- Activity balances
"""

import pytest
from decimal import Decimal
from uuid import uuid4

from apps.activities.services import remove_participant
from apps.activities.services.exceptions import ActivityAccessDeniedError
from apps.expenses.models import Expense, ExpenseShare, SplitType
from apps.expenses.services import (
    create_expense,
    update_expense,
    delete_expense,
    get_expense,
    list_activity_expenses,
    get_outstanding_shares,
    get_activity_expense_summary,
    mark_share_paid,
    unmark_share_paid,
    mark_all_paid_for_activity,
)
from apps.expenses.services.exceptions import (
    ExpenseNotFoundError,
    ExpensePermissionError,
    ExpenseShareNotFoundError,
    InvalidExpenseTaskError,
    InvalidShareUserError,
    InvalidSplitError,
)
from apps.tasks.services import create_task


def _shares_by_user(expense):
    return {share.user_id: share for share in expense.shares.all()}


# =============================================================================
# Create
# =============================================================================

@pytest.mark.django_db
class TestCreateExpense:

    def test_equal_split_among_all_members(self, expense, creator, participant, second_participant):
        shares = _shares_by_user(expense)

        assert expense.paid_by == creator
        assert expense.currency == 'EUR'
        assert expense.split_type == SplitType.EQUAL
        # Creator comes first and takes the extra basis point
        assert shares[creator.id].share_percentage == Decimal('33.34')
        assert shares[participant.id].share_percentage == Decimal('33.33')
        assert shares[second_participant.id].share_percentage == Decimal('33.33')
        assert shares[creator.id].share_amount == Decimal('33.34')
        assert sum(s.share_percentage for s in shares.values()) == Decimal('100.00')

    def test_equal_split_subset(self, activity, participant, second_participant):
        expense = create_expense(
            activity_id=activity.id,
            user=participant,
            name='Snacks',
            amount=Decimal('15.00'),
            participant_ids=[participant.id, second_participant.id],
        )
        shares = _shares_by_user(expense)

        assert set(shares) == {participant.id, second_participant.id}
        assert shares[participant.id].share_amount == Decimal('7.50')
        assert expense.paid_by == participant

    def test_percentage_split(self, activity, creator, participant):
        expense = create_expense(
            activity_id=activity.id,
            user=creator,
            name='Hotel',
            amount=Decimal('200.00'),
            split_type=SplitType.PERCENTAGE,
            shares=[
                {'user_id': creator.id, 'percentage': Decimal('60')},
                {'user_id': participant.id, 'percentage': Decimal('40')},
            ],
        )
        shares = _shares_by_user(expense)

        assert shares[creator.id].share_amount == Decimal('120.00')
        assert shares[participant.id].share_amount == Decimal('80.00')

    def test_percentages_must_sum_to_hundred(self, activity, creator, participant):
        with pytest.raises(InvalidSplitError):
            create_expense(
                activity_id=activity.id,
                user=creator,
                name='Hotel',
                amount=Decimal('200.00'),
                split_type=SplitType.PERCENTAGE,
                shares=[
                    {'user_id': creator.id, 'percentage': Decimal('60')},
                    {'user_id': participant.id, 'percentage': Decimal('30')},
                ],
            )
        assert not Expense.objects.filter(name='Hotel').exists()

    def test_amount_split(self, activity, creator, participant):
        expense = create_expense(
            activity_id=activity.id,
            user=creator,
            name='Hotel',
            amount=Decimal('200.00'),
            split_type=SplitType.AMOUNT,
            shares=[
                {'user_id': creator.id, 'amount': Decimal('50.00')},
                {'user_id': participant.id, 'amount': Decimal('150.00')},
            ],
        )
        shares = _shares_by_user(expense)

        assert expense.split_type == SplitType.AMOUNT
        assert shares[creator.id].share_percentage == Decimal('25.00')
        assert shares[participant.id].share_percentage == Decimal('75.00')
        assert shares[participant.id].share_amount == Decimal('150.00')

    def test_amounts_must_cover_expense(self, activity, creator, participant):
        with pytest.raises(InvalidSplitError):
            create_expense(
                activity_id=activity.id,
                user=creator,
                name='Hotel',
                amount=Decimal('100.00'),
                split_type=SplitType.AMOUNT,
                shares=[
                    {'user_id': creator.id, 'amount': Decimal('50.00')},
                    {'user_id': participant.id, 'amount': Decimal('40.00')},
                ],
            )
        assert not Expense.objects.filter(name='Hotel').exists()

    def test_amount_split_needs_amounts(self, activity, creator):
        with pytest.raises(InvalidSplitError):
            create_expense(
                activity_id=activity.id,
                user=creator,
                name='Hotel',
                amount=Decimal('100.00'),
                split_type=SplitType.AMOUNT,
                shares=[{'user_id': creator.id, 'percentage': Decimal('100')}],
            )

    def test_duplicate_share_user(self, activity, creator):
        with pytest.raises(InvalidSplitError):
            create_expense(
                activity_id=activity.id,
                user=creator,
                name='Hotel',
                amount=Decimal('50.00'),
                split_type=SplitType.PERCENTAGE,
                shares=[
                    {'user_id': creator.id, 'percentage': Decimal('50')},
                    {'user_id': creator.id, 'percentage': Decimal('50')},
                ],
            )

    def test_share_user_must_participate(self, activity, creator, outsider):
        with pytest.raises(InvalidShareUserError):
            create_expense(
                activity_id=activity.id,
                user=creator,
                name='Tickets',
                amount=Decimal('30.00'),
                participant_ids=[creator.id, outsider.id],
            )

    def test_payer_must_participate(self, activity, creator, outsider):
        with pytest.raises(InvalidShareUserError):
            create_expense(
                activity_id=activity.id,
                user=creator,
                name='Tickets',
                amount=Decimal('30.00'),
                paid_by_id=outsider.id,
            )

    def test_task_from_other_activity(self, activity, creator):
        from apps.activities.services import create_activity

        other = create_activity(name='Other', created_by=creator)
        task = create_task(activity_id=other.id, user=creator, name='Elsewhere')

        with pytest.raises(InvalidExpenseTaskError):
            create_expense(
                activity_id=activity.id,
                user=creator,
                name='Tickets',
                amount=Decimal('30.00'),
                task_id=task.id,
            )

    def test_outsider_cannot_create(self, activity, outsider):
        with pytest.raises(ActivityAccessDeniedError):
            create_expense(
                activity_id=activity.id,
                user=outsider,
                name='Tickets',
                amount=Decimal('30.00'),
            )


# =============================================================================
# Update / delete
# =============================================================================

@pytest.mark.django_db
class TestUpdateExpense:

    def test_amount_change_rescales_and_keeps_paid_flags(self, expense, activity, participant):
        share = expense.shares.get(user=participant)
        mark_share_paid(
            activity_id=activity.id,
            expense_id=expense.id,
            share_id=share.id,
            user=participant,
        )

        updated = update_expense(expense_id=expense.id, user=expense.paid_by, amount=Decimal('60.00'))
        share.refresh_from_db()

        assert updated.amount == Decimal('60.00')
        assert share.share_amount == Decimal('20.00')
        assert share.share_percentage == Decimal('33.33')
        assert share.is_paid is True

    def test_resplit_rebuilds_shares(self, expense, creator, participant):
        updated = update_expense(
            expense_id=expense.id,
            user=creator,
            split_type=SplitType.PERCENTAGE,
            shares=[{'user_id': participant.id, 'percentage': Decimal('100')}],
        )

        assert updated.split_type == SplitType.PERCENTAGE
        assert list(updated.shares.values_list('user_id', flat=True)) == [participant.id]
        assert updated.shares.get().share_amount == Decimal('100.00')

    def test_creator_can_update_someone_elses_expense(self, activity, creator, participant):
        expense = create_expense(
            activity_id=activity.id,
            user=participant,
            name='Parking',
            amount=Decimal('9.00'),
        )
        updated = update_expense(expense_id=expense.id, user=creator, name='Parking fee')
        assert updated.name == 'Parking fee'

    def test_other_participant_cannot_update(self, expense, participant):
        with pytest.raises(ExpensePermissionError):
            update_expense(expense_id=expense.id, user=participant, name='Mine now')

    def test_delete_by_payer(self, expense, creator):
        delete_expense(expense_id=expense.id, user=creator)

        assert not Expense.objects.filter(id=expense.id).exists()
        assert not ExpenseShare.objects.filter(expense_id=expense.id).exists()

    def test_delete_missing(self, creator):
        with pytest.raises(ExpenseNotFoundError):
            delete_expense(expense_id=uuid4(), user=creator)


# =============================================================================
# Queries
# =============================================================================

@pytest.mark.django_db
class TestExpenseQueries:

    def test_get_expense_outsider(self, expense, outsider):
        with pytest.raises(ActivityAccessDeniedError):
            get_expense(expense_id=expense.id, user=outsider)

    def test_list_activity_expenses(self, expense, activity, participant):
        assert list(list_activity_expenses(activity_id=activity.id, user=participant)) == [expense]

    def test_outstanding_excludes_payers_own_share(self, expense, creator, participant):
        assert get_outstanding_shares(user=creator).count() == 0

        outstanding = list(get_outstanding_shares(user=participant))
        assert len(outstanding) == 1
        assert outstanding[0].expense == expense

    def test_summary_balances(self, expense, activity, creator, participant, second_participant):
        summary = get_activity_expense_summary(activity_id=activity.id, user=participant)
        rows = {row['user'].id: row for row in summary['participants']}

        assert summary['expense_count'] == 1
        assert summary['total_amount'] == Decimal('100.00')
        assert summary['rounding_drift'] == Decimal('0.00')
        assert summary['unpaid_total'] == Decimal('66.66')

        assert rows[creator.id]['paid'] == Decimal('100.00')
        assert rows[creator.id]['balance'] == Decimal('66.66')
        assert rows[creator.id]['unpaid'] == Decimal('0.00')
        assert rows[participant.id]['balance'] == Decimal('-33.33')
        assert rows[second_participant.id]['unpaid'] == Decimal('33.33')

    def test_summary_reports_drift(self, activity, creator):
        create_expense(activity_id=activity.id, user=creator, name='Coffee', amount=Decimal('10.00'))

        summary = get_activity_expense_summary(activity_id=activity.id, user=creator)
        assert summary['rounding_drift'] == Decimal('-0.01')

    def test_summary_keeps_former_participant(self, expense, activity, creator, participant):
        remove_participant(activity_id=activity.id, user_id=participant.id, removed_by=creator)

        summary = get_activity_expense_summary(activity_id=activity.id, user=creator)
        rows = {row['user'].id: row for row in summary['participants']}

        assert summary['unpaid_total'] == Decimal('66.66')
        assert rows[participant.id]['unpaid'] == Decimal('33.33')
        assert rows[participant.id]['balance'] == Decimal('-33.33')
        assert sum(row['balance'] for row in rows.values()) == -summary['rounding_drift']


# =============================================================================
# Share payments
# =============================================================================

@pytest.mark.django_db
class TestSharePayment:

    def test_mark_paid_is_idempotent(self, expense, activity, participant):
        share = expense.shares.get(user=participant)

        first = mark_share_paid(activity_id=activity.id, expense_id=expense.id, share_id=share.id, user=participant)
        paid_at = first.paid_at
        second = mark_share_paid(activity_id=activity.id, expense_id=expense.id, share_id=share.id, user=participant)

        assert second.is_paid is True
        assert second.paid_at == paid_at

    def test_payer_can_mark_and_unmark(self, expense, activity, creator, participant):
        share = expense.shares.get(user=participant)

        mark_share_paid(activity_id=activity.id, expense_id=expense.id, share_id=share.id, user=creator)
        result = unmark_share_paid(activity_id=activity.id, expense_id=expense.id, share_id=share.id, user=creator)

        assert result.is_paid is False
        assert result.paid_at is None

        # Unmarking again is a no-op
        again = unmark_share_paid(activity_id=activity.id, expense_id=expense.id, share_id=share.id, user=creator)
        assert again.is_paid is False

    def test_other_participant_cannot_mark(self, expense, activity, participant, second_participant):
        share = expense.shares.get(user=participant)

        with pytest.raises(ExpensePermissionError):
            mark_share_paid(
                activity_id=activity.id,
                expense_id=expense.id,
                share_id=share.id,
                user=second_participant,
            )

    def test_share_of_other_expense(self, expense, activity, creator):
        other = create_expense(activity_id=activity.id, user=creator, name='Tolls', amount=Decimal('12.00'))
        foreign_share = other.shares.get(user=creator)

        with pytest.raises(ExpenseShareNotFoundError):
            mark_share_paid(
                activity_id=activity.id,
                expense_id=expense.id,
                share_id=foreign_share.id,
                user=creator,
            )

    def test_expense_of_other_activity(self, expense, creator):
        from apps.activities.services import create_activity

        other = create_activity(name='Elsewhere', created_by=creator)
        share = expense.shares.get(user=creator)

        with pytest.raises(ExpenseNotFoundError):
            mark_share_paid(activity_id=other.id, expense_id=expense.id, share_id=share.id, user=creator)

    def test_mark_all_paid(self, expense, activity, participant):
        share = expense.shares.get(user=participant)
        mark_share_paid(activity_id=activity.id, expense_id=expense.id, share_id=share.id, user=participant)

        assert mark_all_paid_for_activity(activity_id=activity.id, user=participant) == 2
        assert not ExpenseShare.objects.filter(expense=expense, is_paid=False).exists()
        assert mark_all_paid_for_activity(activity_id=activity.id, user=participant) == 0
