"""System-wide statistics for administrators."""

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.db.models import Sum

from apps.activities.models import Activity
from apps.expenses.models import Expense
from apps.tasks.models import Task, TaskStatus

from .user_management import _require_admin

User = get_user_model()


def get_system_statistics(*, requested_by) -> dict:
    """
    Aggregate counters across users, activities, tasks and expenses.

    Returns:
        Dict with total_users, active_users, total_activities, total_tasks,
        completed_tasks, total_expenses and total_expense_amount.

    Raises:
        AdminRequiredError: If requested_by is not an admin
    """
    _require_admin(requested_by)

    total_amount = Expense.objects.aggregate(total=Sum('amount'))['total']

    return {
        'total_users': User.objects.count(),
        'active_users': User.objects.filter(is_active=True).count(),
        'total_activities': Activity.objects.count(),
        'total_tasks': Task.objects.count(),
        'completed_tasks': Task.objects.filter(status=TaskStatus.COMPLETED).count(),
        'total_expenses': Expense.objects.count(),
        'total_expense_amount': total_amount or Decimal('0.00'),
    }
