from django.db.models import Q
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .models import Expense
from .serializers import (
    ExpenseFilterSerializer,
    ExpenseCreateSerializer,
    ExpenseUpdateSerializer,
    ExpenseSerializer,
    OutstandingShareSerializer,
)
from .services import (
    UNSET,
    create_expense,
    update_expense,
    delete_expense,
    get_expense,
    list_activity_expenses,
    get_outstanding_shares,
)


class ExpensePagination(PageNumberPagination):
    """Custom pagination for expenses."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


def _share_input(shares):
    if shares is None:
        return None
    return [dict(share) for share in shares]


class ExpenseViewSet(viewsets.GenericViewSet):
    """
    ViewSet for expenses.

    list: Expenses of ?activity=<id>, or every expense I paid or share in
    create: Record an expense and split it
    retrieve: Get an expense with its shares
    update / partial_update: Edit an expense (payer or activity creator)
    destroy: Delete an expense (payer or activity creator)
    my_outstanding: Unpaid shares I owe to others
    """

    queryset = Expense.objects.none()
    serializer_class = ExpenseSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = ExpensePagination
    lookup_value_regex = '[0-9a-fA-F-]{36}'

    @extend_schema(
        parameters=[OpenApiParameter('activity', str, description='Activity ID')],
        responses={200: ExpenseSerializer(many=True)},
    )
    def list(self, request):
        filters = ExpenseFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)

        activity_id = filters.validated_data.get('activity')
        if activity_id:
            expenses = list_activity_expenses(activity_id=activity_id, user=request.user)
        else:
            user = request.user
            expenses = (
                Expense.objects
                .filter(Q(paid_by=user) | Q(shares__user=user))
                .select_related('activity', 'paid_by', 'task')
                .prefetch_related('shares__user')
                .distinct()
            )

        page = self.paginate_queryset(expenses)
        if page is not None:
            return self.get_paginated_response(ExpenseSerializer(page, many=True).data)
        return Response(ExpenseSerializer(expenses, many=True).data)

    @extend_schema(request=ExpenseCreateSerializer, responses={201: ExpenseSerializer})
    def create(self, request):
        serializer = ExpenseCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        expense = create_expense(
            activity_id=data['activity'],
            user=request.user,
            name=data['name'],
            amount=data['amount'],
            description=data.get('description', ''),
            currency=data.get('currency'),
            expense_date=data.get('expense_date'),
            paid_by_id=data.get('paid_by'),
            task_id=data.get('task'),
            split_type=data['split_type'],
            participant_ids=data.get('participant_ids'),
            shares=_share_input(data.get('shares')),
        )
        return Response(ExpenseSerializer(expense).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        expense = get_expense(expense_id=pk, user=request.user)
        return Response(ExpenseSerializer(expense).data)

    @extend_schema(request=ExpenseUpdateSerializer, responses={200: ExpenseSerializer})
    def update(self, request, pk=None):
        serializer = ExpenseUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        expense = update_expense(
            expense_id=pk,
            user=request.user,
            name=data.get('name'),
            description=data.get('description'),
            amount=data.get('amount'),
            currency=data.get('currency'),
            expense_date=data.get('expense_date'),
            paid_by_id=data.get('paid_by'),
            task_id=data['task'] if 'task' in data else UNSET,
            split_type=data.get('split_type'),
            participant_ids=data.get('participant_ids'),
            shares=_share_input(data.get('shares')),
        )
        return Response(ExpenseSerializer(expense).data)

    @extend_schema(request=ExpenseUpdateSerializer, responses={200: ExpenseSerializer})
    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    def destroy(self, request, pk=None):
        delete_expense(expense_id=pk, user=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(responses={200: OutstandingShareSerializer(many=True)})
    @action(detail=False, methods=['get'])
    def my_outstanding(self, request):
        """Unpaid shares the current user owes."""
        shares = get_outstanding_shares(user=request.user)
        return Response(OutstandingShareSerializer(shares, many=True).data)
