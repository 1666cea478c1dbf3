from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from apps.expenses.serializers import (
    ExpenseSerializer,
    ExpenseShareSerializer,
    ExpenseSummarySerializer,
    MarkAllPaidResponseSerializer,
)
from apps.expenses.services import (
    list_activity_expenses,
    get_activity_expense_summary,
    mark_all_paid_for_activity,
    mark_share_paid,
    unmark_share_paid,
)
from apps.invitations.serializers import InvitationFilterSerializer, InvitationSerializer
from apps.invitations.services import list_activity_invitations
from apps.tasks.serializers import TaskFilterSerializer, TaskSerializer
from apps.tasks.services import list_activity_tasks

from .models import Activity
from .permissions import IsActivityParticipant, IsActivityCreatorOrSystemAdmin
from .serializers import (
    ActivityCreateSerializer,
    ActivityUpdateSerializer,
    ActivityListSerializer,
    ActivitySerializer,
    ActivityParticipantSerializer,
    ParticipantAdminSerializer,
)
from .services import (
    create_activity,
    update_activity,
    delete_activity,
    get_activity,
    list_user_activities,
    get_participants,
    remove_participant,
    set_participant_admin,
)

UUID_PATTERN = '[0-9a-fA-F-]{36}'


class ActivityPagination(PageNumberPagination):
    """Custom pagination for activities."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class ActivityViewSet(viewsets.ModelViewSet):
    """
    ViewSet for activities and everything scoped to one activity.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Activities I created or participate in
    create: Create an activity (creator becomes admin participant)
    retrieve: Activity with participants and tasks
    update / partial_update: Edit (creator or system admin)
    destroy: Delete (creator or system admin)
    """

    queryset = Activity.objects.select_related('created_by')
    serializer_class = ActivitySerializer
    permission_classes = [IsAuthenticated]
    pagination_class = ActivityPagination
    lookup_value_regex = UUID_PATTERN

    def get_serializer_class(self):
        """Use different serializers for different actions."""
        if self.action == 'list':
            return ActivityListSerializer
        elif self.action == 'create':
            return ActivityCreateSerializer
        elif self.action in ['update', 'partial_update']:
            return ActivityUpdateSerializer
        return ActivitySerializer

    def get_permissions(self):
        """Set permissions based on action."""
        if self.action in ['update', 'partial_update', 'destroy']:
            return [IsAuthenticated(), IsActivityCreatorOrSystemAdmin()]
        if self.action == 'participants':
            return [IsAuthenticated(), IsActivityParticipant()]
        return [IsAuthenticated()]

    def list(self, request, *args, **kwargs):
        activities = list_user_activities(user=request.user)
        page = self.paginate_queryset(activities)
        if page is not None:
            return self.get_paginated_response(ActivityListSerializer(page, many=True).data)
        return Response(ActivityListSerializer(activities, many=True).data)

    def create(self, request, *args, **kwargs):
        serializer = ActivityCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        activity = create_activity(created_by=request.user, **serializer.validated_data)

        activity = get_activity(activity_id=activity.id, user=request.user)
        return Response(ActivitySerializer(activity).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, *args, **kwargs):
        activity = get_activity(activity_id=kwargs['pk'], user=request.user)
        return Response(ActivitySerializer(activity).data)

    def update(self, request, *args, **kwargs):
        self.get_object()
        serializer = ActivityUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        update_activity(
            activity_id=kwargs['pk'],
            user=request.user,
            **serializer.validated_data
        )
        activity = get_activity(activity_id=kwargs['pk'], user=request.user)
        return Response(ActivitySerializer(activity).data)

    def partial_update(self, request, *args, **kwargs):
        return self.update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        self.get_object()
        delete_activity(activity_id=kwargs['pk'], user=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # -------------------------------------------------------------------------
    # Participants
    # -------------------------------------------------------------------------

    @extend_schema(responses={200: ActivityParticipantSerializer(many=True)})
    @action(detail=True, methods=['get'])
    def participants(self, request, pk=None):
        """Participants of the activity."""
        self.get_object()
        participants = get_participants(activity_id=pk, user=request.user)
        return Response(ActivityParticipantSerializer(participants, many=True).data)

    @extend_schema(request=ParticipantAdminSerializer, responses={200: ActivityParticipantSerializer})
    @action(
        detail=True,
        methods=['patch', 'delete'],
        url_path=rf'participants/(?P<user_id>{UUID_PATTERN})',
        url_name='participant-detail',
    )
    def participant_detail(self, request, pk=None, user_id=None):
        """
        DELETE removes a participant (creator, or the participant themselves).
        PATCH ``{"is_admin": bool}`` changes the admin flag (creator only).
        """
        if request.method == 'DELETE':
            remove_participant(activity_id=pk, user_id=user_id, removed_by=request.user)
            return Response(status=status.HTTP_204_NO_CONTENT)

        serializer = ParticipantAdminSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        participant = set_participant_admin(
            activity_id=pk,
            user_id=user_id,
            is_admin=serializer.validated_data['is_admin'],
            updated_by=request.user,
        )
        return Response(ActivityParticipantSerializer(participant).data)

    # -------------------------------------------------------------------------
    # Tasks, expenses and invitations of the activity
    # -------------------------------------------------------------------------

    @extend_schema(responses={200: TaskSerializer(many=True)})
    @action(detail=True, methods=['get'])
    def tasks(self, request, pk=None):
        filters = TaskFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)

        tasks = list_activity_tasks(
            activity_id=pk,
            user=request.user,
            status=filters.validated_data.get('status'),
            assigned_to_id=filters.validated_data.get('assigned_to'),
        )
        return Response(TaskSerializer(tasks, many=True).data)

    @extend_schema(responses={200: ExpenseSerializer(many=True)})
    @action(detail=True, methods=['get'])
    def expenses(self, request, pk=None):
        expenses = list_activity_expenses(activity_id=pk, user=request.user)
        return Response(ExpenseSerializer(expenses, many=True).data)

    @extend_schema(responses={200: ExpenseSummarySerializer})
    @action(detail=True, methods=['get'])
    def expense_summary(self, request, pk=None):
        """Per-participant paid/owed balances."""
        summary = get_activity_expense_summary(activity_id=pk, user=request.user)
        return Response(ExpenseSummarySerializer(summary).data)

    @extend_schema(request=None, responses={200: MarkAllPaidResponseSerializer})
    @action(detail=True, methods=['post'])
    def mark_all_paid(self, request, pk=None):
        """Settle every unpaid share in the activity."""
        updated = mark_all_paid_for_activity(activity_id=pk, user=request.user)
        return Response({
            'message': f'{updated} share(s) marked as paid',
            'updated': updated,
        })

    @extend_schema(request=None, responses={200: ExpenseShareSerializer})
    @action(
        detail=True,
        methods=['patch', 'post'],
        url_path=rf'expenses/(?P<expense_id>{UUID_PATTERN})/shares/(?P<share_id>{UUID_PATTERN})/mark_paid',
        url_name='share-mark-paid',
    )
    def share_mark_paid(self, request, pk=None, expense_id=None, share_id=None):
        """Mark a share paid (share owner or payer). Repeating is harmless."""
        share = mark_share_paid(
            activity_id=pk,
            expense_id=expense_id,
            share_id=share_id,
            user=request.user,
        )
        return Response(ExpenseShareSerializer(share).data)

    @extend_schema(request=None, responses={200: ExpenseShareSerializer})
    @action(
        detail=True,
        methods=['patch', 'post'],
        url_path=rf'expenses/(?P<expense_id>{UUID_PATTERN})/shares/(?P<share_id>{UUID_PATTERN})/unmark_paid',
        url_name='share-unmark-paid',
    )
    def share_unmark_paid(self, request, pk=None, expense_id=None, share_id=None):
        """Mark a share unpaid again (share owner or payer)."""
        share = unmark_share_paid(
            activity_id=pk,
            expense_id=expense_id,
            share_id=share_id,
            user=request.user,
        )
        return Response(ExpenseShareSerializer(share).data)

    @extend_schema(responses={200: InvitationSerializer(many=True)})
    @action(detail=True, methods=['get'])
    def invitations(self, request, pk=None):
        filters = InvitationFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)

        invitations = list_activity_invitations(
            activity_id=pk,
            user=request.user,
            status=filters.validated_data.get('status'),
        )
        return Response(InvitationSerializer(invitations, many=True).data)
