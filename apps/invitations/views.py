from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .models import Invitation
from .serializers import (
    InvitationFilterSerializer,
    InvitationCreateSerializer,
    InvitationRespondSerializer,
    InvitationSerializer,
)
from .services import (
    create_invitation,
    respond_to_invitation,
    cancel_invitation,
    get_invitation,
    list_my_invitations,
    list_pending_invitations,
    list_sent_invitations,
    list_activity_invitations,
)


class InvitationViewSet(viewsets.GenericViewSet):
    """
    ViewSet for activity invitations.

    list: Invitations I received (?status= to filter)
    create: Invite a user to an activity
    retrieve: Get an invitation
    pending: My pending invitations
    sent: Invitations I sent
    activity: Invitations of one activity (members and system admins)
    respond / accept / reject: Answer an invitation addressed to me
    cancel: Withdraw a pending invitation (inviter or activity creator)
    """

    queryset = Invitation.objects.none()
    serializer_class = InvitationSerializer
    permission_classes = [IsAuthenticated]
    lookup_value_regex = '[0-9a-fA-F-]{36}'

    @extend_schema(parameters=[OpenApiParameter('status', str, description='Invitation status')])
    def list(self, request):
        filters = InvitationFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)

        invitations = list_my_invitations(
            user=request.user,
            status=filters.validated_data.get('status'),
        )
        return Response(InvitationSerializer(invitations, many=True).data)

    @extend_schema(request=InvitationCreateSerializer, responses={201: InvitationSerializer})
    def create(self, request):
        serializer = InvitationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        invitation = create_invitation(
            activity_id=data['activity'],
            invited_by=request.user,
            email=data.get('email'),
            user_id=data.get('user_id'),
            message=data.get('message', ''),
        )
        return Response(InvitationSerializer(invitation).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        invitation = get_invitation(invitation_id=pk, user=request.user)
        return Response(InvitationSerializer(invitation).data)

    @action(detail=False, methods=['get'])
    def pending(self, request):
        """Pending invitations for the current user."""
        invitations = list_pending_invitations(user=request.user)
        return Response(InvitationSerializer(invitations, many=True).data)

    @action(detail=False, methods=['get'])
    def sent(self, request):
        """Invitations sent by the current user."""
        invitations = list_sent_invitations(user=request.user)
        return Response(InvitationSerializer(invitations, many=True).data)

    @extend_schema(
        parameters=[OpenApiParameter('status', str, description='Invitation status')],
        responses={200: InvitationSerializer(many=True)},
    )
    @action(
        detail=False,
        methods=['get'],
        url_path=r'activity/(?P<activity_id>[0-9a-fA-F-]{36})',
        url_name='activity',
    )
    def activity(self, request, activity_id=None):
        filters = InvitationFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)

        invitations = list_activity_invitations(
            activity_id=activity_id,
            user=request.user,
            status=filters.validated_data.get('status'),
        )
        return Response(InvitationSerializer(invitations, many=True).data)

    @extend_schema(request=InvitationRespondSerializer, responses={200: InvitationSerializer})
    @action(detail=True, methods=['post'])
    def respond(self, request, pk=None):
        """Accept or reject with ``{"accept": true|false}``."""
        serializer = InvitationRespondSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        invitation = respond_to_invitation(
            invitation_id=pk,
            user=request.user,
            accept=serializer.validated_data['accept'],
        )
        return Response(InvitationSerializer(invitation).data)

    @extend_schema(request=None, responses={200: InvitationSerializer})
    @action(detail=True, methods=['post'])
    def accept(self, request, pk=None):
        invitation = respond_to_invitation(invitation_id=pk, user=request.user, accept=True)
        return Response(InvitationSerializer(invitation).data)

    @extend_schema(request=None, responses={200: InvitationSerializer})
    @action(detail=True, methods=['post'])
    def reject(self, request, pk=None):
        invitation = respond_to_invitation(invitation_id=pk, user=request.user, accept=False)
        return Response(InvitationSerializer(invitation).data)

    @extend_schema(request=None, responses={200: InvitationSerializer})
    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        invitation = cancel_invitation(invitation_id=pk, user=request.user)
        return Response(InvitationSerializer(invitation).data)
