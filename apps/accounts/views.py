import logging

from rest_framework import status, viewsets, serializers
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.activities.serializers import ActivityListSerializer
from apps.activities.services import list_all_activities

from .models import User
from .permissions import IsSystemAdmin, IsSelfOrSystemAdmin
from .serializers import (
    UserRegistrationSerializer,
    UserLoginSerializer,
    UserSerializer,
    LogoutSerializer,
    UserUpdateSerializer,
    UserRoleSerializer,
    SystemStatisticsSerializer,
)
from .services import (
    register_user,
    authenticate_user,
    issue_tokens,
    revoke_refresh_token,
    get_user_by_id,
    list_users,
    update_user,
    delete_user,
    set_user_role,
    toggle_user_active,
    get_system_statistics,
)

logger = logging.getLogger(__name__)


# Response serializers for API documentation
class TokensResponseSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class AuthResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = UserSerializer()
    tokens = TokensResponseSerializer()


class MessageResponseSerializer(serializers.Serializer):
    message = serializers.CharField()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()
    code = serializers.CharField()
    status = serializers.IntegerField()


@extend_schema(
    request=UserRegistrationSerializer,
    responses={
        201: AuthResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Register a new user account and receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """Register a new user account."""
    serializer = UserRegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    user = register_user(
        email=serializer.validated_data['email'],
        password=serializer.validated_data['password'],
        name=serializer.validated_data['name'],
    )

    return Response({
        'message': 'Registration successful',
        'user': UserSerializer(user).data,
        'tokens': issue_tokens(user),
    }, status=status.HTTP_201_CREATED)


@extend_schema(
    request=UserLoginSerializer,
    responses={
        200: AuthResponseSerializer,
        400: ErrorResponseSerializer,
        401: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Authenticate with email and password to receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Login with email and password."""
    serializer = UserLoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    user = authenticate_user(
        email=serializer.validated_data['email'],
        password=serializer.validated_data['password'],
    )

    return Response({
        'message': 'Login successful',
        'user': UserSerializer(user).data,
        'tokens': issue_tokens(user),
    })


@extend_schema(
    request=LogoutSerializer,
    responses={
        200: MessageResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Logout and revoke the refresh token.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout(request):
    """Logout and blacklist refresh token."""
    serializer = LogoutSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    revoke_refresh_token(token=serializer.validated_data['refresh'])

    return Response({
        'message': 'Logout successful'
    })


@extend_schema(
    responses={200: UserSerializer},
    description="Get the current authenticated user's profile.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_current_user(request):
    """Get current authenticated user profile."""
    return Response(UserSerializer(request.user).data)


class UserViewSet(viewsets.GenericViewSet):
    """
    User management.

    list: All users (admin only)
    retrieve: Any user by ID
    update / partial_update: Own profile, or anyone for admins
    destroy: Delete a user (admin only)
    """

    queryset = User.objects.all()
    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated]
    lookup_value_regex = '[0-9a-fA-F-]{36}'

    def get_permissions(self):
        """Set permissions based on action."""
        if self.action in ['list', 'destroy', 'role', 'toggle_active', 'statistics', 'activities']:
            return [IsAuthenticated(), IsSystemAdmin()]
        if self.action in ['update', 'partial_update']:
            return [IsAuthenticated(), IsSelfOrSystemAdmin()]
        return [IsAuthenticated()]

    def list(self, request):
        users = list_users(requested_by=request.user)
        return Response(UserSerializer(users, many=True).data)

    def retrieve(self, request, pk=None):
        user = get_user_by_id(user_id=pk)
        return Response(UserSerializer(user).data)

    @extend_schema(request=UserUpdateSerializer, responses={200: UserSerializer})
    def update(self, request, pk=None):
        user = get_user_by_id(user_id=pk)
        self.check_object_permissions(request, user)

        serializer = UserUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = update_user(
            user_id=pk,
            updated_by=request.user,
            name=serializer.validated_data.get('name'),
            email=serializer.validated_data.get('email'),
        )
        return Response(UserSerializer(user).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    def destroy(self, request, pk=None):
        delete_user(user_id=pk, deleted_by=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=['get'])
    def profile(self, request):
        """Current user's profile."""
        return Response(UserSerializer(request.user).data)

    @extend_schema(responses={200: SystemStatisticsSerializer})
    @action(detail=False, methods=['get'])
    def statistics(self, request):
        """System-wide counters (admin only)."""
        stats = get_system_statistics(requested_by=request.user)
        return Response(SystemStatisticsSerializer(stats).data)

    @extend_schema(responses={200: ActivityListSerializer(many=True)})
    @action(detail=False, methods=['get'])
    def activities(self, request):
        """Every activity in the system (admin only)."""
        activities = list_all_activities(requested_by=request.user)
        return Response(ActivityListSerializer(activities, many=True).data)

    @extend_schema(request=UserRoleSerializer, responses={200: UserSerializer})
    @action(detail=True, methods=['put', 'patch'])
    def role(self, request, pk=None):
        """Change a user's role (admin only)."""
        serializer = UserRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = set_user_role(
            user_id=pk,
            role=serializer.validated_data['role'],
            updated_by=request.user,
        )
        return Response(UserSerializer(user).data)

    @extend_schema(request=None, responses={200: UserSerializer})
    @action(detail=True, methods=['put', 'patch'])
    def toggle_active(self, request, pk=None):
        """Activate or deactivate a user (admin only)."""
        user = toggle_user_active(user_id=pk, updated_by=request.user)
        return Response(UserSerializer(user).data)
