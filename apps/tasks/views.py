from rest_framework import viewsets, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .models import Task
from .serializers import (
    TaskFilterSerializer,
    TaskCreateSerializer,
    TaskUpdateSerializer,
    TaskSerializer,
)
from .services import (
    UNSET,
    create_task,
    update_task,
    delete_task,
    get_task,
    list_activity_tasks,
    list_my_tasks,
)


class TaskPagination(PageNumberPagination):
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 200


class TaskViewSet(viewsets.GenericViewSet):
    """
    ViewSet for tasks.

    All business logic is handled by services.

    list: Tasks of ?activity=<id>, or tasks assigned to me
    create: Create a task in an activity
    retrieve: Get a task
    update / partial_update: Edit a task
    destroy: Delete a task (task creator or activity admins)
    """

    queryset = Task.objects.none()
    serializer_class = TaskSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = TaskPagination
    lookup_value_regex = '[0-9a-fA-F-]{36}'

    @extend_schema(
        parameters=[
            OpenApiParameter('activity', str, description='Activity ID'),
            OpenApiParameter('status', str, description='Task status'),
            OpenApiParameter('assigned_to', str, description='Assignee user ID'),
        ],
        responses={200: TaskSerializer(many=True)},
    )
    def list(self, request):
        filters = TaskFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        params = filters.validated_data

        if params.get('activity'):
            tasks = list_activity_tasks(
                activity_id=params['activity'],
                user=request.user,
                status=params.get('status'),
                assigned_to_id=params.get('assigned_to'),
            )
        else:
            tasks = list_my_tasks(user=request.user, status=params.get('status'))

        page = self.paginate_queryset(tasks)
        if page is not None:
            return self.get_paginated_response(TaskSerializer(page, many=True).data)
        return Response(TaskSerializer(tasks, many=True).data)

    @extend_schema(request=TaskCreateSerializer, responses={201: TaskSerializer})
    def create(self, request):
        serializer = TaskCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        task = create_task(
            activity_id=data['activity'],
            user=request.user,
            name=data['name'],
            description=data.get('description', ''),
            due_date=data.get('due_date'),
            priority=data['priority'],
            status=data['status'],
            assigned_to_id=data.get('assigned_to'),
        )
        return Response(TaskSerializer(task).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        task = get_task(task_id=pk, user=request.user)
        return Response(TaskSerializer(task).data)

    @extend_schema(request=TaskUpdateSerializer, responses={200: TaskSerializer})
    def update(self, request, pk=None):
        serializer = TaskUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        task = update_task(
            task_id=pk,
            user=request.user,
            name=data.get('name'),
            description=data.get('description'),
            due_date=data.get('due_date'),
            priority=data.get('priority'),
            status=data.get('status'),
            assigned_to_id=data['assigned_to'] if 'assigned_to' in data else UNSET,
        )
        return Response(TaskSerializer(task).data)

    @extend_schema(request=TaskUpdateSerializer, responses={200: TaskSerializer})
    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    def destroy(self, request, pk=None):
        delete_task(task_id=pk, user=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)
