"""
API endpoint tests for tasks.
"""

import pytest
from uuid import uuid4
from django.urls import reverse
from rest_framework import status

from apps.tasks.models import Task


@pytest.mark.django_db
class TestTaskEndpoints:

    def test_create(self, creator_client, activity, participant):
        response = creator_client.post(
            reverse('tasks:task-list'),
            {
                'activity': str(activity.id),
                'name': 'Order pizza',
                'priority': 'high',
                'assigned_to': str(participant.id),
            },
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['priority'] == 'high'
        assert response.data['status'] == 'pending'
        assert response.data['assigned_to']['id'] == str(participant.id)
        assert response.data['activity_name'] == 'House move'

    def test_create_invalid_priority(self, creator_client, activity):
        response = creator_client.post(
            reverse('tasks:task-list'),
            {'activity': str(activity.id), 'name': 'Order pizza', 'priority': 'urgent'},
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'priority' in response.data['details']

    def test_create_outsider_forbidden(self, outsider_client, activity):
        response = outsider_client.post(
            reverse('tasks:task-list'),
            {'activity': str(activity.id), 'name': 'Sneaky'},
            format='json',
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_list_by_activity(self, creator_client, activity, task):
        response = creator_client.get(reverse('tasks:task-list'), {'activity': str(activity.id)})

        assert response.status_code == status.HTTP_200_OK
        assert [item['id'] for item in response.data['results']] == [str(task.id)]

    def test_list_my_tasks(self, participant_client, creator_client, task):
        response = participant_client.get(reverse('tasks:task-list'))
        assert response.data['count'] == 1

        response = creator_client.get(reverse('tasks:task-list'))
        assert response.data['count'] == 0

    def test_complete_task(self, creator_client, task):
        response = creator_client.patch(
            reverse('tasks:task-detail', args=[task.id]),
            {'status': 'completed'},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'completed'
        assert response.data['completed_at'] is not None

    def test_unassign(self, creator_client, task):
        response = creator_client.patch(
            reverse('tasks:task-detail', args=[task.id]),
            {'assigned_to': None},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['assigned_to'] is None

    def test_retrieve_missing(self, creator_client):
        response = creator_client.get(reverse('tasks:task-detail', args=[uuid4()]))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['code'] == 'task_not_found'

    def test_delete_forbidden_for_other_participant(self, participant_client, activity, creator):
        task = Task.objects.create(activity=activity, name='Creator task', created_by=creator)

        response = participant_client.delete(reverse('tasks:task-detail', args=[task.id]))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['code'] == 'task_permission_denied'

    def test_activity_tasks_action(self, participant_client, activity, task):
        response = participant_client.get(
            reverse('activities:activity-tasks', args=[activity.id]),
            {'status': 'pending'},
        )

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
