"""
Custom permission classes for activities app.

Object-level checks for activities. Services enforce the same rules.
"""
from rest_framework.permissions import BasePermission


class IsActivityParticipant(BasePermission):
    """
    Allows access to the activity creator and its participants.

    System admins are let through for read access.
    """

    message = 'You must be a participant of this activity.'

    def has_object_permission(self, request, view, obj):
        if obj.has_access(request.user):
            return True
        return request.user.is_system_admin and request.method in ('GET', 'HEAD', 'OPTIONS')


class IsActivityCreatorOrSystemAdmin(BasePermission):
    """Only the activity creator or a system admin may modify it."""

    message = 'Only the activity creator can modify this activity.'

    def has_object_permission(self, request, view, obj):
        return obj.is_creator(request.user) or request.user.is_system_admin
