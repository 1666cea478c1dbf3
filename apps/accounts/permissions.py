from rest_framework import permissions


class IsSystemAdmin(permissions.BasePermission):
    """Only users with the admin role."""

    message = "Administrator role required."

    def has_permission(self, request, view):
        return bool(
            request.user
            and request.user.is_authenticated
            and request.user.is_system_admin
        )


class IsSelfOrSystemAdmin(permissions.BasePermission):
    """Users may act on their own account, admins on any account."""

    message = "You can only modify your own account."

    def has_object_permission(self, request, view, obj):
        return obj.id == request.user.id or request.user.is_system_admin
