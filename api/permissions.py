# api/permissions.py
from rest_framework.permissions import BasePermission, SAFE_METHODS
from apps.users.models import Roles


def _has_role(request, role_name):
    user = getattr(request, 'user', None)
    if not user or not getattr(user, 'is_authenticated', False):
        return False
    has_role = getattr(user, 'has_role', None)
    return bool(has_role and has_role(role_name))


class IsAdmin(BasePermission):
    """Только администраторы"""
    message = 'Доступ запрещён. Требуется роль: admin'

    def has_permission(self, request, view):
        return _has_role(request, Roles.ROLE_ADMIN)


class IsAdminOrReadOnly(BasePermission):
    """
    Allows access only to admin users for write operations.
    Read operations are allowed for everyone.
    """
    message = 'Доступ запрещён. Требуется роль: admin'

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return _has_role(request, Roles.ROLE_ADMIN)
