import logging

from django.db import DatabaseError
from rest_framework.permissions import BasePermission

from .models import UserRole

logger = logging.getLogger(__name__)


ROLE_CANDIDATE = UserRole.ROLE_CANDIDATE
ROLE_MENTOR = UserRole.ROLE_MENTOR
ROLE_ADMIN = UserRole.ROLE_ADMIN
ROLE_SUPER_ADMIN = UserRole.ROLE_SUPER_ADMIN
APP_ROLES = {ROLE_CANDIDATE, ROLE_MENTOR, ROLE_ADMIN, ROLE_SUPER_ADMIN}
ADMIN_ROLES = {ROLE_ADMIN, ROLE_SUPER_ADMIN}


def user_roles(user):
    """Role names for ``user`` in row order (oldest assignment first)."""
    if not user or not user.is_authenticated:
        return []
    roles = list(
        UserRole.objects.filter(user_id=user.pk).order_by("created_at", "id").values_list("role", flat=True)
    )
    if user.is_superuser and ROLE_SUPER_ADMIN not in roles:
        roles.append(ROLE_SUPER_ADMIN)
    return roles


def user_role(user):
    roles = user_roles(user)
    return roles[0] if roles else None


def _safe_roles(user):
    try:
        return set(user_roles(user))
    except DatabaseError:
        logger.error("Role lookup failed for user %s", getattr(user, "pk", None), exc_info=True)
        return set()


class IsAuthenticatedWithAppRole(BasePermission):
    def has_permission(self, request, view):
        return bool(_safe_roles(request.user) & APP_ROLES)


class IsAdminRole(BasePermission):
    def has_permission(self, request, view):
        return bool(_safe_roles(request.user) & ADMIN_ROLES)


class IsSuperAdminRole(BasePermission):
    def has_permission(self, request, view):
        return ROLE_SUPER_ADMIN in _safe_roles(request.user)


class IsCandidateOrAdminRole(BasePermission):
    def has_permission(self, request, view):
        return bool(_safe_roles(request.user) & {ROLE_CANDIDATE, *ADMIN_ROLES})


class IsMentorOrAdminRole(BasePermission):
    def has_permission(self, request, view):
        return bool(_safe_roles(request.user) & {ROLE_MENTOR, *ADMIN_ROLES})
