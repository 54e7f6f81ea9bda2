"""
Role based permission classes.

Roles are read from the authenticated user attached to the request;
handlers then pass that user on to the services as the acting user.
"""
from rest_framework.permissions import BasePermission

from .models import User

STAFF_ROLES = {User.ROLE_ADMIN, User.ROLE_OFFICE_AGENT}


def _role(request):
    user = getattr(request, "user", None)
    if not (user and user.is_authenticated):
        return None
    return getattr(user, "role", None)


class IsAdminRole(BasePermission):
    """Only platform administrators."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _role(request) == User.ROLE_ADMIN


class IsStaffRole(BasePermission):
    """Administrators and office agents (card and household management)."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _role(request) in STAFF_ROLES

