from rest_framework import permissions
from django.conf import settings
import logging

logger = logging.getLogger(__name__)


def get_principal_roles(request):
    """Role codes carried by the caller's access token."""
    token = getattr(request, "auth", None)
    if token is None:
        return []
    roles = token.get(getattr(settings, "SALES_ROLES_CLAIM", "roles"), [])
    if isinstance(roles, str):
        return [roles]
    return [role for role in roles if isinstance(role, str)]


def get_principal_id(request):
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        return None
    return str(user.id)


class HasAnyRole(permissions.BasePermission):
    """
    Allows access when the authenticated principal holds at least one of
    ``allowed_roles``. Subclass and set ``allowed_roles``.
    """

    allowed_roles = ()
    message = "You do not have the required role for this action."

    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False
        roles = get_principal_roles(request)
        allowed = any(role in self.allowed_roles for role in roles)
        if not allowed:
            logger.info(
                f"Role check failed for principal {get_principal_id(request)}: "
                f"has {roles}, needs one of {list(self.allowed_roles)}"
            )
        return allowed


class IsCashier(HasAnyRole):
    allowed_roles = ("cashier",)
