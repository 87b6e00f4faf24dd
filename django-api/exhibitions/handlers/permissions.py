"""Resolve the authenticated user to a domain Actor."""

from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import BasePermission
from rest_framework.request import Request

from exhibitions.domain import Actor, Role


def resolve_actor(user) -> Actor | None:
    """Return the Actor for an auth user, or None if it has no exhibition role.

    An admin profile wins over a manager profile on the same user.
    """
    if user is None or not user.is_authenticated:
        return None
    admin = getattr(user, "exhibition_admin", None)
    if admin is not None:
        return Actor(id=admin.id, role=Role.ADMIN)
    manager = getattr(user, "event_manager", None)
    if manager is not None:
        return Actor(id=manager.id, role=Role.EVENT_MANAGER)
    return None


class HasExhibitionRole(BasePermission):
    """Allow admins and event managers; everyone else is refused."""

    message = "Admin or event manager access required"

    def has_permission(self, request: Request, view) -> bool:
        return resolve_actor(request.user) is not None


def actor_for(request: Request) -> Actor:
    actor = resolve_actor(request.user)
    if actor is None:
        raise PermissionDenied(HasExhibitionRole.message)
    return actor
