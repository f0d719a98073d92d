"""
Authentication context and role checks for newsdesk.

Views build one ``AuthContext`` per request and pass it down explicitly;
services never read the current user from anywhere else.

Ownership checks here only decide what the UI offers. Views and
``publishing.save_post`` repeat them before every write.
"""
import logging
from dataclasses import dataclass
from typing import Any, Optional

from .conf import newsdesk_settings
from .models import UserRole

logger = logging.getLogger(__name__)

_REQUEST_CACHE_ATTR = "_newsdesk_auth"


@dataclass(frozen=True)
class AuthContext:
    """Who is calling and whether they hold the admin role."""

    user: Optional[Any] = None
    is_admin: bool = False

    @classmethod
    def anonymous(cls):
        return cls()

    @classmethod
    def for_user(cls, user):
        if user is None or not user.is_authenticated:
            return cls.anonymous()
        return cls(user=user, is_admin=has_role(user, newsdesk_settings.ADMIN_ROLE))

    @property
    def is_authenticated(self):
        return self.user is not None

    @property
    def user_id(self):
        return self.user.pk if self.user is not None else None


def has_role(user, role):
    """Return True if a role record ``role`` exists for ``user``."""
    if user is None or not user.is_authenticated:
        return False
    return UserRole.objects.filter(user=user, role=role).exists()


def get_auth_context(request):
    """
    Return the AuthContext for ``request``.

    The role lookup runs once per request; later calls reuse the result.
    """
    auth = getattr(request, _REQUEST_CACHE_ATTR, None)
    if auth is None:
        auth = AuthContext.for_user(getattr(request, "user", None))
        setattr(request, _REQUEST_CACHE_ATTR, auth)
    return auth


def can_edit(auth, post):
    """Owner or admin may edit and delete a post."""
    if not auth.is_authenticated:
        return False
    return auth.is_admin or post.author_id == auth.user_id


def grant_role(user, role):
    """
    Give ``user`` the role ``role``.

    Returns:
        True if the role was newly granted
    """
    _, created = UserRole.objects.get_or_create(user=user, role=role)
    if created:
        logger.info("Granted role %s to user %s", role, user.pk)
    return created


def revoke_role(user, role):
    """
    Remove the role ``role`` from ``user``.

    Returns:
        True if a role record was deleted
    """
    deleted, _ = UserRole.objects.filter(user=user, role=role).delete()
    if deleted:
        logger.info("Revoked role %s from user %s", role, user.pk)
    return bool(deleted)
