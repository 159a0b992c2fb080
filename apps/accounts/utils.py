# accounts/utils.py

"""
Actor resolution.

Every core operation receives an explicit Actor (who is acting, in which
role) instead of reading the request or any thread-local state.
"""

from dataclasses import dataclass
import logging

from core.exceptions import AuthenticationRequired, AuthorizationError

logger = logging.getLogger(__name__)

ADMIN = 'admin'
SUPERVISOR = 'supervisor'
COLLECTOR = 'collector'

MANAGER_ROLES = (ADMIN, SUPERVISOR)


@dataclass(frozen=True)
class Actor:
    """Authenticated subject of an operation"""

    user_id: int
    role: str

    @property
    def is_collector(self):
        return self.role == COLLECTOR


def get_actor(user):
    """
    Build the Actor for an authenticated Django user.

    Superusers without a profile act as admins. Users whose profile is not
    active are refused.

    Raises:
        AuthenticationRequired: anonymous user
        AuthorizationError: pending/rejected account, or no role assigned
    """
    if user is None or not user.is_authenticated:
        raise AuthenticationRequired()

    from .models import UserProfile

    try:
        profile = user.profile
    except UserProfile.DoesNotExist:
        if user.is_superuser:
            return Actor(user_id=user.pk, role=ADMIN)
        raise AuthorizationError('No role assigned to this account')

    if not profile.is_active_account:
        raise AuthorizationError('Account is pending approval. Please contact the administrator.')

    return Actor(user_id=user.pk, role=profile.role)


def user_display_name(user):
    """Profile full name, falling back to the username"""
    if user is None:
        return None

    profile = getattr(user, 'profile', None)
    if profile is not None and profile.full_name:
        return profile.full_name
    return user.get_full_name() or user.username


def require_role(actor, allowed_roles):
    """Raise AuthorizationError unless actor.role is one of allowed_roles"""
    if actor.role not in allowed_roles:
        logger.warning(f"User {actor.user_id} ({actor.role}) denied; requires {allowed_roles}")
        raise AuthorizationError()
