# accounts/views.py

from django.contrib.auth import authenticate, login, logout
from django.contrib.auth.models import User
from django.views.decorators.csrf import ensure_csrf_cookie
from django.views.decorators.cache import never_cache
import logging

from core.decorators import api_view
from core.exceptions import (
    AuthenticationRequired,
    AuthorizationError,
    NotFoundError,
    ValidationFailed,
)
from core.utils import json_response, parse_json_body
from utils.forms import get_form_errors_as_dict

from .forms import LoginForm, UserApprovalForm, UserRegistrationForm
from .models import UserProfile
from .utils import ADMIN, get_actor

logger = logging.getLogger(__name__)


def serialize_user(user):
    profile = getattr(user, 'profile', None)
    return {
        'id': user.pk,
        'username': user.username,
        'full_name': profile.full_name if profile else user.get_full_name(),
        'role': profile.role if profile else (ADMIN if user.is_superuser else None),
        'status': profile.status if profile else None,
        'created_at': profile.created_at if profile else user.date_joined,
    }


# =============================================================================
# AUTHENTICATION VIEWS
# =============================================================================

@never_cache
@ensure_csrf_cookie
@api_view(['GET', 'POST'], public=True)
def login_view(request):
    """
    GET: sets the CSRF cookie for the client.
    POST {username, password}: starts a session for an active account.
    """
    if request.method == 'GET':
        return json_response({'authenticated': request.user.is_authenticated})

    form = LoginForm(parse_json_body(request))
    if not form.is_valid():
        raise ValidationFailed(
            errors=get_form_errors_as_dict(form),
            message='Username and password required'
        )

    user = authenticate(
        request,
        username=form.cleaned_data['username'],
        password=form.cleaned_data['password'],
    )
    if user is None:
        logger.warning(f"Failed login for username {form.cleaned_data['username']}")
        raise AuthenticationRequired('Invalid credentials')

    # Refuses pending/rejected accounts before a session exists
    actor = get_actor(user)

    login(request, user)
    logger.info(f"User logged in: {user.username} ({actor.role})")
    return json_response({'user': serialize_user(user)})


@api_view(['POST'], public=True)
def logout_view(request):
    if request.user.is_authenticated:
        logger.info(f"User logged out: {request.user.username}")
    logout(request)
    return json_response({'message': 'Logged out'})


@api_view(['POST'], public=True)
def register_view(request):
    form = UserRegistrationForm(parse_json_body(request))
    if not form.is_valid():
        raise ValidationFailed(errors=get_form_errors_as_dict(form))

    user = form.save()
    logger.info(f"New user registered: {user.username} (pending approval)")
    return json_response(
        {
            'message': 'Registration successful! Please wait for admin approval.',
            'user': serialize_user(user),
        },
        status=201,
    )


@api_view(['GET'], public=True)
def me_view(request):
    actor = get_actor(request.user)
    return json_response({'user': serialize_user(request.user), 'role': actor.role})


# =============================================================================
# USER MANAGEMENT VIEWS (Admin)
# =============================================================================

@api_view(['GET'], roles=(ADMIN,))
def pending_users(request, actor):
    profiles = (
        UserProfile.objects.filter(status=UserProfile.STATUS_PENDING)
        .select_related('user')
        .order_by('-created_at')
    )
    return json_response([serialize_user(profile.user) for profile in profiles])


@api_view(['POST'], roles=(ADMIN,))
def approve_user(request, user_id, actor):
    """POST {status: active|rejected}"""
    form = UserApprovalForm(parse_json_body(request))
    if not form.is_valid():
        raise ValidationFailed(
            errors=get_form_errors_as_dict(form),
            message="Invalid status. Use 'active' or 'rejected'."
        )

    try:
        user = User.objects.select_related('profile').get(pk=user_id)
        profile = user.profile
    except (User.DoesNotExist, UserProfile.DoesNotExist):
        raise NotFoundError('User not found')

    if user.pk == actor.user_id:
        raise AuthorizationError('You cannot change your own approval status')

    status = form.cleaned_data['status']
    profile.status = status
    profile.save(update_fields=['status', 'updated_at'])

    logger.info(f"User {user.username} set to {status} by user {actor.user_id}")
    return json_response({
        'message': f"User {user.username} is now {status}",
        'user': serialize_user(user),
    })
