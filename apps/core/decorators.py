# core/decorators.py

from functools import wraps
from django.http import JsonResponse
import logging

from .exceptions import LendingError
from .utils import error_response

logger = logging.getLogger(__name__)


def api_view(methods, roles=None, public=False):
    """
    Wrap a JSON API view.

    - Rejects methods not in `methods` with 405
    - Resolves the Actor (unless `public`) and checks `roles` before the view
      body runs, so no restricted query executes for an unauthorized caller
    - Renders LendingError subclasses as structured JSON
    - Logs anything else and returns a generic 500 without internal detail

    The wrapped view is called as view(request, *args, actor=..., **kwargs).
    """
    allowed = {m.upper() for m in methods}

    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            if request.method not in allowed:
                return JsonResponse(
                    {'error': f"Method {request.method} not allowed"},
                    status=405,
                )

            try:
                if not public:
                    from accounts.utils import get_actor, require_role

                    actor = get_actor(request.user)
                    if roles:
                        require_role(actor, roles)
                    kwargs['actor'] = actor
                return view_func(request, *args, **kwargs)

            except LendingError as e:
                if e.status_code >= 500:
                    logger.error(f"{view_func.__name__} failed: {e.message}")
                else:
                    logger.info(f"{view_func.__name__} rejected ({e.status_code}): {e.message}")
                return error_response(e)

            except Exception:
                logger.exception(f"Unhandled error in {view_func.__name__}")
                return JsonResponse({'error': 'Internal server error'}, status=500)

        return wrapper

    return decorator
