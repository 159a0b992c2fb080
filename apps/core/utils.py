# core/utils.py

"""
Central utilities for lending-office operations
Prevents code duplication and ensures consistency
"""
from django.core.serializers.json import DjangoJSONEncoder
from django.http import JsonResponse
from django.utils import timezone
from decimal import Decimal
import json
import logging

from .exceptions import ValidationFailed

logger = logging.getLogger(__name__)


# =============================================================================
# MONEY FORMATTING
# =============================================================================

def format_money(amount, include_symbol=True):
    """
    Format a money amount for user-facing messages.

    Args:
        amount: Decimal or numeric value to format
        include_symbol: Whether to prefix the peso sign

    Returns:
        str: Formatted money string
    """
    try:
        amount_decimal = Decimal(str(amount or 0))
        formatted = f"{amount_decimal:,.2f}"
        return f"₱{formatted}" if include_symbol else formatted
    except (ValueError, TypeError, ArithmeticError):
        return "₱0.00" if include_symbol else "0.00"


# =============================================================================
# TIMEZONE UTILITY FUNCTIONS
# =============================================================================

def get_office_today():
    """
    Get today's date in the office's operational timezone (settings.TIME_ZONE).

    Always use this instead of date.today() for due-date and aging logic so
    that "today" matches the office calendar rather than UTC.

    Returns:
        date: Today's local date
    """
    return timezone.localdate()


# =============================================================================
# REQUEST PARSING
# =============================================================================

def parse_filters(source, filter_keys):
    """
    Extract filter values from a query dict.

    Args:
        source: request (its GET is used) or any mapping
        filter_keys: list of filter names to extract

    Returns:
        dict: {key: stripped value or None}
    """
    params = getattr(source, 'GET', source)
    filters = {}
    for key in filter_keys:
        value = params.get(key, '')
        value = value.strip() if isinstance(value, str) else value
        filters[key] = value if value not in ('', None) else None
    return filters


def parse_json_body(request):
    """
    Decode a JSON request body into a dict.

    Falls back to form-encoded POST data so the same views serve both.

    Raises:
        ValidationFailed: if the body is not a JSON object
    """
    if not request.body:
        return request.POST.dict()

    if request.content_type != 'application/json':
        return request.POST.dict()

    try:
        data = json.loads(request.body)
    except (ValueError, UnicodeDecodeError):
        raise ValidationFailed(message='Request body is not valid JSON')

    if not isinstance(data, dict):
        raise ValidationFailed(message='Request body must be a JSON object')
    return data


# =============================================================================
# JSON RESPONSES
# =============================================================================

def json_response(data, status=200):
    """JSON response that keeps Decimal amounts exact (serialized as strings)"""
    return JsonResponse(data, status=status, encoder=DjangoJSONEncoder, safe=False)


def error_response(error):
    """Render a LendingError as its structured JSON body"""
    return json_response(error.to_dict(), status=error.status_code)
