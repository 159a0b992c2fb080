# reports/views.py

import logging

from accounts.utils import MANAGER_ROLES
from core.decorators import api_view
from core.utils import json_response, parse_filters

from .stats import (
    get_aging_report,
    get_collection_summary,
    get_collector_performance,
    get_masterlist,
    get_monthly_report,
)

logger = logging.getLogger(__name__)


# =============================================================================
# REPORTS (admin, supervisor)
# =============================================================================

@api_view(['GET'], roles=MANAGER_ROLES)
def aging_report(request, actor):
    return json_response(get_aging_report())


@api_view(['GET'], roles=MANAGER_ROLES)
def performance_report(request, actor):
    return json_response(get_collector_performance())


@api_view(['GET'], roles=MANAGER_ROLES)
def monthly_report(request, actor):
    """?year=YYYY&type=reported|collection"""
    filters = parse_filters(request, ['year', 'type'])
    return json_response(get_monthly_report(filters['year'], filters['type']))


@api_view(['GET'], roles=MANAGER_ROLES)
def masterlist_report(request, actor):
    filters = parse_filters(request, ['year'])
    return json_response(get_masterlist(filters['year']))


@api_view(['GET'], roles=MANAGER_ROLES)
def collection_summary_report(request, actor):
    """?start_date=YYYY-MM-DD&end_date=YYYY-MM-DD"""
    filters = parse_filters(request, ['start_date', 'end_date'])
    return json_response(get_collection_summary(filters['start_date'], filters['end_date']))
