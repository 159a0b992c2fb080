# loans/filters.py

"""
Role-scoped loan filtering.

build_loan_filters() turns the actor and the parsed query parameters into a
LoanQuery: a Q predicate plus ordering. It never touches the database.
"""

from dataclasses import dataclass
from django.db.models import Q
import logging

from core.utils import get_office_today

logger = logging.getLogger(__name__)


LOAN_FILTER_KEYS = [
    'collector_id', 'moving_status', 'location_status', 'month_reported',
    'overdue', 'search', 'code', 'start_date', 'end_date',
]


@dataclass(frozen=True)
class LoanQuery:
    """Predicate and ordering for a loan listing"""

    predicate: Q
    ordering: tuple = ('borrower_name', 'loan_code')

    def apply(self, queryset):
        return queryset.filter(self.predicate).order_by(*self.ordering)


def build_loan_filters(params, actor, today=None):
    """
    Build the loan predicate for an actor.

    Collectors are always restricted to loans assigned to the collector
    profile linked to their login; a supplied collector_id is ignored for
    them. Admins and supervisors may narrow by collector_id.

    Args:
        params (dict): parsed filters (see LOAN_FILTER_KEYS); None = absent
        actor: accounts.utils.Actor
        today: date used for the overdue filter (defaults to office today)

    Returns:
        LoanQuery
    """
    params = params or {}
    predicate = Q()

    if actor.is_collector:
        predicate &= Q(collector__user_id=actor.user_id)
    elif params.get('collector_id'):
        predicate &= Q(collector_id=params['collector_id'])

    if params.get('moving_status'):
        predicate &= Q(moving_status=params['moving_status'])

    if params.get('location_status'):
        predicate &= Q(location_status=params['location_status'])

    if params.get('month_reported'):
        predicate &= Q(month_reported=params['month_reported'])

    if params.get('overdue') == 'true':
        predicate &= Q(due_date__lt=today or get_office_today(), running_balance__gt=0)

    search = params.get('search')
    if search:
        predicate &= Q(borrower_name__icontains=search) | Q(loan_code__icontains=search)

    if params.get('code'):
        predicate &= Q(loan_code=params['code'])

    return LoanQuery(predicate=predicate)


def scoped_loans(params, actor, today=None):
    """Queryset of loans visible to the actor under the given filters"""
    from .models import Loan

    query = build_loan_filters(params, actor, today=today)
    return query.apply(Loan.objects.select_related('collector'))
