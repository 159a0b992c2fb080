# loans/audit.py

"""
Field-level audit trail for loans.

Callers take a snapshot before mutating a loan and hand it back, together
with the acting user, once the loan has been saved.
"""

from decimal import Decimal
import logging

logger = logging.getLogger(__name__)


TRACKED_FIELDS = (
    'loan_code',
    'borrower_name',
    'collector_id',
    'month_reported',
    'due_date',
    'outstanding_balance',
    'amount_collected',
    'moving_status',
    'location_status',
    'area',
    'city',
    'barangay',
    'full_address',
)


def _as_text(value):
    if value is None:
        return None
    if isinstance(value, Decimal):
        return str(value.quantize(Decimal('0.01')))
    return str(value)


def snapshot(loan):
    """Current values of the tracked fields, as text"""
    return {field: _as_text(getattr(loan, field)) for field in TRACKED_FIELDS}


def record_changes(loan, before, actor):
    """
    Append a LoanHistory row for every tracked field that changed.

    Args:
        loan: saved Loan instance
        before (dict): snapshot() taken before the change
        actor: accounts.utils.Actor (or None for system changes)

    Returns:
        list: created LoanHistory instances
    """
    from .models import LoanHistory

    after = snapshot(loan)
    changed_by_id = actor.user_id if actor is not None else None

    entries = [
        LoanHistory(
            loan=loan,
            field_name=field,
            old_value=before.get(field),
            new_value=after[field],
            changed_by_id=changed_by_id,
        )
        for field in TRACKED_FIELDS
        if before.get(field) != after[field]
    ]

    if entries:
        LoanHistory.objects.bulk_create(entries)
        logger.info(
            f"Recorded {len(entries)} change(s) on loan {loan.loan_code} "
            f"by user {changed_by_id}"
        )

    return entries
