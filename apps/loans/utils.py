# loans/utils.py

"""
Loans Utility Functions

Pure utility functions with NO side effects (no database writes):
- Month-reported (MM-YY) parsing and comparison keys
- Date-range post-filtering of fetched loans
- Running balance calculation
- Days past due and aging bucket classification
- Collection period assignment for payment dates
- Amount parsing for request input

All functions are pure - they calculate and return values without modifying the database.
Database writes are handled by services.py.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import logging

logger = logging.getLogger(__name__)


# =============================================================================
# MONTH REPORTED
# =============================================================================

@dataclass(frozen=True, order=True)
class MonthReported:
    """
    Reporting period parsed from the stored MM-YY code.

    Ordering follows (year, month), so values compare chronologically.

    Example:
        >>> MonthReported.parse('03-25')
        MonthReported(year=2025, month=3)
        >>> MonthReported.parse('03-25').key
        202503
    """

    year: int
    month: int

    @classmethod
    def parse(cls, value):
        """Return a MonthReported for 'MM-YY', or None if the value is malformed"""
        if not value or not isinstance(value, str):
            return None

        parts = value.strip().split('-')
        if len(parts) != 2:
            return None

        try:
            month = int(parts[0])
            year = 2000 + int(parts[1])
        except ValueError:
            return None

        if not 1 <= month <= 12:
            return None

        return cls(year=year, month=month)

    @property
    def key(self):
        return self.year * 100 + self.month

    @property
    def code(self):
        return f"{self.month:02d}-{self.year % 100:02d}"

    def __str__(self):
        return self.code


def month_reported_key(value):
    """
    Comparable integer key for a MM-YY code.

    Example:
        >>> month_reported_key('10-25')
        202510
        >>> month_reported_key('2025-10')
        0
    """
    period = MonthReported.parse(value)
    return period.key if period else 0


def input_date_key(value):
    """
    Comparable integer key (YYYY*100 + MM) for a YYYY-MM-DD input date.

    Only the first two tokens are read. Fewer than two tokens or
    non-numeric tokens give 0.
    """
    if not value:
        return 0

    if isinstance(value, (date, datetime)):
        return value.year * 100 + value.month

    parts = str(value).strip().split('-')
    if len(parts) < 2:
        return 0

    try:
        year = int(parts[0])
        month = int(parts[1])
    except ValueError:
        return 0

    return year * 100 + month


def _month_reported_of(loan):
    if isinstance(loan, dict):
        return loan.get('month_reported')
    return getattr(loan, 'month_reported', None)


def filter_by_month_range(loans, start_date=None, end_date=None):
    """
    Keep loans whose month_reported falls within [start_date, end_date].

    Bounds are compared at month granularity and are inclusive. Each bound is
    optional; a bound that does not parse to a positive key is ignored. A loan
    with a malformed month_reported has key 0, so it fails any active lower
    bound and passes any active upper bound.

    Args:
        loans: iterable of Loan instances or dicts with 'month_reported'
        start_date: YYYY-MM-DD string/date or None
        end_date: YYYY-MM-DD string/date or None

    Returns:
        list: Loans in their original order
    """
    filtered = list(loans)

    start_key = input_date_key(start_date)
    if start_key > 0:
        filtered = [
            loan for loan in filtered
            if month_reported_key(_month_reported_of(loan)) >= start_key
        ]

    end_key = input_date_key(end_date)
    if end_key > 0:
        filtered = [
            loan for loan in filtered
            if month_reported_key(_month_reported_of(loan)) <= end_key
        ]

    return filtered


# =============================================================================
# BALANCE CALCULATIONS
# =============================================================================

def calculate_running_balance(outstanding_balance, amount_collected):
    """
    Running balance = outstanding balance - amount collected.

    Example:
        >>> calculate_running_balance(Decimal('50000'), Decimal('20000'))
        Decimal('30000.00')
    """
    outstanding = Decimal(str(outstanding_balance or 0))
    collected = Decimal(str(amount_collected or 0))
    return (outstanding - collected).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)


def calculate_collection_rate(total_collected, total_outstanding):
    """
    Collected as a percentage of outstanding, rounded to 2 decimal places.

    Returns None when the outstanding total is zero (rate undefined).
    """
    outstanding = Decimal(str(total_outstanding or 0))
    if outstanding == 0:
        return None

    collected = Decimal(str(total_collected or 0))
    rate = collected / outstanding * 100
    return rate.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)


def parse_amount(value):
    """
    Parse a request amount into a Decimal.

    Returns None when the value is missing, not a number, or finer than a
    cent (amounts are stored with two decimal places).
    """
    if value is None or value == '':
        return None

    try:
        amount = Decimal(str(value).strip())
        if not amount.is_finite():
            return None
        if amount != amount.quantize(Decimal('0.01')):
            return None
    except (InvalidOperation, ValueError):
        return None

    return amount


# =============================================================================
# AGING
# =============================================================================

AGING_BUCKETS = (
    '1-30 Days',
    '31-45 Days',
    '46-60 Days',
    '61-90 Days',
    '91-120 Days',
    '120+ Days',
)

# (upper bound in days, label); the last bucket is open-ended
_AGING_LIMITS = (
    (30, '1-30 Days'),
    (45, '31-45 Days'),
    (60, '46-60 Days'),
    (90, '61-90 Days'),
    (120, '91-120 Days'),
)


def days_past_due(due_date, as_of):
    """Whole days between due_date and as_of (negative when not yet due)"""
    if isinstance(due_date, datetime):
        due_date = due_date.date()
    if isinstance(as_of, datetime):
        as_of = as_of.date()
    return (as_of - due_date).days


def classify_aging_bucket(days):
    """
    Aging bucket label for a number of days past due.

    Returns None for loans that are current (days <= 0).

    Example:
        >>> classify_aging_bucket(35)
        '31-45 Days'
        >>> classify_aging_bucket(0) is None
        True
    """
    if days is None or days <= 0:
        return None

    for limit, label in _AGING_LIMITS:
        if days <= limit:
            return label

    return AGING_BUCKETS[-1]


# =============================================================================
# COLLECTION PERIODS
# =============================================================================

# (first (month, day), last (month, day)) inclusive, in calendar order
COLLECTION_PERIODS = (
    ('Period 1', (1, 1), (2, 15)),
    ('Period 2', (2, 16), (3, 31)),
    ('Period 3', (4, 1), (5, 15)),
    ('Period 4', (5, 16), (6, 30)),
    ('Period 5', (7, 1), (8, 15)),
    ('Period 6', (8, 16), (9, 30)),
    ('Period 7', (10, 1), (11, 15)),
    ('Period 8', (11, 16), (12, 31)),
)

PERIOD_LABELS = tuple(label for label, _, _ in COLLECTION_PERIODS)

MONTH_KEYS = tuple(f"{month:02d}" for month in range(1, 13))


def collection_period(value):
    """
    Collection period label for a payment date.

    Example:
        >>> collection_period(date(2025, 2, 15))
        'Period 1'
        >>> collection_period(date(2025, 2, 16))
        'Period 2'
    """
    month_day = (value.month, value.day)
    for label, first, last in COLLECTION_PERIODS:
        if first <= month_day <= last:
            return label

    # Every (month, day) of a real date is covered above
    raise ValueError(f"No collection period for {value!r}")


def empty_month_map():
    return {key: Decimal('0.00') for key in MONTH_KEYS}


def empty_period_map():
    return {label: Decimal('0.00') for label in PERIOD_LABELS}
