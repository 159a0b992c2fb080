# reports/stats.py

"""
Report statistics for the collection office.

Each report groups loans (or payments through their loan) by collector and
reshapes the result into rows a report consumer can index without guessing:
every bucket key is present, zero-filled where nothing matched.

- Aging of receivables (collector x days-past-due bucket)
- Collector performance
- Monthly summary: amounts reported per month, or collections per period
- Collection summary for a date range
- Masterlist with monthly payment columns
"""

from django.db.models import Count, F, Q, Sum, Value
from django.db.models.functions import Coalesce
from django.utils import timezone
from django.utils.dateparse import parse_date
from decimal import Decimal
import logging

from core.exceptions import ValidationFailed
from core.utils import get_office_today
from loans.models import Loan, Payment, UNASSIGNED_COLLECTOR
from loans.utils import (
    AGING_BUCKETS,
    calculate_collection_rate,
    classify_aging_bucket,
    collection_period,
    days_past_due,
    empty_month_map,
    empty_period_map,
)

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')

REPORT_TYPE_REPORTED = 'reported'
REPORT_TYPE_COLLECTION = 'collection'
REPORT_TYPES = (REPORT_TYPE_REPORTED, REPORT_TYPE_COLLECTION)

GRAND_TOTAL_LABEL = 'Grand Total'


def _collector_sort_key(name):
    # Named collectors alphabetically, Unassigned last
    return (name == UNASSIGNED_COLLECTOR, name)


# =============================================================================
# AGING OF RECEIVABLES
# =============================================================================

def _empty_aging_row(collector_name, bucket):
    return {
        'collector_name': collector_name,
        'bucket': bucket,
        'accounts': 0,
        'reported_amount': ZERO,
        'collected_amount': ZERO,
        'ending_balance': ZERO,
    }


def get_aging_report(as_of=None):
    """
    Aging of receivables per collector.

    Paid loans are left out. Loans not yet past due (days <= 0) are current
    and do not count in any bucket, but their collector still gets rows.

    Args:
        as_of (date): reference date, defaults to office today

    Returns:
        list: six rows per collector, ordered by collector then bucket
    """
    as_of = as_of or get_office_today()

    loans = (
        Loan.objects.exclude(moving_status=Loan.PAID)
        .select_related('collector')
    )

    grid = {}
    for loan in loans:
        name = loan.collector_name
        if name not in grid:
            grid[name] = {bucket: _empty_aging_row(name, bucket) for bucket in AGING_BUCKETS}

        bucket = classify_aging_bucket(days_past_due(loan.due_date, as_of))
        if bucket is None:
            continue

        row = grid[name][bucket]
        row['accounts'] += 1
        row['reported_amount'] += loan.outstanding_balance
        row['collected_amount'] += loan.amount_collected
        row['ending_balance'] += loan.running_balance

    report = []
    for name in sorted(grid, key=_collector_sort_key):
        report.extend(grid[name][bucket] for bucket in AGING_BUCKETS)

    logger.debug(f"Aging report as of {as_of}: {len(grid)} collector(s)")
    return report


# =============================================================================
# COLLECTOR PERFORMANCE
# =============================================================================

def get_collector_performance():
    """
    Collection metrics per collector, best collector first.

    collection_rate is collected / outstanding * 100 rounded to 2 places,
    or None when the collector's outstanding total is zero.
    """
    rows = (
        Loan.objects
        .values(collector_label=Coalesce('collector__name', Value(UNASSIGNED_COLLECTOR)))
        .annotate(
            total_accounts=Count('id'),
            total_outstanding=Sum('outstanding_balance'),
            total_collected=Sum('amount_collected'),
            total_running_balance=Sum('running_balance'),
            paid_accounts=Count('id', filter=Q(moving_status=Loan.PAID)),
        )
        .order_by()
    )

    report = []
    for row in rows:
        total_outstanding = row['total_outstanding'] or ZERO
        total_collected = row['total_collected'] or ZERO
        report.append({
            'collector_name': row['collector_label'],
            'total_accounts': row['total_accounts'],
            'total_outstanding': total_outstanding,
            'total_collected': total_collected,
            'total_running_balance': row['total_running_balance'] or ZERO,
            'collection_rate': calculate_collection_rate(total_collected, total_outstanding),
            'paid_accounts': row['paid_accounts'],
        })

    report.sort(key=lambda r: r['collector_name'])
    report.sort(key=lambda r: r['total_collected'], reverse=True)
    return report


# =============================================================================
# MONTHLY SUMMARY
# =============================================================================

def _parse_year(year):
    if year in (None, ''):
        return get_office_today().year
    try:
        year = int(year)
    except (TypeError, ValueError):
        raise ValidationFailed(errors={'year': ['Enter a valid year.']})
    if not 2000 <= year <= 2099:
        raise ValidationFailed(errors={'year': ['Year must be between 2000 and 2099.']})
    return year


def _pivot(entries, empty_buckets, bucket_field):
    """
    Accumulate (collector_name, bucket, amount) entries into zero-filled
    collector rows, then add the grand total from the finished rows.
    """
    pivoted = {}
    for collector_name, bucket, amount in entries:
        row = pivoted.get(collector_name)
        if row is None:
            row = {'collector': collector_name, bucket_field: empty_buckets(), 'total': ZERO}
            pivoted[collector_name] = row

        if bucket in row[bucket_field]:
            row[bucket_field][bucket] += amount

    rows = [pivoted[name] for name in sorted(pivoted, key=_collector_sort_key)]
    for row in rows:
        row['total'] = sum(row[bucket_field].values(), ZERO)

    grand_total = {'collector': GRAND_TOTAL_LABEL, bucket_field: empty_buckets(), 'total': ZERO}
    for row in rows:
        for bucket, amount in row[bucket_field].items():
            grand_total[bucket_field][bucket] += amount
        grand_total['total'] += row['total']

    return rows, grand_total


def _reported_entries(year):
    short_year = f"{year % 100:02d}"
    rows = (
        Loan.objects.filter(month_reported__endswith=f"-{short_year}")
        .values(
            'month_reported',
            collector_label=Coalesce('collector__name', Value(UNASSIGNED_COLLECTOR)),
        )
        .annotate(total_amount=Sum('outstanding_balance'))
        .order_by()
    )
    for row in rows:
        month = row['month_reported'].split('-')[0]
        yield row['collector_label'], month, row['total_amount'] or ZERO


def _collection_entries(year):
    payments = (
        Payment.objects.filter(payment_date__year=year)
        .values_list('loan__collector__name', 'payment_date', 'amount')
    )
    for collector_name, payment_date, amount in payments:
        local_date = timezone.localtime(payment_date).date()
        yield collector_name or UNASSIGNED_COLLECTOR, collection_period(local_date), amount


def get_monthly_report(year=None, report_type=REPORT_TYPE_REPORTED):
    """
    Collector x time pivot for a calendar year.

    'reported': outstanding balance of loans reported in each month of the
    year (matched on the YY suffix of month_reported), keys '01'..'12'.

    'collection': payments made within the year, bucketed into the eight
    collection periods, keys 'Period 1'..'Period 8'.

    Returns:
        dict: {'year', 'type', 'rows': [...], 'grand_total': {...}}
    """
    year = _parse_year(year)
    report_type = report_type or REPORT_TYPE_REPORTED

    if report_type == REPORT_TYPE_REPORTED:
        rows, grand_total = _pivot(_reported_entries(year), empty_month_map, 'months')
    elif report_type == REPORT_TYPE_COLLECTION:
        rows, grand_total = _pivot(_collection_entries(year), empty_period_map, 'periods')
    else:
        raise ValidationFailed(
            errors={'type': [f"Report type must be one of: {', '.join(REPORT_TYPES)}"]}
        )

    return {
        'year': year,
        'type': report_type,
        'rows': rows,
        'grand_total': grand_total,
    }


# =============================================================================
# COLLECTION SUMMARY
# =============================================================================

def _require_date(value, field):
    parsed = None
    if value:
        try:
            parsed = value if hasattr(value, 'year') else parse_date(str(value))
        except ValueError:
            parsed = None
    if parsed is None:
        raise ValidationFailed(
            errors={field: ['Enter a valid date (YYYY-MM-DD).']},
            message='Start date and End date are required.'
        )
    return parsed


def get_collection_summary(start_date, end_date):
    """
    Total collected per collector for payments dated within
    [start_date, end_date], both days inclusive.
    """
    start = _require_date(start_date, 'start_date')
    end = _require_date(end_date, 'end_date')

    if start > end:
        raise ValidationFailed(errors={'end_date': ['End date must not be before start date.']})

    rows = (
        Payment.objects.filter(payment_date__date__gte=start, payment_date__date__lte=end)
        .values(collector_label=Coalesce('loan__collector__name', Value(UNASSIGNED_COLLECTOR)))
        .annotate(total_collected=Sum('amount'))
        .order_by('-total_collected', 'collector_label')
    )

    return [
        {
            'collector_name': row['collector_label'],
            'total_collected': row['total_collected'] or ZERO,
        }
        for row in rows
    ]


# =============================================================================
# MASTERLIST
# =============================================================================

def get_masterlist(year=None):
    """
    Every loan grouped by area and collector, with that year's payments
    spread over monthly columns '01'..'12'.
    """
    year = _parse_year(year)

    loans = list(
        Loan.objects.select_related('collector')
        .order_by(
            F('area').asc(nulls_last=True),
            F('collector__name').asc(nulls_last=True),
            'borrower_name',
        )
    )

    monthly = {loan.pk: empty_month_map() for loan in loans}
    payments = Payment.objects.filter(payment_date__year=year).values_list(
        'loan_id', 'payment_date', 'amount'
    )
    for loan_id, payment_date, amount in payments:
        month = f"{timezone.localtime(payment_date).month:02d}"
        if loan_id in monthly:
            monthly[loan_id][month] += amount

    return [
        {
            'loan_id': loan.pk,
            'loan_code': loan.loan_code,
            'area': loan.area,
            'city': loan.city,
            'barangay': loan.barangay,
            'collector_name': loan.collector.name if loan.collector_id else None,
            'borrower_name': loan.borrower_name,
            'month_reported': loan.month_reported,
            'principal': loan.outstanding_balance,
            'total_collected_lifetime': loan.amount_collected,
            'running_balance': loan.running_balance,
            'moving_status': loan.moving_status,
            'monthly_payments': monthly[loan.pk],
        }
        for loan in loans
    ]
