# loans/serializers.py

"""
Plain-dict renderings of loan records for JSON responses.

Money stays Decimal; core.utils.json_response encodes it as a string.
"""

from accounts.utils import user_display_name


def serialize_collector(collector):
    return {
        'collector_id': collector.pk,
        'name': collector.name,
        'user_id': collector.user_id,
        'created_at': collector.created_at,
    }


def serialize_loan(loan):
    """Loan fields plus the resolved collector name"""
    return {
        'loan_id': loan.pk,
        'loan_code': loan.loan_code,
        'borrower_name': loan.borrower_name,
        'collector_id': loan.collector_id,
        'collector_name': loan.collector.name if loan.collector_id else None,
        'month_reported': loan.month_reported,
        'due_date': loan.due_date,
        'outstanding_balance': loan.outstanding_balance,
        'amount_collected': loan.amount_collected,
        'running_balance': loan.running_balance,
        'moving_status': loan.moving_status,
        'location_status': loan.location_status,
        'area': loan.area,
        'city': loan.city,
        'barangay': loan.barangay,
        'full_address': loan.full_address,
        'created_at': loan.created_at,
        'updated_at': loan.updated_at,
    }


def serialize_payment(payment):
    return {
        'payment_id': payment.pk,
        'loan_id': payment.loan_id,
        'borrower_name': payment.loan.borrower_name,
        'amount': payment.amount,
        'payment_date': payment.payment_date,
        'recorded_by': payment.recorded_by_id,
        'recorded_by_name': user_display_name(payment.recorded_by),
    }


def serialize_history(entry):
    return {
        'field_name': entry.field_name,
        'old_value': entry.old_value,
        'new_value': entry.new_value,
        'changed_at': entry.changed_at,
        'changed_by_name': user_display_name(entry.changed_by),
    }


def serialize_remark(remark):
    return {
        'remark_id': remark.pk,
        'loan_id': remark.loan_id,
        'remark': remark.remark,
        'priority': remark.priority,
        'follow_up_date': remark.follow_up_date,
        'is_read': remark.is_read,
        'created_at': remark.created_at,
        'user_id': remark.user_id,
        'user_name': user_display_name(remark.user),
    }
