# loans/views.py

"""
JSON API views for loans, payments, remarks and collectors.

Views only translate HTTP to service calls: parse the request, call the
service with the resolved Actor, serialize the result.
"""

import logging

from accounts.utils import MANAGER_ROLES
from core.decorators import api_view
from core.exceptions import ValidationFailed
from core.utils import json_response, parse_filters, parse_json_body
from utils.forms import get_form_errors_as_dict

from .filters import LOAN_FILTER_KEYS
from .forms import PaymentForm
from .serializers import (
    serialize_collector,
    serialize_history,
    serialize_loan,
    serialize_payment,
    serialize_remark,
)
from .services import CollectorService, LoanService, PaymentService

logger = logging.getLogger(__name__)


# =============================================================================
# LOANS
# =============================================================================

@api_view(['GET', 'POST'])
def loan_list(request, actor):
    """GET: filtered listing. POST: create (admin, supervisor)."""
    if request.method == 'POST':
        loan = LoanService.create_loan(parse_json_body(request), actor)
        return json_response(serialize_loan(loan), status=201)

    filters = parse_filters(request, LOAN_FILTER_KEYS)
    loans = LoanService.list_loans(filters, actor)
    return json_response([serialize_loan(loan) for loan in loans])


@api_view(['GET', 'PUT', 'DELETE'])
def loan_detail(request, pk, actor):
    if request.method == 'PUT':
        loan = LoanService.update_loan(pk, parse_json_body(request), actor)
        return json_response(serialize_loan(loan))

    if request.method == 'DELETE':
        LoanService.delete_loan(pk, actor)
        return json_response({'message': 'Loan deleted'})

    loan = LoanService.get_loan(pk, actor)
    return json_response(serialize_loan(loan))


@api_view(['GET'], roles=MANAGER_ROLES)
def loan_history(request, pk, actor):
    entries = LoanService.get_loan_history(pk, actor)
    return json_response([serialize_history(entry) for entry in entries])


# =============================================================================
# PAYMENTS
# =============================================================================

@api_view(['GET', 'POST'])
def loan_payments(request, pk, actor):
    """GET: payment history. POST: record a payment."""
    if request.method == 'POST':
        form = PaymentForm(parse_json_body(request))
        if not form.is_valid():
            raise ValidationFailed(
                errors=get_form_errors_as_dict(form),
                message='Valid payment amount is required'
            )

        payment = PaymentService.record_payment(
            pk,
            form.cleaned_data['amount'],
            actor,
            payment_date=form.cleaned_data.get('payment_date'),
        )
        return json_response(serialize_payment(payment), status=201)

    payments = PaymentService.get_payment_history(pk, actor)
    return json_response([serialize_payment(payment) for payment in payments])


# =============================================================================
# REMARKS
# =============================================================================

@api_view(['GET', 'POST'])
def loan_remarks(request, pk, actor):
    if request.method == 'POST':
        remark = LoanService.add_remark(pk, parse_json_body(request), actor)
        return json_response(serialize_remark(remark), status=201)

    remarks = LoanService.list_remarks(pk, actor)
    return json_response([serialize_remark(remark) for remark in remarks])


# =============================================================================
# COLLECTORS
# =============================================================================

@api_view(['GET', 'POST'])
def collector_list(request, actor):
    if request.method == 'POST':
        collector = CollectorService.create_collector(parse_json_body(request), actor)
        return json_response(serialize_collector(collector), status=201)

    collectors = CollectorService.list_collectors()
    return json_response([serialize_collector(collector) for collector in collectors])


@api_view(['POST', 'PUT', 'DELETE'], roles=MANAGER_ROLES)
def collector_detail(request, pk, actor):
    if request.method == 'DELETE':
        CollectorService.delete_collector(pk, actor)
        return json_response({'message': 'Collector deleted'})

    collector = CollectorService.update_collector(pk, parse_json_body(request), actor)
    return json_response(serialize_collector(collector))
