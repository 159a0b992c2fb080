# loans/services.py

"""
Loans Business Logic Services

Contains the business logic that shouldn't be in views or models:
- Payment recording (atomic insert + collected-amount increment)
- Loan lifecycle (create, update, delete) with role rules and audit trail
- Loan history, payment history and remarks
- Collector management

Every operation receives the acting user explicitly as an Actor and raises a
core.exceptions.LendingError subclass when it refuses to proceed.
"""

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.db.models import ProtectedError
from django.utils import timezone
import logging

from accounts.utils import ADMIN, MANAGER_ROLES, require_role
from core.exceptions import (
    AuthorizationError,
    ConflictError,
    DomainRuleError,
    NotFoundError,
    PaymentExceedsBalanceError,
    ValidationFailed,
)
from utils.forms import get_form_errors_as_dict

from .audit import record_changes, snapshot
from .filters import scoped_loans
from .forms import CollectorAmountForm, CollectorForm, LoanForm, LoanRemarkForm
from .models import Collector, Loan, LoanHistory, LoanRemark, Payment
from .utils import calculate_running_balance, filter_by_month_range, parse_amount

logger = logging.getLogger(__name__)


# =============================================================================
# LOOKUP HELPERS
# =============================================================================

def get_loan_or_404(loan_id, for_update=False):
    """Fetch a loan by id; malformed ids are treated as not found"""
    queryset = Loan.objects.all()
    if for_update:
        queryset = queryset.select_for_update()
    else:
        queryset = queryset.select_related('collector')

    try:
        return queryset.get(pk=loan_id)
    except (Loan.DoesNotExist, DjangoValidationError, ValueError):
        raise NotFoundError('Loan not found')


def get_collector_or_404(collector_id):
    try:
        return Collector.objects.get(pk=collector_id)
    except (Collector.DoesNotExist, DjangoValidationError, ValueError):
        raise NotFoundError('Collector not found')


def ensure_loan_access(loan, actor):
    """Collectors may only touch loans assigned to their own collector profile"""
    if not actor.is_collector:
        return

    owner_user_id = loan.collector.user_id if loan.collector_id else None
    if owner_user_id != actor.user_id:
        logger.warning(f"Collector {actor.user_id} denied access to loan {loan.pk}")
        raise AuthorizationError('Access denied')


def _normalize_loan_data(data, instance=None):
    """
    Accept collector_id as an alias of the collector form field.

    When editing, an omitted collector keeps the current assignment.
    """
    data = dict(data or {})
    if 'collector_id' in data and 'collector' not in data:
        data['collector'] = data.pop('collector_id')

    if 'collector' not in data and instance is not None:
        data['collector'] = instance.collector_id
    if data.get('collector') is None:
        data['collector'] = ''
    return data


def _ensure_code_available(loan_code, exclude_pk=None):
    if not loan_code:
        return

    queryset = Loan.objects.filter(loan_code=str(loan_code).strip())
    if exclude_pk is not None:
        queryset = queryset.exclude(pk=exclude_pk)

    if queryset.exists():
        raise ConflictError('Loan code already exists')


# =============================================================================
# PAYMENT SERVICES
# =============================================================================

class PaymentService:
    """Handle payment recording against loans"""

    @staticmethod
    def record_payment(loan_id, amount, actor, payment_date=None):
        """
        Record a payment and bump the loan's collected amount atomically.

        The loan row is locked for the duration of the transaction, so two
        concurrent payments are serialized and the second one sees the
        balance left by the first.

        Args:
            loan_id: Loan primary key
            amount: Payment amount (Decimal, number or numeric string)
            actor: Actor recording the payment
            payment_date: Optional datetime; defaults to now

        Returns:
            Payment: the created payment

        Raises:
            ValidationFailed: amount missing, not numeric or not positive
            NotFoundError: loan does not exist
            AuthorizationError: collector paying into another collector's loan
            PaymentExceedsBalanceError: amount larger than the running balance
        """
        amount_value = parse_amount(amount)
        if amount_value is None or amount_value <= 0:
            raise ValidationFailed(
                errors={'amount': ['Valid payment amount is required']},
                message='Valid payment amount is required'
            )

        if payment_date is not None and timezone.is_naive(payment_date):
            payment_date = timezone.make_aware(payment_date)

        with transaction.atomic():
            loan = get_loan_or_404(loan_id, for_update=True)
            ensure_loan_access(loan, actor)

            remaining = calculate_running_balance(loan.outstanding_balance, loan.amount_collected)
            if amount_value > remaining:
                logger.warning(
                    f"Rejected payment of {amount_value} on loan {loan.loan_code}: "
                    f"running balance is {remaining}"
                )
                raise PaymentExceedsBalanceError(amount_value, remaining)

            payment = Payment.objects.create(
                loan=loan,
                amount=amount_value,
                payment_date=payment_date or timezone.now(),
                recorded_by_id=actor.user_id,
            )

            before = snapshot(loan)
            loan.amount_collected = loan.amount_collected + amount_value
            loan.save(update_fields=['amount_collected', 'updated_at'])
            record_changes(loan, before, actor)

        logger.info(
            f"Recorded payment {payment.pk} of {amount_value} on loan {loan.loan_code} "
            f"by user {actor.user_id}"
        )
        return payment

    @staticmethod
    def get_payment_history(loan_id, actor):
        """Payments for a loan, newest first"""
        loan = get_loan_or_404(loan_id)
        ensure_loan_access(loan, actor)

        return list(
            loan.payments.select_related('loan', 'recorded_by', 'recorded_by__profile')
            .order_by('-payment_date', '-created_at')
        )


# =============================================================================
# LOAN SERVICES
# =============================================================================

class LoanService:
    """Loan lifecycle, history and remarks"""

    @staticmethod
    def list_loans(params, actor):
        """
        Loans visible to the actor, filtered and ordered by borrower name.

        start_date/end_date narrow by month reported after the fetch.
        """
        params = params or {}
        queryset = scoped_loans(params, actor)
        return filter_by_month_range(
            queryset,
            params.get('start_date'),
            params.get('end_date'),
        )

    @staticmethod
    def get_loan(loan_id, actor):
        loan = get_loan_or_404(loan_id)
        ensure_loan_access(loan, actor)
        return loan

    @staticmethod
    def create_loan(data, actor):
        """
        Create a loan account (admin, supervisor).

        Raises:
            ConflictError: loan code already taken
            ValidationFailed: invalid or missing fields
        """
        require_role(actor, MANAGER_ROLES)
        data = _normalize_loan_data(data)

        try:
            with transaction.atomic():
                _ensure_code_available(data.get('loan_code'))

                form = LoanForm(data)
                if not form.is_valid():
                    raise ValidationFailed(errors=get_form_errors_as_dict(form))

                loan = form.save()
        except IntegrityError:
            # Lost a race on the unique loan code
            raise ConflictError('Loan code already exists')

        logger.info(f"Created loan {loan.loan_code} for {loan.borrower_name} by user {actor.user_id}")
        return Loan.objects.select_related('collector').get(pk=loan.pk)

    @staticmethod
    def update_loan(loan_id, data, actor):
        """
        Update a loan.

        Admins and supervisors may edit every field; an omitted
        amount_collected keeps its current value. Collectors may only change
        amount_collected on their own loans.

        Raises:
            NotFoundError, AuthorizationError, ConflictError,
            ValidationFailed, DomainRuleError
        """
        data = dict(data or {})

        with transaction.atomic():
            loan = get_loan_or_404(loan_id, for_update=True)
            ensure_loan_access(loan, actor)
            before = snapshot(loan)

            if actor.is_collector:
                if data.get('amount_collected') in (None, ''):
                    raise DomainRuleError('Collectors may only update amount_collected')

                form = CollectorAmountForm(data)
                if not form.is_valid():
                    raise ValidationFailed(errors=get_form_errors_as_dict(form))

                amount_collected = form.cleaned_data['amount_collected']
                if amount_collected > loan.outstanding_balance:
                    raise DomainRuleError('Amount collected cannot exceed outstanding balance')

                loan.amount_collected = amount_collected
                loan.save(update_fields=['amount_collected', 'updated_at'])

            else:
                data = _normalize_loan_data(data, instance=loan)
                if data.get('loan_code') and str(data['loan_code']).strip() != loan.loan_code:
                    _ensure_code_available(data['loan_code'], exclude_pk=loan.pk)

                form = LoanForm(data, instance=loan)
                if not form.is_valid():
                    raise ValidationFailed(errors=get_form_errors_as_dict(form))

                loan = form.save()

            record_changes(loan, before, actor)

        logger.info(f"Updated loan {loan.loan_code} by user {actor.user_id} ({actor.role})")
        return Loan.objects.select_related('collector').get(pk=loan.pk)

    @staticmethod
    def delete_loan(loan_id, actor):
        require_role(actor, (ADMIN,))
        loan = get_loan_or_404(loan_id)
        loan_code = loan.loan_code

        with transaction.atomic():
            loan.delete()

        logger.info(f"Deleted loan {loan_code} by user {actor.user_id}")

    @staticmethod
    def get_loan_history(loan_id, actor):
        """Audit entries for a loan, newest first (admin, supervisor)"""
        require_role(actor, MANAGER_ROLES)
        loan = get_loan_or_404(loan_id)

        return list(
            LoanHistory.objects.filter(loan=loan)
            .select_related('changed_by', 'changed_by__profile')
            .order_by('-changed_at', '-id')
        )

    # Remarks

    @staticmethod
    def list_remarks(loan_id, actor):
        loan = get_loan_or_404(loan_id)
        ensure_loan_access(loan, actor)

        return list(
            LoanRemark.objects.filter(loan=loan)
            .select_related('user', 'user__profile')
            .order_by('-created_at')
        )

    @staticmethod
    def add_remark(loan_id, data, actor):
        loan = get_loan_or_404(loan_id)
        ensure_loan_access(loan, actor)

        form = LoanRemarkForm(data or {})
        if not form.is_valid():
            raise ValidationFailed(errors=get_form_errors_as_dict(form))

        remark = form.save(commit=False)
        remark.loan = loan
        remark.user_id = actor.user_id
        remark.save()

        logger.info(f"Added {remark.priority} remark on loan {loan.loan_code} by user {actor.user_id}")
        return remark


# =============================================================================
# COLLECTOR SERVICES
# =============================================================================

class CollectorService:
    """Collector profile management"""

    @staticmethod
    def list_collectors():
        return list(Collector.objects.order_by('name'))

    @staticmethod
    def create_collector(data, actor):
        require_role(actor, MANAGER_ROLES)

        form = CollectorForm(data or {})
        if not form.is_valid():
            raise ValidationFailed(errors=get_form_errors_as_dict(form))

        collector = form.save()
        logger.info(f"Created collector {collector.name} by user {actor.user_id}")
        return collector

    @staticmethod
    def update_collector(collector_id, data, actor):
        require_role(actor, MANAGER_ROLES)
        collector = get_collector_or_404(collector_id)

        data = dict(data or {})
        if 'user' not in data:
            data['user'] = collector.user_id or ''

        form = CollectorForm(data, instance=collector)
        if not form.is_valid():
            raise ValidationFailed(errors=get_form_errors_as_dict(form))

        collector = form.save()
        logger.info(f"Updated collector {collector.name} by user {actor.user_id}")
        return collector

    @staticmethod
    def delete_collector(collector_id, actor):
        """
        Delete a collector (admin).

        Raises:
            DomainRuleError: loans are still assigned to the collector
        """
        require_role(actor, (ADMIN,))
        collector = get_collector_or_404(collector_id)

        assigned = collector.loans.count()
        if assigned:
            raise DomainRuleError(
                f"Collector {collector.name} is assigned to {assigned} loan(s) and cannot be deleted"
            )

        try:
            with transaction.atomic():
                collector.delete()
        except ProtectedError:
            raise DomainRuleError(f"Collector {collector.name} is still referenced by loans")

        logger.info(f"Deleted collector {collector.name} by user {actor.user_id}")
