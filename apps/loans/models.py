# loans/models.py

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from decimal import Decimal

from utils.models import BaseModel
from utils.forms import validate_month_reported
from core.utils import format_money

import logging

logger = logging.getLogger(__name__)


UNASSIGNED_COLLECTOR = 'Unassigned'


# =============================================================================
# COLLECTOR MODEL
# =============================================================================

class Collector(BaseModel):
    """Field collector who owns a subset of loans"""

    name = models.CharField(
        "Collector Name",
        max_length=150,
        help_text="Display name used on reports"
    )

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='collector_profile',
        help_text="Login account linked to this collector (collector-role scoping)"
    )

    class Meta:
        verbose_name = 'Collector'
        verbose_name_plural = 'Collectors'
        ordering = ['name']

    def __str__(self):
        return self.name


# =============================================================================
# LOAN MODEL
# =============================================================================

class Loan(BaseModel):
    """Past-due loan account under collection"""

    MOVING = 'Moving'
    NOT_MOVING = 'NM'
    NOT_MOVING_SINCE_RELEASE = 'NMSR'
    PAID = 'Paid'

    MOVING_STATUS_CHOICES = (
        (MOVING, 'Moving'),
        (NOT_MOVING, 'Not Moving'),
        (NOT_MOVING_SINCE_RELEASE, 'Not Moving Since Release'),
        (PAID, 'Paid'),
    )

    LOCATED = 'L'
    NOT_LOCATED = 'NL'

    LOCATION_STATUS_CHOICES = (
        (LOCATED, 'Located'),
        (NOT_LOCATED, 'Not Located'),
    )

    # Identification
    loan_code = models.CharField(
        "Loan Code",
        max_length=50,
        unique=True,
        help_text="User-facing unique loan code"
    )

    borrower_name = models.CharField(
        "Borrower Name",
        max_length=200,
        db_index=True
    )

    collector = models.ForeignKey(
        Collector,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='loans',
        help_text="Collector assigned to this account"
    )

    # Reporting period, stored as MM-YY (e.g. 01-26 = January 2026)
    month_reported = models.CharField(
        "Month Reported",
        max_length=5,
        validators=[validate_month_reported],
        db_index=True
    )

    due_date = models.DateField("Due Date")

    # Balances
    outstanding_balance = models.DecimalField(
        "Outstanding Balance",
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text="Principal reported past due"
    )

    amount_collected = models.DecimalField(
        "Amount Collected",
        max_digits=14,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text="Cumulative amount collected so far"
    )

    running_balance = models.DecimalField(
        "Running Balance",
        max_digits=14,
        decimal_places=2,
        default=Decimal('0.00'),
        editable=False,
        help_text="Outstanding balance less amount collected (maintained on save)"
    )

    # Status
    moving_status = models.CharField(
        "Moving Status",
        max_length=10,
        choices=MOVING_STATUS_CHOICES,
        default=MOVING
    )

    location_status = models.CharField(
        "Location Status",
        max_length=2,
        choices=LOCATION_STATUS_CHOICES,
        default=NOT_LOCATED
    )

    # Geography
    area = models.CharField("Area", max_length=100, null=True, blank=True, db_index=True)
    city = models.CharField("City", max_length=100, null=True, blank=True, db_index=True)
    barangay = models.CharField("Barangay", max_length=100, null=True, blank=True, db_index=True)
    full_address = models.TextField("Full Address", null=True, blank=True)

    def clean(self):
        super().clean()
        if (
            self.outstanding_balance is not None
            and self.amount_collected is not None
            and self.amount_collected > self.outstanding_balance
        ):
            raise ValidationError({
                'amount_collected': 'Amount collected cannot exceed outstanding balance'
            })

    def save(self, *args, **kwargs):
        """Keep the derived running balance in step with the stored amounts"""
        self.running_balance = self.outstanding_balance - self.amount_collected

        update_fields = kwargs.get('update_fields')
        if update_fields is not None and 'running_balance' not in update_fields:
            kwargs['update_fields'] = list(update_fields) + ['running_balance']

        super().save(*args, **kwargs)

    @property
    def collector_name(self):
        return self.collector.name if self.collector_id else UNASSIGNED_COLLECTOR

    @property
    def is_overdue(self):
        return self.due_date < timezone.localdate() and self.running_balance > 0

    def __str__(self):
        return f"{self.loan_code} - {self.borrower_name} ({format_money(self.running_balance)})"

    class Meta:
        verbose_name = 'Loan'
        verbose_name_plural = 'Loans'
        ordering = ['borrower_name']
        indexes = [
            models.Index(fields=['collector', 'moving_status'], name='loan_collector_status_idx'),
            models.Index(fields=['due_date'], name='loan_due_date_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount_collected__lte=models.F('outstanding_balance')),
                name='loan_collected_within_outstanding',
            ),
        ]


# =============================================================================
# PAYMENT MODEL
# =============================================================================

class Payment(BaseModel):
    """Append-only payment against a loan"""

    loan = models.ForeignKey(
        Loan,
        on_delete=models.CASCADE,
        related_name='payments'
    )

    amount = models.DecimalField(
        "Amount",
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )

    payment_date = models.DateTimeField("Payment Date", default=timezone.now)

    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='recorded_payments'
    )

    def __str__(self):
        return f"Payment {format_money(self.amount)} for {self.loan.loan_code}"

    class Meta:
        verbose_name = 'Payment'
        verbose_name_plural = 'Payments'
        ordering = ['-payment_date']
        indexes = [
            models.Index(fields=['loan', 'payment_date'], name='payment_loan_date_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=0),
                name='payment_amount_positive',
            ),
        ]


# =============================================================================
# LOAN HISTORY MODEL
# =============================================================================

class LoanHistory(models.Model):
    """Field-level audit trail for loans"""

    loan = models.ForeignKey(
        Loan,
        on_delete=models.CASCADE,
        related_name='history'
    )
    field_name = models.CharField("Field", max_length=50)
    old_value = models.TextField("Old Value", null=True, blank=True)
    new_value = models.TextField("New Value", null=True, blank=True)
    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='loan_changes'
    )
    changed_at = models.DateTimeField("Changed At", default=timezone.now, db_index=True)

    def __str__(self):
        return f"{self.loan_id}: {self.field_name} {self.old_value!r} -> {self.new_value!r}"

    class Meta:
        verbose_name = 'Loan History'
        verbose_name_plural = 'Loan History'
        ordering = ['-changed_at']


# =============================================================================
# LOAN REMARK MODEL
# =============================================================================

class LoanRemark(BaseModel):
    """Collector/staff follow-up note on a loan"""

    PRIORITY_CHOICES = (
        ('Highest Priority', 'Highest Priority'),
        ('High Priority', 'High Priority'),
        ('Medium Priority', 'Medium Priority'),
        ('Low Priority', 'Low Priority'),
        ('Lowest Priority', 'Lowest Priority'),
    )

    loan = models.ForeignKey(
        Loan,
        on_delete=models.CASCADE,
        related_name='remarks'
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='loan_remarks'
    )
    remark = models.TextField("Remark")
    priority = models.CharField(
        "Priority",
        max_length=20,
        choices=PRIORITY_CHOICES,
        default='Lowest Priority'
    )
    follow_up_date = models.DateField("Follow-up Date", null=True, blank=True)
    is_read = models.BooleanField("Read", default=False)

    def __str__(self):
        return f"Remark on {self.loan.loan_code} ({self.priority})"

    class Meta:
        verbose_name = 'Loan Remark'
        verbose_name_plural = 'Loan Remarks'
        ordering = ['-created_at']
