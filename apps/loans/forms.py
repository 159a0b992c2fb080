# loans/forms.py

from django import forms
from django.contrib.auth import get_user_model
from django.utils.translation import gettext_lazy as _
from decimal import Decimal

# Import base form utilities
from utils.forms import (
    MoneyField,
    validate_month_reported,
    validate_positive_amount,
)

from .models import Collector, Loan, LoanRemark

import logging

logger = logging.getLogger(__name__)


# =============================================================================
# LOAN FORMS
# =============================================================================

class LoanForm(forms.ModelForm):
    """Create/edit form for a loan account (admin and supervisor)"""

    month_reported = forms.CharField(
        label=_('Month Reported'),
        max_length=5,
        validators=[validate_month_reported],
        help_text=_('MM-YY, e.g. 01-26')
    )

    outstanding_balance = MoneyField(
        label=_('Outstanding Balance'),
    )

    amount_collected = MoneyField(
        label=_('Amount Collected'),
        required=False,
        help_text=_('Kept unchanged when omitted')
    )

    class Meta:
        model = Loan
        fields = [
            'loan_code', 'borrower_name', 'collector', 'month_reported',
            'due_date', 'outstanding_balance', 'amount_collected',
            'moving_status', 'location_status',
            'area', 'city', 'barangay', 'full_address',
        ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)

        # Status fields keep their current (or default) value when omitted
        self.fields['moving_status'].required = False
        self.fields['location_status'].required = False
        self.fields['collector'].required = False

    def clean_loan_code(self):
        return (self.cleaned_data.get('loan_code') or '').strip()

    def clean_borrower_name(self):
        return (self.cleaned_data.get('borrower_name') or '').strip()

    def clean_moving_status(self):
        return self.cleaned_data.get('moving_status') or self.instance.moving_status

    def clean_location_status(self):
        return self.cleaned_data.get('location_status') or self.instance.location_status

    def clean_amount_collected(self):
        amount = self.cleaned_data.get('amount_collected')
        if amount is None:
            return self.instance.amount_collected if self.instance.pk else Decimal('0.00')
        return amount

    def clean(self):
        cleaned_data = super().clean()
        outstanding = cleaned_data.get('outstanding_balance')
        collected = cleaned_data.get('amount_collected')

        if outstanding is not None and collected is not None and collected > outstanding:
            self.add_error(
                'amount_collected',
                _('Amount collected cannot exceed outstanding balance')
            )

        return cleaned_data


class CollectorAmountForm(forms.Form):
    """The only loan field a collector may change"""

    amount_collected = MoneyField(label=_('Amount Collected'))


# =============================================================================
# PAYMENT FORMS
# =============================================================================

class PaymentForm(forms.Form):
    """Payment submission against a loan"""

    amount = MoneyField(
        label=_('Amount'),
        validators=[validate_positive_amount],
    )

    payment_date = forms.DateTimeField(
        label=_('Payment Date'),
        required=False,
        help_text=_('Defaults to the time of submission')
    )


# =============================================================================
# COLLECTOR FORMS
# =============================================================================

class CollectorForm(forms.ModelForm):

    user = forms.ModelChoiceField(
        queryset=get_user_model().objects.all(),
        required=False,
        label=_('Login Account')
    )

    class Meta:
        model = Collector
        fields = ['name', 'user']

    def clean_name(self):
        name = (self.cleaned_data.get('name') or '').strip()
        if not name:
            raise forms.ValidationError(_('Collector name is required'))
        return name


# =============================================================================
# REMARK FORMS
# =============================================================================

class LoanRemarkForm(forms.ModelForm):

    class Meta:
        model = LoanRemark
        fields = ['remark', 'priority', 'follow_up_date']

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['priority'].required = False

    def clean_priority(self):
        return self.cleaned_data.get('priority') or self.instance.priority

    def clean_remark(self):
        remark = (self.cleaned_data.get('remark') or '').strip()
        if not remark:
            raise forms.ValidationError(_('Remark text is required'))
        return remark
