# utils/forms.py

"""
Base form utilities shared by the JSON API forms.
Provides reusable form fields and validation helpers.
"""

from django import forms
from django.core.exceptions import ValidationError
from django.core.validators import RegexValidator
from decimal import Decimal, InvalidOperation
import re
import logging

logger = logging.getLogger(__name__)


# =============================================================================
# CUSTOM FORM FIELDS
# =============================================================================

class MoneyField(forms.DecimalField):
    """Custom field for money amounts with proper validation"""

    def __init__(self, *args, **kwargs):
        kwargs.setdefault('max_digits', 14)
        kwargs.setdefault('decimal_places', 2)
        kwargs.setdefault('min_value', Decimal('0.00'))
        super().__init__(*args, **kwargs)

    def clean(self, value):
        """Clean and validate money value"""
        if value in self.empty_values:
            return super().clean(value)

        # Remove currency symbols and thousands separators
        if isinstance(value, str):
            value = re.sub(r'[^\d.-]', '', value)

        try:
            value = Decimal(str(value))
        except (ValueError, InvalidOperation):
            raise ValidationError('Enter a valid amount.')

        return super().clean(value)


# =============================================================================
# VALIDATION HELPERS
# =============================================================================

validate_month_reported = RegexValidator(
    regex=r'^\d{2}-\d{2}$',
    message='Month reported must use the MM-YY format (e.g. 01-26).',
)


def validate_positive_amount(value):
    """Validate that amount is positive"""
    if value is not None and value <= 0:
        raise ValidationError('Amount must be greater than zero.')


# =============================================================================
# FORM HELPERS
# =============================================================================

def get_form_errors_as_dict(form):
    """Convert form errors to a dictionary for JSON responses"""
    errors = {}

    for field, error_list in form.errors.items():
        errors[field] = [str(error) for error in error_list]

    return errors

