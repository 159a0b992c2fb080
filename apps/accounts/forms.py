# accounts/forms.py

from django import forms
from django.contrib.auth.models import User
from django.contrib.auth.password_validation import validate_password
from django.db import transaction
from django.utils.translation import gettext_lazy as _
from .models import UserProfile


# =============================================================================
# LOGIN FORM
# =============================================================================

class LoginForm(forms.Form):
    username = forms.CharField(label=_('Username'), max_length=150)
    password = forms.CharField(label=_('Password'), strip=False)


# =============================================================================
# USER REGISTRATION FORM
# =============================================================================

class UserRegistrationForm(forms.Form):
    """
    Self-service registration. New accounts start pending approval; an
    unknown or missing role falls back to collector.
    """

    username = forms.CharField(label=_('Username'), max_length=150)
    password = forms.CharField(label=_('Password'), strip=False)
    full_name = forms.CharField(label=_('Full Name'), max_length=150)
    role = forms.CharField(label=_('Role'), required=False)

    def clean_username(self):
        username = self.cleaned_data['username'].strip()
        if User.objects.filter(username__iexact=username).exists():
            raise forms.ValidationError(_('Username already taken'))
        return username

    def clean_password(self):
        password = self.cleaned_data['password']
        validate_password(password)
        return password

    def clean_role(self):
        role = (self.cleaned_data.get('role') or '').strip().lower()
        valid_roles = dict(UserProfile.ROLE_CHOICES)
        return role if role in valid_roles else UserProfile.ROLE_COLLECTOR

    @transaction.atomic
    def save(self):
        user = User.objects.create_user(
            username=self.cleaned_data['username'],
            password=self.cleaned_data['password'],
        )
        UserProfile.objects.create(
            user=user,
            full_name=self.cleaned_data['full_name'].strip(),
            role=self.cleaned_data['role'],
            status=UserProfile.STATUS_PENDING,
        )
        return user


# =============================================================================
# APPROVAL FORM
# =============================================================================

class UserApprovalForm(forms.Form):
    status = forms.ChoiceField(
        choices=(
            (UserProfile.STATUS_ACTIVE, _('Active')),
            (UserProfile.STATUS_REJECTED, _('Rejected')),
        ),
        error_messages={
            'invalid_choice': _("Invalid status. Use 'active' or 'rejected'."),
            'required': _("Invalid status. Use 'active' or 'rejected'."),
        }
    )
