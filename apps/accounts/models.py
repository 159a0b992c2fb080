# accounts/models.py

from django.contrib.auth.models import User
from django.db import models
import logging

from utils.models import BaseModel

logger = logging.getLogger(__name__)


# =============================================================================
# USER PROFILE MODEL
# =============================================================================

class UserProfile(BaseModel):
    """Lending-office role and approval status attached to a login"""

    ROLE_ADMIN = 'admin'
    ROLE_SUPERVISOR = 'supervisor'
    ROLE_COLLECTOR = 'collector'

    ROLE_CHOICES = (
        (ROLE_ADMIN, 'Administrator'),
        (ROLE_SUPERVISOR, 'Supervisor'),
        (ROLE_COLLECTOR, 'Collector'),
    )

    STATUS_PENDING = 'pending'
    STATUS_ACTIVE = 'active'
    STATUS_REJECTED = 'rejected'

    STATUS_CHOICES = (
        (STATUS_PENDING, 'Pending Approval'),
        (STATUS_ACTIVE, 'Active'),
        (STATUS_REJECTED, 'Rejected'),
    )

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='profile')
    full_name = models.CharField("Full Name", max_length=150)
    role = models.CharField("Role", max_length=20, choices=ROLE_CHOICES, default=ROLE_COLLECTOR)
    status = models.CharField("Status", max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)

    class Meta:
        db_table = 'user_profiles'
        verbose_name = 'User Profile'
        verbose_name_plural = 'User Profiles'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.user.username} - {self.role}"

    @property
    def is_active_account(self):
        return self.status == self.STATUS_ACTIVE

