# utils/models.py

from django.db import models
import uuid
import logging

logger = logging.getLogger(__name__)

# =============================================================================
# BASE MODEL
# =============================================================================

class BaseModel(models.Model):
    """
    Abstract base for every lending-office record.

    Features:
    - UUID primary key (user-facing URLs never expose sequential ids)
    - Automatic created/updated timestamps
    """

    # Core identification
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Timestamp fields
    created_at = models.DateTimeField("Created At", auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField("Updated At", auto_now=True, db_index=True)

    class Meta:
        abstract = True

