from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field
from enum import Enum

from lms.database import utc_now

# ==================== ENUMS ====================

class EnrollmentStatus(str, Enum):
    """
    PENDING and ACTIVE are valid values an admin may set;
    enroll() itself always produces APPROVED
    """
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"

# ==================== DATABASE MODELS ====================

class Enrollment(BaseModel):
    """
    A student's relationship to a batch
    One row per (user_id, batch_id); deactivated, never deleted
    """
    enrollment_id: str  # ENR_XXXXXX
    user_id: str
    batch_id: str
    status: EnrollmentStatus = EnrollmentStatus.APPROVED
    is_active: bool = True
    enrolled_at: datetime = Field(default_factory=utc_now)
    approved_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
