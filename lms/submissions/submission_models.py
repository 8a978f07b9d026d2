from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field
from enum import Enum

from lms.database import utc_now

# ==================== ENUMS ====================

class SubmissionType(str, Enum):
    LINK = "LINK"
    TEXT = "TEXT"

# ==================== DATABASE MODELS ====================

class Submission(BaseModel):
    """
    One row per (user_id, assignment_id)
    Deleting sets is_active=False; submitting again reactivates the same row
    """
    submission_id: str  # SUB_XXXXXX
    user_id: str
    assignment_id: str
    type: SubmissionType
    link_url: Optional[str] = None
    link_title: Optional[str] = None
    content: Optional[str] = None
    submitted_at: datetime = Field(default_factory=utc_now)
    score: Optional[float] = None
    feedback: Optional[str] = None
    graded_at: Optional[datetime] = None
    is_active: bool = True
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
