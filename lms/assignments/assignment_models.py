from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field
from enum import Enum

from lms.database import utc_now

# ==================== ENUMS ====================

class AssignmentType(str, Enum):
    QUIZ = "QUIZ"
    PROJECT = "PROJECT"
    INDIVIDUAL = "INDIVIDUAL"
    GROUP = "GROUP"

class AssignmentStatus(str, Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"

# ==================== DATABASE MODELS ====================

class Assignment(BaseModel):
    """
    Students see an assignment only while it is PUBLISHED and active
    """
    assignment_id: str  # ASG_XXXXXX
    batch_id: str
    title: str
    description: Optional[str] = None
    type: AssignmentType
    status: AssignmentStatus = AssignmentStatus.DRAFT
    max_score: float = 100
    due_date: datetime
    published_at: Optional[datetime] = None
    is_active: bool = True
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
