from pydantic import BaseModel, Field, validator
from typing import Optional
from datetime import datetime
from lms.assignments.assignment_models import AssignmentType, AssignmentStatus
from lms.database import to_naive_utc

# ==================== REQUEST SCHEMAS ====================

class AssignmentCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    type: AssignmentType
    status: AssignmentStatus = AssignmentStatus.DRAFT
    max_score: float = Field(100, ge=0, le=1000)
    due_date: datetime
    published_at: Optional[datetime] = None
    batch_id: str = Field(..., min_length=1)

    @validator('due_date', 'published_at')
    def normalize_dates(cls, v):
        return to_naive_utc(v)

class AssignmentUpdate(BaseModel):
    """
    Partial update; publish/unpublish have their own endpoints
    but status may also be set here
    """
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    type: Optional[AssignmentType] = None
    status: Optional[AssignmentStatus] = None
    max_score: Optional[float] = Field(None, ge=0, le=1000)
    due_date: Optional[datetime] = None
    published_at: Optional[datetime] = None
    batch_id: Optional[str] = None
    is_active: Optional[bool] = None

    @validator('due_date', 'published_at')
    def normalize_dates(cls, v):
        return to_naive_utc(v)
