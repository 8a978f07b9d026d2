from pydantic import BaseModel, Field
from typing import Optional, Literal
from datetime import datetime
from lms.enrollments.enrollment_models import EnrollmentStatus

# ==================== REQUEST SCHEMAS ====================

class EnrollmentCreate(BaseModel):
    batch_id: str = Field(..., min_length=1)

class EnrollmentStatusUpdate(BaseModel):
    status: EnrollmentStatus

# ==================== RESPONSE SCHEMAS ====================

class SubmissionSummary(BaseModel):
    submission_id: str
    submitted_at: datetime
    score: Optional[float] = None
    feedback: Optional[str] = None

class AssignmentWithProgress(BaseModel):
    """
    Published assignment plus the student's derived progress
    """
    assignment_id: str
    batch_id: str
    title: str
    description: Optional[str] = None
    type: str
    status: str
    max_score: float
    due_date: Optional[datetime] = None
    published_at: Optional[datetime] = None
    batch: Optional[dict] = None
    submission: Optional[SubmissionSummary] = None
    progress_status: Literal["pending", "submitted", "graded", "overdue"]
    is_overdue: bool
    days_until_due: Optional[int] = None
