from pydantic import BaseModel, Field, validator
from typing import Optional
from urllib.parse import urlparse
from lms.submissions.submission_models import SubmissionType

def _check_url(v):
    if v is None:
        return v
    parsed = urlparse(v)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("link_url must be a valid http(s) URL")
    return v

# ==================== REQUEST SCHEMAS ====================

class SubmissionCreate(BaseModel):
    assignment_id: str = Field(..., min_length=1)
    type: SubmissionType
    link_url: Optional[str] = None
    link_title: Optional[str] = Field(None, max_length=255)
    content: Optional[str] = None

    @validator('link_url')
    def validate_link_url(cls, v):
        return _check_url(v)

class SubmissionUpdate(BaseModel):
    type: Optional[SubmissionType] = None
    link_url: Optional[str] = None
    link_title: Optional[str] = Field(None, max_length=255)
    content: Optional[str] = None

    @validator('link_url')
    def validate_link_url(cls, v):
        return _check_url(v)

class SubmissionGrade(BaseModel):
    score: float = Field(..., ge=0)
    feedback: Optional[str] = Field(None, max_length=5000)
