from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field
from enum import Enum

from lms.database import utc_now

# ==================== ENUMS ====================

class UserRole(str, Enum):
    ADMIN = "ADMIN"
    STUDENT = "STUDENT"
    TEAM_LEAD = "TEAM_LEAD"

# ==================== DATABASE MODELS ====================

class User(BaseModel):
    user_id: str  # USR_XXXXXX
    email: str
    password_hash: str
    first_name: str
    last_name: Optional[str] = None
    role: UserRole = UserRole.STUDENT
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
