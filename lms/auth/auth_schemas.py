from pydantic import BaseModel, Field, EmailStr
from typing import Optional
from datetime import datetime
from lms.auth.auth_models import UserRole

# ==================== REQUEST SCHEMAS ====================

class SignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    first_name: str = Field(..., min_length=1)
    last_name: Optional[str] = None
    role: UserRole = UserRole.STUDENT

class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

# ==================== RESPONSE SCHEMAS ====================

class UserPublic(BaseModel):
    user_id: str
    email: str
    first_name: str
    last_name: Optional[str] = None
    role: UserRole
    created_at: datetime
    updated_at: datetime

class AuthResponse(BaseModel):
    user: UserPublic
    access_token: str
