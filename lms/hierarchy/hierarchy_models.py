from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field
from enum import Enum

from lms.database import utc_now

# ==================== ENUMS ====================

class VerticalType(str, Enum):
    FULLSTACK = "FULLSTACK"
    DATA = "DATA"
    PRODUCT = "PRODUCT"

# ==================== DATABASE MODELS ====================

class Vertical(BaseModel):
    """
    Top-level program track (e.g. Software Engineering)
    """
    vertical_id: str  # VRT_XXXXXX
    name: str
    description: Optional[str] = None
    type: VerticalType
    is_active: bool = True
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

class Batch(BaseModel):
    """
    A cohort running within a vertical over a date range
    """
    batch_id: str  # BAT_XXXXXX
    vertical_id: str
    name: str
    description: Optional[str] = None
    start_date: datetime
    end_date: Optional[datetime] = None
    is_active: bool = True
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

class Module(BaseModel):
    module_id: str  # MOD_XXXXXX
    batch_id: str
    name: str
    description: Optional[str] = None
    module_order: int
    is_active: bool = True
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

class Week(BaseModel):
    week_id: str  # WEK_XXXXXX
    module_id: str
    name: str
    description: Optional[str] = None
    week_number: int
    is_active: bool = True
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

class Lecture(BaseModel):
    lecture_id: str  # LEC_XXXXXX
    week_id: str
    title: str
    description: Optional[str] = None
    zoom_link: Optional[str] = None
    deck_link: Optional[str] = None
    lecture_number: int
    duration: Optional[int] = None  # minutes
    scheduled_at: Optional[datetime] = None
    is_active: bool = True
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
