from pydantic import BaseModel, Field, validator
from typing import Optional, List, Literal
from datetime import datetime
from lms.hierarchy.hierarchy_models import VerticalType
from lms.database import to_naive_utc

# ==================== VERTICAL ====================

class VerticalCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    type: VerticalType
    is_active: bool = True

class VerticalUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    type: Optional[VerticalType] = None
    is_active: Optional[bool] = None

# ==================== BATCH ====================

class BatchCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    start_date: datetime
    end_date: Optional[datetime] = None
    vertical_id: str
    is_active: bool = True

    @validator('start_date', 'end_date')
    def normalize_dates(cls, v):
        return to_naive_utc(v)

class BatchUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    vertical_id: Optional[str] = None
    is_active: Optional[bool] = None

    @validator('start_date', 'end_date')
    def normalize_dates(cls, v):
        return to_naive_utc(v)

# ==================== MODULE ====================

class ModuleCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    module_order: int = Field(..., ge=0)
    batch_id: str
    is_active: bool = True

class ModuleUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    module_order: Optional[int] = Field(None, ge=0)
    batch_id: Optional[str] = None
    is_active: Optional[bool] = None

# ==================== WEEK ====================

class WeekCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    week_number: int = Field(..., ge=1)
    module_id: str
    is_active: bool = True

class WeekUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    week_number: Optional[int] = Field(None, ge=1)
    module_id: Optional[str] = None
    is_active: Optional[bool] = None

# ==================== LECTURE ====================

class LectureCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    zoom_link: Optional[str] = None
    deck_link: Optional[str] = None
    lecture_number: int = Field(..., ge=1)
    duration: Optional[int] = Field(None, ge=0)
    scheduled_at: Optional[datetime] = None
    week_id: str
    is_active: bool = True

    @validator('scheduled_at')
    def normalize_scheduled_at(cls, v):
        return to_naive_utc(v)

class LectureUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    zoom_link: Optional[str] = None
    deck_link: Optional[str] = None
    lecture_number: Optional[int] = Field(None, ge=1)
    duration: Optional[int] = Field(None, ge=0)
    scheduled_at: Optional[datetime] = None
    week_id: Optional[str] = None
    is_active: Optional[bool] = None

    @validator('scheduled_at')
    def normalize_scheduled_at(cls, v):
        return to_naive_utc(v)

# ==================== BREADCRUMBS ====================

class BreadcrumbItem(BaseModel):
    id: str
    name: str
    type: Literal["vertical", "batch", "module", "week", "lecture"]
    url: str

class BreadcrumbResponse(BaseModel):
    breadcrumbs: List[BreadcrumbItem]
    current: BreadcrumbItem
