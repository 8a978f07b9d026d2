from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import Optional

from lms.auth.auth_permissions import get_current_admin
from lms.database import get_db
from lms.dependencies import validate_hierarchy
from lms.hierarchy.hierarchy_schemas import (
    VerticalCreate, VerticalUpdate,
    BatchCreate, BatchUpdate,
    ModuleCreate, ModuleUpdate,
    WeekCreate, WeekUpdate,
    LectureCreate, LectureUpdate,
    BreadcrumbResponse
)
from lms.hierarchy import hierarchy_service as service
from lms.hierarchy.hierarchy_models import VerticalType

admin_only = [Depends(get_current_admin)]

verticals_router = APIRouter(prefix="/verticals", tags=["verticals"], dependencies=admin_only)
batches_router = APIRouter(prefix="/batches", tags=["batches"], dependencies=admin_only)
modules_router = APIRouter(prefix="/modules", tags=["modules"], dependencies=admin_only)
weeks_router = APIRouter(prefix="/weeks", tags=["weeks"], dependencies=admin_only)
lectures_router = APIRouter(prefix="/lectures", tags=["lectures"], dependencies=admin_only)

# ==================== VERTICALS ====================

@verticals_router.post("", status_code=201)
async def create_vertical(data: VerticalCreate, db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.create_node(db, "vertical", data.dict())

@verticals_router.get("")
async def list_verticals(
    search: Optional[str] = None,
    status: Optional[str] = None,
    type: Optional[VerticalType] = None,
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """
    List verticals, optionally filtered by search text, active status and type
    """
    filters = {"type": type} if type else None
    return await service.list_nodes(db, "vertical", search=search, status=status, filters=filters)

@verticals_router.get("/{vertical_id}")
async def get_vertical(vertical_id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.get_node_detail(db, "vertical", vertical_id)

@verticals_router.patch("/{vertical_id}")
async def update_vertical(vertical_id: str, data: VerticalUpdate, db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.update_node(db, "vertical", vertical_id, data.dict(exclude_none=True))

@verticals_router.delete("/{vertical_id}")
async def delete_vertical(vertical_id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.delete_node(db, "vertical", vertical_id)

@verticals_router.get("/{vertical_id}/breadcrumb", response_model=BreadcrumbResponse)
async def vertical_breadcrumb(vertical_id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.get_breadcrumb(db, "vertical", vertical_id)

# ==================== BATCHES ====================

@batches_router.post("", status_code=201)
async def create_batch(data: BatchCreate, db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.create_node(db, "batch", data.dict())

@batches_router.get("")
async def list_batches(
    search: Optional[str] = None,
    status: Optional[str] = None,
    vertical_id: Optional[str] = None,
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    filters = {"vertical_id": vertical_id} if vertical_id else None
    return await service.list_nodes(db, "batch", search=search, status=status, filters=filters)

@batches_router.get("/vertical/{vertical_id}", dependencies=[Depends(validate_hierarchy)])
async def list_batches_by_vertical(vertical_id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.list_children(db, "batch", vertical_id)

@batches_router.get("/{batch_id}")
async def get_batch(batch_id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.get_node_detail(db, "batch", batch_id)

@batches_router.patch("/{batch_id}")
async def update_batch(batch_id: str, data: BatchUpdate, db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.update_node(db, "batch", batch_id, data.dict(exclude_none=True))

@batches_router.delete("/{batch_id}")
async def delete_batch(batch_id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.delete_node(db, "batch", batch_id)

@batches_router.get("/{batch_id}/breadcrumb", response_model=BreadcrumbResponse)
async def batch_breadcrumb(batch_id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.get_breadcrumb(db, "batch", batch_id)

# ==================== MODULES ====================

@modules_router.post("", status_code=201)
async def create_module(data: ModuleCreate, db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.create_node(db, "module", data.dict())

@modules_router.get("")
async def list_modules(db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.list_nodes(db, "module")

@modules_router.get("/batch/{batch_id}", dependencies=[Depends(validate_hierarchy)])
async def list_modules_by_batch(batch_id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    """
    Modules of a batch; pass vertical_id as a query param to also check the batch's vertical
    """
    return await service.list_children(db, "module", batch_id)

@modules_router.get("/{module_id}")
async def get_module(module_id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.get_node_detail(db, "module", module_id)

@modules_router.patch("/{module_id}")
async def update_module(module_id: str, data: ModuleUpdate, db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.update_node(db, "module", module_id, data.dict(exclude_none=True))

@modules_router.delete("/{module_id}")
async def delete_module(module_id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.delete_node(db, "module", module_id)

@modules_router.get("/{module_id}/breadcrumb", response_model=BreadcrumbResponse)
async def module_breadcrumb(module_id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.get_breadcrumb(db, "module", module_id)

# ==================== WEEKS ====================

@weeks_router.post("", status_code=201)
async def create_week(data: WeekCreate, db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.create_node(db, "week", data.dict())

@weeks_router.get("")
async def list_weeks(db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.list_nodes(db, "week")

@weeks_router.get("/module/{module_id}", dependencies=[Depends(validate_hierarchy)])
async def list_weeks_by_module(module_id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.list_children(db, "week", module_id)

@weeks_router.get("/{week_id}")
async def get_week(week_id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.get_node_detail(db, "week", week_id)

@weeks_router.patch("/{week_id}")
async def update_week(week_id: str, data: WeekUpdate, db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.update_node(db, "week", week_id, data.dict(exclude_none=True))

@weeks_router.delete("/{week_id}")
async def delete_week(week_id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.delete_node(db, "week", week_id)

@weeks_router.get("/{week_id}/breadcrumb", response_model=BreadcrumbResponse)
async def week_breadcrumb(week_id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.get_breadcrumb(db, "week", week_id)

# ==================== LECTURES ====================

@lectures_router.post("", status_code=201)
async def create_lecture(data: LectureCreate, db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.create_node(db, "lecture", data.dict())

@lectures_router.get("")
async def list_lectures(db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.list_nodes(db, "lecture")

@lectures_router.get("/upcoming")
async def list_upcoming_lectures(db: AsyncIOMotorDatabase = Depends(get_db)):
    """
    Active lectures scheduled for the future
    """
    return await service.find_upcoming_lectures(db)

@lectures_router.get("/week/{week_id}", dependencies=[Depends(validate_hierarchy)])
async def list_lectures_by_week(week_id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.list_children(db, "lecture", week_id)

@lectures_router.get("/{lecture_id}")
async def get_lecture(lecture_id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.get_node_detail(db, "lecture", lecture_id)

@lectures_router.patch("/{lecture_id}")
async def update_lecture(lecture_id: str, data: LectureUpdate, db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.update_node(db, "lecture", lecture_id, data.dict(exclude_none=True))

@lectures_router.delete("/{lecture_id}")
async def delete_lecture(lecture_id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.delete_node(db, "lecture", lecture_id)

@lectures_router.get("/{lecture_id}/breadcrumb", response_model=BreadcrumbResponse)
async def lecture_breadcrumb(lecture_id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.get_breadcrumb(db, "lecture", lecture_id)
