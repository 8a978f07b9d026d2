from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import Optional

from lms.auth.auth_permissions import get_current_admin
from lms.database import get_db
from lms.assignments.assignment_schemas import AssignmentCreate, AssignmentUpdate
from lms.assignments import assignment_service as service

router = APIRouter(prefix="/assignments", tags=["assignments"], dependencies=[Depends(get_current_admin)])

@router.post("", status_code=201)
async def create_assignment(data: AssignmentCreate, db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.create(db, data.dict())

@router.get("")
async def list_assignments(db: AsyncIOMotorDatabase = Depends(get_db)):
    """
    All assignments, newest first
    """
    return await service.find_all(db)

@router.get("/batch/{batch_id}")
async def list_batch_assignments(batch_id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.find_by_batch(db, batch_id)

@router.get("/published")
async def list_published_assignments(
    batch_id: Optional[str] = None,
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    return await service.find_published(db, batch_id)

@router.get("/{assignment_id}")
async def get_assignment(assignment_id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.find_one(db, assignment_id)

@router.patch("/{assignment_id}")
async def update_assignment(
    assignment_id: str,
    data: AssignmentUpdate,
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    return await service.update(db, assignment_id, data.dict(exclude_none=True))

@router.patch("/{assignment_id}/publish")
async def publish_assignment(assignment_id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    """
    Make visible to enrolled students and stamp published_at
    """
    return await service.publish(db, assignment_id)

@router.patch("/{assignment_id}/unpublish")
async def unpublish_assignment(assignment_id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.unpublish(db, assignment_id)

@router.delete("/{assignment_id}")
async def delete_assignment(assignment_id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    return await service.remove(db, assignment_id)
