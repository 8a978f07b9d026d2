from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import List, Optional

from lms.auth.auth_permissions import Identity, get_current_admin, get_current_student
from lms.database import get_db
from lms.dependencies import require_enrollment_access
from lms.enrollments.enrollment_models import EnrollmentStatus
from lms.enrollments.enrollment_schemas import (
    EnrollmentCreate,
    EnrollmentStatusUpdate,
    AssignmentWithProgress
)
from lms.enrollments.enrollment_service import EnrollmentService
from lms.enrollments.progress import AssignmentProgressCalculator

router = APIRouter(prefix="/enrollments", tags=["enrollments"])

# ==================== STUDENT ====================

@router.post("", status_code=201)
async def enroll(
    data: EnrollmentCreate,
    student: Identity = Depends(get_current_student),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """
    Enroll in a batch
    Enrollment is approved immediately

    - 404 if the batch does not exist
    - 400 if the batch is inactive
    - 409 if already enrolled
    """
    return await EnrollmentService(db).enroll(student.user_id, data.batch_id)

@router.get("/available-batches")
async def available_batches(
    student: Identity = Depends(get_current_student),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    return await EnrollmentService(db).get_available_batches()

@router.get("/my-enrollments")
async def my_enrollments(
    student: Identity = Depends(get_current_student),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    return await EnrollmentService(db).get_student_enrollments(student.user_id)

@router.get("/batch/{batch_id}/content")
async def batch_content(
    batch_id: str,
    student: Identity = Depends(require_enrollment_access),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """
    Full module/week/lecture tree of a batch the student is enrolled in
    """
    return await EnrollmentService(db).get_enrolled_batch_content(student.user_id, batch_id)

@router.get("/my-assignments", response_model=List[AssignmentWithProgress])
async def my_assignments(
    batch_id: Optional[str] = None,
    student: Identity = Depends(get_current_student),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """
    Published assignments across enrolled batches with progress status
    """
    return await AssignmentProgressCalculator(db).for_student(student.user_id, batch_id)

@router.get("/my-assignments/{assignment_id}")
async def my_assignment_details(
    assignment_id: str,
    student: Identity = Depends(get_current_student),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    return await EnrollmentService(db).get_student_assignment_details(student.user_id, assignment_id)

# ==================== ADMIN ====================

@router.get("", dependencies=[Depends(get_current_admin)])
async def list_enrollments(
    status: Optional[EnrollmentStatus] = None,
    batch_id: Optional[str] = None,
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    return await EnrollmentService(db).get_all_enrollments(status=status, batch_id=batch_id)

@router.patch("/{enrollment_id}/status", dependencies=[Depends(get_current_admin)])
async def update_enrollment_status(
    enrollment_id: str,
    data: EnrollmentStatusUpdate,
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    return await EnrollmentService(db).update_status(enrollment_id, data.status)

@router.patch("/{enrollment_id}/deactivate", dependencies=[Depends(get_current_admin)])
async def deactivate_enrollment(enrollment_id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    return await EnrollmentService(db).deactivate(enrollment_id)
