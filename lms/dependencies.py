# lms/dependencies.py

from fastapi import Depends, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from lms.auth.auth_permissions import Identity, get_current_student
from lms.database import get_db
from lms.enrollments.enrollment_service import EnrollmentService
from lms.errors import BadRequestError, ForbiddenError
from lms.hierarchy.hierarchy_validator import HierarchyValidator

HIERARCHY_KEYS = ("vertical_id", "batch_id", "module_id", "week_id", "lecture_id")

async def validate_hierarchy(
    request: Request,
    db: AsyncIOMotorDatabase = Depends(get_db)
) -> dict:
    """
    Collect hierarchy ids from path params (then query params) and verify
    that they form one chain

    Raises:
        400: The ids do not form a valid hierarchical relationship
    """
    params = request.path_params
    query = request.query_params

    hierarchy = {key: params.get(key) or query.get(key) for key in HIERARCHY_KEYS}

    is_valid = await HierarchyValidator(db).validate_full_hierarchy(**hierarchy)
    if not is_valid:
        raise BadRequestError(
            "Invalid hierarchy: The provided IDs do not form a valid hierarchical relationship"
        )

    return hierarchy

async def require_enrollment_access(
    request: Request,
    db: AsyncIOMotorDatabase = Depends(get_db),
    student: Identity = Depends(get_current_student)
) -> Identity:
    """
    Only students with an approved, active enrollment reach batch content

    Raises:
        400: batch_id missing from the path
        403: Not enrolled in this batch
    """
    batch_id = request.path_params.get("batch_id")

    if not batch_id:
        raise BadRequestError("Batch ID is required")

    has_access = await EnrollmentService(db).verify_access(student.user_id, batch_id)

    if not has_access:
        raise ForbiddenError(
            "You do not have access to this batch content. Please ensure you are enrolled in this batch."
        )

    return student
