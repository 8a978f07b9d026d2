from typing import Optional

from fastapi import Depends, Header

from lms.auth.auth_models import UserRole
from lms.auth.auth_utils import decode_access_token
from lms.errors import UnauthorizedError, ForbiddenError

class Identity:
    """
    Authenticated caller, built from a verified token payload
    """
    def __init__(self, payload: dict):
        self.user_id = payload.get("sub")
        self.email = payload.get("email")
        self.role = payload.get("role")
        self.payload = payload

def authenticate(token: Optional[str]) -> Identity:
    """
    Verify a bearer token and return the caller's identity

    Raises:
        401: Missing, invalid or expired token
    """
    if not token:
        raise UnauthorizedError("Access token is required")

    payload = decode_access_token(token)

    if not payload.get("sub"):
        raise UnauthorizedError("Invalid token: missing user id")

    return Identity(payload)

def require_role(identity: Identity, *roles: UserRole) -> bool:
    return identity.role in {role.value for role in roles}

def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer":
        return None
    return parts[1]

# ==================== DEPENDENCIES ====================

async def get_current_user(authorization: str = Header(None)) -> Identity:
    """
    Dependency: any authenticated user
    """
    return authenticate(extract_bearer_token(authorization))

async def get_current_admin(identity: Identity = Depends(get_current_user)) -> Identity:
    """
    Dependency: authenticated ADMIN

    Raises:
        401: Invalid token
        403: Not an admin
    """
    if not require_role(identity, UserRole.ADMIN):
        raise ForbiddenError("Access denied. Admin role required.")
    return identity

async def get_current_student(identity: Identity = Depends(get_current_user)) -> Identity:
    """
    Dependency: authenticated STUDENT

    Raises:
        401: Invalid token
        403: Not a student
    """
    if not require_role(identity, UserRole.STUDENT):
        raise ForbiddenError("Access denied. Student role required.")
    return identity
