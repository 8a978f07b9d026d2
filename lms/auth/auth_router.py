from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from lms.auth.auth_schemas import SignUpRequest, LoginRequest, AuthResponse
from lms.auth import auth_service as service
from lms.database import get_db

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(data: SignUpRequest, db: AsyncIOMotorDatabase = Depends(get_db)):
    """
    Create a new user account with email, password, and role
    """
    return await service.sign_up(db, data.dict())

@router.post("/login", response_model=AuthResponse, status_code=201)
async def login(data: LoginRequest, db: AsyncIOMotorDatabase = Depends(get_db)):
    """
    Authenticate user with email and password
    """
    return await service.login(db, data.email, data.password)
