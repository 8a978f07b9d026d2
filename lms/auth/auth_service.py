import logging

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from lms.auth.auth_models import User, UserRole
from lms.auth.auth_utils import hash_password, verify_password, create_access_token
from lms.database import generate_id
from lms.errors import ConflictError, UnauthorizedError

logger = logging.getLogger(__name__)

def _public_user(user: dict) -> dict:
    user = dict(user)
    user.pop("_id", None)
    user.pop("password_hash", None)
    return user

def _auth_response(user: dict) -> dict:
    token = create_access_token(user["user_id"], user["email"], user["role"])
    return {"user": _public_user(user), "access_token": token}

async def sign_up(db: AsyncIOMotorDatabase, data: dict) -> dict:
    """
    Register a new user and issue a token
    Raises 409 when the email is taken
    """
    email = data["email"].lower()

    existing = await db.users.find_one({"email": email})
    if existing:
        raise ConflictError("Email already exists")

    user = User(
        user_id=generate_id("USR"),
        email=email,
        password_hash=hash_password(data["password"]),
        first_name=data["first_name"],
        last_name=data.get("last_name"),
        role=data.get("role") or UserRole.STUDENT,
    ).dict()

    try:
        await db.users.insert_one(user)
    except DuplicateKeyError:
        raise ConflictError("Email already exists")

    logger.info("Registered user %s with role %s", user["user_id"], user["role"])
    return _auth_response(user)

async def login(db: AsyncIOMotorDatabase, email: str, password: str) -> dict:
    """Authenticate with email + password"""
    user = await db.users.find_one({"email": email.lower()})

    if not user or not verify_password(password, user.get("password_hash")):
        raise UnauthorizedError("Invalid credentials")

    return _auth_response(user)
