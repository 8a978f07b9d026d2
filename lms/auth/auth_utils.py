# lms/auth/auth_utils.py
from datetime import timedelta
from typing import Optional

from jose import jwt, JWTError
from passlib.hash import pbkdf2_sha256

from lms.config import JWT_SECRET_KEY, JWT_ALGORITHM, JWT_EXPIRE_MINUTES
from lms.database import utc_now
from lms.errors import UnauthorizedError

def hash_password(password: str) -> str:
    return pbkdf2_sha256.hash(password)

def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    return pbkdf2_sha256.verify(password, password_hash)

def create_access_token(user_id: str, email: str, role: str, expires_minutes: int = JWT_EXPIRE_MINUTES) -> str:
    payload = {
        "sub": user_id,
        "email": email,
        "role": role,
        "exp": utc_now() + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(payload, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)

def decode_access_token(token: str) -> dict:
    try:
        # Decodes and checks expiration/signature
        return jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError:
        raise UnauthorizedError("Invalid or expired token")
