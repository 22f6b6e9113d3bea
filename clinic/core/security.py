from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol
from jose import jwt
from passlib.context import CryptContext
from fastapi.security import HTTPBearer
from pydantic import BaseModel
from enum import Enum

from .config import settings

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# JWT Security
security = HTTPBearer()


class UserRole(str, Enum):
    ADMIN = "admin"
    DOCTOR = "doctor"
    PATIENT = "patient"

    @classmethod
    def parse(cls, value) -> Optional["UserRole"]:
        """Case-insensitive lookup; None for unknown role names."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.lower())
        except ValueError:
            return None


class TokenPayload(BaseModel):
    user_id: int
    role: UserRole


class SubjectDirectory(Protocol):
    """Answers whether a user of a role with an id currently exists."""

    def exists(self, role: UserRole, user_id: int) -> bool:
        ...


# Password utilities
def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Generate password hash."""
    return pwd_context.hash(password)


# JWT utilities
def encode_token(claims: dict, issued_at: datetime, expires_delta: timedelta) -> str:
    """Sign claims with an issued-at and expiry timestamp."""
    to_encode = claims.copy()
    to_encode.update({
        "iat": issued_at,
        "exp": issued_at + expires_delta,
    })

    return jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM
    )


def decode_token(token: str) -> dict:
    """Decode and check a JWT; raises jose errors on failure."""
    return jwt.decode(
        token,
        settings.SECRET_KEY,
        algorithms=[settings.ALGORITHM]
    )


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
