from datetime import timedelta
from typing import Optional
import logging

from jose import ExpiredSignatureError, JWTError
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.errors import RoleMismatch, TokenExpired, TokenMalformed, UnknownSubject
from ..core.security import (
    SubjectDirectory, TokenPayload, UserRole, decode_token, encode_token, utcnow
)
from ..models import Admin, Doctor, Patient

logger = logging.getLogger(__name__)

ROLE_MODELS = {
    UserRole.ADMIN: Admin,
    UserRole.DOCTOR: Doctor,
    UserRole.PATIENT: Patient,
}


class DatabaseSubjectDirectory:
    """SubjectDirectory backed by the admin, doctor and patient tables."""

    def __init__(self, db: Session):
        self.db = db

    def exists(self, role: UserRole, user_id: int) -> bool:
        model = ROLE_MODELS[role]
        return self.db.query(model.id).filter(model.id == user_id).first() is not None


class TokenAuthority:
    """Issues and verifies signed, role-scoped identity tokens.

    Verification re-checks that the subject still exists, so deleting an
    account invalidates its outstanding tokens.
    """

    def __init__(self, directory: SubjectDirectory, lifetime: Optional[timedelta] = None):
        self.directory = directory
        self.lifetime = lifetime or timedelta(days=settings.TOKEN_EXPIRE_DAYS)

    @property
    def expires_in(self) -> int:
        return int(self.lifetime.total_seconds())

    def issue(self, user_id: int, role: UserRole, lifetime: Optional[timedelta] = None) -> str:
        """Create a token binding user_id and role."""
        claims = {
            "sub": str(user_id),
            "user_id": user_id,
            "role": UserRole(role).value,
        }
        return encode_token(claims, utcnow(), lifetime or self.lifetime)

    def verify(self, token: str, required_role=None) -> TokenPayload:
        """Verify token for required_role (any role when None) and return its subject."""
        if not token or not token.strip():
            raise TokenMalformed("Token is missing")

        try:
            claims = decode_token(token)
        except ExpiredSignatureError:
            raise TokenExpired()
        except JWTError:
            raise TokenMalformed()

        user_id = claims.get("user_id")
        token_role = UserRole.parse(claims.get("role", ""))
        if not isinstance(user_id, int) or token_role is None or "exp" not in claims:
            raise TokenMalformed("Token has incorrect user ID or role")

        # jose only rejects exp strictly in the past
        if claims["exp"] <= int(utcnow().timestamp()):
            raise TokenExpired()

        if required_role is not None:
            wanted = UserRole.parse(required_role)
            if wanted is None or token_role != wanted:
                raise RoleMismatch()

        if not self.directory.exists(token_role, user_id):
            logger.info(f"Token subject {token_role.value}:{user_id} no longer exists")
            raise UnknownSubject()

        return TokenPayload(user_id=user_id, role=token_role)


def get_token_authority(db: Session) -> TokenAuthority:
    return TokenAuthority(DatabaseSubjectDirectory(db))
