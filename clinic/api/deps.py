from fastapi import Depends, HTTPException, status, Request
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional

from ..core.config import settings
from ..core.database import get_db, get_redis
from ..core.security import security, TokenPayload, UserRole
from ..services.token_service import TokenAuthority, get_token_authority


def get_authority(db: Session = Depends(get_db)) -> TokenAuthority:
    return get_token_authority(db)


def require_role(role: Optional[UserRole]):
    """Create a dependency that verifies the bearer token for one role (any when None)."""
    def role_checker(
        credentials: HTTPAuthorizationCredentials = Depends(security),
        authority: TokenAuthority = Depends(get_authority),
    ) -> TokenPayload:
        return authority.verify(credentials.credentials, role)

    return role_checker


# Specific role dependencies
get_current_user = require_role(None)
get_admin = require_role(UserRole.ADMIN)
get_doctor = require_role(UserRole.DOCTOR)
get_patient = require_role(UserRole.PATIENT)


# Rate limiting dependency
def rate_limit_check(
    request: Request,
    redis_client=Depends(get_redis)
) -> None:
    """Basic per-client rate limiting for login endpoints."""
    client_ip = request.client.host if request.client else "unknown"
    key = f"rate_limit:{client_ip}"

    current_requests = redis_client.get(key)
    if current_requests is None:
        redis_client.setex(key, settings.LOGIN_RATE_WINDOW_SECONDS, 1)
    else:
        if int(current_requests) >= settings.LOGIN_RATE_LIMIT:
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Too many requests. Please try again later."
            )
        redis_client.incr(key)
