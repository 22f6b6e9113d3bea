from pydantic import BaseModel, Field

from ..core.security import UserRole


class UserLogin(BaseModel):
    """Doctor and patient login; the identifier is the account email."""
    identifier: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AdminLogin(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    role: UserRole
    user_id: int
    expires_in: int


class TokenCheckResponse(BaseModel):
    valid: bool = True
    user_id: int
    role: UserRole
