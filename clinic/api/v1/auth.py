from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.security import security
from ...api.deps import get_authority, rate_limit_check
from ...services.auth_service import AuthService
from ...services.token_service import TokenAuthority
from ...schemas.auth import AdminLogin, TokenCheckResponse, TokenResponse, UserLogin

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/admin/login", response_model=TokenResponse)
def admin_login(
    login_data: AdminLogin,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit_check)
):
    """Authenticate an admin and return a token."""
    return AuthService(db).login_admin(login_data)


@router.post("/doctor/login", response_model=TokenResponse)
def doctor_login(
    login_data: UserLogin,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit_check)
):
    """Authenticate a doctor and return a token."""
    return AuthService(db).login_doctor(login_data)


@router.post("/patient/login", response_model=TokenResponse)
def patient_login(
    login_data: UserLogin,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit_check)
):
    """Authenticate a patient and return a token."""
    return AuthService(db).login_patient(login_data)


@router.get("/verify/{role}", response_model=TokenCheckResponse)
def verify_token_endpoint(
    role: str,
    credentials: HTTPAuthorizationCredentials = Depends(security),
    authority: TokenAuthority = Depends(get_authority),
):
    """Check that the token is valid for the given role (dashboard gate)."""
    payload = authority.verify(credentials.credentials, role)
    return TokenCheckResponse(user_id=payload.user_id, role=payload.role)
