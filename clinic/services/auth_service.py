from sqlalchemy.orm import Session
import logging

from ..core.config import Settings
from ..core.database import commit_or_raise
from ..core.errors import InvalidCredentials
from ..core.security import UserRole, get_password_hash, verify_password
from ..models import Admin, Doctor, Patient
from ..schemas.auth import AdminLogin, TokenResponse, UserLogin
from .token_service import TokenAuthority, get_token_authority

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, db: Session, authority: TokenAuthority = None):
        self.db = db
        self.authority = authority or get_token_authority(db)

    def login_admin(self, login_data: AdminLogin) -> TokenResponse:
        """Authenticate an admin by username."""
        admin = self.db.query(Admin).filter(
            Admin.username == login_data.username
        ).first()
        return self._issue(admin, login_data.password, UserRole.ADMIN, "Invalid username or password")

    def login_doctor(self, login_data: UserLogin) -> TokenResponse:
        """Authenticate a doctor by email."""
        doctor = self.db.query(Doctor).filter(
            Doctor.email == login_data.identifier
        ).first()
        return self._issue(doctor, login_data.password, UserRole.DOCTOR, "Invalid credentials")

    def login_patient(self, login_data: UserLogin) -> TokenResponse:
        """Authenticate a patient by email."""
        patient = self.db.query(Patient).filter(
            Patient.email == login_data.identifier
        ).first()
        return self._issue(patient, login_data.password, UserRole.PATIENT, "Invalid email or password")

    def _issue(self, account, password: str, role: UserRole, failure: str) -> TokenResponse:
        if not account or not verify_password(password, account.password_hash):
            logger.info(f"Failed {role.value} login")
            raise InvalidCredentials(failure)

        return TokenResponse(
            token=self.authority.issue(account.id, role),
            role=role,
            user_id=account.id,
            expires_in=self.authority.expires_in,
        )


def ensure_admin(db: Session, config: Settings) -> bool:
    """Create the configured admin account if it does not exist yet."""
    if not config.ADMIN_USERNAME or not config.ADMIN_PASSWORD:
        return False

    existing = db.query(Admin).filter(Admin.username == config.ADMIN_USERNAME).first()
    if existing:
        return False

    db.add(Admin(
        username=config.ADMIN_USERNAME,
        password_hash=get_password_hash(config.ADMIN_PASSWORD),
    ))
    commit_or_raise(db, "seed admin")
    logger.info(f"Seeded admin account '{config.ADMIN_USERNAME}'")
    return True
