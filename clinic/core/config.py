from pydantic_settings import BaseSettings
from typing import Optional, List
import os


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Clinic Scheduling Service"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    TESTING: bool = os.getenv("TESTING", "0").lower() in ("1", "true", "t", "yes", "y")

    # Database
    DATABASE_URL: str = "postgresql://clinic@localhost:5432/clinic_db"
    TEST_DATABASE_URL: str = "sqlite:///./test_clinic.db"

    # Security - SECRET_KEY has no default and must come from the environment
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    TOKEN_EXPIRE_DAYS: int = 7

    # Seed admin account, created at startup when both are set
    ADMIN_USERNAME: Optional[str] = None
    ADMIN_PASSWORD: Optional[str] = None

    # Redis (login rate limiting)
    REDIS_URL: str = "redis://localhost:6379"
    LOGIN_RATE_LIMIT: int = 10
    LOGIN_RATE_WINDOW_SECONDS: int = 3600

    # CORS
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8080", "http://testserver"]

    @property
    def get_database_url(self):
        """Return the appropriate database URL based on if we're testing"""
        if self.TESTING:
            return self.TEST_DATABASE_URL
        return self.DATABASE_URL

    class Config:
        env_file = ".env"
        case_sensitive = True


# Create settings instance
settings = Settings()
