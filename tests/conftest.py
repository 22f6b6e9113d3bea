import os

import pytest

# Set testing environment before the application is imported
os.environ["TESTING"] = "1"
os.environ["TEST_DATABASE_URL"] = "sqlite:///./test_clinic.db"
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-clinic-tests")
os.environ.pop("ADMIN_USERNAME", None)
os.environ.pop("ADMIN_PASSWORD", None)

from fastapi.testclient import TestClient  # noqa: E402

from clinic.core.database import Base, SessionLocal, engine, get_redis  # noqa: E402
from clinic.core.security import UserRole, get_password_hash  # noqa: E402
from clinic.main import app  # noqa: E402
from clinic.models import Admin, Doctor, Patient  # noqa: E402
from clinic.services.token_service import get_token_authority  # noqa: E402

PASSWORD = "Secret123!"
PASSWORD_HASH = get_password_hash(PASSWORD)


class FakeRedis:
    """In-memory stand-in for the Redis commands the rate limiter uses."""

    def __init__(self):
        self.data = {}

    def setex(self, key, seconds, value):
        self.data[key] = str(value)
        return True

    def get(self, key):
        return self.data.get(key)

    def incr(self, key):
        self.data[key] = str(int(self.data.get(key, 0)) + 1)
        return int(self.data[key])


@pytest.fixture(scope="function")
def test_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session(test_db):
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def client(test_db, fake_redis):
    app.dependency_overrides[get_redis] = lambda: fake_redis
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_doctor(db_session):
    def _make(name="Gregory House", email=None, specialty="Diagnostics", doctor_id=None):
        doctor = Doctor(
            id=doctor_id,
            name=name,
            email=email or f"{name.split()[0].lower()}{doctor_id or ''}@clinic.com",
            specialty=specialty,
            password_hash=PASSWORD_HASH,
        )
        db_session.add(doctor)
        db_session.commit()
        db_session.refresh(doctor)
        return doctor
    return _make


@pytest.fixture
def make_patient(db_session):
    counter = {"n": 0}

    def _make(name="Jane Roe", email=None, phone=None, patient_id=None):
        counter["n"] += 1
        patient = Patient(
            id=patient_id,
            name=name,
            email=email or f"patient{counter['n']}@mail.com",
            phone=phone or f"555-010{counter['n']}",
            address="1 Main Street",
            password_hash=PASSWORD_HASH,
        )
        db_session.add(patient)
        db_session.commit()
        db_session.refresh(patient)
        return patient
    return _make


@pytest.fixture
def admin(db_session):
    account = Admin(username="root", password_hash=PASSWORD_HASH)
    db_session.add(account)
    db_session.commit()
    db_session.refresh(account)
    return account


@pytest.fixture
def authority(db_session):
    return get_token_authority(db_session)


@pytest.fixture
def auth_headers(authority):
    def _headers(user_id, role: UserRole):
        return {"Authorization": f"Bearer {authority.issue(user_id, role)}"}
    return _headers
