from datetime import date
from typing import List
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.database import commit_or_raise
from ..core.errors import DuplicateRecord, RecordNotFound, StorageFailure
from ..core.security import get_password_hash
from ..models import Doctor
from ..schemas.doctor import DoctorCreate, DoctorUpdate
from .filters import DoctorCriteria
from .slot_calendar import available_slots

logger = logging.getLogger(__name__)


class DoctorService:
    def __init__(self, db: Session):
        self.db = db

    def list(self) -> List[Doctor]:
        return self.db.query(Doctor).order_by(Doctor.id).all()

    def get(self, doctor_id: int) -> Doctor:
        doctor = self.db.get(Doctor, doctor_id)
        if not doctor:
            raise RecordNotFound(f"Doctor not found with id {doctor_id}")
        return doctor

    def create(self, doctor_data: DoctorCreate) -> Doctor:
        """Add a doctor; emails are unique."""
        if self._email_taken(doctor_data.email):
            raise DuplicateRecord("Doctor already exists")

        doctor = Doctor(
            name=doctor_data.name,
            email=doctor_data.email,
            specialty=doctor_data.specialty,
            phone=doctor_data.phone,
            password_hash=get_password_hash(doctor_data.password),
        )
        self.db.add(doctor)
        commit_or_raise(self.db, "create doctor", doctor_data.email, on_conflict=DuplicateRecord)
        self.db.refresh(doctor)
        logger.info(f"Doctor {doctor.id} created")
        return doctor

    def update(self, doctor_id: int, doctor_data: DoctorUpdate) -> Doctor:
        doctor = self.get(doctor_id)
        changes = doctor_data.model_dump(exclude_unset=True)

        if "email" in changes and changes["email"] != doctor.email and self._email_taken(changes["email"]):
            raise DuplicateRecord("Another doctor already uses this email")

        password = changes.pop("password", None)
        if password:
            doctor.password_hash = get_password_hash(password)
        for field, value in changes.items():
            if value is not None:
                setattr(doctor, field, value)

        commit_or_raise(self.db, "update doctor", doctor_id, on_conflict=DuplicateRecord)
        self.db.refresh(doctor)
        return doctor

    def delete(self, doctor_id: int) -> int:
        """Delete a doctor and all of their appointments in one transaction.

        Returns the number of appointments removed.
        """
        doctor = self.get(doctor_id)
        try:
            # Appointments go with the doctor through the relationship cascade
            removed = len(doctor.appointments)
            self.db.delete(doctor)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"delete doctor failed (id={doctor_id})")
            raise StorageFailure()

        logger.info(f"Doctor {doctor_id} deleted with {removed} appointment(s)")
        return removed

    def filter(self, criteria: DoctorCriteria) -> List[Doctor]:
        return criteria.run(self.db)

    def availability(self, doctor_id: int, day: date) -> List[str]:
        return available_slots(self.db, doctor_id, day)

    def _email_taken(self, email: str) -> bool:
        return self.db.query(Doctor.id).filter(Doctor.email == email).first() is not None
