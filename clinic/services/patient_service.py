from typing import Optional
import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ..core.database import commit_or_raise
from ..core.errors import DuplicateRecord, PatientNotFound
from ..core.security import get_password_hash
from ..models import Patient
from ..schemas.patient import PatientRegister, PatientUpdate

logger = logging.getLogger(__name__)


class PatientService:
    def __init__(self, db: Session):
        self.db = db

    def register(self, patient_data: PatientRegister) -> Patient:
        """Self-registration; rejected when the email or phone is in use."""
        if self._find_conflict(patient_data.email, patient_data.phone):
            raise DuplicateRecord("Patient with email id or phone no already exist")

        patient = Patient(
            name=patient_data.name,
            email=patient_data.email,
            phone=patient_data.phone,
            address=patient_data.address,
            password_hash=get_password_hash(patient_data.password),
        )
        self.db.add(patient)
        commit_or_raise(self.db, "register patient", patient_data.email, on_conflict=DuplicateRecord)
        self.db.refresh(patient)
        logger.info(f"Patient {patient.id} registered")
        return patient

    def get(self, patient_id: int) -> Patient:
        patient = self.db.get(Patient, patient_id)
        if not patient:
            raise PatientNotFound(f"Patient {patient_id} not found")
        return patient

    def update(self, patient_id: int, patient_data: PatientUpdate) -> Patient:
        patient = self.get(patient_id)
        changes = patient_data.model_dump(exclude_unset=True)

        conflict = self._find_conflict(
            changes.get("email"), changes.get("phone"), exclude_id=patient_id
        )
        if conflict:
            raise DuplicateRecord("Email or phone already used by another patient")

        password = changes.pop("password", None)
        if password:
            patient.password_hash = get_password_hash(password)
        for field, value in changes.items():
            if value is not None:
                setattr(patient, field, value)

        commit_or_raise(self.db, "update patient", patient_id, on_conflict=DuplicateRecord)
        self.db.refresh(patient)
        return patient

    def _find_conflict(
        self, email: Optional[str], phone: Optional[str], exclude_id: Optional[int] = None
    ) -> Optional[Patient]:
        clauses = []
        if email:
            clauses.append(Patient.email == email)
        if phone:
            clauses.append(Patient.phone == phone)
        if not clauses:
            return None

        query = self.db.query(Patient).filter(or_(*clauses))
        if exclude_id is not None:
            query = query.filter(Patient.id != exclude_id)
        return query.first()
