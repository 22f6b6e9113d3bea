"""Criteria objects that compose optional filters into one query.

Each criteria field is optional; only the fields that are set add a
predicate, so every combination of filters goes through the same code path.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from ..models import Appointment, AppointmentStatus, Doctor, Patient
from .slot_calendar import slots_in_period

NO_FILTER = ("", "all", "none")


def normalize(value: Optional[str]) -> Optional[str]:
    """Treat blank, "all" and "none" as an absent filter."""
    if value is None:
        return None
    value = value.strip()
    if value.lower() in NO_FILTER:
        return None
    return value


def _contains(column, text: str):
    return column.icontains(text, autoescape=True)


@dataclass
class DoctorCriteria:
    name: Optional[str] = None
    specialty: Optional[str] = None
    period: Optional[str] = None

    def apply(self, query: Query) -> Query:
        name = normalize(self.name)
        specialty = normalize(self.specialty)
        if name:
            query = query.filter(_contains(Doctor.name, name))
        if specialty:
            query = query.filter(func.lower(Doctor.specialty) == specialty.lower())
        return query

    def run(self, db: Session):
        doctors = self.apply(db.query(Doctor)).order_by(Doctor.id).all()
        period = normalize(self.period)
        # All doctors share SLOT_TEMPLATE, so AM/PM only narrows the list when
        # that half of the day has no template slots; other periods are ignored
        if period and not slots_in_period(period):
            return []
        return doctors


@dataclass
class AppointmentCriteria:
    doctor_id: Optional[int] = None
    patient_id: Optional[int] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    status: Optional[AppointmentStatus] = None
    patient_name: Optional[str] = None
    doctor_name: Optional[str] = None

    def apply(self, query: Query) -> Query:
        if self.doctor_id is not None:
            query = query.filter(Appointment.doctor_id == self.doctor_id)
        if self.patient_id is not None:
            query = query.filter(Appointment.patient_id == self.patient_id)
        if self.start is not None:
            query = query.filter(Appointment.appointment_time >= self.start)
        if self.end is not None:
            query = query.filter(Appointment.appointment_time <= self.end)
        if self.status is not None:
            query = query.filter(Appointment.status == self.status)

        patient_name = normalize(self.patient_name)
        if patient_name:
            query = query.filter(_contains(Patient.name, patient_name))
        doctor_name = normalize(self.doctor_name)
        if doctor_name:
            query = query.filter(_contains(Doctor.name, doctor_name))
        return query

    def run(self, db: Session):
        """Rows of (Appointment, Patient, Doctor) ordered by time."""
        query = (
            db.query(Appointment, Patient, Doctor)
            .join(Patient, Appointment.patient_id == Patient.id)
            .join(Doctor, Appointment.doctor_id == Doctor.id)
        )
        return self.apply(query).order_by(Appointment.appointment_time, Appointment.id).all()
