from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ..core.errors import DoctorNotFound, PatientNotFound, SlotTaken
from ..models import Appointment, Doctor, Patient
from .slot_calendar import SLOT_LENGTH


class BookingGuard:
    """Write-time check that a doctor slot can be (re)assigned.

    Must run immediately before the appointment is flushed. The unique
    constraint on (doctor_id, appointment_time) remains the final word for
    concurrent bookings of the identical slot.
    """

    def __init__(self, db: Session):
        self.db = db

    def can_book(
        self,
        doctor_id: int,
        patient_id: int,
        appointment_time: datetime,
        exclude_appointment_id: Optional[int] = None,
    ) -> None:
        """Raise a ValidationFailure if the booking is not allowed."""
        if not self._exists(Doctor, doctor_id):
            raise DoctorNotFound(f"Doctor {doctor_id} not found")

        if not self._exists(Patient, patient_id):
            raise PatientNotFound(f"Patient {patient_id} not found")

        for existing in self.overlapping(doctor_id, appointment_time):
            if existing.id != exclude_appointment_id:
                raise SlotTaken(
                    f"Doctor {doctor_id} already has an appointment at "
                    f"{existing.appointment_time.isoformat()}"
                )

    def overlapping(self, doctor_id: int, appointment_time: datetime):
        """Appointments whose one-hour window overlaps the requested one."""
        window_start = appointment_time - SLOT_LENGTH
        window_end = appointment_time + SLOT_LENGTH
        return self.db.query(Appointment).filter(
            Appointment.doctor_id == doctor_id,
            Appointment.appointment_time > window_start,
            Appointment.appointment_time < window_end,
        ).all()

    def _exists(self, model, record_id: int) -> bool:
        return self.db.query(model.id).filter(model.id == record_id).first() is not None
