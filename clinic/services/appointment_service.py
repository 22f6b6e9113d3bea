from datetime import date
from typing import List, Optional
import logging

from sqlalchemy.orm import Session

from ..core.database import commit_or_raise
from ..core.errors import (
    AppointmentNotFound, Forbidden, InvalidFilter, InvalidSlot,
    InvalidTransition, SlotTaken
)
from ..models import Appointment, AppointmentStatus
from ..schemas.appointment import AppointmentCreate, AppointmentUpdate, AppointmentView
from .booking_guard import BookingGuard
from .filters import AppointmentCriteria, normalize
from .slot_calendar import day_bounds, is_template_slot

logger = logging.getLogger(__name__)

CONDITION_STATUS = {
    "past": AppointmentStatus.COMPLETED,
    "future": AppointmentStatus.SCHEDULED,
}


def to_view(appointment, patient, doctor) -> AppointmentView:
    return AppointmentView(
        id=appointment.id,
        doctor_id=appointment.doctor_id,
        doctor_name=doctor.name if doctor else "Unknown Doctor",
        patient_id=appointment.patient_id,
        patient_name=patient.name if patient else "Unknown Patient",
        patient_email=patient.email if patient else None,
        patient_phone=patient.phone if patient else None,
        patient_address=patient.address if patient else None,
        appointment_time=appointment.appointment_time,
        status=appointment.status,
    )


class AppointmentService:
    """Book, move, cancel and list appointments.

    Callers pass identities taken from verified tokens; nothing here trusts a
    client-supplied patient or doctor id for authorization.
    """

    def __init__(self, db: Session):
        self.db = db
        self.guard = BookingGuard(db)

    def get(self, appointment_id: int) -> Appointment:
        appointment = self.db.get(Appointment, appointment_id)
        if not appointment:
            raise AppointmentNotFound(f"Appointment {appointment_id} not found")
        return appointment

    def book(self, data: AppointmentCreate, patient_id: int) -> Appointment:
        """Create a scheduled appointment for the authenticated patient."""
        self._check_slot(data.appointment_time)
        self.guard.can_book(data.doctor_id, patient_id, data.appointment_time)

        appointment = Appointment(
            doctor_id=data.doctor_id,
            patient_id=patient_id,
            appointment_time=data.appointment_time,
            status=AppointmentStatus.SCHEDULED,
        )
        self.db.add(appointment)
        commit_or_raise(self.db, "book appointment", data.doctor_id, on_conflict=SlotTaken)
        self.db.refresh(appointment)

        logger.info(
            f"Appointment {appointment.id} booked: doctor={appointment.doctor_id} "
            f"patient={patient_id} at {appointment.appointment_time.isoformat()}"
        )
        return appointment

    def update(self, appointment_id: int, data: AppointmentUpdate, patient_id: int) -> Appointment:
        """Move or complete an appointment owned by the patient."""
        appointment = self.get(appointment_id)
        self._check_owner(appointment, patient_id)

        if appointment.status == AppointmentStatus.COMPLETED:
            raise InvalidTransition(f"Appointment {appointment_id} is already completed")

        self._check_slot(data.appointment_time)
        self.guard.can_book(
            data.doctor_id,
            appointment.patient_id,
            data.appointment_time,
            exclude_appointment_id=appointment.id,
        )

        appointment.doctor_id = data.doctor_id
        appointment.appointment_time = data.appointment_time
        appointment.status = data.status
        commit_or_raise(self.db, "update appointment", appointment_id, on_conflict=SlotTaken)
        self.db.refresh(appointment)
        return appointment

    def cancel(self, appointment_id: int, patient_id: int) -> None:
        """Delete an appointment; only its patient may cancel it."""
        appointment = self.get(appointment_id)
        self._check_owner(appointment, patient_id)

        if appointment.status == AppointmentStatus.COMPLETED:
            raise InvalidTransition(f"Appointment {appointment_id} is already completed")

        self.db.delete(appointment)
        commit_or_raise(self.db, "cancel appointment", appointment_id)
        logger.info(f"Appointment {appointment_id} cancelled by patient {patient_id}")

    def list_for_doctor(
        self, doctor_id: int, day: date, patient_name: Optional[str] = None
    ) -> List[AppointmentView]:
        start, end = day_bounds(day)
        criteria = AppointmentCriteria(
            doctor_id=doctor_id, start=start, end=end, patient_name=patient_name
        )
        return [to_view(*row) for row in criteria.run(self.db)]

    def list_for_patient(
        self,
        patient_id: int,
        condition: Optional[str] = None,
        doctor_name: Optional[str] = None,
    ) -> List[AppointmentView]:
        status = None
        condition = normalize(condition)
        if condition:
            status = CONDITION_STATUS.get(condition.lower())
            if status is None:
                raise InvalidFilter("Invalid condition specified. Use 'past' or 'future'.")

        criteria = AppointmentCriteria(
            patient_id=patient_id, status=status, doctor_name=doctor_name
        )
        return [to_view(*row) for row in criteria.run(self.db)]

    def _check_slot(self, appointment_time) -> None:
        if not is_template_slot(appointment_time):
            raise InvalidSlot(
                f"{appointment_time.strftime('%H:%M:%S')} is not a bookable slot"
            )

    def _check_owner(self, appointment: Appointment, patient_id: int) -> None:
        if appointment.patient_id != patient_id:
            logger.warning(
                f"Patient {patient_id} denied access to appointment {appointment.id}"
            )
            raise Forbidden("Unauthorized to modify this appointment")
