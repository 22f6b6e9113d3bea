from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.security import TokenPayload
from ...api.deps import get_doctor, get_patient
from ...services.appointment_service import AppointmentService
from ...schemas.appointment import (
    AppointmentCreate, AppointmentList, AppointmentResponse, AppointmentUpdate
)

router = APIRouter(prefix="/appointments", tags=["Appointments"])


@router.post("", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def book_appointment(
    appointment_data: AppointmentCreate,
    db: Session = Depends(get_db),
    current: TokenPayload = Depends(get_patient),
):
    """Book an appointment for the authenticated patient."""
    return AppointmentService(db).book(appointment_data, current.user_id)


@router.put("/{appointment_id}", response_model=AppointmentResponse)
def update_appointment(
    appointment_id: int,
    appointment_data: AppointmentUpdate,
    db: Session = Depends(get_db),
    current: TokenPayload = Depends(get_patient),
):
    """Move or complete one of the patient's appointments."""
    return AppointmentService(db).update(appointment_id, appointment_data, current.user_id)


@router.delete("/{appointment_id}")
def cancel_appointment(
    appointment_id: int,
    db: Session = Depends(get_db),
    current: TokenPayload = Depends(get_patient),
):
    """Cancel one of the patient's appointments."""
    AppointmentService(db).cancel(appointment_id, current.user_id)
    return {"message": "Appointment cancelled successfully."}


@router.get("/doctor/{day}", response_model=AppointmentList)
def doctor_appointments(
    day: date,
    patient_name: Optional[str] = None,
    db: Session = Depends(get_db),
    current: TokenPayload = Depends(get_doctor),
):
    """The authenticated doctor's appointments for a day."""
    appointments = AppointmentService(db).list_for_doctor(
        current.user_id, day, patient_name=patient_name
    )
    return AppointmentList(appointments=appointments)
