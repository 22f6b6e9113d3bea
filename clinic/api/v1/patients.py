from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.security import TokenPayload
from ...api.deps import get_patient
from ...services.appointment_service import AppointmentService
from ...services.patient_service import PatientService
from ...schemas.appointment import AppointmentList
from ...schemas.patient import PatientRegister, PatientResponse, PatientUpdate

router = APIRouter(prefix="/patients", tags=["Patients"])


@router.post("", response_model=PatientResponse, status_code=status.HTTP_201_CREATED)
def register_patient(
    patient_data: PatientRegister,
    db: Session = Depends(get_db),
):
    """Patient self-registration."""
    return PatientService(db).register(patient_data)


@router.get("/me", response_model=PatientResponse)
def get_my_details(
    db: Session = Depends(get_db),
    current: TokenPayload = Depends(get_patient),
):
    """Details of the authenticated patient."""
    return PatientService(db).get(current.user_id)


@router.put("/me", response_model=PatientResponse)
def update_my_details(
    patient_data: PatientUpdate,
    db: Session = Depends(get_db),
    current: TokenPayload = Depends(get_patient),
):
    """Update the authenticated patient's record."""
    return PatientService(db).update(current.user_id, patient_data)


@router.get("/me/appointments", response_model=AppointmentList)
def my_appointments(
    condition: Optional[str] = None,
    doctor_name: Optional[str] = None,
    db: Session = Depends(get_db),
    current: TokenPayload = Depends(get_patient),
):
    """The patient's appointments, optionally filtered by past/future and doctor name."""
    appointments = AppointmentService(db).list_for_patient(
        current.user_id, condition=condition, doctor_name=doctor_name
    )
    return AppointmentList(appointments=appointments)
