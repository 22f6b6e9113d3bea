from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.security import TokenPayload
from ...api.deps import get_admin, get_current_user
from ...services.doctor_service import DoctorService
from ...services.filters import DoctorCriteria
from ...schemas.doctor import (
    AvailabilityResponse, DoctorCreate, DoctorList, DoctorResponse, DoctorUpdate
)

router = APIRouter(prefix="/doctors", tags=["Doctors"])


@router.get("", response_model=DoctorList)
def list_doctors(db: Session = Depends(get_db)):
    """List all doctors."""
    doctors = DoctorService(db).list()
    return DoctorList(doctors=[DoctorResponse.model_validate(d) for d in doctors])


@router.get("/filter", response_model=DoctorList)
def filter_doctors(
    name: Optional[str] = None,
    specialty: Optional[str] = None,
    period: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """Filter doctors by name, specialty and AM/PM availability."""
    criteria = DoctorCriteria(name=name, specialty=specialty, period=period)
    doctors = DoctorService(db).filter(criteria)
    return DoctorList(doctors=[DoctorResponse.model_validate(d) for d in doctors])


@router.get("/{doctor_id}/availability/{day}", response_model=AvailabilityResponse)
def doctor_availability(
    doctor_id: int,
    day: date,
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_current_user),
):
    """Free slots for a doctor on a date; any authenticated role may ask."""
    return AvailabilityResponse(
        doctor_id=doctor_id,
        date=day,
        available_slots=DoctorService(db).availability(doctor_id, day),
    )


@router.post("", response_model=DoctorResponse, status_code=status.HTTP_201_CREATED)
def add_doctor(
    doctor_data: DoctorCreate,
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_admin),
):
    """Add a new doctor (admin only)."""
    return DoctorService(db).create(doctor_data)


@router.put("/{doctor_id}", response_model=DoctorResponse)
def update_doctor(
    doctor_id: int,
    doctor_data: DoctorUpdate,
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_admin),
):
    """Update doctor details (admin only)."""
    return DoctorService(db).update(doctor_id, doctor_data)


@router.delete("/{doctor_id}")
def delete_doctor(
    doctor_id: int,
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_admin),
):
    """Delete a doctor and their appointments (admin only)."""
    removed = DoctorService(db).delete(doctor_id)
    return {"message": "Doctor deleted successfully", "appointments_removed": removed}
