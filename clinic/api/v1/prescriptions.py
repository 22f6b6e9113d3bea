from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.security import TokenPayload
from ...api.deps import get_doctor
from ...services.prescription_service import PrescriptionService
from ...schemas.prescription import PrescriptionCreate, PrescriptionList, PrescriptionResponse

router = APIRouter(prefix="/prescriptions", tags=["Prescriptions"])


@router.post("", response_model=PrescriptionResponse, status_code=status.HTTP_201_CREATED)
def save_prescription(
    prescription_data: PrescriptionCreate,
    db: Session = Depends(get_db),
    current: TokenPayload = Depends(get_doctor),
):
    """Save a prescription written by the authenticated doctor."""
    return PrescriptionService(db).save(prescription_data, current.user_id)


@router.get("/{appointment_id}", response_model=PrescriptionList)
def get_prescriptions(
    appointment_id: int,
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_doctor),
):
    """Prescriptions recorded for an appointment."""
    prescriptions = PrescriptionService(db).list_for_appointment(appointment_id)
    return PrescriptionList(
        prescriptions=[PrescriptionResponse.model_validate(p) for p in prescriptions]
    )
