from typing import List
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.database import commit_or_raise
from ..core.errors import StorageFailure
from ..models import Prescription
from ..schemas.prescription import PrescriptionCreate

logger = logging.getLogger(__name__)


class PrescriptionService:
    """Prescription records, independent of appointment bookings.

    The appointment id is stored as given; the appointment is not required
    to exist.
    """

    def __init__(self, db: Session):
        self.db = db

    def save(self, prescription_data: PrescriptionCreate, doctor_id: int) -> Prescription:
        prescription = Prescription(doctor_id=doctor_id, **prescription_data.model_dump())
        self.db.add(prescription)
        commit_or_raise(self.db, "save prescription", prescription_data.appointment_id)
        self.db.refresh(prescription)
        return prescription

    def list_for_appointment(self, appointment_id: int) -> List[Prescription]:
        try:
            return self.db.query(Prescription).filter(
                Prescription.appointment_id == appointment_id
            ).order_by(Prescription.id).all()
        except SQLAlchemyError:
            logger.exception(f"load prescriptions failed (appointment_id={appointment_id})")
            raise StorageFailure()
