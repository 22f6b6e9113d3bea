from sqlalchemy import Column, Integer, String, DateTime, Text
from sqlalchemy.sql import func

from ..core.database import Base


class Prescription(Base):
    __tablename__ = "prescriptions"

    id = Column(Integer, primary_key=True, index=True)

    # Plain reference; prescriptions are not tied to the appointment row's lifetime
    appointment_id = Column(Integer, nullable=False, index=True)
    doctor_id = Column(Integer, nullable=True)

    patient_name = Column(String(200), nullable=True)
    medication = Column(String(255), nullable=True)
    dosage = Column(String(100), nullable=True)
    content = Column(Text, nullable=False)

    created_at = Column(DateTime, server_default=func.now())

    def __repr__(self):
        return f"<Prescription(id={self.id}, appointment_id={self.appointment_id})>"
