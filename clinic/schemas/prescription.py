from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class PrescriptionCreate(BaseModel):
    appointment_id: int
    content: str = Field(..., min_length=1)
    patient_name: Optional[str] = Field(None, max_length=200)
    medication: Optional[str] = Field(None, max_length=255)
    dosage: Optional[str] = Field(None, max_length=100)


class PrescriptionResponse(PrescriptionCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    doctor_id: Optional[int] = None
    created_at: Optional[datetime] = None


class PrescriptionList(BaseModel):
    prescriptions: List[PrescriptionResponse]
