from datetime import date as Date, datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field


class DoctorBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    specialty: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)


class DoctorCreate(DoctorBase):
    password: str = Field(..., min_length=8)


class DoctorUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    specialty: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    password: Optional[str] = Field(None, min_length=8)


class DoctorResponse(DoctorBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: Optional[datetime] = None


class DoctorList(BaseModel):
    doctors: List[DoctorResponse]


class AvailabilityResponse(BaseModel):
    doctor_id: int
    date: Date
    available_slots: List[str]
