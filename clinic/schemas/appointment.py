from datetime import date, datetime, time, timedelta
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, computed_field, field_validator

from ..models.appointment import AppointmentStatus


class AppointmentCreate(BaseModel):
    doctor_id: int
    appointment_time: datetime

    @field_validator("appointment_time")
    @classmethod
    def clinic_wall_clock(cls, value: datetime) -> datetime:
        # Appointment times are stored as naive clinic-local wall clock values
        return value.replace(tzinfo=None)


class AppointmentUpdate(AppointmentCreate):
    status: AppointmentStatus = AppointmentStatus.SCHEDULED


class AppointmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    doctor_id: int
    patient_id: int
    appointment_time: datetime
    status: AppointmentStatus


class AppointmentView(BaseModel):
    """Read-only projection of an appointment with display fields."""
    id: int
    doctor_id: int
    doctor_name: str
    patient_id: int
    patient_name: str
    patient_email: Optional[str] = None
    patient_phone: Optional[str] = None
    patient_address: Optional[str] = None
    appointment_time: datetime
    status: AppointmentStatus

    @computed_field
    @property
    def appointment_date(self) -> date:
        return self.appointment_time.date()

    @computed_field
    @property
    def appointment_time_only(self) -> time:
        return self.appointment_time.time()

    @computed_field
    @property
    def end_time(self) -> datetime:
        return self.appointment_time + timedelta(hours=1)


class AppointmentList(BaseModel):
    appointments: List[AppointmentView]
