"""Working-hours template and per-doctor slot availability.

Every slot is one hour long and identified by its start time. The template
is shared by all doctors; availability for a day is the template minus the
start times already booked for that doctor on that day.
"""
from datetime import date, datetime, time, timedelta
from typing import List

from sqlalchemy.orm import Session

from ..models import Appointment

SLOT_LENGTH = timedelta(hours=1)

SLOT_TEMPLATE = (
    time(8, 0), time(9, 0), time(10, 0), time(11, 0),
    # 12:00 lunch
    time(13, 0), time(14, 0), time(15, 0), time(16, 0),
)

NOON = time(12, 0)


def format_slot(slot: time) -> str:
    return slot.strftime("%H:%M")


def day_bounds(day: date):
    """Inclusive [00:00:00, 23:59:59.999999] range for a calendar day."""
    return datetime.combine(day, time.min), datetime.combine(day, time.max)


def is_template_slot(moment: datetime) -> bool:
    return moment.time() in SLOT_TEMPLATE


def slots_in_period(period: str) -> List[time]:
    """Template slots in the morning ("AM") or afternoon ("PM")."""
    period = period.upper()
    if period == "AM":
        return [slot for slot in SLOT_TEMPLATE if slot < NOON]
    if period == "PM":
        return [slot for slot in SLOT_TEMPLATE if slot >= NOON]
    return list(SLOT_TEMPLATE)


def booked_times(db: Session, doctor_id: int, day: date) -> set:
    start, end = day_bounds(day)
    rows = db.query(Appointment.appointment_time).filter(
        Appointment.doctor_id == doctor_id,
        Appointment.appointment_time >= start,
        Appointment.appointment_time <= end,
    ).all()
    return {row.appointment_time.time() for row in rows}


def available_slots(db: Session, doctor_id: int, day: date) -> List[str]:
    """Free template slots for a doctor on a day, in template order.

    Doctor existence is not checked here; an unknown doctor simply has no
    bookings and gets the full template.
    """
    taken = booked_times(db, doctor_id, day)
    return [format_slot(slot) for slot in SLOT_TEMPLATE if slot not in taken]
