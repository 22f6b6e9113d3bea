from datetime import datetime

import pytest

from clinic.core.errors import DoctorNotFound, PatientNotFound, SlotTaken
from clinic.models import Appointment
from clinic.services.booking_guard import BookingGuard

NINE = datetime(2024, 6, 10, 9, 0)


@pytest.fixture
def booked(db_session, make_doctor, make_patient):
    doctor = make_doctor()
    patient = make_patient()
    appointment = Appointment(doctor_id=doctor.id, patient_id=patient.id, appointment_time=NINE)
    db_session.add(appointment)
    db_session.commit()
    db_session.refresh(appointment)
    return doctor, patient, appointment


class TestBookingGuard:

    def test_valid_booking(self, db_session, make_doctor, make_patient):
        doctor = make_doctor()
        patient = make_patient()
        BookingGuard(db_session).can_book(doctor.id, patient.id, NINE)

    def test_unknown_doctor(self, db_session, make_patient):
        patient = make_patient()
        with pytest.raises(DoctorNotFound):
            BookingGuard(db_session).can_book(404, patient.id, NINE)

    def test_unknown_patient(self, db_session, make_doctor):
        doctor = make_doctor()
        with pytest.raises(PatientNotFound):
            BookingGuard(db_session).can_book(doctor.id, 404, NINE)

    def test_doctor_checked_before_patient(self, db_session):
        with pytest.raises(DoctorNotFound):
            BookingGuard(db_session).can_book(404, 404, NINE)

    def test_same_slot_taken(self, db_session, booked, make_patient):
        doctor, _, _ = booked
        other_patient = make_patient(name="John Doe")
        with pytest.raises(SlotTaken):
            BookingGuard(db_session).can_book(doctor.id, other_patient.id, NINE)

    @pytest.mark.parametrize("minute", [1, 30, 59])
    def test_partial_overlap_taken(self, db_session, booked, minute):
        doctor, patient, _ = booked
        guard = BookingGuard(db_session)
        with pytest.raises(SlotTaken):
            guard.can_book(doctor.id, patient.id, datetime(2024, 6, 10, 9, minute))
        with pytest.raises(SlotTaken):
            guard.can_book(doctor.id, patient.id, datetime(2024, 6, 10, 8, minute))

    def test_adjacent_slots_are_free(self, db_session, booked):
        doctor, patient, _ = booked
        guard = BookingGuard(db_session)
        guard.can_book(doctor.id, patient.id, datetime(2024, 6, 10, 8, 0))
        guard.can_book(doctor.id, patient.id, datetime(2024, 6, 10, 10, 0))

    def test_other_doctor_unaffected(self, db_session, booked, make_doctor):
        _, patient, _ = booked
        other = make_doctor(name="Lisa Cuddy", specialty="Endocrinology")
        BookingGuard(db_session).can_book(other.id, patient.id, NINE)

    def test_excluding_itself(self, db_session, booked):
        doctor, patient, appointment = booked
        BookingGuard(db_session).can_book(
            doctor.id, patient.id, NINE, exclude_appointment_id=appointment.id
        )

    def test_excluding_another_appointment(self, db_session, booked):
        doctor, patient, appointment = booked
        with pytest.raises(SlotTaken):
            BookingGuard(db_session).can_book(
                doctor.id, patient.id, NINE, exclude_appointment_id=appointment.id + 1
            )
