from datetime import datetime

from clinic.core.security import UserRole
from clinic.models import Appointment

NEW_DOCTOR = {
    "name": "Allison Cameron",
    "email": "cameron@clinic.com",
    "specialty": "Immunology",
    "phone": "555-0199",
    "password": "Secret123!",
}


class TestDoctorAdmin:

    def test_create_doctor(self, client, admin, auth_headers):
        response = client.post("/api/v1/doctors", json=NEW_DOCTOR, headers=auth_headers(admin.id, UserRole.ADMIN))
        assert response.status_code == 201
        data = response.json()
        assert data["email"] == NEW_DOCTOR["email"]
        assert data["specialty"] == "Immunology"
        assert "password" not in data
        assert "password_hash" not in data

    def test_create_duplicate_email(self, client, admin, auth_headers):
        headers = auth_headers(admin.id, UserRole.ADMIN)
        client.post("/api/v1/doctors", json=NEW_DOCTOR, headers=headers)

        response = client.post("/api/v1/doctors", json=NEW_DOCTOR, headers=headers)
        assert response.status_code == 409
        assert response.json()["error"] == "DuplicateRecord"

    def test_create_requires_admin(self, client, make_doctor, auth_headers):
        doctor = make_doctor()
        response = client.post("/api/v1/doctors", json=NEW_DOCTOR, headers=auth_headers(doctor.id, UserRole.DOCTOR))
        assert response.status_code == 401
        assert response.json()["error"] == "RoleMismatch"

    def test_create_without_token(self, client):
        response = client.post("/api/v1/doctors", json=NEW_DOCTOR)
        assert response.status_code in (401, 403)

    def test_update_doctor(self, client, admin, make_doctor, auth_headers):
        doctor = make_doctor()
        response = client.put(
            f"/api/v1/doctors/{doctor.id}",
            json={"specialty": "Nephrology"},
            headers=auth_headers(admin.id, UserRole.ADMIN),
        )
        assert response.status_code == 200
        assert response.json()["specialty"] == "Nephrology"
        assert response.json()["name"] == doctor.name

    def test_update_missing_doctor(self, client, admin, auth_headers):
        response = client.put(
            "/api/v1/doctors/999",
            json={"specialty": "Nephrology"},
            headers=auth_headers(admin.id, UserRole.ADMIN),
        )
        assert response.status_code == 404
        assert response.json()["error"] == "RecordNotFound"

    def test_update_to_taken_email(self, client, admin, make_doctor, auth_headers):
        make_doctor(email="house@clinic.com")
        other = make_doctor(name="James Wilson", specialty="Oncology")
        response = client.put(
            f"/api/v1/doctors/{other.id}",
            json={"email": "house@clinic.com"},
            headers=auth_headers(admin.id, UserRole.ADMIN),
        )
        assert response.status_code == 409

    def test_delete_cascades_appointments(self, client, db_session, admin, make_doctor, make_patient, auth_headers):
        doctor = make_doctor()
        patient = make_patient()
        for hour in (8, 9, 10):
            db_session.add(Appointment(
                doctor_id=doctor.id, patient_id=patient.id,
                appointment_time=datetime(2024, 6, 10, hour, 0),
            ))
        db_session.commit()
        doctor_id = doctor.id

        response = client.delete(f"/api/v1/doctors/{doctor_id}", headers=auth_headers(admin.id, UserRole.ADMIN))
        assert response.status_code == 200
        assert response.json()["appointments_removed"] == 3

        db_session.expire_all()
        remaining = db_session.query(Appointment).filter(Appointment.doctor_id == doctor_id).count()
        assert remaining == 0

    def test_delete_missing_doctor(self, client, admin, auth_headers):
        response = client.delete("/api/v1/doctors/999", headers=auth_headers(admin.id, UserRole.ADMIN))
        assert response.status_code == 404

    def test_deleted_doctor_token_rejected(self, client, admin, make_doctor, auth_headers):
        doctor = make_doctor()
        doctor_headers = auth_headers(doctor.id, UserRole.DOCTOR)
        client.delete(f"/api/v1/doctors/{doctor.id}", headers=auth_headers(admin.id, UserRole.ADMIN))

        response = client.get("/api/v1/appointments/doctor/2024-06-10", headers=doctor_headers)
        assert response.status_code == 401
        assert response.json()["error"] == "UnknownSubject"


class TestDoctorQueries:

    def test_list_doctors(self, client, make_doctor):
        make_doctor()
        make_doctor(name="James Wilson", specialty="Oncology")
        response = client.get("/api/v1/doctors")
        assert response.status_code == 200
        assert [d["name"] for d in response.json()["doctors"]] == ["Gregory House", "James Wilson"]

    def test_filter_by_name_and_specialty(self, client, make_doctor):
        make_doctor()
        make_doctor(name="James Wilson", specialty="Oncology")
        make_doctor(name="Lisa Cuddy", specialty="endocrinology")

        response = client.get("/api/v1/doctors/filter", params={"name": "wil"})
        assert [d["name"] for d in response.json()["doctors"]] == ["James Wilson"]

        response = client.get("/api/v1/doctors/filter", params={"specialty": "Endocrinology"})
        assert [d["name"] for d in response.json()["doctors"]] == ["Lisa Cuddy"]

        response = client.get("/api/v1/doctors/filter", params={"name": "house", "specialty": "Oncology"})
        assert response.json()["doctors"] == []

    def test_filter_all_means_no_filter(self, client, make_doctor):
        make_doctor()
        make_doctor(name="James Wilson", specialty="Oncology")
        response = client.get("/api/v1/doctors/filter", params={"name": "all", "specialty": "", "period": "none"})
        assert len(response.json()["doctors"]) == 2

    def test_filter_by_period(self, client, make_doctor):
        make_doctor()
        for period in ("AM", "pm", "evening"):
            response = client.get("/api/v1/doctors/filter", params={"period": period})
            assert response.status_code == 200
            assert len(response.json()["doctors"]) == 1

    def test_availability(self, client, make_doctor, make_patient, auth_headers):
        doctor = make_doctor()
        patient = make_patient()
        headers = auth_headers(patient.id, UserRole.PATIENT)
        client.post(
            "/api/v1/appointments",
            json={"doctor_id": doctor.id, "appointment_time": "2024-06-10T09:00:00"},
            headers=headers,
        )

        response = client.get(f"/api/v1/doctors/{doctor.id}/availability/2024-06-10", headers=headers)
        assert response.status_code == 200
        data = response.json()
        assert data["date"] == "2024-06-10"
        assert data["available_slots"] == ["08:00", "10:00", "11:00", "13:00", "14:00", "15:00", "16:00"]

        # Any role may check availability
        response = client.get(
            f"/api/v1/doctors/{doctor.id}/availability/2024-06-10",
            headers=auth_headers(doctor.id, UserRole.DOCTOR),
        )
        assert response.status_code == 200

    def test_availability_requires_token(self, client, make_doctor):
        doctor = make_doctor()
        response = client.get(f"/api/v1/doctors/{doctor.id}/availability/2024-06-10")
        assert response.status_code in (401, 403)
