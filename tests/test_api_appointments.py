from wellbee import crud

MONDAY = "2024-01-01"
TUESDAY = "2024-01-02"


def book(client, headers, doctor_id, date=MONDAY, start="09:00", end="09:15", **extra):
    body = {"doctorId": doctor_id, "date": date, "timeSlot": {"start": start, "end": end}, **extra}
    return client.post("/api/v1/appointments", json=body, headers=headers)


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["database"] == "healthy"


def test_booking_requires_authentication(client, dr_lee):
    r = book(client, {}, dr_lee.id)
    assert r.status_code == 401


def test_booking_with_bad_token(client, dr_lee):
    r = book(client, {"Authorization": "Bearer not-a-token"}, dr_lee.id)
    assert r.status_code == 401


def test_book_appointment(client, dr_lee, patient_user, auth_headers):
    r = book(client, auth_headers(patient_user), dr_lee.id, symptoms="headache")
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["doctorId"] == dr_lee.id
    assert data["patientId"] == patient_user.id
    assert data["date"] == MONDAY
    assert data["timeSlot"] == {"start": "09:00", "end": "09:15"}
    assert data["status"] == "scheduled"
    assert data["type"] == "video"
    assert data["meetingLink"] is None
    assert data["doctor"]["name"] == "Lee"


def test_booking_rejection_echoes_available_days(client, dr_lee, patient_user, auth_headers):
    r = book(client, auth_headers(patient_user), dr_lee.id, date=TUESDAY)
    assert r.status_code == 400
    assert r.json() == {
        "error": "Doctor is not available on this day",
        "reason": "day unavailable",
        "availableDays": ["Monday"],
    }


def test_booking_rejection_echoes_working_hours(client, dr_lee, patient_user, auth_headers):
    r = book(client, auth_headers(patient_user), dr_lee.id, start="08:00", end="08:15")
    assert r.status_code == 400
    assert r.json()["reason"] == "outside working hours"
    assert r.json()["workingHours"] == {"start": "09:00", "end": "17:00"}


def test_booking_unknown_doctor(client, patient_user, auth_headers):
    r = book(client, auth_headers(patient_user), 999)
    assert r.status_code == 404


def test_doctor_cannot_book(client, dr_lee, doctor_user, auth_headers):
    r = book(client, auth_headers(doctor_user), dr_lee.id)
    assert r.status_code == 403


def test_malformed_time_slot(client, dr_lee, patient_user, auth_headers):
    r = book(client, auth_headers(patient_user), dr_lee.id, start="9:00", end="09:15")
    assert r.status_code == 400
    assert r.json()["reason"] == "invalid request"
    assert [f["field"] for f in r.json()["fields"]] == ["timeSlot.start"]


def test_missing_booking_fields_are_400(client, dr_lee, patient_user, auth_headers):
    r = client.post("/api/v1/appointments", json={"doctorId": dr_lee.id}, headers=auth_headers(patient_user))
    assert r.status_code == 400
    body = r.json()
    assert body["error"] == "Missing or invalid fields"
    assert body["reason"] == "invalid request"
    assert {f["field"] for f in body["fields"]} == {"date", "timeSlot"}


def test_missing_status_update_fields_are_400(client, patient_user, auth_headers):
    r = client.patch("/api/v1/appointments", json={"status": "cancelled"}, headers=auth_headers(patient_user))
    assert r.status_code == 400
    assert [f["field"] for f in r.json()["fields"]] == ["appointmentId"]


def test_list_own_appointments(client, dr_lee, patient_user, doctor_user, auth_headers):
    book(client, auth_headers(patient_user), dr_lee.id)

    mine = client.get("/api/v1/appointments", headers=auth_headers(patient_user))
    assert mine.status_code == 200
    assert len(mine.json()) == 1

    as_doctor = client.get("/api/v1/appointments", headers=auth_headers(doctor_user))
    assert as_doctor.status_code == 200
    assert [a["patientId"] for a in as_doctor.json()] == [patient_user.id]

    by_filter = client.get(
        "/api/v1/appointments", params={"doctorId": dr_lee.id}, headers=auth_headers(doctor_user)
    )
    assert len(by_filter.json()) == 1


def test_listing_someone_elses_appointments_is_forbidden(
    client, dr_lee, patient_user, other_patient_user, auth_headers
):
    r = client.get(
        "/api/v1/appointments", params={"userId": patient_user.id}, headers=auth_headers(other_patient_user)
    )
    assert r.status_code == 403

    r = client.get(
        "/api/v1/appointments", params={"doctorId": dr_lee.id}, headers=auth_headers(other_patient_user)
    )
    assert r.status_code == 403


def test_video_call_and_status_flow(db, client, dr_lee, patient_user, doctor_user, auth_headers):
    appointment_id = book(client, auth_headers(patient_user), dr_lee.id).json()["id"]

    r = client.post(
        "/api/v1/video/create-room", json={"appointmentId": appointment_id}, headers=auth_headers(doctor_user)
    )
    assert r.status_code == 200, r.text
    link = r.json()["meetingLink"]
    assert link.startswith("https://meet.jit.si/wellbee-appointment-")
    assert r.json()["appointment"]["status"] == "in-progress"

    again = client.post(
        "/api/v1/video/create-room", json={"appointmentId": appointment_id}, headers=auth_headers(doctor_user)
    )
    assert again.json()["meetingLink"] == link

    r = client.patch(
        "/api/v1/appointments",
        json={"appointmentId": appointment_id, "status": "completed", "rating": 5, "review": "Great"},
        headers=auth_headers(patient_user),
    )
    assert r.status_code == 200, r.text
    assert r.json()["status"] == "completed"
    assert r.json()["rating"]["score"] == 5

    db.refresh(dr_lee)
    assert dr_lee.average_rating == 5.0


def test_patient_cannot_start_call(client, dr_lee, patient_user, auth_headers):
    appointment_id = book(client, auth_headers(patient_user), dr_lee.id).json()["id"]
    r = client.post(
        "/api/v1/video/create-room", json={"appointmentId": appointment_id}, headers=auth_headers(patient_user)
    )
    assert r.status_code == 403


def test_invalid_transition_is_400(client, dr_lee, patient_user, auth_headers):
    appointment_id = book(client, auth_headers(patient_user), dr_lee.id).json()["id"]
    r = client.patch(
        "/api/v1/appointments",
        json={"appointmentId": appointment_id, "status": "completed"},
        headers=auth_headers(patient_user),
    )
    assert r.status_code == 400
    assert r.json()["reason"] == "invalid transition"


def test_rating_out_of_range_is_rejected(client, dr_lee, patient_user, auth_headers):
    appointment_id = book(client, auth_headers(patient_user), dr_lee.id).json()["id"]
    r = client.patch(
        "/api/v1/appointments",
        json={"appointmentId": appointment_id, "status": "completed", "rating": 7},
        headers=auth_headers(patient_user),
    )
    assert r.status_code == 400
    assert [f["field"] for f in r.json()["fields"]] == ["rating"]


def test_update_missing_appointment(client, patient_user, auth_headers):
    r = client.patch(
        "/api/v1/appointments",
        json={"appointmentId": 9999, "status": "cancelled"},
        headers=auth_headers(patient_user),
    )
    assert r.status_code == 404


def test_doctors_and_open_slots(client, db, dr_lee, dr_kim, patient_user, auth_headers):
    crud.doctor.add_rating(db, doctor=dr_kim, rating=4)
    db.commit()

    r = client.get("/api/v1/doctors")
    assert r.status_code == 200
    assert [d["id"] for d in r.json()] == [dr_kim.id, dr_lee.id]
    assert r.json()[0]["workingHours"] == {"start": "10:00", "end": "12:00"}

    book(client, auth_headers(patient_user), dr_kim.id, start="10:00", end="10:15")
    r = client.get(f"/api/v1/doctors/{dr_kim.id}/slots", params={"date": MONDAY})
    assert r.status_code == 200
    starts = [s["start"] for s in r.json()["slots"]]
    assert starts[0] == "10:15"
    assert len(starts) == 7

    r = client.get(f"/api/v1/doctors/{dr_kim.id}/slots", params={"date": TUESDAY})
    assert r.json()["slots"] == []
