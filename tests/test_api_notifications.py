from wellbee import crud


def _notify(db, recipient, sender, type="appointment", message="hello", appointment_id=None):
    return crud.notification.create(
        db, user_id=recipient.id, from_user_id=sender.id, type=type, message=message, appointment_id=appointment_id
    )


def test_notifications_require_authentication(client):
    assert client.get("/api/v1/user/notifications").status_code == 401


def test_list_only_own_notifications_newest_first(db, client, patient_user, doctor_user, other_patient_user, auth_headers):
    first = _notify(db, patient_user, doctor_user, type="video", message="first")
    second = _notify(db, patient_user, doctor_user, type="appointment", message="second")
    _notify(db, other_patient_user, doctor_user, message="not yours")

    r = client.get("/api/v1/user/notifications", headers=auth_headers(patient_user))
    assert r.status_code == 200
    data = r.json()
    assert [n["id"] for n in data] == [second.id, first.id]
    assert data[0]["fromUserId"] == doctor_user.id
    assert data[0]["read"] is False
    assert "createdAt" in data[0]


def test_mark_one_read(db, client, patient_user, doctor_user, auth_headers):
    first = _notify(db, patient_user, doctor_user)
    second = _notify(db, patient_user, doctor_user)

    r = client.patch(
        "/api/v1/user/notifications", json={"notificationId": first.id}, headers=auth_headers(patient_user)
    )
    assert r.status_code == 200
    assert r.json()["updated"] == 1

    listed = {n["id"]: n["read"] for n in client.get(
        "/api/v1/user/notifications", headers=auth_headers(patient_user)
    ).json()}
    assert listed == {first.id: True, second.id: False}


def test_mark_all_read(db, client, patient_user, doctor_user, auth_headers):
    _notify(db, patient_user, doctor_user)
    _notify(db, patient_user, doctor_user)

    r = client.patch("/api/v1/user/notifications", json={}, headers=auth_headers(patient_user))
    assert r.status_code == 200
    assert r.json()["updated"] == 2

    listed = client.get("/api/v1/user/notifications", headers=auth_headers(patient_user)).json()
    assert all(n["read"] for n in listed)


def test_cannot_mark_someone_elses_notification(db, client, patient_user, other_patient_user, doctor_user, auth_headers):
    theirs = _notify(db, other_patient_user, doctor_user)

    r = client.patch(
        "/api/v1/user/notifications", json={"notificationId": theirs.id}, headers=auth_headers(patient_user)
    )
    assert r.status_code == 404
    db.refresh(theirs)
    assert theirs.read is False


def test_booking_creates_doctor_notification(client, dr_lee, patient_user, doctor_user, auth_headers):
    body = {"doctorId": dr_lee.id, "date": "2024-01-01", "timeSlot": {"start": "09:00", "end": "09:15"}}
    appointment = client.post("/api/v1/appointments", json=body, headers=auth_headers(patient_user)).json()

    listed = client.get("/api/v1/user/notifications", headers=auth_headers(doctor_user)).json()
    assert len(listed) == 1
    assert listed[0]["type"] == "appointment"
    assert listed[0]["appointmentId"] == appointment["id"]
    assert "Pat Doe" in listed[0]["message"]
