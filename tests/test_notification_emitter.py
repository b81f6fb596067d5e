from wellbee import crud
from wellbee.db.session import SessionLocal
from wellbee.notifications.emitter import NotificationEmitter


def test_emit_persists_unread_notification(db, patient_user, doctor_user):
    result = NotificationEmitter(SessionLocal).emit(
        target_user_id=patient_user.id,
        from_user_id=doctor_user.id,
        type="video",
        message="Dr. Lee has started your video consultation. Join now!",
    )
    assert result.ok
    assert result.error is None

    stored = crud.notification.list_for_user(db, user_id=patient_user.id)
    assert [n.id for n in stored] == [result.notification.id]
    assert stored[0].read is False
    assert stored[0].type == "video"


def test_unknown_type_is_reported_not_raised(db, patient_user, doctor_user):
    result = NotificationEmitter(SessionLocal).emit(
        target_user_id=patient_user.id, from_user_id=doctor_user.id, type="carrier-pigeon", message="hi"
    )
    assert not result.ok
    assert "carrier-pigeon" in result.error
    assert crud.notification.list_for_user(db, user_id=patient_user.id) == []


class BrokenSession:
    def __init__(self):
        self.rolled_back = False
        self.closed = False

    def add(self, obj):
        raise RuntimeError("database is down")

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


def test_store_failure_is_swallowed_and_session_closed(patient_user, doctor_user):
    session = BrokenSession()
    result = NotificationEmitter(lambda: session).emit(
        target_user_id=patient_user.id, from_user_id=doctor_user.id, type="appointment", message="new booking"
    )
    assert not result.ok
    assert result.error == "database is down"
    assert session.rolled_back
    assert session.closed
