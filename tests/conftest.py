import os

# Must be set before anything imports wellbee.core.config
os.environ["SQLALCHEMY_DATABASE_URI"] = "sqlite://"
os.environ["METRICS_ENABLED"] = "false"
os.environ["DAILY_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient

from wellbee import crud
from wellbee.api import deps
from wellbee.core.security import ROLE_DOCTOR, ROLE_PATIENT, Principal, create_access_token
from wellbee.db.base import Base
from wellbee.db.session import SessionLocal, engine
from wellbee import models  # noqa: F401
from wellbee.notifications.emitter import NotificationEmitter
from wellbee.scheduling.service import SchedulingService
from wellbee.scheduling.video_rooms import DailyRoomProvider


@pytest.fixture(autouse=True)
def schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def patient_user(db):
    return crud.user.create(db, email="pat@example.com", full_name="Pat Doe", role=ROLE_PATIENT)


@pytest.fixture
def other_patient_user(db):
    return crud.user.create(db, email="sam@example.com", full_name="Sam Roe", role=ROLE_PATIENT)


@pytest.fixture
def doctor_user(db):
    return crud.user.create(db, email="lee@clinic.example", full_name="Lee", role=ROLE_DOCTOR)


@pytest.fixture
def dr_lee(db, doctor_user):
    return crud.doctor.create(
        db,
        user_id=doctor_user.id,
        name="Lee",
        email="lee@clinic.example",
        specialization="General Medicine",
        working_hours_start="09:00",
        working_hours_end="17:00",
        available_days=["Monday"],
        max_appointments_per_day=1,
    )


@pytest.fixture
def other_doctor_user(db):
    return crud.user.create(db, email="kim@clinic.example", full_name="Kim", role=ROLE_DOCTOR)


@pytest.fixture
def dr_kim(db, other_doctor_user):
    return crud.doctor.create(
        db,
        user_id=other_doctor_user.id,
        name="Kim",
        email="kim@clinic.example",
        specialization="Cardiology",
        working_hours_start="10:00",
        working_hours_end="12:00",
        available_days=["Monday", "Wednesday"],
        max_appointments_per_day=3,
    )


@pytest.fixture
def patient(patient_user):
    return Principal(user_id=patient_user.id, role=ROLE_PATIENT, name=patient_user.full_name)


@pytest.fixture
def other_patient(other_patient_user):
    return Principal(user_id=other_patient_user.id, role=ROLE_PATIENT, name=other_patient_user.full_name)


@pytest.fixture
def lee(doctor_user):
    return Principal(user_id=doctor_user.id, role=ROLE_DOCTOR, name=doctor_user.full_name)


@pytest.fixture
def kim(other_doctor_user):
    return Principal(user_id=other_doctor_user.id, role=ROLE_DOCTOR, name=other_doctor_user.full_name)


@pytest.fixture
def service(db):
    # No provider key: call start always takes the fallback room
    return SchedulingService(db, emitter=NotificationEmitter(SessionLocal), video_rooms=DailyRoomProvider(api_key=""))


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    from wellbee.main import app

    app.dependency_overrides[deps.get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(user) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user.id, role=user.role)}"}
    return _headers
