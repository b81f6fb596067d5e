from sqlalchemy import Column, Integer, String, Date, DateTime, Text, ForeignKey, Index, text
from sqlalchemy.orm import relationship
from wellbee.db.base import Base
from wellbee.utils.timezone import utcnow

STATUS_SCHEDULED = "scheduled"
STATUS_IN_PROGRESS = "in-progress"
STATUS_COMPLETED = "completed"
STATUS_CANCELLED = "cancelled"

APPOINTMENT_STATUSES = (STATUS_SCHEDULED, STATUS_IN_PROGRESS, STATUS_COMPLETED, STATUS_CANCELLED)
APPOINTMENT_TYPES = ("video", "in-person", "phone")


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False)
    patient_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    date = Column(Date, nullable=False)
    slot_start = Column(String(5), nullable=False)  # "HH:MM"
    slot_end = Column(String(5), nullable=False)

    status = Column(String, nullable=False, default=STATUS_SCHEDULED)  # scheduled, in-progress, completed, cancelled
    type = Column(String, nullable=False, default="video")  # video, in-person, phone

    symptoms = Column(Text, nullable=True)
    diagnosis = Column(Text, nullable=True)
    prescription = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    meeting_link = Column(String, nullable=True)

    rating_score = Column(Integer, nullable=True)
    rating_review = Column(Text, nullable=True)
    rating_date = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Relationships
    patient = relationship("User", foreign_keys=[patient_id], back_populates="patient_appointments")
    doctor = relationship("Doctor", foreign_keys=[doctor_id])

    __table_args__ = (
        Index("ix_appointments_doctor_date", "doctor_id", "date"),
        Index("ix_appointments_patient_date", "patient_id", "date"),
        Index("ix_appointments_status", "status"),
        # One live booking per doctor slot; cancelled rows free the slot again
        Index(
            "ux_appointments_doctor_date_slot",
            "doctor_id",
            "date",
            "slot_start",
            unique=True,
            postgresql_where=text("status <> 'cancelled'"),
            sqlite_where=text("status <> 'cancelled'"),
        ),
    )

    @property
    def time_slot(self) -> dict:
        return {"start": self.slot_start, "end": self.slot_end}

    @property
    def rating(self):
        if self.rating_score is None:
            return None
        return {"score": self.rating_score, "review": self.rating_review, "date": self.rating_date}
