from sqlalchemy import Column, Integer, String, Boolean, Text, DateTime, Float, ForeignKey, JSON
from sqlalchemy.orm import relationship
from wellbee.db.base import Base
from wellbee.utils.timezone import utcnow

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


class Doctor(Base):
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    specialization = Column(String, nullable=False)  # e.g., "Cardiology", "General Medicine", etc.
    qualification = Column(String, nullable=True)
    experience_years = Column(Integer, default=0)

    # Working hours as zero-padded "HH:MM" strings so lexical and time order agree
    working_hours_start = Column(String(5), nullable=False, default="09:00")
    working_hours_end = Column(String(5), nullable=False, default="17:00")
    available_days = Column(JSON, nullable=False, default=list)  # ["Monday", "Wednesday", ...]
    max_appointments_per_day = Column(Integer, nullable=False, default=10)

    average_rating = Column(Float, default=0.0)
    about = Column(Text, nullable=True)
    is_available = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Relationships
    user = relationship("User", back_populates="doctor_profile")
    ratings = relationship("DoctorRating", back_populates="doctor", order_by="DoctorRating.id")

    @property
    def working_hours(self) -> dict:
        return {"start": self.working_hours_start, "end": self.working_hours_end}


class DoctorRating(Base):
    __tablename__ = "doctor_ratings"

    id = Column(Integer, primary_key=True, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False, index=True)
    appointment_id = Column(Integer, ForeignKey("appointments.id"), nullable=True)
    rating = Column(Integer, nullable=False)
    review = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    doctor = relationship("Doctor", back_populates="ratings")
