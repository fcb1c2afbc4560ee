"""Appointment model definitions."""

import enum

from sqlalchemy import Column, DateTime, Index, Integer, String, text
from healthcare_api.database import Base


class AppointmentStatus(str, enum.Enum):
    """Lifecycle states of an appointment."""
    SCHEDULED = "Scheduled"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


ACTIVE_SLOT_CONDITION = text("status != 'Cancelled'")


class Appointment(Base):
    """Represents a patient booking with a caregiver at a point in time."""
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True)
    patient_id = Column(Integer, nullable=False, index=True)
    caregiver_id = Column(Integer, nullable=False, index=True)
    date_time = Column(DateTime, nullable=False)
    status = Column(String, nullable=False, default=AppointmentStatus.SCHEDULED.value)

    # One non-cancelled appointment per caregiver and time.
    __table_args__ = (
        Index(
            "uq_appointments_caregiver_slot",
            "caregiver_id",
            "date_time",
            unique=True,
            sqlite_where=ACTIVE_SLOT_CONDITION,
            postgresql_where=ACTIVE_SLOT_CONDITION,
        ),
    )

    def __repr__(self):
        return (
            f"<Appointment(id={self.id}, caregiver_id={self.caregiver_id}, "
            f"patient_id={self.patient_id}, date_time={self.date_time}, status='{self.status}')>"
        )
