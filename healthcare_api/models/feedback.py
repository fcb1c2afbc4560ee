"""Feedback model definitions."""

from sqlalchemy import Column, Integer, Text
from healthcare_api.database import Base


class Feedback(Base):
    """Represents a patient's comment on an appointment."""
    __tablename__ = "feedbacks"

    id = Column(Integer, primary_key=True)
    appointment_id = Column(Integer, nullable=False, index=True)
    patient_id = Column(Integer, nullable=False)
    comment = Column(Text, nullable=False)
