"""Availability model definitions."""

from sqlalchemy import Column, Integer, JSON
from healthcare_api.database import Base


class Availability(Base):
    """Represents the bookable slots a caregiver offers.

    ``available_slots`` holds an ordered list of ``{"date": "<ISO timestamp>"}``
    objects.
    """
    __tablename__ = "availabilities"

    id = Column(Integer, primary_key=True)
    caregiver_id = Column(Integer, nullable=False, index=True)
    available_slots = Column(JSON, nullable=False, default=list)
