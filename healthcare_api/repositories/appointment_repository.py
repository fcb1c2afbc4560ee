import logging
from typing import Protocol

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from healthcare_api.models.appointment import Appointment
from healthcare_api.scheduling.errors import Conflict

logger = logging.getLogger(__name__)


class AppointmentStore(Protocol):
    """The store operations appointment booking depends on."""

    def get_by_caregiver_id(self, caregiver_id: int) -> list[Appointment]:
        ...

    def create(self, appointment: Appointment) -> Appointment:
        ...


class AppointmentRepository:
    """SQLAlchemy-backed appointment persistence."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(self) -> list[Appointment]:
        return self.db.query(Appointment).order_by(Appointment.date_time.asc()).all()

    def get_by_id(self, appointment_id: int) -> Appointment | None:
        return self.db.query(Appointment).filter(Appointment.id == appointment_id).first()

    def get_by_caregiver_id(self, caregiver_id: int) -> list[Appointment]:
        return self.db.query(Appointment).filter(
            Appointment.caregiver_id == caregiver_id,
        ).order_by(Appointment.date_time.asc()).all()

    def get_by_patient_id(self, patient_id: int) -> list[Appointment]:
        return self.db.query(Appointment).filter(
            Appointment.patient_id == patient_id,
        ).order_by(Appointment.date_time.asc()).all()

    def create(self, appointment: Appointment) -> Appointment:
        self.db.add(appointment)
        try:
            self.db.commit()
        except IntegrityError as exc:
            # A concurrent booking won the unique slot index.
            self.db.rollback()
            logger.warning(
                'Slot already taken for caregiver %s at %s',
                appointment.caregiver_id,
                appointment.date_time,
            )
            raise Conflict() from exc
        self.db.refresh(appointment)
        return appointment

    def update_status(self, appointment: Appointment, status: str) -> Appointment:
        appointment.status = status
        self.db.commit()
        self.db.refresh(appointment)
        return appointment

    def delete(self, appointment: Appointment) -> None:
        self.db.delete(appointment)
        self.db.commit()
