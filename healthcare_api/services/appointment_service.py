"""Appointment booking and lifecycle rules."""

import logging

from healthcare_api.models.appointment import Appointment, AppointmentStatus
from healthcare_api.repositories.appointment_repository import AppointmentRepository, AppointmentStore
from healthcare_api.scheduling.errors import AppointmentNotFound, InvalidInput, InvalidStatusTransition
from healthcare_api.scheduling.validator import is_missing_id, validate_and_prepare

logger = logging.getLogger(__name__)

ALLOWED_STATUS_TRANSITIONS = {
    AppointmentStatus.SCHEDULED: {AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED},
    AppointmentStatus.COMPLETED: set(),
    AppointmentStatus.CANCELLED: set(),
}


class AppointmentService:
    def __init__(self, store: AppointmentStore):
        self.store = store

    def create_appointment(self, candidate: Appointment | None) -> Appointment:
        """Validate ``candidate`` against the caregiver's bookings and persist it.

        The conflict check reads before it writes; two concurrent requests can
        both pass it. The unique slot index makes the store reject the second
        insert with the same ``Conflict``.
        """
        if candidate is None:
            raise InvalidInput()

        existing = []
        if not is_missing_id(candidate.caregiver_id):
            existing = self.store.get_by_caregiver_id(candidate.caregiver_id)

        prepared = validate_and_prepare(candidate, existing)
        created = self.store.create(prepared)
        logger.info(
            'Booked appointment %s for caregiver %s at %s',
            created.id,
            created.caregiver_id,
            created.date_time,
        )
        return created


def change_status(
    repository: AppointmentRepository,
    appointment_id: int,
    new_status: AppointmentStatus,
) -> Appointment:
    appointment = repository.get_by_id(appointment_id)
    if appointment is None:
        raise AppointmentNotFound()

    current_status = AppointmentStatus(appointment.status)
    if new_status == current_status:
        return appointment

    if new_status not in ALLOWED_STATUS_TRANSITIONS[current_status]:
        raise InvalidStatusTransition(current_status.value, new_status.value)

    return repository.update_status(appointment, new_status.value)
