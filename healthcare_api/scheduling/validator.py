from collections.abc import Iterable

from healthcare_api.models.appointment import Appointment, AppointmentStatus
from healthcare_api.scheduling.errors import Conflict, InvalidInput, MissingField


def is_missing_id(value: int | None) -> bool:
    return value is None or value <= 0


def is_active(appointment: Appointment) -> bool:
    return appointment.status != AppointmentStatus.CANCELLED


def find_conflict(candidate: Appointment, existing_for_caregiver: Iterable[Appointment]) -> Appointment | None:
    """Return the first non-cancelled appointment booked at the candidate's caregiver and time."""
    for existing in existing_for_caregiver:
        if (
            existing.caregiver_id == candidate.caregiver_id
            and existing.date_time == candidate.date_time
            and is_active(existing)
        ):
            return existing
    return None


def validate_and_prepare(
    candidate: Appointment | None,
    existing_for_caregiver: Iterable[Appointment],
) -> Appointment:
    """Check that ``candidate`` can be booked and hand it back for persisting.

    Raises ``InvalidInput`` for an absent candidate, ``MissingField`` when the
    caregiver id, patient id or time is not set, and ``Conflict`` when the caregiver
    already has a non-cancelled appointment at the same time. The candidate is
    returned unchanged; nothing is written here.
    """
    if candidate is None:
        raise InvalidInput()

    if is_missing_id(candidate.caregiver_id):
        raise MissingField("CaregiverId is required.")

    if is_missing_id(candidate.patient_id):
        raise MissingField("PatientId is required.")

    if candidate.date_time is None:
        raise MissingField("DateTime is required.")

    if find_conflict(candidate, existing_for_caregiver) is not None:
        raise Conflict()

    return candidate
