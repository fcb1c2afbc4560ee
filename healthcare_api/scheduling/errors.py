"""Domain errors raised while scheduling appointments.

Each error carries the literal message returned to API clients.
"""


class SchedulingError(Exception):
    default_message = "Scheduling error."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AppointmentValidationError(SchedulingError):
    """Raised when a proposed appointment cannot be booked."""


class InvalidInput(AppointmentValidationError):
    default_message = "Invalid appointment data."


class MissingField(AppointmentValidationError):
    default_message = "A required field is missing."


class Conflict(AppointmentValidationError):
    default_message = "Appointment already exists for the selected caregiver and time."


class AppointmentNotFound(SchedulingError):
    default_message = "Appointment not found."


class InvalidStatusTransition(SchedulingError):
    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot change status from {current} to {requested}.")
