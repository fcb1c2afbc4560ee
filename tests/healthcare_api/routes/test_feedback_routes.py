from datetime import datetime

import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from healthcare_api.models.appointment import Appointment
from healthcare_api.routes.feedback_routes import (
    CreateFeedbackRequest,
    create_feedback,
    delete_feedback,
    get_feedback,
    list_feedback,
    list_feedback_for_appointment,
)


def test_create_feedback_request_strips_comment() -> None:
    request = CreateFeedbackRequest(appointment_id=1, patient_id=2, comment='  Very helpful.  ')

    assert request.comment == 'Very helpful.'


@pytest.mark.parametrize('comment', ['   ', 'x' * 1001])
def test_create_feedback_request_rejects_invalid_comment(comment: str) -> None:
    with pytest.raises(ValidationError):
        CreateFeedbackRequest(appointment_id=1, patient_id=2, comment=comment)


def test_create_feedback_saves_comment(db_session, booked_appointment) -> None:
    feedback = create_feedback(
        data=CreateFeedbackRequest(appointment_id=booked_appointment.id, patient_id=2, comment='Great visit.'),
        db=db_session,
    )

    assert feedback.id is not None
    assert feedback.comment == 'Great visit.'
    assert [item.id for item in list_feedback_for_appointment(appointment_id=booked_appointment.id, db=db_session)] == [
        feedback.id
    ]


def test_create_feedback_rejects_missing_body(db_session) -> None:
    with pytest.raises(HTTPException) as exception_info:
        create_feedback(data=None, db=db_session)

    assert exception_info.value.status_code == 400
    assert exception_info.value.detail == 'Invalid feedback data.'


def test_create_feedback_requires_existing_appointment(db_session) -> None:
    with pytest.raises(HTTPException) as exception_info:
        create_feedback(
            data=CreateFeedbackRequest(appointment_id=404, patient_id=2, comment='Hello'),
            db=db_session,
        )

    assert exception_info.value.status_code == 404
    assert exception_info.value.detail == 'Appointment not found.'


def test_create_feedback_rejects_other_patients(db_session, booked_appointment) -> None:
    with pytest.raises(HTTPException) as exception_info:
        create_feedback(
            data=CreateFeedbackRequest(appointment_id=booked_appointment.id, patient_id=99, comment='Hello'),
            db=db_session,
        )

    assert exception_info.value.status_code == 403
    assert list_feedback(db=db_session) == []


def test_delete_feedback_removes_record(db_session, booked_appointment) -> None:
    feedback = create_feedback(
        data=CreateFeedbackRequest(appointment_id=booked_appointment.id, patient_id=2, comment='Thanks'),
        db=db_session,
    )

    delete_feedback(feedback_id=feedback.id, db=db_session)

    with pytest.raises(HTTPException) as exception_info:
        get_feedback(feedback_id=feedback.id, db=db_session)

    assert exception_info.value.status_code == 404
    assert exception_info.value.detail == 'Feedback not found.'


def _leave_feedback(db, appointment_id: int, comment: str = 'Kind and on time.'):
    return create_feedback(
        data=CreateFeedbackRequest(appointment_id=appointment_id, patient_id=2, comment=comment),
        db=db,
    )


def test_list_feedback_returns_every_entry(db_session, booked_appointment) -> None:
    first = _leave_feedback(db_session, booked_appointment.id)
    second = _leave_feedback(db_session, booked_appointment.id, comment='Would book again.')

    assert [item.id for item in list_feedback(db=db_session)] == [first.id, second.id]


def test_get_feedback_returns_saved_entry(db_session, booked_appointment) -> None:
    feedback = _leave_feedback(db_session, booked_appointment.id)

    loaded = get_feedback(feedback_id=feedback.id, db=db_session)

    assert loaded.comment == 'Kind and on time.'
    assert loaded.appointment_id == booked_appointment.id


def test_get_feedback_returns_not_found_when_missing(db_session) -> None:
    with pytest.raises(HTTPException) as exception_info:
        get_feedback(feedback_id=123, db=db_session)

    assert exception_info.value.status_code == 404
    assert exception_info.value.detail == 'Feedback not found.'


def test_list_feedback_for_appointment_filters_by_appointment(db_session, booked_appointment) -> None:
    other_appointment = Appointment(
        patient_id=2,
        caregiver_id=1,
        date_time=datetime(2026, 1, 6, 9, 0),
        status='Completed',
    )
    db_session.add(other_appointment)
    db_session.commit()
    db_session.refresh(other_appointment)

    _leave_feedback(db_session, booked_appointment.id)
    other = _leave_feedback(db_session, other_appointment.id, comment='Second visit.')

    feedback = list_feedback_for_appointment(appointment_id=other_appointment.id, db=db_session)

    assert [item.id for item in feedback] == [other.id]
    assert list_feedback_for_appointment(appointment_id=999, db=db_session) == []


def test_delete_feedback_returns_not_found_when_missing(db_session) -> None:
    with pytest.raises(HTTPException) as exception_info:
        delete_feedback(feedback_id=55, db=db_session)

    assert exception_info.value.status_code == 404
    assert exception_info.value.detail == 'Feedback not found.'
