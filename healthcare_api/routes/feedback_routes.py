import logging

from fastapi import APIRouter, Body, Depends, HTTPException, status
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from healthcare_api.database import get_db
from healthcare_api.models.feedback import Feedback
from healthcare_api.repositories.appointment_repository import AppointmentRepository
from healthcare_api.repositories.feedback_repository import FeedbackRepository
from healthcare_api.routes.common import database_unavailable
from healthcare_api.scheduling.errors import AppointmentNotFound

router = APIRouter(tags=['feedback'])

logger = logging.getLogger(__name__)

MAX_COMMENT_LENGTH = 1000
INVALID_FEEDBACK_DETAIL = 'Invalid feedback data.'
FEEDBACK_NOT_FOUND_DETAIL = 'Feedback not found.'


class CreateFeedbackRequest(BaseModel):
    appointment_id: int
    patient_id: int
    comment: str

    @field_validator('comment')
    @classmethod
    def validate_comment(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Comment is required.')
        if len(normalized) > MAX_COMMENT_LENGTH:
            raise ValueError(f'Comment must be {MAX_COMMENT_LENGTH} characters or fewer.')
        return normalized


class FeedbackResponse(BaseModel):
    id: int
    appointment_id: int
    patient_id: int
    comment: str

    class Config:
        from_attributes = True


@router.post('', response_model=FeedbackResponse, status_code=status.HTTP_201_CREATED)
def create_feedback(
    data: CreateFeedbackRequest | None = Body(default=None),
    db: Session = Depends(get_db),
):
    if data is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_FEEDBACK_DETAIL)

    try:
        appointment = AppointmentRepository(db).get_by_id(data.appointment_id)
        if appointment is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=AppointmentNotFound.default_message,
            )

        if appointment.patient_id != data.patient_id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail='Only the patient of this appointment can leave feedback.',
            )

        return FeedbackRepository(db).add(
            Feedback(
                appointment_id=data.appointment_id,
                patient_id=data.patient_id,
                comment=data.comment,
            )
        )
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Failed to save feedback for appointment %s', data.appointment_id)
        raise database_unavailable() from exc


@router.get('', response_model=list[FeedbackResponse])
def list_feedback(db: Session = Depends(get_db)):
    try:
        return FeedbackRepository(db).get_all()
    except SQLAlchemyError as exc:
        logger.exception('Failed to list feedback')
        raise database_unavailable() from exc


@router.get('/appointment/{appointment_id}', response_model=list[FeedbackResponse])
def list_feedback_for_appointment(appointment_id: int, db: Session = Depends(get_db)):
    try:
        return FeedbackRepository(db).get_by_appointment_id(appointment_id)
    except SQLAlchemyError as exc:
        logger.exception('Failed to list feedback for appointment %s', appointment_id)
        raise database_unavailable() from exc


@router.get('/{feedback_id}', response_model=FeedbackResponse)
def get_feedback(feedback_id: int, db: Session = Depends(get_db)):
    try:
        feedback = FeedbackRepository(db).get_by_id(feedback_id)
    except SQLAlchemyError as exc:
        logger.exception('Failed to load feedback %s', feedback_id)
        raise database_unavailable() from exc

    if feedback is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=FEEDBACK_NOT_FOUND_DETAIL)
    return feedback


@router.delete('/{feedback_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_feedback(feedback_id: int, db: Session = Depends(get_db)):
    repository = FeedbackRepository(db)

    try:
        feedback = repository.get_by_id(feedback_id)
        if feedback is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=FEEDBACK_NOT_FOUND_DETAIL)

        repository.delete(feedback)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Failed to delete feedback %s', feedback_id)
        raise database_unavailable() from exc
