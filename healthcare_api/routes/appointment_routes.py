import logging
from datetime import datetime

from fastapi import APIRouter, Body, Depends, HTTPException, status
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from healthcare_api.database import get_db
from healthcare_api.models.appointment import Appointment, AppointmentStatus
from healthcare_api.repositories.appointment_repository import AppointmentRepository
from healthcare_api.routes.common import database_unavailable, to_naive_utc
from healthcare_api.scheduling.errors import (
    AppointmentNotFound,
    Conflict,
    InvalidInput,
    InvalidStatusTransition,
    MissingField,
)
from healthcare_api.services.appointment_service import AppointmentService, change_status

router = APIRouter(tags=['appointments'])

logger = logging.getLogger(__name__)


class CreateAppointmentRequest(BaseModel):
    patient_id: int = 0
    caregiver_id: int = 0
    date_time: datetime | None = None

    @field_validator('date_time')
    @classmethod
    def normalize_date_time(cls, value: datetime | None) -> datetime | None:
        if value is None:
            return None
        return to_naive_utc(value)


class UpdateAppointmentStatusRequest(BaseModel):
    status: AppointmentStatus


class AppointmentResponse(BaseModel):
    id: int
    patient_id: int
    caregiver_id: int
    date_time: datetime
    status: AppointmentStatus

    class Config:
        from_attributes = True


def build_appointment(data: CreateAppointmentRequest | None) -> Appointment | None:
    if data is None:
        return None

    return Appointment(
        patient_id=data.patient_id,
        caregiver_id=data.caregiver_id,
        date_time=data.date_time,
        status=AppointmentStatus.SCHEDULED.value,
    )


@router.post('', response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def create_appointment(
    data: CreateAppointmentRequest | None = Body(default=None),
    db: Session = Depends(get_db),
):
    service = AppointmentService(AppointmentRepository(db))

    try:
        return service.create_appointment(build_appointment(data))
    except (InvalidInput, MissingField) as exc:
        logger.info('Rejected appointment request: %s', exc.message)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message) from exc
    except Conflict as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=exc.message) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Failed to create appointment')
        raise database_unavailable() from exc


@router.get('', response_model=list[AppointmentResponse])
def list_appointments(db: Session = Depends(get_db)):
    try:
        return AppointmentRepository(db).get_all()
    except SQLAlchemyError as exc:
        logger.exception('Failed to list appointments')
        raise database_unavailable() from exc


@router.get('/caregiver/{caregiver_id}', response_model=list[AppointmentResponse])
def list_caregiver_appointments(caregiver_id: int, db: Session = Depends(get_db)):
    try:
        return AppointmentRepository(db).get_by_caregiver_id(caregiver_id)
    except SQLAlchemyError as exc:
        logger.exception('Failed to list appointments for caregiver %s', caregiver_id)
        raise database_unavailable() from exc


@router.get('/patient/{patient_id}', response_model=list[AppointmentResponse])
def list_patient_appointments(patient_id: int, db: Session = Depends(get_db)):
    try:
        return AppointmentRepository(db).get_by_patient_id(patient_id)
    except SQLAlchemyError as exc:
        logger.exception('Failed to list appointments for patient %s', patient_id)
        raise database_unavailable() from exc


@router.get('/{appointment_id}', response_model=AppointmentResponse)
def get_appointment(appointment_id: int, db: Session = Depends(get_db)):
    try:
        appointment = AppointmentRepository(db).get_by_id(appointment_id)
    except SQLAlchemyError as exc:
        logger.exception('Failed to load appointment %s', appointment_id)
        raise database_unavailable() from exc

    if appointment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=AppointmentNotFound.default_message)
    return appointment


@router.patch('/{appointment_id}/status', response_model=AppointmentResponse)
def update_appointment_status(
    appointment_id: int,
    data: UpdateAppointmentStatusRequest,
    db: Session = Depends(get_db),
):
    try:
        return change_status(AppointmentRepository(db), appointment_id, data.status)
    except AppointmentNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message) from exc
    except InvalidStatusTransition as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=exc.message) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Failed to update appointment %s', appointment_id)
        raise database_unavailable() from exc


@router.delete('/{appointment_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_appointment(appointment_id: int, db: Session = Depends(get_db)):
    repository = AppointmentRepository(db)

    try:
        appointment = repository.get_by_id(appointment_id)
        if appointment is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=AppointmentNotFound.default_message,
            )

        repository.delete(appointment)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Failed to delete appointment %s', appointment_id)
        raise database_unavailable() from exc
