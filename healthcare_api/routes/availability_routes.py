import logging
from datetime import datetime

from fastapi import APIRouter, Body, Depends, HTTPException, status
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from healthcare_api.database import get_db
from healthcare_api.models.availability import Availability
from healthcare_api.repositories.availability_repository import AvailabilityRepository
from healthcare_api.routes.common import database_unavailable, to_naive_utc

router = APIRouter(tags=['availability'])

logger = logging.getLogger(__name__)

INVALID_AVAILABILITY_DETAIL = 'Invalid availability data.'
MISSING_CAREGIVER_DETAIL = 'CaregiverId is required.'
AVAILABILITY_NOT_FOUND_DETAIL = 'Availability not found.'


class AvailableSlot(BaseModel):
    date: datetime

    @field_validator('date')
    @classmethod
    def normalize_date(cls, value: datetime) -> datetime:
        return to_naive_utc(value)


class CreateAvailabilityRequest(BaseModel):
    caregiver_id: int = 0
    available_slots: list[AvailableSlot] = []


class UpdateAvailabilityRequest(BaseModel):
    available_slots: list[AvailableSlot]


class AvailabilityResponse(BaseModel):
    id: int
    caregiver_id: int
    available_slots: list[AvailableSlot]


def serialize_slots(slots: list[AvailableSlot]) -> list[dict]:
    return [{'date': slot.date.isoformat()} for slot in slots]


def to_availability_response(availability: Availability) -> AvailabilityResponse:
    return AvailabilityResponse(
        id=availability.id,
        caregiver_id=availability.caregiver_id,
        available_slots=[
            AvailableSlot(date=slot['date'])
            for slot in availability.available_slots or []
        ],
    )


@router.post('', response_model=AvailabilityResponse, status_code=status.HTTP_201_CREATED)
def add_availability(
    data: CreateAvailabilityRequest | None = Body(default=None),
    db: Session = Depends(get_db),
):
    if data is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_AVAILABILITY_DETAIL)

    if data.caregiver_id <= 0:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=MISSING_CAREGIVER_DETAIL)

    try:
        availability = AvailabilityRepository(db).add(
            Availability(
                caregiver_id=data.caregiver_id,
                available_slots=serialize_slots(data.available_slots),
            )
        )
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Failed to add availability for caregiver %s', data.caregiver_id)
        raise database_unavailable() from exc

    return to_availability_response(availability)


@router.get('', response_model=list[AvailabilityResponse])
def get_all_availabilities(db: Session = Depends(get_db)):
    try:
        availabilities = AvailabilityRepository(db).get_all()
    except SQLAlchemyError as exc:
        logger.exception('Failed to list availabilities')
        raise database_unavailable() from exc

    return [to_availability_response(availability) for availability in availabilities]


@router.get('/caregiver/{caregiver_id}', response_model=list[AvailabilityResponse])
def get_availabilities_by_caregiver_id(caregiver_id: int, db: Session = Depends(get_db)):
    try:
        availabilities = AvailabilityRepository(db).get_by_caregiver_id(caregiver_id)
    except SQLAlchemyError as exc:
        logger.exception('Failed to list availabilities for caregiver %s', caregiver_id)
        raise database_unavailable() from exc

    return [to_availability_response(availability) for availability in availabilities]


@router.get('/{availability_id}', response_model=AvailabilityResponse)
def get_availability_by_id(availability_id: int, db: Session = Depends(get_db)):
    try:
        availability = AvailabilityRepository(db).get_by_id(availability_id)
    except SQLAlchemyError as exc:
        logger.exception('Failed to load availability %s', availability_id)
        raise database_unavailable() from exc

    if availability is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=AVAILABILITY_NOT_FOUND_DETAIL)
    return to_availability_response(availability)


@router.put('/{availability_id}', response_model=AvailabilityResponse)
def update_availability(
    availability_id: int,
    data: UpdateAvailabilityRequest | None = Body(default=None),
    db: Session = Depends(get_db),
):
    if data is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_AVAILABILITY_DETAIL)

    repository = AvailabilityRepository(db)

    try:
        availability = repository.get_by_id(availability_id)
        if availability is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=AVAILABILITY_NOT_FOUND_DETAIL)

        availability = repository.replace_slots(availability, serialize_slots(data.available_slots))
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Failed to update availability %s', availability_id)
        raise database_unavailable() from exc

    return to_availability_response(availability)


@router.delete('/{availability_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_availability(availability_id: int, db: Session = Depends(get_db)):
    repository = AvailabilityRepository(db)

    try:
        availability = repository.get_by_id(availability_id)
        if availability is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=AVAILABILITY_NOT_FOUND_DETAIL)

        repository.delete(availability)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Failed to delete availability %s', availability_id)
        raise database_unavailable() from exc
