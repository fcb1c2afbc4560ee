import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from healthcare_api.auth.dependencies import require_admin
from healthcare_api.database import get_db
from healthcare_api.models.user import User
from healthcare_api.repositories.user_repository import UserRepository
from healthcare_api.routes.auth_routes import UserResponse
from healthcare_api.routes.common import database_unavailable

router = APIRouter(tags=['users'])

logger = logging.getLogger(__name__)

USER_NOT_FOUND_DETAIL = 'User not found.'


@router.get('', response_model=list[UserResponse])
def list_users(db: Session = Depends(get_db), _admin: User = Depends(require_admin)):
    try:
        return UserRepository(db).get_all()
    except SQLAlchemyError as exc:
        logger.exception('Failed to list users')
        raise database_unavailable() from exc


@router.get('/{user_id}', response_model=UserResponse)
def get_user(user_id: int, db: Session = Depends(get_db), _admin: User = Depends(require_admin)):
    try:
        user = UserRepository(db).get_by_id(user_id)
    except SQLAlchemyError as exc:
        logger.exception('Failed to load user %s', user_id)
        raise database_unavailable() from exc

    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=USER_NOT_FOUND_DETAIL)
    return user


@router.delete('/{user_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    if admin.id == user_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Admins cannot delete their own account.')

    repository = UserRepository(db)

    try:
        user = repository.get_by_id(user_id)
        if user is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=USER_NOT_FOUND_DETAIL)

        repository.delete(user)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Failed to delete user %s', user_id)
        raise database_unavailable() from exc

    logger.info('User %s deleted by %s', user_id, admin.username)
