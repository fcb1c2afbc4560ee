import logging

from fastapi import APIRouter, Body, Depends, HTTPException, status
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from healthcare_api.auth import jwt_handler
from healthcare_api.auth.dependencies import get_current_user
from healthcare_api.auth.passwords import hash_password, verify_password
from healthcare_api.core import config
from healthcare_api.database import get_db
from healthcare_api.models.user import ADMIN_ROLE, USER_ROLE, User
from healthcare_api.repositories.user_repository import UserRepository
from healthcare_api.routes.common import database_unavailable

router = APIRouter(tags=['auth'])

logger = logging.getLogger(__name__)

MAX_USERNAME_LENGTH = 50
MIN_PASSWORD_LENGTH = 8
USERNAME_TAKEN_DETAIL = 'Username is already taken.'
INVALID_CREDENTIALS_DETAIL = 'Invalid username or password.'


class RegisterRequest(BaseModel):
    username: str
    password: str

    @field_validator('username')
    @classmethod
    def validate_username(cls, value: str) -> str:
        normalized = value.strip().lower()
        if not normalized:
            raise ValueError('Username is required.')
        if len(normalized) > MAX_USERNAME_LENGTH:
            raise ValueError(f'Username must be {MAX_USERNAME_LENGTH} characters or fewer.')
        return normalized

    @field_validator('password')
    @classmethod
    def validate_password(cls, value: str) -> str:
        if len(value) < MIN_PASSWORD_LENGTH:
            raise ValueError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters.')
        return value


class LoginRequest(BaseModel):
    username: str
    password: str

    @field_validator('username')
    @classmethod
    def normalize_username(cls, value: str) -> str:
        return value.strip().lower()


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = 'bearer'


class UserResponse(BaseModel):
    id: int
    username: str
    roles: list[str]

    class Config:
        from_attributes = True


def roles_for(username: str) -> list[str]:
    admins = {name.strip().lower() for name in config.ADMIN_USERNAMES}
    if username in admins:
        return [USER_ROLE, ADMIN_ROLE]
    return [USER_ROLE]


@router.post('/register', response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest | None = Body(default=None), db: Session = Depends(get_db)):
    if data is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Invalid user data.')

    repository = UserRepository(db)

    try:
        if repository.get_by_username(data.username) is not None:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=USERNAME_TAKEN_DETAIL)

        user = repository.add(
            User(
                username=data.username,
                password_hash=hash_password(data.password),
                roles=roles_for(data.username),
            )
        )
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=USERNAME_TAKEN_DETAIL) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Failed to register user %s', data.username)
        raise database_unavailable() from exc

    logger.info('Registered user %s', user.username)
    return user


@router.post('/login', response_model=TokenResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    try:
        user = UserRepository(db).get_by_username(data.username)
    except SQLAlchemyError as exc:
        logger.exception('Failed to look up user %s', data.username)
        raise database_unavailable() from exc

    if user is None or not verify_password(data.password, user.password_hash):
        logger.warning('Failed login for %s', data.username)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=INVALID_CREDENTIALS_DETAIL)

    token = jwt_handler.create_access_token(subject=user.username, roles=list(user.roles or []))
    return TokenResponse(access_token=token)


@router.get('/me', response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return current_user
