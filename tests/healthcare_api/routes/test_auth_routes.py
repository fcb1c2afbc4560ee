import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from pydantic import ValidationError
from sqlalchemy.exc import OperationalError

from healthcare_api.auth import jwt_handler
from healthcare_api.auth.dependencies import get_current_user, require_admin
from healthcare_api.routes.auth_routes import LoginRequest, RegisterRequest, login, me, register
from healthcare_api.routes.user_routes import delete_user, get_user, list_users


def _register(db, username: str = 'nurse', password: str = 'correct-horse'):
    return register(data=RegisterRequest(username=username, password=password), db=db)


def _credentials(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme='Bearer', credentials=token)


def test_register_request_normalizes_username() -> None:
    request = RegisterRequest(username='  Nurse.Joy ', password='long-enough')

    assert request.username == 'nurse.joy'


def test_register_request_rejects_short_password() -> None:
    with pytest.raises(ValidationError):
        RegisterRequest(username='nurse', password='short')


def test_register_hashes_password_and_assigns_user_role(db_session) -> None:
    user = _register(db_session)

    assert user.id is not None
    assert user.roles == ['User']
    assert user.password_hash != 'correct-horse'


def test_register_grants_admin_to_configured_usernames(db_session, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr('healthcare_api.core.config.ADMIN_USERNAMES', ['Boss'])

    user = _register(db_session, username='boss')

    assert user.roles == ['User', 'Admin']


def test_register_rejects_taken_username(db_session) -> None:
    _register(db_session)

    with pytest.raises(HTTPException) as exception_info:
        _register(db_session, username='NURSE')

    assert exception_info.value.status_code == 409
    assert exception_info.value.detail == 'Username is already taken.'


def test_register_rejects_missing_body(db_session) -> None:
    with pytest.raises(HTTPException) as exception_info:
        register(data=None, db=db_session)

    assert exception_info.value.status_code == 400


def test_login_returns_token_for_valid_credentials(db_session) -> None:
    _register(db_session)

    response = login(data=LoginRequest(username='Nurse', password='correct-horse'), db=db_session)
    payload = jwt_handler.decode_access_token(response.access_token)

    assert response.token_type == 'bearer'
    assert payload['sub'] == 'nurse'
    assert payload['roles'] == ['User']


@pytest.mark.parametrize(('username', 'password'), [('nurse', 'wrong-password'), ('ghost', 'correct-horse')])
def test_login_rejects_invalid_credentials(db_session, username: str, password: str) -> None:
    _register(db_session)

    with pytest.raises(HTTPException) as exception_info:
        login(data=LoginRequest(username=username, password=password), db=db_session)

    assert exception_info.value.status_code == 401
    assert exception_info.value.detail == 'Invalid username or password.'


def test_get_current_user_resolves_token_subject(db_session) -> None:
    user = _register(db_session)
    token = jwt_handler.create_access_token(subject='nurse')

    current_user = get_current_user(credentials=_credentials(token), db=db_session)

    assert current_user.id == user.id
    assert me(current_user=current_user) is current_user


def test_get_current_user_rejects_invalid_token(db_session) -> None:
    with pytest.raises(HTTPException) as exception_info:
        get_current_user(credentials=_credentials('not-a-jwt'), db=db_session)

    assert exception_info.value.status_code == 401
    assert exception_info.value.detail == 'Invalid token'


def test_get_current_user_rejects_unknown_subject(db_session) -> None:
    token = jwt_handler.create_access_token(subject='ghost')

    with pytest.raises(HTTPException) as exception_info:
        get_current_user(credentials=_credentials(token), db=db_session)

    assert exception_info.value.status_code == 401
    assert exception_info.value.detail == 'User not found'


def test_get_current_user_maps_database_errors_to_503(db_session, monkeypatch: pytest.MonkeyPatch) -> None:
    token = jwt_handler.create_access_token(subject='nurse')

    def fail(*_args, **_kwargs):
        raise OperationalError('SELECT 1', {}, Exception('connection refused'))

    monkeypatch.setattr(
        'healthcare_api.repositories.user_repository.UserRepository.get_by_username',
        fail,
    )

    with pytest.raises(HTTPException) as exception_info:
        get_current_user(credentials=_credentials(token), db=db_session)

    assert exception_info.value.status_code == 503


def test_require_admin_rejects_plain_users(db_session) -> None:
    user = _register(db_session)

    with pytest.raises(HTTPException) as exception_info:
        require_admin(current_user=user)

    assert exception_info.value.status_code == 403
    assert exception_info.value.detail == 'Admin role required.'


@pytest.fixture
def admin(db_session, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr('healthcare_api.core.config.ADMIN_USERNAMES', ['admin'])
    return require_admin(current_user=_register(db_session, username='admin'))


def test_admin_can_list_get_and_delete_users(db_session, admin) -> None:
    patient = _register(db_session, username='patient')

    assert [user.username for user in list_users(db=db_session, _admin=admin)] == ['admin', 'patient']
    assert get_user(user_id=patient.id, db=db_session, _admin=admin).username == 'patient'

    delete_user(user_id=patient.id, db=db_session, admin=admin)

    with pytest.raises(HTTPException) as exception_info:
        get_user(user_id=patient.id, db=db_session, _admin=admin)

    assert exception_info.value.status_code == 404
    assert exception_info.value.detail == 'User not found.'


def test_admin_cannot_delete_own_account(db_session, admin) -> None:
    with pytest.raises(HTTPException) as exception_info:
        delete_user(user_id=admin.id, db=db_session, admin=admin)

    assert exception_info.value.status_code == 400
