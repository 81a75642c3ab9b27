from codegallery.auth import jwt_handler
from codegallery.models.user import User, UserRole
from codegallery.services import auth_service

VALID_REGISTRATION = {
    'email': ' Alice@Example.com ',
    'username': 'alice_dev',
    'password': 'correct-horse',
}


def test_register_creates_user_and_returns_token(db) -> None:
    result = auth_service.register(db, VALID_REGISTRATION)

    assert result.success is True
    stored = db.query(User).one()
    assert stored.email == 'alice@example.com'
    assert stored.role == UserRole.USER
    assert stored.password_hash != 'correct-horse'

    claims = jwt_handler.decode_access_token(result.response.access_token)
    assert claims['sub'] == stored.id
    assert claims['name'] == 'alice_dev'
    assert claims['role'] == 'user'


def test_register_rejects_duplicate_email_and_username(db) -> None:
    auth_service.register(db, VALID_REGISTRATION)

    same_email = auth_service.register(db, {**VALID_REGISTRATION, 'username': 'other_name'})
    same_username = auth_service.register(db, {**VALID_REGISTRATION, 'email': 'other@example.com'})

    assert (same_email.code, same_email.error) == (409, 'Email already exists')
    assert (same_username.code, same_username.error) == (409, 'Username already exists')


def test_register_validates_lengths(db) -> None:
    short_name = auth_service.register(db, {**VALID_REGISTRATION, 'username': 'abc'})
    short_password = auth_service.register(db, {**VALID_REGISTRATION, 'password': 'short'})
    bad_email = auth_service.register(db, {**VALID_REGISTRATION, 'email': 'not-an-email'})

    assert short_name.code == 400
    assert short_password.code == 400
    assert bad_email.code == 400
    assert db.query(User).count() == 0


def test_login_with_correct_password(db) -> None:
    auth_service.register(db, VALID_REGISTRATION)

    result = auth_service.login(db, {'email': 'alice@example.com', 'password': 'correct-horse'})

    assert result.success is True
    assert result.response.username == 'alice_dev'


def test_login_failures_share_one_message(db) -> None:
    auth_service.register(db, VALID_REGISTRATION)

    wrong_password = auth_service.login(db, {'email': 'alice@example.com', 'password': 'wrong-horse'})
    unknown_email = auth_service.login(db, {'email': 'nobody@example.com', 'password': 'correct-horse'})

    assert wrong_password.code == unknown_email.code == 401
    assert wrong_password.error == unknown_email.error == auth_service.LOGIN_FAILED
