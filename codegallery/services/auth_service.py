import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from codegallery.auth import jwt_handler
from codegallery.auth.passwords import hash_password, verify_password
from codegallery.core.results import ActionResult, fail, ok, server_error, validate_input
from codegallery.models.user import User, UserRole
from codegallery.schemas.auth import LoginRequest, RegisterRequest, TokenResponse

logger = logging.getLogger(__name__)

LOGIN_FAILED = "Failed to Login, please try again"


def issue_token(user: User) -> TokenResponse:
    role = UserRole(user.role)
    access_token = jwt_handler.create_access_token(
        subject=user.id,
        extra_claims={"name": user.username, "role": role.value},
    )
    return TokenResponse(access_token=access_token, username=user.username, role=role)


def register(db: Session, data: RegisterRequest | dict) -> ActionResult[TokenResponse]:
    """Create a regular user and log them in."""
    validation = validate_input(RegisterRequest, data)
    if not validation.success:
        return validation
    data = validation.response

    try:
        if db.query(User).filter(User.email == data.email).first() is not None:
            return fail("Email already exists", 409)
        if db.query(User).filter(User.username == data.username).first() is not None:
            return fail("Username already exists", 409)

        user = User(
            email=data.email,
            username=data.username,
            password_hash=hash_password(data.password),
            role=UserRole.USER,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError:
        db.rollback()
        logger.info("Registration raced on %s / %s", data.email, data.username)
        return fail("Email or username already exists", 409)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to register %s", data.username)
        return server_error("Failed to register, please try again")

    logger.info("Registered user %s", user.username)
    return ok(issue_token(user))


def login(db: Session, data: LoginRequest | dict) -> ActionResult[TokenResponse]:
    validation = validate_input(LoginRequest, data)
    if not validation.success:
        return validation
    data = validation.response

    try:
        user = db.query(User).filter(User.email == data.email).first()
    except SQLAlchemyError:
        logger.exception("Failed to look up user for login")
        return server_error(LOGIN_FAILED)

    if user is None or not verify_password(data.password, user.password_hash):
        logger.info("Rejected login for %s", data.email)
        return fail(LOGIN_FAILED, 401)

    return ok(issue_token(user))
