from pydantic import EmailStr, Field, field_validator

from codegallery.models.user import UserRole
from codegallery.schemas.common import CamelModel

MIN_USERNAME_LENGTH = 5
MAX_USERNAME_LENGTH = 20
MIN_PASSWORD_LENGTH = 8


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)

    @field_validator('email', mode='before')
    @classmethod
    def normalize_email(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value


class RegisterRequest(LoginRequest):
    username: str

    @field_validator('username')
    @classmethod
    def validate_username(cls, value: str) -> str:
        normalized = value.strip()
        if not MIN_USERNAME_LENGTH <= len(normalized) <= MAX_USERNAME_LENGTH:
            raise ValueError(
                f'Username must be between {MIN_USERNAME_LENGTH} and {MAX_USERNAME_LENGTH} characters'
            )
        return normalized


class TokenResponse(CamelModel):
    access_token: str
    token_type: str = 'bearer'
    username: str
    role: UserRole


class SessionUserResponse(CamelModel):
    id: str
    username: str
    email: str
    role: UserRole
    avatar_url: str | None = None
