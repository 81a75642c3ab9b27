import enum
import re

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

PUBLIC_ID_PATTERN = re.compile(r'^[A-Za-z0-9_-]{12}$')


class CamelModel(BaseModel):
    """Base for request/response bodies exchanged with the browser client in camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class OrderBy(str, enum.Enum):
    ASCENDING = 'asc'
    DESCENDING = 'desc'


def normalize_public_id(value: str) -> str:
    if len(value) != 12:
        raise ValueError('Invalid project identifier length')
    if not PUBLIC_ID_PATTERN.match(value):
        raise ValueError('Invalid project identifier.')
    return value


class PublicIdInput(CamelModel):
    public_id: str

    @field_validator('public_id')
    @classmethod
    def validate_public_id(cls, value: str) -> str:
        return normalize_public_id(value)


class UsernameInput(CamelModel):
    username: str

    @field_validator('username')
    @classmethod
    def validate_username(cls, value: str) -> str:
        if not value:
            raise ValueError('Username is required.')
        return value


def blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip()
    return normalized or None
