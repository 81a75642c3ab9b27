import uuid

from pydantic import Field, field_validator

from codegallery.schemas.common import CamelModel, PublicIdInput, UsernameInput

MAX_COMMENT_LENGTH = 250
DEFAULT_FOLLOWERS_PAGE_SIZE = 10
MAX_FOLLOWERS_PAGE_SIZE = 50


class GetFollowersRequest(UsernameInput):
    offset: int = Field(default=0, ge=0)
    limit: int = Field(default=DEFAULT_FOLLOWERS_PAGE_SIZE, gt=0, le=MAX_FOLLOWERS_PAGE_SIZE)


class CreateCommentRequest(PublicIdInput):
    new_comment: str

    @field_validator('new_comment')
    @classmethod
    def validate_new_comment(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Comment cannot be empty.')
        if len(normalized) > MAX_COMMENT_LENGTH:
            raise ValueError(f'Comment cannot exceed {MAX_COMMENT_LENGTH} characters.')
        return normalized


class CommentBody(CamelModel):
    new_comment: str


class DeleteCommentRequest(CamelModel):
    comment_id: str

    @field_validator('comment_id')
    @classmethod
    def validate_comment_id(cls, value: str) -> str:
        try:
            return str(uuid.UUID(value))
        except ValueError as exc:
            raise ValueError('Invalid comment identifier.') from exc


class UserProfile(CamelModel):
    username: str
    avatar_url: str | None = None
    total_likes: int | None = None
    total_follows: int | None = None
    total_views: int | None = None
