import enum
from datetime import datetime

from pydantic import Field, field_validator

from codegallery.models.project import PostType, ProjectVisibility
from codegallery.models.user import UserRole
from codegallery.schemas.common import CamelModel, OrderBy, blank_to_none


class UserSortBy(str, enum.Enum):
    USERNAME = 'username'
    EMAIL = 'email'
    JOINED = 'createdAt'
    ROLE = 'role'


class AdminProjectSortBy(str, enum.Enum):
    TITLE = 'title'
    USERNAME = 'username'
    VISIBILITY = 'visibility'
    TYPE = 'type'
    UPDATED = 'updatedAt'
    CREATED = 'createdAt'
    VIEWS = 'views'
    COMMENTS = 'commentsCount'
    LIKES = 'likesCount'


class GetUsersRequest(CamelModel):
    order: OrderBy = OrderBy.ASCENDING
    sort_by: UserSortBy = UserSortBy.USERNAME
    search_text: str | None = None
    role: UserRole | None = None
    limit: int = Field(default=10, gt=0, le=100)
    offset: int = Field(default=0, ge=0)

    @field_validator('search_text')
    @classmethod
    def strip_search_text(cls, value: str | None) -> str | None:
        return blank_to_none(value)


class GetAdminProjectsRequest(CamelModel):
    order: OrderBy = OrderBy.ASCENDING
    sort_by: AdminProjectSortBy = AdminProjectSortBy.TITLE
    username: str | None = None
    search_text: str | None = None
    type: PostType | None = None
    visibility: ProjectVisibility | None = None
    limit: int = Field(default=10, gt=0, le=50)
    offset: int = Field(default=0, ge=0)

    @field_validator('username', 'search_text')
    @classmethod
    def strip_optional_text(cls, value: str | None) -> str | None:
        return blank_to_none(value)


class AdminTableUserInfo(CamelModel):
    id: str
    username: str
    email: str
    created_at: datetime
    avatar_url: str | None = None
    role: UserRole


class AdminTableProjectInfo(CamelModel):
    id: str
    public_id: str
    title: str
    type: PostType
    views: int
    likes_count: int
    comments_count: int
    created_at: datetime
    updated_at: datetime
    visibility: ProjectVisibility
    user_id: str | None = None
    username: str | None = None


class AdminUsersPage(CamelModel):
    users: list[AdminTableUserInfo]
    total_count: int


class AdminProjectsPage(CamelModel):
    projects: list[AdminTableProjectInfo]
    total_count: int
