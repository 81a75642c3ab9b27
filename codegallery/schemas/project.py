import enum
from datetime import datetime

from pydantic import Field, field_validator

from codegallery.models.file import FileType
from codegallery.models.project import PostType, ProjectVisibility
from codegallery.schemas.common import CamelModel, OrderBy, PublicIdInput, blank_to_none, normalize_public_id

MAX_TITLE_LENGTH = 100
DEFAULT_PAGE_SIZE = 9
MAX_PAGE_SIZE = 50


class ProjectSortBy(str, enum.Enum):
    DATE = 'createdAt'
    TITLE = 'title'
    TYPE = 'type'
    VIEWS = 'views'
    LIKES = 'likesCount'


def _validate_title(value: str) -> str:
    normalized = value.strip()
    if not normalized:
        raise ValueError('Title cannot be empty.')
    if len(normalized) > MAX_TITLE_LENGTH:
        raise ValueError(f'Title cannot exceed {MAX_TITLE_LENGTH} characters.')
    return normalized


class CreateProjectRequest(CamelModel):
    title: str
    type: PostType = PostType.OTHERS
    visibility: ProjectVisibility = ProjectVisibility.PUBLIC

    @field_validator('title')
    @classmethod
    def validate_title(cls, value: str) -> str:
        return _validate_title(value)


class ProjectFilesBody(CamelModel):
    new_title: str
    new_type: PostType
    html: str
    css: str
    javascript: str
    visibility: ProjectVisibility

    @field_validator('new_title')
    @classmethod
    def validate_new_title(cls, value: str) -> str:
        return _validate_title(value)


class UpdateProjectFilesRequest(ProjectFilesBody):
    public_id: str

    @field_validator('public_id')
    @classmethod
    def validate_public_id(cls, value: str) -> str:
        return normalize_public_id(value)


class GetProjectDataRequest(PublicIdInput):
    include_files: bool = True
    include_comments: bool = True


class GetProjectsRequest(CamelModel):
    order: OrderBy = OrderBy.DESCENDING
    sort_by: ProjectSortBy = ProjectSortBy.DATE
    username: str | None = None
    search_text: str | None = None
    type: PostType | None = None
    limit: int = Field(default=DEFAULT_PAGE_SIZE, gt=0, le=MAX_PAGE_SIZE)
    offset: int = Field(default=0, ge=0)

    @field_validator('username', 'search_text')
    @classmethod
    def strip_optional_text(cls, value: str | None) -> str | None:
        return blank_to_none(value)


class FileData(CamelModel):
    type: FileType
    content: str


class AuthorData(CamelModel):
    username: str
    avatar_url: str | None = None


class CommentData(CamelModel):
    id: str
    content: str
    created_at: datetime
    user: AuthorData
    is_owner: bool = False


class ProjectData(CamelModel):
    public_id: str
    title: str
    type: PostType
    views: int
    likes_count: int
    comments_count: int
    created_at: datetime
    visibility: ProjectVisibility
    user: AuthorData
    files: list[FileData] = Field(default_factory=list)
    comments: list[CommentData] | None = None
    is_owner: bool = False


class FeaturedProjects(CamelModel):
    most_viewed: list[ProjectData]
    most_liked: list[ProjectData]


class CreatedProjectResponse(CamelModel):
    username: str
    public_id: str
