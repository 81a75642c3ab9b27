"""ORM rows to response models."""

from codegallery.core import config
from codegallery.models.comment import Comment
from codegallery.models.file import FileType
from codegallery.models.project import Project
from codegallery.models.user import User
from codegallery.schemas.project import AuthorData, CommentData, FileData, ProjectData

FILE_ORDER = {FileType.HTML: 0, FileType.CSS: 1, FileType.JS: 2}


def avatar_or_default(avatar_url: str | None) -> str:
    return avatar_url or config.DEFAULT_AVATAR_URL


def author_data(user: User) -> AuthorData:
    return AuthorData(username=user.username, avatar_url=avatar_or_default(user.avatar_url))


def comment_data(comment: Comment, viewer_id: str | None) -> CommentData:
    return CommentData(
        id=comment.id,
        content=comment.content,
        created_at=comment.created_at,
        user=author_data(comment.user),
        is_owner=bool(viewer_id) and comment.user_id == viewer_id,
    )


def project_data(
    project: Project,
    viewer_id: str | None = None,
    include_files: bool = True,
    include_comments: bool = False,
) -> ProjectData:
    files = []
    if include_files:
        files = [
            FileData(type=file.type, content=file.content)
            for file in sorted(project.files, key=lambda file: FILE_ORDER.get(file.type, len(FILE_ORDER)))
        ]

    comments = None
    if include_comments:
        comments = [comment_data(comment, viewer_id) for comment in project.comments]

    return ProjectData(
        public_id=project.public_id,
        title=project.title,
        type=project.type,
        views=project.views,
        likes_count=project.likes_count,
        comments_count=project.comments_count,
        created_at=project.created_at,
        visibility=project.visibility,
        user=author_data(project.user),
        files=files,
        comments=comments,
        is_owner=bool(viewer_id) and project.user_id == viewer_id,
    )
