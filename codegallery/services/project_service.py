"""Project creation, retrieval, editing and browsing."""

import logging
import time
from threading import Lock

from sqlalchemy import asc, desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from codegallery.auth.authz import check_permission
from codegallery.core import config
from codegallery.core.results import (
    ActionResult,
    forbidden,
    not_found,
    ok,
    server_error,
    unauthenticated,
    validate_input,
)
from codegallery.models.comment import Comment
from codegallery.models.file import File, FileType
from codegallery.models.project import Project, ProjectVisibility
from codegallery.models.user import User
from codegallery.schemas.common import OrderBy, PublicIdInput
from codegallery.schemas.project import (
    CreatedProjectResponse,
    CreateProjectRequest,
    FeaturedProjects,
    GetProjectDataRequest,
    GetProjectsRequest,
    ProjectData,
    ProjectSortBy,
    UpdateProjectFilesRequest,
)
from codegallery.services.serializers import project_data
from codegallery.services.visibility import find_visible_project, visibility_condition

logger = logging.getLogger(__name__)

PROJECT_SORT_COLUMNS = {
    ProjectSortBy.TITLE: Project.title,
    ProjectSortBy.TYPE: Project.type,
    ProjectSortBy.VIEWS: Project.views,
    ProjectSortBy.LIKES: Project.likes_count,
    ProjectSortBy.DATE: Project.created_at,
}

_featured_cache_lock = Lock()
_featured_cache_value: FeaturedProjects | None = None
_featured_cache_expires_at = 0.0
# Bumped on every invalidation; a result computed under an older generation is not stored.
_featured_cache_generation = 0


def invalidate_featured_cache() -> None:
    global _featured_cache_value, _featured_cache_expires_at, _featured_cache_generation

    with _featured_cache_lock:
        _featured_cache_value = None
        _featured_cache_expires_at = 0.0
        _featured_cache_generation += 1


def create_project(db: Session, user: User | None, data: CreateProjectRequest | dict) -> ActionResult[CreatedProjectResponse]:
    """Create a project owned by ``user`` together with its empty html, css and js files."""
    validation = validate_input(CreateProjectRequest, data)
    if not validation.success:
        return validation
    data = validation.response

    if user is None:
        return unauthenticated()
    if not check_permission(user, "create", "post"):
        return forbidden("You do not have permission to create a project")

    try:
        project = Project(
            user_id=user.id,
            title=data.title,
            type=data.type,
            visibility=data.visibility,
        )
        project.files = [File(type=file_type, content="") for file_type in (FileType.HTML, FileType.CSS, FileType.JS)]
        db.add(project)
        db.commit()
        db.refresh(project)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to create project for user %s", user.id)
        return server_error("Server Error. Failed to create the project")

    invalidate_featured_cache()
    logger.info("User %s created project %s", user.username, project.public_id)
    return ok(CreatedProjectResponse(username=user.username, public_id=project.public_id))


def get_project(db: Session, viewer: User | None, data: GetProjectDataRequest | dict) -> ActionResult[ProjectData]:
    """Fetch one project by public id, honouring visibility.

    Files and comments are loaded only when requested. ``isOwner`` is set on
    the project and on each comment relative to ``viewer``.
    """
    validation = validate_input(GetProjectDataRequest, data)
    if not validation.success:
        return validation
    data = validation.response

    options = [selectinload(Project.user)]
    if data.include_files:
        options.append(selectinload(Project.files))
    if data.include_comments:
        options.append(selectinload(Project.comments).selectinload(Comment.user))

    try:
        project = (
            db.query(Project)
            .options(*options)
            .filter(Project.public_id == data.public_id, visibility_condition(viewer))
            .first()
        )
        if project is None:
            return not_found("Project not found")

        viewer_id = viewer.id if viewer is not None else None
        return ok(
            project_data(
                project,
                viewer_id=viewer_id,
                include_files=data.include_files,
                include_comments=data.include_comments,
            )
        )
    except SQLAlchemyError:
        logger.exception("Failed to retrieve project %s", data.public_id)
        return server_error("Failed to retrieve project")


def update_project_files(db: Session, user: User | None, data: UpdateProjectFilesRequest | dict) -> ActionResult[None]:
    validation = validate_input(UpdateProjectFilesRequest, data)
    if not validation.success:
        return validation
    data = validation.response

    if user is None:
        return unauthenticated()

    try:
        project = find_visible_project(db, user, data.public_id)
        if project is None:
            return not_found("Project not found")

        if not check_permission(user, "update", "post", resource_owner_id=project.user_id):
            return forbidden("You do not have permission to update this project")

        project.title = data.new_title
        project.type = data.new_type
        project.visibility = data.visibility

        new_contents = {
            FileType.HTML: data.html,
            FileType.CSS: data.css,
            FileType.JS: data.javascript,
        }
        existing_files = {file.type: file for file in project.files}
        for file_type, content in new_contents.items():
            if file_type in existing_files:
                existing_files[file_type].content = content
            else:
                project.files.append(File(type=file_type, content=content))

        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to update project %s", data.public_id)
        return server_error("Failed to update the project")

    invalidate_featured_cache()
    return ok(None)


def list_projects(db: Session, viewer: User | None, data: GetProjectsRequest | dict | None = None) -> ActionResult[list[ProjectData]]:
    """Browse projects visible to ``viewer`` with search, type/author filters, sorting and paging."""
    validation = validate_input(GetProjectsRequest, data)
    if not validation.success:
        return validation
    data = validation.response

    try:
        query = db.query(Project).options(selectinload(Project.user), selectinload(Project.files))

        if data.username:
            query = query.join(User, Project.user_id == User.id).filter(User.username == data.username)
        if data.search_text:
            query = query.filter(Project.title.icontains(data.search_text, autoescape=True))
        if data.type:
            query = query.filter(Project.type == data.type)
        query = query.filter(visibility_condition(viewer))

        sort_function = asc if data.order == OrderBy.ASCENDING else desc
        sort_column = PROJECT_SORT_COLUMNS[data.sort_by]
        projects = (
            query.order_by(sort_function(sort_column), sort_function(Project.id))
            .limit(data.limit)
            .offset(data.offset)
            .all()
        )

        viewer_id = viewer.id if viewer is not None else None
        return ok([project_data(project, viewer_id=viewer_id) for project in projects])
    except SQLAlchemyError:
        logger.exception("Failed to retrieve projects")
        return server_error("Failed to retrieve projects")


def delete_project(db: Session, user: User | None, data: PublicIdInput | dict) -> ActionResult[None]:
    """Delete a project; its files, comments and likes go with it."""
    validation = validate_input(PublicIdInput, data)
    if not validation.success:
        return validation
    data = validation.response

    if user is None:
        return unauthenticated()

    try:
        project = find_visible_project(db, user, data.public_id)
        if project is None:
            return not_found("Project not found")

        if not check_permission(user, "delete", "post", resource_owner_id=project.user_id):
            return forbidden("You do not have permission to delete this project")

        db.delete(project)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to delete project %s", data.public_id)
        return server_error("Server Error. Failed to delete this project.")

    invalidate_featured_cache()
    logger.info("User %s deleted project %s", user.username, data.public_id)
    return ok(None)


def _top_public_projects(db: Session, column) -> list[ProjectData]:
    projects = (
        db.query(Project)
        .options(selectinload(Project.user), selectinload(Project.files))
        .filter(Project.visibility == ProjectVisibility.PUBLIC)
        .order_by(desc(column), desc(Project.created_at))
        .limit(config.FEATURED_PROJECTS_LIMIT)
        .all()
    )
    return [project_data(project) for project in projects]


def get_featured_projects(db: Session) -> ActionResult[FeaturedProjects]:
    try:
        return ok(
            FeaturedProjects(
                most_viewed=_top_public_projects(db, Project.views),
                most_liked=_top_public_projects(db, Project.likes_count),
            )
        )
    except SQLAlchemyError:
        logger.exception("Failed to get featured projects")
        return server_error("Server Error. Failed to get featured projects")


def get_cached_featured_projects(db: Session) -> ActionResult[FeaturedProjects]:
    """``get_featured_projects`` behind a cache that expires every FEATURED_CACHE_SECONDS."""
    global _featured_cache_value, _featured_cache_expires_at

    now = time.monotonic()
    with _featured_cache_lock:
        if _featured_cache_value is not None and now < _featured_cache_expires_at:
            return ok(_featured_cache_value)
        generation = _featured_cache_generation

    result = get_featured_projects(db)
    if result.success:
        with _featured_cache_lock:
            if generation == _featured_cache_generation:
                _featured_cache_value = result.response
                _featured_cache_expires_at = now + config.FEATURED_CACHE_SECONDS
    return result
