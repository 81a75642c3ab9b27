"""Admin dashboard statistics and management tables."""

import logging

from sqlalchemy import asc, desc, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from codegallery.auth.authz import check_permission
from codegallery.core import config
from codegallery.core.results import (
    ActionResult,
    forbidden,
    ok,
    server_error,
    unauthenticated,
    validate_input,
)
from codegallery.models.comment import Comment
from codegallery.models.project import Project
from codegallery.models.user import User, UserRole
from codegallery.schemas.admin import (
    AdminProjectSortBy,
    AdminProjectsPage,
    AdminTableProjectInfo,
    AdminTableUserInfo,
    AdminUsersPage,
    GetAdminProjectsRequest,
    GetUsersRequest,
    UserSortBy,
)
from codegallery.schemas.common import OrderBy

logger = logging.getLogger(__name__)

USER_SORT_COLUMNS = {
    UserSortBy.USERNAME: User.username,
    UserSortBy.EMAIL: User.email,
    UserSortBy.JOINED: User.created_at,
    UserSortBy.ROLE: User.role,
}

PROJECT_SORT_COLUMNS = {
    AdminProjectSortBy.TITLE: Project.title,
    AdminProjectSortBy.USERNAME: User.username,
    AdminProjectSortBy.VISIBILITY: Project.visibility,
    AdminProjectSortBy.TYPE: Project.type,
    AdminProjectSortBy.UPDATED: Project.updated_at,
    AdminProjectSortBy.CREATED: Project.created_at,
    AdminProjectSortBy.VIEWS: Project.views,
    AdminProjectSortBy.COMMENTS: Project.comments_count,
    AdminProjectSortBy.LIKES: Project.likes_count,
}


def _authorize(user: User | None, action: str, resource: str) -> ActionResult | None:
    if user is None:
        return unauthenticated()
    if not check_permission(user, action, resource):
        return forbidden("You do not have permission to access the admin dashboard")
    return None


def _total(db: Session, user: User | None, expression, label: str) -> ActionResult[int]:
    denied = _authorize(user, "view_statistics", "admin_dashboard")
    if denied is not None:
        return denied

    try:
        return ok(int(db.query(expression).scalar() or 0))
    except SQLAlchemyError:
        logger.exception("Failed to count %s", label)
        return server_error(f"Server Error. Failed to get total number of {label}")


def get_total_number_of_users(db: Session, user: User | None) -> ActionResult[int]:
    return _total(db, user, func.count(User.id), "users")


def get_total_number_of_projects(db: Session, user: User | None) -> ActionResult[int]:
    return _total(db, user, func.count(Project.id), "projects")


def get_total_number_of_comments(db: Session, user: User | None) -> ActionResult[int]:
    return _total(db, user, func.count(Comment.id), "comments")


def get_total_number_of_views(db: Session, user: User | None) -> ActionResult[int]:
    return _total(db, user, func.coalesce(func.sum(Project.views), 0), "views")


def get_users(db: Session, user: User | None, data: GetUsersRequest | dict | None = None) -> ActionResult[AdminUsersPage]:
    validation = validate_input(GetUsersRequest, data)
    if not validation.success:
        return validation
    data = validation.response

    denied = _authorize(user, "manage", "user")
    if denied is not None:
        return denied

    try:
        query = db.query(User)
        if data.search_text:
            query = query.filter(User.username.icontains(data.search_text, autoescape=True))
        if data.role:
            query = query.filter(User.role == data.role)

        total_count = query.count()

        sort_function = asc if data.order == OrderBy.ASCENDING else desc
        users = (
            query.order_by(sort_function(USER_SORT_COLUMNS[data.sort_by]), sort_function(User.id))
            .offset(data.offset)
            .limit(data.limit)
            .all()
        )
    except SQLAlchemyError:
        logger.exception("Failed to list users for admin")
        return server_error("Server Error. Failed to get users")

    return ok(
        AdminUsersPage(
            users=[AdminTableUserInfo.model_validate(row) for row in users],
            total_count=total_count,
        )
    )


def get_projects(
    db: Session,
    user: User | None,
    data: GetAdminProjectsRequest | dict | None = None,
) -> ActionResult[AdminProjectsPage]:
    """Every project regardless of visibility, with the owner's username and the unpaged total."""
    validation = validate_input(GetAdminProjectsRequest, data)
    if not validation.success:
        return validation
    data = validation.response

    denied = _authorize(user, "manage", "post")
    if denied is not None:
        return denied

    try:
        query = db.query(Project, User.username).outerjoin(User, User.id == Project.user_id)
        if data.username:
            query = query.filter(User.username == data.username)
        if data.search_text:
            query = query.filter(Project.title.icontains(data.search_text, autoescape=True))
        if data.visibility:
            query = query.filter(Project.visibility == data.visibility)
        if data.type:
            query = query.filter(Project.type == data.type)

        total_count = query.count()

        sort_function = asc if data.order == OrderBy.ASCENDING else desc
        rows = (
            query.order_by(sort_function(PROJECT_SORT_COLUMNS[data.sort_by]), sort_function(Project.id))
            .offset(data.offset)
            .limit(data.limit)
            .all()
        )
    except SQLAlchemyError:
        logger.exception("Failed to list projects for admin")
        return server_error("Server Error. Failed to get projects")

    projects = [
        AdminTableProjectInfo(
            id=project.id,
            public_id=project.public_id,
            title=project.title,
            type=project.type,
            views=project.views,
            likes_count=project.likes_count,
            comments_count=project.comments_count,
            created_at=project.created_at,
            updated_at=project.updated_at,
            visibility=project.visibility,
            user_id=project.user_id,
            username=username,
        )
        for project, username in rows
    ]
    return ok(AdminProjectsPage(projects=projects, total_count=total_count))


def make_user_admin(db: Session, user: User | None) -> ActionResult[None]:
    """Promote the calling user. Only available when ALLOW_SELF_PROMOTION is on."""
    if user is None:
        return unauthenticated()
    if not config.ALLOW_SELF_PROMOTION:
        return forbidden("Self promotion to admin is disabled")

    try:
        user.role = UserRole.ADMIN
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to make user %s admin", user.id)
        return server_error("Server Error. Failed to make user admin")

    logger.warning("User %s promoted themselves to admin", user.username)
    return ok(None)
