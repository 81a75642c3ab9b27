"""Likes, comments, follows and view counts.

Each write pairs the row insert/delete with a single ``UPDATE`` of the
denormalized counter on the parent project, committed together.
"""

import logging

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from codegallery.auth.authz import check_permission
from codegallery.core.results import (
    ActionResult,
    fail,
    forbidden,
    not_found,
    ok,
    server_error,
    unauthenticated,
    validate_input,
)
from codegallery.models.comment import Comment
from codegallery.models.interactions import ProjectLike, UserFollow
from codegallery.models.project import Project
from codegallery.models.user import User
from codegallery.schemas.common import PublicIdInput, UsernameInput
from codegallery.schemas.project import CommentData
from codegallery.schemas.user import CreateCommentRequest, DeleteCommentRequest
from codegallery.services.serializers import comment_data
from codegallery.services.visibility import find_visible_project

logger = logging.getLogger(__name__)

ALREADY_LIKED = "Already liked this project"
NOT_LIKED = "You haven't liked this project"
ALREADY_FOLLOWING = "Already following this user"
NOT_FOLLOWING = "Not following this user"
CANNOT_FOLLOW_SELF = "Cannot follow yourself"


def _bump_counter(db: Session, project_id: str, column_name: str, delta: int) -> None:
    column = getattr(Project, column_name)
    db.execute(
        update(Project)
        .where(Project.id == project_id)
        .values({column_name: column + delta})
        .execution_options(synchronize_session=False)
    )


def create_comment(db: Session, user: User | None, data: CreateCommentRequest | dict) -> ActionResult[CommentData]:
    validation = validate_input(CreateCommentRequest, data)
    if not validation.success:
        return validation
    data = validation.response

    if user is None:
        return unauthenticated()
    if not check_permission(user, "create", "comment"):
        return forbidden("You do not have permission to comment")

    try:
        project = find_visible_project(db, user, data.public_id)
        if project is None:
            return not_found("Project not found")

        comment = Comment(project_id=project.id, user_id=user.id, content=data.new_comment)
        db.add(comment)
        db.flush()
        _bump_counter(db, project.id, "comments_count", 1)
        db.commit()
        db.refresh(comment)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to add comment on project %s", data.public_id)
        return server_error("Server Error. Failed to add comment")

    return ok(comment_data(comment, user.id))


def delete_comment(db: Session, user: User | None, data: DeleteCommentRequest | dict) -> ActionResult[None]:
    """Delete a comment; the author or an admin may do this."""
    validation = validate_input(DeleteCommentRequest, data)
    if not validation.success:
        return validation
    data = validation.response

    if user is None:
        return unauthenticated()

    try:
        comment = db.query(Comment).filter(Comment.id == data.comment_id).first()
        if comment is None:
            return not_found("Comment not found")

        if not check_permission(user, "delete", "comment", resource_owner_id=comment.user_id):
            return forbidden("You do not have permission to delete this comment")

        project_id = comment.project_id
        db.delete(comment)
        db.flush()
        _bump_counter(db, project_id, "comments_count", -1)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to delete comment %s", data.comment_id)
        return server_error("Server Error. Failed to delete comment")

    return ok(None)


def check_project_like(db: Session, user: User | None, data: PublicIdInput | dict) -> ActionResult[bool]:
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

        liked = (
            db.query(ProjectLike)
            .filter(ProjectLike.project_id == project.id, ProjectLike.user_id == user.id)
            .first()
        )
        return ok(liked is not None)
    except SQLAlchemyError:
        logger.exception("Failed to check like status for project %s", data.public_id)
        return server_error("Server Error. Failed to check like status")


def like_project(db: Session, user: User | None, data: PublicIdInput | dict) -> ActionResult[None]:
    validation = validate_input(PublicIdInput, data)
    if not validation.success:
        return validation
    data = validation.response

    if user is None:
        return unauthenticated()
    if not check_permission(user, "like", "post"):
        return forbidden("You do not have permission to like projects")

    try:
        project = find_visible_project(db, user, data.public_id)
        if project is None:
            return not_found("Project not found")

        existing = (
            db.query(ProjectLike)
            .filter(ProjectLike.project_id == project.id, ProjectLike.user_id == user.id)
            .first()
        )
        if existing is not None:
            return fail(ALREADY_LIKED, 409)

        db.add(ProjectLike(project_id=project.id, user_id=user.id))
        db.flush()
        _bump_counter(db, project.id, "likes_count", 1)
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info("Duplicate like by user %s on project %s", user.id, data.public_id)
        return fail(ALREADY_LIKED, 409)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to like project %s", data.public_id)
        return server_error("Server Error. Failed to like project")

    return ok(None)


def unlike_project(db: Session, user: User | None, data: PublicIdInput | dict) -> ActionResult[None]:
    validation = validate_input(PublicIdInput, data)
    if not validation.success:
        return validation
    data = validation.response

    if user is None:
        return unauthenticated()
    if not check_permission(user, "like", "post"):
        return forbidden("You do not have permission to unlike projects")

    try:
        project = find_visible_project(db, user, data.public_id)
        if project is None:
            return not_found("Project not found")

        deleted = (
            db.query(ProjectLike)
            .filter(ProjectLike.project_id == project.id, ProjectLike.user_id == user.id)
            .delete(synchronize_session=False)
        )
        if not deleted:
            db.rollback()
            return fail(NOT_LIKED, 409)

        _bump_counter(db, project.id, "likes_count", -1)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to unlike project %s", data.public_id)
        return server_error("Server Error. Failed to unlike project")

    return ok(None)


def _find_user(db: Session, username: str) -> User | None:
    return db.query(User).filter(User.username == username).first()


def _follow_row(db: Session, follower_id: str, following_id: str) -> UserFollow | None:
    return (
        db.query(UserFollow)
        .filter(UserFollow.follower_id == follower_id, UserFollow.following_id == following_id)
        .first()
    )


def check_user_follow(db: Session, user: User | None, data: UsernameInput | dict) -> ActionResult[bool]:
    validation = validate_input(UsernameInput, data)
    if not validation.success:
        return validation
    data = validation.response

    if user is None:
        return unauthenticated()

    try:
        target = _find_user(db, data.username)
        if target is None:
            return not_found("User not found")
        if target.id == user.id:
            return fail(CANNOT_FOLLOW_SELF)

        return ok(_follow_row(db, user.id, target.id) is not None)
    except SQLAlchemyError:
        logger.exception("Failed to check follow status for %s", data.username)
        return server_error("Server Error. Failed to check follow status")


def follow_user(db: Session, user: User | None, data: UsernameInput | dict) -> ActionResult[None]:
    validation = validate_input(UsernameInput, data)
    if not validation.success:
        return validation
    data = validation.response

    if user is None:
        return unauthenticated()
    if not check_permission(user, "follow", "user"):
        return forbidden("You do not have permission to follow users")

    try:
        target = _find_user(db, data.username)
        if target is None:
            return not_found("User not found")
        if target.id == user.id:
            return fail(CANNOT_FOLLOW_SELF)
        if _follow_row(db, user.id, target.id) is not None:
            return fail(ALREADY_FOLLOWING, 409)

        db.add(UserFollow(follower_id=user.id, following_id=target.id))
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info("Duplicate follow by user %s of %s", user.id, data.username)
        return fail(ALREADY_FOLLOWING, 409)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to follow user %s", data.username)
        return server_error("Server Error. Failed to follow user")

    return ok(None)


def unfollow_user(db: Session, user: User | None, data: UsernameInput | dict) -> ActionResult[None]:
    validation = validate_input(UsernameInput, data)
    if not validation.success:
        return validation
    data = validation.response

    if user is None:
        return unauthenticated()
    if not check_permission(user, "follow", "user"):
        return forbidden("You do not have permission to unfollow users")

    try:
        target = _find_user(db, data.username)
        if target is None:
            return not_found("User not found")

        deleted = (
            db.query(UserFollow)
            .filter(UserFollow.follower_id == user.id, UserFollow.following_id == target.id)
            .delete(synchronize_session=False)
        )
        if not deleted:
            db.rollback()
            return fail(NOT_FOLLOWING, 409)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to unfollow user %s", data.username)
        return server_error("Server Error. Failed to unfollow user")

    return ok(None)


def increment_project_views(db: Session, viewer: User | None, data: PublicIdInput | dict) -> ActionResult[None]:
    """Count one view. Anonymous viewers count too, but only for projects they can see."""
    validation = validate_input(PublicIdInput, data)
    if not validation.success:
        return validation
    data = validation.response

    try:
        project = find_visible_project(db, viewer, data.public_id)
        if project is None:
            return not_found("Project not found")

        _bump_counter(db, project.id, "views", 1)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to increment views for project %s", data.public_id)
        return server_error("Server Error. Failed to increment views")

    return ok(None)
