import logging

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from codegallery.core.results import ActionResult, not_found, ok, server_error, validate_input
from codegallery.models.interactions import ProjectLike, UserFollow
from codegallery.models.project import Project
from codegallery.models.user import User
from codegallery.schemas.common import UsernameInput
from codegallery.schemas.project import AuthorData
from codegallery.schemas.user import GetFollowersRequest, UserProfile
from codegallery.services.serializers import author_data, avatar_or_default

logger = logging.getLogger(__name__)


def get_user_data(db: Session, data: UsernameInput | dict) -> ActionResult[UserProfile]:
    """Public profile: likes received, follower count and total views across the user's projects."""
    validation = validate_input(UsernameInput, data)
    if not validation.success:
        return validation
    data = validation.response

    try:
        user = db.query(User).filter(User.username == data.username).first()
        if user is None:
            return not_found("Specified user doesn't exist")

        total_likes = (
            db.query(func.count(ProjectLike.user_id))
            .select_from(ProjectLike)
            .join(Project, ProjectLike.project_id == Project.id)
            .filter(Project.user_id == user.id)
            .scalar()
        )
        total_follows = (
            db.query(func.count(UserFollow.follower_id))
            .filter(UserFollow.following_id == user.id)
            .scalar()
        )
        total_views = (
            db.query(func.coalesce(func.sum(Project.views), 0))
            .filter(Project.user_id == user.id)
            .scalar()
        )
    except SQLAlchemyError:
        logger.exception("Failed to get user data for %s", data.username)
        return server_error("Failed to get user data")

    return ok(
        UserProfile(
            username=user.username,
            avatar_url=avatar_or_default(user.avatar_url),
            total_likes=total_likes or 0,
            total_follows=total_follows or 0,
            total_views=int(total_views or 0),
        )
    )


def get_followers(db: Session, data: GetFollowersRequest | dict) -> ActionResult[list[AuthorData]]:
    validation = validate_input(GetFollowersRequest, data)
    if not validation.success:
        return validation
    data = validation.response

    try:
        user = db.query(User).filter(User.username == data.username).first()
        if user is None:
            return not_found("Specified user doesn't exist")

        followers = (
            db.query(User)
            .join(UserFollow, UserFollow.follower_id == User.id)
            .filter(UserFollow.following_id == user.id)
            .order_by(UserFollow.created_at.desc(), User.username)
            .offset(data.offset)
            .limit(data.limit)
            .all()
        )
    except SQLAlchemyError:
        logger.exception("Failed to get followers of %s", data.username)
        return server_error("Failed to get followers")

    return ok([author_data(follower) for follower in followers])
