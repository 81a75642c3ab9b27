"""Join tables for likes and follows."""

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, PrimaryKeyConstraint, String
from sqlalchemy.orm import relationship

from codegallery.database import Base
from codegallery.models.user import utcnow


class ProjectLike(Base):
    """One row per (user, project) like; the composite key forbids liking twice."""
    __tablename__ = "project_likes"

    project_id = Column(String(36), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    project = relationship("Project", back_populates="likes")

    __table_args__ = (PrimaryKeyConstraint("user_id", "project_id"),)


class UserFollow(Base):
    """follower_id follows following_id."""
    __tablename__ = "user_follows"

    follower_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    following_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        PrimaryKeyConstraint("follower_id", "following_id"),
        CheckConstraint("follower_id <> following_id", name="check_follower_not_following"),
        Index("user_follows_following_id_idx", "following_id"),
    )
