"""Comment model definitions."""

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import relationship

from codegallery.database import Base
from codegallery.models.user import generate_uuid, utcnow


class Comment(Base):
    """Represents a comment left on a project."""
    __tablename__ = "comments"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    project_id = Column(String(36), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    project = relationship("Project", back_populates="comments")
    user = relationship("User", back_populates="comments")

    __table_args__ = (
        Index("comment_project_id_idx", "project_id"),
        Index("comment_user_id_idx", "user_id"),
    )
