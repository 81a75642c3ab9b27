"""Project model definitions."""

import enum
import secrets
import string

from sqlalchemy import CheckConstraint, Column, DateTime, Enum, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from codegallery.database import Base
from codegallery.models.user import generate_uuid, utcnow

PUBLIC_ID_LENGTH = 12
PUBLIC_ID_ALPHABET = string.ascii_letters + string.digits + "_-"


def generate_public_id() -> str:
    return "".join(secrets.choice(PUBLIC_ID_ALPHABET) for _ in range(PUBLIC_ID_LENGTH))


def _enum_values(members) -> list[str]:
    return [member.value for member in members]


class PostType(str, enum.Enum):
    BUTTON = "button"
    HEADER = "header"
    FOOTER = "footer"
    SIDEBAR = "sidebar"
    FORM = "form"
    MODAL = "modal"
    ANIMATION = "animation"
    OTHERS = "others"


class ProjectVisibility(str, enum.Enum):
    PUBLIC = "public"
    PRIVATE = "private"


class Project(Base):
    """A user's HTML/CSS/JS snippet plus its denormalized engagement counters."""
    __tablename__ = "projects"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    public_id = Column(String(PUBLIC_ID_LENGTH), unique=True, nullable=False, default=generate_public_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(100), nullable=False, default="My Project")
    type = Column(
        Enum(PostType, native_enum=False, length=16, values_callable=_enum_values),
        nullable=False,
        default=PostType.OTHERS,
    )
    views = Column(Integer, nullable=False, default=0)
    likes_count = Column(Integer, nullable=False, default=0)
    comments_count = Column(Integer, nullable=False, default=0)
    visibility = Column(
        Enum(ProjectVisibility, native_enum=False, length=16, values_callable=_enum_values),
        nullable=False,
        default=ProjectVisibility.PUBLIC,
    )
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="projects")
    files = relationship("File", back_populates="project", cascade="all, delete-orphan", passive_deletes=True)
    comments = relationship(
        "Comment",
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Comment.created_at",
    )
    likes = relationship("ProjectLike", back_populates="project", cascade="all, delete-orphan", passive_deletes=True)

    __table_args__ = (
        Index("project_user_id_idx", "user_id"),
        Index("project_type_idx", "type"),
        CheckConstraint("likes_count >= 0", name="projects_likes_count_non_negative"),
        CheckConstraint("comments_count >= 0", name="projects_comments_count_non_negative"),
        CheckConstraint("views >= 0", name="projects_views_non_negative"),
    )
