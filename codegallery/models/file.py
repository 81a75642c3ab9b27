"""File model definitions."""

import enum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import relationship

from codegallery.database import Base
from codegallery.models.user import generate_uuid, utcnow


class FileType(str, enum.Enum):
    HTML = "html"
    JS = "js"
    CSS = "css"


class File(Base):
    """One source file (html, css or js) belonging to a project."""
    __tablename__ = "files"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    project_id = Column(String(36), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    type = Column(
        Enum(FileType, native_enum=False, length=8, values_callable=lambda types: [t.value for t in types]),
        nullable=False,
    )
    content = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    project = relationship("Project", back_populates="files")

    __table_args__ = (Index("file_project_idx", "project_id"),)
