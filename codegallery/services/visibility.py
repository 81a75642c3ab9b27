"""Who may see which project.

A viewer sees a project when it is public, or when it is private and the
viewer owns it or is an admin. Anonymous viewers only see public projects.
"""

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from codegallery.models.project import Project, ProjectVisibility
from codegallery.models.user import User, UserRole


def visibility_condition(viewer: User | None) -> ColumnElement[bool]:
    if viewer is None or not viewer.id:
        return Project.visibility == ProjectVisibility.PUBLIC

    if viewer.role == UserRole.ADMIN:
        private_access = Project.visibility == ProjectVisibility.PRIVATE
    else:
        private_access = and_(
            Project.visibility == ProjectVisibility.PRIVATE,
            Project.user_id == viewer.id,
        )

    return or_(Project.visibility == ProjectVisibility.PUBLIC, private_access)


def find_visible_project(db: Session, viewer: User | None, public_id: str) -> Project | None:
    return (
        db.query(Project)
        .filter(Project.public_id == public_id, visibility_condition(viewer))
        .first()
    )
