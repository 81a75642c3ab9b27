from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

from codegallery.database import ensure_project_schema


def ensure_database_ready() -> None:
    try:
        ensure_project_schema()
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail='Database unavailable. Verify DATABASE_URL.',
        ) from exc


def success() -> dict:
    return {'success': True}


def present(**filters) -> dict:
    return {key: value for key, value in filters.items() if value is not None}
