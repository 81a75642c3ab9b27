from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from codegallery.auth.dependencies import get_current_user
from codegallery.core.results import unwrap
from codegallery.database import get_db
from codegallery.models.user import User
from codegallery.routes.common import ensure_database_ready, success
from codegallery.services import interaction_service

router = APIRouter(tags=['comments'], dependencies=[Depends(ensure_database_ready)])


@router.delete('/{comment_id}')
def delete_comment(
    comment_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    unwrap(interaction_service.delete_comment(db, current_user, {'commentId': comment_id}))
    return success()
