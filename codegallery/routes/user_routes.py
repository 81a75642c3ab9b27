from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from codegallery.auth.dependencies import get_current_user
from codegallery.core.results import unwrap
from codegallery.database import get_db
from codegallery.models.user import User
from codegallery.routes.common import ensure_database_ready, success
from codegallery.schemas.project import AuthorData
from codegallery.schemas.user import UserProfile
from codegallery.services import interaction_service, user_service

router = APIRouter(tags=['users'], dependencies=[Depends(ensure_database_ready)])


@router.get('/{username}', response_model=UserProfile)
def get_user(username: str, db: Session = Depends(get_db)):
    return unwrap(user_service.get_user_data(db, {'username': username}))


@router.get('/{username}/followers', response_model=list[AuthorData])
def get_followers(
    username: str,
    offset: int = 0,
    limit: int = 10,
    db: Session = Depends(get_db),
):
    data = {'username': username, 'offset': offset, 'limit': limit}
    return unwrap(user_service.get_followers(db, data))


@router.get('/{username}/follow-status')
def follow_status(
    username: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    following = unwrap(interaction_service.check_user_follow(db, current_user, {'username': username}))
    return {'following': following}


@router.post('/{username}/follow')
def follow_user(
    username: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    unwrap(interaction_service.follow_user(db, current_user, {'username': username}))
    return success()


@router.delete('/{username}/follow')
def unfollow_user(
    username: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    unwrap(interaction_service.unfollow_user(db, current_user, {'username': username}))
    return success()
