from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from codegallery.auth.dependencies import get_current_user
from codegallery.core.results import unwrap
from codegallery.database import get_db
from codegallery.models.user import User
from codegallery.routes.common import ensure_database_ready, present, success
from codegallery.schemas.admin import AdminProjectsPage, AdminUsersPage
from codegallery.services import admin_service

router = APIRouter(tags=['admin'], dependencies=[Depends(ensure_database_ready)])


@router.post('/make-me-admin')
def make_me_admin(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    unwrap(admin_service.make_user_admin(db, current_user))
    return success()


@router.get('/stats/total-users')
def total_users(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {'total': unwrap(admin_service.get_total_number_of_users(db, current_user))}


@router.get('/stats/total-projects')
def total_projects(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {'total': unwrap(admin_service.get_total_number_of_projects(db, current_user))}


@router.get('/stats/total-comments')
def total_comments(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {'total': unwrap(admin_service.get_total_number_of_comments(db, current_user))}


@router.get('/stats/total-views')
def total_views(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {'total': unwrap(admin_service.get_total_number_of_views(db, current_user))}


@router.get('/users', response_model=AdminUsersPage)
def list_users(
    order: str | None = None,
    sort_by: str | None = Query(default=None, alias='sortBy'),
    search_text: str | None = Query(default=None, alias='searchText'),
    role: str | None = None,
    limit: int | None = None,
    offset: int | None = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    data = present(
        order=order,
        sortBy=sort_by,
        searchText=search_text,
        role=role,
        limit=limit,
        offset=offset,
    )
    return unwrap(admin_service.get_users(db, current_user, data))


@router.get('/projects', response_model=AdminProjectsPage)
def list_projects(
    order: str | None = None,
    sort_by: str | None = Query(default=None, alias='sortBy'),
    username: str | None = None,
    search_text: str | None = Query(default=None, alias='searchText'),
    type: str | None = None,
    visibility: str | None = None,
    limit: int | None = None,
    offset: int | None = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    data = present(
        order=order,
        sortBy=sort_by,
        username=username,
        searchText=search_text,
        type=type,
        visibility=visibility,
        limit=limit,
        offset=offset,
    )
    return unwrap(admin_service.get_projects(db, current_user, data))
