from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from codegallery.auth.dependencies import get_current_user, get_optional_user
from codegallery.core.results import unwrap
from codegallery.database import get_db
from codegallery.models.user import User
from codegallery.routes.common import ensure_database_ready, present, success
from codegallery.schemas.project import (
    CommentData,
    CreatedProjectResponse,
    CreateProjectRequest,
    FeaturedProjects,
    ProjectData,
    ProjectFilesBody,
)
from codegallery.schemas.user import CommentBody
from codegallery.services import interaction_service, project_service

router = APIRouter(tags=['projects'], dependencies=[Depends(ensure_database_ready)])


@router.get('', response_model=list[ProjectData])
def list_projects(
    order: str | None = None,
    sort_by: str | None = Query(default=None, alias='sortBy'),
    username: str | None = None,
    search_text: str | None = Query(default=None, alias='searchText'),
    type: str | None = None,
    limit: int | None = None,
    offset: int | None = None,
    viewer: User | None = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    data = present(
        order=order,
        sortBy=sort_by,
        username=username,
        searchText=search_text,
        type=type,
        limit=limit,
        offset=offset,
    )
    return unwrap(project_service.list_projects(db, viewer, data))


@router.post('', response_model=CreatedProjectResponse, status_code=status.HTTP_201_CREATED)
def create_project(
    data: CreateProjectRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return unwrap(project_service.create_project(db, current_user, data))


@router.get('/featured', response_model=FeaturedProjects)
def featured_projects(db: Session = Depends(get_db)):
    return unwrap(project_service.get_cached_featured_projects(db))


@router.get('/{public_id}', response_model=ProjectData, response_model_exclude_none=True)
def get_project(
    public_id: str,
    include_files: bool = Query(default=True, alias='includeFiles'),
    include_comments: bool = Query(default=True, alias='includeComments'),
    viewer: User | None = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    data = {'publicId': public_id, 'includeFiles': include_files, 'includeComments': include_comments}
    return unwrap(project_service.get_project(db, viewer, data))


@router.put('/{public_id}')
def update_project(
    public_id: str,
    body: ProjectFilesBody,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    data = {**body.model_dump(), 'public_id': public_id}
    unwrap(project_service.update_project_files(db, current_user, data))
    return success()


@router.delete('/{public_id}')
def delete_project(
    public_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    unwrap(project_service.delete_project(db, current_user, {'publicId': public_id}))
    return success()


@router.post('/{public_id}/views')
def increment_views(
    public_id: str,
    viewer: User | None = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    unwrap(interaction_service.increment_project_views(db, viewer, {'publicId': public_id}))
    return success()


@router.get('/{public_id}/like-status')
def like_status(
    public_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    liked = unwrap(interaction_service.check_project_like(db, current_user, {'publicId': public_id}))
    return {'liked': liked}


@router.post('/{public_id}/like')
def like_project(
    public_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    unwrap(interaction_service.like_project(db, current_user, {'publicId': public_id}))
    return success()


@router.delete('/{public_id}/like')
def unlike_project(
    public_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    unwrap(interaction_service.unlike_project(db, current_user, {'publicId': public_id}))
    return success()


@router.post('/{public_id}/comments', response_model=CommentData, status_code=status.HTTP_201_CREATED)
def create_comment(
    public_id: str,
    body: CommentBody,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    data = {'publicId': public_id, 'newComment': body.new_comment}
    return unwrap(interaction_service.create_comment(db, current_user, data))
