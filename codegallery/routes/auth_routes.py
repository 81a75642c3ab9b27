from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from codegallery.auth.dependencies import get_current_user
from codegallery.core.results import unwrap
from codegallery.database import get_db
from codegallery.models.user import User
from codegallery.routes.common import ensure_database_ready
from codegallery.schemas.auth import LoginRequest, RegisterRequest, SessionUserResponse, TokenResponse
from codegallery.services import auth_service
from codegallery.services.serializers import avatar_or_default

router = APIRouter(tags=['auth'], dependencies=[Depends(ensure_database_ready)])


@router.post('/register', response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    return unwrap(auth_service.register(db, data))


@router.post('/login', response_model=TokenResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    return unwrap(auth_service.login(db, data))


@router.get('/me', response_model=SessionUserResponse)
def me(current_user: User = Depends(get_current_user)):
    return SessionUserResponse(
        id=current_user.id,
        username=current_user.username,
        email=current_user.email,
        role=current_user.role,
        avatar_url=avatar_or_default(current_user.avatar_url),
    )
