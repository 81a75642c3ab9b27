import os

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault('DATABASE_URL', 'sqlite://')

from codegallery.database import Base  # noqa: E402
from codegallery.models import comment, file, interactions, project, user  # noqa: E402,F401
from codegallery.models.project import Project, ProjectVisibility  # noqa: E402
from codegallery.models.user import User, UserRole  # noqa: E402
from codegallery.services import project_service  # noqa: E402


@pytest.fixture
def db():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(autouse=True)
def clear_featured_cache():
    project_service.invalidate_featured_cache()
    yield
    project_service.invalidate_featured_cache()


@pytest.fixture
def make_user(db):
    def _make_user(username: str, role: UserRole = UserRole.USER, password_hash: str = 'not-a-real-hash') -> User:
        new_user = User(
            username=username,
            email=f'{username}@example.com',
            password_hash=password_hash,
            role=role,
        )
        db.add(new_user)
        db.commit()
        db.refresh(new_user)
        return new_user

    return _make_user


@pytest.fixture
def make_project(db):
    def _make_project(
        owner: User,
        title: str = 'Glowing Button',
        visibility: ProjectVisibility = ProjectVisibility.PUBLIC,
        **columns,
    ) -> Project:
        new_project = Project(user_id=owner.id, title=title, visibility=visibility, **columns)
        db.add(new_project)
        db.commit()
        db.refresh(new_project)
        return new_project

    return _make_project


@pytest.fixture
def client(db):
    from fastapi.testclient import TestClient

    from codegallery.database import get_db
    from codegallery.main import app
    from codegallery.routes.common import ensure_database_ready

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[ensure_database_ready] = lambda: None
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    from codegallery.services.auth_service import issue_token

    def _auth_headers(account: User) -> dict:
        return {'Authorization': f'Bearer {issue_token(account).access_token}'}

    return _auth_headers
