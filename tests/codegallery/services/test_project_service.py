import pytest

from codegallery.core import config
from codegallery.models.file import File, FileType
from codegallery.models.project import PostType, Project, ProjectVisibility
from codegallery.models.user import UserRole
from codegallery.services import project_service


def test_create_project_requires_login(db) -> None:
    result = project_service.create_project(db, None, {'title': 'Nav Bar'})

    assert result.success is False
    assert result.code == 401
    assert db.query(Project).count() == 0


def test_create_project_adds_three_empty_files(db, make_user) -> None:
    owner = make_user('alice_dev')

    result = project_service.create_project(db, owner, {'title': '  Nav Bar  ', 'type': 'header'})

    assert result.success is True
    assert result.response.username == 'alice_dev'
    created = db.query(Project).filter(Project.public_id == result.response.public_id).one()
    assert created.title == 'Nav Bar'
    assert created.type == PostType.HEADER
    assert created.visibility == ProjectVisibility.PUBLIC
    assert sorted(file.type.value for file in created.files) == ['css', 'html', 'js']
    assert all(file.content == '' for file in created.files)


def test_create_project_rejects_blank_title(db, make_user) -> None:
    owner = make_user('alice_dev')

    result = project_service.create_project(db, owner, {'title': '   '})

    assert result.success is False
    assert result.code == 400
    assert 'Title cannot be empty.' in result.error


def test_private_project_hidden_from_anonymous_and_other_users(db, make_user, make_project) -> None:
    owner = make_user('alice_dev')
    stranger = make_user('bob_builder')
    private = make_project(owner, visibility=ProjectVisibility.PRIVATE)

    for viewer in (None, stranger):
        result = project_service.get_project(db, viewer, {'publicId': private.public_id})
        assert result.success is False
        assert result.code == 404

        listed = project_service.list_projects(db, viewer, {})
        assert listed.success is True
        assert listed.response == []


def test_private_project_visible_to_owner_and_admin(db, make_user, make_project) -> None:
    owner = make_user('alice_dev')
    admin = make_user('root_admin', role=UserRole.ADMIN)
    private = make_project(owner, visibility=ProjectVisibility.PRIVATE)

    owner_view = project_service.get_project(db, owner, {'publicId': private.public_id})
    admin_view = project_service.get_project(db, admin, {'publicId': private.public_id})

    assert owner_view.success is True
    assert owner_view.response.is_owner is True
    assert admin_view.success is True
    assert admin_view.response.is_owner is False
    assert [item.public_id for item in project_service.list_projects(db, admin, {}).response] == [private.public_id]


def test_get_project_orders_files_and_defaults_avatar(db, make_user, make_project) -> None:
    owner = make_user('alice_dev')
    created = make_project(owner)
    db.add_all(
        [
            File(project_id=created.id, type=FileType.JS, content='console.log(1)'),
            File(project_id=created.id, type=FileType.HTML, content='<p>hi</p>'),
            File(project_id=created.id, type=FileType.CSS, content='p{}'),
        ]
    )
    db.commit()

    result = project_service.get_project(
        db, None, {'publicId': created.public_id, 'includeComments': False}
    )

    assert result.success is True
    assert [item.type for item in result.response.files] == [FileType.HTML, FileType.CSS, FileType.JS]
    assert result.response.user.avatar_url == config.DEFAULT_AVATAR_URL
    assert result.response.comments is None


def test_update_project_files_by_owner(db, make_user) -> None:
    owner = make_user('alice_dev')
    public_id = project_service.create_project(db, owner, {'title': 'Card'}).response.public_id

    result = project_service.update_project_files(
        db,
        owner,
        {
            'publicId': public_id,
            'newTitle': 'Shiny Card',
            'newType': 'animation',
            'html': '<div class="card"></div>',
            'css': '.card{}',
            'javascript': '',
            'visibility': 'private',
        },
    )

    assert result.success is True
    updated = db.query(Project).filter(Project.public_id == public_id).one()
    assert updated.title == 'Shiny Card'
    assert updated.type == PostType.ANIMATION
    assert updated.visibility == ProjectVisibility.PRIVATE
    contents = {file.type: file.content for file in updated.files}
    assert contents[FileType.HTML] == '<div class="card"></div>'
    assert contents[FileType.CSS] == '.card{}'
    assert len(updated.files) == 3


def test_update_project_files_rejects_non_owner(db, make_user, make_project) -> None:
    owner = make_user('alice_dev')
    stranger = make_user('bob_builder')
    created = make_project(owner)

    result = project_service.update_project_files(
        db,
        stranger,
        {
            'publicId': created.public_id,
            'newTitle': 'Hijacked',
            'newType': 'others',
            'html': '',
            'css': '',
            'javascript': '',
            'visibility': 'public',
        },
    )

    assert result.success is False
    assert result.code == 403


def test_list_projects_filters_by_search_text_type_and_username(db, make_user, make_project) -> None:
    alice = make_user('alice_dev')
    bob = make_user('bob_builder')
    make_project(alice, title='Red Button', type=PostType.BUTTON)
    make_project(alice, title='Blue Footer', type=PostType.FOOTER)
    make_project(bob, title='Green BUTTON', type=PostType.BUTTON)

    by_text = project_service.list_projects(db, None, {'searchText': 'button', 'sortBy': 'title', 'order': 'asc'})
    by_type = project_service.list_projects(db, None, {'type': 'footer'})
    by_user = project_service.list_projects(db, None, {'username': 'bob_builder'})
    unknown_user = project_service.list_projects(db, None, {'username': 'nobody_here'})

    assert [item.title for item in by_text.response] == ['Green BUTTON', 'Red Button']
    assert [item.title for item in by_type.response] == ['Blue Footer']
    assert [item.title for item in by_user.response] == ['Green BUTTON']
    assert unknown_user.response == []


def test_list_projects_search_treats_wildcards_literally(db, make_user, make_project) -> None:
    owner = make_user('alice_dev')
    make_project(owner, title='100% width')
    make_project(owner, title='Half width')

    result = project_service.list_projects(db, None, {'searchText': '%'})

    assert [item.title for item in result.response] == ['100% width']


def test_list_projects_paginates_with_sort(db, make_user, make_project) -> None:
    owner = make_user('alice_dev')
    for views in range(5):
        make_project(owner, title=f'Project {views}', views=views)

    first_page = project_service.list_projects(db, None, {'sortBy': 'views', 'order': 'desc', 'limit': 2})
    second_page = project_service.list_projects(
        db, None, {'sortBy': 'views', 'order': 'desc', 'limit': 2, 'offset': 2}
    )

    assert [item.views for item in first_page.response] == [4, 3]
    assert [item.views for item in second_page.response] == [2, 1]


def test_list_projects_rejects_oversized_page(db) -> None:
    result = project_service.list_projects(db, None, {'limit': 51})

    assert result.success is False
    assert result.code == 400


def test_delete_project_cascades_to_files(db, make_user) -> None:
    owner = make_user('alice_dev')
    public_id = project_service.create_project(db, owner, {'title': 'Temporary'}).response.public_id

    result = project_service.delete_project(db, owner, {'publicId': public_id})

    assert result.success is True
    assert db.query(Project).count() == 0
    assert db.query(File).count() == 0


def test_delete_project_admin_override(db, make_user, make_project) -> None:
    owner = make_user('alice_dev')
    admin = make_user('root_admin', role=UserRole.ADMIN)
    stranger = make_user('bob_builder')
    created = make_project(owner, visibility=ProjectVisibility.PRIVATE)

    denied = project_service.delete_project(db, stranger, {'publicId': created.public_id})
    allowed = project_service.delete_project(db, admin, {'publicId': created.public_id})

    assert denied.code == 404
    assert allowed.success is True


def test_featured_projects_only_include_public(db, make_user, make_project) -> None:
    owner = make_user('alice_dev')
    for index in range(5):
        make_project(owner, title=f'Public {index}', views=index, likes_count=10 - index)
    make_project(owner, title='Secret', visibility=ProjectVisibility.PRIVATE, views=100, likes_count=100)

    result = project_service.get_featured_projects(db)

    assert result.success is True
    assert [item.title for item in result.response.most_viewed] == ['Public 4', 'Public 3', 'Public 2', 'Public 1']
    assert [item.title for item in result.response.most_liked] == ['Public 0', 'Public 1', 'Public 2', 'Public 3']


def test_cached_featured_projects_until_invalidated(db, make_user, make_project, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, 'FEATURED_CACHE_SECONDS', 3600)
    owner = make_user('alice_dev')
    make_project(owner, title='First')

    first = project_service.get_cached_featured_projects(db)
    make_project(owner, title='Second', views=50)
    cached = project_service.get_cached_featured_projects(db)

    assert [item.title for item in cached.response.most_viewed] == ['First']
    assert cached.response is first.response

    project_service.invalidate_featured_cache()
    refreshed = project_service.get_cached_featured_projects(db)

    assert [item.title for item in refreshed.response.most_viewed] == ['Second', 'First']


def test_create_project_invalidates_featured_cache(db, make_user) -> None:
    owner = make_user('alice_dev')
    assert project_service.get_cached_featured_projects(db).response.most_viewed == []

    project_service.create_project(db, owner, {'title': 'Fresh'})

    assert [item.title for item in project_service.get_cached_featured_projects(db).response.most_viewed] == ['Fresh']


def test_featured_result_computed_before_invalidation_is_not_cached(
    db, make_user, make_project, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(config, 'FEATURED_CACHE_SECONDS', 3600)
    owner = make_user('alice_dev')
    make_project(owner, title='Old')
    compute_featured = project_service.get_featured_projects

    def featured_then_concurrent_write(session):
        snapshot = compute_featured(session)
        project_service.invalidate_featured_cache()
        return snapshot

    monkeypatch.setattr(project_service, 'get_featured_projects', featured_then_concurrent_write)
    stale = project_service.get_cached_featured_projects(db)
    monkeypatch.setattr(project_service, 'get_featured_projects', compute_featured)
    make_project(owner, title='New', views=50)

    fresh = project_service.get_cached_featured_projects(db)

    assert [item.title for item in stale.response.most_viewed] == ['Old']
    assert [item.title for item in fresh.response.most_viewed] == ['New', 'Old']
