from codegallery.core import config
from codegallery.services import interaction_service, user_service


def test_get_user_data_totals(db, make_user, make_project) -> None:
    alice = make_user('alice_dev')
    fans = [make_user(name) for name in ('bob_builder', 'carol_css')]
    first = make_project(alice, views=7)
    second = make_project(alice, views=5)
    for fan in fans:
        interaction_service.like_project(db, fan, {'publicId': first.public_id})
        interaction_service.follow_user(db, fan, {'username': 'alice_dev'})
    interaction_service.like_project(db, fans[0], {'publicId': second.public_id})

    result = user_service.get_user_data(db, {'username': 'alice_dev'})

    assert result.success is True
    assert result.response.total_likes == 3
    assert result.response.total_follows == 2
    assert result.response.total_views == 12
    assert result.response.avatar_url == config.DEFAULT_AVATAR_URL


def test_get_user_data_for_user_without_projects(db, make_user) -> None:
    make_user('quiet_one')

    result = user_service.get_user_data(db, {'username': 'quiet_one'})

    assert result.response.total_likes == 0
    assert result.response.total_follows == 0
    assert result.response.total_views == 0


def test_get_user_data_unknown_user(db) -> None:
    result = user_service.get_user_data(db, {'username': 'ghost_user'})

    assert result.success is False
    assert result.code == 404
    assert result.error == "Specified user doesn't exist"


def test_get_followers_paginates(db, make_user) -> None:
    make_user('alice_dev')
    for name in ('bob_builder', 'carol_css', 'dave_dom'):
        interaction_service.follow_user(db, make_user(name), {'username': 'alice_dev'})

    everyone = user_service.get_followers(db, {'username': 'alice_dev'})
    page = user_service.get_followers(db, {'username': 'alice_dev', 'limit': 2, 'offset': 2})

    assert sorted(item.username for item in everyone.response) == ['bob_builder', 'carol_css', 'dave_dom']
    assert len(page.response) == 1


def test_get_followers_rejects_large_limit(db, make_user) -> None:
    make_user('alice_dev')

    result = user_service.get_followers(db, {'username': 'alice_dev', 'limit': 51})

    assert result.code == 400
