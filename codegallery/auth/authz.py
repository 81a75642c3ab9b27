"""Static role/action/resource permission table."""

from codegallery.models.user import User, UserRole

VIEWER_ROLE = "viewer"

PERMISSIONS: dict[str, set[str]] = {
    UserRole.ADMIN.value: {
        # post
        "view:post",
        "create:post",
        "update:post",
        "delete:post",
        "like:post",
        "manage:post",
        # comment
        "view:comment",
        "create:comment",
        "update:comment",
        "delete:comment",
        # user
        "follow:user",
        "view:user",
        "manage:user",
        # dashboard
        "view_statistics:admin_dashboard",
    },
    UserRole.USER.value: {
        "view:post",
        "create:post",
        "update:post",
        "delete:post",
        "like:post",
        "create:comment",
        "update:comment",
        "delete:comment",
        "follow:user",
    },
    VIEWER_ROLE: {
        "view:post",
        "view:comment",
    },
}

OWNERSHIP_REQUIRED_ACTIONS: dict[str, set[str]] = {
    "post": {"update", "delete"},
    "comment": {"update", "delete"},
}


def role_of(user: User | None) -> str:
    if user is None or user.role is None:
        return VIEWER_ROLE
    return UserRole(user.role).value


def check_permission(
    user: User | None,
    action: str,
    resource: str,
    resource_owner_id: str | None = None,
) -> bool:
    """Return True when ``user`` may perform ``action`` on ``resource``.

    Anonymous callers are treated as viewers. For update/delete on posts and
    comments a non-admin must also own the resource; admins skip that check.
    """
    role = role_of(user)
    if f"{action}:{resource}" not in PERMISSIONS.get(role, set()):
        return False

    needs_ownership_check = action in OWNERSHIP_REQUIRED_ACTIONS.get(resource, set())
    if needs_ownership_check and role != UserRole.ADMIN.value:
        if user is None or not user.id or not resource_owner_id:
            return False
        return user.id == resource_owner_id

    return True
