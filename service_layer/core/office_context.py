"""Authenticated-user context for office (tenant) scoping.

Authentication sets the current user in a context variable; the cached
service layer and OfficeCriterion read the office id from it when the
caller does not pass one explicitly. Context is scoped to the current
async task/thread.

Usage:
    with acting_as(AuthenticatedUser(id=7, office_id=3)):
        await service.index()
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass

from service_layer.domain.exceptions import UnauthorizedUserException


@dataclass(frozen=True)
class AuthenticatedUser:
    """Immutable snapshot of the authenticated user."""

    id: int | str
    office_id: int


_current_user: ContextVar[AuthenticatedUser | None] = ContextVar(
    "current_user", default=None
)


def set_current_user(user: AuthenticatedUser | None) -> None:
    """Set the authenticated user for this context (e.g. request)."""
    _current_user.set(user)


def clear_current_user() -> None:
    """Clear the authenticated user."""
    _current_user.set(None)


def get_current_user() -> AuthenticatedUser | None:
    """Return the authenticated user, or None if not authenticated."""
    return _current_user.get()


def current_office_id() -> int:
    """Return the authenticated user's office id.

    Raises:
        UnauthorizedUserException: If no user is authenticated.
    """
    user = _current_user.get()
    if user is None:
        raise UnauthorizedUserException()
    return user.office_id


@contextmanager
def acting_as(user: AuthenticatedUser | None) -> Iterator[AuthenticatedUser | None]:
    """Run a block as user; the previous user is restored on exit."""
    token = _current_user.set(user)
    try:
        yield user
    finally:
        _current_user.reset(token)
