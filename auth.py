"""
Session based identity.

The caller's identity lives in Flask's signed session cookie as
``user_id``. Views never read the session themselves: ``login_required``
resolves the user once per request and hands the view an ``AuthContext``.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import wraps

from flask import current_app, g, session

from errors import DuplicateUsername, InvalidCredentials, Unauthenticated
from models import User
from security import hash_password, verify_password

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthContext:
    """Resolved identity of the authenticated caller."""

    user: User

    @property
    def user_id(self) -> int:
        return self.user.id


def _start_session(user: User) -> None:
    # Fresh session on every login so an old cookie can't be reused.
    session.clear()
    session["user_id"] = user.id
    session["last_activity"] = datetime.now(timezone.utc).isoformat()
    session.permanent = True


def register(storage, username: str, password: str) -> User:
    """Create a user and log them in. Raises DuplicateUsername."""
    if storage.get_user_by_username(username) is not None:
        raise DuplicateUsername()

    user = storage.create_user(username, hash_password(password))
    _start_session(user)
    logger.info("user registered id=%s username=%s", user.id, user.username)
    return user


def login(storage, username: str, password: str) -> User:
    """
    Log a user in. Raises InvalidCredentials.

    An unknown username and a wrong password give the same error.
    """
    user = storage.get_user_by_username(username)
    if user is None or not verify_password(password, user.password_hash):
        logger.info("login failed username=%s", username)
        raise InvalidCredentials()

    _start_session(user)
    logger.info("login id=%s", user.id)
    return user


def logout() -> None:
    """Forget the current identity. Safe to call when not logged in."""
    user_id = session.get("user_id")
    session.clear()
    if user_id is not None:
        logger.info("logout id=%s", user_id)


def _session_expired(now: datetime) -> bool:
    idle_minutes = current_app.config.get("SESSION_IDLE_MINUTES", 0)
    last_activity = session.get("last_activity")
    if not idle_minutes or not last_activity:
        return False
    try:
        last_activity_dt = datetime.fromisoformat(last_activity)
    except (TypeError, ValueError):
        return True
    if last_activity_dt.tzinfo is None:
        last_activity_dt = last_activity_dt.replace(tzinfo=timezone.utc)
    return now - last_activity_dt > timedelta(minutes=idle_minutes)


def current_user(storage):
    """
    User identified by the session, or None.

    Clears the session when it has been idle too long or points at a user
    that no longer exists.
    """
    user_id = session.get("user_id")
    if user_id is None:
        return None

    now = datetime.now(timezone.utc)
    if _session_expired(now):
        logger.info("session expired id=%s", user_id)
        session.clear()
        return None

    user = storage.get_user(user_id)
    if user is None:
        session.clear()
        return None

    # Only the idle check reads it; writing it marks the session modified.
    if current_app.config.get("SESSION_IDLE_MINUTES", 0):
        session["last_activity"] = now.isoformat()
    return user


def login_required(view_func):
    """
    Protect an API route.

    Responds 401 before the view runs when nobody is logged in; otherwise
    calls the view with an ``AuthContext`` as its first argument.
    """

    @wraps(view_func)
    def wrapped_view(*args, **kwargs):
        user = g.get("user")
        if user is None:
            raise Unauthenticated()
        return view_func(AuthContext(user=user), *args, **kwargs)

    return wrapped_view
