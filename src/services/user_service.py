"""
User Service - Account management, authentication and favorites.

Usernames are stored trimmed and emails lower-cased; both are unique.
Passwords are never stored: the credentials module turns them into a
one-way hash token on create, update and change_password.

The favorite list kept on each user is only mutated through
add_favorite()/remove_favorite(); recipe_service calls these and keeps
the recipe's favorite_count in step.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from src.models.user import User
from src.services import credentials
from src.services.database import session_scope
from src.services.exceptions import (
    DuplicateEmail,
    DuplicateUsername,
    InvalidCredential,
    UserNotFoundById,
    ValidationError,
)
from src.services.logging_utils import get_service_logger, log_operation
from src.utils.constants import DEFAULT_ROLES
from src.utils.datetime_utils import utc_now
from src.utils.validators import (
    normalize_email,
    normalize_username,
    sanitize_string,
    validate_password,
    validate_user_data,
)

logger = get_service_logger(__name__)

PROFILE_FIELDS = ("first_name", "last_name", "bio", "profile_image_url")


def _email_taken(sess: Session, email: str, exclude_id: Optional[str] = None) -> bool:
    query = sess.query(User.id).filter(User.email == email)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None


def _username_taken(sess: Session, username: str, exclude_id: Optional[str] = None) -> bool:
    query = sess.query(User.id).filter(User.username == username)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None


def _require_user(sess: Session, user_id: str, operation: str) -> User:
    user = sess.get(User, user_id) if user_id else None
    if user is None:
        log_operation(
            logger,
            operation=operation,
            outcome="not_found",
            level=logging.WARNING,
            user_id=user_id,
        )
        raise UserNotFoundById(user_id)
    return user


# ============================================================================
# Account CRUD
# ============================================================================


def create_user(user_data: Dict[str, Any], session: Optional[Session] = None) -> User:
    """
    Register a new user account.

    Args:
        user_data: Dictionary with username, email, password and optional
            first_name, last_name, bio, profile_image_url, roles
        session: Optional database session

    Returns:
        Created User (enabled, roles defaulting to ["USER"])

    Raises:
        ValidationError: If the data fails validation
        DuplicateEmail: If the email is already registered
        DuplicateUsername: If the username is already taken
    """
    is_valid, errors = validate_user_data(user_data, require_password=True)
    if not is_valid:
        raise ValidationError(errors)

    email = normalize_email(user_data["email"])
    username = normalize_username(user_data["username"])

    def _impl(sess: Session) -> User:
        if _email_taken(sess, email):
            log_operation(
                logger,
                operation="create_user",
                outcome="duplicate_email",
                level=logging.WARNING,
                email=email,
            )
            raise DuplicateEmail(email)

        if _username_taken(sess, username):
            log_operation(
                logger,
                operation="create_user",
                outcome="duplicate_username",
                level=logging.WARNING,
                username=username,
            )
            raise DuplicateUsername(username)

        roles = user_data.get("roles")
        now = utc_now()
        user = User(
            username=username,
            email=email,
            password_hash=credentials.hash_password(user_data["password"]),
            roles=list(roles) if roles else list(DEFAULT_ROLES),
            favorite_recipe_ids=[],
            enabled=True,
            created_at=now,
            updated_at=now,
        )
        for field in PROFILE_FIELDS:
            setattr(user, field, sanitize_string(user_data.get(field)))

        sess.add(user)
        sess.flush()

        log_operation(logger, operation="create_user", outcome="success", user_id=user.id)
        return user

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def update_user(
    user_id: str,
    user_data: Dict[str, Any],
    session: Optional[Session] = None,
) -> User:
    """
    Update a user account.

    Supplied fields replace the stored ones. A non-empty "password" is
    re-hashed; otherwise the stored hash is kept. favorite_recipe_ids is
    ignored here.

    Raises:
        UserNotFoundById: If the user doesn't exist
        ValidationError: If the resulting record is invalid
        DuplicateEmail / DuplicateUsername: If a changed value is taken
    """

    def _impl(sess: Session) -> User:
        user = _require_user(sess, user_id, "update_user")

        merged = {
            "username": user_data.get("username", user.username),
            "email": user_data.get("email", user.email),
            "password": user_data.get("password"),
            "roles": user_data.get("roles", user.roles),
        }
        for field in PROFILE_FIELDS:
            if field in user_data:
                merged[field] = sanitize_string(user_data[field])
            else:
                merged[field] = getattr(user, field)

        is_valid, errors = validate_user_data(merged, require_password=False)
        if not is_valid:
            raise ValidationError(errors)

        email = normalize_email(merged["email"])
        username = normalize_username(merged["username"])

        if email != user.email and _email_taken(sess, email, exclude_id=user_id):
            raise DuplicateEmail(email)
        if username != user.username and _username_taken(sess, username, exclude_id=user_id):
            raise DuplicateUsername(username)

        user.email = email
        user.username = username
        user.roles = list(merged["roles"]) if merged["roles"] else list(DEFAULT_ROLES)
        for field in PROFILE_FIELDS:
            setattr(user, field, merged[field])
        if user_data.get("enabled") is not None:
            user.enabled = bool(user_data["enabled"])
        if merged["password"]:
            user.password_hash = credentials.hash_password(merged["password"])
        user.updated_at = utc_now()
        sess.flush()

        log_operation(logger, operation="update_user", outcome="success", user_id=user_id)
        return user

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def get_user_by_id(user_id: str, session: Optional[Session] = None) -> Optional[User]:
    """
    Get a user by ID.

    Returns:
        User instance, or None if it doesn't exist
    """
    if not user_id:
        return None

    def _impl(sess: Session) -> Optional[User]:
        return sess.get(User, user_id)

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def get_user_by_email(email: str, session: Optional[Session] = None) -> Optional[User]:
    """Get a user by email, ignoring case and surrounding whitespace."""
    email = normalize_email(email)
    if not email:
        return None

    def _impl(sess: Session) -> Optional[User]:
        return sess.query(User).filter(User.email == email).first()

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def get_user_by_username(username: str, session: Optional[Session] = None) -> Optional[User]:
    """Get a user by username (trimmed, exact case)."""
    username = normalize_username(username)
    if not username:
        return None

    def _impl(sess: Session) -> Optional[User]:
        return sess.query(User).filter(User.username == username).first()

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def list_users(session: Optional[Session] = None) -> List[User]:
    """List all users ordered by username."""

    def _impl(sess: Session) -> List[User]:
        return sess.query(User).order_by(User.username).all()

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def list_active_users(session: Optional[Session] = None) -> List[User]:
    """List enabled users ordered by username."""

    def _impl(sess: Session) -> List[User]:
        return sess.query(User).filter(User.enabled.is_(True)).order_by(User.username).all()

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def set_user_enabled(
    user_id: str,
    enabled: bool,
    session: Optional[Session] = None,
) -> User:
    """
    Enable or disable an account. Disabled accounts cannot authenticate.

    Raises:
        UserNotFoundById: If the user doesn't exist
    """

    def _impl(sess: Session) -> User:
        user = _require_user(sess, user_id, "set_user_enabled")
        user.enabled = bool(enabled)
        user.updated_at = utc_now()
        sess.flush()

        log_operation(
            logger,
            operation="set_user_enabled",
            outcome="success",
            user_id=user_id,
            enabled=user.enabled,
        )
        return user

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def delete_user(user_id: str, session: Optional[Session] = None) -> bool:
    """
    Delete a user account.

    Recipes authored by the user are left untouched.

    Returns:
        True if deleted, False if no such user existed
    """

    def _impl(sess: Session) -> bool:
        user = sess.get(User, user_id)
        if user is None:
            log_operation(logger, operation="delete_user", outcome="not_found", user_id=user_id)
            return False

        sess.delete(user)
        sess.flush()

        log_operation(logger, operation="delete_user", outcome="success", user_id=user_id)
        return True

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def count_users(session: Optional[Session] = None) -> int:
    """Count all users."""

    def _impl(sess: Session) -> int:
        return sess.query(func.count(User.id)).scalar() or 0

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


# ============================================================================
# Credentials
# ============================================================================


def authenticate(
    username_or_email: str,
    password: str,
    session: Optional[Session] = None,
) -> Optional[User]:
    """
    Check a login.

    The identifier is tried as a username first, then as an email.

    Args:
        username_or_email: Username or email address
        password: Plaintext password
        session: Optional database session

    Returns:
        The User on success; None when the identifier doesn't resolve, the
        account is disabled, or the password doesn't verify
    """

    def _impl(sess: Session) -> Optional[User]:
        user = get_user_by_username(username_or_email, session=sess)
        if user is None:
            user = get_user_by_email(username_or_email, session=sess)

        if user is None:
            outcome = "unknown_user"
        elif not user.enabled:
            outcome = "disabled"
        elif not credentials.verify_password(password, user.password_hash):
            outcome = "invalid_credential"
        else:
            log_operation(logger, operation="authenticate", outcome="success", user_id=user.id)
            return user

        log_operation(logger, operation="authenticate", outcome=outcome, level=logging.WARNING)
        return None

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def change_password(
    user_id: str,
    old_password: str,
    new_password: str,
    session: Optional[Session] = None,
) -> User:
    """
    Replace a user's password after checking the current one.

    Raises:
        UserNotFoundById: If the user doesn't exist
        InvalidCredential: If old_password doesn't verify
        ValidationError: If new_password is too short
    """

    def _impl(sess: Session) -> User:
        user = _require_user(sess, user_id, "change_password")

        if not credentials.verify_password(old_password, user.password_hash):
            log_operation(
                logger,
                operation="change_password",
                outcome="invalid_credential",
                level=logging.WARNING,
                user_id=user_id,
            )
            raise InvalidCredential("Current password is incorrect")

        is_valid, error = validate_password(new_password, "New Password")
        if not is_valid:
            raise ValidationError([error])

        user.password_hash = credentials.hash_password(new_password)
        user.updated_at = utc_now()
        sess.flush()

        log_operation(logger, operation="change_password", outcome="success", user_id=user_id)
        return user

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


# ============================================================================
# Favorites
# ============================================================================


def add_favorite(user_id: str, recipe_id: str, session: Optional[Session] = None) -> bool:
    """
    Add a recipe to the user's favorites.

    Returns:
        True if the list changed, False if the recipe was already there

    Raises:
        UserNotFoundById: If the user doesn't exist
    """

    def _impl(sess: Session) -> bool:
        user = _require_user(sess, user_id, "add_favorite")
        favorites = list(user.favorite_recipe_ids or [])
        if recipe_id in favorites:
            return False

        favorites.append(recipe_id)
        user.favorite_recipe_ids = favorites
        user.updated_at = utc_now()
        sess.flush()

        log_operation(
            logger,
            operation="add_favorite",
            outcome="success",
            user_id=user_id,
            recipe_id=recipe_id,
        )
        return True

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def remove_favorite(user_id: str, recipe_id: str, session: Optional[Session] = None) -> bool:
    """
    Remove a recipe from the user's favorites.

    Returns:
        True if the list changed, False if the recipe wasn't there

    Raises:
        UserNotFoundById: If the user doesn't exist
    """

    def _impl(sess: Session) -> bool:
        user = _require_user(sess, user_id, "remove_favorite")
        favorites = list(user.favorite_recipe_ids or [])
        if recipe_id not in favorites:
            return False

        user.favorite_recipe_ids = [rid for rid in favorites if rid != recipe_id]
        user.updated_at = utc_now()
        sess.flush()

        log_operation(
            logger,
            operation="remove_favorite",
            outcome="success",
            user_id=user_id,
            recipe_id=recipe_id,
        )
        return True

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)
