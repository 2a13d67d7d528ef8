"""
Category Service - CRUD operations for recipe categories.

This service provides CRUD operations for the flat category catalog.
Category slugs are derived from names (see slug_utils.create_slug) and
both name and slug are unique across categories.

Session Management Pattern:
- All functions accept optional `session` parameter
- If session is provided, use it directly (allows callers to manage transactions)
- If session is None, create a new session_scope for the operation
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from src.models.category import Category
from src.services.database import session_scope
from src.services.exceptions import (
    CategoryNotFoundById,
    DuplicateName,
    DuplicateSlug,
    ValidationError,
)
from src.services.logging_utils import get_service_logger, log_operation
from src.utils.constants import ERROR_EMPTY_SLUG
from src.utils.datetime_utils import utc_now
from src.utils.slug_utils import create_slug
from src.utils.validators import sanitize_string, validate_category_data

logger = get_service_logger(__name__)

# Fields callers may set through update_category()
EDITABLE_FIELDS = ("name", "description", "color", "icon_url", "active")


# ============================================================================
# Utility Functions
# ============================================================================


def _validated_slug(data: Dict[str, Any]) -> str:
    """Validate category data and return the slug derived from its name."""
    is_valid, errors = validate_category_data(data)
    if not is_valid:
        raise ValidationError(errors)

    slug = create_slug(data["name"])
    if not slug:
        raise ValidationError([f"Category Name: {ERROR_EMPTY_SLUG}"])
    return slug


def _find_conflict(
    sess: Session,
    column,
    value: str,
    exclude_id: Optional[str] = None,
) -> Optional[Category]:
    """Return another category holding `value` in `column`, if any."""
    query = sess.query(Category).filter(column == value)
    if exclude_id is not None:
        query = query.filter(Category.id != exclude_id)
    return query.first()


# ============================================================================
# CRUD Operations
# ============================================================================


def create_category(
    name: str,
    description: Optional[str] = None,
    color: Optional[str] = None,
    icon_url: Optional[str] = None,
    session: Optional[Session] = None,
) -> Category:
    """
    Create a new category.

    Args:
        name: Category display name (e.g., "Plats principaux")
        description: Optional description
        color: Optional display color (e.g., "#3498db")
        icon_url: Optional icon reference
        session: Optional database session

    Returns:
        Created Category instance (active, timestamps set)

    Raises:
        ValidationError: If name is missing, too short/long, or has no slug
        DuplicateName: If a category with this name exists
        DuplicateSlug: If the derived slug is already used
    """
    data = {
        "name": name.strip() if isinstance(name, str) else name,
        "description": sanitize_string(description),
        "color": sanitize_string(color),
        "icon_url": sanitize_string(icon_url),
    }
    slug = _validated_slug(data)

    def _impl(sess: Session) -> Category:
        if _find_conflict(sess, Category.name, data["name"]) is not None:
            log_operation(
                logger,
                operation="create_category",
                outcome="duplicate_name",
                level=logging.WARNING,
                category_name=data["name"],
            )
            raise DuplicateName(data["name"])

        if _find_conflict(sess, Category.slug, slug) is not None:
            log_operation(
                logger,
                operation="create_category",
                outcome="duplicate_slug",
                level=logging.WARNING,
                slug=slug,
            )
            raise DuplicateSlug(slug)

        now = utc_now()
        category = Category(
            name=data["name"],
            slug=slug,
            description=data["description"],
            color=data["color"],
            icon_url=data["icon_url"],
            active=True,
            created_at=now,
            updated_at=now,
        )
        sess.add(category)
        sess.flush()

        log_operation(
            logger,
            operation="create_category",
            outcome="success",
            category_id=category.id,
            slug=slug,
        )
        return category

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def get_category_by_id(
    category_id: str,
    session: Optional[Session] = None,
) -> Optional[Category]:
    """
    Get a category by ID.

    Args:
        category_id: Category ID
        session: Optional database session

    Returns:
        Category instance, or None if it doesn't exist
    """
    if not category_id:
        return None

    def _impl(sess: Session) -> Optional[Category]:
        return sess.get(Category, category_id)

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def get_category_by_name(
    name: str,
    session: Optional[Session] = None,
) -> Optional[Category]:
    """
    Get a category by exact name.

    Returns:
        Category instance, or None if it doesn't exist
    """
    if not name or not name.strip():
        return None

    def _impl(sess: Session) -> Optional[Category]:
        return sess.query(Category).filter(Category.name == name.strip()).first()

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def get_category_by_slug(
    slug: str,
    session: Optional[Session] = None,
) -> Optional[Category]:
    """
    Get a category by slug.

    Returns:
        Category instance, or None if it doesn't exist
    """
    if not slug:
        return None

    def _impl(sess: Session) -> Optional[Category]:
        return sess.query(Category).filter(Category.slug == slug).first()

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def list_categories(session: Optional[Session] = None) -> List[Category]:
    """
    List all categories (active or not) ordered by name.

    Args:
        session: Optional database session

    Returns:
        List of Category objects
    """

    def _impl(sess: Session) -> List[Category]:
        return sess.query(Category).order_by(Category.name).all()

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def list_active_categories(session: Optional[Session] = None) -> List[Category]:
    """
    List active categories ordered by name ascending.

    Args:
        session: Optional database session

    Returns:
        List of active Category objects
    """

    def _impl(sess: Session) -> List[Category]:
        return (
            sess.query(Category)
            .filter(Category.active.is_(True))
            .order_by(Category.name)
            .all()
        )

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def update_category(
    category_id: str,
    category_data: Dict[str, Any],
    session: Optional[Session] = None,
) -> Category:
    """
    Update a category.

    The supplied fields (name, description, color, icon_url, active) replace
    the stored values; fields not supplied keep their stored values. The
    slug is recomputed from the resulting name.

    Args:
        category_id: Category ID to update
        category_data: Dictionary of fields to replace
        session: Optional database session

    Returns:
        Updated Category instance

    Raises:
        CategoryNotFoundById: If category doesn't exist
        ValidationError: If the resulting record is invalid
        DuplicateName: If another category has the new name
        DuplicateSlug: If another category has the new slug
    """

    def _impl(sess: Session) -> Category:
        category = sess.get(Category, category_id)
        if category is None:
            log_operation(
                logger,
                operation="update_category",
                outcome="not_found",
                level=logging.WARNING,
                category_id=category_id,
            )
            raise CategoryNotFoundById(category_id)

        merged = {field: getattr(category, field) for field in EDITABLE_FIELDS}
        for field in EDITABLE_FIELDS:
            if field in category_data:
                value = category_data[field]
                if field == "active" and value is None:
                    continue
                if field == "name" and isinstance(value, str):
                    value = value.strip()
                elif field in ("description", "color", "icon_url"):
                    value = sanitize_string(value)
                merged[field] = value

        slug = _validated_slug(merged)

        if _find_conflict(sess, Category.name, merged["name"], exclude_id=category_id):
            raise DuplicateName(merged["name"])
        if _find_conflict(sess, Category.slug, slug, exclude_id=category_id):
            raise DuplicateSlug(slug)

        for field in EDITABLE_FIELDS:
            setattr(category, field, merged[field])
        category.active = bool(category.active)
        category.slug = slug
        category.updated_at = utc_now()
        sess.flush()

        log_operation(
            logger,
            operation="update_category",
            outcome="success",
            category_id=category_id,
            slug=slug,
        )
        return category

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def set_category_active(
    category_id: str,
    active: bool,
    session: Optional[Session] = None,
) -> Category:
    """
    Activate or deactivate a category.

    Only the active flag and updated_at change.

    Raises:
        CategoryNotFoundById: If category doesn't exist
    """

    def _impl(sess: Session) -> Category:
        category = sess.get(Category, category_id)
        if category is None:
            raise CategoryNotFoundById(category_id)

        category.active = bool(active)
        category.updated_at = utc_now()
        sess.flush()

        log_operation(
            logger,
            operation="set_category_active",
            outcome="success",
            category_id=category_id,
            active=category.active,
        )
        return category

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def search_categories(
    term: Optional[str],
    session: Optional[Session] = None,
) -> List[Category]:
    """
    Search active categories by name or description.

    Case-insensitive substring match. A blank term returns every active
    category.

    Args:
        term: Search text
        session: Optional database session

    Returns:
        Matching active categories ordered by name
    """
    if term is None or not term.strip():
        return list_active_categories(session=session)

    needle = term.strip().lower()

    def _impl(sess: Session) -> List[Category]:
        return [
            category
            for category in list_active_categories(session=sess)
            if needle in category.name.lower()
            or (category.description is not None and needle in category.description.lower())
        ]

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def can_delete_category(
    category_id: str,
    session: Optional[Session] = None,
) -> bool:
    """
    Advisory check run before deleting a category.

    Always True at present: recipes referencing the category are not
    counted, and delete_category() does not refuse referenced categories.
    """
    # TODO: return recipe_service.count_recipes_in_category(category_id) == 0
    # once category deletion is allowed to reject referenced categories.
    return True


def delete_category(
    category_id: str,
    session: Optional[Session] = None,
) -> bool:
    """
    Delete a category.

    Recipes that reference the category are left untouched.

    Args:
        category_id: Category ID to delete
        session: Optional database session

    Returns:
        True if deleted, False if no such category existed
    """

    def _impl(sess: Session) -> bool:
        category = sess.get(Category, category_id)
        if category is None:
            log_operation(
                logger,
                operation="delete_category",
                outcome="not_found",
                category_id=category_id,
            )
            return False

        sess.delete(category)
        sess.flush()

        log_operation(logger, operation="delete_category", outcome="success", category_id=category_id)
        return True

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def count_categories(session: Optional[Session] = None) -> int:
    """Count all categories."""

    def _impl(sess: Session) -> int:
        return sess.query(func.count(Category.id)).scalar() or 0

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def count_active_categories(session: Optional[Session] = None) -> int:
    """Count active categories."""

    def _impl(sess: Session) -> int:
        return (
            sess.query(func.count(Category.id)).filter(Category.active.is_(True)).scalar() or 0
        )

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)
