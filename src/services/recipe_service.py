"""
Recipe Service - Business logic for the recipe catalog.

This service provides:
- Recipe CRUD with category and author reference checks
- Published listings (by category, author, difficulty, top rated, latest)
- In-memory text search over published recipes
- Server-owned counters: views, ratings and favorites
- Edit permission checks and catalog statistics

The rating, rating_count, favorite_count and view_count counters are never
taken from caller data; they change only through the counter operations
below. View and favorite counters use single-statement increments.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import set_committed_value

from src.models.recipe import Recipe
from src.services import category_service, user_service
from src.services.database import session_scope
from src.services.dto import RecipeStats
from src.services.exceptions import (
    AuthorNotFound,
    CategoryNotFound,
    RecipeNotFoundById,
    ValidationError,
)
from src.services.logging_utils import get_service_logger, log_operation
from src.utils.constants import DEFAULT_LIST_LIMIT, ERROR_INVALID_DIFFICULTY, STATS_TOP_RATED_LIMIT
from src.utils.datetime_utils import utc_now
from src.utils.validators import parse_difficulty, sanitize_string, validate_recipe_data

logger = get_service_logger(__name__)

# Fields a caller may supply on create/update
CONTENT_FIELDS = (
    "title",
    "description",
    "ingredients",
    "instructions",
    "category_id",
    "author_id",
    "image_url",
    "servings",
    "prep_time_minutes",
    "cook_time_minutes",
    "difficulty",
    "tags",
    "nutrition_info",
    "published",
)


# ============================================================================
# Utility Functions
# ============================================================================


def _normalize_ingredients(ingredients: Optional[List[Dict]]) -> List[Dict]:
    return [
        {
            "name": item["name"].strip(),
            "quantity": item.get("quantity"),
            "unit": sanitize_string(item.get("unit")),
            "optional": bool(item.get("optional", False)),
        }
        for item in ingredients or []
    ]


def _normalize_instructions(instructions: Optional[List[Dict]]) -> List[Dict]:
    return [
        {
            "step_number": item.get("step_number") or index,
            "description": item["description"].strip(),
            "image_url": sanitize_string(item.get("image_url")),
            "time_minutes": item.get("time_minutes"),
        }
        for index, item in enumerate(instructions or [], start=1)
    ]


def _apply_content(recipe: Recipe, data: Dict[str, Any]) -> None:
    """Copy validated content fields onto a recipe; counters are left alone."""
    recipe.title = data["title"].strip()
    recipe.description = sanitize_string(data.get("description"))
    recipe.ingredients = _normalize_ingredients(data.get("ingredients"))
    recipe.instructions = _normalize_instructions(data.get("instructions"))
    recipe.category_id = data["category_id"]
    recipe.author_id = data["author_id"]
    recipe.image_url = sanitize_string(data.get("image_url"))
    recipe.servings = data.get("servings")
    recipe.prep_time_minutes = data.get("prep_time_minutes")
    recipe.cook_time_minutes = data.get("cook_time_minutes")
    recipe.difficulty = parse_difficulty(data.get("difficulty"))
    recipe.tags = [tag.strip() for tag in data.get("tags") or [] if tag.strip()]
    nutrition = data.get("nutrition_info")
    recipe.nutrition_info = dict(nutrition) if nutrition else None
    recipe.published = bool(data.get("published", False))


def _increment_counter(sess: Session, recipe: Recipe, column_name: str, delta: int) -> bool:
    """
    Add delta to a counter column in a single UPDATE statement.

    Decrements never take the stored value below zero. The in-memory
    recipe is updated without marking it dirty.

    Returns:
        True if the row was updated
    """
    column = getattr(Recipe, column_name)
    current = getattr(recipe, column_name)
    query = sess.query(Recipe).filter(Recipe.id == recipe.id)
    if delta < 0:
        query = query.filter(column >= -delta)

    updated = query.update({column: column + delta}, synchronize_session=False)
    if updated:
        set_committed_value(recipe, column_name, current + delta)
    return bool(updated)


def _published_query(sess: Session):
    return sess.query(Recipe).filter(Recipe.published.is_(True))


def _newest_first(query):
    return query.order_by(Recipe.created_at.desc())


# ============================================================================
# CRUD Operations
# ============================================================================


def create_recipe(recipe_data: Dict[str, Any], session: Optional[Session] = None) -> Recipe:
    """
    Create a new recipe.

    Args:
        recipe_data: Dictionary with recipe fields. title, category_id and
            author_id are required; ingredients is a list of
            {name, quantity, unit, optional}, instructions a list of
            {step_number, description, image_url, time_minutes}.
            Counter values in the data are ignored.
        session: Optional database session

    Returns:
        Created Recipe instance with all counters at zero

    Raises:
        ValidationError: If data validation fails
        CategoryNotFound: If category_id doesn't resolve (checked first)
        AuthorNotFound: If author_id doesn't resolve
    """
    is_valid, errors = validate_recipe_data(recipe_data)
    if not is_valid:
        raise ValidationError(errors)

    def _impl(sess: Session) -> Recipe:
        category_id = recipe_data["category_id"]
        if category_service.get_category_by_id(category_id, session=sess) is None:
            log_operation(
                logger,
                operation="create_recipe",
                outcome="category_not_found",
                level=logging.WARNING,
                category_id=category_id,
            )
            raise CategoryNotFound(category_id)

        author_id = recipe_data["author_id"]
        if user_service.get_user_by_id(author_id, session=sess) is None:
            log_operation(
                logger,
                operation="create_recipe",
                outcome="author_not_found",
                level=logging.WARNING,
                author_id=author_id,
            )
            raise AuthorNotFound(author_id)

        now = utc_now()
        recipe = Recipe(
            rating=0.0,
            rating_count=0,
            favorite_count=0,
            view_count=0,
            created_at=now,
            updated_at=now,
        )
        _apply_content(recipe, recipe_data)
        sess.add(recipe)
        sess.flush()

        log_operation(
            logger,
            operation="create_recipe",
            outcome="success",
            recipe_id=recipe.id,
            category_id=category_id,
        )
        return recipe

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def get_recipe_by_id(recipe_id: str, session: Optional[Session] = None) -> Optional[Recipe]:
    """
    Get a recipe by ID without touching its view counter.

    Returns:
        Recipe instance, or None if it doesn't exist
    """
    if not recipe_id:
        return None

    def _impl(sess: Session) -> Optional[Recipe]:
        return sess.get(Recipe, recipe_id)

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def get_recipe_and_increment_views(
    recipe_id: str,
    session: Optional[Session] = None,
) -> Optional[Recipe]:
    """
    Get a recipe for display and count the view.

    The stored view_count is incremented server-side; the returned recipe
    carries the loaded count plus one.

    Returns:
        Recipe instance, or None if it doesn't exist
    """
    if not recipe_id:
        return None

    def _impl(sess: Session) -> Optional[Recipe]:
        recipe = sess.get(Recipe, recipe_id)
        if recipe is None:
            return None

        _increment_counter(sess, recipe, "view_count", 1)
        log_operation(
            logger,
            operation="increment_views",
            outcome="success",
            level=logging.DEBUG,
            recipe_id=recipe_id,
            view_count=recipe.view_count,
        )
        return recipe

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def update_recipe(  # noqa: C901
    recipe_id: str,
    recipe_data: Dict[str, Any],
    session: Optional[Session] = None,
) -> Recipe:
    """
    Update a recipe's content.

    Supplied content fields replace the stored ones; rating, rating_count,
    favorite_count, view_count, created_at and id are ignored if present
    and keep their stored values.

    Args:
        recipe_id: Recipe ID to update
        recipe_data: Dictionary with fields to update
        session: Optional database session

    Returns:
        Updated Recipe instance

    Raises:
        RecipeNotFoundById: If recipe doesn't exist
        ValidationError: If the resulting record is invalid
        CategoryNotFound: If the category doesn't resolve
        AuthorNotFound: If a changed author_id doesn't resolve
    """

    def _impl(sess: Session) -> Recipe:
        recipe = sess.get(Recipe, recipe_id)
        if recipe is None:
            log_operation(
                logger,
                operation="update_recipe",
                outcome="not_found",
                level=logging.WARNING,
                recipe_id=recipe_id,
            )
            raise RecipeNotFoundById(recipe_id)

        merged = {field: getattr(recipe, field) for field in CONTENT_FIELDS}
        merged.update(
            {field: value for field, value in recipe_data.items() if field in CONTENT_FIELDS}
        )

        is_valid, errors = validate_recipe_data(merged)
        if not is_valid:
            raise ValidationError(errors)

        if category_service.get_category_by_id(merged["category_id"], session=sess) is None:
            log_operation(
                logger,
                operation="update_recipe",
                outcome="category_not_found",
                level=logging.WARNING,
                recipe_id=recipe_id,
                category_id=merged["category_id"],
            )
            raise CategoryNotFound(merged["category_id"])

        author_id = merged["author_id"]
        if (
            author_id != recipe.author_id
            and user_service.get_user_by_id(author_id, session=sess) is None
        ):
            log_operation(
                logger,
                operation="update_recipe",
                outcome="author_not_found",
                level=logging.WARNING,
                recipe_id=recipe_id,
                author_id=author_id,
            )
            raise AuthorNotFound(author_id)

        _apply_content(recipe, merged)
        recipe.updated_at = utc_now()
        sess.flush()

        log_operation(logger, operation="update_recipe", outcome="success", recipe_id=recipe_id)
        return recipe

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def set_recipe_published(
    recipe_id: str,
    published: bool,
    session: Optional[Session] = None,
) -> Recipe:
    """
    Publish or unpublish a recipe.

    Raises:
        RecipeNotFoundById: If recipe doesn't exist
    """

    def _impl(sess: Session) -> Recipe:
        recipe = sess.get(Recipe, recipe_id)
        if recipe is None:
            raise RecipeNotFoundById(recipe_id)

        recipe.published = bool(published)
        recipe.updated_at = utc_now()
        sess.flush()

        log_operation(
            logger,
            operation="set_recipe_published",
            outcome="success",
            recipe_id=recipe_id,
            published=recipe.published,
        )
        return recipe

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def delete_recipe(recipe_id: str, session: Optional[Session] = None) -> bool:
    """
    Delete a recipe.

    Favorite lists that still hold the recipe id are not cleaned up.

    Returns:
        True if deleted, False if no such recipe existed
    """

    def _impl(sess: Session) -> bool:
        recipe = sess.get(Recipe, recipe_id)
        if recipe is None:
            log_operation(logger, operation="delete_recipe", outcome="not_found", recipe_id=recipe_id)
            return False

        sess.delete(recipe)
        sess.flush()

        log_operation(logger, operation="delete_recipe", outcome="success", recipe_id=recipe_id)
        return True

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


# ============================================================================
# Listings and Search
# ============================================================================


def list_recipes(session: Optional[Session] = None) -> List[Recipe]:
    """List every recipe, published or not, newest first."""

    def _impl(sess: Session) -> List[Recipe]:
        return _newest_first(sess.query(Recipe)).all()

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def list_published_recipes(session: Optional[Session] = None) -> List[Recipe]:
    """List published recipes, newest first."""

    def _impl(sess: Session) -> List[Recipe]:
        return _newest_first(_published_query(sess)).all()

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def list_recipes_by_category(
    category_id: str,
    session: Optional[Session] = None,
) -> List[Recipe]:
    """List published recipes in a category, newest first."""

    def _impl(sess: Session) -> List[Recipe]:
        query = _published_query(sess).filter(Recipe.category_id == category_id)
        return _newest_first(query).all()

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def list_recipes_by_author(author_id: str, session: Optional[Session] = None) -> List[Recipe]:
    """List all of an author's recipes, including unpublished drafts, newest first."""

    def _impl(sess: Session) -> List[Recipe]:
        query = sess.query(Recipe).filter(Recipe.author_id == author_id)
        return _newest_first(query).all()

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def list_published_recipes_by_author(
    author_id: str,
    session: Optional[Session] = None,
) -> List[Recipe]:
    """List an author's published recipes, newest first."""

    def _impl(sess: Session) -> List[Recipe]:
        query = _published_query(sess).filter(Recipe.author_id == author_id)
        return _newest_first(query).all()

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def list_recipes_by_difficulty(difficulty, session: Optional[Session] = None) -> List[Recipe]:
    """
    List published recipes of one difficulty level, newest first.

    Args:
        difficulty: DifficultyLevel or its name ("easy", "MEDIUM", ...)
        session: Optional database session

    Raises:
        ValidationError: If difficulty doesn't name a level
    """
    try:
        level = parse_difficulty(difficulty)
    except ValueError:
        raise ValidationError([f"Difficulty: {ERROR_INVALID_DIFFICULTY}"])
    if level is None:
        raise ValidationError([f"Difficulty: {ERROR_INVALID_DIFFICULTY}"])

    def _impl(sess: Session) -> List[Recipe]:
        query = _published_query(sess).filter(Recipe.difficulty == level)
        return _newest_first(query).all()

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def list_top_rated_recipes(
    limit: int = DEFAULT_LIST_LIMIT,
    session: Optional[Session] = None,
) -> List[Recipe]:
    """
    List the best rated published recipes.

    Args:
        limit: Maximum number of recipes to return
        session: Optional database session

    Returns:
        Recipes ordered by rating descending (newest first on ties)
    """

    def _impl(sess: Session) -> List[Recipe]:
        if limit <= 0:
            return []
        return (
            _published_query(sess)
            .order_by(Recipe.rating.desc(), Recipe.created_at.desc())
            .limit(limit)
            .all()
        )

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def list_latest_recipes(
    limit: int = DEFAULT_LIST_LIMIT,
    session: Optional[Session] = None,
) -> List[Recipe]:
    """List the most recently created published recipes."""

    def _impl(sess: Session) -> List[Recipe]:
        if limit <= 0:
            return []
        return _newest_first(_published_query(sess)).limit(limit).all()

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def search_recipes(term: Optional[str], session: Optional[Session] = None) -> List[Recipe]:
    """
    Search published recipes by text.

    Case-insensitive substring match against title, description and tags,
    run in memory over the published set. A blank term returns every
    published recipe.

    Args:
        term: Search text
        session: Optional database session

    Returns:
        Matching published recipes, newest first
    """

    def _matches(recipe: Recipe, needle: str) -> bool:
        if needle in recipe.title.lower():
            return True
        if recipe.description and needle in recipe.description.lower():
            return True
        return any(needle in tag.lower() for tag in recipe.tags or [])

    def _impl(sess: Session) -> List[Recipe]:
        recipes = list_published_recipes(session=sess)
        if term is None or not term.strip():
            return recipes

        needle = term.strip().lower()
        return [recipe for recipe in recipes if _matches(recipe, needle)]

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


# ============================================================================
# Ratings and Favorites
# ============================================================================


def rate_recipe(recipe_id: str, score: float, session: Optional[Session] = None) -> Recipe:
    """
    Add a score to a recipe's running average.

    new_rating = (rating * rating_count + score) / (rating_count + 1).
    The score range is not checked here. Concurrent ratings can lose an
    update: the average is computed from the loaded values.

    Raises:
        RecipeNotFoundById: If recipe doesn't exist
    """

    def _impl(sess: Session) -> Recipe:
        recipe = sess.get(Recipe, recipe_id)
        if recipe is None:
            log_operation(
                logger,
                operation="rate_recipe",
                outcome="not_found",
                level=logging.WARNING,
                recipe_id=recipe_id,
            )
            raise RecipeNotFoundById(recipe_id)

        count = recipe.rating_count or 0
        total = (recipe.rating or 0.0) * count + score
        recipe.rating = total / (count + 1)
        recipe.rating_count = count + 1
        sess.flush()

        log_operation(
            logger,
            operation="rate_recipe",
            outcome="success",
            recipe_id=recipe_id,
            rating=recipe.rating,
            rating_count=recipe.rating_count,
        )
        return recipe

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def favorite_recipe(user_id: str, recipe_id: str, session: Optional[Session] = None) -> bool:
    """
    Mark a recipe as one of the user's favorites.

    Returns:
        True if the recipe was added (favorite_count incremented), False
        if it was already a favorite

    Raises:
        RecipeNotFoundById: If recipe doesn't exist
        UserNotFoundById: If user doesn't exist
    """

    def _impl(sess: Session) -> bool:
        recipe = sess.get(Recipe, recipe_id)
        if recipe is None:
            raise RecipeNotFoundById(recipe_id)

        changed = user_service.add_favorite(user_id, recipe_id, session=sess)
        if changed:
            _increment_counter(sess, recipe, "favorite_count", 1)

        log_operation(
            logger,
            operation="favorite_recipe",
            outcome="success" if changed else "unchanged",
            user_id=user_id,
            recipe_id=recipe_id,
        )
        return changed

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def unfavorite_recipe(user_id: str, recipe_id: str, session: Optional[Session] = None) -> bool:
    """
    Remove a recipe from the user's favorites.

    Returns:
        True if the recipe was removed (favorite_count decremented, never
        below zero), False if it wasn't a favorite

    Raises:
        RecipeNotFoundById: If recipe doesn't exist
        UserNotFoundById: If user doesn't exist
    """

    def _impl(sess: Session) -> bool:
        recipe = sess.get(Recipe, recipe_id)
        if recipe is None:
            raise RecipeNotFoundById(recipe_id)

        changed = user_service.remove_favorite(user_id, recipe_id, session=sess)
        if changed:
            _increment_counter(sess, recipe, "favorite_count", -1)

        log_operation(
            logger,
            operation="unfavorite_recipe",
            outcome="success" if changed else "unchanged",
            user_id=user_id,
            recipe_id=recipe_id,
        )
        return changed

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


# ============================================================================
# Permissions and Statistics
# ============================================================================


def can_edit_recipe(user_id: str, recipe_id: str, session: Optional[Session] = None) -> bool:
    """
    Check whether a user may edit a recipe.

    Authors may edit their own recipes and admins may edit any recipe.

    Returns:
        False when the recipe doesn't exist
    """

    def _impl(sess: Session) -> bool:
        recipe = get_recipe_by_id(recipe_id, session=sess)
        if recipe is None:
            return False
        if recipe.author_id == user_id:
            return True

        user = user_service.get_user_by_id(user_id, session=sess)
        return user is not None and user.is_admin

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def get_global_stats(session: Optional[Session] = None) -> RecipeStats:
    """
    Catalog-wide statistics.

    Returns:
        RecipeStats with total and published counts and the top rated
        published recipes
    """

    def _impl(sess: Session) -> RecipeStats:
        return RecipeStats(
            total_recipes=count_recipes(session=sess),
            published_recipes=count_published_recipes(session=sess),
            top_rated_recipes=list_top_rated_recipes(STATS_TOP_RATED_LIMIT, session=sess),
        )

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def count_recipes(session: Optional[Session] = None) -> int:
    """Count all recipes."""

    def _impl(sess: Session) -> int:
        return sess.query(func.count(Recipe.id)).scalar() or 0

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def count_published_recipes(session: Optional[Session] = None) -> int:
    """Count published recipes."""

    def _impl(sess: Session) -> int:
        return sess.query(func.count(Recipe.id)).filter(Recipe.published.is_(True)).scalar() or 0

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def count_recipes_in_category(category_id: str, session: Optional[Session] = None) -> int:
    """Count recipes in a category, published or not."""

    def _impl(sess: Session) -> int:
        return (
            sess.query(func.count(Recipe.id)).filter(Recipe.category_id == category_id).scalar()
            or 0
        )

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)
