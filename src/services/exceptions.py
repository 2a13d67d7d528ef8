"""Service layer exception classes for the Recipe Catalog.

This module defines all custom exceptions used by the service layer to
provide consistent error handling across the application.

Business failures derive from ServiceError; callers map them to "bad
request" style responses. Infrastructure failures derive from
DatabaseError and map to "service error" responses.

Exception Hierarchy:
    ServiceError (business failures)
    ├── NotFound
    │   ├── CategoryNotFoundById
    │   ├── UserNotFoundById
    │   └── RecipeNotFoundById
    ├── DuplicateValue
    │   ├── DuplicateName
    │   ├── DuplicateSlug
    │   ├── DuplicateEmail
    │   └── DuplicateUsername
    ├── InvalidReference
    │   ├── CategoryNotFound
    │   └── AuthorNotFound
    ├── InvalidCredential
    └── ValidationError
    DatabaseError (infrastructure failures)
    └── StoreUnavailable
"""

from typing import Optional


class ServiceError(Exception):
    """Base exception for all business-rule failures in the service layer."""

    pass


# ============================================================================
# Missing entities
# ============================================================================


class NotFound(ServiceError):
    """Raised when an operation targets an entity that does not exist.

    Args:
        entity: Entity kind ("Category", "User", "Recipe")
        entity_id: The identifier that was not found
    """

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} with ID {entity_id} not found")


class CategoryNotFoundById(NotFound):
    """Raised when a category cannot be found by ID.

    Example:
        >>> raise CategoryNotFoundById("3f2a")
        CategoryNotFoundById: Category with ID 3f2a not found
    """

    def __init__(self, category_id: str):
        self.category_id = category_id
        super().__init__("Category", category_id)


class UserNotFoundById(NotFound):
    """Raised when a user cannot be found by ID."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__("User", user_id)


class RecipeNotFoundById(NotFound):
    """Raised when a recipe cannot be found by ID."""

    def __init__(self, recipe_id: str):
        self.recipe_id = recipe_id
        super().__init__("Recipe", recipe_id)


# ============================================================================
# Uniqueness violations
# ============================================================================


class DuplicateValue(ServiceError):
    """Raised when a create/update would break a uniqueness rule.

    Args:
        entity: Entity kind
        field: Field whose value must be unique
        value: The conflicting value
    """

    def __init__(self, entity: str, field: str, value: str):
        self.entity = entity
        self.field = field
        self.value = value
        super().__init__(f"{entity} with {field} '{value}' already exists")


class DuplicateName(DuplicateValue):
    """Raised when a category name is already taken.

    Example:
        >>> raise DuplicateName("Desserts")
        DuplicateName: Category with name 'Desserts' already exists
    """

    def __init__(self, name: str):
        self.name = name
        super().__init__("Category", "name", name)


class DuplicateSlug(DuplicateValue):
    """Raised when a category's derived slug collides with another category."""

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__("Category", "slug", slug)


class DuplicateEmail(DuplicateValue):
    """Raised when an email address is already registered."""

    def __init__(self, email: str):
        self.email = email
        super().__init__("User", "email", email)


class DuplicateUsername(DuplicateValue):
    """Raised when a username is already taken."""

    def __init__(self, username: str):
        self.username = username
        super().__init__("User", "username", username)


# ============================================================================
# Cross-entity references
# ============================================================================


class InvalidReference(ServiceError):
    """Raised when a recipe references an entity that does not resolve."""

    def __init__(self, entity: str, entity_id: Optional[str]):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"Referenced {entity.lower()} '{entity_id}' not found")


class CategoryNotFound(InvalidReference):
    """Raised when a recipe's category_id does not resolve to a category."""

    def __init__(self, category_id: Optional[str]):
        self.category_id = category_id
        super().__init__("Category", category_id)


class AuthorNotFound(InvalidReference):
    """Raised when a recipe's author_id does not resolve to a user."""

    def __init__(self, author_id: Optional[str]):
        self.author_id = author_id
        super().__init__("Author", author_id)


# ============================================================================
# Credentials and validation
# ============================================================================


class InvalidCredential(ServiceError):
    """Raised when a password does not verify against the stored hash."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class ValidationError(ServiceError):
    """Raised when data validation fails."""

    def __init__(self, errors: list):
        self.errors = errors
        error_msg = "; ".join(errors)
        super().__init__(f"Validation failed: {error_msg}")


# ============================================================================
# Infrastructure
# ============================================================================


class DatabaseError(Exception):
    """Raised when a database operation fails."""

    def __init__(self, message: str, original_error: Exception = None):
        self.original_error = original_error
        super().__init__(f"Database error: {message}")


class StoreUnavailable(DatabaseError):
    """Raised when the document store cannot be reached or times out."""

    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(f"store unavailable: {message}", original_error)
