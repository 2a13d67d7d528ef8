"""Services package - Business logic layer for the Recipe Catalog.

This package contains all service modules that provide business logic
and database operations for the application.

Architecture:
- Services: Stateless functions organized by domain (category, user, recipe)
- Transactions: Managed via session_scope() context manager
- Exceptions: Consistent error handling via ServiceError hierarchy
- Validation: Input validation before database operations

Service Modules:
- category_service: Category catalog CRUD, slugs and search
- user_service: Accounts, authentication and favorite lists
- recipe_service: Recipes, listings, search, counters and statistics

Infrastructure:
- exceptions: Custom exception classes for service layer errors
- database: Session management and database utilities
- credentials: Password hashing
- logging_utils: Structured operation logging
- dto: Read-model structures (RecipeStats)
"""

# Service modules
from . import (
    category_service,
    credentials,
    database,
    recipe_service,
    user_service,
)

# Data transfer objects
from .dto import RecipeStats

# Exceptions
from .exceptions import (
    AuthorNotFound,
    CategoryNotFound,
    CategoryNotFoundById,
    DatabaseError,
    DuplicateEmail,
    DuplicateName,
    DuplicateSlug,
    DuplicateUsername,
    DuplicateValue,
    InvalidCredential,
    InvalidReference,
    NotFound,
    RecipeNotFoundById,
    ServiceError,
    StoreUnavailable,
    UserNotFoundById,
    ValidationError,
)

# Infrastructure
from .database import session_scope

__all__ = [
    # Service modules
    "category_service",
    "credentials",
    "database",
    "recipe_service",
    "user_service",
    # DTOs
    "RecipeStats",
    # Exceptions
    "ServiceError",
    "NotFound",
    "CategoryNotFoundById",
    "UserNotFoundById",
    "RecipeNotFoundById",
    "DuplicateValue",
    "DuplicateName",
    "DuplicateSlug",
    "DuplicateEmail",
    "DuplicateUsername",
    "InvalidReference",
    "CategoryNotFound",
    "AuthorNotFound",
    "InvalidCredential",
    "ValidationError",
    "DatabaseError",
    "StoreUnavailable",
    # Infrastructure - Session management
    "session_scope",
]
