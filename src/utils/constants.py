"""
Constants for the Recipe Catalog application.

This module defines all system-wide constants including:
- Application metadata
- Field length and range limits
- User role tags
- Listing defaults
- Validation error messages
"""

from typing import Dict, List

# ============================================================================
# Application Metadata
# ============================================================================

APP_NAME = "Recipe Catalog"
APP_VERSION = "0.1.0"
DATABASE_FILENAME = "recipe_catalog.db"

# ============================================================================
# Field Limits
# ============================================================================

# Category
MIN_CATEGORY_NAME_LENGTH = 2
MAX_CATEGORY_NAME_LENGTH = 100
MAX_COLOR_LENGTH = 20

# User
MIN_USERNAME_LENGTH = 3
MAX_USERNAME_LENGTH = 50
MAX_EMAIL_LENGTH = 254
MIN_PASSWORD_LENGTH = 6
MAX_PERSON_NAME_LENGTH = 100

# Recipe
MIN_TITLE_LENGTH = 3
MAX_TITLE_LENGTH = 200
MIN_SERVINGS = 1
MAX_SERVINGS = 50

MAX_URL_LENGTH = 500
MAX_DESCRIPTION_LENGTH = 2000

# ============================================================================
# User Roles
# ============================================================================

ROLE_USER = "USER"
ROLE_ADMIN = "ADMIN"

DEFAULT_ROLES: List[str] = [ROLE_USER]

# ============================================================================
# Listing Defaults
# ============================================================================

DEFAULT_LIST_LIMIT = 10
STATS_TOP_RATED_LIMIT = 10

# Nutrition summary keys accepted on recipes
NUTRITION_FIELDS: List[str] = [
    "calories",
    "protein",
    "carbohydrates",
    "fat",
    "fiber",
    "sugar",
]

# Human readable labels for difficulty levels
DIFFICULTY_LABELS: Dict[str, str] = {
    "easy": "Easy",
    "medium": "Medium",
    "hard": "Hard",
}

# ============================================================================
# Validation Messages
# ============================================================================

ERROR_REQUIRED_FIELD = "This field is required"
ERROR_INVALID_NUMBER = "Please enter a valid number"
ERROR_INVALID_INTEGER = "Please enter a whole number"
ERROR_INVALID_NON_NEGATIVE = "Value must be zero or greater"
ERROR_INVALID_EMAIL = "Invalid email format"
ERROR_INVALID_DIFFICULTY = "Difficulty must be one of: easy, medium, hard"
ERROR_EMPTY_SLUG = "Name must contain at least one letter or digit"
ERROR_INVALID_TEXT = "Must be text"
