"""
Input validation functions for the Recipe Catalog application.

This module provides validation functions for all user inputs including:
- Numeric validation (non-negative, integer ranges)
- String validation (length, format, required fields)
- Email format validation
- Whole-record validation for categories, users and recipes
"""

import re
from typing import Any, Optional, Tuple

from src.models.enums import DifficultyLevel

from .constants import (
    ERROR_INVALID_DIFFICULTY,
    ERROR_INVALID_EMAIL,
    ERROR_INVALID_INTEGER,
    ERROR_INVALID_NON_NEGATIVE,
    ERROR_INVALID_NUMBER,
    ERROR_INVALID_TEXT,
    ERROR_REQUIRED_FIELD,
    MAX_CATEGORY_NAME_LENGTH,
    MAX_COLOR_LENGTH,
    MAX_DESCRIPTION_LENGTH,
    MAX_EMAIL_LENGTH,
    MAX_PERSON_NAME_LENGTH,
    MAX_SERVINGS,
    MAX_TITLE_LENGTH,
    MAX_URL_LENGTH,
    MAX_USERNAME_LENGTH,
    MIN_CATEGORY_NAME_LENGTH,
    MIN_PASSWORD_LENGTH,
    MIN_SERVINGS,
    MIN_TITLE_LENGTH,
    MIN_USERNAME_LENGTH,
    NUTRITION_FIELDS,
)

EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")


def validate_required_string(value: Optional[str], field_name: str = "Field") -> Tuple[bool, str]:
    """
    Validate that a string field is not empty.

    Args:
        value: The string value to validate
        field_name: Name of the field for error messages

    Returns:
        Tuple of (is_valid, error_message)
    """
    if value is None:
        return False, f"{field_name}: {ERROR_REQUIRED_FIELD}"
    if not isinstance(value, str):
        return False, f"{field_name}: {ERROR_INVALID_TEXT}"
    if value.strip() == "":
        return False, f"{field_name}: {ERROR_REQUIRED_FIELD}"
    return True, ""


def validate_string_length(
    value: Optional[str], max_length: int, field_name: str = "Field", min_length: int = 0
) -> Tuple[bool, str]:
    """
    Validate that a string is within the allowed length bounds.

    Args:
        value: The string value to validate (None is accepted)
        max_length: Maximum allowed length
        field_name: Name of the field for error messages
        min_length: Minimum allowed length (default 0)

    Returns:
        Tuple of (is_valid, error_message)
    """
    if value is None:
        return True, ""
    if len(value) < min_length:
        return False, f"{field_name}: Must be at least {min_length} characters"
    if len(value) > max_length:
        return False, f"{field_name}: Must be {max_length} characters or less"
    return True, ""


def validate_non_negative_number(value: Any, field_name: str = "Field") -> Tuple[bool, str]:
    """
    Validate that a value is a non-negative number (>= 0).

    Args:
        value: The value to validate
        field_name: Name of the field for error messages

    Returns:
        Tuple of (is_valid, error_message)
    """
    if isinstance(value, bool):
        return False, f"{field_name}: {ERROR_INVALID_NUMBER}"
    try:
        num_value = float(value)
    except (ValueError, TypeError):
        return False, f"{field_name}: {ERROR_INVALID_NUMBER}"
    if num_value < 0:
        return False, f"{field_name}: {ERROR_INVALID_NON_NEGATIVE}"
    return True, ""


def validate_integer_range(
    value: Any, min_value: int, max_value: Optional[int], field_name: str = "Field"
) -> Tuple[bool, str]:
    """
    Validate that a value is a whole number within [min_value, max_value].

    Args:
        value: The value to validate
        min_value: Minimum allowed value
        max_value: Maximum allowed value (None for no upper bound)
        field_name: Name of the field for error messages

    Returns:
        Tuple of (is_valid, error_message)
    """
    if isinstance(value, bool) or not isinstance(value, int):
        return False, f"{field_name}: {ERROR_INVALID_INTEGER}"
    if value < min_value:
        return False, f"{field_name}: Must be at least {min_value}"
    if max_value is not None and value > max_value:
        return False, f"{field_name}: Must be {max_value} or less"
    return True, ""


def validate_email(value: Optional[str], field_name: str = "Email") -> Tuple[bool, str]:
    """Validate email presence, length and format."""
    is_valid, error = validate_required_string(value, field_name)
    if not is_valid:
        return is_valid, error
    email = value.strip()
    if len(email) > MAX_EMAIL_LENGTH or not EMAIL_PATTERN.match(email):
        return False, f"{field_name}: {ERROR_INVALID_EMAIL}"
    return True, ""


def validate_password(value: Optional[str], field_name: str = "Password") -> Tuple[bool, str]:
    """Validate that a plaintext password is present and long enough."""
    if not value:
        return False, f"{field_name}: {ERROR_REQUIRED_FIELD}"
    if len(value) < MIN_PASSWORD_LENGTH:
        return False, f"{field_name}: Must be at least {MIN_PASSWORD_LENGTH} characters"
    return True, ""


def parse_difficulty(value: Any) -> Optional[DifficultyLevel]:
    """
    Convert a difficulty value to DifficultyLevel.

    Accepts a DifficultyLevel, or its value/name in any case
    ("easy", "EASY", "Easy"). Returns None for None.

    Raises:
        ValueError: If the value does not name a difficulty level
    """
    if value is None or isinstance(value, DifficultyLevel):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        for level in DifficultyLevel:
            if level.value == normalized:
                return level
    raise ValueError(f"Unknown difficulty level: {value!r}")


def normalize_email(email: Optional[str]) -> Optional[str]:
    """Lower-case and trim an email address; None stays None."""
    if email is None:
        return None
    return email.strip().lower()


def normalize_username(username: Optional[str]) -> Optional[str]:
    """Trim a username; None stays None."""
    if username is None:
        return None
    return username.strip()


def sanitize_string(value: Optional[str]) -> Optional[str]:
    """
    Strip whitespace and convert empty strings to None.

    Args:
        value: The string value to sanitize

    Returns:
        Sanitized string or None
    """
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


# ============================================================================
# Record Validation
# ============================================================================


def validate_category_data(data: dict) -> Tuple[bool, list]:
    """
    Validate all fields for a category.

    Args:
        data: Dictionary containing category fields

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    errors = []

    name = data.get("name")
    is_valid, error = validate_required_string(name, "Category Name")
    if not is_valid:
        errors.append(error)
    else:
        is_valid, error = validate_string_length(
            name.strip(),
            MAX_CATEGORY_NAME_LENGTH,
            "Category Name",
            min_length=MIN_CATEGORY_NAME_LENGTH,
        )
        if not is_valid:
            errors.append(error)

    is_valid, error = validate_string_length(
        data.get("description"), MAX_DESCRIPTION_LENGTH, "Description"
    )
    if not is_valid:
        errors.append(error)

    is_valid, error = validate_string_length(data.get("color"), MAX_COLOR_LENGTH, "Color")
    if not is_valid:
        errors.append(error)

    is_valid, error = validate_string_length(data.get("icon_url"), MAX_URL_LENGTH, "Icon URL")
    if not is_valid:
        errors.append(error)

    return len(errors) == 0, errors


def validate_user_data(data: dict, require_password: bool = True) -> Tuple[bool, list]:
    """
    Validate all fields for a user account.

    Args:
        data: Dictionary containing user fields
        require_password: False on updates, where an empty password keeps
            the stored hash

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    errors = []

    username = data.get("username")
    is_valid, error = validate_required_string(username, "Username")
    if not is_valid:
        errors.append(error)
    else:
        is_valid, error = validate_string_length(
            username.strip(), MAX_USERNAME_LENGTH, "Username", min_length=MIN_USERNAME_LENGTH
        )
        if not is_valid:
            errors.append(error)

    is_valid, error = validate_email(data.get("email"))
    if not is_valid:
        errors.append(error)

    password = data.get("password")
    if require_password or password:
        is_valid, error = validate_password(password)
        if not is_valid:
            errors.append(error)

    for field, label in (("first_name", "First Name"), ("last_name", "Last Name")):
        is_valid, error = validate_string_length(data.get(field), MAX_PERSON_NAME_LENGTH, label)
        if not is_valid:
            errors.append(error)

    is_valid, error = validate_string_length(data.get("bio"), MAX_DESCRIPTION_LENGTH, "Bio")
    if not is_valid:
        errors.append(error)

    roles = data.get("roles")
    if roles is not None and (
        not isinstance(roles, (list, tuple, set))
        or not all(isinstance(role, str) and role.strip() for role in roles)
    ):
        errors.append("Roles: Must be a list of role names")

    return len(errors) == 0, errors


def _validate_ingredients(ingredients: Any) -> list:
    errors = []
    if not isinstance(ingredients, list):
        return ["Ingredients: Must be a list"]
    for index, ingredient in enumerate(ingredients, start=1):
        label = f"Ingredient {index}"
        if not isinstance(ingredient, dict):
            errors.append(f"{label}: Must be an object")
            continue
        is_valid, error = validate_required_string(ingredient.get("name"), f"{label} Name")
        if not is_valid:
            errors.append(error)
        if ingredient.get("quantity") is not None:
            is_valid, error = validate_non_negative_number(
                ingredient["quantity"], f"{label} Quantity"
            )
            if not is_valid:
                errors.append(error)
    return errors


def _validate_instructions(instructions: Any) -> list:
    errors = []
    if not isinstance(instructions, list):
        return ["Instructions: Must be a list"]
    for index, instruction in enumerate(instructions, start=1):
        label = f"Instruction {index}"
        if not isinstance(instruction, dict):
            errors.append(f"{label}: Must be an object")
            continue
        is_valid, error = validate_required_string(
            instruction.get("description"), f"{label} Description"
        )
        if not is_valid:
            errors.append(error)
        if instruction.get("time_minutes") is not None:
            is_valid, error = validate_integer_range(
                instruction["time_minutes"], 0, None, f"{label} Time"
            )
            if not is_valid:
                errors.append(error)
    return errors


def validate_recipe_data(data: dict) -> Tuple[bool, list]:  # noqa: C901
    """
    Validate all fields for a recipe.

    Category and author existence is checked by the recipe service, not
    here; this only checks that the references are present.

    Args:
        data: Dictionary containing recipe fields

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    errors = []

    title = data.get("title")
    is_valid, error = validate_required_string(title, "Title")
    if not is_valid:
        errors.append(error)
    else:
        is_valid, error = validate_string_length(
            title.strip(), MAX_TITLE_LENGTH, "Title", min_length=MIN_TITLE_LENGTH
        )
        if not is_valid:
            errors.append(error)

    is_valid, error = validate_required_string(data.get("category_id"), "Category")
    if not is_valid:
        errors.append(error)

    is_valid, error = validate_required_string(data.get("author_id"), "Author")
    if not is_valid:
        errors.append(error)

    is_valid, error = validate_string_length(
        data.get("description"), MAX_DESCRIPTION_LENGTH, "Description"
    )
    if not is_valid:
        errors.append(error)

    if data.get("ingredients") is not None:
        errors.extend(_validate_ingredients(data["ingredients"]))

    if data.get("instructions") is not None:
        errors.extend(_validate_instructions(data["instructions"]))

    if data.get("servings") is not None:
        is_valid, error = validate_integer_range(
            data["servings"], MIN_SERVINGS, MAX_SERVINGS, "Servings"
        )
        if not is_valid:
            errors.append(error)

    for field, label in (
        ("prep_time_minutes", "Preparation Time"),
        ("cook_time_minutes", "Cooking Time"),
    ):
        if data.get(field) is not None:
            is_valid, error = validate_integer_range(data[field], 0, None, label)
            if not is_valid:
                errors.append(error)

    if data.get("difficulty") is not None:
        try:
            parse_difficulty(data["difficulty"])
        except ValueError:
            errors.append(f"Difficulty: {ERROR_INVALID_DIFFICULTY}")

    tags = data.get("tags")
    if tags is not None and (
        not isinstance(tags, list) or not all(isinstance(tag, str) for tag in tags)
    ):
        errors.append("Tags: Must be a list of strings")

    nutrition = data.get("nutrition_info")
    if nutrition is not None:
        if not isinstance(nutrition, dict):
            errors.append("Nutrition: Must be an object")
        else:
            unknown = sorted(set(nutrition) - set(NUTRITION_FIELDS))
            if unknown:
                errors.append(f"Nutrition: Unknown fields {', '.join(unknown)}")
            for key in NUTRITION_FIELDS:
                if nutrition.get(key) is not None:
                    is_valid, error = validate_non_negative_number(
                        nutrition[key], f"Nutrition {key.title()}"
                    )
                    if not is_valid:
                        errors.append(error)

    return len(errors) == 0, errors
