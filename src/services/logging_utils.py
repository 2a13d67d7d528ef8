"""Service layer logging utilities.

Provides structured logging functions for service operations, enabling
consistent log format and context across the catalog services.

Usage:
    from src.services.logging_utils import get_service_logger, log_operation

    logger = get_service_logger(__name__)

    # Log successful operation
    log_operation(
        logger,
        operation="create_recipe",
        outcome="success",
        recipe_id="6f1c...",
        category_id="a93e...",
    )

    # Log a rejected operation
    log_operation(
        logger,
        operation="create_category",
        outcome="duplicate_name",
        level=logging.WARNING,
        category_name="Desserts",
    )
"""

import logging
from typing import Any

LOGGER_PREFIX = "recipe_catalog.services"


def get_service_logger(name: str) -> logging.Logger:
    """
    Get a logger configured for service operations.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Logger named 'recipe_catalog.services.<module>'.

    Example:
        >>> logger = get_service_logger(__name__)
        >>> logger.name
        'recipe_catalog.services.recipe_service'
    """
    if "." in name:
        name = name.split(".")[-1]
    return logging.getLogger(f"{LOGGER_PREFIX}.{name}")


def log_operation(
    logger: logging.Logger,
    operation: str,
    outcome: str,
    level: int = logging.INFO,
    **context: Any,
) -> None:
    """
    Log a service operation with structured context.

    The message reads "<operation>: <outcome>"; the operation, outcome and
    context fields are attached to the record via 'extra'.

    Args:
        logger: Logger instance to use
        operation: Operation name (e.g., "rate_recipe", "authenticate")
        outcome: Outcome description (e.g., "success", "not_found")
        level: Log level (default: INFO). Use DEBUG for frequent read paths.
        **context: Additional context fields (entity IDs, error details, etc.)
            Common fields:
            - recipe_id / category_id / user_id: Entity being processed
            - error: Error message if outcome is a failure
    """
    extra = {
        "operation": operation,
        "outcome": outcome,
        **context,
    }
    logger.log(level, f"{operation}: {outcome}", extra=extra)
