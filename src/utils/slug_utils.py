"""Slug generation utilities for category naming.

This module derives URL-safe, deterministic slugs from category names.
The transform folds the accented Latin letters commonly found in recipe
category names (French, Spanish, Portuguese...) to plain ASCII and joins
words with hyphens.

Examples:
    >>> create_slug("Plats principaux")
    'plats-principaux'

    >>> create_slug("Entrées")
    'entrees'

    >>> create_slug("  Pâtisseries & Desserts  ")
    'patisseries-desserts'
"""

import re

# Accented character folding table. Characters not listed here are removed
# by the character filter below (e.g. "ñ", "œ", "ß").
_ACCENT_FOLDING = str.maketrans(
    {
        **{ch: "a" for ch in "àáâãäå"},
        **{ch: "e" for ch in "èéêë"},
        **{ch: "i" for ch in "ìíîï"},
        **{ch: "o" for ch in "òóôõö"},
        **{ch: "u" for ch in "ùúûü"},
        **{ch: "y" for ch in "ýÿ"},
        "ç": "c",
    }
)

# ASCII flag keeps \s limited to [ \t\n\r\f\v]
_DISALLOWED_CHARS = re.compile(r"[^a-z0-9\s-]", re.ASCII)
_WHITESPACE_RUN = re.compile(r"\s+", re.ASCII)
_HYPHEN_RUN = re.compile(r"-+")


def create_slug(name: str) -> str:
    """Generate a URL-safe slug from a category name.

    Algorithm:
        1. Convert to lowercase
        2. Fold accented vowels and c-cedilla to their ASCII letter
        3. Remove every character outside [a-z0-9], whitespace and hyphen
        4. Replace whitespace runs with a single hyphen
        5. Collapse consecutive hyphens
        6. Strip leading/trailing hyphens

    Args:
        name: Category name to convert

    Returns:
        Slug string (lowercase alphanumerics separated by single hyphens).
        Empty when the name has no letters or digits; callers validate.

    Examples:
        >>> create_slug("Soupes froides")
        'soupes-froides'

        >>> create_slug("Crème brûlée")
        'creme-brulee'

        >>> create_slug("Apéritifs -- Tapas")
        'aperitifs-tapas'
    """
    if name is None:
        return ""

    slug = name.lower()
    slug = slug.translate(_ACCENT_FOLDING)
    slug = _DISALLOWED_CHARS.sub("", slug)
    slug = _WHITESPACE_RUN.sub("-", slug)
    slug = _HYPHEN_RUN.sub("-", slug)
    return slug.strip("-")


def validate_slug_format(slug: str) -> bool:
    """Validate that a slug meets format requirements.

    Valid slugs contain only lowercase letters, digits and single hyphens,
    and do not start or end with a hyphen.

    Examples:
        >>> validate_slug_format("plats-principaux")
        True

        >>> validate_slug_format("Plats")
        False

        >>> validate_slug_format("-desserts")
        False

        >>> validate_slug_format("")
        False
    """
    if not slug:
        return False
    return re.fullmatch(r"[a-z0-9]+(-[a-z0-9]+)*", slug) is not None
