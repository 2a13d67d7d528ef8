"""
Category model for recipe grouping.

This model represents flat categories for organizing recipes
(e.g., "Entrées", "Desserts", "Soupes").
"""

from sqlalchemy import Boolean, Column, Index, String, Text

from .base import BaseModel


class Category(BaseModel):
    """
    Category model representing recipe grouping.

    Categories are flat (no hierarchy). Recipes reference them by id
    without a foreign key, so deleting a category leaves the recipes'
    category_id dangling.

    Attributes:
        name: Category display name (e.g., "Plats principaux")
        slug: URL-friendly identifier derived from name (e.g., "plats-principaux")
        description: Optional description text
        color: Display color (hex code, e.g. "#3498db")
        icon_url: Optional icon reference
        active: Whether the category is offered in listings
    """

    __tablename__ = "categories"

    # Basic information. Uniqueness of name/slug is enforced by
    # category_service, not by the table.
    name = Column(String(100), nullable=False)
    slug = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    color = Column(String(20), nullable=True)
    icon_url = Column(String(500), nullable=True)
    active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        Index("idx_category_name", "name"),
        Index("idx_category_slug", "slug"),
        Index("idx_category_active", "active"),
    )

    def __repr__(self) -> str:
        return f"<Category(name='{self.name}', slug='{self.slug}')>"
