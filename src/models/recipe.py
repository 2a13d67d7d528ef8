"""
Recipe model.

A recipe is stored as one document: the ingredient list, the instruction
steps, the tags and the nutrition summary are JSON columns on the recipe
row. category_id and author_id are weak references (plain ids, no foreign
keys).
"""

from typing import Any, Dict

from sqlalchemy import JSON, Boolean, Column, Enum, Float, Index, Integer, String, Text

from .base import BaseModel
from .enums import DifficultyLevel


class Recipe(BaseModel):
    """
    Recipe model.

    Attributes:
        title: Recipe title (3-200 chars)
        description: Optional description
        ingredients: Ordered list of {name, quantity, unit, optional}
        instructions: Ordered list of {step_number, description, image_url, time_minutes}
        category_id: Id of an existing Category
        author_id: Id of an existing User
        image_url: Optional image reference
        servings: Number of servings (1-50)
        prep_time_minutes / cook_time_minutes: Non-negative durations
        difficulty: DifficultyLevel
        tags: Free-form tags
        nutrition_info: Optional {calories, protein, carbohydrates, fat, fiber, sugar}
        rating: Running average of submitted scores
        rating_count: Number of submitted scores
        favorite_count: Number of users who favorited the recipe
        view_count: Number of detail views
        published: Whether the recipe appears in public listings and search

    The four counters are server-owned: they only change through
    recipe_service's rate/favorite/view operations.
    """

    __tablename__ = "recipes"

    # User-editable content
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    ingredients = Column(JSON, nullable=False, default=list)
    instructions = Column(JSON, nullable=False, default=list)
    category_id = Column(String(36), nullable=False)
    author_id = Column(String(36), nullable=False)
    image_url = Column(String(500), nullable=True)
    servings = Column(Integer, nullable=True)
    prep_time_minutes = Column(Integer, nullable=True)
    cook_time_minutes = Column(Integer, nullable=True)
    difficulty = Column(
        Enum(DifficultyLevel, values_callable=lambda levels: [level.value for level in levels]),
        nullable=True,
    )
    tags = Column(JSON, nullable=False, default=list)
    nutrition_info = Column(JSON, nullable=True)
    published = Column(Boolean, nullable=False, default=False)

    # Server-owned counters
    rating = Column(Float, nullable=False, default=0.0)
    rating_count = Column(Integer, nullable=False, default=0)
    favorite_count = Column(Integer, nullable=False, default=0)
    view_count = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("idx_recipe_category", "category_id"),
        Index("idx_recipe_author", "author_id"),
        Index("idx_recipe_published_created", "published", "created_at"),
        Index("idx_recipe_published_rating", "published", "rating"),
    )

    @property
    def total_time_minutes(self) -> int:
        """Preparation plus cooking time; missing values count as zero."""
        return (self.prep_time_minutes or 0) + (self.cook_time_minutes or 0)

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["total_time_minutes"] = self.total_time_minutes
        return result

    def __repr__(self) -> str:
        return (
            f"<Recipe(title='{self.title}', category_id='{self.category_id}', "
            f"published={self.published})>"
        )
