"""Data Transfer Objects for service layer.

Read-model structures returned by services that aggregate several queries.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from src.models.recipe import Recipe


@dataclass
class RecipeStats:
    """Catalog-wide recipe statistics snapshot.

    Attributes:
        total_recipes: Number of recipes, published or not
        published_recipes: Number of published recipes
        top_rated_recipes: Best rated published recipes, highest first
    """

    total_recipes: int
    published_recipes: int
    top_rated_recipes: List[Recipe] = field(default_factory=list)

    @property
    def unpublished_recipes(self) -> int:
        return self.total_recipes - self.published_recipes

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_recipes": self.total_recipes,
            "published_recipes": self.published_recipes,
            "top_rated_recipes": [recipe.to_dict() for recipe in self.top_rated_recipes],
        }
