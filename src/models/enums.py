"""
Enumerations for recipe models.

This module contains enums used by the recipe model:
- DifficultyLevel: How demanding a recipe is to prepare
"""

from enum import Enum

from src.utils.constants import DIFFICULTY_LABELS


class DifficultyLevel(str, Enum):
    """
    Recipe difficulty level.

    Values:
        EASY: Suitable for beginners
        MEDIUM: Requires some technique
        HARD: Demanding, for experienced cooks
    """

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def display_name(self) -> str:
        """Human readable label (e.g. "Easy")."""
        return DIFFICULTY_LABELS[self.value]
