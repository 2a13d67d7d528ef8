"""
User model for recipe authors and readers.
"""

from typing import Any, Dict

from sqlalchemy import JSON, Boolean, Column, Index, String, Text

from src.utils.constants import ROLE_ADMIN

from .base import BaseModel


class User(BaseModel):
    """
    User account.

    Attributes:
        username: Unique login name (stored trimmed)
        email: Unique email address (stored lower-cased)
        password_hash: One-way hash of the password; never the plaintext
        first_name / last_name: Optional personal names
        bio: Optional profile text
        profile_image_url: Optional profile image reference
        roles: List of role tags, e.g. ["USER"] or ["USER", "ADMIN"]
        favorite_recipe_ids: Recipe ids the user marked as favorite (no duplicates)
        enabled: Disabled accounts cannot authenticate
    """

    __tablename__ = "users"

    username = Column(String(50), nullable=False)
    email = Column(String(254), nullable=False)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    bio = Column(Text, nullable=True)
    profile_image_url = Column(String(500), nullable=True)

    # Lists are replaced wholesale on write; in-place mutation isn't tracked
    roles = Column(JSON, nullable=False, default=list)
    favorite_recipe_ids = Column(JSON, nullable=False, default=list)

    enabled = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        Index("idx_user_username", "username"),
        Index("idx_user_email", "email"),
    )

    @property
    def display_name(self) -> str:
        """Full name when both parts are set, otherwise the username."""
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name}"
        return self.username

    def has_role(self, role: str) -> bool:
        """Check whether the user carries a role tag."""
        return role in (self.roles or [])

    @property
    def is_admin(self) -> bool:
        return self.has_role(ROLE_ADMIN)

    def to_dict(self, include_password_hash: bool = False) -> Dict[str, Any]:
        """
        Convert user to dictionary.

        Args:
            include_password_hash: Keep the password hash in the result.
                Off by default so the hash isn't exposed by accident.

        Returns:
            Dictionary representation
        """
        result = super().to_dict()
        if not include_password_hash:
            result.pop("password_hash", None)
        result["display_name"] = self.display_name
        return result

    def __repr__(self) -> str:
        return f"<User(username='{self.username}', email='{self.email}')>"
