"""Pytest configuration and fixtures for service layer tests."""

from datetime import timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, scoped_session

from src.models.base import Base
from src.services import credentials
from src.utils.datetime_utils import utc_now


@pytest.fixture(autouse=True)
def fast_password_hashing():
    """Use a cheap hashing method so user tests stay fast."""
    credentials.set_hash_method("pbkdf2:sha256:1000")
    yield
    credentials.set_hash_method(None)


@pytest.fixture(scope="function")
def test_db():
    """Provide a clean test database for each test function.

    This fixture:
    1. Creates an in-memory SQLite database
    2. Creates all tables
    3. Provides the database to the test
    4. Drops all tables after the test completes
    """
    # Create in-memory SQLite database for testing
    engine = create_engine("sqlite:///:memory:", echo=False)

    # Create all tables
    Base.metadata.create_all(engine)

    # Create session factory
    session_factory = sessionmaker(bind=engine, expire_on_commit=False)
    Session = scoped_session(session_factory)

    # Monkey-patch the global session factory for tests
    import src.services.database as db_module

    original_get_session = db_module.get_session_factory
    db_module.get_session_factory = lambda: Session

    # Provide database to test
    yield Session

    # Cleanup
    Session.remove()
    Base.metadata.drop_all(engine)
    engine.dispose()

    # Restore original session factory
    db_module.get_session_factory = original_get_session


@pytest.fixture(scope="function")
def sample_category(test_db):
    """Provide a sample category for tests."""
    from src.services import category_service

    return category_service.create_category(
        name="Plats principaux",
        description="Main courses",
        color="#3498db",
    )


@pytest.fixture(scope="function")
def sample_user(test_db):
    """Provide a regular user (password 'secret123')."""
    from src.services import user_service

    return user_service.create_user({
        "username": "alice",
        "email": "alice@example.com",
        "password": "secret123",
        "first_name": "Alice",
        "last_name": "Martin",
    })


@pytest.fixture(scope="function")
def admin_user(test_db):
    """Provide a user carrying the ADMIN role (password 'admin123')."""
    from src.services import user_service

    return user_service.create_user({
        "username": "admin",
        "email": "admin@example.com",
        "password": "admin123",
        "roles": ["USER", "ADMIN"],
    })


@pytest.fixture(scope="function")
def other_user(test_db):
    """Provide a second regular user (password 'bobpass1')."""
    from src.services import user_service

    return user_service.create_user({
        "username": "bob",
        "email": "bob@example.com",
        "password": "bobpass1",
    })


@pytest.fixture(scope="function")
def sample_recipe(test_db, sample_category, sample_user):
    """Provide a published recipe authored by sample_user."""
    from src.services import recipe_service

    return recipe_service.create_recipe({
        "title": "Quinoa Salad",
        "description": "Fresh summer salad",
        "category_id": sample_category.id,
        "author_id": sample_user.id,
        "servings": 4,
        "prep_time_minutes": 15,
        "cook_time_minutes": 20,
        "difficulty": "easy",
        "ingredients": [
            {"name": "Quinoa", "quantity": 200, "unit": "g"},
            {"name": "Cucumber", "quantity": 1},
        ],
        "instructions": [
            {"description": "Cook the quinoa"},
            {"description": "Dice the cucumber", "time_minutes": 5},
        ],
        "tags": ["vegetarian", "summer"],
        "published": True,
    })


@pytest.fixture(scope="function")
def make_recipe(test_db, sample_category, sample_user):
    """Factory creating recipes with an explicit age.

    make_recipe("Title", age_minutes=5, **fields) creates the recipe and
    backdates created_at so newest-first orderings are deterministic.
    """
    from src.models import Recipe
    from src.services import recipe_service

    def _make(title, age_minutes=0, **fields):
        data = {
            "title": title,
            "category_id": sample_category.id,
            "author_id": sample_user.id,
            "published": True,
        }
        data.update(fields)
        recipe = recipe_service.create_recipe(data)

        session = test_db()
        stored = session.get(Recipe, recipe.id)
        stored.created_at = utc_now() - timedelta(minutes=age_minutes)
        session.commit()
        session.close()
        return recipe

    return _make
