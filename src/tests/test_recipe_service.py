"""Tests for recipe_service: CRUD, listings, search, counters and stats."""

import pytest

from src.models import DifficultyLevel
from src.services import category_service, recipe_service, user_service
from src.services.dto import RecipeStats
from src.services.exceptions import (
    AuthorNotFound,
    CategoryNotFound,
    NotFound,
    RecipeNotFoundById,
    UserNotFoundById,
    ValidationError,
)


# ============================================================================
# create_recipe tests
# ============================================================================


class TestCreateRecipe:
    """Tests for recipe_service.create_recipe()."""

    def test_create_stores_content(self, test_db, sample_recipe, sample_category, sample_user):
        assert sample_recipe.id is not None
        assert sample_recipe.title == "Quinoa Salad"
        assert sample_recipe.category_id == sample_category.id
        assert sample_recipe.author_id == sample_user.id
        assert sample_recipe.difficulty == DifficultyLevel.EASY
        assert sample_recipe.total_time_minutes == 35
        assert sample_recipe.tags == ["vegetarian", "summer"]
        assert sample_recipe.published is True

    def test_create_normalizes_nested_parts(self, test_db, sample_recipe):
        assert sample_recipe.ingredients[0] == {
            "name": "Quinoa",
            "quantity": 200,
            "unit": "g",
            "optional": False,
        }
        steps = [step["step_number"] for step in sample_recipe.instructions]
        assert steps == [1, 2]
        assert sample_recipe.instructions[1]["time_minutes"] == 5

    def test_create_forces_counters_to_zero(self, test_db, sample_category, sample_user):
        recipe = recipe_service.create_recipe({
            "title": "Cheater Pie",
            "category_id": sample_category.id,
            "author_id": sample_user.id,
            "rating": 5.0,
            "rating_count": 100,
            "favorite_count": 42,
            "view_count": 1000,
        })
        assert recipe.rating == 0.0
        assert recipe.rating_count == 0
        assert recipe.favorite_count == 0
        assert recipe.view_count == 0
        assert recipe.published is False

    def test_unknown_category_raises(self, test_db, sample_user):
        with pytest.raises(CategoryNotFound):
            recipe_service.create_recipe({
                "title": "Orphan Stew",
                "category_id": "no-such-category",
                "author_id": sample_user.id,
            })

    def test_unknown_category_checked_before_author(self, test_db):
        with pytest.raises(CategoryNotFound):
            recipe_service.create_recipe({
                "title": "Orphan Stew",
                "category_id": "no-such-category",
                "author_id": "no-such-author",
            })

    def test_unknown_author_raises(self, test_db, sample_category):
        with pytest.raises(AuthorNotFound):
            recipe_service.create_recipe({
                "title": "Orphan Stew",
                "category_id": sample_category.id,
                "author_id": "no-such-author",
            })

    def test_short_title_raises(self, test_db, sample_category, sample_user):
        with pytest.raises(ValidationError, match="Title"):
            recipe_service.create_recipe({
                "title": "Ok",
                "category_id": sample_category.id,
                "author_id": sample_user.id,
            })

    def test_non_text_title_raises(self, test_db, sample_category, sample_user):
        with pytest.raises(ValidationError, match="Title"):
            recipe_service.create_recipe({
                "title": 12345,
                "category_id": sample_category.id,
                "author_id": sample_user.id,
            })

    def test_non_text_ingredient_name_raises(self, test_db, sample_category, sample_user):
        with pytest.raises(ValidationError, match="Ingredient 1 Name"):
            recipe_service.create_recipe({
                "title": "Number Soup",
                "category_id": sample_category.id,
                "author_id": sample_user.id,
                "ingredients": [{"name": 7, "quantity": 1}],
            })

    def test_servings_out_of_range_raises(self, test_db, sample_category, sample_user):
        with pytest.raises(ValidationError, match="Servings"):
            recipe_service.create_recipe({
                "title": "Banquet",
                "category_id": sample_category.id,
                "author_id": sample_user.id,
                "servings": 51,
            })

    def test_unknown_difficulty_raises(self, test_db, sample_category, sample_user):
        with pytest.raises(ValidationError, match="Difficulty"):
            recipe_service.create_recipe({
                "title": "Mystery Dish",
                "category_id": sample_category.id,
                "author_id": sample_user.id,
                "difficulty": "extreme",
            })

    def test_nutrition_info_stored(self, test_db, sample_category, sample_user):
        recipe = recipe_service.create_recipe({
            "title": "Lentil Soup",
            "category_id": sample_category.id,
            "author_id": sample_user.id,
            "nutrition_info": {"calories": 320, "protein": 18.5},
        })
        assert recipe.nutrition_info == {"calories": 320, "protein": 18.5}


# ============================================================================
# update_recipe tests
# ============================================================================


class TestUpdateRecipe:
    """Tests for recipe_service.update_recipe()."""

    def test_update_content(self, test_db, sample_recipe):
        updated = recipe_service.update_recipe(
            sample_recipe.id, {"title": "Warm Quinoa Salad", "servings": 2}
        )
        assert updated.title == "Warm Quinoa Salad"
        assert updated.servings == 2
        assert updated.description == "Fresh summer salad"
        assert updated.tags == ["vegetarian", "summer"]

    def test_update_preserves_server_owned_fields(self, test_db, sample_recipe):
        recipe_service.rate_recipe(sample_recipe.id, 4)
        recipe_service.get_recipe_and_increment_views(sample_recipe.id)
        before = recipe_service.get_recipe_by_id(sample_recipe.id)

        updated = recipe_service.update_recipe(sample_recipe.id, {
            "title": "Renamed Salad",
            "rating": 1.0,
            "rating_count": 99,
            "favorite_count": 99,
            "view_count": 99,
            "created_at": None,
            "id": "hijacked",
        })

        assert updated.id == sample_recipe.id
        assert updated.rating == 4.0
        assert updated.rating_count == 1
        assert updated.favorite_count == 0
        assert updated.view_count == 1
        assert updated.created_at == before.created_at

    def test_update_to_unknown_category_raises(self, test_db, sample_recipe):
        with pytest.raises(CategoryNotFound):
            recipe_service.update_recipe(sample_recipe.id, {"category_id": "no-such-category"})

    def test_update_to_unknown_author_raises(self, test_db, sample_recipe, sample_user):
        with pytest.raises(AuthorNotFound):
            recipe_service.update_recipe(sample_recipe.id, {"author_id": "ghost"})

        assert recipe_service.get_recipe_by_id(sample_recipe.id).author_id == sample_user.id

    def test_update_to_existing_author(self, test_db, sample_recipe, other_user):
        updated = recipe_service.update_recipe(sample_recipe.id, {"author_id": other_user.id})
        assert updated.author_id == other_user.id

    def test_update_missing_raises(self, test_db):
        with pytest.raises(RecipeNotFoundById):
            recipe_service.update_recipe("no-such-id", {"title": "Anything"})

    def test_update_invalid_raises(self, test_db, sample_recipe):
        with pytest.raises(ValidationError):
            recipe_service.update_recipe(sample_recipe.id, {"title": ""})


# ============================================================================
# view counter tests
# ============================================================================


class TestViews:
    """Tests for get_recipe_and_increment_views()."""

    def test_each_view_returns_its_own_increment(self, test_db, sample_recipe):
        first = recipe_service.get_recipe_and_increment_views(sample_recipe.id)
        second = recipe_service.get_recipe_and_increment_views(sample_recipe.id)

        assert first.view_count == 1
        assert second.view_count == 2
        assert recipe_service.get_recipe_by_id(sample_recipe.id).view_count == 2

    def test_views_within_one_session(self, test_db, sample_recipe):
        session = test_db()
        first = recipe_service.get_recipe_and_increment_views(sample_recipe.id, session=session)
        assert first.view_count == 1
        second = recipe_service.get_recipe_and_increment_views(sample_recipe.id, session=session)
        assert second.view_count == 2
        session.commit()

        assert recipe_service.get_recipe_by_id(sample_recipe.id).view_count == 2

    def test_view_with_expired_counter(self, test_db, sample_recipe):
        session = test_db()
        loaded = recipe_service.get_recipe_by_id(sample_recipe.id, session=session)
        session.expire(loaded, ["view_count"])

        viewed = recipe_service.get_recipe_and_increment_views(sample_recipe.id, session=session)
        assert viewed.view_count == 1
        session.commit()

        assert recipe_service.get_recipe_by_id(sample_recipe.id).view_count == 1

    def test_get_by_id_does_not_count(self, test_db, sample_recipe):
        recipe_service.get_recipe_by_id(sample_recipe.id)
        assert recipe_service.get_recipe_by_id(sample_recipe.id).view_count == 0

    def test_missing_returns_none(self, test_db):
        assert recipe_service.get_recipe_and_increment_views("no-such-id") is None


# ============================================================================
# listing tests
# ============================================================================


class TestListings:
    """Tests for the list_* functions."""

    def test_newest_first(self, test_db, make_recipe):
        make_recipe("Oldest Bread", age_minutes=30)
        make_recipe("Newest Bread", age_minutes=1)
        make_recipe("Middle Bread", age_minutes=10)

        titles = [r.title for r in recipe_service.list_published_recipes()]
        assert titles == ["Newest Bread", "Middle Bread", "Oldest Bread"]

    def test_published_filter(self, test_db, make_recipe):
        make_recipe("Public Pie", age_minutes=2)
        make_recipe("Draft Pie", age_minutes=1, published=False)

        assert [r.title for r in recipe_service.list_published_recipes()] == ["Public Pie"]
        assert [r.title for r in recipe_service.list_recipes()] == ["Draft Pie", "Public Pie"]
        assert recipe_service.count_recipes() == 2
        assert recipe_service.count_published_recipes() == 1

    def test_by_category_published_only(self, test_db, make_recipe, sample_category):
        other = category_service.create_category(name="Desserts")
        make_recipe("Main Dish", age_minutes=3)
        make_recipe("Draft Main", age_minutes=2, published=False)
        make_recipe("Tarte Tatin", age_minutes=1, category_id=other.id)

        titles = [r.title for r in recipe_service.list_recipes_by_category(sample_category.id)]
        assert titles == ["Main Dish"]
        assert recipe_service.count_recipes_in_category(sample_category.id) == 2

    def test_by_author(self, test_db, make_recipe, sample_user, other_user):
        make_recipe("Alice Public", age_minutes=3)
        make_recipe("Alice Draft", age_minutes=2, published=False)
        make_recipe("Bob Public", age_minutes=1, author_id=other_user.id)

        all_titles = [r.title for r in recipe_service.list_recipes_by_author(sample_user.id)]
        published_titles = [
            r.title for r in recipe_service.list_published_recipes_by_author(sample_user.id)
        ]
        assert all_titles == ["Alice Draft", "Alice Public"]
        assert published_titles == ["Alice Public"]

    def test_by_difficulty(self, test_db, make_recipe):
        make_recipe("Easy Toast", age_minutes=3, difficulty="easy")
        make_recipe("Hard Souffle", age_minutes=2, difficulty="HARD")
        make_recipe("Easy Draft", age_minutes=1, difficulty="easy", published=False)

        easy = recipe_service.list_recipes_by_difficulty(DifficultyLevel.EASY)
        hard = recipe_service.list_recipes_by_difficulty("hard")
        assert [r.title for r in easy] == ["Easy Toast"]
        assert [r.title for r in hard] == ["Hard Souffle"]

    def test_by_unknown_difficulty_raises(self, test_db):
        with pytest.raises(ValidationError):
            recipe_service.list_recipes_by_difficulty("extreme")

    def test_top_rated(self, test_db, make_recipe):
        good = make_recipe("Good Soup", age_minutes=3)
        great = make_recipe("Great Soup", age_minutes=2)
        draft = make_recipe("Draft Soup", age_minutes=1, published=False)
        recipe_service.rate_recipe(good.id, 3)
        recipe_service.rate_recipe(great.id, 5)
        recipe_service.rate_recipe(draft.id, 5)

        top = recipe_service.list_top_rated_recipes(limit=1)
        assert [r.title for r in top] == ["Great Soup"]
        titles = [r.title for r in recipe_service.list_top_rated_recipes(limit=10)]
        assert titles == ["Great Soup", "Good Soup"]

    def test_latest(self, test_db, make_recipe):
        for minutes in range(5):
            make_recipe(f"Bread {minutes}", age_minutes=minutes)

        titles = [r.title for r in recipe_service.list_latest_recipes(limit=2)]
        assert titles == ["Bread 0", "Bread 1"]

    def test_non_positive_limit_returns_nothing(self, test_db, make_recipe):
        make_recipe("Only Bread")

        for limit in (0, -1):
            assert recipe_service.list_top_rated_recipes(limit=limit) == []
            assert recipe_service.list_latest_recipes(limit=limit) == []


# ============================================================================
# search tests
# ============================================================================


class TestSearchRecipes:
    """Tests for recipe_service.search_recipes()."""

    def test_blank_term_equals_published_list(self, test_db, make_recipe):
        make_recipe("First Cake", age_minutes=2)
        make_recipe("Hidden Cake", age_minutes=1, published=False)

        published_ids = [r.id for r in recipe_service.list_published_recipes()]
        assert [r.id for r in recipe_service.search_recipes("")] == published_ids
        assert [r.id for r in recipe_service.search_recipes("   ")] == published_ids

    def test_matches_title_description_and_tags(self, test_db, make_recipe):
        make_recipe("Quinoa Bowl", age_minutes=4)
        make_recipe("Power Salad", age_minutes=3, description="Packed with QUINOA")
        make_recipe("Grain Mix", age_minutes=2, tags=["Quinoa", "grains"])
        make_recipe("Rice Pudding", age_minutes=1)

        titles = [r.title for r in recipe_service.search_recipes("quinoa")]
        assert titles == ["Grain Mix", "Power Salad", "Quinoa Bowl"]

    def test_skips_unpublished(self, test_db, make_recipe):
        make_recipe("Quinoa Draft", published=False)
        assert recipe_service.search_recipes("quinoa") == []


# ============================================================================
# publish / delete tests
# ============================================================================


class TestPublishAndDelete:
    """Tests for set_recipe_published() and delete_recipe()."""

    def test_unpublish(self, test_db, sample_recipe):
        recipe = recipe_service.set_recipe_published(sample_recipe.id, False)
        assert recipe.published is False
        assert recipe_service.list_published_recipes() == []

    def test_publish_missing_raises(self, test_db):
        with pytest.raises(NotFound):
            recipe_service.set_recipe_published("no-such-id", True)

    def test_delete(self, test_db, sample_recipe):
        assert recipe_service.delete_recipe(sample_recipe.id) is True
        assert recipe_service.get_recipe_by_id(sample_recipe.id) is None

    def test_delete_missing_returns_false(self, test_db):
        assert recipe_service.delete_recipe("no-such-id") is False


# ============================================================================
# rating tests
# ============================================================================


class TestRateRecipe:
    """Tests for recipe_service.rate_recipe()."""

    def test_running_average(self, test_db, sample_recipe):
        recipe_service.rate_recipe(sample_recipe.id, 4)
        recipe = recipe_service.rate_recipe(sample_recipe.id, 2)
        assert recipe.rating == pytest.approx(3.0)
        assert recipe.rating_count == 2

        recipe = recipe_service.rate_recipe(sample_recipe.id, 5)
        assert recipe.rating == pytest.approx(11 / 3)
        assert recipe.rating_count == 3

        stored = recipe_service.get_recipe_by_id(sample_recipe.id)
        assert stored.rating == pytest.approx(11 / 3)
        assert stored.rating_count == 3

    def test_score_range_not_checked(self, test_db, sample_recipe):
        recipe = recipe_service.rate_recipe(sample_recipe.id, 10)
        assert recipe.rating == pytest.approx(10.0)

    def test_missing_raises(self, test_db):
        with pytest.raises(RecipeNotFoundById):
            recipe_service.rate_recipe("no-such-id", 4)


# ============================================================================
# favorite tests
# ============================================================================


class TestFavoriteRecipe:
    """Tests for favorite_recipe() and unfavorite_recipe()."""

    def test_favorite_increments_once(self, test_db, sample_recipe, other_user):
        assert recipe_service.favorite_recipe(other_user.id, sample_recipe.id) is True
        assert recipe_service.favorite_recipe(other_user.id, sample_recipe.id) is False

        assert recipe_service.get_recipe_by_id(sample_recipe.id).favorite_count == 1
        user = user_service.get_user_by_id(other_user.id)
        assert user.favorite_recipe_ids == [sample_recipe.id]

    def test_unfavorite_decrements(self, test_db, sample_recipe, sample_user, other_user):
        recipe_service.favorite_recipe(sample_user.id, sample_recipe.id)
        recipe_service.favorite_recipe(other_user.id, sample_recipe.id)
        assert recipe_service.get_recipe_by_id(sample_recipe.id).favorite_count == 2

        assert recipe_service.unfavorite_recipe(other_user.id, sample_recipe.id) is True
        assert recipe_service.unfavorite_recipe(other_user.id, sample_recipe.id) is False
        assert recipe_service.get_recipe_by_id(sample_recipe.id).favorite_count == 1

    def test_unfavorite_never_below_zero(self, test_db, sample_recipe, other_user):
        # Favorite list holds the id but the counter is already zero
        user_service.add_favorite(other_user.id, sample_recipe.id)

        assert recipe_service.unfavorite_recipe(other_user.id, sample_recipe.id) is True
        assert recipe_service.get_recipe_by_id(sample_recipe.id).favorite_count == 0

    def test_missing_recipe_raises(self, test_db, other_user):
        with pytest.raises(RecipeNotFoundById):
            recipe_service.favorite_recipe(other_user.id, "no-such-id")
        with pytest.raises(RecipeNotFoundById):
            recipe_service.unfavorite_recipe(other_user.id, "no-such-id")

    def test_missing_user_raises(self, test_db, sample_recipe):
        with pytest.raises(UserNotFoundById):
            recipe_service.favorite_recipe("no-such-user", sample_recipe.id)
        assert recipe_service.get_recipe_by_id(sample_recipe.id).favorite_count == 0


# ============================================================================
# permission / stats tests
# ============================================================================


class TestCanEditRecipe:
    """Tests for recipe_service.can_edit_recipe()."""

    def test_author_can_edit(self, test_db, sample_recipe, sample_user):
        assert recipe_service.can_edit_recipe(sample_user.id, sample_recipe.id) is True

    def test_admin_can_edit(self, test_db, sample_recipe, admin_user):
        assert recipe_service.can_edit_recipe(admin_user.id, sample_recipe.id) is True

    def test_other_user_cannot_edit(self, test_db, sample_recipe, other_user):
        assert recipe_service.can_edit_recipe(other_user.id, sample_recipe.id) is False

    def test_unknown_user_cannot_edit(self, test_db, sample_recipe):
        assert recipe_service.can_edit_recipe("no-such-user", sample_recipe.id) is False

    def test_missing_recipe(self, test_db, sample_user, admin_user):
        assert recipe_service.can_edit_recipe(sample_user.id, "no-such-id") is False
        assert recipe_service.can_edit_recipe(admin_user.id, "no-such-id") is False


class TestGlobalStats:
    """Tests for recipe_service.get_global_stats()."""

    def test_empty_catalog(self, test_db):
        stats = recipe_service.get_global_stats()
        assert isinstance(stats, RecipeStats)
        assert stats.total_recipes == 0
        assert stats.published_recipes == 0
        assert stats.top_rated_recipes == []

    def test_stats(self, test_db, make_recipe):
        for index in range(12):
            recipe = make_recipe(f"Recipe {index:02d}", age_minutes=index)
            recipe_service.rate_recipe(recipe.id, index % 6)
        make_recipe("Unpublished One", published=False)

        stats = recipe_service.get_global_stats()
        assert stats.total_recipes == 13
        assert stats.published_recipes == 12
        assert stats.unpublished_recipes == 1
        assert len(stats.top_rated_recipes) == 10
        assert stats.top_rated_recipes[0].rating == pytest.approx(5.0)

        as_dict = stats.to_dict()
        assert as_dict["total_recipes"] == 13
        assert len(as_dict["top_rated_recipes"]) == 10
