"""
Main entry point for the Recipe Catalog.

Small command-line front end over the catalog services. No UI required;
designed for setup and quick inspection of a catalog database.

Usage Examples:
    # Create the database tables
    python -m src.main init-db

    # Show catalog statistics
    python -m src.main stats

    # List active categories
    python -m src.main categories

    # Search published recipes
    python -m src.main search quinoa
"""

import argparse
import logging
import sys

from src.services import category_service, recipe_service
from src.services.database import initialize_app_database
from src.services.exceptions import DatabaseError
from src.utils.config import get_config


def init_db_cmd() -> int:
    config = get_config()
    print(f"{config.app_name} v{config.app_version} ({config.environment})")
    print(f"Database ready: {config.database_url}")
    return 0


def stats_cmd() -> int:
    """Print catalog statistics and the top rated recipes."""
    stats = recipe_service.get_global_stats()

    print(f"Total recipes:       {stats.total_recipes}")
    print(f"Published recipes:   {stats.published_recipes}")
    print(f"Unpublished recipes: {stats.unpublished_recipes}")

    if stats.top_rated_recipes:
        print("\nTop rated:")
        for recipe in stats.top_rated_recipes:
            print(f"  {recipe.rating:4.1f} ({recipe.rating_count}) {recipe.title}")
    return 0


def categories_cmd() -> int:
    """Print active categories."""
    categories = category_service.list_active_categories()
    if not categories:
        print("No active categories")
        return 0

    for category in categories:
        print(f"  {category.slug:<30} {category.name}")
    print(f"\n{len(categories)} active categories")
    return 0


def search_cmd(term: str) -> int:
    """Print published recipes matching a search term."""
    recipes = recipe_service.search_recipes(term)
    if not recipes:
        print(f"No published recipes match '{term}'")
        return 0

    for recipe in recipes:
        tags = ", ".join(recipe.tags or [])
        print(f"  {recipe.title}" + (f" [{tags}]" if tags else ""))
    print(f"\n{len(recipes)} recipes found")
    return 0


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Recipe Catalog command-line utility",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
  RECIPE_CATALOG_ENV            production (default) or development
  RECIPE_CATALOG_DATABASE_URL   override the database location
""",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show service log messages",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    subparsers.add_parser("init-db", help="Create the database tables")
    subparsers.add_parser("stats", help="Show catalog statistics")
    subparsers.add_parser("categories", help="List active categories")

    search_parser = subparsers.add_parser("search", help="Search published recipes")
    search_parser.add_argument("term", help="Text to match in title, description or tags")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        # Initialize database (required for all operations)
        initialize_app_database()

        if args.command == "init-db":
            return init_db_cmd()
        elif args.command == "stats":
            return stats_cmd()
        elif args.command == "categories":
            return categories_cmd()
        elif args.command == "search":
            return search_cmd(args.term)
        else:
            print(f"Unknown command: {args.command}")
            return 1

    except DatabaseError as e:
        print(f"ERROR: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
