"""Utilities package for the recipe-catalog application."""
