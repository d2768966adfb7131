"""
Salt - Recipe import and catalog services.

Packages:
- recipe_import: Import recipes from web pages and social-media links
- catalog: Curated + remote recipe browsing, search and autocomplete
- library: Bookmarks, user recipes, recipe image storage
"""

__version__ = "1.0.0"
