"""Configured explore shelves, in display order."""

from .models import SectionItem

# Seafood, Salad, Pasta, Desserts are categories (query 'categories' field)
# Mexican, Chinese, Thai, Italian, French are cuisines (query 'cuisines' field)
PRIORITY_SECTIONS = [
    SectionItem(name="Seafood", display_name="Seafood", is_cuisine=False),
    SectionItem(name="Mexican", display_name="Mexican", is_cuisine=True),
    SectionItem(name="Chinese", display_name="Chinese", is_cuisine=True),
    SectionItem(name="Salad", display_name="Salad", is_cuisine=False),
    SectionItem(name="Pasta", display_name="Pasta", is_cuisine=False),
    SectionItem(name="Thai", display_name="Thai", is_cuisine=True),
    SectionItem(name="Italian", display_name="Italian", is_cuisine=True),
    SectionItem(name="French", display_name="French", is_cuisine=True),
    SectionItem(name="Desserts", display_name="Dessert", is_cuisine=False),
]

# Ordered by catalog size
REMAINING_CUISINES = [
    "American",
    "European",
    "Southern",
    "Latin American",
    "Asian",
    "Indian",
    "Jewish",
    "Greek",
    "Middle Eastern",
    "German",
    "Japanese",
    "Cajun",
    "Nordic",
    "Spanish",
    "Eastern European",
    "Caribbean",
    "British",
    "Irish",
    "African",
    "Korean",
    "Vietnamese",
    "South American",
    "Ukrainian",
]

DEFAULT_SECTIONS = PRIORITY_SECTIONS + [
    SectionItem(name=cuisine, display_name=cuisine, is_cuisine=True)
    for cuisine in REMAINING_CUISINES
]
