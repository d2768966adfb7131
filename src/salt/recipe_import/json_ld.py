"""JSON-LD/Schema.org Recipe discovery in raw HTML."""

import json
import logging
from collections.abc import Iterator
from typing import Any

from extruct.utils import parse_html
from lxml import etree

logger = logging.getLogger(__name__)

JSON_LD_XPATH = '//script[@type="application/ld+json"]'

RECIPE_TYPE = "Recipe"


def find_structured_data_blocks(html: str) -> list[str]:
    """
    Return the body of every JSON-LD script block, in document order.

    The page is parsed with extruct's lxml HTML parser, so scripts inside
    HTML comments are not picked up.
    """
    if not html or not html.strip():
        return []

    try:
        tree = parse_html(html.encode("utf-8"), encoding="UTF-8")
    except (etree.ParserError, ValueError) as e:
        logger.debug(f"Could not parse HTML for JSON-LD: {e}")
        return []

    return [node.xpath("string()").strip() for node in tree.xpath(JSON_LD_XPATH)]


def is_recipe_type(entity: dict[str, Any]) -> bool:
    """True when @type is "Recipe" or a list containing "Recipe"."""
    entity_type = entity.get("@type")
    if isinstance(entity_type, str):
        return entity_type == RECIPE_TYPE
    if isinstance(entity_type, list):
        return RECIPE_TYPE in entity_type
    return False


def _candidates(document: Any) -> Iterator[dict[str, Any]]:
    """Entities worth testing in one JSON-LD document."""
    if isinstance(document, list):
        for item in document:
            if isinstance(item, dict):
                yield item
    elif isinstance(document, dict):
        graph = document.get("@graph")
        if isinstance(graph, list):
            for item in graph:
                if isinstance(item, dict):
                    yield item
        else:
            yield document


def iter_recipe_entities(html: str) -> Iterator[dict[str, Any]]:
    """
    Yield Recipe-typed entities in document order across all JSON-LD blocks.

    Handles top-level arrays, @graph wrappers, and bare objects. A block
    that is not valid JSON is skipped.
    """
    for block in find_structured_data_blocks(html):
        try:
            document = json.loads(block)
        except ValueError as e:
            logger.debug(f"Skipping malformed JSON-LD block: {e}")
            continue

        for entity in _candidates(document):
            if is_recipe_type(entity):
                yield entity


def find_recipe_entity(html: str) -> dict[str, Any] | None:
    """First Recipe-typed entity on the page, or None."""
    return next(iter_recipe_entities(html), None)
