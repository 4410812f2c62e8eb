"""
Category identifier -> class index lookup.

Class indices are positions in the category list with the unclassified
sentinel removed, so they are dense in [0, C).
"""

from typing import List, Optional, Sequence

from .errors import CategoryNotFoundError
from .types import UNCLASSIFIED_IDENTIFIER, Category


def trainable_categories(categories: Sequence[Category]) -> List[Category]:
    return [c for c in categories if c.identifier != UNCLASSIFIED_IDENTIFIER]


def find_category_index(categories: Sequence[Category], identifier: str) -> Optional[int]:
    """Position of the category with ``identifier``, or None if absent."""
    for position, category in enumerate(categories):
        if category.identifier == identifier:
            return position
    return None


def class_index(categories: Sequence[Category], identifier: str) -> int:
    """
    Class index of ``identifier`` within ``categories``.

    ``categories`` must already be filtered with :func:`trainable_categories`.

    Raises:
        CategoryNotFoundError: If no category matches ``identifier``
    """
    position = find_category_index(categories, identifier)
    if position is None:
        raise CategoryNotFoundError(identifier)
    return position
