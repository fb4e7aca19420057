"""Combinators that feed query results straight into a caller's function.

Each helper accepts any :class:`~shovel.query.Queryable`, so the same call
works on a whole :class:`~shovel.models.Document` or on one
:class:`~shovel.models.Element` subtree.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, TypeVar

from shovel.errors import ElementNotFound

if TYPE_CHECKING:
    from shovel.models import Element
    from shovel.query import Queryable

T = TypeVar("T")


def transform_query_selector_all(
    source: Queryable,
    selector: str,
    transformer: Callable[[list[Element]], T],
) -> T:
    """Apply *transformer* to every match of *selector* (the list may be empty)."""
    return transformer(source.query_selector_all(selector))


def transform_query_selector(
    source: Queryable,
    selector: str,
    transformer: Callable[[Element], T],
) -> T:
    """Apply *transformer* to the first match of *selector*.

    Raises:
        ElementNotFound: If nothing matches.
    """
    element = source.query_selector(selector)
    if element is None:
        raise ElementNotFound(selector)
    return transformer(element)


def transform_class_name(
    source: Queryable,
    class_name: str,
    transformer: Callable[[list[Element]], T],
) -> T:
    return transformer(source.get_elements_by_class_name(class_name))


def transform_id(
    source: Queryable,
    element_id: str,
    transformer: Callable[[Element], T],
) -> T:
    """Apply *transformer* to the element with id *element_id*.

    Raises:
        ElementNotFound: If no element has that id.
    """
    element = source.get_element_by_id(element_id)
    if element is None:
        raise ElementNotFound(f"#{element_id}")
    return transformer(element)
