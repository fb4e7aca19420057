"""shovel.query - selector-based navigation shared by documents and elements.

Both :class:`~shovel.models.Document` and :class:`~shovel.models.Element`
mix in :class:`Queryable`.  Subclasses only provide
:meth:`Queryable.query_selector_all` (and may override ``_select_first`` to
stop at the first match); every other helper is derived from those, so a
document and an element subtree answer the same questions the same way.

Supported selectors are whatever the active
:class:`~shovel.parser.HtmlParser` evaluates.  The default binding handles at
least tag names, ``#id``, ``.class``, ``[attr]``, ``[attr=value]``,
``[attr^=value]``, the descendant combinator and comma-separated lists.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

import soupsieve

if TYPE_CHECKING:
    from shovel.models import Element


def _quote(value: str) -> str:
    """Render *value* as a double-quoted CSS string."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return '"' + escaped.replace("\n", "\\a ") + '"'


class Queryable:
    """Capability mixin for anything that can be searched with CSS selectors."""

    def query_selector_all(self, selector: str) -> list[Element]:
        """Return every element matching *selector*, in document order."""
        raise NotImplementedError

    def _select_first(
        self,
        selector: str,
        predicate: Callable[[Element], bool] | None,
    ) -> Element | None:
        for element in self.query_selector_all(selector):
            if predicate is None or predicate(element):
                return element
        return None

    def query_selector(
        self,
        selector: str,
        predicate: Callable[[Element], bool] | None = None,
    ) -> Element | None:
        """Return the first match of *selector* accepted by *predicate*, or ``None``."""
        return self._select_first(selector, predicate)

    def get_element_by_id(self, element_id: str) -> Element | None:
        if not element_id:
            return None
        return self.query_selector(f"#{soupsieve.escape(element_id)}")

    def get_elements_by_class_name(self, class_name: str) -> list[Element]:
        if not class_name:
            return []
        return self.query_selector_all(f".{soupsieve.escape(class_name)}")

    def input_value(self, name: str) -> str | None:
        """Return the ``value`` of the named ``<input>``, falling back to ``checked``."""
        field = self.query_selector(f"input[name={_quote(name)}]")
        if field is None:
            return None
        value = field.get("value")
        if value is not None:
            return value
        return field.get("checked")
