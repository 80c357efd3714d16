"""
Choices offered by the editor for rule fields, operators and group combinators.

The tree model itself accepts any string; these lists only drive what the
presentation layer suggests.
"""

from __future__ import annotations

from dataclasses import dataclass

from querybuilder.core import Combinator

POSSIBLE_FIELDS = (
    "twitter",
    "facebook",
    "name",
    "address",
    "phone",
)

POSSIBLE_OPERATORS = (
    "=",
    "<",
    ">",
    "!=",
)

POSSIBLE_COMBINATORS = tuple(c.value for c in Combinator)

# Initial tree of the demo editor
DEMO_TREE = {
    "combinator": "OR",
    "rules": [
        {"field": "twitter", "value": "twitter twitter", "operator": ">"},
    ],
}


@dataclass(frozen=True)
class EditorOptions:
    """Option lists for one editor."""
    fields: tuple[str, ...] = POSSIBLE_FIELDS
    operators: tuple[str, ...] = POSSIBLE_OPERATORS
    combinators: tuple[str, ...] = POSSIBLE_COMBINATORS

    def choices_for(self, field: str) -> tuple[str, ...] | None:
        """
        Suggested values for an editable property.

        Returns None for free-text properties (a rule's ``value``).
        """
        return {
            "field": self.fields,
            "operator": self.operators,
            "combinator": self.combinators,
        }.get(field)

    def is_suggested(self, field: str, value: str) -> bool:
        """Check if ``value`` is one of the listed choices, or free text is allowed."""
        choices = self.choices_for(field)
        return choices is None or value in choices
