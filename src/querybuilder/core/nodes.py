"""
Query tree node types.

A tree is a root ``Group`` whose ``rules`` hold child ``Group`` and
``Rule`` nodes in display order. Nodes carry an explicit ``kind`` instead
of being told apart by which keys they happen to have.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Union


class NodeKind(str, Enum):
    """Discriminant for the two node shapes."""
    GROUP = "group"
    RULE = "rule"


class Combinator(str, Enum):
    """Logical combinators a group can apply to its children."""
    AND = "AND"
    OR = "OR"


@dataclass
class Group:
    """A logical combination of child nodes."""
    id: str
    combinator: str = Combinator.AND.value
    rules: list[Node] = field(default_factory=list)

    kind: ClassVar[NodeKind] = NodeKind.GROUP
    MODIFIABLE: ClassVar[frozenset[str]] = frozenset({"combinator"})

    def to_plain(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "combinator": self.combinator,
            "rules": [child.to_plain() for child in self.rules],
        }


@dataclass
class Rule:
    """A single field/operator/value comparison."""
    id: str
    field: str = ""
    operator: str = ""
    value: str = ""

    kind: ClassVar[NodeKind] = NodeKind.RULE
    MODIFIABLE: ClassVar[frozenset[str]] = frozenset({"field", "operator", "value"})

    def to_plain(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "field": self.field,
            "operator": self.operator,
            "value": self.value,
        }


Node = Union[Group, Rule]


def new_node(kind: NodeKind | str, node_id: str, combinator: str = Combinator.AND.value) -> Node:
    """Create an empty node of ``kind`` with default field values."""
    if NodeKind(kind) is NodeKind.GROUP:
        return Group(id=node_id, combinator=combinator)
    return Rule(id=node_id)


def has_field(node: Node, name: str) -> bool:
    """Check if ``name`` is a property the editor may overwrite on ``node``."""
    return name in node.MODIFIABLE
