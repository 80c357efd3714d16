"""
Add, modify and remove operations on a live query tree.

Every operation walks the tree breadth-first and acts on the first node
that qualifies, then stops. A target that cannot be found is not an
error: the operation just leaves the tree alone.
"""

from __future__ import annotations

import logging
from copy import deepcopy
from dataclasses import dataclass
from enum import Enum

from querybuilder.core.identity import IdentityAllocator
from querybuilder.core.nodes import Combinator, Group, NodeKind, has_field, new_node
from querybuilder.core.tree import traverse

logger = logging.getLogger(__name__)


class MutationOp(Enum):
    """The three editing operations."""
    ADD = "add"
    MODIFY = "modify"
    REMOVE = "remove"


@dataclass
class MutationResult:
    """Outcome of one operation against the live tree."""
    op: MutationOp
    target_id: str
    changed: bool = False
    node_id: str | None = None  # Id of the node added or removed

    @property
    def is_noop(self) -> bool:
        return not self.changed


class MutationEngine:
    """
    Applies editing operations to a tree it does not own.

    The tree and allocator belong to the enclosing builder; the engine
    only holds references to them.
    """

    def __init__(
        self,
        root: Group,
        allocator: IdentityAllocator,
        default_combinator: str = Combinator.AND.value,
    ):
        self.root = root
        self.allocator = allocator
        self.default_combinator = default_combinator

    def add_child(self, parent_id: str, kind: NodeKind | str) -> MutationResult:
        """Append a new empty node to the end of the first group with ``parent_id``."""
        result = MutationResult(op=MutationOp.ADD, target_id=parent_id)

        try:
            kind = NodeKind(kind)
        except ValueError:
            logger.warning(f"Ignoring add of unknown node kind {kind!r} under {parent_id}")
            return result

        for node in traverse(self.root):
            if node.id == parent_id and isinstance(node, Group):
                child = new_node(kind, self.allocator.allocate(kind), self.default_combinator)
                node.rules.append(child)
                result.changed = True
                result.node_id = child.id
                break

        if result.is_noop:
            logger.debug(f"No group {parent_id} to add a {kind.value} to")
        return result

    def modify_field(self, node_id: str, field: str, value: str) -> MutationResult:
        """Overwrite ``field`` on the first node with ``node_id`` that has it."""
        result = MutationResult(op=MutationOp.MODIFY, target_id=node_id)

        for node in traverse(self.root):
            if node.id == node_id and has_field(node, field):
                setattr(node, field, deepcopy(value))
                result.changed = True
                result.node_id = node.id
                break

        if result.is_noop:
            logger.debug(f"No node {node_id} with field {field!r}")
        return result

    def remove_child(self, node_id: str) -> MutationResult:
        """Splice ``node_id`` out of the first group that holds it as a direct child."""
        result = MutationResult(op=MutationOp.REMOVE, target_id=node_id)

        for node in traverse(self.root):
            if not isinstance(node, Group):
                continue
            index = next(
                (i for i, child in enumerate(node.rules) if child.id == node_id),
                -1,
            )
            if index != -1:
                del node.rules[index]
                result.changed = True
                result.node_id = node_id
                break

        if result.is_noop:
            logger.debug(f"No group holds {node_id} as a direct child")
        return result
