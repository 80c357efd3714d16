"""
Core primitives for the query tree: nodes, ids, traversal, normalization and mutation.
"""

from querybuilder.core.nodes import (
    NodeKind,
    Combinator,
    Group,
    Rule,
    Node,
    new_node,
    has_field,
)
from querybuilder.core.identity import IdentityAllocator
from querybuilder.core.tree import traverse
from querybuilder.core.normalize import (
    ShapeViolation,
    ShapeCheck,
    check_node,
    empty_tree,
    normalize,
)
from querybuilder.core.mutation import (
    MutationOp,
    MutationResult,
    MutationEngine,
)

__all__ = [
    # nodes
    "NodeKind",
    "Combinator",
    "Group",
    "Rule",
    "Node",
    "new_node",
    "has_field",
    # identity
    "IdentityAllocator",
    # tree
    "traverse",
    # normalize
    "ShapeViolation",
    "ShapeCheck",
    "check_node",
    "empty_tree",
    "normalize",
    # mutation
    "MutationOp",
    "MutationResult",
    "MutationEngine",
]
