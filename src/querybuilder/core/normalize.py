"""
Validation and normalization of externally supplied trees.

An incoming tree is a plain nested structure (as parsed from JSON). It is
walked breadth-first; every node is checked against the group/rule key
contract and given a fresh id. The first malformed node discards the whole
candidate and a minimal empty tree is used instead.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Mapping
from copy import deepcopy
from dataclasses import dataclass
from enum import Flag, auto
from typing import Any

from querybuilder.core.identity import IdentityAllocator
from querybuilder.core.nodes import Combinator, Group, Node, NodeKind, Rule

logger = logging.getLogger(__name__)

GROUP_KEYS = ("rules", "combinator")
RULE_KEYS = ("field", "value", "operator")


class ShapeViolation(Flag):
    """Reasons a candidate node fails the shape contract."""
    NONE = 0
    NOT_A_MAPPING = auto()
    MISSING_COMBINATOR = auto()
    RULES_NOT_A_LIST = auto()
    MISSING_FIELD = auto()
    MISSING_VALUE = auto()
    MISSING_OPERATOR = auto()
    ROOT_NOT_A_GROUP = auto()
    NOT_A_TREE = auto()  # Node reached twice (shared child or cycle)


_MISSING_KEY = {
    "combinator": ShapeViolation.MISSING_COMBINATOR,
    "field": ShapeViolation.MISSING_FIELD,
    "value": ShapeViolation.MISSING_VALUE,
    "operator": ShapeViolation.MISSING_OPERATOR,
}


@dataclass
class ShapeCheck:
    """Result of checking one candidate node."""
    kind: NodeKind | None
    violations: ShapeViolation = ShapeViolation.NONE

    @property
    def ok(self) -> bool:
        return self.violations == ShapeViolation.NONE


def check_node(candidate: Any) -> ShapeCheck:
    """
    Classify a candidate node and check its required keys.

    A mapping with a ``rules`` key is a group and also needs
    ``combinator``; anything else is a rule and needs ``field``,
    ``value`` and ``operator``.
    """
    if not isinstance(candidate, Mapping):
        return ShapeCheck(kind=None, violations=ShapeViolation.NOT_A_MAPPING)

    violations = ShapeViolation.NONE
    if "rules" in candidate:
        kind = NodeKind.GROUP
        required = GROUP_KEYS
        if not isinstance(candidate["rules"], list):
            violations |= ShapeViolation.RULES_NOT_A_LIST
    else:
        kind = NodeKind.RULE
        required = RULE_KEYS

    for key in required:
        if key not in candidate:
            violations |= _MISSING_KEY[key]

    return ShapeCheck(kind=kind, violations=violations)


def empty_tree(allocator: IdentityAllocator, combinator: str = Combinator.AND.value) -> Group:
    """A tree holding only an empty root group."""
    return Group(id=allocator.allocate(NodeKind.GROUP), combinator=combinator)


def normalize(
    candidate: Any,
    allocator: IdentityAllocator,
    default_combinator: str = Combinator.AND.value,
) -> Group:
    """
    Turn an externally supplied tree into a well-formed internal tree.

    Args:
        candidate: Plain nested group/rule structure, or None
        allocator: Allocator issuing the fresh ids
        default_combinator: Combinator of the fallback root group

    Returns:
        The adopted tree, or an empty root group if ``candidate`` is None
        or malformed. Ids handed out before a failure are not reclaimed,
        so the allocator's counters may show gaps afterwards.
    """
    if candidate is None:
        return empty_tree(allocator, default_combinator)

    root, check = _adopt(candidate, allocator)
    if root is None:
        logger.warning(
            f"Discarding malformed initial tree ({check.violations}); "
            f"starting from an empty group"
        )
        return empty_tree(allocator, default_combinator)

    logger.debug(f"Adopted initial tree with root {root.id}")
    return root


def _adopt(candidate: Any, allocator: IdentityAllocator) -> tuple[Group | None, ShapeCheck]:
    """Build the internal tree breadth-first, stopping at the first bad node."""
    root = None
    seen = set()
    queue = deque([(candidate, None)])
    check = ShapeCheck(kind=None)

    while queue:
        current, parent = queue.popleft()

        if id(current) in seen:
            return None, ShapeCheck(kind=None, violations=ShapeViolation.NOT_A_TREE)
        seen.add(id(current))

        check = check_node(current)
        if parent is None and check.kind is NodeKind.RULE:
            check.violations |= ShapeViolation.ROOT_NOT_A_GROUP
        if not check.ok:
            return None, check

        node = _build_node(current, check.kind, allocator.allocate(check.kind))
        if parent is None:
            root = node
        else:
            parent.rules.append(node)

        if isinstance(node, Group):
            queue.extend((child, node) for child in current["rules"])

    return root, check


def _build_node(candidate: Mapping, kind: NodeKind, node_id: str) -> Node:
    if kind is NodeKind.GROUP:
        return Group(id=node_id, combinator=deepcopy(candidate["combinator"]))
    return Rule(
        id=node_id,
        field=deepcopy(candidate["field"]),
        operator=deepcopy(candidate["operator"]),
        value=deepcopy(candidate["value"]),
    )
